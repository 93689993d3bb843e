"""Process-wide registry of cryptographic providers.

PKCS12 key stores are parsed by an auxiliary provider backed by
``cryptography``'s PKCS12 implementation rather than by the platform
TLS stack.  The provider is installed lazily, the first time a PKCS12
store is loaded, and stays installed for the lifetime of the process.

:meth:`ProviderRegistry.ensure_registered` uses double-checked
locking: an unsynchronised lookup first, then a lock dedicated to the
registration decision, a second lookup, and registration only if the
provider is still missing.

Usage::

    from tlsbuilder.security.providers import default_registry

    provider = default_registry().ensure_registered()
    key, cert, extra = provider.load_pkcs12(data, b"secret")
"""

from __future__ import annotations

import abc
import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from cryptography.hazmat.primitives.serialization import pkcs12

if TYPE_CHECKING:
    from cryptography import x509
    from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

log = logging.getLogger(__name__)

PYCA_PROVIDER_NAME = "PyCA"


class Provider(abc.ABC):
    """A named implementation of key store parsing."""

    name: str = ""

    @abc.abstractmethod
    def load_pkcs12(
        self,
        data: bytes,
        password: bytes | None,
    ) -> tuple[PrivateKeyTypes | None, x509.Certificate | None, list[x509.Certificate]]:
        """Parse a PKCS12 container.

        Returns ``(private_key, certificate, additional_certificates)``.
        A ``None`` *password* opens the store without verifying its
        integrity MAC.
        """


class PyCaPkcs12Provider(Provider):
    """PKCS12 parsing through ``cryptography.hazmat.primitives.serialization.pkcs12``."""

    name = PYCA_PROVIDER_NAME

    def load_pkcs12(
        self,
        data: bytes,
        password: bytes | None,
    ) -> tuple[PrivateKeyTypes | None, x509.Certificate | None, list[x509.Certificate]]:
        return pkcs12.load_key_and_certificates(data, password)


class ProviderRegistry:
    """Registry of installed providers, keyed by provider name.

    Providers are only ever added.  :meth:`reset` exists for tests.
    """

    def __init__(self) -> None:
        self._providers: dict[str, Provider] = {}
        self._registrations: dict[str, int] = {}
        # Guards the registration decision only
        self._lock = threading.Lock()

    def get(self, name: str) -> Provider | None:
        """Return the provider registered under *name*, if any."""
        return self._providers.get(name)

    def names(self) -> tuple[str, ...]:
        """Names of all registered providers, in registration order."""
        return tuple(self._providers)

    def registration_count(self, name: str) -> int:
        """How many times a provider named *name* has been installed."""
        return self._registrations.get(name, 0)

    def register(self, provider: Provider) -> bool:
        """Install *provider* unless one with the same name exists.

        Returns ``True`` if the provider was installed by this call.
        """
        with self._lock:
            if provider.name in self._providers:
                return False
            self._install(provider)
            return True

    def ensure_registered(
        self,
        factory: Callable[[], Provider] = PyCaPkcs12Provider,
        name: str = PYCA_PROVIDER_NAME,
    ) -> Provider:
        """Return the provider named *name*, installing it at most once.

        Safe to call from many threads at once; *factory* runs at most
        once per registry.
        """
        provider = self._providers.get(name)
        if provider is not None:
            return provider

        with self._lock:
            provider = self._providers.get(name)
            if provider is None:
                provider = factory()
                self._install(provider)
        return provider

    def reset(self) -> None:
        """Remove every provider -- testing only."""
        with self._lock:
            self._providers = {}
            self._registrations = {}

    def _install(self, provider: Provider) -> None:
        self._providers[provider.name] = provider
        self._registrations[provider.name] = self._registrations.get(provider.name, 0) + 1
        log.info("Registered cryptographic provider: %s", provider.name)


_default_registry = ProviderRegistry()


def default_registry() -> ProviderRegistry:
    """Return the process-wide provider registry."""
    return _default_registry
