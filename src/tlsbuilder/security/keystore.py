"""PKCS12 key store loading.

Only PKCS12 stores are opened here; every other store type is left to
the TLS transport, which receives just the path, type and password.

A store opened without a password is still readable, but its integrity
MAC is not verified.  That is an intentional degradation, recorded on
the handle as ``integrity_verified=False``; callers that rely on tamper
detection must supply a password.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cryptography.exceptions import UnsupportedAlgorithm

from tlsbuilder.core.types import PKCS12, zero
from tlsbuilder.errors import KeyMaterialError

if TYPE_CHECKING:
    from cryptography import x509
    from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

    from tlsbuilder.core.types import Secret
    from tlsbuilder.security.providers import ProviderRegistry

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyMaterialHandle:
    """In-memory contents of a loaded key store.

    Attributes
    ----------
    path:
        Location the store was read from (kept for diagnostics).
    store_type:
        Declared store type, e.g. ``"PKCS12"``.
    provider:
        Name of the provider that parsed the store.
    private_key:
        The private key, if the store holds one.
    certificate:
        The certificate matching *private_key*, if any.
    additional_certificates:
        Remaining certificates (chain or trusted entries).
    integrity_verified:
        ``False`` when the store was opened without a password.

    """

    path: str
    store_type: str
    provider: str
    private_key: PrivateKeyTypes | None = field(default=None, repr=False)
    certificate: x509.Certificate | None = None
    additional_certificates: tuple[x509.Certificate, ...] = ()
    integrity_verified: bool = True

    @property
    def certificates(self) -> tuple[x509.Certificate, ...]:
        """Leaf certificate (if any) followed by the additional certificates."""
        if self.certificate is None:
            return self.additional_certificates
        return (self.certificate, *self.additional_certificates)


class KeyMaterialLoader:
    """Opens PKCS12 stores through the registered auxiliary provider.

    Parameters
    ----------
    registry:
        Provider registry; the PKCS12 provider is registered in it
        before the first load.

    """

    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry

    @staticmethod
    def requires_loading(path: str | None, store_type: str) -> bool:
        """Whether a store must be opened here rather than by the transport."""
        return path is not None and store_type == PKCS12

    def load(
        self,
        path: str,
        store_type: str,
        password: Secret | None,
    ) -> KeyMaterialHandle:
        """Read and parse the store at *path*.

        Raises
        ------
        KeyMaterialError
            On any I/O or format failure, wrong password, or
            unsupported algorithm.  The original exception is chained.

        """
        provider = self._registry.ensure_registered()

        if password is None:
            log.warning(
                "Opening %s key store %s without a password; integrity check disabled",
                store_type,
                path,
            )

        password_bytes = password.as_bytes() if password is not None else None
        try:
            with Path(path).open("rb") as f:
                data = f.read()
            key, cert, extra = provider.load_pkcs12(
                data,
                bytes(password_bytes) if password_bytes is not None else None,
            )
        except (OSError, ValueError, TypeError, UnsupportedAlgorithm) as exc:
            log.error("Failed to load %s key store %s: %s", store_type, path, exc)
            raise KeyMaterialError(path) from exc
        finally:
            zero(password_bytes)

        log.debug(
            "Loaded %s key store %s via %s (key=%s, certificates=%d)",
            store_type,
            path,
            provider.name,
            key is not None,
            len(extra) + (cert is not None),
        )
        return KeyMaterialHandle(
            path=path,
            store_type=store_type,
            provider=provider.name,
            private_key=key,
            certificate=cert,
            additional_certificates=tuple(extra),
            integrity_verified=password is not None,
        )
