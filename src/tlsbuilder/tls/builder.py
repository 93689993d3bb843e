"""Builds :class:`TlsContextDescriptor` objects from configuration.

Server and client contexts share the key store, trust store and
algorithm steps; the server then applies the client authentication
policy and the client applies endpoint identification instead.

Usage::

    from tlsbuilder.tls.builder import build_client_context, build_server_context

    server = build_server_context(view)                       # "listeners.https."
    admin = build_server_context(view, "admin.listeners.https.")
    client = build_client_context(view)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tlsbuilder.config.keys import DEFAULT_PREFIX
from tlsbuilder.config.settings import (
    AlgorithmSettings,
    KeyStoreSettings,
    TrustStoreSettings,
    build_client_settings,
    build_server_settings,
)
from tlsbuilder.config.view import as_view
from tlsbuilder.core.types import TlsMode
from tlsbuilder.security.keystore import KeyMaterialLoader
from tlsbuilder.security.providers import default_registry
from tlsbuilder.tls.descriptor import TlsContextDescriptor

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tlsbuilder.security.providers import ProviderRegistry

log = logging.getLogger(__name__)


def _key_store_fields(key_store: KeyStoreSettings, loader: KeyMaterialLoader) -> dict[str, Any]:
    handle = None
    if loader.requires_loading(key_store.location, key_store.type):
        handle = loader.load(key_store.location, key_store.type, key_store.password)
    return {
        "key_store": handle,
        "key_store_type": key_store.type,
        "key_store_path": key_store.location,
        "key_store_password": key_store.password,
        "key_manager_password": key_store.key_password,
    }


def _trust_store_fields(trust_store: TrustStoreSettings) -> dict[str, Any]:
    return {
        "trust_store_type": trust_store.type,
        "trust_store_path": trust_store.location,
        "trust_store_password": trust_store.password,
    }


def _algorithm_fields(algorithms: AlgorithmSettings) -> dict[str, Any]:
    return {
        "include_protocols": algorithms.enabled_protocols,
        "provider": algorithms.provider,
        "protocol": algorithms.protocol,
        "include_cipher_suites": algorithms.cipher_suites,
        "key_manager_algorithm": algorithms.key_manager_algorithm,
        "secure_random_algorithm": algorithms.secure_random_implementation,
        "trust_manager_algorithm": algorithms.trust_manager_algorithm,
    }


class TlsContextBuilder:
    """Turns a configuration view into server or client TLS descriptors.

    Parameters
    ----------
    registry:
        Provider registry used for PKCS12 loading.  Defaults to the
        process-wide registry.
    loader:
        Key store loader.  Defaults to one bound to *registry*.

    """

    def __init__(
        self,
        registry: ProviderRegistry | None = None,
        loader: KeyMaterialLoader | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._loader = loader if loader is not None else KeyMaterialLoader(self._registry)

    def build_server(
        self,
        config: Mapping[str, Any],
        prefix: str = DEFAULT_PREFIX,
        *,
        strict_client_auth: bool = False,
    ) -> TlsContextDescriptor:
        """Build a server-side descriptor from the keys under *prefix*."""
        values = as_view(config).values_with_prefix_all_or_nothing(prefix)
        settings = build_server_settings(values, strict_client_auth=strict_client_auth)

        descriptor = TlsContextDescriptor(
            mode=TlsMode.SERVER,
            **_key_store_fields(settings.key_store, self._loader),
            **_trust_store_fields(settings.trust_store),
            **_algorithm_fields(settings.algorithms),
            client_auth=settings.client_auth,
        )
        self._log_built(descriptor, prefix)
        return descriptor

    def build_client(self, config: Mapping[str, Any]) -> TlsContextDescriptor:
        """Build a client-side descriptor from the keys under the default prefix."""
        values = as_view(config).values_with_prefix_all_or_nothing(DEFAULT_PREFIX)
        settings = build_client_settings(values)

        descriptor = TlsContextDescriptor(
            mode=TlsMode.CLIENT,
            **_key_store_fields(settings.key_store, self._loader),
            **_trust_store_fields(settings.trust_store),
            **_algorithm_fields(settings.algorithms),
            endpoint_identification_algorithm=settings.endpoint_identification_algorithm,
        )
        self._log_built(descriptor, DEFAULT_PREFIX)
        return descriptor

    @staticmethod
    def _log_built(descriptor: TlsContextDescriptor, prefix: str) -> None:
        log.info(
            "Built %s TLS context from '%s' (keystore=%s, truststore=%s, "
            "protocols=%s, client_auth=%s, endpoint_identification=%s)",
            descriptor.mode,
            prefix,
            descriptor.key_store_type,
            descriptor.trust_store_type,
            ",".join(descriptor.include_protocols),
            descriptor.client_auth,
            descriptor.endpoint_identification_algorithm,
        )


def build_server_context(
    config: Mapping[str, Any],
    prefix: str = DEFAULT_PREFIX,
    *,
    strict_client_auth: bool = False,
) -> TlsContextDescriptor:
    """Build a server-side descriptor using the process-wide provider registry."""
    return TlsContextBuilder().build_server(
        config,
        prefix,
        strict_client_auth=strict_client_auth,
    )


def build_client_context(config: Mapping[str, Any]) -> TlsContextDescriptor:
    """Build a client-side descriptor using the process-wide provider registry."""
    return TlsContextBuilder().build_client(config)
