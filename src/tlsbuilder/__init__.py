"""Build TLS context descriptors for HTTPS servers and clients.

Public API::

    from tlsbuilder import ConfigView, build_server_context, build_client_context

    view = ConfigView({
        "listeners.https.ssl.keystore.type": "PKCS12",
        "listeners.https.ssl.keystore.location": "/etc/tls/server.p12",
        "listeners.https.ssl.keystore.password": "changeit",
        "listeners.https.ssl.client.auth": "required",
    })
    server = build_server_context(view)
    client = build_client_context(view)
"""

from tlsbuilder.config import ConfigView, load_config_file
from tlsbuilder.core.types import ClientAuthPolicy, Secret, TlsMode
from tlsbuilder.errors import ConfigurationError, KeyMaterialError, TlsBuilderError
from tlsbuilder.security import KeyMaterialHandle, KeyMaterialLoader, ProviderRegistry
from tlsbuilder.tls import (
    TlsContextBuilder,
    TlsContextDescriptor,
    build_client_context,
    build_server_context,
    create_ssl_context,
)

__all__ = [
    "ClientAuthPolicy",
    "ConfigView",
    "ConfigurationError",
    "KeyMaterialError",
    "KeyMaterialHandle",
    "KeyMaterialLoader",
    "ProviderRegistry",
    "Secret",
    "TlsBuilderError",
    "TlsContextBuilder",
    "TlsContextDescriptor",
    "TlsMode",
    "build_client_context",
    "build_server_context",
    "create_ssl_context",
    "load_config_file",
]
