"""TLS context descriptors and their builders.

Public API::

    from tlsbuilder.tls import build_server_context, create_ssl_context

    descriptor = build_server_context(view)
    ctx = create_ssl_context(descriptor)
"""

from tlsbuilder.tls.builder import (
    TlsContextBuilder,
    build_client_context,
    build_server_context,
)
from tlsbuilder.tls.descriptor import TlsContextDescriptor
from tlsbuilder.tls.ssl_adapter import create_ssl_context

__all__ = [
    "TlsContextBuilder",
    "TlsContextDescriptor",
    "build_client_context",
    "build_server_context",
    "create_ssl_context",
]
