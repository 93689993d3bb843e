"""Configuration subsystem for the TLS builder.

Public API::

    from tlsbuilder.config import load_config_file, ConfigView

    view = load_config_file("tls.yaml")           # or ConfigView({...})
    scoped = view.values_with_prefix_all_or_nothing("listeners.https.")
    settings = build_server_settings(scoped)      # typed access
    settings.key_store.type
"""

from tlsbuilder.config.keys import DEFAULT_PREFIX
from tlsbuilder.config.loader import load_config_file
from tlsbuilder.config.settings import (
    AlgorithmSettings,
    ClientTlsSettings,
    KeyStoreSettings,
    LoggingSettings,
    ServerTlsSettings,
    TrustStoreSettings,
    build_client_settings,
    build_logging_settings,
    build_server_settings,
    parse_client_auth,
)
from tlsbuilder.config.view import ConfigView, as_view

__all__ = [
    "DEFAULT_PREFIX",
    "AlgorithmSettings",
    "ClientTlsSettings",
    "ConfigView",
    "KeyStoreSettings",
    "LoggingSettings",
    "ServerTlsSettings",
    "TrustStoreSettings",
    "as_view",
    "build_client_settings",
    "build_logging_settings",
    "build_server_settings",
    "load_config_file",
    "parse_client_auth",
]
