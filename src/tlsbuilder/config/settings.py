"""Typed, frozen dataclasses for the TLS configuration of each mode.

This module is the **single source of truth** for default values.
The builders read the prefix-scoped values once, through explicit
per-key typed accessors, so a value of the wrong kind fails here with
:class:`ConfigurationError` instead of deep inside context setup.

Access pattern::

    from tlsbuilder.config.settings import build_server_settings

    settings = build_server_settings(view.values_with_prefix_all_or_nothing(prefix))
    print(settings.key_store.type, settings.algorithms.protocol)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from tlsbuilder.config import keys
from tlsbuilder.config.view import COMMA_WITH_WHITESPACE, parse_list
from tlsbuilder.core.types import JKS, ClientAuthPolicy, Secret
from tlsbuilder.errors import ConfigurationError

DEFAULT_KEYSTORE_TYPE = JKS
DEFAULT_TRUSTSTORE_TYPE = JKS
DEFAULT_ENABLED_PROTOCOLS = "TLSv1.2, TLSv1.3"
DEFAULT_PROTOCOL_LIST = tuple(COMMA_WITH_WHITESPACE.split(DEFAULT_ENABLED_PROTOCOLS))
DEFAULT_PROTOCOL = "TLSv1.3"
DEFAULT_KEYMANAGER_ALGORITHM = "SunX509"
DEFAULT_TRUSTMANAGER_ALGORITHM = "PKIX"
DEFAULT_CLIENT_AUTH = "none"

# ---------------------------------------------------------------------------
# Typed accessors
# ---------------------------------------------------------------------------


def _get_str(d: Mapping[str, Any], key: str, default: str | None = None) -> str | None:
    value = d.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        msg = f"Configuration '{key}' must be a string, got {type(value).__name__}"
        raise ConfigurationError(msg, key=key)
    return value


def _get_secret(d: Mapping[str, Any], key: str) -> Secret | None:
    value = d.get(key)
    if value is None:
        return None
    if not isinstance(value, Secret):
        msg = f"Configuration '{key}' must be a password, got {type(value).__name__}"
        raise ConfigurationError(msg, key=key)
    return value


def _get_list(d: Mapping[str, Any], key: str) -> tuple[str, ...] | None:
    value = d.get(key)
    if value is None:
        return None
    return parse_list(value, key)


# ---------------------------------------------------------------------------
# Key store / trust store
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyStoreSettings:
    """Location, type and passwords of the key store."""

    type: str
    location: str | None
    password: Secret | None
    key_password: Secret | None


def _build_key_store(d: Mapping[str, Any]) -> KeyStoreSettings:
    return KeyStoreSettings(
        type=_get_str(d, keys.SSL_KEYSTORE_TYPE, DEFAULT_KEYSTORE_TYPE),
        location=_get_str(d, keys.SSL_KEYSTORE_LOCATION),
        password=_get_secret(d, keys.SSL_KEYSTORE_PASSWORD),
        key_password=_get_secret(d, keys.SSL_KEY_PASSWORD),
    )


@dataclass(frozen=True)
class TrustStoreSettings:
    """Location, type and password of the trust store."""

    type: str
    location: str | None
    password: Secret | None


def _build_trust_store(d: Mapping[str, Any]) -> TrustStoreSettings:
    return TrustStoreSettings(
        type=_get_str(d, keys.SSL_TRUSTSTORE_TYPE, DEFAULT_TRUSTSTORE_TYPE),
        location=_get_str(d, keys.SSL_TRUSTSTORE_LOCATION),
        password=_get_secret(d, keys.SSL_TRUSTSTORE_PASSWORD),
    )


# ---------------------------------------------------------------------------
# Protocols / algorithms
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AlgorithmSettings:
    """Protocol, cipher suite and algorithm selection.

    ``cipher_suites`` is ``None`` when unset: no restriction is applied
    and the platform default suites are used.  It is never an empty
    tuple, which would forbid every suite.
    """

    enabled_protocols: tuple[str, ...]
    protocol: str
    provider: str | None
    cipher_suites: tuple[str, ...] | None
    key_manager_algorithm: str
    trust_manager_algorithm: str
    secure_random_implementation: str | None


def _build_algorithms(d: Mapping[str, Any]) -> AlgorithmSettings:
    protocols = _get_list(d, keys.SSL_ENABLED_PROTOCOLS)
    if protocols is None:
        protocols = DEFAULT_PROTOCOL_LIST
    elif not protocols or not all(protocols):
        msg = f"Configuration '{keys.SSL_ENABLED_PROTOCOLS}' must name at least one protocol"
        raise ConfigurationError(msg, key=keys.SSL_ENABLED_PROTOCOLS)

    # Empty list collapses to "unrestricted"
    cipher_suites = _get_list(d, keys.SSL_CIPHER_SUITES) or None

    return AlgorithmSettings(
        enabled_protocols=protocols,
        protocol=_get_str(d, keys.SSL_PROTOCOL, DEFAULT_PROTOCOL),
        provider=_get_str(d, keys.SSL_PROVIDER),
        cipher_suites=cipher_suites,
        key_manager_algorithm=_get_str(
            d, keys.SSL_KEYMANAGER_ALGORITHM, DEFAULT_KEYMANAGER_ALGORITHM
        ),
        trust_manager_algorithm=_get_str(
            d, keys.SSL_TRUSTMANAGER_ALGORITHM, DEFAULT_TRUSTMANAGER_ALGORITHM
        ),
        secure_random_implementation=_get_str(d, keys.SSL_SECURE_RANDOM_IMPLEMENTATION),
    )


# ---------------------------------------------------------------------------
# Client authentication
# ---------------------------------------------------------------------------


def parse_client_auth(value: str | None, *, strict: bool = False) -> ClientAuthPolicy:
    """Map the ``ssl.client.auth`` string to a :class:`ClientAuthPolicy`.

    ``"requested"`` and ``"required"`` select their policies; every
    other value, including absence and unrecognized strings, selects
    :attr:`ClientAuthPolicy.NONE`.  With *strict* set, values other
    than ``none``/``requested``/``required`` raise instead.
    """
    match value:
        case "requested":
            return ClientAuthPolicy.REQUESTED
        case "required":
            return ClientAuthPolicy.REQUIRED
        case None | "none":
            return ClientAuthPolicy.NONE
        case _:
            if strict:
                msg = (
                    f"Configuration '{keys.SSL_CLIENT_AUTH}' must be one of "
                    f"{[p.value for p in ClientAuthPolicy]}, got '{value}'"
                )
                raise ConfigurationError(msg, key=keys.SSL_CLIENT_AUTH)
            return ClientAuthPolicy.NONE


# ---------------------------------------------------------------------------
# Per-mode roots
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServerTlsSettings:
    """Everything needed to build a server-side TLS context."""

    key_store: KeyStoreSettings
    trust_store: TrustStoreSettings
    algorithms: AlgorithmSettings
    client_auth: ClientAuthPolicy


@dataclass(frozen=True)
class ClientTlsSettings:
    """Everything needed to build a client-side TLS context."""

    key_store: KeyStoreSettings
    trust_store: TrustStoreSettings
    algorithms: AlgorithmSettings
    endpoint_identification_algorithm: str | None


def build_server_settings(
    data: Mapping[str, Any],
    *,
    strict_client_auth: bool = False,
) -> ServerTlsSettings:
    """Build :class:`ServerTlsSettings` from prefix-stripped values."""
    return ServerTlsSettings(
        key_store=_build_key_store(data),
        trust_store=_build_trust_store(data),
        algorithms=_build_algorithms(data),
        client_auth=parse_client_auth(
            _get_str(data, keys.SSL_CLIENT_AUTH, DEFAULT_CLIENT_AUTH),
            strict=strict_client_auth,
        ),
    )


def build_client_settings(data: Mapping[str, Any]) -> ClientTlsSettings:
    """Build :class:`ClientTlsSettings` from prefix-stripped values."""
    return ClientTlsSettings(
        key_store=_build_key_store(data),
        trust_store=_build_trust_store(data),
        algorithms=_build_algorithms(data),
        endpoint_identification_algorithm=_get_str(data, keys.SSL_ENDPOINT_IDENTIFICATION_ALGORITHM),
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingSettings:
    """Logging configuration (level, output format)."""

    level: str
    format: str


def build_logging_settings(data: Mapping[str, Any] | None = None) -> LoggingSettings:
    d = data or {}
    return LoggingSettings(
        level=d.get("level", "INFO"),
        format=d.get("format", "text"),
    )
