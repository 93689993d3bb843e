"""Recognized TLS configuration keys and their declared value kinds.

Key names follow the ``ssl.*`` vocabulary used by HTTPS listeners.
They are looked up *after* the listener prefix (for example
``listeners.https.``) has been stripped.
"""

from __future__ import annotations

from enum import StrEnum


class ValueKind(StrEnum):
    STRING = "string"
    PASSWORD = "password"
    LIST = "list"


DEFAULT_PREFIX = "listeners.https."

# -- key store ------------------------------------------------------------
SSL_KEYSTORE_TYPE = "ssl.keystore.type"
SSL_KEYSTORE_LOCATION = "ssl.keystore.location"
SSL_KEYSTORE_PASSWORD = "ssl.keystore.password"
SSL_KEY_PASSWORD = "ssl.key.password"

# -- trust store ----------------------------------------------------------
SSL_TRUSTSTORE_TYPE = "ssl.truststore.type"
SSL_TRUSTSTORE_LOCATION = "ssl.truststore.location"
SSL_TRUSTSTORE_PASSWORD = "ssl.truststore.password"

# -- algorithms -----------------------------------------------------------
SSL_ENABLED_PROTOCOLS = "ssl.enabled.protocols"
SSL_PROVIDER = "ssl.provider"
SSL_PROTOCOL = "ssl.protocol"
SSL_CIPHER_SUITES = "ssl.cipher.suites"
SSL_KEYMANAGER_ALGORITHM = "ssl.keymanager.algorithm"
SSL_TRUSTMANAGER_ALGORITHM = "ssl.trustmanager.algorithm"
SSL_SECURE_RANDOM_IMPLEMENTATION = "ssl.secure.random.implementation"

# -- mode specific --------------------------------------------------------
SSL_CLIENT_AUTH = "ssl.client.auth"
SSL_ENDPOINT_IDENTIFICATION_ALGORITHM = "ssl.endpoint.identification.algorithm"

DEFINITIONS: dict[str, ValueKind] = {
    SSL_KEYSTORE_TYPE: ValueKind.STRING,
    SSL_KEYSTORE_LOCATION: ValueKind.STRING,
    SSL_KEYSTORE_PASSWORD: ValueKind.PASSWORD,
    SSL_KEY_PASSWORD: ValueKind.PASSWORD,
    SSL_TRUSTSTORE_TYPE: ValueKind.STRING,
    SSL_TRUSTSTORE_LOCATION: ValueKind.STRING,
    SSL_TRUSTSTORE_PASSWORD: ValueKind.PASSWORD,
    SSL_ENABLED_PROTOCOLS: ValueKind.LIST,
    SSL_PROVIDER: ValueKind.STRING,
    SSL_PROTOCOL: ValueKind.STRING,
    SSL_CIPHER_SUITES: ValueKind.LIST,
    SSL_KEYMANAGER_ALGORITHM: ValueKind.STRING,
    SSL_TRUSTMANAGER_ALGORITHM: ValueKind.STRING,
    SSL_SECURE_RANDOM_IMPLEMENTATION: ValueKind.STRING,
    SSL_CLIENT_AUTH: ValueKind.STRING,
    SSL_ENDPOINT_IDENTIFICATION_ALGORITHM: ValueKind.STRING,
}

RECOGNIZED_KEYS = frozenset(DEFINITIONS)


def kind_of(key: str) -> ValueKind | None:
    """Return the declared kind for *key*, matching on its ``ssl.*`` suffix.

    ``listeners.https.ssl.keystore.password`` and
    ``ssl.keystore.password`` both resolve to :attr:`ValueKind.PASSWORD`.
    """
    if key in DEFINITIONS:
        return DEFINITIONS[key]
    idx = key.find(".ssl.")
    while idx != -1:
        suffix = key[idx + 1 :]
        if suffix in DEFINITIONS:
            return DEFINITIONS[suffix]
        idx = key.find(".ssl.", idx + 1)
    return None
