"""The immutable TLS context descriptor handed to the transport layer."""

from __future__ import annotations

from dataclasses import dataclass

from tlsbuilder.config.settings import (
    DEFAULT_KEYMANAGER_ALGORITHM,
    DEFAULT_KEYSTORE_TYPE,
    DEFAULT_PROTOCOL,
    DEFAULT_PROTOCOL_LIST,
    DEFAULT_TRUSTMANAGER_ALGORITHM,
    DEFAULT_TRUSTSTORE_TYPE,
)
from tlsbuilder.core.types import ClientAuthPolicy, Secret, TlsMode
from tlsbuilder.security.keystore import KeyMaterialHandle


@dataclass(frozen=True)
class TlsContextDescriptor:
    """Fully populated TLS settings for one server or client context.

    A descriptor is mode-pure: server descriptors always carry a
    ``client_auth`` policy and never an endpoint identification
    algorithm; client descriptors never carry ``client_auth``.

    When ``key_store`` is set it supersedes ``key_store_path`` for
    actual use; the path is kept for diagnostics.
    """

    mode: TlsMode
    key_store: KeyMaterialHandle | None = None
    key_store_path: str | None = None
    key_store_password: Secret | None = None
    key_manager_password: Secret | None = None
    key_store_type: str = DEFAULT_KEYSTORE_TYPE
    trust_store_path: str | None = None
    trust_store_password: Secret | None = None
    trust_store_type: str = DEFAULT_TRUSTSTORE_TYPE
    include_protocols: tuple[str, ...] = DEFAULT_PROTOCOL_LIST
    protocol: str = DEFAULT_PROTOCOL
    include_cipher_suites: tuple[str, ...] | None = None
    provider: str | None = None
    key_manager_algorithm: str = DEFAULT_KEYMANAGER_ALGORITHM
    trust_manager_algorithm: str = DEFAULT_TRUSTMANAGER_ALGORITHM
    secure_random_algorithm: str | None = None
    client_auth: ClientAuthPolicy | None = None
    endpoint_identification_algorithm: str | None = None

    def __post_init__(self) -> None:
        if self.mode is TlsMode.SERVER:
            if self.endpoint_identification_algorithm is not None:
                msg = "Server TLS descriptors cannot carry an endpoint identification algorithm"
                raise ValueError(msg)
            if self.client_auth is None:
                object.__setattr__(self, "client_auth", ClientAuthPolicy.NONE)
        elif self.client_auth is not None:
            msg = "Client TLS descriptors cannot carry a client authentication policy"
            raise ValueError(msg)

    @property
    def want_client_auth(self) -> bool:
        return self.client_auth is ClientAuthPolicy.REQUESTED

    @property
    def need_client_auth(self) -> bool:
        return self.client_auth is ClientAuthPolicy.REQUIRED

    def shared_fields(self) -> dict:
        """Settings common to both modes, for comparing server and client descriptors."""
        return {
            "key_store_path": self.key_store_path,
            "key_store_type": self.key_store_type,
            "trust_store_path": self.trust_store_path,
            "trust_store_type": self.trust_store_type,
            "include_protocols": self.include_protocols,
            "protocol": self.protocol,
            "include_cipher_suites": self.include_cipher_suites,
            "provider": self.provider,
            "key_manager_algorithm": self.key_manager_algorithm,
            "trust_manager_algorithm": self.trust_manager_algorithm,
            "secure_random_algorithm": self.secure_random_algorithm,
        }
