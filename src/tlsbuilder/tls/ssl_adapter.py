"""Turns a :class:`TlsContextDescriptor` into an :class:`ssl.SSLContext`.

The descriptor vocabulary is broader than what the ``ssl`` module
exposes.  Protocol lists become minimum/maximum versions; key manager,
trust manager, secure random and provider settings have no ``ssl``
counterpart and are only logged.

Supported key material for the ``ssl`` transport:

- a loaded PKCS12 handle (written to a private temporary PEM file for
  :meth:`ssl.SSLContext.load_cert_chain` and removed afterwards)
- a ``PEM`` key store path
"""

from __future__ import annotations

import contextlib
import logging
import os
import ssl
import tempfile
from typing import TYPE_CHECKING

from cryptography.hazmat.primitives import serialization

from tlsbuilder.core.types import PEM, PKCS12, ClientAuthPolicy, TlsMode
from tlsbuilder.errors import ConfigurationError, KeyMaterialError
from tlsbuilder.security.keystore import KeyMaterialLoader
from tlsbuilder.security.providers import default_registry

if TYPE_CHECKING:
    from tlsbuilder.security.keystore import KeyMaterialHandle
    from tlsbuilder.security.providers import ProviderRegistry
    from tlsbuilder.tls.descriptor import TlsContextDescriptor

log = logging.getLogger(__name__)

_VERSIONS: dict[str, ssl.TLSVersion] = {
    "TLSv1": ssl.TLSVersion.TLSv1,
    "TLSv1.1": ssl.TLSVersion.TLSv1_1,
    "TLSv1.2": ssl.TLSVersion.TLSv1_2,
    "TLSv1.3": ssl.TLSVersion.TLSv1_3,
}

_VERIFY_MODES: dict[ClientAuthPolicy, ssl.VerifyMode] = {
    ClientAuthPolicy.NONE: ssl.CERT_NONE,
    ClientAuthPolicy.REQUESTED: ssl.CERT_OPTIONAL,
    ClientAuthPolicy.REQUIRED: ssl.CERT_REQUIRED,
}


def version_bounds(protocols: tuple[str, ...]) -> tuple[ssl.TLSVersion, ssl.TLSVersion]:
    """Return the lowest and highest known TLS version in *protocols*.

    Unknown names (``SSLv3``, ``TLSv1.4``...) are skipped.
    """
    known = [_VERSIONS[p] for p in protocols if p in _VERSIONS]
    if not known:
        msg = f"None of the enabled protocols {list(protocols)} is supported by the ssl module"
        raise ConfigurationError(msg, key="ssl.enabled.protocols")
    return min(known), max(known)


def version_gaps(protocols: tuple[str, ...]) -> tuple[str, ...]:
    """Names of known versions inside the min/max range of *protocols* but not listed."""
    low, high = version_bounds(protocols)
    return tuple(
        name for name, version in _VERSIONS.items() if low < version < high and name not in protocols
    )


def _handle_to_pem(handle: KeyMaterialHandle) -> bytes:
    if handle.private_key is None or handle.certificate is None:
        msg = f"Key store {handle.path} holds no private key and certificate pair"
        raise KeyMaterialError(handle.path, msg)
    parts = [
        handle.private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ),
    ]
    parts.extend(cert.public_bytes(serialization.Encoding.PEM) for cert in handle.certificates)
    return b"".join(parts)


def _load_handle(ctx: ssl.SSLContext, handle: KeyMaterialHandle) -> None:
    """Load an in-memory handle via a temporary 0600 PEM file."""
    pem = _handle_to_pem(handle)
    fd, tmp_path = tempfile.mkstemp(suffix=".pem")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(pem)
        ctx.load_cert_chain(tmp_path)
    except (OSError, ssl.SSLError) as exc:
        raise KeyMaterialError(handle.path) from exc
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_path)


def _configure_key_material(ctx: ssl.SSLContext, descriptor: TlsContextDescriptor) -> None:
    if descriptor.key_store is not None:
        _load_handle(ctx, descriptor.key_store)
        return
    path = descriptor.key_store_path
    if path is None:
        return
    if descriptor.key_store_type != PEM:
        msg = (
            f"Key store type '{descriptor.key_store_type}' at {path} "
            "cannot be used with the ssl module; use PKCS12 or PEM"
        )
        raise KeyMaterialError(path, msg)
    password = descriptor.key_manager_password or descriptor.key_store_password
    try:
        ctx.load_cert_chain(path, password=password.value() if password else None)
    except (OSError, ssl.SSLError) as exc:
        raise KeyMaterialError(path) from exc


def _configure_trust_material(
    ctx: ssl.SSLContext,
    descriptor: TlsContextDescriptor,
    loader: KeyMaterialLoader,
) -> None:
    path = descriptor.trust_store_path
    if path is None:
        ctx.load_default_certs(
            ssl.Purpose.CLIENT_AUTH if descriptor.mode is TlsMode.SERVER else ssl.Purpose.SERVER_AUTH,
        )
        return
    try:
        if descriptor.trust_store_type == PKCS12:
            handle = loader.load(path, PKCS12, descriptor.trust_store_password)
            cadata = "".join(
                cert.public_bytes(serialization.Encoding.PEM).decode("ascii")
                for cert in handle.certificates
            )
            ctx.load_verify_locations(cadata=cadata)
        elif descriptor.trust_store_type == PEM:
            ctx.load_verify_locations(cafile=path)
        else:
            msg = (
                f"Trust store type '{descriptor.trust_store_type}' at {path} "
                "cannot be used with the ssl module; use PKCS12 or PEM"
            )
            raise KeyMaterialError(path, msg)
    except (OSError, ssl.SSLError) as exc:
        raise KeyMaterialError(path) from exc


def create_ssl_context(
    descriptor: TlsContextDescriptor,
    registry: ProviderRegistry | None = None,
) -> ssl.SSLContext:
    """Create an :class:`ssl.SSLContext` matching *descriptor*.

    Raises
    ------
    ConfigurationError
        If no enabled protocol is known to ``ssl`` or the cipher list is
        rejected by OpenSSL.
    KeyMaterialError
        If key or trust material cannot be loaded.

    """
    loader = KeyMaterialLoader(registry if registry is not None else default_registry())

    if descriptor.mode is TlsMode.SERVER:
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    else:
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    ctx.minimum_version, ctx.maximum_version = version_bounds(descriptor.include_protocols)
    gaps = version_gaps(descriptor.include_protocols)
    if gaps:
        log.warning(
            "ssl module enables a version range; %s also enabled although not listed in %s",
            ",".join(gaps),
            ",".join(descriptor.include_protocols),
        )

    if descriptor.include_cipher_suites is not None:
        try:
            ctx.set_ciphers(":".join(descriptor.include_cipher_suites))
        except ssl.SSLError as exc:
            msg = f"Cipher suites rejected: {list(descriptor.include_cipher_suites)}"
            raise ConfigurationError(msg, key="ssl.cipher.suites") from exc

    _configure_key_material(ctx, descriptor)

    if descriptor.mode is TlsMode.SERVER:
        ctx.verify_mode = _VERIFY_MODES[descriptor.client_auth]
        if descriptor.client_auth is not ClientAuthPolicy.NONE:
            _configure_trust_material(ctx, descriptor, loader)
    else:
        # None keeps the context default (hostname checked)
        algorithm = descriptor.endpoint_identification_algorithm
        if algorithm is not None:
            ctx.check_hostname = algorithm.upper() == "HTTPS"
        ctx.verify_mode = ssl.CERT_REQUIRED
        _configure_trust_material(ctx, descriptor, loader)

    log.debug(
        "ssl context ignores protocol=%s key_manager_algorithm=%s trust_manager_algorithm=%s "
        "secure_random=%s provider=%s",
        descriptor.protocol,
        descriptor.key_manager_algorithm,
        descriptor.trust_manager_algorithm,
        descriptor.secure_random_algorithm,
        descriptor.provider,
    )
    return ctx
