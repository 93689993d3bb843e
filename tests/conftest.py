"""Root conftest for the tlsbuilder test suite."""

from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


# ---------------------------------------------------------------------------
# Key material helpers
# ---------------------------------------------------------------------------


def make_key_and_cert(common_name: str = "localhost"):
    """Return a fresh EC private key and a self-signed certificate for it."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.SubjectAlternativeName([x509.DNSName(common_name)]), critical=False)
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return key, cert


def write_pkcs12(path: Path, password: bytes | None, common_name: str = "localhost"):
    """Write a PKCS12 store holding a new key/cert pair; return ``(key, cert)``."""
    key, cert = make_key_and_cert(common_name)
    encryption = (
        serialization.BestAvailableEncryption(password)
        if password
        else serialization.NoEncryption()
    )
    path.write_bytes(
        pkcs12.serialize_key_and_certificates(b"server", key, cert, None, encryption),
    )
    return key, cert


def write_pem_cert(path: Path, cert) -> None:
    path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def registry():
    """A private provider registry so tests never see each other's state."""
    from tlsbuilder.security.providers import ProviderRegistry

    return ProviderRegistry()


@pytest.fixture()
def p12_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """PKCS12 store protected by the password ``hunter2``."""
    path = tmp_path_factory.mktemp("keystore") / "server.p12"
    write_pkcs12(path, b"hunter2")
    return path


@pytest.fixture()
def unprotected_p12_path(tmp_path: Path) -> Path:
    """PKCS12 store written without a password."""
    path = tmp_path / "nopass.p12"
    write_pkcs12(path, None)
    return path


@pytest.fixture(autouse=True)
def fresh_registry():
    """Reset the process-wide provider registry before and after every test."""
    from tlsbuilder.security.providers import default_registry

    default_registry().reset()
    yield
    default_registry().reset()
