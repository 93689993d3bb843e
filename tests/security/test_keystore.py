"""Tests for tlsbuilder.security.keystore — PKCS12 loading."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest
from cryptography.hazmat.primitives import serialization

from tests.conftest import write_pkcs12
from tlsbuilder.core.types import Secret
from tlsbuilder.errors import KeyMaterialError
from tlsbuilder.security.keystore import KeyMaterialHandle, KeyMaterialLoader
from tlsbuilder.security.providers import PYCA_PROVIDER_NAME


class TestRequiresLoading:
    def test_pkcs12_with_path(self):
        assert KeyMaterialLoader.requires_loading("/tmp/a.p12", "PKCS12") is True

    def test_pkcs12_without_path(self):
        assert KeyMaterialLoader.requires_loading(None, "PKCS12") is False

    @pytest.mark.parametrize("store_type", ["JKS", "PEM", "pkcs12", "BCFKS"])
    def test_other_types(self, store_type):
        assert KeyMaterialLoader.requires_loading("/tmp/a", store_type) is False


class TestLoad:
    def test_loads_key_and_certificate(self, tmp_path, registry):
        path = tmp_path / "server.p12"
        key, cert = write_pkcs12(path, b"hunter2")

        handle = KeyMaterialLoader(registry).load(str(path), "PKCS12", Secret("hunter2"))

        assert isinstance(handle, KeyMaterialHandle)
        assert handle.path == str(path)
        assert handle.store_type == "PKCS12"
        assert handle.provider == PYCA_PROVIDER_NAME
        assert handle.certificate == cert
        assert handle.certificates == (cert,)
        assert handle.integrity_verified is True
        assert handle.private_key.private_bytes(
            serialization.Encoding.DER,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ) == key.private_bytes(
            serialization.Encoding.DER,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

    def test_registers_provider_before_loading(self, p12_path, registry):
        assert registry.get(PYCA_PROVIDER_NAME) is None
        KeyMaterialLoader(registry).load(str(p12_path), "PKCS12", Secret("hunter2"))
        assert registry.registration_count(PYCA_PROVIDER_NAME) == 1

    def test_no_password_disables_integrity_check(self, unprotected_p12_path, registry, caplog):
        with caplog.at_level(logging.WARNING, logger="tlsbuilder.security.keystore"):
            handle = KeyMaterialLoader(registry).load(str(unprotected_p12_path), "PKCS12", None)

        assert handle.integrity_verified is False
        assert handle.certificate is not None
        assert "integrity check disabled" in caplog.text

    def test_repr_omits_private_key(self, p12_path, registry):
        handle = KeyMaterialLoader(registry).load(str(p12_path), "PKCS12", Secret("hunter2"))
        assert "private_key" not in repr(handle)


class TestLoadFailures:
    def test_missing_file(self, tmp_path, registry):
        path = str(tmp_path / "absent.p12")
        with pytest.raises(KeyMaterialError, match="Failed to load SSL keystore") as exc_info:
            KeyMaterialLoader(registry).load(path, "PKCS12", Secret("x"))

        assert exc_info.value.path == path
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_wrong_password(self, p12_path, registry):
        with pytest.raises(KeyMaterialError) as exc_info:
            KeyMaterialLoader(registry).load(str(p12_path), "PKCS12", Secret("wrong"))
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_garbage_file(self, tmp_path, registry):
        path = tmp_path / "garbage.p12"
        path.write_bytes(b"not a pkcs12 container")
        with pytest.raises(KeyMaterialError) as exc_info:
            KeyMaterialLoader(registry).load(str(path), "PKCS12", Secret("x"))
        assert str(path) in str(exc_info.value)

    def test_registration_kept_after_failure(self, tmp_path, registry):
        with pytest.raises(KeyMaterialError):
            KeyMaterialLoader(registry).load(str(tmp_path / "absent.p12"), "PKCS12", None)
        assert registry.registration_count(PYCA_PROVIDER_NAME) == 1

    def test_password_buffer_zeroed(self, p12_path, registry):
        buffers: list[bytearray] = []
        original = Secret.as_bytes

        def capture(self):
            buf = original(self)
            buffers.append(buf)
            return buf

        with patch.object(Secret, "as_bytes", capture):
            KeyMaterialLoader(registry).load(str(p12_path), "PKCS12", Secret("hunter2"))

        assert buffers == [bytearray(len("hunter2"))]
