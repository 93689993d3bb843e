"""Tests for tlsbuilder.config.view and tlsbuilder.config.keys."""

from __future__ import annotations

import pytest

from tlsbuilder.config.keys import ValueKind, kind_of
from tlsbuilder.config.view import ConfigView, as_view, parse_list
from tlsbuilder.core.types import Secret
from tlsbuilder.errors import ConfigurationError

# ---------------------------------------------------------------------------
# keys.kind_of
# ---------------------------------------------------------------------------


class TestKindOf:
    def test_bare_key(self):
        assert kind_of("ssl.keystore.password") is ValueKind.PASSWORD

    def test_prefixed_key(self):
        assert kind_of("listeners.https.ssl.cipher.suites") is ValueKind.LIST

    def test_unknown_key(self):
        assert kind_of("listeners.https.port") is None
        assert kind_of("listeners.https.ssl.unknown") is None


# ---------------------------------------------------------------------------
# parse_list
# ---------------------------------------------------------------------------


class TestParseList:
    def test_comma_with_whitespace(self):
        assert parse_list("TLSv1.2 ,  TLSv1.3", "k") == ("TLSv1.2", "TLSv1.3")

    def test_single_item(self):
        assert parse_list("TLSv1.3", "k") == ("TLSv1.3",)

    def test_blank_string_is_empty(self):
        assert parse_list("   ", "k") == ()

    def test_sequence(self):
        assert parse_list(["a", "b"], "k") == ("a", "b")

    def test_non_string_item_rejected(self):
        with pytest.raises(ConfigurationError, match="list of strings") as exc_info:
            parse_list(["a", 3], "ssl.cipher.suites")
        assert exc_info.value.key == "ssl.cipher.suites"

    def test_wrong_type_rejected(self):
        with pytest.raises(ConfigurationError, match="must be a list"):
            parse_list(42, "k")


# ---------------------------------------------------------------------------
# ConfigView
# ---------------------------------------------------------------------------


class TestConfigViewCoercion:
    def test_password_becomes_secret(self):
        view = ConfigView({"listeners.https.ssl.keystore.password": "hunter2"})
        value = view["listeners.https.ssl.keystore.password"]
        assert isinstance(value, Secret)
        assert value.value() == "hunter2"

    def test_existing_secret_kept(self):
        secret = Secret("x")
        view = ConfigView({"ssl.key.password": secret})
        assert view["ssl.key.password"] is secret

    def test_password_of_wrong_type(self):
        with pytest.raises(ConfigurationError, match="must be a password"):
            ConfigView({"ssl.truststore.password": 1234})

    def test_list_key_split(self):
        view = ConfigView({"ssl.enabled.protocols": "TLSv1.2,TLSv1.3"})
        assert view["ssl.enabled.protocols"] == ("TLSv1.2", "TLSv1.3")

    def test_string_key_of_wrong_type(self):
        with pytest.raises(ConfigurationError, match="must be a string") as exc_info:
            ConfigView({"ssl.keystore.type": ["PKCS12"]})
        assert exc_info.value.key == "ssl.keystore.type"

    def test_none_treated_as_absent(self):
        view = ConfigView({"ssl.keystore.location": None})
        assert "ssl.keystore.location" not in view
        assert len(view) == 0

    def test_unrecognized_keys_pass_through(self):
        view = ConfigView({"listeners.https.port": 8443})
        assert view["listeners.https.port"] == 8443

    def test_is_read_only(self):
        view = ConfigView({"ssl.protocol": "TLSv1.3"})
        with pytest.raises(TypeError):
            view["ssl.protocol"] = "TLSv1.2"  # type: ignore[index]

    def test_repr_hides_secrets(self):
        view = ConfigView({"ssl.keystore.password": "hunter2"})
        assert "hunter2" not in repr(view)

    def test_as_view_is_identity_for_views(self):
        view = ConfigView({})
        assert as_view(view) is view
        assert isinstance(as_view({"a": "b"}), ConfigView)
        assert len(as_view(None)) == 0


class TestAllOrNothing:
    def test_prefixed_values_stripped(self):
        view = ConfigView(
            {
                "listeners.https.ssl.keystore.type": "PKCS12",
                "listeners.https.ssl.protocol": "TLSv1.2",
                "ssl.protocol": "TLSv1.3",
            }
        )
        scoped = view.values_with_prefix_all_or_nothing("listeners.https.")
        assert scoped == {"ssl.keystore.type": "PKCS12", "ssl.protocol": "TLSv1.2"}

    def test_prefix_present_hides_top_level_keys(self):
        view = ConfigView(
            {
                "listeners.https.ssl.protocol": "TLSv1.2",
                "ssl.keystore.type": "PKCS12",
            }
        )
        scoped = view.values_with_prefix_all_or_nothing("listeners.https.")
        assert "ssl.keystore.type" not in scoped

    def test_falls_back_to_top_level_recognized_keys(self):
        view = ConfigView(
            {
                "ssl.keystore.type": "PKCS12",
                "rest.port": "8083",
            }
        )
        scoped = view.values_with_prefix_all_or_nothing("listeners.https.")
        assert scoped == {"ssl.keystore.type": "PKCS12"}

    def test_empty_view(self):
        assert ConfigView({}).values_with_prefix_all_or_nothing("listeners.https.") == {}
