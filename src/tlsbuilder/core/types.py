"""Value types shared across the TLS builder.

:class:`ClientAuthPolicy` and :class:`TlsMode` inherit from
``StrEnum`` so their ``.value`` is the plain configuration string.
:class:`Secret` wraps password-bearing configuration values so they
never reach logs, reprs or pickles by accident.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Modes and policies
# ---------------------------------------------------------------------------


class TlsMode(StrEnum):
    SERVER = "server"
    CLIENT = "client"


class ClientAuthPolicy(StrEnum):
    NONE = "none"
    REQUESTED = "requested"
    REQUIRED = "required"


# ---------------------------------------------------------------------------
# Store types
# ---------------------------------------------------------------------------

JKS = "JKS"
PKCS12 = "PKCS12"
PEM = "PEM"


# ---------------------------------------------------------------------------
# Secrets
# ---------------------------------------------------------------------------


class Secret:
    """A password-bearing configuration value.

    ``str()`` and ``repr()`` both render ``[hidden]``; the wrapped
    string is only reachable through :meth:`value` / :meth:`as_bytes`.
    """

    HIDDEN = "[hidden]"

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        if not isinstance(value, str):
            msg = f"Secret value must be a string, got {type(value).__name__}"
            raise TypeError(msg)
        self._value = value

    def value(self) -> str:
        """Return the wrapped plain-text value."""
        return self._value

    def as_bytes(self) -> bytearray:
        """Return the UTF-8 encoding as a mutable buffer the caller can zero."""
        return bytearray(self._value.encode("utf-8"))

    def __str__(self) -> str:
        return self.HIDDEN

    def __repr__(self) -> str:
        return f"Secret({self.HIDDEN})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __reduce__(self):
        msg = "Secret values cannot be serialized"
        raise TypeError(msg)


def zero(buf: bytearray | None) -> None:
    """Overwrite *buf* in place with zero bytes."""
    if buf is None:
        return
    for i in range(len(buf)):
        buf[i] = 0
