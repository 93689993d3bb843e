"""Sensitive data sanitization for log output.

Provides :func:`sanitize_for_logs` which redacts passwords and key
material from data structures before they are written to logs:
:class:`~tlsbuilder.core.types.Secret` values, values stored under
password-like keys, and PEM bodies.
"""

from __future__ import annotations

import re
from typing import Any

from tlsbuilder.core.types import Secret

REDACTED = "[REDACTED]"

_SECRET_KEY_RE = re.compile(r"(password|passphrase|secret|pin)$", re.IGNORECASE)

# Regex matching the base64 body inside PEM blocks
_PEM_BODY_RE = re.compile(
    r"(-----BEGIN [A-Z0-9 ]+-----)"
    r"([\s\S]*?)"
    r"(-----END [A-Z0-9 ]+-----)",
)


def sanitize_pem(pem: str) -> str:
    """Replace the base64 body of PEM blocks with ``[REDACTED]``.

    Preserves BEGIN/END markers so the type of object is still visible.
    """

    def _redact(m) -> str:
        return f"{m.group(1)}\n{REDACTED}\n{m.group(3)}"

    return _PEM_BODY_RE.sub(_redact, pem)


def is_secret_key(key: str) -> bool:
    """Whether *key* names a password-bearing setting (``ssl.key.password``...)."""
    return bool(_SECRET_KEY_RE.search(key))


def sanitize_for_logs(data: Any) -> Any:  # noqa: ANN401
    """Recursively sanitize sensitive material in *data*.

    Handles dicts (secret-named keys), lists/tuples, :class:`Secret`
    instances and PEM strings.  Non-sensitive data passes through
    unchanged.
    """
    if isinstance(data, Secret):
        return REDACTED

    if isinstance(data, dict):
        return {
            k: REDACTED
            if isinstance(k, str) and is_secret_key(k) and v is not None
            else sanitize_for_logs(v)
            for k, v in data.items()
        }

    if isinstance(data, (list, tuple)):
        return type(data)(sanitize_for_logs(item) for item in data)

    if isinstance(data, str) and "-----BEGIN " in data:
        return sanitize_pem(data)

    return data
