"""Read-only, prefix-scoped view over a flat configuration mapping.

Values are coerced once, on construction, according to the declared
kind of each recognized key (see :mod:`tlsbuilder.config.keys`):

- password keys become :class:`~tlsbuilder.core.types.Secret`
- list keys become ``tuple[str, ...]`` (strings are split on commas)
- string keys must already be ``str``

Keys that are not recognized pass through untouched.  ``None`` values
are treated as absent.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from tlsbuilder.config.keys import RECOGNIZED_KEYS, ValueKind, kind_of
from tlsbuilder.core.types import Secret
from tlsbuilder.errors import ConfigurationError

COMMA_WITH_WHITESPACE = re.compile(r"\s*,\s*")


def parse_list(value: Any, key: str) -> tuple[str, ...]:  # noqa: ANN401
    """Coerce *value* into a tuple of strings.

    Accepts a comma-separated string (whitespace around commas is
    ignored) or any list/tuple of strings.
    """
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return ()
        return tuple(COMMA_WITH_WHITESPACE.split(stripped))
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, str):
                msg = (
                    f"Configuration '{key}' must be a list of strings, "
                    f"found item of type {type(item).__name__}"
                )
                raise ConfigurationError(msg, key=key)
        return tuple(item.strip() for item in value)
    msg = f"Configuration '{key}' must be a list, got {type(value).__name__}"
    raise ConfigurationError(msg, key=key)


def _coerce(key: str, value: Any) -> Any:  # noqa: ANN401
    kind = kind_of(key)
    if kind is None:
        return value
    if kind is ValueKind.PASSWORD:
        if isinstance(value, Secret):
            return value
        if isinstance(value, str):
            return Secret(value)
        msg = f"Configuration '{key}' must be a password, got {type(value).__name__}"
        raise ConfigurationError(msg, key=key)
    if kind is ValueKind.LIST:
        return parse_list(value, key)
    if not isinstance(value, str):
        msg = f"Configuration '{key}' must be a string, got {type(value).__name__}"
        raise ConfigurationError(msg, key=key)
    return value


class ConfigView(Mapping[str, Any]):
    """Immutable mapping from fully-qualified key to typed value.

    Parameters
    ----------
    values:
        Flat mapping as supplied by the configuration collaborator
        (for example the result of :func:`~tlsbuilder.config.loader.load_config_file`).

    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        coerced = {}
        for key, value in (values or {}).items():
            if value is None:
                continue
            coerced[key] = _coerce(key, value)
        self._values = MappingProxyType(coerced)

    # -- Mapping protocol ------------------------------------------------

    def __getitem__(self, key: str) -> Any:  # noqa: ANN401
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        # Secret.__repr__ already hides the value
        return f"ConfigView({dict(self._values)!r})"

    # -- scoping ---------------------------------------------------------

    def values_with_prefix_all_or_nothing(self, prefix: str) -> dict[str, Any]:
        """Return the values scoped to *prefix*, with the prefix stripped.

        If any key starts with *prefix*, only prefixed keys are used.
        Otherwise the un-prefixed recognized keys are returned, so a
        listener without its own ``ssl.*`` block inherits the top-level
        TLS settings as a whole rather than key by key.
        """
        scoped = {
            key[len(prefix) :]: value
            for key, value in self._values.items()
            if key.startswith(prefix) and len(key) > len(prefix)
        }
        if scoped:
            return scoped
        return {key: value for key, value in self._values.items() if key in RECOGNIZED_KEYS}


def as_view(config: Mapping[str, Any] | None) -> ConfigView:
    """Wrap *config* in a :class:`ConfigView` unless it already is one."""
    if isinstance(config, ConfigView):
        return config
    return ConfigView(config)
