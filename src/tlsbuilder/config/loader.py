"""Configuration file loading.

Reads a YAML or JSON document, resolves ``${VAR}`` and
``${VAR:-default}`` references against the environment, and flattens
nested mappings into the dotted keys that :class:`ConfigView` expects::

    listeners:
      https:
        ssl:
          keystore:
            location: /etc/tls/server.p12
            password: ${KEYSTORE_PASSWORD}

becomes ``{"listeners.https.ssl.keystore.location": "/etc/tls/server.p12", ...}``.
"""

from __future__ import annotations

import functools
import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validate

from tlsbuilder.config.view import ConfigView
from tlsbuilder.errors import ConfigurationError

log = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    msg = (
        f"Environment variable '${{{var_name}}}' referenced "
        f"at '{path}' is not set and has no default"
    )
    raise ConfigurationError(msg, key=path)


def _resolve_env_vars(
    data: Any,  # noqa: ANN401
    path: str = "",
) -> None:
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else str(key)
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                _resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                _resolve_env_vars(item, child_path)


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


def flatten(data: dict, parent: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dotted keys.

    Lists are leaf values; they are never descended into.
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{parent}.{key}" if parent else str(key)
        if isinstance(value, dict):
            flat.update(flatten(value, full_key))
        else:
            flat[full_key] = value
    return flat


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------


@functools.cache
def _schema() -> dict:
    with _SCHEMA_PATH.open(encoding="utf-8") as f:
        return json.load(f)


def validate_document(document: Any, source: str) -> None:  # noqa: ANN401
    """Validate a flattened document against the bundled ``schema.json``.

    Raises :class:`ConfigurationError` naming the offending key.
    """
    try:
        validate(instance=document, schema=_schema())
    except ValidationError as exc:
        # first path element is the flattened key; deeper elements index list items
        key = str(exc.absolute_path[0]) if exc.absolute_path else None
        location = ".".join(str(p) for p in exc.absolute_path) or "<root>"
        msg = f"Configuration file {source} is invalid at '{location}': {exc.message}"
        raise ConfigurationError(msg, key=key) from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config_file(config_file: str | Path) -> ConfigView:
    """Load *config_file* into a :class:`ConfigView`.

    ``.yaml``/``.yml`` files are parsed with ``yaml.safe_load``;
    anything else is parsed as JSON.

    Raises
    ------
    ConfigurationError
        If the file cannot be read or parsed, if the document fails
        validation against ``schema.json``, or if an environment
        reference cannot be resolved.

    """
    path = Path(config_file)
    try:
        with path.open(encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as exc:
        msg = f"Cannot read configuration file {path}: {exc}"
        raise ConfigurationError(msg) from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        msg = f"Cannot parse configuration file {path}: {exc}"
        raise ConfigurationError(msg) from exc

    if data is None:
        data = {}

    _resolve_env_vars(data)
    flat = flatten(data) if isinstance(data, dict) else data
    validate_document(flat, str(path))
    log.debug("Loaded %d configuration keys from %s", len(flat), path)
    return ConfigView(flat)
