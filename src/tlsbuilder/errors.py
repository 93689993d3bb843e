"""Exception hierarchy for the TLS builder.

:class:`ConfigurationError` covers values of the wrong type and
unparseable lists; :class:`KeyMaterialError` covers key stores that
cannot be opened or parsed.  Both surface straight to the caller and
no partial descriptor is ever returned.
"""

from __future__ import annotations


class TlsBuilderError(Exception):
    """Base class for all TLS builder failures.

    Parameters
    ----------
    detail:
        Human-readable description of the failure.

    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class ConfigurationError(TlsBuilderError):
    """A recognized key holds a value of the wrong kind."""

    def __init__(self, detail: str, *, key: str | None = None) -> None:
        self.key = key
        super().__init__(detail)


class KeyMaterialError(TlsBuilderError):
    """A key store could not be opened or parsed.

    The underlying exception is chained as ``__cause__``; *path* names
    the offending store for diagnostics.
    """

    def __init__(self, path: str, detail: str | None = None) -> None:
        self.path = path
        super().__init__(detail or f"Failed to load SSL keystore {path}")
