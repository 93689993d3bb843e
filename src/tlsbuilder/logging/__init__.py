"""Logging subsystem for the TLS builder.

Public API::

    from tlsbuilder.logging import configure_logging

    configure_logging(build_logging_settings({"level": "DEBUG"}))
"""

from tlsbuilder.logging.setup import configure_logging

__all__ = ["configure_logging"]
