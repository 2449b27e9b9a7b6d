"""Logging setup shared by the ASGI app and the CLI.

The root handler is installed on the first call only. The level of
the ``pommapper`` logger tree is applied on every call that passes
one, so both entry points configure logging at import time and apply
``Settings.log_level`` once settings are loaded.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"
PACKAGE_LOGGER = "pommapper"

# HTTP client and access-log chatter stays at WARNING
_QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "uvicorn.access",
)

_handler_installed = False


def setup_logging(level: str | None = None, *, debug: bool = False) -> None:
    """Install the root handler once, then apply ``level`` to the package.

    ``debug`` forces DEBUG regardless of ``level``.
    """
    global _handler_installed  # noqa: PLW0603
    if not _handler_installed:
        _handler_installed = True
        logging.basicConfig(
            level=logging.INFO,
            format=LOG_FORMAT,
            datefmt=LOG_DATEFMT,
        )
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    if debug:
        level = "DEBUG"
    if level is not None:
        logging.getLogger(PACKAGE_LOGGER).setLevel(
            logging.getLevelNamesMapping()[level.strip().upper()]
        )
