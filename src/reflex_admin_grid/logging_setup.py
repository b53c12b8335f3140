"""Console logging setup."""

import logging

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_configured = False


def configure_logging(level: str | int = "INFO") -> None:
    """Install one stream handler on the package logger.

    Calling it again only changes the level, so Reflex hot reloads do not
    stack handlers.
    """
    global _configured
    pkg_logger = logging.getLogger("reflex_admin_grid")
    pkg_logger.setLevel(level if isinstance(level, int) else level.upper())
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False
    _configured = True
