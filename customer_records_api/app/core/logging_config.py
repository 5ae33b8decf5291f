"""
Logging configuration for the Customer Records API.

``setup_logging`` reads the level and optional log file from the
application ``Settings`` and installs a console handler (plus a file
handler when ``log_file`` is set) on the root logger.  The uvicorn
loggers are routed through the same handlers so server and
application lines share one format; per-request access lines are only
emitted in debug mode.

Calling it again replaces the handlers it installed earlier, so a
second ``create_app`` with different settings takes effect.
"""

import logging
from pathlib import Path

from .config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Name prefix marking handlers owned by this module.
HANDLER_PREFIX = "customer_records."

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def remove_handlers() -> None:
    """Detach and close the handlers a previous ``setup_logging`` installed."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if (handler.get_name() or "").startswith(HANDLER_PREFIX):
            root.removeHandler(handler)
            handler.close()


def setup_logging(app_settings: Settings) -> None:
    """Configure the root and uvicorn loggers from ``app_settings``.

    Unknown level names fall back to ``INFO``.  A relative ``log_file``
    is resolved against the current working directory.
    """
    remove_handlers()
    root = logging.getLogger()
    numeric_level = getattr(logging, app_settings.log_level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.set_name(HANDLER_PREFIX + "console")
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if app_settings.log_file:
        log_path = Path(app_settings.log_file).resolve()
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(HANDLER_PREFIX + "file")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
    # Access lines are noise outside debugging.
    logging.getLogger("uvicorn.access").setLevel(
        logging.INFO if app_settings.debug else logging.WARNING
    )
