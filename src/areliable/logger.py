r"""Logging capability shared by clients, retry executors and caches.

``AppLogger`` wraps a standard library logger and adds the ``success``
level used to report that an optional component is up. Options such as
``local_only`` travel as ``extra`` fields, so ``StructuredFormatter``
includes them in JSON output.
"""

from __future__ import annotations

__all__ = ["SUCCESS", "AppLogger", "configure_logging", "get_logger"]

import logging
from typing import TYPE_CHECKING

from areliable.utils.structured_logging import StructuredFormatter

if TYPE_CHECKING:
    from areliable.settings import Settings

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


class AppLogger:
    """Thin adapter exposing ``debug``, ``warning``, ``error`` and
    ``success``.

    Args:
        logger: The standard library logger receiving the records.

    Example:
        ```pycon
        >>> import logging
        >>> from areliable.logger import AppLogger
        >>> log = AppLogger(logging.getLogger("areliable.demo"))
        >>> log.debug("starting")
        >>> log.success("Redis client ENABLED", local_only=True)

        ```
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(name={self.logger.name!r})"

    def debug(self, message: str) -> None:
        self.logger.debug(message)

    def warning(self, message: str, *, local_only: bool = False) -> None:
        self.logger.warning(message, extra={"local_only": local_only})

    def error(self, message: str, exc: BaseException | None = None) -> None:
        """Log an error, attaching the traceback of ``exc`` when given."""
        exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
        self.logger.error(message, exc_info=exc_info)

    def success(self, message: str, *, local_only: bool = False) -> None:
        self.logger.log(SUCCESS, message, extra={"local_only": local_only})


def get_logger(name: str) -> AppLogger:
    r"""Return an ``AppLogger`` over ``logging.getLogger(name)``."""
    return AppLogger(logging.getLogger(name))


def configure_logging(settings: Settings) -> logging.Handler:
    """Attach a stream handler to the ``areliable`` package logger.

    The handler emits JSON lines through ``StructuredFormatter`` when
    ``settings.log_json`` is enabled and plain text otherwise.

    Args:
        settings: The settings providing ``log_level`` and ``log_json``.

    Returns:
        The installed handler, so callers can remove it later.
    """
    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger = logging.getLogger("areliable")
    package_logger.addHandler(handler)
    package_logger.setLevel(settings.log_level.upper())
    return handler
