import json
import logging
import sys
from typing import Any


class Log:
    """Process-wide logger for the client, configured once at startup."""

    _logger: logging.Logger = logging.getLogger("imagechat")
    _PREVIEW_CHARS = 2000

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a single stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    def payload(cls, label: str, payload: Any) -> None:
        """Dump a decoded response at debug level, cut to a readable preview."""
        if not cls._logger.isEnabledFor(logging.DEBUG):
            return
        try:
            rendered = json.dumps(payload, ensure_ascii=False, indent=2)
        except (TypeError, ValueError):
            rendered = repr(payload)
        if len(rendered) > cls._PREVIEW_CHARS:
            rendered = rendered[: cls._PREVIEW_CHARS] + "..."
        cls._logger.debug(f"{label}:\n{rendered}")
