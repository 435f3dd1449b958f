# logging_setup.py
from __future__ import annotations

import logging
import logging.config

LOGGER_NAME = "gradebook_export"


class DefaultContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "site_id"):
            record.site_id = "-"
        if not hasattr(record, "artifact"):
            record.artifact = "-"
        return True


def setup_logging(verbosity: int = 1) -> None:
    """
    Configure a consistent logger for the exporter.
    - INFO by default, DEBUG when verbosity >= 2
    - Always prints site_id and artifact so logs are grep-able.
    """
    level = logging.DEBUG if verbosity >= 2 else logging.INFO

    fmt = (
        "%(asctime)s %(levelname)s "
        "site=%(site_id)s artifact=%(artifact)s "
        "%(message)s"
    )

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"std": {"format": fmt}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "std",
                "level": level,
                "filters": ["default_context"]
            }
        },
        "loggers": {
            LOGGER_NAME: {"handlers": ["console"], "level": level, "propagate": False}
        },
        "filters": {
            "default_context": {
                "()": "logging_setup.DefaultContextFilter"
            }
        },
    })


class _Adapter(logging.LoggerAdapter):
    """LoggerAdapter that ensures site_id and artifact keys exist, and avoids LogRecord collisions."""

    _RESERVED = {
        "name","msg","args","levelname","levelno","pathname","filename","module","lineno","funcName",
        "created","asctime","msecs","relativeCreated","thread","threadName","processName","process",
        "exc_info","exc_text","stack_info","stacklevel","message"
    }

    def process(self, msg: str, kwargs):
        extra = dict(self.extra)
        user_extra = kwargs.get("extra") or {}
        for k, v in user_extra.items():
            key = k if k not in self._RESERVED else f"meta_{k}"
            if key not in extra:  # adapter defaults win
                extra[key] = v
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(*, artifact: str, site_id: str = "-") -> logging.LoggerAdapter:
    """
    Create a logger bound to artifact + site_id.
    Usage:
        log = get_logger(artifact="aggregate", site_id="BIO101")
        log.info("site processed", extra={"assignments": 12})
    """
    base = logging.getLogger(LOGGER_NAME)
    return _Adapter(base, extra={"artifact": artifact, "site_id": site_id})
