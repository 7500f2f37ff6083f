"""
Logging setup for the asset gateway.

Everything goes to stdout. uvicorn's access log keeps its bare format and
skips health probe requests; gateway modules log under ``assetgateway``.
"""

import logging
from typing import Any, Dict, List, Optional

HEALTH_PATHS = ("/health", "/healthz")
ACCESS_LOGGER = "uvicorn.access"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ACCESS_FORMAT = "%(message)s"


class HealthCheckFilter(logging.Filter):
    """Drops uvicorn access lines for health probe requests."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != ACCESS_LOGGER:
            return True
        message = record.getMessage()
        # Trailing space: "/health " must not match "/assets/health-x"
        probe = "GET" in message and any(f"{path} " in message for path in HEALTH_PATHS)
        return not probe


def _stdout_handler(formatter: str, filters: Optional[List[str]] = None) -> Dict[str, Any]:
    handler: Dict[str, Any] = {
        "class": "logging.StreamHandler",
        "formatter": formatter,
        "stream": "ext://sys.stdout",
    }
    if filters:
        handler["filters"] = filters
    return handler


def _logger(handler: str, level: str) -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    Build the dictConfig mapping shared by the gateway and uvicorn.

    Args:
        level: Level of the ``assetgateway`` logger; uvicorn stays at INFO
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {
            "default": {"format": LOG_FORMAT},
            "access": {"format": ACCESS_FORMAT},
        },
        "handlers": {
            "default": _stdout_handler("default"),
            "access": _stdout_handler("access", ["health_check_filter"]),
        },
        "loggers": {
            "uvicorn": _logger("default", "INFO"),
            "uvicorn.error": _logger("default", "INFO"),
            ACCESS_LOGGER: _logger("access", "INFO"),
            "assetgateway": _logger("default", level),
        },
        "root": {"level": "INFO", "handlers": ["default"]},
    }
