"""Centralized logging configuration using Loguru.

Usage:
    from paramscope.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if PARAMSCOPE_LOG_LEVEL=DEBUG

Environment Variables:
    PARAMSCOPE_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    PARAMSCOPE_LOG_JSON: 0|1 (default: 0, human-readable)
    PARAMSCOPE_LOG_FILE: path to an additional NDJSON log file (optional)
"""

import json
import os
import sys

from loguru import logger

# Remove default handler
logger.remove()

# Numeric levels for NDJSON records
NUMERIC_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

_log_level = os.environ.get("PARAMSCOPE_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("PARAMSCOPE_LOG_JSON", "0") == "1"
_log_file = os.environ.get("PARAMSCOPE_LOG_FILE")


def _to_ndjson(record) -> str:
    """Render a loguru record as a single NDJSON line."""
    entry = {
        "level": NUMERIC_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
        "module": record["name"],
    }

    for key, value in record["extra"].items():
        entry[key] = value

    if record["exception"]:
        entry["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }

    return json.dumps(entry, default=str)


def ndjson_sink(message):
    """Write log records to stdout as NDJSON.

    Never call logger.* inside a sink, it recurses.
    """
    sys.stdout.write(_to_ndjson(message.record) + "\n")
    sys.stdout.flush()


_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")

if _json_mode:
    logger.add(
        ndjson_sink,
        level=_log_level,
        colorize=False,
    )
else:
    logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )

if _log_file:

    def _file_sink(message):
        """Append NDJSON records to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(_to_ndjson(message.record) + "\n")

    logger.add(
        _file_sink,
        level="DEBUG",  # File always captures everything
    )


__all__ = [
    "logger",
    "ndjson_sink",
]
