from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: str | int) -> int:
    """Accept a level name (``"INFO"``, ``"warn"``) or a numeric level."""
    if isinstance(level, int):
        return level
    if not isinstance(level, str) or not level.strip():
        raise ValueError("log level must be a non-empty string (e.g., 'INFO', 'DEBUG')")
    name = level.strip().upper()
    if name == "WARN":
        name = "WARNING"
    value = logging.getLevelName(name)
    if isinstance(value, int):
        return value
    try:
        return int(name)
    except ValueError as exc:
        raise ValueError(f"Unknown log level: {level!r}") from exc


def configure_logging(level: str | int = "INFO", logger_name: str | None = None) -> logging.Logger:
    """Configure one console handler; safe to call repeatedly.

    Args:
        level: Level name or number.
        logger_name: Logger to configure; the root logger when omitted.

    Returns:
        The configured logger.
    """
    target = logging.getLogger(logger_name) if logger_name else logging.getLogger()
    target.setLevel(parse_level(level))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    for handler in target.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setFormatter(formatter)
            handler.setLevel(target.level)
            return target

    handler = logging.StreamHandler()
    handler.setLevel(target.level)
    handler.setFormatter(formatter)
    target.addHandler(handler)
    return target
