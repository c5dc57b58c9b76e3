"""
Logging configuration using loguru.

The engine logs through loguru directly and never configures sinks itself.
Applications (and the CLI) call setup_logging() or configure_logging() once
at startup.
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from zakatflow.core.config_schema import ZakatFlowConfig

CONSOLE_FORMAT = "<level>[{level.name}]</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    fmt: str = CONSOLE_FORMAT,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure loguru with a stderr sink and an optional rotating file sink.

    Args:
        level: Minimum log level (TRACE, DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        fmt: Loguru format string for stderr.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt)

    if log_file:
        logger.add(str(log_file), level=level, format=FILE_FORMAT, rotation=rotation, retention=retention)


def resolve_log_file(settings: "ZakatFlowConfig") -> Path | None:
    """Log file from ``logging.file``; relative names live under ``paths.log_dir``."""
    if not settings.logging.file:
        return None
    log_file = Path(settings.logging.file).expanduser()
    if not log_file.is_absolute() and settings.paths.log_dir is not None:
        log_file = settings.paths.log_dir / log_file
    return log_file


def configure_logging(settings: "ZakatFlowConfig", level: str | None = None) -> Path | None:
    """Apply the ``logging`` and ``paths`` sections of a validated config.

    Args:
        settings: Validated configuration.
        level: Overrides ``logging.level`` when given.

    Returns:
        The log file in use, or None when logging only to stderr.
    """
    log_file = resolve_log_file(settings)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    setup_logging(level=level or settings.logging.level, log_file=log_file)
    if log_file is not None:
        logger.debug(f"Logging to {log_file}")
    return log_file
