"""
Loguru setup for BranchGraph.

Services log through ``get_logger(__name__)`` and attach context with
``bind(...)``. The console sink prints the bound module and any context
fields after the message; the file sink writes one JSON record per line.
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from branchgraph.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} - {message}"
)


def _escape(text: str) -> str:
    """Make caller-supplied text inert for loguru's format and color markup."""
    return text.replace("{", "{{").replace("}", "}}").replace("<", r"\<")


def format_context(extra: dict) -> str:
    """Render bound context fields as ``key=value`` pairs, module excluded."""
    return " ".join(f"{key}={value}" for key, value in extra.items() if key != "module")


def _console_format(record) -> str:
    context = format_context(record["extra"])
    suffix = f" <dim>[{_escape(context)}]</dim>" if context else ""
    return CONSOLE_FORMAT + suffix + "\n{exception}"


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = True,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """Replace all sinks with the BranchGraph console sink and, optionally, a rotating file."""
    logger.remove()
    # Records logged without get_logger still need a module for the formats
    logger.configure(extra={"module": "branchgraph"})

    logger.add(sys.stderr, level=level, format=_console_format, colorize=True)

    if not log_to_file:
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_path / "branchgraph_{time:YYYY-MM-DD}.log",
        level=level,
        format=FILE_FORMAT,
        rotation=file_rotation,
        retention=file_retention,
        compression=compression,
        serialize=serialize,
        enqueue=True,
    )


def configure_logging(config: "LoggingConfig") -> None:
    """Apply a ``LoggingConfig`` section."""
    setup_logging(**config.model_dump())


def get_logger(name: str):
    """Get a logger bound to a module name."""
    return logger.bind(module=name)
