"""Opt-in loguru sinks for wait tracing.

statewait logs every observation through loguru but, being a library,
stays silent until the application calls ``setup_logging``. Records
emitted by a running wait carry ``wait`` (the spec description) and
``attempt`` (polls so far) in ``extra``; the sinks added here render them
as a ``[description #attempt]`` prefix.

Example:
    from statewait.logging import LogConfig, setup_logging, teardown_logging

    handler_ids = setup_logging(LogConfig(level="DEBUG", file="waits.log"))
    try:
        await wait_for_state(spec)
    finally:
        teardown_logging(handler_ids)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

logger.disable("statewait")

type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


def _format(record: Record) -> str:
    context = "[{extra[wait]} #{extra[attempt]}] " if "wait" in record["extra"] else ""
    return (
        "<green>{time:HH:mm:ss.SSS}</green> <level>{level: <7}</level> "
        f"<cyan>{context}</cyan><level>{{message}}</level>\n{{exception}}"
    )


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Where wait traces go.

    Attributes:
        level: Minimum level for the console sink.
        file: Optional path; the file sink records every level.
        console: Whether to write to stderr.
    """

    level: LogLevel = "INFO"
    file: str | None = None
    console: bool = True


def setup_logging(config: LogConfig | None = None) -> list[int]:
    """Enable statewait records and add its sinks. Returns their handler IDs."""
    config = config or LogConfig()
    logger.enable("statewait")

    sinks: list[int] = []
    if config.console:
        sinks.append(logger.add(sys.stderr, level=config.level, format=_format, filter="statewait"))
    if config.file:
        sinks.append(
            logger.add(config.file, level="DEBUG", format=_format, colorize=False, filter="statewait")
        )
    return sinks


def teardown_logging(handler_ids: list[int]) -> None:
    """Remove the sinks from ``setup_logging`` and silence statewait again."""
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("statewait")
