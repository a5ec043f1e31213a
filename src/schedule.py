"""Parsing of periodic report schedule expressions."""

import logging
import re

from apscheduler.triggers.base import BaseTrigger
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

# Day names avoid APScheduler's Monday-based numbering of day_of_week
DESCRIPTORS = {
    "@hourly": "0 * * * *",
    "@daily": "0 0 * * *",
    "@midnight": "0 0 * * *",
    "@weekly": "0 0 * * sun",
    "@monthly": "0 0 1 * *",
}

EVERY_PATTERN = re.compile(r"^@every\s+(?P<amount>\d+)(?P<unit>[smh])$")

EVERY_UNITS = {"s": "seconds", "m": "minutes", "h": "hours"}


def parse_report_schedule(expression: str, timezone: str | None = None) -> BaseTrigger:
    """Parse a report schedule expression into an APScheduler trigger.

    Supported forms:
        - ``@every 30s`` / ``@every 5m`` / ``@every 1h``
        - ``@hourly``, ``@daily``, ``@midnight``, ``@weekly``, ``@monthly``
        - standard five-field crontab, e.g. ``0 10 * * mon-fri``

    Args:
        expression: Schedule expression.
        timezone: Optional timezone name for cron triggers.

    Returns:
        Trigger usable with an APScheduler scheduler.

    Raises:
        ValueError: If the expression cannot be parsed.
    """
    expression = (expression or "").strip()
    if not expression:
        raise ValueError("Empty schedule expression")

    match = EVERY_PATTERN.match(expression)
    if match:
        amount = int(match.group("amount"))
        if amount <= 0:
            raise ValueError(f"Interval must be positive: {expression!r}")
        unit = EVERY_UNITS[match.group("unit")]
        return IntervalTrigger(**{unit: amount})

    if expression.startswith("@"):
        if expression not in DESCRIPTORS:
            raise ValueError(f"Unknown schedule descriptor: {expression!r}")
        expression = DESCRIPTORS[expression]

    try:
        return CronTrigger.from_crontab(expression, timezone=timezone)
    except ValueError as e:
        logger.debug(f"Invalid cron expression {expression!r}: {e}")
        raise ValueError(f"Invalid cron expression {expression!r}: {e}") from e
