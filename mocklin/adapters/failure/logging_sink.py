"""Logging failure sink.

Implements FailureSinkPort by logging each failure at ERROR level and
letting the test continue.
"""

import logging

from mocklin.core.models import SourceLocation
from mocklin.core.ports import FailureSinkPort

logger = logging.getLogger(__name__)


class LoggingFailureSink(FailureSinkPort):
    """Logs failures without affecting the test outcome."""

    def __init__(self) -> None:
        self.reported_count = 0

    def report(self, message: str, location: SourceLocation) -> None:
        self.reported_count += 1
        logger.error(f"Mock verification failed at {location}: {message}")
