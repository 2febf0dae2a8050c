"""Collecting failure sink.

Implements FailureSinkPort by keeping failures in memory so a test can
keep running after a failed verification and report every failure
together when it ends.
"""

import logging

from mocklin.core.errors import VerificationFailure
from mocklin.core.models import Failure, SourceLocation
from mocklin.core.ports import FailureSinkPort

logger = logging.getLogger(__name__)


class CollectingFailureSink(FailureSinkPort):
    """Accumulates failures until they are drained."""

    def __init__(self) -> None:
        self.failures: list[Failure] = []

    def report(self, message: str, location: SourceLocation) -> None:
        self.failures.append(Failure(message=message, location=location))
        logger.debug(f"Collected verification failure at {location}: {message}")

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def drain(self) -> list[Failure]:
        """Return and forget every collected failure."""
        failures, self.failures = self.failures, []
        return failures

    def raise_for_failures(self) -> None:
        """Raise one VerificationFailure describing every collected failure.

        The collected failures are drained first, so a second call with no
        new failures does nothing.

        Raises:
            VerificationFailure: If any failure was collected.
        """
        failures = self.drain()
        if not failures:
            return
        details = "\n".join(f"  {failure}" for failure in failures)
        raise VerificationFailure(
            f"{len(failures)} mock verification failure(s):\n{details}"
        )
