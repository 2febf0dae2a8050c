"""Verification of recorded invocations.

Targeted verification consumes what it counts: on success every matching,
previously unverified invocation is marked verified and can never satisfy
another query. On failure nothing is marked and a failure is reported.
"""

import logging
from collections.abc import Callable

from .ledger import InvocationLedger
from .models import OperationId, SourceLocation, VerificationRequest
from .ports import FailureSinkPort

logger = logging.getLogger(__name__)


class VerificationEngine:
    """Evaluates count policies against one engine's ledger.

    Args:
        ledger: Invocations to verify.
        sink: Receives failure reports.
        describe: Renders an operation for failure messages, for example
            "the operation greet on mock of type Greeter".
    """

    def __init__(
        self,
        ledger: InvocationLedger,
        sink: FailureSinkPort,
        describe: Callable[[OperationId], str],
    ):
        self.ledger = ledger
        self.sink = sink
        self.describe = describe

    def verify_all(self, location: SourceLocation) -> bool:
        """Check that every recorded invocation has been verified.

        Marks nothing.

        Returns:
            True if no unverified invocation remains.
        """
        unverified = self.ledger.pending()
        if not unverified:
            return True

        rendered = ", ".join(str(invocation) for invocation in unverified)
        self.sink.report(
            f"{len(unverified)} invocations were unverified: [{rendered}]",
            location,
        )
        return False

    def verify(self, request: VerificationRequest, location: SourceLocation) -> bool:
        """Evaluate a targeted request and consume its matches on success.

        Returns:
            True if the count policy was satisfied.
        """
        matches = self.ledger.unverified(request.operation, request.matchers)

        if not request.policy.admits(len(matches)):
            self.sink.report(
                f"Expected {self.describe(request.operation)} to have been "
                f"invoked {request.policy.describe()}. "
                f"Was invoked {len(matches)} times.",
                location,
            )
            return False

        for invocation in matches:
            invocation.mark_verified()
        logger.debug(
            f"Verified {len(matches)} invocations of {request.operation} "
            f"({request.policy.describe()})"
        )
        return True
