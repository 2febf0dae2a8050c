"""Recording callbacks.

A Callback is a single-operation engine for code that takes a plain
callable (a completion handler, an event listener) rather than an
interface. Every call is recorded; there are no stubs to resolve and the
callback always returns None. Verification works exactly as it does for
Mock.
"""

import logging
from typing import Any

from .ledger import InvocationLedger
from .location import caller_location
from .matchers import as_matchers
from .models import (
    CountPolicy,
    Exactly,
    Invocation,
    OperationId,
    Range,
    SourceLocation,
    VerificationRequest,
)
from .ports import FailureSinkPort
from .verification import VerificationEngine

logger = logging.getLogger(__name__)


class Callback:
    """A callable that records its invocations for later verification.

    Args:
        sink: Receives verification failures.
        name: Used in failure messages.
        location: Construction site. Defaults to the calling test code.
    """

    def __init__(
        self,
        sink: FailureSinkPort,
        *,
        name: str = "callback",
        location: SourceLocation | None = None,
    ):
        self.name = name
        self.operation = OperationId(name)
        self.location = location or caller_location()
        self._ledger = InvocationLedger()
        self._verifier = VerificationEngine(
            self._ledger, sink, lambda operation: f"the callback {operation.name}"
        )

    @property
    def invocations(self) -> tuple[Invocation, ...]:
        return self._ledger.entries()

    def invoke(self, *arguments: Any) -> None:
        invocation = self._ledger.record(self.operation, arguments)
        logger.debug(f"Recorded {invocation}")

    def __call__(self, *arguments: Any) -> None:
        self.invoke(*arguments)

    def verify_all(self) -> bool:
        """Report a failure if any invocation is still unverified."""
        return self._verifier.verify_all(caller_location())

    def verify(
        self,
        *arguments: Any,
        exactly: int | None = None,
        at_least: int = 1,
        at_most: int | None = None,
    ) -> bool:
        """Verify and consume invocations matching arguments positionally.

        Args:
            *arguments: Matchers or raw values. None given matches any call.
            exactly: Required count. Takes precedence over the range.
            at_least: Lower bound when exactly is not given.
            at_most: Upper bound when exactly is not given; None is open.

        Returns:
            True if the count was satisfied.
        """
        policy: CountPolicy
        if exactly is not None:
            policy = Exactly(exactly)
        else:
            policy = Range(at_least=at_least, at_most=at_most)

        request = VerificationRequest(
            operation=self.operation,
            matchers=as_matchers(arguments) if arguments else None,
            policy=policy,
        )
        return self._verifier.verify(request, caller_location())

    def __repr__(self) -> str:
        return f"<Callback {self.name} created at {self.location}>"
