"""Stub registry.

Stubs are kept most-recent-first. Resolution returns the first stub for
the operation whose matchers accept the arguments, so a later
registration shadows an earlier one wherever their matchers overlap.
"""

import itertools
import logging
from collections.abc import Iterator

from .matchers import Matcher
from .models import Arguments, Implementation, OperationId, Stub

logger = logging.getLogger(__name__)


class StubRegistry:
    """Ordered collection of stubs owned by a single engine."""

    def __init__(self) -> None:
        self._stubs: list[Stub] = []
        self._sequence = itertools.count()

    def register(
        self,
        operation: OperationId,
        matchers: tuple[Matcher, ...] | None,
        implementation: Implementation,
    ) -> Stub:
        """Add a stub ahead of every stub registered before it.

        Args:
            operation: Operation the stub answers.
            matchers: Positional argument matchers, or None to accept
                any arguments.
            implementation: Called with the argument tuple; its return
                value becomes the result of the proxied call.

        Returns:
            The registered stub.
        """
        stub = Stub(
            operation=operation,
            matchers=matchers,
            implementation=implementation,
            sequence=next(self._sequence),
        )
        self._stubs.insert(0, stub)
        logger.debug(
            f"Registered stub #{stub.sequence} for {operation} "
            f"with matchers {matchers!r}"
        )
        return stub

    def resolve(self, operation: OperationId, arguments: Arguments) -> Stub | None:
        """Find the stub that answers a call, or None if nothing does."""
        for stub in self._stubs:
            if stub.accepts(operation, arguments):
                return stub
        return None

    def __iter__(self) -> Iterator[Stub]:
        return iter(self._stubs)

    def __len__(self) -> int:
        return len(self._stubs)
