"""Invocation ledger: append-only record of dispatched calls."""

from collections.abc import Iterator

from .matchers import Matcher
from .models import Arguments, Invocation, OperationId


class InvocationLedger:
    """Calls recorded by one engine, in call order.

    Entries are never removed. The only change an entry can undergo is
    being marked verified.
    """

    def __init__(self) -> None:
        self._entries: list[Invocation] = []

    def record(self, operation: OperationId, arguments: Arguments) -> Invocation:
        """Append a new, unverified invocation."""
        invocation = Invocation(operation=operation, arguments=tuple(arguments))
        self._entries.append(invocation)
        return invocation

    def entries(self) -> tuple[Invocation, ...]:
        return tuple(self._entries)

    def pending(self) -> list[Invocation]:
        """All invocations not yet consumed by a verification."""
        return [entry for entry in self._entries if not entry.verified]

    def unverified(
        self,
        operation: OperationId,
        matchers: tuple[Matcher, ...] | None,
    ) -> list[Invocation]:
        """Unconsumed invocations of operation whose arguments satisfy matchers."""
        return [
            entry
            for entry in self._entries
            if entry.operation == operation
            and entry.matches(matchers)
            and not entry.verified
        ]

    def __iter__(self) -> Iterator[Invocation]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
