"""Domain models for the Mocklin mock engine.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from .matchers import Matcher, matches_all


@dataclass(frozen=True)
class OperationId:
    """Stable identity of one interface operation.

    Callbacks have no declared signature, so their arity is None.
    """

    name: str
    arity: int | None = None

    def __post_init__(self) -> None:
        """Validate operation identity on creation."""
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if self.arity is not None and self.arity < 0:
            raise ValueError(f"arity must be non-negative, got {self.arity}")

    def __str__(self) -> str:
        if self.arity is None:
            return self.name
        return f"{self.name}/{self.arity}"


@dataclass(frozen=True)
class OperationDescriptor:
    """One operation of an interface, as reported by introspection."""

    operation: OperationId
    parameters: tuple[str, ...]
    is_async: bool = False
    # signature without the receiver, used by proxies to bind call arguments
    signature: inspect.Signature | None = field(default=None, compare=False)

    @property
    def declared_parameter_count(self) -> int:
        return len(self.parameters)


@dataclass(frozen=True)
class SourceLocation:
    """A file and line in test code, used to point failures at their origin."""

    filename: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"


Arguments: TypeAlias = tuple[Any, ...]
Implementation: TypeAlias = Callable[[Arguments], Any]


@dataclass(frozen=True)
class Stub:
    """A registered behavior for one operation.

    A stub without matchers accepts any arguments.
    """

    operation: OperationId
    matchers: tuple[Matcher, ...] | None
    implementation: Implementation
    sequence: int

    def accepts(self, operation: OperationId, arguments: Arguments) -> bool:
        """Check whether this stub answers a call to operation with arguments."""
        return self.operation == operation and matches_all(
            self.matchers, arguments
        )

    def invoke(self, arguments: Arguments) -> Any:
        return self.implementation(arguments)


@dataclass
class Invocation:
    """A call that was successfully dispatched to a stub.

    The verified flag is the only mutable state and flips at most once,
    when a verification query consumes the invocation.
    """

    operation: OperationId
    arguments: Arguments
    verified: bool = field(default=False, init=False)

    def matches(self, matchers: tuple[Matcher, ...] | None) -> bool:
        return matches_all(matchers, self.arguments)

    def mark_verified(self) -> None:
        """Consume this invocation.

        Raises:
            ValueError: If the invocation was already consumed.
        """
        if self.verified:
            raise ValueError(f"Invocation {self} is already verified")
        self.verified = True

    def __str__(self) -> str:
        rendered = ", ".join(repr(arg) for arg in self.arguments)
        return f"{self.operation.name}({rendered})"


@dataclass(frozen=True)
class Exactly:
    """Count policy satisfied by exactly `count` matching invocations."""

    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"count must be non-negative, got {self.count}")

    def admits(self, observed: int) -> bool:
        return observed == self.count

    def describe(self) -> str:
        return f"exactly {self.count} times"


@dataclass(frozen=True)
class Range:
    """Count policy satisfied by between at_least and at_most invocations.

    at_most=None leaves the upper bound open.
    """

    at_least: int = 1
    at_most: int | None = None

    def __post_init__(self) -> None:
        """Validate range bounds on creation."""
        if self.at_least < 0:
            raise ValueError(
                f"at_least must be non-negative, got {self.at_least}"
            )
        if self.at_most is not None and self.at_most < self.at_least:
            raise ValueError(
                f"at_most ({self.at_most}) must not be less than "
                f"at_least ({self.at_least})"
            )

    def admits(self, observed: int) -> bool:
        if observed < self.at_least:
            return False
        return self.at_most is None or observed <= self.at_most

    def describe(self) -> str:
        if self.at_most is None:
            return f"at least {self.at_least} times"
        return f"at least {self.at_least} and at most {self.at_most} times"


CountPolicy: TypeAlias = Exactly | Range


@dataclass(frozen=True)
class VerificationRequest:
    """A targeted verification query against the invocation ledger."""

    operation: OperationId
    matchers: tuple[Matcher, ...] | None
    policy: CountPolicy


@dataclass(frozen=True)
class Failure:
    """A reported verification failure."""

    message: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


@dataclass(frozen=True)
class ProxyHandle:
    """A synthesized proxy instance and the hook that invalidates it."""

    target: Any
    dispose: Callable[[], None]
