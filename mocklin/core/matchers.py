"""Argument matchers.

A matcher answers whether an arbitrary runtime value satisfies it. Matchers
are used both to select stubs and to filter invocations during verification.

Equality matchers are type-exact: `eq(1)` does not match `True` or `1.0`,
even though both compare equal to 1 in Python. A type mismatch, or an
equality that cannot be reduced to a bool, is always reported as
"no match", never as an error.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any


class Matcher(ABC):
    """A predicate over arbitrary runtime values."""

    @abstractmethod
    def matches(self, value: Any) -> bool:
        """Return True if value satisfies this matcher."""


class EqualMatcher(Matcher):
    """Matches values of exactly the expected type that compare equal."""

    def __init__(self, expected: Any):
        self.expected = expected
        self.expected_type = type(expected)

    def matches(self, value: Any) -> bool:
        if type(value) is not self.expected_type:
            return False
        try:
            return bool(value == self.expected)
        except (TypeError, ValueError):
            # e.g. array-like types whose == has no single truth value
            return False

    def __repr__(self) -> str:
        return f"eq({self.expected!r})"


class OptionalMatcher(Matcher):
    """Matches None against None, and present values through an inner matcher.

    A matcher built from None only matches None; a matcher built from a
    present value never matches None.
    """

    def __init__(self, inner: Matcher | None):
        self.inner = inner

    def matches(self, value: Any) -> bool:
        if self.inner is None or value is None:
            return self.inner is None and value is None
        return self.inner.matches(value)

    def __repr__(self) -> str:
        return f"optional({self.inner!r})"


class AnyMatcher(Matcher):
    """Matches every value."""

    def matches(self, value: Any) -> bool:
        return True

    def __repr__(self) -> str:
        return "anything()"


class InstanceOfMatcher(Matcher):
    def __init__(self, *types: type):
        if not types:
            raise ValueError("instance_of requires at least one type")
        self.types = types

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.types)

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self.types)
        return f"instance_of({names})"


def eq(expected: Any) -> Matcher:
    """Build a type-checked equality matcher for expected."""
    return EqualMatcher(expected)


def optional(inner: Any = None) -> Matcher:
    """Build a matcher for values that may be None.

    Args:
        inner: A matcher or raw value for the present case, or None to
            match only None.
    """
    return OptionalMatcher(None if inner is None else as_matcher(inner))


def anything() -> Matcher:
    return AnyMatcher()


def instance_of(*types: type) -> Matcher:
    return InstanceOfMatcher(*types)


def as_matcher(value: Any) -> Matcher:
    """Use value as a matcher, wrapping raw values in eq()."""
    if isinstance(value, Matcher):
        return value
    return EqualMatcher(value)


def as_matchers(values: Iterable[Any]) -> tuple[Matcher, ...]:
    return tuple(as_matcher(value) for value in values)


def matches_all(
    matchers: tuple[Matcher, ...] | None, arguments: tuple[Any, ...]
) -> bool:
    """Compare matchers to arguments position by position.

    Only the overlapping prefix is compared: trailing arguments without a
    matcher are unconstrained, and trailing matchers without an argument
    are ignored. No matchers at all accepts any arguments.
    """
    if matchers is None:
        return True
    return all(matcher.matches(arg) for matcher, arg in zip(matchers, arguments))
