"""Exception hierarchy for the Mocklin mock engine.

Three severities exist:

1. **Setup errors** (MocklinError): misuse detected while a test builds
   its mocks. Raised as ordinary exceptions.
2. **Fatal errors** (MockFatalError): a proxy received a call the test
   never prepared for, or a call after its engine went away. These derive
   from BaseException so an `except Exception` block in the code under
   test cannot hide them; the current test fails at the call site.
3. **Verification failures** (VerificationFailure): reported through a
   failure sink. Only sinks raise them, never the engine itself.
"""

from typing import Any

from .models import OperationId, SourceLocation


class MocklinError(Exception):
    """Base class for errors raised while configuring mocks."""


class UnknownOperationError(MocklinError, ValueError):
    """An operation was named that the mocked interface does not declare."""

    def __init__(self, interface_name: str, operation: str):
        self.interface_name = interface_name
        self.operation = operation
        super().__init__(
            f"{interface_name} has no operation named {operation!r}"
        )


class UnsupportedOperationError(MocklinError, TypeError):
    """An interface member cannot be intercepted by a proxy."""


class MockFatalError(BaseException):
    """A malformed test reached a proxy.

    Attributes:
        location: Where the owning engine was constructed.
    """

    def __init__(self, message: str, location: SourceLocation):
        self.location = location
        super().__init__(message)


class UnstubbedCallError(MockFatalError):
    """A proxy call matched no registered stub."""

    def __init__(
        self,
        interface_name: str,
        operation: OperationId,
        arguments: tuple[Any, ...],
        location: SourceLocation,
    ):
        self.interface_name = interface_name
        self.operation = operation
        self.arguments = arguments
        super().__init__(
            f"A stub for the operation {operation} on the {interface_name} "
            f"mock created in {location} was not found "
            f"(arguments: {arguments!r}).",
            location,
        )


class MockLifetimeError(MockFatalError):
    """A proxy was used after its engine was disposed or collected."""

    def __init__(self, interface_name: str, location: SourceLocation):
        self.interface_name = interface_name
        super().__init__(
            f"The mock of type {interface_name} created in {location} "
            f"was disposed.",
            location,
        )


class VerificationFailure(AssertionError):
    """One or more verification queries were not satisfied."""
