"""Core engine for the Mocklin mock library.

This package contains zero external dependencies: stubs, the invocation
ledger, verification and the proxy dispatch contract. Introspection,
proxy synthesis and failure reporting are handled by the adapters package.
"""

from .callback import Callback
from .errors import (
    MockFatalError,
    MockLifetimeError,
    MocklinError,
    UnknownOperationError,
    UnstubbedCallError,
    UnsupportedOperationError,
    VerificationFailure,
)
from .matchers import Matcher, anything, eq, instance_of, optional
from .mock import GivenBuilder, Mock, VerifyBuilder
from .models import (
    Exactly,
    Failure,
    Invocation,
    OperationDescriptor,
    OperationId,
    Range,
    SourceLocation,
    Stub,
    VerificationRequest,
)

__all__ = [
    "Callback",
    "Exactly",
    "Failure",
    "GivenBuilder",
    "Invocation",
    "Matcher",
    "Mock",
    "MockFatalError",
    "MockLifetimeError",
    "MocklinError",
    "OperationDescriptor",
    "OperationId",
    "Range",
    "SourceLocation",
    "Stub",
    "UnknownOperationError",
    "UnstubbedCallError",
    "UnsupportedOperationError",
    "VerificationFailure",
    "VerificationRequest",
    "VerifyBuilder",
    "anything",
    "eq",
    "instance_of",
    "optional",
]
