"""Mocklin: interface mocks with stubbing and verification.

Typical use inside a pytest test, through the `mocklin` fixture:

    def test_greeting(mocklin):
        greeter = mocklin.mock(Greeter)
        greeter.given(Greeter.greet).with_arguments("Bob").will_return("hi")

        assert greeter.target.greet("Bob") == "hi"

        greeter.verify(Greeter.greet).with_arguments("Bob").was_called_exactly(1)
"""

from mocklin.config import Settings, load_settings
from mocklin.core import (
    Callback,
    Exactly,
    Failure,
    Invocation,
    Matcher,
    Mock,
    MockFatalError,
    MockLifetimeError,
    MocklinError,
    OperationId,
    Range,
    SourceLocation,
    UnknownOperationError,
    UnstubbedCallError,
    UnsupportedOperationError,
    VerificationFailure,
    anything,
    eq,
    instance_of,
    optional,
)
from mocklin.session import MockSession

__all__ = [
    "Callback",
    "Exactly",
    "Failure",
    "Invocation",
    "Matcher",
    "Mock",
    "MockFatalError",
    "MockLifetimeError",
    "MockSession",
    "MocklinError",
    "OperationId",
    "Range",
    "Settings",
    "SourceLocation",
    "UnknownOperationError",
    "UnstubbedCallError",
    "UnsupportedOperationError",
    "VerificationFailure",
    "anything",
    "eq",
    "instance_of",
    "load_settings",
    "optional",
]
