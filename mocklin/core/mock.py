"""The mock engine.

A Mock owns a stub registry and an invocation ledger, and exposes a
synthesized proxy (`Mock.target`) that satisfies the mocked interface.
Every call on the proxy funnels into one dispatch callback:

1. If the engine is gone (disposed or garbage-collected), fail fatally.
2. Resolve a stub for the operation and arguments.
3. If none resolves, fail fatally: the test never prepared for this call.
4. Otherwise record the invocation and return the stub's result.

Only calls that resolved a stub are recorded.

The proxy refers to its engine through a weak reference, so holding the
proxy never keeps the engine alive.

Engines are not thread-safe. Registration, calls and verification are
expected to happen on the thread running the test; concurrent use from
several threads leaves the registry and ledger in an undefined state.
"""

import logging
import weakref
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from .errors import MockLifetimeError, UnknownOperationError, UnstubbedCallError
from .ledger import InvocationLedger
from .location import caller_location
from .matchers import Matcher, as_matchers
from .models import (
    Arguments,
    CountPolicy,
    Exactly,
    Implementation,
    Invocation,
    OperationId,
    Range,
    SourceLocation,
    Stub,
    VerificationRequest,
)
from .ports import (
    Dispatch,
    FailureSinkPort,
    InterfaceIntrospectionPort,
    ProxyFactoryPort,
)
from .registry import StubRegistry
from .verification import VerificationEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _make_dispatch(
    engine_ref: "weakref.ref[Mock[Any]]",
    interface_name: str,
    location: SourceLocation,
) -> Dispatch:
    def dispatch(operation: OperationId, arguments: Arguments) -> Any:
        engine = engine_ref()
        if engine is None or engine.disposed:
            logger.critical(
                f"Call to {operation} on disposed {interface_name} mock "
                f"created in {location}"
            )
            raise MockLifetimeError(interface_name, location)
        return engine.dispatch(operation, arguments)

    return dispatch


class Mock(Generic[T]):
    """Stand-in for an interface, with stubbing and verification.

    Args:
        interface: The ABC, Protocol or class to mock.
        introspector: Enumerates the operations of interface.
        proxy_factory: Synthesizes the proxy object.
        sink: Receives verification failures.
        location: Construction site reported in errors. Defaults to the
            calling test code.

    Raises:
        UnsupportedOperationError: If interface has members that cannot
            be intercepted.
    """

    def __init__(
        self,
        interface: type[T],
        *,
        introspector: InterfaceIntrospectionPort,
        proxy_factory: ProxyFactoryPort,
        sink: FailureSinkPort,
        location: SourceLocation | None = None,
    ):
        self.interface = interface
        self.location = location or caller_location()
        self._registry = StubRegistry()
        self._ledger = InvocationLedger()
        self._disposed = False

        interface_name = interface.__name__
        self._verifier = VerificationEngine(
            self._ledger,
            sink,
            lambda operation: (
                f"the operation {operation.name} on mock of type {interface_name}"
            ),
        )

        descriptors = introspector.describe(interface)
        self._operations = {
            descriptor.operation.name: descriptor.operation
            for descriptor in descriptors
        }
        self._handle = proxy_factory.build(
            interface,
            descriptors,
            _make_dispatch(weakref.ref(self), interface_name, self.location),
        )
        self._finalizer = weakref.finalize(self, self._handle.dispose)

        logger.debug(
            f"Created {interface_name} mock with {len(descriptors)} operations "
            f"at {self.location}"
        )

    @property
    def target(self) -> T:
        """The proxy object to hand to the code under test."""
        if self._disposed:
            raise MockLifetimeError(self.interface.__name__, self.location)
        return self._handle.target

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def operations(self) -> tuple[OperationId, ...]:
        return tuple(self._operations.values())

    @property
    def invocations(self) -> tuple[Invocation, ...]:
        return self._ledger.entries()

    @property
    def stubs(self) -> tuple[Stub, ...]:
        """Registered stubs, most recent first."""
        return tuple(self._registry)

    def operation(self, selector: Any) -> OperationId:
        """Resolve a selector to one of this mock's operations.

        Args:
            selector: An OperationId, an operation name, a function of the
                interface (`Greeter.greet`) or a method of the proxy
                (`mock.target.greet`).

        Raises:
            UnknownOperationError: If the interface has no such operation.
        """
        if isinstance(selector, OperationId):
            name = selector.name
        elif isinstance(selector, str):
            name = selector
        else:
            name = getattr(selector, "__name__", repr(selector))

        operation = self._operations.get(name)
        if operation is None or (
            isinstance(selector, OperationId) and selector != operation
        ):
            raise UnknownOperationError(self.interface.__name__, str(selector))
        return operation

    def given(self, selector: Any) -> "GivenBuilder":
        """Start registering a stub for an operation."""
        return GivenBuilder(mock=self, operation=self.operation(selector))

    def register_stub(
        self,
        operation: OperationId,
        matchers: tuple[Matcher, ...] | None,
        implementation: Implementation,
    ) -> Stub:
        return self._registry.register(operation, matchers, implementation)

    def dispatch(self, operation: OperationId, arguments: Arguments) -> Any:
        """Route one proxied call to the stub that answers it.

        Raises:
            UnstubbedCallError: If no registered stub accepts the call.
        """
        stub = self._registry.resolve(operation, arguments)
        if stub is None:
            logger.critical(
                f"No stub for {operation} with arguments {arguments!r} on "
                f"{self.interface.__name__} mock created in {self.location}"
            )
            raise UnstubbedCallError(
                self.interface.__name__, operation, arguments, self.location
            )

        invocation = self._ledger.record(operation, arguments)
        logger.debug(f"Dispatched {invocation} to stub #{stub.sequence}")
        return stub.invoke(arguments)

    def verify(self, selector: Any) -> "VerifyBuilder":
        """Start a targeted verification for an operation."""
        return VerifyBuilder(mock=self, operation=self.operation(selector))

    def evaluate(
        self, request: VerificationRequest, location: SourceLocation | None = None
    ) -> bool:
        """Run a targeted verification, consuming its matches on success."""
        return self._verifier.verify(request, location or caller_location())

    def verify_all(self, location: SourceLocation | None = None) -> bool:
        """Report a failure if any invocation is still unverified."""
        return self._verifier.verify_all(location or caller_location())

    def dispose(self) -> None:
        """Detach the proxy from this engine and release its type.

        Later calls on the proxy fail with MockLifetimeError. Safe to call
        more than once.
        """
        if self._disposed:
            return
        self._disposed = True
        self._finalizer()
        logger.debug(f"Disposed {self.interface.__name__} mock from {self.location}")

    def __enter__(self) -> "Mock[T]":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return f"<Mock of {self.interface.__name__} created at {self.location}>"


@dataclass(frozen=True)
class GivenBuilder:
    """Fluent stub registration: `given(op).with_arguments(...).will_return(x)`."""

    mock: Mock[Any]
    operation: OperationId
    matchers: tuple[Matcher, ...] | None = None

    def with_arguments(self, *matchers: Any) -> "GivenBuilder":
        """Constrain the stub positionally; raw values are matched with eq()."""
        return replace(self, matchers=as_matchers(matchers))

    def will(self, block: Callable[..., Any]) -> Stub:
        """Answer matching calls by calling block with the call's arguments."""
        return self.mock.register_stub(
            self.operation, self.matchers, lambda arguments: block(*arguments)
        )

    def will_return(self, value: Any) -> Stub:
        return self.mock.register_stub(
            self.operation, self.matchers, lambda arguments: value
        )

    def will_raise(self, error: BaseException) -> Stub:
        def implementation(arguments: Arguments) -> Any:
            raise error

        return self.mock.register_stub(self.operation, self.matchers, implementation)


@dataclass(frozen=True)
class VerifyBuilder:
    """Fluent verification: `verify(op).with_arguments(...).was_called()`.

    Every terminal method returns True on success. On failure it reports
    to the mock's failure sink and returns False; it does not raise.
    """

    mock: Mock[Any]
    operation: OperationId
    matchers: tuple[Matcher, ...] | None = None

    def with_arguments(self, *matchers: Any) -> "VerifyBuilder":
        return replace(self, matchers=as_matchers(matchers))

    def was_called(self, at_least: int = 1, at_most: int | None = None) -> bool:
        return self._evaluate(Range(at_least=at_least, at_most=at_most))

    def was_called_exactly(self, times: int) -> bool:
        return self._evaluate(Exactly(times))

    def was_never_called(self) -> bool:
        return self._evaluate(Exactly(0))

    def _evaluate(self, policy: CountPolicy) -> bool:
        request = VerificationRequest(
            operation=self.operation, matchers=self.matchers, policy=policy
        )
        return self.mock.evaluate(request, caller_location())
