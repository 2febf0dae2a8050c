"""Unit tests for the Mock engine and its dispatch contract.

The proxy here is the hand-written FakeProxy, so these tests exercise the
engine independently of runtime type synthesis.
"""

import gc
import logging

import pytest

from mocklin.core.errors import (
    MockFatalError,
    MockLifetimeError,
    UnknownOperationError,
    UnstubbedCallError,
)
from mocklin.core.matchers import anything, eq
from mocklin.core.mock import Mock
from mocklin.core.models import OperationId, SourceLocation
from mocklin.tests.fakes import (
    FakeFailureSinkPort,
    FakeInterfaceIntrospectionPort,
    FakeProxyFactoryPort,
)
from mocklin.tests.fakes.introspection import descriptor
from mocklin.tests.interfaces import Calculator, Greeter


@pytest.fixture
def sink() -> FakeFailureSinkPort:
    return FakeFailureSinkPort()


@pytest.fixture
def factory() -> FakeProxyFactoryPort:
    return FakeProxyFactoryPort()


@pytest.fixture
def greeter(sink: FakeFailureSinkPort, factory: FakeProxyFactoryPort) -> Mock:
    return Mock(
        Greeter,
        introspector=FakeInterfaceIntrospectionPort(
            [descriptor("greet", "name"), descriptor("farewell", "name", "formal")]
        ),
        proxy_factory=factory,
        sink=sink,
    )


@pytest.fixture
def calculator(sink: FakeFailureSinkPort, factory: FakeProxyFactoryPort) -> Mock:
    return Mock(
        Calculator,
        introspector=FakeInterfaceIntrospectionPort(
            [descriptor("sum", "a", "b"), descriptor("reset")]
        ),
        proxy_factory=factory,
        sink=sink,
    )


class TestConstruction:
    def test_records_construction_site(self, greeter: Mock) -> None:
        """The location points at test code, not at mocklin internals."""
        assert greeter.location.filename == __file__

    def test_explicit_location(self, sink: FakeFailureSinkPort) -> None:
        location = SourceLocation("elsewhere.py", 3)
        mock = Mock(
            Greeter,
            introspector=FakeInterfaceIntrospectionPort([]),
            proxy_factory=FakeProxyFactoryPort(),
            sink=sink,
            location=location,
        )
        assert mock.location == location

    def test_operations_come_from_introspection(self, greeter: Mock) -> None:
        assert greeter.operations == (
            OperationId("greet", 1),
            OperationId("farewell", 2),
        )


class TestOperationSelection:
    """Test the selectors accepted by given() and verify()."""

    def test_select_by_interface_function(self, greeter: Mock) -> None:
        assert greeter.operation(Greeter.greet) == OperationId("greet", 1)

    def test_select_by_name(self, greeter: Mock) -> None:
        assert greeter.operation("farewell") == OperationId("farewell", 2)

    def test_select_by_operation_id(self, greeter: Mock) -> None:
        assert greeter.operation(OperationId("greet", 1)) == OperationId("greet", 1)

    def test_unknown_name(self, greeter: Mock) -> None:
        with pytest.raises(UnknownOperationError, match="no operation named 'wave'"):
            greeter.operation("wave")

    def test_operation_id_with_wrong_arity(self, greeter: Mock) -> None:
        with pytest.raises(UnknownOperationError):
            greeter.operation(OperationId("greet", 3))

    def test_unknown_operation_is_a_value_error(self, greeter: Mock) -> None:
        with pytest.raises(ValueError):
            greeter.given(Calculator.sum)


class TestDispatch:
    """Test the dispatch contract behind every proxied call."""

    def test_greet_scenario(self, greeter: Mock, sink: FakeFailureSinkPort) -> None:
        """Stub, call, verify once, then a repeated verify fails."""
        greeter.given(Greeter.greet).with_arguments(eq("Bob")).will_return("hi")

        assert greeter.target.call("greet", "Bob") == "hi"
        assert len(greeter.invocations) == 1

        assert greeter.verify(Greeter.greet).with_arguments(eq("Bob")).was_called_exactly(1)
        assert greeter.invocations[0].verified

        assert not greeter.verify(Greeter.greet).with_arguments(eq("Bob")).was_called_exactly(1)
        assert sink.get_last_message() == (
            "Expected the operation greet on mock of type Greeter to have been "
            "invoked exactly 1 times. Was invoked 0 times."
        )

    def test_unmatched_call_is_fatal_and_not_recorded(self, greeter: Mock) -> None:
        greeter.given(Greeter.greet).with_arguments(eq("Bob")).will_return("hi")
        greeter.target.call("greet", "Bob")

        with pytest.raises(UnstubbedCallError) as excinfo:
            greeter.target.call("greet", "Alice")

        assert len(greeter.invocations) == 1
        assert excinfo.value.operation == OperationId("greet", 1)
        assert excinfo.value.arguments == ("Alice",)
        assert excinfo.value.location == greeter.location
        assert str(greeter.location) in str(excinfo.value)

    def test_unstubbed_operation_is_fatal(self, greeter: Mock) -> None:
        with pytest.raises(UnstubbedCallError, match="farewell/2"):
            greeter.target.call("farewell", "Bob", False)
        assert greeter.invocations == ()

    def test_fatal_error_escapes_broad_exception_handlers(self, greeter: Mock) -> None:
        def code_under_test() -> str:
            try:
                return greeter.target.call("greet", "Bob")
            except Exception:
                return "swallowed"

        with pytest.raises(MockFatalError):
            code_under_test()

    def test_unstubbed_call_is_logged_critical(
        self, greeter: Mock, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.CRITICAL, logger="mocklin"):
            with pytest.raises(UnstubbedCallError):
                greeter.target.call("greet", "Bob")

        assert any(record.levelno == logging.CRITICAL for record in caplog.records)

    def test_sum_scenario_most_recent_stub_wins(self, calculator: Mock) -> None:
        calculator.given(Calculator.sum).will_return(0)
        calculator.given(Calculator.sum).with_arguments(eq(1)).will_return(99)

        assert calculator.target.call("sum", 1, 2) == 99
        assert calculator.target.call("sum", 3, 2) == 0

    def test_will_receives_call_arguments(self, calculator: Mock) -> None:
        calculator.given(Calculator.sum).will(lambda a, b: a + b)

        assert calculator.target.call("sum", 2, 3) == 5

    def test_will_raise(self, calculator: Mock) -> None:
        calculator.given(Calculator.reset).will_raise(RuntimeError("nope"))

        with pytest.raises(RuntimeError, match="nope"):
            calculator.target.call("reset")
        # the stub resolved, so the call was recorded
        assert len(calculator.invocations) == 1

    def test_invocation_recorded_before_implementation_runs(
        self, calculator: Mock
    ) -> None:
        seen: list[int] = []
        calculator.given(Calculator.reset).will(
            lambda: seen.append(len(calculator.invocations))
        )

        calculator.target.call("reset")
        assert seen == [1]

    def test_single_matcher_leaves_second_argument_free(
        self, calculator: Mock
    ) -> None:
        calculator.given(Calculator.sum).with_arguments(1).will_return(7)

        assert calculator.target.call("sum", 1, 100) == 7
        assert calculator.target.call("sum", 1, -5) == 7

    def test_type_checked_matcher_does_not_accept_float(self, calculator: Mock) -> None:
        calculator.given(Calculator.sum).with_arguments(eq(5)).will_return(1)

        with pytest.raises(UnstubbedCallError):
            calculator.target.call("sum", 5.0, 0)

    def test_stubs_listed_most_recent_first(self, calculator: Mock) -> None:
        first = calculator.given(Calculator.sum).will_return(0)
        second = calculator.given(Calculator.reset).will_return(None)

        assert calculator.stubs == (second, first)


class TestVerifyBuilder:
    """Test targeted verification through the fluent builder."""

    def test_was_called_default_requires_one_call(
        self, greeter: Mock, sink: FakeFailureSinkPort
    ) -> None:
        greeter.given(Greeter.greet).will_return("hi")

        assert not greeter.verify(Greeter.greet).was_called()
        greeter.target.call("greet", "Bob")
        greeter.target.call("greet", "Alice")
        assert greeter.verify(Greeter.greet).was_called()
        assert len(sink.reports) == 1

    def test_was_called_with_bounds(self, greeter: Mock, sink: FakeFailureSinkPort) -> None:
        greeter.given(Greeter.greet).will_return("hi")
        for name in ("a", "b", "c"):
            greeter.target.call("greet", name)

        assert not greeter.verify(Greeter.greet).was_called(at_least=1, at_most=2)
        assert "at least 1 and at most 2 times. Was invoked 3 times." in sink.get_last_message()
        assert greeter.verify(Greeter.greet).was_called(at_least=2, at_most=3)

    def test_was_never_called(self, greeter: Mock) -> None:
        greeter.given(Greeter.greet).will_return("hi")
        greeter.target.call("greet", "Bob")

        assert greeter.verify(Greeter.farewell).was_never_called()
        assert not greeter.verify(Greeter.greet).was_never_called()

    def test_verification_is_per_operation(self, greeter: Mock) -> None:
        greeter.given(Greeter.greet).will_return("hi")
        greeter.given(Greeter.farewell).will_return("bye")
        greeter.target.call("greet", "Bob")
        greeter.target.call("farewell", "Bob", True)

        assert greeter.verify(Greeter.farewell).with_arguments("Bob", True).was_called_exactly(1)
        assert not greeter.invocations[0].verified
        assert greeter.invocations[1].verified

    def test_failure_location_is_the_verify_call(
        self, greeter: Mock, sink: FakeFailureSinkPort
    ) -> None:
        greeter.verify(Greeter.greet).was_called()
        _, location = sink.reports[0]
        assert location.filename == __file__

    def test_with_arguments_accepts_matchers_and_raw_values(self, greeter: Mock) -> None:
        greeter.given(Greeter.farewell).will_return("bye")
        greeter.target.call("farewell", "Bob", True)

        assert greeter.verify(Greeter.farewell).with_arguments(anything(), True).was_called()


class TestBlanketVerify:
    def test_verify_all_reports_unverified(
        self, greeter: Mock, sink: FakeFailureSinkPort
    ) -> None:
        greeter.given(Greeter.greet).will_return("hi")
        greeter.target.call("greet", "Bob")

        assert greeter.verify_all() is False
        assert sink.get_last_message() == "1 invocations were unverified: [greet('Bob')]"

    def test_verify_all_after_targeted_verification(self, greeter: Mock) -> None:
        greeter.given(Greeter.greet).will_return("hi")
        greeter.target.call("greet", "Bob")
        greeter.verify(Greeter.greet).was_called_exactly(1)

        assert greeter.verify_all() is True


class TestLifetime:
    """Test engine disposal and the weak back-reference from the proxy."""

    def test_dispose_runs_proxy_disposal_hook_once(
        self, greeter: Mock, factory: FakeProxyFactoryPort
    ) -> None:
        greeter.dispose()
        greeter.dispose()

        assert greeter.disposed
        assert factory.dispose_count == 1

    def test_call_after_dispose_is_fatal(self, greeter: Mock) -> None:
        greeter.given(Greeter.greet).will_return("hi")
        proxy = greeter.target
        greeter.dispose()

        with pytest.raises(MockLifetimeError) as excinfo:
            proxy.call("greet", "Bob")
        assert excinfo.value.location == greeter.location
        assert greeter.invocations == ()

    def test_target_after_dispose_is_fatal(self, greeter: Mock) -> None:
        greeter.dispose()
        with pytest.raises(MockLifetimeError):
            greeter.target

    def test_context_manager_disposes(
        self, sink: FakeFailureSinkPort, factory: FakeProxyFactoryPort
    ) -> None:
        with Mock(
            Greeter,
            introspector=FakeInterfaceIntrospectionPort([descriptor("greet", "name")]),
            proxy_factory=factory,
            sink=sink,
        ) as mock:
            proxy = mock.target

        assert mock.disposed
        with pytest.raises(MockLifetimeError):
            proxy.call("greet", "Bob")

    def test_proxy_does_not_keep_engine_alive(
        self, sink: FakeFailureSinkPort, factory: FakeProxyFactoryPort
    ) -> None:
        mock = Mock(
            Greeter,
            introspector=FakeInterfaceIntrospectionPort([descriptor("greet", "name")]),
            proxy_factory=factory,
            sink=sink,
        )
        mock.given(Greeter.greet).will_return("hi")
        proxy = mock.target

        del mock
        gc.collect()

        assert factory.dispose_count == 1
        with pytest.raises(MockLifetimeError, match="Greeter"):
            proxy.call("greet", "Bob")
