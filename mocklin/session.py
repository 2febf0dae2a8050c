"""Composition root for the Mocklin mock library.

This module is the ONLY location that imports both the core engine and
concrete adapter implementations. All wiring of dependencies happens
here, creating a clear entry point for tests.

Module Structure:
- Logging configuration
- Failure sink selection from settings
- MockSession: one per test, owns every engine it creates
"""

import json
import logging
import sys
from typing import Any, TypeVar

from mocklin.adapters.failure import (
    CollectingFailureSink,
    LoggingFailureSink,
    RaisingFailureSink,
)
from mocklin.adapters.introspection import SignatureIntrospector
from mocklin.adapters.proxy import TypeProxyFactory
from mocklin.config import Settings, load_settings
from mocklin.core.callback import Callback
from mocklin.core.errors import MocklinError
from mocklin.core.mock import Mock
from mocklin.core.models import Failure
from mocklin.core.ports import (
    FailureSinkPort,
    InterfaceIntrospectionPort,
    ProxyFactoryPort,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_HANDLER_NAME = "mocklin"


class JsonFormatter(logging.Formatter):
    """Renders each record as one JSON object per line.

    Messages embed argument reprs, which may contain quotes, so the
    fields are serialized rather than interpolated into a template.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure the mocklin logger.

    Sets the level of the package logger and installs a single stderr
    handler for it. Records still propagate, so pytest's log capture
    sees them.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    # Map string level to logging constant
    level = getattr(logging, log_level, logging.WARNING)

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    package_logger = logging.getLogger("mocklin")
    package_logger.setLevel(level)

    handler = next(
        (h for h in package_logger.handlers if h.get_name() == _HANDLER_NAME),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        package_logger.addHandler(handler)
    handler.setFormatter(formatter)


def build_failure_sink(failure_mode: str) -> FailureSinkPort:
    """Instantiate the failure sink selected by configuration.

    Raises:
        ValueError: If failure_mode is not recognized.
    """
    if failure_mode == "collect":
        return CollectingFailureSink()
    if failure_mode == "log":
        return LoggingFailureSink()
    if failure_mode == "raise":
        return RaisingFailureSink()
    raise ValueError(f"Unsupported failure mode: {failure_mode}")


class MockSession:
    """Creates mocks and callbacks for one test and tears them down.

    Every engine created by a session shares the session's failure sink,
    introspector and proxy factory. Closing the session disposes every
    mock it created.

    Example:
        with MockSession() as mocks:
            greeter = mocks.mock(Greeter)
            greeter.given(Greeter.greet).with_arguments("Bob").will_return("hi")
            assert greeter.target.greet("Bob") == "hi"
            greeter.verify(Greeter.greet).was_called_exactly(1)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        sink: FailureSinkPort | None = None,
        introspector: InterfaceIntrospectionPort | None = None,
        proxy_factory: ProxyFactoryPort | None = None,
    ):
        self.settings = settings or load_settings()
        configure_logging(self.settings.log_level, self.settings.log_format)

        self.sink = sink or build_failure_sink(self.settings.failure_mode)
        self.introspector = introspector or SignatureIntrospector(
            max_arity=self.settings.max_arity
        )
        self.proxy_factory = proxy_factory or TypeProxyFactory()

        self._mocks: list[Mock[Any]] = []
        self._callbacks: list[Callback] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def mocks(self) -> tuple[Mock[Any], ...]:
        return tuple(self._mocks)

    @property
    def callbacks(self) -> tuple[Callback, ...]:
        return tuple(self._callbacks)

    @property
    def failures(self) -> list[Failure]:
        """Failures collected so far; empty unless the sink collects."""
        if isinstance(self.sink, CollectingFailureSink):
            return list(self.sink.failures)
        return []

    def mock(self, interface: type[T]) -> Mock[T]:
        """Create a mock of interface owned by this session."""
        self._ensure_open()
        mock = Mock(
            interface,
            introspector=self.introspector,
            proxy_factory=self.proxy_factory,
            sink=self.sink,
        )
        self._mocks.append(mock)
        return mock

    def callback(self, name: str = "callback") -> Callback:
        """Create a recording callback owned by this session."""
        self._ensure_open()
        callback = Callback(self.sink, name=name)
        self._callbacks.append(callback)
        return callback

    def verify_all(self) -> bool:
        """Run blanket verification on every live engine of the session.

        Every engine is checked even after one fails, so all unverified
        invocations are reported.
        """
        results = [mock.verify_all() for mock in self._mocks if not mock.disposed]
        results += [callback.verify_all() for callback in self._callbacks]
        return all(results)

    def raise_for_failures(self) -> None:
        """Raise collected failures as one VerificationFailure.

        Does nothing when the sink reports failures some other way.
        """
        if isinstance(self.sink, CollectingFailureSink):
            self.sink.raise_for_failures()

    def close(self) -> None:
        """Dispose every mock created by this session. Idempotent."""
        if self._closed:
            return
        self._closed = True
        for mock in self._mocks:
            mock.dispose()
        logger.debug(
            f"Closed session with {len(self._mocks)} mocks and "
            f"{len(self._callbacks)} callbacks"
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise MocklinError("Cannot create mocks from a closed session")

    def __enter__(self) -> "MockSession":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
        if exc_type is None:
            self.raise_for_failures()
