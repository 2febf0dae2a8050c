"""Port interfaces for the Mocklin mock engine.

These abstract base classes define the boundaries between the engine
and the collaborators it consumes. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **InterfaceIntrospectionPort**: enumerate an interface's operations
2. **ProxyFactoryPort**: synthesize an object that funnels every
   operation into a single dispatch callback
3. **FailureSinkPort**: receive verification failures
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

from .models import (
    Arguments,
    OperationDescriptor,
    OperationId,
    ProxyHandle,
    SourceLocation,
)

Dispatch: TypeAlias = Callable[[OperationId, Arguments], Any]


class InterfaceIntrospectionPort(ABC):
    """Port for enumerating the operations of an interface type."""

    @abstractmethod
    def describe(self, interface: type) -> list[OperationDescriptor]:
        """List the operations a proxy for interface must implement.

        Args:
            interface: The abstract interface or class to mock.

        Returns:
            Operation descriptors in a stable order. Operation names are
            unique within the list.

        Raises:
            UnsupportedOperationError: If some member of the interface
                cannot be intercepted.
        """


class ProxyFactoryPort(ABC):
    """Port for synthesizing proxies.

    Implementations must route every described operation into dispatch,
    passing the operation id and the call's arguments in declaration
    order, and return whatever dispatch returns.
    """

    @abstractmethod
    def build(
        self,
        interface: type,
        descriptors: Sequence[OperationDescriptor],
        dispatch: Dispatch,
    ) -> ProxyHandle:
        """Create a proxy instance satisfying interface.

        Args:
            interface: The type the proxy must satisfy.
            descriptors: Operations to intercept.
            dispatch: Callback receiving every intercepted call. The
                factory must not keep anything else alive through it.

        Returns:
            ProxyHandle with the instance and its disposal hook. Calling
            the hook more than once must be harmless.
        """


class FailureSinkPort(ABC):
    """Port for reporting verification failures.

    The engine treats reporting as fire-and-forget: it does not inspect a
    result and does not change its own behavior after reporting.
    """

    @abstractmethod
    def report(self, message: str, location: SourceLocation) -> None:
        """Record a human-readable failure tied to a test source location."""
