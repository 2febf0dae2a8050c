"""Signature-based interface introspection.

Implements InterfaceIntrospectionPort using the inspect module. The
operations of an interface are its public instance methods, inherited
ones included, plus any abstract method regardless of its name. Static
methods, class methods, properties and plain attributes are left alone
unless they are abstract, in which case no proxy could satisfy the
interface and introspection fails.
"""

import inspect
import logging
from typing import Any

from mocklin.core.errors import UnsupportedOperationError
from mocklin.core.models import OperationDescriptor, OperationId
from mocklin.core.ports import InterfaceIntrospectionPort

logger = logging.getLogger(__name__)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class SignatureIntrospector(InterfaceIntrospectionPort):
    """Enumerates operations from class members and their signatures."""

    def __init__(self, max_arity: int | None = None):
        """Initialize the introspector.

        Args:
            max_arity: Reject operations declaring more parameters than
                this. None accepts any fixed arity.
        """
        self.max_arity = max_arity

    def describe(self, interface: type) -> list[OperationDescriptor]:
        """List the interceptable operations of interface.

        Raises:
            TypeError: If interface is not a class.
            UnsupportedOperationError: If an operation is variadic, exceeds
                max_arity, or an abstract member is not an instance method.
        """
        if not inspect.isclass(interface):
            raise TypeError(f"Expected a class to mock, got {interface!r}")

        abstract = getattr(interface, "__abstractmethods__", frozenset())
        members: dict[str, Any] = {}
        for klass in reversed(interface.__mro__):
            if klass is object:
                continue
            members.update(vars(klass))

        descriptors = []
        for name, member in members.items():
            if name.startswith("_") and name not in abstract:
                continue
            if not inspect.isfunction(member):
                if name in abstract:
                    raise UnsupportedOperationError(
                        f"{interface.__name__}.{name} is abstract but is not "
                        f"an instance method"
                    )
                continue
            descriptors.append(self._describe(interface, name, member))

        logger.debug(
            f"Introspected {interface.__name__}: "
            f"{', '.join(str(d.operation) for d in descriptors) or 'no operations'}"
        )
        return descriptors

    def _describe(
        self, interface: type, name: str, function: Any
    ) -> OperationDescriptor:
        signature = inspect.signature(function)
        # drop the receiver
        parameters = list(signature.parameters.values())[1:]

        variadic = [p.name for p in parameters if p.kind in _VARIADIC]
        if variadic:
            raise UnsupportedOperationError(
                f"{interface.__name__}.{name} declares variadic parameters "
                f"({', '.join(variadic)}) and cannot be dispatched positionally"
            )
        if self.max_arity is not None and len(parameters) > self.max_arity:
            raise UnsupportedOperationError(
                f"{interface.__name__}.{name} declares {len(parameters)} "
                f"parameters; at most {self.max_arity} are supported"
            )

        return OperationDescriptor(
            operation=OperationId(name, len(parameters)),
            parameters=tuple(p.name for p in parameters),
            is_async=inspect.iscoroutinefunction(function),
            signature=signature.replace(parameters=parameters),
        )
