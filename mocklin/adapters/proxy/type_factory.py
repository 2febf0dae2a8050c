"""Runtime proxy synthesis.

Implements ProxyFactoryPort by deriving a new subclass of the interface
with type(), overriding every described operation with a forwarder that
binds the call against the declared signature and hands the resulting
positional argument tuple to the dispatch callback.
"""

import functools
import inspect
import logging
import uuid
from collections.abc import Sequence
from typing import Any

from mocklin.core.errors import UnsupportedOperationError
from mocklin.core.models import Arguments, OperationDescriptor, ProxyHandle
from mocklin.core.ports import Dispatch, ProxyFactoryPort

logger = logging.getLogger(__name__)


def _bind(
    descriptor: OperationDescriptor, args: Arguments, kwargs: dict[str, Any]
) -> Arguments:
    signature = descriptor.signature
    if signature is None:
        if kwargs:
            raise TypeError(
                f"{descriptor.operation.name}() does not accept keyword arguments"
            )
        return args
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()
    return tuple(bound.arguments.values())


def _forwarder(
    type_name: str, descriptor: OperationDescriptor, dispatch: Dispatch
) -> Any:
    operation = descriptor.operation

    if descriptor.is_async:

        async def forward(self: Any, *args: Any, **kwargs: Any) -> Any:
            result = dispatch(operation, _bind(descriptor, args, kwargs))
            if inspect.isawaitable(result):
                result = await result
            return result

    else:

        def forward(self: Any, *args: Any, **kwargs: Any) -> Any:
            return dispatch(operation, _bind(descriptor, args, kwargs))

    forward.__name__ = operation.name
    forward.__qualname__ = f"{type_name}.{operation.name}"
    if descriptor.signature is not None:
        receiver = inspect.Parameter("self", inspect.Parameter.POSITIONAL_ONLY)
        forward.__signature__ = descriptor.signature.replace(  # type: ignore[attr-defined]
            parameters=[receiver, *descriptor.signature.parameters.values()]
        )
    return forward


class TypeProxyFactory(ProxyFactoryPort):
    """Builds proxies as runtime subclasses of the mocked interface.

    Each proxy gets its own uniquely named type. The factory tracks the
    types it has built until their handles are disposed.
    """

    def __init__(self) -> None:
        self._live_types: dict[str, type] = {}

    @property
    def live_types(self) -> tuple[str, ...]:
        """Names of synthesized types whose handles are not yet disposed."""
        return tuple(self._live_types)

    def build(
        self,
        interface: type,
        descriptors: Sequence[OperationDescriptor],
        dispatch: Dispatch,
    ) -> ProxyHandle:
        """Derive a proxy type from interface and instantiate it.

        The instance is created without running the interface's __init__.

        Raises:
            UnsupportedOperationError: If no instantiable subclass of
                interface can be derived.
        """
        type_name = f"Mocklin<{interface.__name__}>_{uuid.uuid4().hex}"
        namespace: dict[str, Any] = {
            "__module__": interface.__module__,
            "__qualname__": type_name,
        }
        for descriptor in descriptors:
            namespace[descriptor.operation.name] = _forwarder(
                type_name, descriptor, dispatch
            )

        try:
            proxy_type = type(interface)(type_name, (interface,), namespace)
            target = object.__new__(proxy_type)
        except TypeError as e:
            raise UnsupportedOperationError(
                f"Cannot build a proxy for {interface.__name__}: {e}"
            ) from e

        self._live_types[type_name] = proxy_type
        logger.debug(f"Built proxy type {type_name}")
        return ProxyHandle(
            target=target, dispose=functools.partial(self._dispose, type_name)
        )

    def _dispose(self, type_name: str) -> None:
        if self._live_types.pop(type_name, None) is not None:
            logger.debug(f"Disposed proxy type {type_name}")
