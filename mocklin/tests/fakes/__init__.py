"""Fake implementations of core ports for testing.

These in-memory implementations allow the engine to be tested without
runtime type synthesis:

- FakeFailureSinkPort: Captured failure reports for assertion
- FakeInterfaceIntrospectionPort: Canned operation descriptors
- FakeProxyFactoryPort: Hand-written proxy calling dispatch directly
"""

from .failure_sink import FakeFailureSinkPort
from .introspection import FakeInterfaceIntrospectionPort
from .proxy import FakeProxy, FakeProxyFactoryPort

__all__ = [
    "FakeFailureSinkPort",
    "FakeInterfaceIntrospectionPort",
    "FakeProxy",
    "FakeProxyFactoryPort",
]
