"""Proxy adapters for synthesizing interface stand-ins.

Implementations:
- TypeProxyFactory: derives a subclass of the interface at runtime
"""

from .type_factory import TypeProxyFactory

__all__ = ["TypeProxyFactory"]
