"""Introspection adapters for enumerating interface operations.

Implementations:
- SignatureIntrospector: reads functions and signatures with inspect
"""

from .signature import SignatureIntrospector

__all__ = ["SignatureIntrospector"]
