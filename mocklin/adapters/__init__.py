"""Adapters for the Mocklin mock engine.

This package provides the implementations of the core port interfaces
that the engine consumes.

Adapter Organization:

- introspection/: Enumerate interface operations (inspect signatures)
- proxy/: Synthesize proxy types that forward calls to the engine
- failure/: Report verification failures (collect, log, raise)
"""
