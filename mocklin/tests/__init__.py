"""Test suite for the Mocklin mock library.

Organized into three categories:

1. core/: Unit tests for the engine
   - No adapters involved, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for introspection, proxy synthesis and failure sinks

3. fakes/: Port implementations for testing
   - In-memory implementations of the introspection, proxy and sink ports
   - Used by core unit tests
"""
