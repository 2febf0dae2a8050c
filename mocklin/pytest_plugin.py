"""pytest integration for Mocklin.

Registered through the `pytest11` entry point. Provides:

- `mocklin_settings`: session-scoped Settings loaded from the environment
- `mocklin`: a MockSession per test, closed at teardown

Verification failures collected during a test are raised once the test
body returns, so every failed verification in a test is reported
together and the test is marked failed rather than errored. Failures
still pending when the `mocklin` fixture is torn down (reported from
another fixture's teardown, or left behind by a test body that raised)
are raised there and reported as a teardown error.
"""

from collections.abc import Generator, Iterator

import pytest

from mocklin.config import Settings, load_settings
from mocklin.session import MockSession

session_key = pytest.StashKey[MockSession]()


@pytest.fixture(scope="session")
def mocklin_settings() -> Settings:
    """Settings shared by every mocklin session in the test run."""
    return load_settings()


@pytest.fixture
def mocklin(
    request: pytest.FixtureRequest, mocklin_settings: Settings
) -> Iterator[MockSession]:
    """A MockSession for the current test."""
    session = MockSession(mocklin_settings)
    request.node.stash[session_key] = session
    try:
        yield session
    finally:
        session.close()
    # failures reported after the test body, e.g. from fixture teardown or
    # before the body raised, surface as a teardown error
    session.raise_for_failures()


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Generator[None, None, None]:
    result = yield
    session = item.stash.get(session_key, None)
    if session is not None:
        if session.settings.verify_on_teardown:
            session.verify_all()
        session.raise_for_failures()
    return result
