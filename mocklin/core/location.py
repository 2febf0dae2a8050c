"""Locate the test code that called into Mocklin."""

import inspect
from pathlib import Path

from .models import SourceLocation

_PACKAGE_DIR = Path(__file__).resolve().parent.parent
_TESTS_DIR = _PACKAGE_DIR / "tests"


def _is_internal(filename: str) -> bool:
    path = Path(filename).resolve()
    if path.is_relative_to(_TESTS_DIR):
        return False
    return path.is_relative_to(_PACKAGE_DIR)


def caller_location() -> SourceLocation:
    """Return the innermost stack frame outside the mocklin package."""
    frame = inspect.currentframe()
    try:
        while frame is not None and _is_internal(frame.f_code.co_filename):
            frame = frame.f_back
        if frame is None:
            return SourceLocation("<unknown>", 0)
        return SourceLocation(frame.f_code.co_filename, frame.f_lineno)
    finally:
        del frame
