"""Failure sink adapters for reporting verification failures.

Implementations support multiple reporting styles:
- Collecting (deferred; surfaced together at the end of a test)
- Logging (report and continue)
- Raising (fail fast at the verification call)
"""

from .collecting import CollectingFailureSink
from .logging_sink import LoggingFailureSink
from .raising import RaisingFailureSink

__all__ = ["CollectingFailureSink", "LoggingFailureSink", "RaisingFailureSink"]
