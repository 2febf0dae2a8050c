"""Raising failure sink.

Implements FailureSinkPort by raising at the failed verification, for
callers that prefer a plain assertion to deferred reporting.
"""

from mocklin.core.errors import VerificationFailure
from mocklin.core.models import Failure, SourceLocation
from mocklin.core.ports import FailureSinkPort


class RaisingFailureSink(FailureSinkPort):
    """Raises VerificationFailure for every reported failure."""

    def report(self, message: str, location: SourceLocation) -> None:
        raise VerificationFailure(str(Failure(message=message, location=location)))
