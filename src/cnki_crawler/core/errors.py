"""Error taxonomy for crawler failures.

Fatal errors stop a run before any record is processed. Record errors are
caught by the batch orchestrator, logged against the record and turned into
"leave the record unchanged".
"""

from typing import Optional


class ErrorCode:
    PLATFORM_UNSUPPORTED = "platform_unsupported"
    SESSION_LAUNCH = "session_launch_failure"
    NAVIGATION_TIMEOUT = "navigation_timeout"
    NO_RESULTS = "no_results_found"
    EXTRACTION = "extraction_failure"
    INVALID_RECORD = "invalid_record"
    INTERNAL = "internal_error"


class CrawlerError(Exception):
    """Base class for all crawler errors."""

    code = ErrorCode.INTERNAL
    fatal = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PlatformUnsupported(CrawlerError):
    """The host OS has no known browser install location."""

    code = ErrorCode.PLATFORM_UNSUPPORTED
    fatal = True

    def __init__(self, system: str):
        super().__init__(f"Cannot run action. {system or 'unknown platform'} is not supported.")
        self.system = system


class SessionLaunchFailure(CrawlerError):
    """The browser process could not be started."""

    code = ErrorCode.SESSION_LAUNCH
    fatal = True


class RecordError(CrawlerError):
    """A failure scoped to one record (or one result page)."""


class NavigationTimeout(RecordError):
    """A selector or navigation wait ran out of time."""

    code = ErrorCode.NAVIGATION_TIMEOUT

    def __init__(self, step: str, selector: str, timeout: Optional[int] = None):
        detail = f" after {timeout} ms" if timeout is not None else ""
        super().__init__(f"[{step}] timed out waiting for {selector!r}{detail}")
        self.step = step
        self.selector = selector
        self.timeout = timeout


class NoResultsFound(RecordError):
    """The search returned an empty result grid."""

    code = ErrorCode.NO_RESULTS


class ExtractionFailure(RecordError):
    """The page rendered but the expected metadata could not be read."""

    code = ErrorCode.EXTRACTION


class InvalidRecord(RecordError):
    """The input record lacks the fields needed to search for it."""

    code = ErrorCode.INVALID_RECORD


def error_code_for(exc: BaseException) -> str:
    """Return the stable error code for any exception."""
    if isinstance(exc, CrawlerError):
        return exc.code
    return ErrorCode.INTERNAL


__all__ = [
    "ErrorCode",
    "CrawlerError",
    "PlatformUnsupported",
    "SessionLaunchFailure",
    "RecordError",
    "NavigationTimeout",
    "NoResultsFound",
    "ExtractionFailure",
    "InvalidRecord",
    "error_code_for",
]
