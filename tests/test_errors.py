import pytest

from cnki_crawler.core.errors import (
    CrawlerError,
    ErrorCode,
    ExtractionFailure,
    InvalidRecord,
    NavigationTimeout,
    NoResultsFound,
    PlatformUnsupported,
    RecordError,
    SessionLaunchFailure,
    error_code_for,
)


@pytest.mark.parametrize(
    "error, code",
    [
        (PlatformUnsupported("SunOS"), ErrorCode.PLATFORM_UNSUPPORTED),
        (SessionLaunchFailure("boom"), ErrorCode.SESSION_LAUNCH),
        (NavigationTimeout("open_first_result", "#gridTable", 5000), ErrorCode.NAVIGATION_TIMEOUT),
        (NoResultsFound("none"), ErrorCode.NO_RESULTS),
        (ExtractionFailure("missing"), ErrorCode.EXTRACTION),
        (InvalidRecord("no title"), ErrorCode.INVALID_RECORD),
        (KeyError("x"), ErrorCode.INTERNAL),
    ],
)
def test_error_codes(error, code) -> None:
    assert error_code_for(error) == code


def test_only_session_errors_are_fatal() -> None:
    assert PlatformUnsupported("SunOS").fatal
    assert SessionLaunchFailure("boom").fatal
    for error in (NavigationTimeout("s", "#x"), NoResultsFound("n"), ExtractionFailure("e"), InvalidRecord("i")):
        assert isinstance(error, RecordError)
        assert not error.fatal


def test_navigation_timeout_message_names_step_and_selector() -> None:
    error = NavigationTimeout("fill_and_submit", "input.btn-search", 30000)
    assert str(error) == "[fill_and_submit] timed out waiting for 'input.btn-search' after 30000 ms"
    assert isinstance(error, CrawlerError)


def test_unsupported_platform_message() -> None:
    assert "SunOS is not supported" in str(PlatformUnsupported("SunOS"))
