"""Basic unit tests for the uncharted-reach package."""

from uncharted_reach import (
    AsyncUnchartedReach,
    AuthCoordinator,
    AuthEvent,
    NotReadyError,
    ParseError,
    ProviderError,
    ProviderErrorKind,
    ReachError,
    TransportError,
    UnexpectedResponseError,
    __version__,
)
from uncharted_reach.coordinator import describe_auth_error, truncate_token


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert AsyncUnchartedReach is not None
    assert AuthCoordinator is not None


def test_error_hierarchy():
    for cls in (NotReadyError, ProviderError, TransportError, UnexpectedResponseError, ParseError):
        assert issubclass(cls, ReachError)


def test_error_attributes():
    err = ReachError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    assert str(NotReadyError()) == "Not ready or already processing."
    assert ParseError("bad").code == "JSON_PARSE_ERROR"
    assert TransportError("down", 503).status_code == 503

    provider_err = ProviderError(ProviderErrorKind.WEAK_PASSWORD, "WEAK_PASSWORD", details={"code": 400})
    assert provider_err.kind == ProviderErrorKind.WEAK_PASSWORD
    assert provider_err.details == {"code": 400}


def test_event_constants():
    assert AuthEvent.SIGN_IN_FAILED == "auth:sign_in_failed"
    assert AuthEvent.API_SUCCESS == "api:success"


def test_truncate_token():
    assert truncate_token("short") == "short"
    assert truncate_token("a" * 25) == "a" * 20 + "..."


def test_describe_auth_error():
    err = ProviderError(ProviderErrorKind.USER_NOT_FOUND, "EMAIL_NOT_FOUND")
    assert describe_auth_error("Login", err) == "Login failed: user_not_found (EMAIL_NOT_FOUND)"
    assert describe_auth_error("Login", RuntimeError("x")) == "Login failed: x"
