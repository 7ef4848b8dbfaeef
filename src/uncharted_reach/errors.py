"""
Uncharted Reach error types.

Envelope codes synthesized by the transport layer live here as well.
"""

from enum import Enum
from typing import Any, Optional

TRANSPORT_ERROR_CODE = "0"
UNEXPECTED_DATA_CODE = "UNEXPECTED_DATA"
JSON_PARSE_ERROR_CODE = "JSON_PARSE_ERROR"


class ReachError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class NotReadyError(ReachError):
    """Provider not initialized, or a sign-in is already in flight."""

    def __init__(self, message: str = "Not ready or already processing."):
        super().__init__("not_ready", message)


class ProviderErrorKind(str, Enum):
    WRONG_PASSWORD = "wrong_password"
    USER_NOT_FOUND = "user_not_found"
    INVALID_EMAIL = "invalid_email"
    EMAIL_IN_USE = "email_in_use"
    WEAK_PASSWORD = "weak_password"
    OTHER = "other"


class ProviderError(ReachError):
    def __init__(self, kind: ProviderErrorKind, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("provider_error", message, details)
        self.kind = kind


class TransportError(ReachError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__("transport_error", message, {"status_code": status_code})
        self.status_code = status_code
        self.body = body


class UnexpectedResponseError(ReachError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(UNEXPECTED_DATA_CODE, message, details)


class ParseError(ReachError):
    def __init__(self, message: str):
        super().__init__(JSON_PARSE_ERROR_CODE, message)
