"""
Backend response envelope.

Every `/api/v1` endpoint wraps its payload as
{ status, message, data, code, requestId, timestamp }.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

T = TypeVar("T")


class ApiStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"
    ERROR = "ERROR"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _normalize_status(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


class Envelope(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    status: ApiStatus
    message: str = ""
    data: Optional[T] = None
    code: str = ""
    request_id: Optional[str] = Field(default=None, alias="requestId")
    timestamp: str = Field(default_factory=utc_timestamp)

    @field_validator("status", mode="before")
    @classmethod
    def _status_case(cls, value: Any) -> Any:
        return _normalize_status(value)

    @model_validator(mode="after")
    def _data_iff_success(self) -> "Envelope[T]":
        if (self.status == ApiStatus.SUCCESS) != (self.data is not None):
            raise ValueError("data must be present exactly when status is SUCCESS")
        return self

    @property
    def ok(self) -> bool:
        return self.status == ApiStatus.SUCCESS

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        status: ApiStatus = ApiStatus.FAIL,
        request_id: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> "Envelope[T]":
        """Build a non-success envelope. `data` is always None."""
        if status == ApiStatus.SUCCESS:
            status = ApiStatus.FAIL
        return cls(
            status=status,
            message=message,
            code=code,
            request_id=request_id,
            timestamp=timestamp or utc_timestamp(),
        )


class EnvelopeHeader(BaseModel):
    """Lenient view of an envelope: whatever metadata survived a failed parse."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: Optional[str] = None
    message: Optional[str] = None
    code: Optional[str] = None
    request_id: Optional[str] = Field(default=None, alias="requestId")
    timestamp: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_case(cls, value: Any) -> Any:
        return _normalize_status(value)

    def api_status(self) -> ApiStatus:
        try:
            status = ApiStatus(self.status)
        except ValueError:
            return ApiStatus.FAIL
        return ApiStatus.FAIL if status == ApiStatus.SUCCESS else status
