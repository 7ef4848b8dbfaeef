"""
REST HTTP client for the Uncharted Reach backend.

Remote failures never raise out of get_envelope(): they come back as FAIL
envelopes so callers only ever branch on `envelope.ok`.
"""

import json
import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from uncharted_reach.errors import (
    JSON_PARSE_ERROR_CODE,
    TRANSPORT_ERROR_CODE,
    UNEXPECTED_DATA_CODE,
    ParseError,
    TransportError,
    UnexpectedResponseError,
)
from uncharted_reach.models.envelope import ApiStatus, Envelope, EnvelopeHeader

DEFAULT_BASE_URL = "http://localhost:8080"

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "uncharted-reach/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _auth_headers(token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def get_envelope(self, path: str, token: str, data_model: type[M]) -> Envelope[M]:
        """GET `path` with a bearer token and parse the body as Envelope[data_model]."""
        if not token:
            raise ValueError("A bearer token is required")
        envelope_type = Envelope[data_model]  # type: ignore[valid-type]
        logger.debug("GET %s%s", self._base_url, path)
        try:
            resp = await self._send(path, token)
            return self._parse_success(resp, envelope_type)
        except TransportError as e:
            logger.error("API error: %s | status=%s", e, e.status_code)
            return self._error_envelope(e, envelope_type)
        except ParseError as e:
            logger.error("API success but JSON parsing failed: %s", e)
            return envelope_type.fail(JSON_PARSE_ERROR_CODE, str(e))
        except UnexpectedResponseError as e:
            header: EnvelopeHeader = (e.details or {}).get("header") or EnvelopeHeader()
            logger.error(
                "API success but unexpected envelope: status=%s code=%s message=%s",
                header.status, header.code, header.message,
            )
            return envelope_type.fail(
                header.code or UNEXPECTED_DATA_CODE,
                header.message or str(e),
                status=header.api_status(),
                request_id=header.request_id,
                timestamp=header.timestamp,
            )

    async def _send(self, path: str, token: str) -> httpx.Response:
        try:
            resp = await self._client.get(path, headers=self._auth_headers(token))
        except httpx.TransportError as e:
            raise TransportError(str(e) or type(e).__name__) from e
        if resp.status_code >= 400:
            raise TransportError(
                f"HTTP {resp.status_code} {resp.reason_phrase}".strip(), resp.status_code, resp.text,
            )
        logger.debug("API success: status=%s", resp.status_code)
        return resp

    @staticmethod
    def _decode(text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as e:
            raise ParseError(f"JSON parsing failed: {e}") from e

    def _parse_success(self, resp: httpx.Response, envelope_type: type[Envelope[Any]]) -> Envelope[Any]:
        raw = self._decode(resp.text)
        try:
            envelope = envelope_type.model_validate(raw)
        except ValidationError as e:
            raise self._unexpected(raw, resp.status_code, f"invalid envelope ({e.error_count()} errors)") from e
        if envelope.status != ApiStatus.SUCCESS or envelope.data is None:
            raise self._unexpected(raw, resp.status_code, "non-SUCCESS status")
        return envelope

    @staticmethod
    def _unexpected(raw: Any, status_code: int, reason: str) -> UnexpectedResponseError:
        header = EnvelopeHeader()
        if isinstance(raw, dict):
            try:
                header = EnvelopeHeader.model_validate(raw)
            except ValidationError:
                logger.debug("No envelope metadata recoverable from response")
        return UnexpectedResponseError(
            f"API success (code {status_code}) but received unexpected data format or {reason}.",
            {"header": header},
        )

    @staticmethod
    def _error_envelope(err: TransportError, envelope_type: type[Envelope[Any]]) -> Envelope[Any]:
        body = err.body
        code = str(err.status_code) if err.status_code is not None else TRANSPORT_ERROR_CODE
        if body:
            try:
                header = EnvelopeHeader.model_validate(json.loads(body))
            except (ValueError, ValidationError):
                logger.debug("Error body is not an envelope: %.200s", body)
            else:
                return envelope_type.fail(
                    header.code or code,
                    header.message or str(err),
                    status=header.api_status(),
                    request_id=header.request_id,
                    timestamp=header.timestamp,
                )
        return envelope_type.fail(code, str(err))

    async def close(self) -> None:
        await self._client.aclose()
