"""
Firebase Authentication over its REST API.

Endpoints:
  {identity_url}/accounts:signUp | signInWithPassword | sendOobCode | update | lookup
  {token_url}/token  (refresh_token grant)

Point identity_url/token_url at the Auth emulator for local development.
"""

import logging
from typing import Any, Optional

import httpx

from uncharted_reach.errors import ProviderError, ProviderErrorKind
from uncharted_reach.providers.base import IdentityProvider, ProviderUser

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1"

ERROR_KINDS = {
    "EMAIL_EXISTS": ProviderErrorKind.EMAIL_IN_USE,
    "EMAIL_NOT_FOUND": ProviderErrorKind.USER_NOT_FOUND,
    "USER_NOT_FOUND": ProviderErrorKind.USER_NOT_FOUND,
    "INVALID_PASSWORD": ProviderErrorKind.WRONG_PASSWORD,
    "INVALID_LOGIN_CREDENTIALS": ProviderErrorKind.WRONG_PASSWORD,
    "INVALID_EMAIL": ProviderErrorKind.INVALID_EMAIL,
    "WEAK_PASSWORD": ProviderErrorKind.WEAK_PASSWORD,
}

logger = logging.getLogger(__name__)


def classify_error(message: str) -> ProviderErrorKind:
    """Map a Firebase error message ("WEAK_PASSWORD : Password should be ...") to a kind."""
    key = message.split(":", 1)[0].strip().split(" ", 1)[0]
    return ERROR_KINDS.get(key, ProviderErrorKind.OTHER)


class FirebaseAuthProvider(IdentityProvider):
    def __init__(
        self,
        api_key: str,
        refresh_token: Optional[str] = None,
        identity_url: str = IDENTITY_TOOLKIT_URL,
        token_url: str = SECURE_TOKEN_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        if not api_key:
            raise ValueError("A Firebase web API key is required")
        self._api_key = api_key
        self._identity_url = identity_url.rstrip("/")
        self._token_url = token_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._user: Optional[ProviderUser] = None
        self._id_token: Optional[str] = None
        self._refresh_token = refresh_token

    @property
    def current_user(self) -> Optional[ProviderUser]:
        return self._user

    @property
    def refresh_token(self) -> Optional[str]:
        """Long-lived token to persist so the next run can restore the session."""
        return self._refresh_token

    async def _post(self, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = await self._client.post(url, params={"key": self._api_key}, **kwargs)
        except httpx.HTTPError as e:
            raise ProviderError(ProviderErrorKind.OTHER, f"Auth request failed: {e}") from e
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code >= 400:
            error = body.get("error") if isinstance(body, dict) else None
            message = (error or {}).get("message") or f"HTTP {resp.status_code}"
            raise ProviderError(classify_error(message), message, details=error)
        return body if isinstance(body, dict) else {}

    async def _identity(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._post(f"{self._identity_url}/accounts:{method}", json=payload)

    def _store_tokens(self, body: dict[str, Any]) -> None:
        self._id_token = body.get("idToken") or body.get("id_token") or self._id_token
        self._refresh_token = body.get("refreshToken") or body.get("refresh_token") or self._refresh_token

    async def _lookup(self, id_token: str) -> ProviderUser:
        body = await self._identity("lookup", {"idToken": id_token})
        users = body.get("users") or []
        if not users:
            raise ProviderError(ProviderErrorKind.USER_NOT_FOUND, "USER_NOT_FOUND")
        info = users[0]
        return ProviderUser(
            uid=info.get("localId", ""),
            email=info.get("email", ""),
            email_verified=bool(info.get("emailVerified", False)),
        )

    async def _refresh(self) -> str:
        if not self._refresh_token:
            raise ProviderError(ProviderErrorKind.OTHER, "No refresh token available")
        body = await self._post(
            f"{self._token_url}/token",
            data={"grant_type": "refresh_token", "refresh_token": self._refresh_token},
        )
        self._store_tokens(body)
        if not self._id_token:
            raise ProviderError(ProviderErrorKind.OTHER, "Token refresh returned no id_token")
        return self._id_token

    async def initialize(self) -> None:
        if not self._refresh_token or self._user is not None:
            return
        try:
            id_token = await self._refresh()
            self._user = await self._lookup(id_token)
            logger.info("Restored session for %s", self._user.email)
        except ProviderError as e:
            logger.warning("Could not restore saved session: %s", e)
            self._user = None
            self._id_token = None
            self._refresh_token = None

    async def _password_sign_in(self, method: str, email: str, password: str) -> ProviderUser:
        body = await self._identity(method, {"email": email, "password": password, "returnSecureToken": True})
        user = ProviderUser(
            uid=body.get("localId", ""),
            email=body.get("email", email),
            email_verified=bool(body.get("emailVerified", False)),
        )
        id_token = body.get("idToken")
        if method == "signInWithPassword" and id_token:
            # signInWithPassword does not report emailVerified
            user = await self._lookup(id_token)
        # nothing is kept until the whole sign-in succeeded
        self._store_tokens(body)
        self._user = user
        return user

    async def create_user_with_email_password(self, email: str, password: str) -> ProviderUser:
        user = await self._password_sign_in("signUp", email, password)
        await self._notify_state_changed()
        return user

    async def sign_in_with_email_password(self, email: str, password: str) -> ProviderUser:
        user = await self._password_sign_in("signInWithPassword", email, password)
        await self._notify_state_changed()
        return user

    async def sign_out(self) -> None:
        self._user = None
        self._id_token = None
        self._refresh_token = None
        await self._notify_state_changed()

    async def get_token(self, user: ProviderUser, force_refresh: bool = False) -> str:
        self._require_current(user)
        if force_refresh or not self._id_token:
            return await self._refresh()
        return self._id_token

    async def send_email_verification(self, user: ProviderUser) -> None:
        self._require_current(user)
        token = await self.get_token(user)
        await self._identity("sendOobCode", {"requestType": "VERIFY_EMAIL", "idToken": token})

    async def send_password_reset_email(self, email: str) -> None:
        await self._identity("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    async def reauthenticate(self, user: ProviderUser, email: str, password: str) -> None:
        self._require_current(user)
        body = await self._identity(
            "signInWithPassword", {"email": email, "password": password, "returnSecureToken": True},
        )
        if body.get("localId") != user.uid:
            raise ProviderError(ProviderErrorKind.OTHER, "Credentials belong to a different account")
        self._store_tokens(body)

    async def update_email(self, user: ProviderUser, new_email: str) -> None:
        self._require_current(user)
        token = await self.get_token(user)
        body = await self._identity("update", {"idToken": token, "email": new_email, "returnSecureToken": True})
        self._store_tokens(body)
        user.email = body.get("email", new_email)
        user.email_verified = False

    def _require_current(self, user: ProviderUser) -> None:
        if self._user is None or self._user.uid != user.uid:
            raise ProviderError(ProviderErrorKind.USER_NOT_FOUND, "User is not signed in")

    async def close(self) -> None:
        await self._client.aclose()
