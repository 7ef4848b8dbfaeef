import asyncio
import json
from typing import Any, Callable, Optional

import httpx
import pytest

from uncharted_reach.coordinator import AuthCoordinator
from uncharted_reach.errors import ProviderError, ProviderErrorKind
from uncharted_reach.player import PlayerAPI
from uncharted_reach.providers.base import IdentityProvider, ProviderUser
from uncharted_reach.transport.http import HttpClient

BASE_URL = "http://reach.test"

PROFILE_BODY = {
    "status": "SUCCESS",
    "message": "Profile retrieved",
    "data": {
        "playerId": 42,
        "firebaseUid": "uid-pilot",
        "email": "pilot@example.com",
        "displayName": "Nova",
        "resources": [
            {"type": "WATER", "amount": 120},
            {"type": "ASTERITE", "amount": 7},
        ],
        "createdAt": "2025-03-01T10:00:00Z",
        "updatedAt": "2025-03-02T11:30:00Z",
    },
    "code": "PLAYER_PROFILE_OK",
    "requestId": "req-123",
    "timestamp": "2025-03-02T11:30:01Z",
}


class FakeProvider(IdentityProvider):
    """In-memory provider. Each sign-in fires `notifications` state callbacks."""

    def __init__(self, notifications: int = 1):
        super().__init__()
        self.accounts: dict[str, tuple[str, ProviderUser]] = {}
        self.user: Optional[ProviderUser] = None
        self.notifications = notifications
        self.calls: list[str] = []
        self.failures: dict[str, Exception] = {}
        self.gate: Optional[asyncio.Event] = None
        self.token_gate: Optional[asyncio.Event] = None
        self.initialized = False

    @property
    def current_user(self) -> Optional[ProviderUser]:
        return self.user

    def add_account(self, email: str, password: str, verified: bool = True) -> ProviderUser:
        user = ProviderUser(uid=f"uid-{email.split('@')[0]}", email=email, email_verified=verified)
        self.accounts[email] = (password, user)
        return user

    async def fire_state_changed(self) -> None:
        await self._notify_state_changed()

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures.pop(name)

    async def _signed_in(self, user: ProviderUser) -> ProviderUser:
        self.user = user
        for _ in range(self.notifications):
            await self._notify_state_changed()
        return user

    async def initialize(self) -> None:
        self.initialized = True

    async def create_user_with_email_password(self, email: str, password: str) -> ProviderUser:
        self._record("create_user")
        if email in self.accounts:
            raise ProviderError(ProviderErrorKind.EMAIL_IN_USE, "EMAIL_EXISTS")
        user = self.add_account(email, password, verified=False)
        return await self._signed_in(user)

    async def sign_in_with_email_password(self, email: str, password: str) -> ProviderUser:
        self._record("sign_in")
        if self.gate is not None:
            await self.gate.wait()
        if email not in self.accounts:
            raise ProviderError(ProviderErrorKind.USER_NOT_FOUND, "EMAIL_NOT_FOUND")
        stored, user = self.accounts[email]
        if stored != password:
            raise ProviderError(ProviderErrorKind.WRONG_PASSWORD, "INVALID_PASSWORD")
        return await self._signed_in(user)

    async def sign_out(self) -> None:
        self._record("sign_out")
        self.user = None
        await self._notify_state_changed()

    async def get_token(self, user: ProviderUser, force_refresh: bool = False) -> str:
        self._record("get_token")
        if self.token_gate is not None:
            await self.token_gate.wait()
        return f"token-{user.uid}-0123456789abcdef"

    async def send_email_verification(self, user: ProviderUser) -> None:
        self._record("send_email_verification")

    async def send_password_reset_email(self, email: str) -> None:
        self._record("send_password_reset_email")

    async def reauthenticate(self, user: ProviderUser, email: str, password: str) -> None:
        self._record("reauthenticate")
        if self.accounts[email][0] != password:
            raise ProviderError(ProviderErrorKind.WRONG_PASSWORD, "INVALID_PASSWORD")

    async def update_email(self, user: ProviderUser, new_email: str) -> None:
        self._record("update_email")
        password, _ = self.accounts.pop(user.email)
        user.email = new_email
        user.email_verified = False
        self.accounts[new_email] = (password, user)


class RecordingBackend:
    """httpx.MockTransport handler that serves one canned response and records requests."""

    def __init__(self, status_code: int = 200, body: Any = PROFILE_BODY):
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond()

    def _respond(self) -> httpx.Response:
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, content=json.dumps(self.body).encode())
        return httpx.Response(self.status_code, content=(self.body or "").encode())

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class GatedBackend(RecordingBackend):
    """Holds every request until the test sets its entry in `gates`."""

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.gates: list[asyncio.Event] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return self._respond()


async def settle(condition: Callable[[], bool], attempts: int = 200) -> None:
    """Yield to the event loop until `condition` holds."""
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


class EventLog:
    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def __call__(self, event: str, data: Any) -> None:
        self.events.append((event, data))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def data(self, event: str) -> list[Any]:
        return [data for name, data in self.events if name == event]


@pytest.fixture
def provider() -> FakeProvider:
    p = FakeProvider()
    p.add_account("pilot@example.com", "hunter22")
    return p


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def make_coordinator() -> Callable[..., tuple[AuthCoordinator, EventLog]]:
    def make(provider: IdentityProvider, backend: RecordingBackend) -> tuple[AuthCoordinator, EventLog]:
        http = HttpClient(BASE_URL, transport=backend.transport())
        coordinator = AuthCoordinator(provider, PlayerAPI(http))
        log = EventLog()
        coordinator.add_event_handler(log)
        return coordinator, log

    return make
