"""
AsyncUnchartedReach: wires transport, provider and coordinator together.
"""

from typing import Any, Optional

import httpx

from uncharted_reach.coordinator import AuthCoordinator
from uncharted_reach.player import PlayerAPI
from uncharted_reach.providers.base import IdentityProvider
from uncharted_reach.providers.firebase import FirebaseAuthProvider
from uncharted_reach.transport.http import DEFAULT_BASE_URL, HttpClient


class AsyncUnchartedReach:
    """Async client. Pass `provider` to use something other than Firebase."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        refresh_token: Optional[str] = None,
        provider: Optional[IdentityProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = HttpClient(base_url=base_url, transport=transport)
        self.player = PlayerAPI(self._http)
        if provider is None:
            if not api_key:
                raise ValueError("api_key is required when no provider is given")
            provider = FirebaseAuthProvider(api_key, refresh_token=refresh_token)
        self.provider = provider
        self.auth = AuthCoordinator(self.provider, self.player)

    @property
    def refresh_token(self) -> Optional[str]:
        return getattr(self.provider, "refresh_token", None)

    async def start(self) -> None:
        await self.auth.start()

    async def close(self) -> None:
        self.auth.close()
        await self._http.close()
        if isinstance(self.provider, FirebaseAuthProvider):
            await self.provider.close()

    async def __aenter__(self) -> "AsyncUnchartedReach":
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
