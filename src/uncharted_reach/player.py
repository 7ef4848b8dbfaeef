"""
Player REST API.
"""

from uncharted_reach.models.envelope import Envelope
from uncharted_reach.models.profile import Profile
from uncharted_reach.transport.http import HttpClient

PROFILE_PATH = "/api/v1/player/profile"


class PlayerAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def fetch_profile(self, token: str) -> Envelope[Profile]:
        """Fetch the signed-in player's profile. Failures come back as FAIL envelopes."""
        return await self._http.get_envelope(PROFILE_PATH, token, Profile)
