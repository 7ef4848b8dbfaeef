"""
Session models: the coordinator's in-memory sign-in state.
"""

from enum import Enum
from typing import Any, Optional

from uncharted_reach.models.profile import Profile


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY_SIGNED_OUT = "ready_signed_out"
    SIGNING_IN = "signing_in"
    READY_SIGNED_IN = "ready_signed_in"
    FETCHING_PROFILE = "fetching_profile"


class Session:
    __slots__ = ("user", "token", "has_fetched_profile", "profile", "generation")

    def __init__(self) -> None:
        self.user: Optional[Any] = None
        self.token: Optional[str] = None
        self.has_fetched_profile = False
        self.profile: Optional[Profile] = None
        self.generation = 0

    def reset(self) -> None:
        """Clear the session. Work started under the previous generation is stale."""
        self.user = None
        self.token = None
        self.has_fetched_profile = False
        self.profile = None
        self.generation += 1

    def __repr__(self) -> str:
        uid = getattr(self.user, "uid", None)
        return f"Session(user={uid!r}, has_fetched_profile={self.has_fetched_profile!r})"
