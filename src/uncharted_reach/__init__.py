"""
uncharted-reach: player account client for Uncharted Reach.

Firebase Auth sign-in plus the game backend's player API.
"""

from uncharted_reach.client import AsyncUnchartedReach
from uncharted_reach.coordinator import AuthCoordinator
from uncharted_reach.errors import (
    NotReadyError,
    ParseError,
    ProviderError,
    ProviderErrorKind,
    ReachError,
    TransportError,
    UnexpectedResponseError,
)
from uncharted_reach.models.envelope import ApiStatus, Envelope
from uncharted_reach.models.events import AuthEvent
from uncharted_reach.models.profile import Profile, Resource, ResourceType
from uncharted_reach.models.session import SessionState
from uncharted_reach.player import PlayerAPI
from uncharted_reach.presentation import AuthPanel
from uncharted_reach.providers.base import IdentityProvider, ProviderUser
from uncharted_reach.providers.firebase import FirebaseAuthProvider

__version__ = "0.1.0"
__all__ = [
    "AsyncUnchartedReach",
    "AuthCoordinator",
    "AuthPanel",
    "PlayerAPI",
    "IdentityProvider",
    "ProviderUser",
    "FirebaseAuthProvider",
    "ApiStatus",
    "Envelope",
    "Profile",
    "Resource",
    "ResourceType",
    "SessionState",
    "AuthEvent",
    "ReachError",
    "NotReadyError",
    "ProviderError",
    "ProviderErrorKind",
    "TransportError",
    "UnexpectedResponseError",
    "ParseError",
]
