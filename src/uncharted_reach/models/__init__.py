from uncharted_reach.models.envelope import ApiStatus, Envelope, EnvelopeHeader
from uncharted_reach.models.events import AuthEvent
from uncharted_reach.models.profile import Profile, Resource, ResourceType
from uncharted_reach.models.session import Session, SessionState

__all__ = [
    "ApiStatus",
    "AuthEvent",
    "Envelope",
    "EnvelopeHeader",
    "Profile",
    "Resource",
    "ResourceType",
    "Session",
    "SessionState",
]
