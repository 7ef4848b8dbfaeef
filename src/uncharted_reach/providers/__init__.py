from uncharted_reach.providers.base import IdentityProvider, ProviderUser
from uncharted_reach.providers.firebase import FirebaseAuthProvider

__all__ = ["IdentityProvider", "ProviderUser", "FirebaseAuthProvider"]
