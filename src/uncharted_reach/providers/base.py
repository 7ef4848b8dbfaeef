"""Base classes for identity providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional


@dataclass
class ProviderUser:
    """Identity handle for the signed-in account, as reported by the provider."""

    uid: str
    email: str = ""
    email_verified: bool = False


StateListener = Callable[[], Awaitable[None]]


class IdentityProvider(ABC):
    """Authentication capability the coordinator drives.

    Implementations call ``_notify_state_changed()`` whenever ``current_user``
    changes identity (sign-in, sign-out). Listeners read ``current_user``
    themselves; a notification may repeat for the same user.
    """

    def __init__(self) -> None:
        self._state_listeners: list[StateListener] = []

    @property
    @abstractmethod
    def current_user(self) -> Optional[ProviderUser]:
        """The signed-in user, or None."""

    def add_state_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register a state-change listener. Returns a cleanup function."""
        self._state_listeners.append(listener)

        def remove() -> None:
            try:
                self._state_listeners.remove(listener)
            except ValueError:
                pass

        return remove

    async def _notify_state_changed(self) -> None:
        for listener in list(self._state_listeners):
            await listener()

    async def initialize(self) -> None:
        """Prepare the provider, restoring a persisted session when there is one."""

    @abstractmethod
    async def create_user_with_email_password(self, email: str, password: str) -> ProviderUser:
        ...

    @abstractmethod
    async def sign_in_with_email_password(self, email: str, password: str) -> ProviderUser:
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...

    @abstractmethod
    async def get_token(self, user: ProviderUser, force_refresh: bool = False) -> str:
        ...

    @abstractmethod
    async def send_email_verification(self, user: ProviderUser) -> None:
        ...

    @abstractmethod
    async def send_password_reset_email(self, email: str) -> None:
        ...

    @abstractmethod
    async def reauthenticate(self, user: ProviderUser, email: str, password: str) -> None:
        ...

    @abstractmethod
    async def update_email(self, user: ProviderUser, new_email: str) -> None:
        ...
