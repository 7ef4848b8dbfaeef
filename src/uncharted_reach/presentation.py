"""
AuthPanel: view-model for the login screen.

Maps coordinator events to one status line and control enablement. Holds no
business logic: every click is validated and executed by AuthCoordinator.
"""

from typing import Any, Callable, Optional

from uncharted_reach.coordinator import AuthCoordinator
from uncharted_reach.models.events import AuthEvent
from uncharted_reach.models.profile import Profile

PanelListener = Callable[["AuthPanel"], None]


def format_profile(profile: Profile) -> str:
    lines = [f"Profile Fetched: {profile.display_name} (ID: {profile.player_id})"]
    lines.extend(f"  {r.type.value}: {r.amount}" for r in profile.resources)
    return "\n".join(lines)


class AuthPanel:
    def __init__(self, coordinator: AuthCoordinator):
        self._coordinator = coordinator
        self._listeners: list[PanelListener] = []
        self._unbind: Optional[Callable[[], None]] = None

        self.email = ""
        self.password = ""
        self.new_email = ""

        self.status_text = ""
        self.is_error = False
        self.interactable = False
        self.change_email_visible = False

    # -- wiring --------------------------------------------------------

    def bind(self) -> None:
        if self._unbind is None:
            self._unbind = self._coordinator.add_event_handler(self._on_event)
        if self._coordinator.is_ready:
            self._update("Ready. Enter Email/Password.", interactable=True)
        else:
            self._update("Initializing...", interactable=False)

    def close(self) -> None:
        if self._unbind is not None:
            self._unbind()
            self._unbind = None
        self._listeners.clear()

    def add_listener(self, listener: PanelListener) -> Callable[[], None]:
        """Called with the panel after every visible change. Returns a cleanup function."""
        self._listeners.append(listener)

        def remove() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return remove

    @property
    def profile(self) -> Optional[Profile]:
        return self._coordinator.profile

    # -- enablement ----------------------------------------------------

    @property
    def _usable(self) -> bool:
        return self.interactable and self._coordinator.is_ready and not self._coordinator.is_signing_in

    @property
    def login_enabled(self) -> bool:
        return self._usable and self._coordinator.current_user is None

    @property
    def register_enabled(self) -> bool:
        return self.login_enabled

    @property
    def logout_enabled(self) -> bool:
        return self._usable and self._coordinator.current_user is not None

    @property
    def forgot_password_enabled(self) -> bool:
        return self._usable

    @property
    def change_email_enabled(self) -> bool:
        return self._usable and self.change_email_visible

    # -- button handlers -----------------------------------------------

    async def click_login(self) -> bool:
        return await self._coordinator.login(self.email.strip(), self.password) is not None

    async def click_register(self) -> bool:
        return await self._coordinator.register(self.email.strip(), self.password) is not None

    async def click_logout(self) -> None:
        if not self._coordinator.is_ready:
            return
        await self._coordinator.sign_out()

    async def click_forgot_password(self) -> bool:
        return await self._coordinator.send_password_reset(self.email.strip())

    async def click_change_email(self) -> bool:
        return await self._coordinator.change_email(self.new_email.strip(), self.password)

    async def click_verify(self) -> bool:
        return await self._coordinator.send_verification()

    # -- event mapping -------------------------------------------------

    def _on_event(self, event: str, data: Any) -> None:
        if event == AuthEvent.READY:
            self._update("Ready. Enter Email/Password.", interactable=True)
        elif event == AuthEvent.SIGN_IN_ATTEMPT:
            self._update("Processing...", interactable=False)
        elif event == AuthEvent.SIGN_IN_SUCCESS:
            if data.email_verified:
                self.change_email_visible = False
                self._update(f"Signed In: {data.email}", interactable=True)
            else:
                self.change_email_visible = True
                self._update("Signed In (Unverified). Please verify your email.", interactable=True)
        elif event == AuthEvent.SIGN_IN_FAILED:
            self._update(f"Error: {data}", interactable=True, error=True)
        elif event == AuthEvent.TOKEN_RECEIVED:
            self._update(f"Token Received! ({data}) Calling API...")
        elif event == AuthEvent.SIGN_OUT_COMPLETE:
            self.email = ""
            self.password = ""
            self.change_email_visible = False
            self._update("Signed Out. Enter Email/Password.", interactable=True)
        elif event == AuthEvent.API_CALLED:
            self._update("Calling Backend API...")
        elif event == AuthEvent.API_SUCCESS:
            self._update(f"API Success:\n{format_profile(data)}")
        elif event == AuthEvent.API_FAILED:
            self._update(f"API Error: {data}", error=True)
        elif event == AuthEvent.ACCOUNT_NOTICE:
            self._update(str(data))
        elif event == AuthEvent.ACCOUNT_FAILED:
            self._update(str(data), error=True)

    def _update(self, text: str, interactable: Optional[bool] = None, error: bool = False) -> None:
        self.status_text = text
        self.is_error = error
        if interactable is not None:
            self.interactable = interactable
        for listener in list(self._listeners):
            listener(self)
