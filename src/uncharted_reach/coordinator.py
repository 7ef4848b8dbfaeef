"""
Auth coordinator: owns the sign-in session and sequences
provider ready → sign in → token → profile fetch.

The provider's state notification is the source of truth for signed-in /
signed-out. Explicit login/register calls await the provider and may see
that notification arrive before or during their own completion; the
one-fetch-per-session latch keeps the backend call single.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from uncharted_reach.errors import NotReadyError, ProviderError, ProviderErrorKind, ReachError
from uncharted_reach.models.envelope import Envelope
from uncharted_reach.models.events import AuthEvent
from uncharted_reach.models.profile import Profile
from uncharted_reach.models.session import Session, SessionState
from uncharted_reach.player import PlayerAPI
from uncharted_reach.providers.base import IdentityProvider, ProviderUser
from uncharted_reach.validation import validate_credentials, validate_new_email, validate_reset_email

TOKEN_PREVIEW_LENGTH = 20

COMMON_LOGIN_ERRORS = {
    ProviderErrorKind.WRONG_PASSWORD,
    ProviderErrorKind.USER_NOT_FOUND,
    ProviderErrorKind.INVALID_EMAIL,
}
REGISTRATION_ERRORS = {ProviderErrorKind.EMAIL_IN_USE, ProviderErrorKind.WEAK_PASSWORD}

EventHandler = Callable[[str, Any], None]

logger = logging.getLogger(__name__)


def truncate_token(token: str) -> str:
    if len(token) > TOKEN_PREVIEW_LENGTH:
        return token[:TOKEN_PREVIEW_LENGTH] + "..."
    return token


def describe_auth_error(operation: str, error: Exception) -> str:
    """Human-readable message for a failed login/registration."""
    if isinstance(error, ProviderError):
        if error.kind in COMMON_LOGIN_ERRORS:
            logger.warning("Common auth error: %s", error.kind.value)
        elif error.kind in REGISTRATION_ERRORS:
            logger.warning("Registration error: %s", error.kind.value)
        return f"{operation} failed: {error.kind.value} ({error})"
    return f"{operation} failed: {error}"


def describe_api_error(envelope: Envelope[Any]) -> str:
    message = f"Code={envelope.code}, Msg={envelope.message}"
    if envelope.request_id:
        message += f", RequestId={envelope.request_id}"
    return message


def _same_user(a: Optional[ProviderUser], b: Optional[ProviderUser]) -> bool:
    if a is None or b is None:
        return a is b
    return a.uid == b.uid


class AuthCoordinator:
    def __init__(self, provider: IdentityProvider, player: PlayerAPI):
        self._provider = provider
        self._player = player
        self._session = Session()
        self._handlers: list[EventHandler] = []
        self._remove_listener: Optional[Callable[[], None]] = None
        self._ready = False
        self._signing_in = False
        self._fetching_generation: Optional[int] = None

    # -- observation ---------------------------------------------------

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        """Add an event handler. Returns a cleanup function."""
        self._handlers.append(handler)

        def remove() -> None:
            try:
                self._handlers.remove(handler)
            except ValueError:
                pass

        return remove

    def _emit(self, event: str, data: Any = None) -> None:
        for handler in list(self._handlers):
            handler(event, data)

    @property
    def state(self) -> SessionState:
        if not self._ready:
            return SessionState.UNINITIALIZED
        if self._fetching_generation == self._session.generation:
            return SessionState.FETCHING_PROFILE
        if self._signing_in:
            return SessionState.SIGNING_IN
        if self._session.user is not None:
            return SessionState.READY_SIGNED_IN
        return SessionState.READY_SIGNED_OUT

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_signing_in(self) -> bool:
        return self._signing_in

    @property
    def current_user(self) -> Optional[ProviderUser]:
        return self._session.user

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def profile(self) -> Optional[Profile]:
        return self._session.profile

    @property
    def has_fetched_profile(self) -> bool:
        return self._session.has_fetched_profile

    # -- lifecycle -----------------------------------------------------

    async def start(self) -> None:
        """Initialize the provider and begin tracking its auth state."""
        if self._ready:
            await self._on_state_changed()
            return
        try:
            await self._provider.initialize()
        except ReachError as e:
            logger.error("Provider initialization failed: %s", e)
            self._emit(AuthEvent.SIGN_IN_FAILED, f"Initialization failed: {e}")
            return
        self._remove_listener = self._provider.add_state_listener(self._on_state_changed)
        self._ready = True
        logger.info("Provider ready, listening for auth state changes")
        self._emit(AuthEvent.READY)
        await self._on_state_changed()

    def close(self) -> None:
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        self._handlers.clear()
        self._ready = False

    async def _on_state_changed(self) -> None:
        if not self._ready:
            return
        current = self._provider.current_user
        if _same_user(current, self._session.user):
            return
        if current is None:
            logger.info("Auth state changed: signed out")
            self._session.reset()
            self._emit(AuthEvent.SIGN_OUT_COMPLETE)
            return
        self._adopt_user(current)
        logger.info("Auth state changed: signed in as %s (%s)", current.email, current.uid)
        if self._signing_in:
            # the in-flight login/register owns the profile fetch
            return
        await self._fetch_profile()

    def _adopt_user(self, user: ProviderUser) -> None:
        if not _same_user(user, self._session.user) and self._session.user is not None:
            self._session.reset()
        self._session.user = user

    # -- sign in / out -------------------------------------------------

    async def register(self, email: str, password: str) -> Optional[ProviderUser]:
        user = await self._sign_in("Registration", self._provider.create_user_with_email_password, email, password)
        if user is not None and not user.email_verified:
            await self._send_verification(user, "Verification email sent. Please check your inbox.")
        return user

    async def login(self, email: str, password: str) -> Optional[ProviderUser]:
        return await self._sign_in("Login", self._provider.sign_in_with_email_password, email, password)

    async def _sign_in(
        self,
        operation: str,
        call: Callable[[str, str], Awaitable[ProviderUser]],
        email: str,
        password: str,
    ) -> Optional[ProviderUser]:
        invalid = validate_credentials(email, password)
        if invalid:
            self._emit(AuthEvent.SIGN_IN_FAILED, invalid)
            return None
        if not self._ready or self._signing_in:
            self._emit(AuthEvent.SIGN_IN_FAILED, str(NotReadyError()))
            return None

        self._signing_in = True
        self._emit(AuthEvent.SIGN_IN_ATTEMPT)
        logger.info("Attempting %s for [%s]", operation.lower(), email)
        try:
            try:
                user = await call(email, password)
            except ProviderError as e:
                logger.error("%s failed: %s", operation, e)
                self._emit(AuthEvent.SIGN_IN_FAILED, describe_auth_error(operation, e))
                return None
            except Exception as e:
                logger.exception("%s failed unexpectedly", operation)
                self._emit(AuthEvent.SIGN_IN_FAILED, describe_auth_error(operation, e))
                return None
            self._adopt_user(user)
            logger.info("%s succeeded: %s (%s)", operation, user.email, user.uid)
            self._emit(AuthEvent.SIGN_IN_SUCCESS, user)
            await self._fetch_profile()
            return user
        finally:
            self._signing_in = False

    async def sign_out(self) -> None:
        generation = self._session.generation
        if self._ready and self._provider.current_user is not None:
            logger.info("Signing out")
            await self._provider.sign_out()
            if self._session.generation != generation:
                # state listener already reset the session and notified
                return
        else:
            logger.info("Already signed out")
        self._session.reset()
        self._emit(AuthEvent.SIGN_OUT_COMPLETE)

    # -- token + profile -----------------------------------------------

    async def _fetch_profile(self) -> None:
        user = self._session.user
        if user is None:
            logger.error("Cannot get token, user is null")
            self._emit(AuthEvent.SIGN_IN_FAILED, "User session error.")
            return
        if self._session.has_fetched_profile:
            logger.debug("Profile already fetched this session, skipping redundant API call")
            return
        self._session.has_fetched_profile = True
        generation = self._session.generation
        self._fetching_generation = generation
        try:
            await self._call_backend(user, generation)
        finally:
            if self._fetching_generation == generation:
                self._fetching_generation = None

    async def _call_backend(self, user: ProviderUser, generation: int) -> None:
        logger.debug("Requesting ID token")
        try:
            token = await self._provider.get_token(user, force_refresh=True)
        except Exception as e:
            logger.error("Token request failed: %s", e)
            if generation == self._session.generation:
                self._emit(AuthEvent.SIGN_IN_FAILED, f"Failed to get token: {e}")
            return
        if generation != self._session.generation:
            logger.info("Session changed while waiting for a token, dropping it")
            return
        if not token:
            logger.error("Cannot call API, ID token missing")
            self._emit(AuthEvent.API_FAILED, "Cannot call API: ID Token missing.")
            return

        self._session.token = token
        preview = truncate_token(token)
        logger.info("ID token received: %s", preview)
        self._emit(AuthEvent.TOKEN_RECEIVED, preview)

        self._emit(AuthEvent.API_CALLED)
        envelope = await self._player.fetch_profile(token)
        if generation != self._session.generation:
            logger.info("Session changed during profile fetch, dropping response")
            return
        if not envelope.ok:
            message = describe_api_error(envelope)
            logger.error("Profile fetch failed: %s", message)
            self._emit(AuthEvent.API_FAILED, message)
            return
        profile = envelope.data
        self._session.profile = profile
        logger.info("Profile fetched: %s (ID: %s)", profile.display_name, profile.player_id)
        self._emit(AuthEvent.API_SUCCESS, profile)

    # -- account management --------------------------------------------

    async def send_password_reset(self, email: str) -> bool:
        email = email.strip()
        invalid = validate_reset_email(email)
        if invalid:
            self._emit(AuthEvent.ACCOUNT_FAILED, invalid)
            return False
        if not self._ready:
            self._emit(AuthEvent.ACCOUNT_FAILED, str(NotReadyError()))
            return False
        try:
            await self._provider.send_password_reset_email(email)
        except Exception as e:
            logger.error("Password reset failed: %s", e)
            self._emit(AuthEvent.ACCOUNT_FAILED, "Failed to send reset email.")
            return False
        self._emit(AuthEvent.ACCOUNT_NOTICE, "Password reset email sent.")
        return True

    async def change_email(self, new_email: str, current_password: str) -> bool:
        user = self._session.user
        if user is None:
            self._emit(AuthEvent.ACCOUNT_FAILED, "No user logged in.")
            return False
        new_email = new_email.strip()
        invalid = validate_new_email(new_email)
        if invalid:
            self._emit(AuthEvent.ACCOUNT_FAILED, invalid)
            return False

        try:
            await self._provider.reauthenticate(user, user.email, current_password)
        except Exception as e:
            logger.error("Reauthentication failed: %s", e)
            self._emit(AuthEvent.ACCOUNT_FAILED, "Reauthentication failed. Password may be incorrect.")
            return False
        try:
            await self._provider.update_email(user, new_email)
        except Exception as e:
            logger.error("Email update failed: %s", e)
            self._emit(AuthEvent.ACCOUNT_FAILED, "Failed to update email. It may already be in use.")
            return False
        logger.info("Email changed for %s", user.uid)
        return await self._send_verification(user, "Email updated successfully. Verification email sent.")

    async def send_verification(self) -> bool:
        user = self._session.user
        if user is None:
            self._emit(AuthEvent.ACCOUNT_FAILED, "No user logged in.")
            return False
        return await self._send_verification(user, "Verification email sent. Please check your inbox.")

    async def _send_verification(self, user: ProviderUser, notice: str) -> bool:
        try:
            await self._provider.send_email_verification(user)
        except Exception as e:
            logger.error("Verification email failed: %s", e)
            self._emit(AuthEvent.ACCOUNT_FAILED, "Failed to send verification email.")
            return False
        self._emit(AuthEvent.ACCOUNT_NOTICE, notice)
        return True
