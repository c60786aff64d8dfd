"""Client-side session: who is signed in and where they may go.

``SessionContext`` owns the signed-in user for one browser session. It keeps
the persisted token and user in step through ``SessionStore`` and is told by
``ApiClient`` when the backend answers 401. Navigation and notifications are
injected so the same object drives Streamlit pages and unit tests.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from api_client import ApiError, ResponseShapeError, UnauthorizedError, unwrap

logger = logging.getLogger(__name__)

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_USER = "ROLE_USER"

LOGIN_PAGE = "app.py"
DASHBOARD_PAGE = "pages/1_Dashboard.py"
ADMIN_DASHBOARD_PAGE = "pages/20_Admin_Dashboard.py"
UNAUTHORIZED_PAGE = "pages/99_Unauthorized.py"

LOADING = "loading"
AUTHORIZED = "authorized"
REDIRECT_LOGIN = "redirect_login"
REDIRECT_UNAUTHORIZED = "redirect_unauthorized"

DEFAULT_TIMEZONE = "UTC"
DEFAULT_CURRENCY = "USD"


@dataclass
class SessionUser:
    id: Optional[int]
    username: str
    email: str
    roles: List[str] = field(default_factory=list)
    timezone: Optional[str] = None
    currency: Optional[str] = None
    profile_image: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "roles": list(self.roles),
            "timezone": self.timezone,
            "currency": self.currency,
            "profileImage": self.profile_image,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionUser":
        email = data["email"]
        if not isinstance(email, str) or not email:
            raise ValueError("stored user has no email")
        return cls(
            id=data.get("id"),
            username=data.get("username") or "",
            email=email,
            roles=list(data.get("roles") or []),
            timezone=data.get("timezone") or DEFAULT_TIMEZONE,
            currency=data.get("currency") or DEFAULT_CURRENCY,
            profile_image=data.get("profileImage"),
        )


class SessionContext:
    def __init__(self, client, store, navigate, notify):
        self.client = client
        self.store = store
        self.navigate = navigate
        self.notify = notify
        self.current_user: Optional[SessionUser] = None
        self.is_loading = True
        client.on_unauthorized = self.expire

    def restore(self):
        """Pick up a stored session, then reconcile its preferences with the backend."""
        try:
            stored = self.store.load()
            if stored is None:
                return
            _, data = stored
            try:
                self.current_user = SessionUser.from_dict(data)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Stored user record is unusable: %s", e)
                self.store.clear()
                return
            self.refresh_user_preferences()
        finally:
            self.is_loading = False

    def _fetch_preferences(self, email, token=None) -> dict:
        payload = unwrap(self.client.get_user_preferences(email, token=token))
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ResponseShapeError(None, "Expected preferences in server response")
        return payload

    def login(self, email: str, password: str) -> SessionUser:
        try:
            response = self.client.sign_in(email, password)
            if not isinstance(response, dict) or not response.get("token"):
                raise ResponseShapeError(None, "Unexpected sign-in response")
        except ApiError as e:
            self.notify.error(e.message or "Login failed")
            raise

        token = response["token"]
        user = SessionUser(
            id=response.get("id"),
            username=response.get("username") or "",
            email=response.get("email") or email,
            roles=list(response.get("roles") or []),
            timezone=DEFAULT_TIMEZONE,
            currency=DEFAULT_CURRENCY,
        )

        try:
            prefs = self._fetch_preferences(user.email, token=token)
            user.timezone = prefs.get("timezone") or DEFAULT_TIMEZONE
            user.currency = prefs.get("currency") or DEFAULT_CURRENCY
        except UnauthorizedError as e:
            # The backend rejected the token it just issued
            logger.warning("Token for %s rejected right after sign-in", user.email)
            self.store.clear()
            self.current_user = None
            self.notify.error(e.message or "Login failed")
            self.navigate(LOGIN_PAGE)
            raise
        except ApiError as e:
            logger.info("Preferences unavailable at sign-in for %s: %s", user.email, e)

        self.store.save(token, user.to_dict())
        self.current_user = user
        logger.info("Signed in %s", user.email)

        self.notify.success("Login successful!")
        self.navigate(ADMIN_DASHBOARD_PAGE if self.is_admin() else DASHBOARD_PAGE)
        return user

    def logout(self):
        self.store.clear()
        self.current_user = None
        self.notify.success("Logged out successfully")
        self.navigate(LOGIN_PAGE)

    def expire(self):
        """Drop the user after the backend rejected the token."""
        if self.current_user is not None:
            logger.info("Session expired for %s", self.current_user.email)
        self.current_user = None

    def is_admin(self) -> bool:
        return self.current_user is not None and ROLE_ADMIN in self.current_user.roles

    def is_user(self) -> bool:
        return self.current_user is not None and ROLE_USER in self.current_user.roles

    def update_user(self, **changes):
        if self.current_user is None:
            return
        self.current_user = dataclasses.replace(self.current_user, **changes)
        self.store.save_user(self.current_user.to_dict())

    def refresh_user_preferences(self):
        if self.current_user is None:
            return
        try:
            prefs = self._fetch_preferences(self.current_user.email)
        except ApiError as e:
            logger.debug("Preference refresh failed: %s", e)
            return
        if prefs:
            self.update_user(
                timezone=prefs.get("timezone") or self.current_user.timezone,
                currency=prefs.get("currency") or self.current_user.currency,
            )

    def complete_oauth(self, token, email, error=None) -> bool:
        """Finish a provider sign-in from the callback query string.

        Unlike ``login``, failing to fetch preferences here fails the whole
        sign-in.
        """
        if error:
            self.notify.error(f"OAuth authentication failed: {error}")
            self.navigate(LOGIN_PAGE)
            return False
        if not token or not email:
            self.notify.error("Invalid OAuth callback")
            self.navigate(LOGIN_PAGE)
            return False

        try:
            prefs = self._fetch_preferences(email, token=token)
        except ApiError as e:
            logger.warning("OAuth sign-in for %s failed: %s", email, e)
            self.store.clear()
            self.current_user = None
            self.notify.error("Failed to fetch user details")
            self.navigate(LOGIN_PAGE)
            return False

        user = SessionUser(
            id=None,
            username=email.split("@")[0],
            email=email,
            roles=[ROLE_USER],
            timezone=prefs.get("timezone") or DEFAULT_TIMEZONE,
            currency=prefs.get("currency") or DEFAULT_CURRENCY,
        )
        self.store.save(token, user.to_dict())
        self.current_user = user
        self.notify.success("Successfully logged in with Google!")
        self.navigate(DASHBOARD_PAGE)
        return True

    def handle_error(self, error: ApiError, fallback: str):
        """Report a failed call; a rejected token sends the visitor to sign in."""
        if isinstance(error, UnauthorizedError):
            self.expire()
            self.notify.error("Your session has expired. Please sign in again.")
            self.navigate(LOGIN_PAGE)
            return
        self.notify.error(error.message or fallback)


def guard_state(session: SessionContext, require_admin: bool = False) -> str:
    if session.is_loading:
        return LOADING
    if session.current_user is None:
        return REDIRECT_LOGIN
    if require_admin and not session.is_admin():
        return REDIRECT_UNAUTHORIZED
    return AUTHORIZED
