import json
import logging

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionStore:
    """Token and user record kept side by side in a mutable mapping.

    In the app the mapping is ``st.session_state``; tests pass a dict. The
    two keys are written together and removed together, so a reader never
    sees a token without a user or the other way round.
    """

    def __init__(self, state):
        self._state = state

    @property
    def token(self):
        return self._state.get(TOKEN_KEY) or None

    def load(self):
        """Return ``(token, user_dict)`` or None, tearing down half-written state."""
        token = self._state.get(TOKEN_KEY)
        raw_user = self._state.get(USER_KEY)
        if not token or not raw_user:
            if token or raw_user:
                logger.info("Discarding incomplete stored session")
            self.clear()
            return None

        try:
            user = json.loads(raw_user)
        except (TypeError, ValueError):
            logger.warning("Stored user record is not valid JSON, clearing session")
            self.clear()
            return None
        if not isinstance(user, dict):
            self.clear()
            return None
        return token, user

    def save(self, token: str, user: dict):
        if not token:
            raise ValueError("token is required")
        self._state[TOKEN_KEY] = token
        self._state[USER_KEY] = json.dumps(user)

    def save_user(self, user: dict):
        """Re-persist the user next to the existing token."""
        token = self.token
        if token:
            self.save(token, user)

    def clear(self):
        # Concurrent 401s may clear at the same time
        for key in (TOKEN_KEY, USER_KEY):
            try:
                del self._state[key]
            except KeyError:
                pass
