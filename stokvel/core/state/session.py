"""Session lifecycle

UNAUTHENTICATED -> (login ok) -> AUTHENTICATED -> (logout | 401) -> UNAUTHENTICATED

Durable storage is the source of truth for the token. The in-memory
session mirrors it and is rebuilt from storage by ``restore`` on start.
"""
import json
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from stokvel.core.api import auth as auth_api
from stokvel.core.error.exceptions import AuthError, StorageError
from stokvel.core.error.handler import LOGIN_FAILED_MESSAGE
from stokvel.core.types import Session, User

from .interface import TOKEN_KEY, USER_KEY, SessionStorageInterface

logger = logging.getLogger(__name__)


class SessionState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class SessionManager:
    """Owns the login state and its durable copy"""

    def __init__(self, storage: SessionStorageInterface, api_config=None):
        self.storage = storage
        self.api_config = api_config
        self._session: Optional[Session] = None
        self._unauthorized_listeners: List[Callable[[], None]] = []

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    @property
    def user(self) -> Optional[User]:
        return self._session.user if self._session else None

    def get_token(self) -> Optional[str]:
        """Current durable token, None when logged out"""
        return self.storage.get(TOKEN_KEY)

    def add_unauthorized_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback run after a 401 clears the session"""
        self._unauthorized_listeners.append(listener)

    def login(self, email: str, password: str) -> Session:
        """Authenticate and persist the session

        Raises:
            AuthError: Credentials rejected or malformed login response
            NetworkError: Backend unreachable
            StorageError: Session could not be persisted

        An existing session is left as it was on any failure.
        """
        logger.info("Attempting to login")
        response_data = auth_api.login(email, password, api_config=self.api_config)

        token = (response_data or {}).get("token")
        user_data = (response_data or {}).get("user")
        if not token or not isinstance(user_data, dict) or "id" not in user_data:
            logger.error("Login response missing required fields")
            raise AuthError(LOGIN_FAILED_MESSAGE)

        user = User.from_api(user_data)
        self._persist(token, user)
        self._session = Session(token=token, user=user)

        logger.info(f"Login successful for user {user.id} ({user.role})")
        return self._session

    def logout(self) -> None:
        """Clear durable and in-memory session, never fails"""
        self._clear()
        logger.info("Logged out")

    def restore(self) -> Optional[Session]:
        """Rebuild the session from durable storage without contacting the server

        A stale token is only discovered by the next API call.
        """
        try:
            token = self.storage.get(TOKEN_KEY)
            raw_user = self.storage.get(USER_KEY)
        except StorageError as e:
            logger.error(f"Could not read stored session: {e.message}")
            self._session = None
            return None

        if not token or not raw_user:
            self._session = None
            return None

        try:
            user = User.from_api(json.loads(raw_user))
        except (ValueError, KeyError, TypeError, AttributeError):
            logger.warning("Stored user is corrupted, ignoring stored session")
            self._session = None
            return None

        self._session = Session(token=token, user=user)
        logger.info(f"Restored session for user {user.id}")
        return self._session

    def on_unauthorized(self) -> None:
        """Drop the session after the backend rejected the token"""
        logger.warning("Session rejected by backend, returning to login")
        self._clear()
        for listener in list(self._unauthorized_listeners):
            try:
                listener()
            except Exception:
                logger.exception("Unauthorized listener failed")

    def _clear(self) -> None:
        self._session = None
        try:
            self.storage.delete(TOKEN_KEY, USER_KEY)
        except StorageError as e:
            logger.error(f"Could not clear stored session: {e.message}")

    def _persist(self, token: str, user: User) -> None:
        """Write token and user together, putting the previous pair back on failure"""
        previous = {key: self.storage.get(key) for key in (TOKEN_KEY, USER_KEY)}
        try:
            self.storage.set(TOKEN_KEY, token)
            self.storage.set(USER_KEY, json.dumps(user.to_dict()))
        except StorageError:
            logger.error("Could not persist session, keeping the previous one")
            self._put_back(previous)
            raise

    def _put_back(self, previous: Dict[str, Optional[str]]) -> None:
        try:
            for key, value in previous.items():
                if value is None:
                    self.storage.delete(key)
                else:
                    self.storage.set(key, value)
        except StorageError as e:
            logger.error(f"Could not restore previous session: {e.message}")
