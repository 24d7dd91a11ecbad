"""
AuthService: mock login by email against the organisation's user list.

There is no password or token check; the session is just "who is using
the dashboard", persisted so it survives a restart.
"""
from typing import Optional

from core.exceptions import AuthenticationError
from core.logger import get_logger
from core.models import User
from core.organization import OrganizationRepository
from core.store import Store

logger = get_logger("auth")


class AuthService:
    def __init__(self, organization: OrganizationRepository, store: Store):
        self._organization = organization
        self._store = store
        self._current_user_id: Optional[str] = None
        self._restore()

    def _restore(self) -> None:
        state = self._store.load() or {}
        user_id = state.get("currentUserId")
        if state.get("isAuthenticated") and user_id and self._organization.get_user(user_id):
            self._current_user_id = user_id

    def _save(self) -> None:
        self._store.save({
            "currentUserId": self._current_user_id,
            "isAuthenticated": self._current_user_id is not None,
        })

    @property
    def current_user(self) -> Optional[User]:
        if self._current_user_id is None:
            return None
        return self._organization.get_user(self._current_user_id)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def require_user(self) -> User:
        user = self.current_user
        if user is None:
            raise AuthenticationError()
        return user

    def login(self, email: str) -> User:
        user = self._organization.find_user_by_email(email)
        if user is None:
            logger.warning(f"Login rejected for unknown email: {email}")
            raise AuthenticationError(f"Unknown user: {email}", email=email)

        self._current_user_id = user.id
        self._save()
        logger.info(f"User logged in: {user.id}")
        return user

    def logout(self) -> None:
        if self._current_user_id is not None:
            logger.info(f"User logged out: {self._current_user_id}")
        self._current_user_id = None
        self._save()
