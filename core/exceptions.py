"""
Acelera exception hierarchy.

- AceleraError: base class for every known error
- ConfigError: runtime configuration problems
- StoreError: persisted state could not be read or written
- GoalNotFoundError / DuplicateGoalError: goal repository lookups
- ValidationError: a goal draft was rejected by the creation workflow
- AuthenticationError: unknown email or no active session

The SMART scoring engine itself never raises; bad input degrades the score.
"""
from typing import Optional


class AceleraError(Exception):
    """Base class for expected errors.

    Catching this handles every anticipated failure of the application layer.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: what went wrong
            hint: what the user can do about it
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        """Return a user-facing message including the hint."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ConfigError(AceleraError):
    """Configuration file is missing, malformed or holds illegal values."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"Check the configuration file: {config_path}" if config_path else "Check the configuration format"
        super().__init__(message, hint)
        self.config_path = config_path


class StoreError(AceleraError):
    """Persisted state could not be loaded or saved."""

    def __init__(self, message: str, path: Optional[str] = None):
        hint = f"The state file may be corrupted: {path}" if path else None
        super().__init__(message, hint)
        self.path = path


class GoalNotFoundError(AceleraError):
    """No goal with the requested id."""

    def __init__(self, goal_id: str):
        super().__init__(f"Goal not found: {goal_id}")
        self.goal_id = goal_id


class DuplicateGoalError(AceleraError):
    """A goal with the same id already exists."""

    def __init__(self, goal_id: str):
        super().__init__(f"Goal already exists: {goal_id}", hint="Use update instead of add")
        self.goal_id = goal_id


class ValidationError(AceleraError):
    """A goal draft or status change was rejected."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthenticationError(AceleraError):
    """Login failed or no user is logged in."""

    def __init__(self, message: str = "Not authenticated", email: Optional[str] = None):
        hint = "Use the email of a registered user" if email else "Log in first"
        super().__init__(message, hint)
        self.email = email
