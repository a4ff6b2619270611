"""Login view-model.

Holds the state of the email login form independently of any UI toolkit.
The host renders ``state``/``is_loading`` and supplies three callables: the
login collaborator, a notifier for toasts and a navigator.

    IDLE -> SUBMITTING -> SUCCESS          (navigate home)
                       -> IDLE             (failure, error notified)
"""

import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from airouter.util import is_valid_email

logger = logging.getLogger("airouter.login")


class LoginState(enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"


@dataclass(frozen=True)
class Notification:
    level: str  # "success" | "error"
    title: str
    description: str


class LoginView:
    def __init__(
        self,
        login: Callable[[str], Awaitable[Any]],
        notify: Callable[[Notification], Any] | None = None,
        navigate: Callable[[str], Any] | None = None,
        home_path: str = "/",
    ) -> None:
        self._login = login
        self._notify = notify
        self._navigate = navigate
        self.home_path = home_path
        self.email = ""
        self.state = LoginState.IDLE
        self.notifications: list[Notification] = []

    @property
    def is_loading(self) -> bool:
        return self.state is LoginState.SUBMITTING

    @property
    def can_edit(self) -> bool:
        return self.state is LoginState.IDLE

    def _show(self, level: str, title: str, description: str) -> None:
        notification = Notification(level, title, description)
        self.notifications.append(notification)
        if self._notify:
            self._notify(notification)

    def validate(self, email: str) -> Notification | None:
        if not email.strip():
            return Notification("error", "Email is required", "Please enter your email address")
        if not is_valid_email(email):
            return Notification("error", "Invalid email", "Please enter a valid email address")
        return None

    async def submit(self, email: str | None = None) -> bool:
        """Validate and log in; returns True when the user was logged in."""
        if email is not None:
            self.email = email
        if self.state is not LoginState.IDLE:
            return False

        problem = self.validate(self.email)
        if problem:
            self._show(problem.level, problem.title, problem.description)
            return False

        self.state = LoginState.SUBMITTING
        try:
            await self._login(self.email.strip())
        except Exception as exc:
            logger.error("Login error: %s", exc)
            self.state = LoginState.IDLE
            self._show("error", "Login failed", str(exc) or "Failed to login. Please try again.")
            return False

        self.state = LoginState.SUCCESS
        self._show("success", "Welcome!", "You have been successfully logged in")
        if self._navigate:
            self._navigate(self.home_path)
        return True
