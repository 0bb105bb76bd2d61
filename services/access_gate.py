"""
Access gate for the Railway Police portal.

Every navigable request passes through :class:`AccessGate` before it reaches a
view. The gate answers one question per request: let it through, or send the
browser somewhere else (login, forced password change, dashboard).

The gate does not know about Flask. It reads the session through a
:class:`SessionProvider` and the officer's profile through a
:class:`UserRepository`, both passed in by the caller. ``middleware.py`` wires
the Flask-Login and SQLAlchemy implementations; tests pass plain fakes.

Decision table:

    no session, public or auth page        -> allow
    no session, anything else              -> /login
    session, auth page, first login        -> /change-password (unless already there)
    session, /change-password, onboarded   -> /dashboard
    session, anything else                 -> allow
    unexpected error                       -> /login (allow on /login and /)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_PORTAL_ROLES = ("super_admin", "district_admin", "station_officer", "data_operator")


@dataclass(frozen=True)
class Session:
    """Proof of an authenticated identity for the current request."""

    user_id: str


@dataclass(frozen=True)
class UserProfile:
    """The two profile fields the gate needs."""

    role: Optional[str]
    is_first_login: bool


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    location: Optional[str] = None

    @classmethod
    def allow(cls):
        return cls(allowed=True)

    @classmethod
    def redirect_to(cls, location):
        return cls(allowed=False, location=location)

    @property
    def is_redirect(self):
        return not self.allowed


class SessionProvider(ABC):
    @abstractmethod
    def get_session(self) -> Optional[Session]:
        """Return the current session, or None when nobody is signed in."""


class UserRepository(ABC):
    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Return the active profile for an auth identity, or None."""


class AccessGate:
    def __init__(
        self,
        sessions: SessionProvider,
        users: UserRepository,
        *,
        login_path: str = "/login",
        change_password_path: str = "/change-password",
        dashboard_path: str = "/dashboard",
        public_paths: Iterable[str] = ("/",),
        auth_prefixes: Optional[Iterable[str]] = None,
        portal_roles: Iterable[str] = DEFAULT_PORTAL_ROLES,
    ):
        self.sessions = sessions
        self.users = users
        self.login_path = login_path
        self.change_password_path = change_password_path
        self.dashboard_path = dashboard_path
        self.public_paths = tuple(public_paths)
        self.auth_prefixes = tuple(
            auth_prefixes if auth_prefixes is not None
            else (login_path, change_password_path)
        )
        self.portal_roles = {r.lower() for r in portal_roles}

    def is_auth_page(self, path: str) -> bool:
        return path.startswith(self.auth_prefixes)

    def is_public_page(self, path: str) -> bool:
        return path in self.public_paths

    def evaluate(self, path: str) -> GateDecision:
        """Decide what to do with a request for ``path``. Never raises."""
        try:
            return self._evaluate(path)
        except Exception:
            logger.exception("Access gate error on %s", path)
            if path == self.login_path or path == "/":
                return GateDecision.allow()
            return GateDecision.redirect_to(self.login_path)

    def _evaluate(self, path: str) -> GateDecision:
        session = self.sessions.get_session()
        is_auth_page = self.is_auth_page(path)
        is_public_page = self.is_public_page(path)

        if session is None:
            if is_auth_page or is_public_page:
                return GateDecision.allow()
            return GateDecision.redirect_to(self.login_path)

        if not is_auth_page:
            return GateDecision.allow()

        try:
            profile = self.users.get_profile(session.user_id)
        except Exception:
            logger.exception("Access gate user lookup failed for %s", session.user_id)
            if path == self.login_path:
                return GateDecision.allow()
            profile = None

        if profile is None:
            return GateDecision.allow()

        if profile.is_first_login and path != self.change_password_path:
            return GateDecision.redirect_to(self.change_password_path)

        if not profile.is_first_login and path == self.change_password_path:
            return GateDecision.redirect_to(self.dashboard_path)

        if path == self.login_path and (profile.role or "").lower() not in self.portal_roles:
            # The login page explains the rejection
            logger.info(
                "Session %s with role %r kept on login page", session.user_id, profile.role
            )

        return GateDecision.allow()
