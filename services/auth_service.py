"""
Authentication service for the portal.

Login, logout, password change and the page-level ``check_auth`` used by
content pages. Routes turn :class:`AuthError` into flash messages.
"""

import logging
import re
from datetime import datetime

from flask import current_app
from flask_login import current_user, login_user, logout_user
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthError(ValueError):
    """Raised when a login or password change is refused.

    ``messages`` carries every reason, ``str(err)`` the first one.
    """

    def __init__(self, *messages):
        super().__init__(messages[0] if messages else "Authentication failed")
        self.messages = list(messages)


def _portal_roles():
    return tuple(current_app.config.get("PORTAL_ROLES", ()))


def get_current_user():
    """Return the signed-in user or None."""
    if not current_user.is_authenticated:
        return None
    user = current_user._get_current_object()
    if not user.is_active:
        logger.warning("User %s found but is_active = false", user.email)
    return user


def check_auth(user=None):
    """Decide whether ``user`` may see a content page.

    Returns ``(user, redirect_path)``. ``redirect_path`` is None when the
    user may proceed.
    """
    if user is None:
        user = get_current_user()
    login_path = current_app.config.get("LOGIN_PATH", "/login")

    if user is None:
        return None, login_path

    if not user.is_active or user.role not in _portal_roles():
        return None, login_path

    if user.is_first_login:
        return user, current_app.config.get("CHANGE_PASSWORD_PATH", "/change-password")

    return user, None


def access_problem(user):
    """Why ``user`` may not use the portal, or None when they may."""
    if not user.is_active:
        return "Your account has been deactivated. Please contact administrator."

    if not user.role:
        return "User account is missing role. Please contact administrator."

    allowed = _portal_roles()
    if user.role not in allowed:
        return (
            f"You do not have permission to access this portal. Your role is: {user.role}. "
            f"Required roles: {', '.join(allowed)}."
        )
    return None


def authenticate(email, password):
    """Verify credentials and return the matching portal user."""
    email = (email or "").strip().lower()
    if not email or not password:
        raise AuthError("Email and password are required")

    user = User.query.filter(db.func.lower(User.email) == email).first()
    if user is None or not check_password_hash(user.password_hash, password):
        logger.info("Failed login for %s", email)
        raise AuthError("Invalid email or password")

    problem = access_problem(user)
    if problem:
        raise AuthError(problem)

    if user.role == "station_officer" and user.police_station_id is None:
        logger.warning("Station officer %s has no police_station_id", user.email)

    return user


def login(email, password):
    """Authenticate, start the session and stamp ``last_login``."""
    user = authenticate(email, password)
    login_user(user)

    try:
        user.last_login = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Error updating last login for %s", user.email)

    logger.info("User %s logged in", user.email)
    return user


def logout():
    user = get_current_user()
    logout_user()
    if user is not None:
        logger.info("User %s logged out", user.email)


def password_problems(new_password, confirm_password):
    """Return every rule the new password breaks; empty when acceptable."""
    problems = []
    new_password = new_password or ""
    if len(new_password) < MIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Z]", new_password):
        problems.append("Password must contain at least one uppercase letter")
    if not re.search(r"[0-9]", new_password):
        problems.append("Password must contain at least one number")
    if not re.search(r"[^A-Za-z0-9]", new_password):
        problems.append("Password must contain at least one special character")
    if new_password != (confirm_password or ""):
        problems.append("Passwords don't match")
    return problems


def change_password(user, current_password, new_password, confirm_password):
    """Replace ``user``'s password and finish onboarding."""
    if user is None:
        raise AuthError("No active session")

    if not current_password:
        raise AuthError("Current password is required")

    problems = password_problems(new_password, confirm_password)
    if problems:
        raise AuthError(*problems)

    if not check_password_hash(user.password_hash, current_password):
        raise AuthError("Current password is incorrect")

    if check_password_hash(user.password_hash, new_password):
        raise AuthError("New password must be different from the current password")

    user.password_hash = generate_password_hash(new_password)
    user.is_first_login = False
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Password changed for %s", user.email)
    return user
