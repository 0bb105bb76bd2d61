"""
Flask binding for the access gate.

``install_access_gate(app)`` registers a ``before_request`` hook that runs
:class:`services.access_gate.AccessGate` for every navigable path. Sessions
come from Flask-Login, profiles from the ``users`` table.
"""

from flask import current_app, redirect, request
from flask_login import current_user

from extensions import db
from models.user import User
from services.access_gate import (
    AccessGate,
    Session,
    SessionProvider,
    UserProfile,
    UserRepository,
)


class FlaskLoginSessionProvider(SessionProvider):
    def get_session(self):
        if not current_user.is_authenticated:
            return None
        return Session(user_id=current_user.get_id())


class SQLAlchemyUserRepository(UserRepository):
    def get_profile(self, user_id):
        row = (
            db.session.query(User.role, User.is_first_login)
            .filter(User.auth_id == user_id, User.is_active.is_(True))
            .first()
        )
        if row is None:
            return None
        return UserProfile(role=row.role, is_first_login=bool(row.is_first_login))


def is_gated_path(path, exempt_prefixes=("api", "static", "health")):
    """True when the gate should see ``path``.

    Skips paths whose first segment is one of ``exempt_prefixes`` and any path
    containing a dot (favicon.ico, robots.txt, bundled assets). ``/static-reports``
    is still gated; only ``/static`` and ``/static/...`` are not.
    """
    relative = path.lstrip("/")
    if relative.split("/", 1)[0] in tuple(exempt_prefixes or ()):
        return False
    return "." not in relative


def build_access_gate(app):
    cfg = app.config
    return AccessGate(
        FlaskLoginSessionProvider(),
        SQLAlchemyUserRepository(),
        login_path=cfg.get("LOGIN_PATH", "/login"),
        change_password_path=cfg.get("CHANGE_PASSWORD_PATH", "/change-password"),
        dashboard_path=cfg.get("DASHBOARD_PATH", "/dashboard"),
        public_paths=cfg.get("PUBLIC_PATHS", ("/",)),
        auth_prefixes=cfg.get("AUTH_PATH_PREFIXES"),
        portal_roles=cfg.get("PORTAL_ROLES", ()),
    )


def install_access_gate(app, gate=None):
    """Attach the gate to ``app``. Returns the gate, or None when disabled."""
    if not app.config.get("ACCESS_GATE_ENABLED", True):
        app.logger.info("Access gate disabled by configuration")
        return None

    gate = gate or build_access_gate(app)
    exempt_prefixes = app.config.get("ACCESS_GATE_EXEMPT_PREFIXES", ())
    app.extensions["access_gate"] = gate

    @app.before_request
    def enforce_access_gate():
        path = request.path
        if not is_gated_path(path, exempt_prefixes):
            return None

        decision = gate.evaluate(path)
        if decision.allowed:
            return None

        current_app.logger.debug("Access gate: %s -> %s", path, decision.location)
        return redirect(decision.location)

    return gate
