"""
Authorization decorator tests.

Tests cover:
- @portal_access_required onboarding and role checks
- Unauthenticated user redirects
"""

import pytest
from flask import Blueprint

from decorators import portal_access_required


# Create a test blueprint with a protected route
test_bp = Blueprint("test_protected", __name__)


@test_bp.route("/station-desk")
@portal_access_required
def station_desk_route():
    return "Station desk"


@pytest.fixture(autouse=True)
def register_test_blueprint(app):
    """Auto-register the test blueprint for all tests in this module."""
    app.register_blueprint(test_bp)


@pytest.mark.unit
class TestPortalAccessRequired:
    def test_anonymous_redirected_to_login(self, client):
        response = client.get("/station-desk", follow_redirects=False)
        assert response.status_code == 302
        assert response.location.endswith("/login")

    def test_onboarded_officer_allowed(self, logged_in_client):
        response = logged_in_client.get("/station-desk")
        assert response.status_code == 200
        assert b"Station desk" in response.data

    def test_admin_allowed(self, client, user_factory, login_as):
        admin = user_factory.create(role="super_admin")
        login_as(admin.email)

        response = client.get("/station-desk")
        assert response.status_code == 200

    def test_first_login_redirected_to_change_password(
        self, client, new_officer, login_as
    ):
        login_as(new_officer.email)
        response = client.get("/station-desk", follow_redirects=False)
        assert response.status_code == 302
        assert response.location.endswith("/change-password")

    def test_non_portal_role_redirected_to_login(
        self, logged_in_client, officer
    ):
        from extensions import db

        officer.role = "viewer"
        db.session.commit()

        response = logged_in_client.get("/station-desk", follow_redirects=False)
        assert response.status_code == 302
        assert response.location.endswith("/login")

    def test_deactivated_mid_session_redirected_to_login(
        self, logged_in_client, officer
    ):
        from extensions import db

        officer.is_active = False
        db.session.commit()

        response = logged_in_client.get("/station-desk", follow_redirects=False)
        assert response.status_code == 302
        assert response.location.endswith("/login")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
