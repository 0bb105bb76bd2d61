"""
CLI command tests (registered on app.cli).
"""

import re

import pytest
from werkzeug.security import check_password_hash

from manage import generate_temporary_password
from models.station import PoliceStation, RailwayDistrict
from models.user import ROLES, User
from services.auth_service import password_problems


@pytest.mark.unit
def test_temporary_password_meets_rules():
    for _ in range(20):
        password = generate_temporary_password()
        assert password_problems(password, password) == []


@pytest.mark.integration
class TestCreateUser:
    def test_creates_first_login_user(self, runner, station):
        result = runner.invoke(
            args=[
                "create-user",
                "--email", "Officer9@RailPolice.in",
                "--employee-id", "EMP909",
                "--full-name", "Asha Patil",
                "--role", "station_officer",
                "--station-id", str(station.id),
                "--district-id", str(station.railway_district_id),
            ]
        )
        assert result.exit_code == 0, result.output
        assert "created" in result.output

        temporary = re.search(r"Temporary password: (\S+)", result.output).group(1)
        user = User.query.filter_by(email="officer9@railpolice.in").one()
        assert user.is_first_login is True
        assert user.is_active is True
        assert check_password_hash(user.password_hash, temporary)

    def test_explicit_password_is_not_echoed(self, runner):
        result = runner.invoke(
            args=[
                "create-user",
                "--email", "op@railpolice.in",
                "--employee-id", "EMP910",
                "--full-name", "Data Operator",
                "--role", "data_operator",
                "--password", "Given@1234",
            ]
        )
        assert result.exit_code == 0, result.output
        assert "Temporary password" not in result.output

    @pytest.mark.parametrize("role", ROLES)
    def test_accepts_every_defined_role(self, runner, role):
        result = runner.invoke(
            args=[
                "create-user",
                "--email", f"{role}@railpolice.in",
                "--employee-id", f"EMP-{role}",
                "--full-name", "Role Holder",
                "--role", role,
            ]
        )
        assert result.exit_code == 0, result.output
        assert User.query.filter_by(email=f"{role}@railpolice.in").one().role == role

    def test_unknown_role_rejected(self, runner, app):
        result = runner.invoke(
            args=[
                "create-user",
                "--email", "chief@railpolice.in",
                "--employee-id", "EMP912",
                "--full-name", "Chief",
                "--role", "commissioner",
            ]
        )
        assert result.exit_code == 2
        assert User.query.filter_by(email="chief@railpolice.in").first() is None

    def test_duplicate_email_rejected(self, runner, officer):
        result = runner.invoke(
            args=[
                "create-user",
                "--email", officer.email,
                "--employee-id", "EMP911",
                "--full-name", "Someone Else",
            ]
        )
        assert result.exit_code == 1
        assert "already exists" in result.output


@pytest.mark.integration
class TestVerifyUser:
    def test_healthy_account(self, runner, officer):
        result = runner.invoke(args=["verify-user", officer.email])
        assert result.exit_code == 0, result.output
        assert "OK    user is active" in result.output
        assert "OK    role is station_officer" in result.output

    def test_unknown_account(self, runner, app):
        result = runner.invoke(args=["verify-user", "ghost@railpolice.in"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_viewer_without_station(self, runner, user_factory):
        user = user_factory.create(role="viewer")
        result = runner.invoke(args=["verify-user", user.email])
        assert result.exit_code == 1
        assert "FAIL  role is viewer" in result.output
        assert "WARN  police station is not set" in result.output


@pytest.mark.integration
def test_seed_stations_is_idempotent(runner):
    args = ["seed-stations", "--district", "Pune", "--station", "Pune GRP"]
    assert runner.invoke(args=args).exit_code == 0
    assert runner.invoke(args=args).exit_code == 0

    assert RailwayDistrict.query.filter_by(name="Pune").count() == 1
    assert PoliceStation.query.filter_by(name="Pune GRP").count() == 1


@pytest.mark.integration
class TestSchemaCommands:
    def test_init_db(self, runner):
        result = runner.invoke(args=["init-db"])
        assert result.exit_code == 0
        assert "Database initialized successfully!" in result.output

    def test_drop_db_requires_confirmation(self, runner, officer):
        result = runner.invoke(args=["drop-db"], input="n\n")
        assert "Database tables dropped." not in result.output
        assert User.query.count() == 1

    def test_drop_db_confirmed(self, runner, app):
        result = runner.invoke(args=["drop-db"], input="y\n")
        assert result.exit_code == 0
        assert "Database tables dropped." in result.output
