"""
Pytest configuration file for the Railway Police portal tests.

Contains shared fixtures, factories and configuration for all tests.
"""

import os
import sys
from datetime import date
from pathlib import Path

import pytest
from werkzeug.security import generate_password_hash

# Keep app.py from building a production app at import time
os.environ.setdefault("TESTING", "True")

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from extensions import db  # noqa: E402
from models.user import User  # noqa: E402
from models.station import PoliceStation, RailwayDistrict  # noqa: E402
from models.fir import AccusedDetail, BailDetail, BailerDetail, FIRRecord  # noqa: E402

DEFAULT_PASSWORD = "Officer@123"


# --------------------
# Fixtures
# --------------------


@pytest.fixture(scope="function")
def app():
    """Fixture for creating a new Flask app for each test function."""
    from app import create_app
    from config import TestingConfig

    app = create_app(config_class=TestingConfig)

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Flask CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def station(app):
    district = RailwayDistrict(name="Mumbai Central")
    db.session.add(district)
    db.session.flush()
    thana = PoliceStation(name="Dadar GRP", railway_district_id=district.id)
    db.session.add(thana)
    db.session.commit()
    return thana


class UserFactory:
    _counter = 0

    @classmethod
    def create(cls, password=DEFAULT_PASSWORD, **kwargs):
        cls._counter += 1
        n = cls._counter
        defaults = {
            "email": f"officer{n}@railpolice.in",
            "employee_id": f"EMP{n:03d}",
            "full_name": f"Officer {n}",
            "mobile": "9876543210",
            "designation": "SHO",
            "role": "station_officer",
            "is_active": True,
            "is_first_login": False,
        }
        defaults.update(kwargs)
        user = User(password_hash=generate_password_hash(password), **defaults)
        db.session.add(user)
        db.session.commit()
        return user


@pytest.fixture
def user_factory(app):
    return UserFactory


@pytest.fixture
def officer(user_factory, station):
    """Onboarded station officer."""
    return user_factory.create(
        email="officer@railpolice.in",
        police_station_id=station.id,
        railway_district_id=station.railway_district_id,
    )


@pytest.fixture
def new_officer(user_factory, station):
    """Station officer who still has the temporary password."""
    return user_factory.create(
        email="new.officer@railpolice.in",
        police_station_id=station.id,
        railway_district_id=station.railway_district_id,
        is_first_login=True,
    )


@pytest.fixture
def login_as(client):
    """POST the login form for an email; returns the response."""

    def _login(email, password=DEFAULT_PASSWORD, follow_redirects=False):
        return client.post(
            "/login",
            data={"email": email, "password": password},
            follow_redirects=follow_redirects,
        )

    return _login


@pytest.fixture
def logged_in_client(client, officer, login_as):
    login_as(officer.email)
    return client


class FIRFactory:
    _counter = 0

    @classmethod
    def create(cls, station, accused=0, arrested=0, bailed=0, bailers=0, **kwargs):
        cls._counter += 1
        defaults = {
            "fir_number": f"FIR/{cls._counter:04d}/2024",
            "police_station_id": station.id,
            "railway_district_id": station.railway_district_id,
            "incident_date": date(2024, 1, cls._counter % 28 + 1),
            "incident_time": "10:30",
            "brief_description": "Theft on platform 2",
        }
        defaults.update(kwargs)
        fir = FIRRecord(**defaults)
        db.session.add(fir)
        db.session.flush()

        for i in range(accused):
            person = AccusedDetail(
                fir_id=fir.id,
                name=f"Accused {i}",
                accused_type="arrested" if i < arrested else "absconding",
            )
            db.session.add(person)
            db.session.flush()
            if i < bailed:
                db.session.add(
                    BailDetail(fir_id=fir.id, accused_id=person.id, custody_status="bail")
                )

        for i in range(bailers):
            db.session.add(
                BailerDetail(fir_id=fir.id, name=f"Bailer {i}", mobile="9000000000")
            )

        db.session.commit()
        return fir


@pytest.fixture
def fir_factory(app):
    return FIRFactory


# --------------------
# Pytest markers and hooks
# --------------------
def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, isolated tests")
    config.addinivalue_line("markers", "integration: slower, database tests")
    config.addinivalue_line("markers", "auth: tests that require authentication")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "logged_in_client" in item.fixturenames:
            item.add_marker(pytest.mark.auth)
