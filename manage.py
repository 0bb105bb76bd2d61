#!/usr/bin/env python3
"""
Management commands for the Railway Police portal.

Registered on ``app.cli`` by the application factory, so they run as
``flask --app app <command>`` or ``python manage.py <command>``.
"""

import secrets
import string
import sys

import click
from flask.cli import FlaskGroup, with_appcontext
from werkzeug.security import generate_password_hash

from extensions import db
from models.user import ROLES


def generate_temporary_password(length=12):
    """Random password that satisfies the change-password rules."""
    alphabet = string.ascii_letters + string.digits
    body = "".join(secrets.choice(alphabet) for _ in range(length - 3))
    return (
        secrets.choice(string.ascii_uppercase)
        + secrets.choice(string.digits)
        + secrets.choice("!@#$%&*")
        + body
    )


@click.command("init-db")
@with_appcontext
def init_db():
    """Initialize the database"""
    click.echo("Initializing database...")
    db.create_all()
    click.echo("Database initialized successfully!")


@click.command("drop-db")
@with_appcontext
def drop_db():
    """Drop all database tables"""
    if click.confirm("This will delete all data. Are you sure?"):
        db.drop_all()
        click.echo("Database tables dropped.")


@click.command("seed-stations")
@click.option("--district", "district_name", required=True)
@click.option("--station", "station_name", required=True)
@with_appcontext
def seed_stations(district_name, station_name):
    """Create a railway district and police station if missing"""
    from models.station import PoliceStation, RailwayDistrict

    district = RailwayDistrict.query.filter_by(name=district_name).first()
    if district is None:
        district = RailwayDistrict(name=district_name)
        db.session.add(district)
        db.session.flush()

    station = PoliceStation.query.filter_by(
        name=station_name, railway_district_id=district.id
    ).first()
    if station is None:
        station = PoliceStation(name=station_name, railway_district_id=district.id)
        db.session.add(station)

    db.session.commit()
    click.echo(f"District {district.id}: {district.name}")
    click.echo(f"Station {station.id}: {station.name}")


@click.command("create-user")
@click.option("--email", prompt=True)
@click.option("--employee-id", prompt=True)
@click.option("--full-name", prompt=True)
@click.option("--role", type=click.Choice(ROLES), default="station_officer", show_default=True)
@click.option("--mobile", default="")
@click.option("--designation", default=None)
@click.option("--station-id", type=int, default=None)
@click.option("--district-id", type=int, default=None)
@click.option("--password", default=None, help="Temporary password (generated when omitted)")
@with_appcontext
def create_user(email, employee_id, full_name, role, mobile, designation,
                station_id, district_id, password):
    """Create an officer account that must change its password on first login"""
    from models.user import User

    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        click.echo(f"User {email} already exists.")
        sys.exit(1)
    if User.query.filter_by(employee_id=employee_id).first():
        click.echo(f"Employee ID {employee_id} already registered.")
        sys.exit(1)

    temporary = password or generate_temporary_password()
    user = User(
        email=email,
        employee_id=employee_id,
        full_name=full_name,
        role=role,
        mobile=mobile,
        designation=designation,
        police_station_id=station_id,
        railway_district_id=district_id,
        password_hash=generate_password_hash(temporary),
        is_first_login=True,
    )
    db.session.add(user)
    db.session.commit()

    click.echo(f"User {email} created ({role}).")
    if password is None:
        click.echo(f"Temporary password: {temporary}")


@click.command("verify-user")
@click.argument("email")
@with_appcontext
def verify_user(email):
    """Check that an account is set up to use the portal"""
    from flask import current_app
    from models.user import User

    all_good = True
    user = User.query.filter_by(email=email.strip().lower()).first()
    if user is None:
        click.echo("FAIL  user not found in users table")
        sys.exit(1)

    click.echo(f"OK    user exists (auth_id {user.auth_id})")

    if user.is_active:
        click.echo("OK    user is active")
    else:
        click.echo("FAIL  user is INACTIVE")
        all_good = False

    portal_roles = current_app.config.get("PORTAL_ROLES", ())
    if user.role in portal_roles:
        click.echo(f"OK    role is {user.role}")
    else:
        click.echo(f"FAIL  role is {user.role}; required one of {', '.join(portal_roles)}")
        all_good = False

    if user.police_station_id:
        click.echo(f"OK    police station {user.police_station_id}")
    else:
        click.echo("WARN  police station is not set")

    if user.is_first_login:
        click.echo("INFO  password change pending")

    if not all_good:
        sys.exit(1)


COMMANDS = (init_db, drop_db, seed_stations, create_user, verify_user)


def register_commands(app):
    for command in COMMANDS:
        app.cli.add_command(command)


def _create_app():
    from app import create_app

    return create_app()


cli = FlaskGroup(create_app=_create_app, help="Railway Police portal CLI")

if __name__ == "__main__":
    cli()
