import uuid

from flask_login import UserMixin
from extensions import db
from sqlalchemy.sql import func


ROLES = ("super_admin", "district_admin", "station_officer", "data_operator", "viewer")


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    # Identity carried in the login session; never the integer primary key
    auth_id = db.Column(
        db.String(36), unique=True, nullable=False, index=True,
        default=lambda: str(uuid.uuid4()),
    )
    employee_id = db.Column(db.String(40), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    mobile = db.Column(db.String(20))
    full_name = db.Column(db.String(120), nullable=False)
    designation = db.Column(db.String(80), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # One of ROLES
    role = db.Column(db.String(20), nullable=False, default="viewer")

    police_station_id = db.Column(
        db.Integer, db.ForeignKey("police_stations.id"), nullable=True
    )
    railway_district_id = db.Column(
        db.Integer, db.ForeignKey("railway_districts.id"), nullable=True
    )

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_first_login = db.Column(db.Boolean, nullable=False, default=True)
    last_login = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, server_default=func.now())

    police_station = db.relationship("PoliceStation", back_populates="officers")
    railway_district = db.relationship("RailwayDistrict", back_populates="officers")

    def get_id(self):
        return self.auth_id

    # Dashboard code refers to stations as thanas
    @property
    def thana_id(self):
        return self.police_station_id

    @property
    def district_id(self):
        return self.railway_district_id

    def to_dict(self):
        """Convert model instance to dictionary"""
        return {
            "id": self.id,
            "auth_id": self.auth_id,
            "employee_id": self.employee_id,
            "email": self.email,
            "mobile": self.mobile,
            "full_name": self.full_name,
            "designation": self.designation,
            "role": self.role,
            "police_station_id": self.police_station_id,
            "railway_district_id": self.railway_district_id,
            "thana_id": self.thana_id,
            "district_id": self.district_id,
            "is_active": self.is_active,
            "is_first_login": self.is_first_login,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        }

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
