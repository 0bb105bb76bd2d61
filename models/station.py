from extensions import db


class RailwayDistrict(db.Model):
    __tablename__ = "railway_districts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False)

    stations = db.relationship(
        "PoliceStation", back_populates="district", cascade="all, delete-orphan"
    )
    officers = db.relationship("User", back_populates="railway_district")

    def __repr__(self):
        return f"<RailwayDistrict {self.name}>"


class PoliceStation(db.Model):
    """A railway police station (thana)."""

    __tablename__ = "police_stations"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    railway_district_id = db.Column(
        db.Integer, db.ForeignKey("railway_districts.id"), nullable=False
    )

    district = db.relationship("RailwayDistrict", back_populates="stations")
    officers = db.relationship("User", back_populates="police_station")

    __table_args__ = (
        db.UniqueConstraint("railway_district_id", "name", name="uq_station_district_name"),
    )

    def __repr__(self):
        return f"<PoliceStation {self.name}>"
