from extensions import db
from sqlalchemy.sql import func


class FIRRecord(db.Model):
    """First Information Report registered at a railway police station."""

    __tablename__ = "fir_records"

    id = db.Column(db.Integer, primary_key=True)
    fir_number = db.Column(db.String(50), nullable=False, index=True)
    police_station_id = db.Column(
        db.Integer, db.ForeignKey("police_stations.id"), nullable=False
    )
    railway_district_id = db.Column(
        db.Integer, db.ForeignKey("railway_districts.id"), nullable=False
    )
    incident_date = db.Column(db.Date, nullable=False)
    incident_time = db.Column(db.String(5))  # HH:MM
    brief_description = db.Column(db.Text)
    case_status = db.Column(db.String(30), nullable=False, default="registered")
    is_deleted = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, server_default=func.now())

    police_station = db.relationship("PoliceStation")
    railway_district = db.relationship("RailwayDistrict")
    accused = db.relationship(
        "AccusedDetail", back_populates="fir", cascade="all, delete-orphan",
        order_by="AccusedDetail.id",
    )
    bails = db.relationship(
        "BailDetail", back_populates="fir", cascade="all, delete-orphan"
    )
    bailers = db.relationship(
        "BailerDetail", back_populates="fir", cascade="all, delete-orphan",
        order_by="BailerDetail.id",
    )

    def __repr__(self):
        return f"<FIRRecord {self.fir_number}>"


class AccusedDetail(db.Model):
    __tablename__ = "accused_details"

    id = db.Column(db.Integer, primary_key=True)
    fir_id = db.Column(db.Integer, db.ForeignKey("fir_records.id"), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    father_name = db.Column(db.String(120))
    age = db.Column(db.Integer)
    gender = db.Column(db.String(10))
    mobile = db.Column(db.String(20))
    # "arrested" means the accused is in custody
    accused_type = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, server_default=func.now())

    fir = db.relationship("FIRRecord", back_populates="accused")
    bails = db.relationship("BailDetail", back_populates="accused")


class BailDetail(db.Model):
    __tablename__ = "bail_details"

    id = db.Column(db.Integer, primary_key=True)
    fir_id = db.Column(db.Integer, db.ForeignKey("fir_records.id"), nullable=False)
    accused_id = db.Column(db.Integer, db.ForeignKey("accused_details.id"))
    # "bail" or "custody"
    custody_status = db.Column(db.String(20), nullable=False, default="custody")
    bail_date = db.Column(db.Date)

    fir = db.relationship("FIRRecord", back_populates="bails")
    accused = db.relationship("AccusedDetail", back_populates="bails")


class BailerDetail(db.Model):
    """Surety who stood bail for an accused on an FIR."""

    __tablename__ = "bailer_details"

    id = db.Column(db.Integer, primary_key=True)
    fir_id = db.Column(db.Integer, db.ForeignKey("fir_records.id"), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    father_name = db.Column(db.String(120))
    mobile = db.Column(db.String(20))
    aadhaar = db.Column(db.String(12))
    created_at = db.Column(db.DateTime, server_default=func.now())

    fir = db.relationship("FIRRecord", back_populates="bailers")
