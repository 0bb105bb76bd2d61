# models/__init__.py
from .user import User, ROLES
from .station import RailwayDistrict, PoliceStation
from .fir import FIRRecord, AccusedDetail, BailDetail, BailerDetail

__all__ = [
    "User",
    "ROLES",
    "RailwayDistrict",
    "PoliceStation",
    "FIRRecord",
    "AccusedDetail",
    "BailDetail",
    "BailerDetail",
]
