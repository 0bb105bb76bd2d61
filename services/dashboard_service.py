"""
Role-scoped dashboard statistics.

Admins see every FIR, district admins their district, everyone else their
own station. An officer with no assignment gets an empty dashboard.

Besides the totals the dashboard carries the six newest FIRs (with the
names of their accused and bailers), the ten newest accused and bailers in
scope, and FIR counts for the last six months by incident date.
"""

import logging
from datetime import date

from flask import current_app
from sqlalchemy import func

from extensions import db
from models.fir import AccusedDetail, BailDetail, BailerDetail, FIRRecord
from models.station import PoliceStation, RailwayDistrict
from utils.cache_helpers import cached_query

logger = logging.getLogger(__name__)

RECENT_FIR_LIMIT = 6
TOP_PEOPLE_LIMIT = 10
TREND_MONTHS = 6

EMPTY_STATS = {
    "total_districts": 0,
    "total_thanas": 0,
    "total_firs": 0,
    "total_accused": 0,
    "total_bailers": 0,
    "total_bailed": 0,
    "total_custody": 0,
}


def empty_dashboard():
    return {
        "stats": dict(EMPTY_STATS),
        "recent_firs": [],
        "top_accused": [],
        "top_bailers": [],
        "monthly_firs": [],
    }


def access_scope(user):
    """Return ``(level, station_id, district_id)`` for ``user``.

    ``level`` is one of ``admin``, ``district``, ``thana`` or ``none``.
    """
    role = (user.role or "").lower()
    admin_roles = current_app.config.get("ADMIN_ROLES", ("super_admin",))

    if role in admin_roles:
        return "admin", None, None
    if role == "district_admin" and user.district_id:
        return "district", None, user.district_id
    if user.thana_id:
        return "thana", user.thana_id, None
    return "none", None, None


def _scoped_fir_query(level, station_id, district_id):
    query = FIRRecord.query.filter(FIRRecord.is_deleted.is_(False))
    if level == "district":
        query = query.filter(FIRRecord.railway_district_id == district_id)
    elif level == "thana":
        query = query.filter(FIRRecord.police_station_id == station_id)
    return query


def _count(model, fir_ids, *criteria):
    return (
        db.session.query(func.count(model.id))
        .filter(model.fir_id.in_(fir_ids), *criteria)
        .scalar()
        or 0
    )


def _recent_firs(query):
    rows = (
        query.outerjoin(PoliceStation, FIRRecord.police_station_id == PoliceStation.id)
        .outerjoin(RailwayDistrict, FIRRecord.railway_district_id == RailwayDistrict.id)
        .add_columns(PoliceStation.name, RailwayDistrict.name)
        .order_by(FIRRecord.created_at.desc(), FIRRecord.id.desc())
        .limit(RECENT_FIR_LIMIT)
        .all()
    )
    recent = []
    for fir, thana_name, district_name in rows:
        accused_names = [person.name or "Unknown" for person in fir.accused]
        bailer_names = [bailer.name or "Unknown" for bailer in fir.bailers]
        recent.append({
            "id": fir.id,
            "fir_number": fir.fir_number,
            "incident_date": fir.incident_date.isoformat() if fir.incident_date else None,
            "incident_time": fir.incident_time,
            "brief_description": fir.brief_description,
            "case_status": fir.case_status,
            "thana_name": thana_name,
            "district_name": district_name,
            "accused_count": len(accused_names),
            "accused_names": accused_names,
            "bailer_count": len(bailer_names),
            "bailer_names": bailer_names,
        })
    return recent


def _top_accused(fir_ids):
    rows = (
        db.session.query(AccusedDetail, FIRRecord.fir_number)
        .join(FIRRecord, AccusedDetail.fir_id == FIRRecord.id)
        .filter(AccusedDetail.fir_id.in_(fir_ids))
        .order_by(AccusedDetail.created_at.desc(), AccusedDetail.id.desc())
        .limit(TOP_PEOPLE_LIMIT)
        .all()
    )
    return [
        {
            "id": person.id,
            "name": person.name or "Unknown",
            "father_name": person.father_name,
            "age": person.age,
            "gender": person.gender,
            "mobile": person.mobile,
            "accused_type": person.accused_type,
            "fir_number": fir_number,
            "fir_id": person.fir_id,
        }
        for person, fir_number in rows
    ]


def _top_bailers(fir_ids):
    rows = (
        db.session.query(BailerDetail, FIRRecord.fir_number)
        .join(FIRRecord, BailerDetail.fir_id == FIRRecord.id)
        .filter(BailerDetail.fir_id.in_(fir_ids))
        .order_by(BailerDetail.created_at.desc(), BailerDetail.id.desc())
        .limit(TOP_PEOPLE_LIMIT)
        .all()
    )
    return [
        {
            "id": bailer.id,
            "name": bailer.name or "Unknown",
            "father_name": bailer.father_name,
            "mobile": bailer.mobile,
            "aadhaar": bailer.aadhaar,
            "fir_number": fir_number,
            "fir_id": bailer.fir_id,
        }
        for bailer, fir_number in rows
    ]


def _shift_month(year, month, delta):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_fir_counts(query, today=None, months=TREND_MONTHS):
    """FIR counts per calendar month by incident date, oldest month first.

    The last bucket is the month containing ``today``.
    """
    today = today or date.today()
    buckets = []
    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        buckets.append(date(year, month, 1))

    next_year, next_month = _shift_month(today.year, today.month, 1)
    window_end = date(next_year, next_month, 1)

    counts = dict.fromkeys(buckets, 0)
    incident_dates = query.with_entities(FIRRecord.incident_date).filter(
        FIRRecord.incident_date >= buckets[0],
        FIRRecord.incident_date < window_end,
    )
    for (incident_date,) in incident_dates:
        counts[incident_date.replace(day=1)] += 1

    return [
        {"month": start.strftime("%b %Y"), "firs": counts[start]}
        for start in buckets
    ]


@cached_query(key_prefix="dashboard")
def get_dashboard_stats(level, station_id=None, district_id=None):
    """Totals, recent FIRs, newest people and the monthly trend for one scope."""
    if level == "none":
        logger.warning("Dashboard requested by an officer with no station or district")
        return empty_dashboard()

    query = _scoped_fir_query(level, station_id, district_id)
    fir_ids = [fir_id for (fir_id,) in query.with_entities(FIRRecord.id).all()]

    if not fir_ids:
        data = empty_dashboard()
        data["stats"]["total_districts"] = 1 if district_id else 0
        data["stats"]["total_thanas"] = 1 if station_id else 0
        data["monthly_firs"] = monthly_fir_counts(query)
        return data

    districts, thanas = query.with_entities(
        func.count(func.distinct(FIRRecord.railway_district_id)),
        func.count(func.distinct(FIRRecord.police_station_id)),
    ).one()

    stats = {
        "total_districts": districts or 1,
        "total_thanas": thanas or 1,
        "total_firs": len(fir_ids),
        "total_accused": _count(AccusedDetail, fir_ids),
        "total_bailers": _count(BailerDetail, fir_ids),
        "total_bailed": _count(BailDetail, fir_ids, BailDetail.custody_status == "bail"),
        "total_custody": _count(
            AccusedDetail, fir_ids, AccusedDetail.accused_type == "arrested"
        ),
    }
    return {
        "stats": stats,
        "recent_firs": _recent_firs(query),
        "top_accused": _top_accused(fir_ids),
        "top_bailers": _top_bailers(fir_ids),
        "monthly_firs": monthly_fir_counts(query),
    }


def dashboard_for(user):
    level, station_id, district_id = access_scope(user)
    data = dict(get_dashboard_stats(level, station_id=station_id, district_id=district_id))

    # An empty area still counts the officer's own district and station
    if level != "none" and data["stats"]["total_firs"] == 0:
        stats = dict(data["stats"])
        stats["total_districts"] = 1 if user.district_id else 0
        stats["total_thanas"] = 1 if user.thana_id else 0
        data["stats"] = stats

    data["access_level"] = level
    return data
