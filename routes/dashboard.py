from datetime import datetime

from flask import Blueprint, current_app, redirect, render_template, url_for
from flask_login import current_user

from decorators import portal_access_required
from extensions import db
from services.dashboard_service import dashboard_for, empty_dashboard

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/")
def index():
    if current_user.is_authenticated:
        return redirect(url_for("dashboard.dashboard"))
    return redirect(url_for("auth.login"))


@dashboard_bp.route("/dashboard")
@portal_access_required
def dashboard():
    try:
        data = dashboard_for(current_user)
        return render_template(
            "dashboard.html",
            **data,
            last_updated=datetime.now().strftime("%H:%M"),
        )

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error loading dashboard: {e}")
        return render_template(
            "dashboard.html",
            **empty_dashboard(),
            access_level="none",
            error="Error loading dashboard data",
            last_updated=datetime.now().strftime("%H:%M"),
        )
