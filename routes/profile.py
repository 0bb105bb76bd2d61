from flask import Blueprint, jsonify, render_template, request
from flask_login import current_user

from decorators import portal_access_required

profile_bp = Blueprint("profile", __name__)


@profile_bp.route("/profile")
@portal_access_required
def profile():
    user = current_user._get_current_object()
    if request.args.get("format") == "json":
        return jsonify(user.to_dict())
    return render_template(
        "profile.html",
        user=user,
        station=user.police_station,
        district=user.railway_district,
    )
