from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_login import current_user, login_required

from extensions import limiter
from services import auth_service
from services.auth_service import AuthError

auth_bp = Blueprint("auth", __name__)


def _login_rate_limit():
    return current_app.config.get("LOGIN_RATE_LIMIT", "10 per minute")


@auth_bp.route("/login", methods=["GET", "POST"])
@limiter.limit(_login_rate_limit, methods=["POST"])
def login():
    if current_user.is_authenticated and request.method == "GET":
        user, redirect_path = auth_service.check_auth()
        if user is not None and redirect_path is None:
            return redirect(url_for("dashboard.dashboard"))
        problem = auth_service.access_problem(current_user) if user is None else None
        if problem:
            flash(problem, "error")

    if request.method == "POST":
        email = request.form.get("email")
        password = request.form.get("password")

        try:
            user = auth_service.login(email, password)
        except AuthError as e:
            flash(str(e), "error")
            return render_template("auth/login.html", email=email), 401

        if user.is_first_login:
            flash("Please set a new password before continuing.", "info")
            return redirect(url_for("auth.change_password"))

        flash("Logged in successfully!", "success")
        return redirect(url_for("dashboard.dashboard"))

    return render_template("auth/login.html")


@auth_bp.route("/logout")
def logout():
    auth_service.logout()
    flash("You have been logged out.", "info")
    return redirect(url_for("auth.login"))


@auth_bp.route("/change-password", methods=["GET", "POST"])
@login_required
def change_password():
    if request.method == "POST":
        try:
            auth_service.change_password(
                current_user._get_current_object(),
                request.form.get("current_password"),
                request.form.get("new_password"),
                request.form.get("confirm_password"),
            )
        except AuthError as e:
            for message in e.messages:
                flash(message, "error")
            return render_template("auth/change_password.html"), 400
        except Exception as e:
            current_app.logger.exception("Password change failed")
            flash(f"Failed to change password: {e}", "error")
            return render_template("auth/change_password.html"), 500

        flash("Password changed successfully.", "success")
        return redirect(url_for("dashboard.dashboard"))

    return render_template("auth/change_password.html")
