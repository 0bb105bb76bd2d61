from functools import wraps
from flask import redirect

from services.auth_service import check_auth


def portal_access_required(f):
    """Send users who have not finished onboarding, or may not use the portal, away."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        _, redirect_path = check_auth()
        if redirect_path:
            return redirect(redirect_path)
        return f(*args, **kwargs)

    return decorated_function
