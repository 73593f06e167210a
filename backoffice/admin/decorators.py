"""
Admin Decorator
"""

from functools import wraps

from flask import request
from flask_login import current_user

from backoffice.extensions import login_manager


def admin_required(f):
    """Decorator to ensure the request carries a live admin session.
    
    The session token from the cookie is resolved server-side by the
    Flask-Login user loader. Anonymous visitors are redirected to the
    sign-in form; nobody ever sees a bare 401.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        return f(*args, **kwargs)
    return wrapper


def form_attrs(exclude=('csrf_token',)):
    """Submitted form fields as a plain dict, minus framework fields."""
    return {key: value for key, value in request.form.items() if key not in exclude}
