"""
Admin Blueprint

Everything under /admin. Every view except sign-in/sign-out goes through
the ``admin_required`` gate.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from backoffice.admin import routes, users, password_reset  # noqa: E402, F401
