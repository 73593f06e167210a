"""
Main Blueprint

Public pages outside the admin namespace.
"""

from flask import Blueprint

main_bp = Blueprint('main', __name__)

from backoffice.main import routes  # noqa: E402, F401
