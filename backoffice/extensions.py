"""
Flask Extensions

Admin sessions live server-side in the database; Flask-Login only carries
the opaque session token in the signed cookie.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect

# Database instance
db = SQLAlchemy()

# Login manager binding browser cookies to admin sessions
login_manager = LoginManager()

# CSRF protection for every state-changing form
csrf = CSRFProtect()
