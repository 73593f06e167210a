"""
Services Package

Business operations behind the admin routes.
"""

from backoffice.services import auth, sessions, users
from backoffice.services.sessions import AdminContext

__all__ = ['auth', 'sessions', 'users', 'AdminContext']
