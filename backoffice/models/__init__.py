"""
Models Package

Exports all models for easy importing.
"""

from backoffice.models.admin_user import AdminUser, utcnow
from backoffice.models.admin_session import AdminSession

__all__ = ['AdminUser', 'AdminSession', 'utcnow']
