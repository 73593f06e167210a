"""
Password policy checks shared by user management and password reset.
"""

import re

from flask import current_app

_LETTER = re.compile(r'[A-Za-z]')
_DIGIT = re.compile(r'\d')


def password_errors(password, confirmation=None):
    """Return the list of policy violations for ``password`` (empty if fine)."""
    errors = []
    min_length = current_app.config.get('ADMIN_PASSWORD_MIN_LENGTH', 8)
    
    if not password:
        return ["can't be blank"]
    if len(password) < min_length:
        errors.append(f'is too short (minimum is {min_length} characters)')
    if not _LETTER.search(password) or not _DIGIT.search(password):
        errors.append('must contain at least one letter and one digit')
    if confirmation is not None and confirmation != password:
        errors.append("doesn't match confirmation")
    return errors
