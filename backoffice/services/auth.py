"""
Authentication Service

Sign-in, sign-out and password reset for admin users. Callers receive an
explicit :class:`~backoffice.services.sessions.AdminContext`; nothing here
reads request globals.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

from backoffice.errors import InvalidCredentials, PersistenceUnavailable, ValidationFailed
from backoffice.extensions import db
from backoffice.models import AdminUser, utcnow
from backoffice.services import sessions
from backoffice.services.passwords import password_errors

logger = logging.getLogger(__name__)

# Checked against when the email is unknown so both failure paths cost a hash.
_DUMMY_DIGEST = generate_password_hash('not-a-real-password', method='pbkdf2:sha256')


def find_by_email(email):
    email = AdminUser.normalize_email(email)
    if not email:
        return None
    return AdminUser.query.filter_by(email=email).first()


def verify_credentials(email, password):
    """Return the matching user or raise :class:`InvalidCredentials`.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    if not email or not password:
        raise InvalidCredentials()
    
    user = find_by_email(email)
    if user is None:
        check_password_hash(_DUMMY_DIGEST, password)
        raise InvalidCredentials()
    if not user.check_password(password):
        raise InvalidCredentials()
    return user


def sign_in(email, password):
    """Verify credentials and open a new session for the matching user."""
    try:
        user = verify_credentials(email, password)
    except InvalidCredentials:
        logger.info('Rejected admin sign-in for %s', AdminUser.normalize_email(email) or '<blank>')
        raise
    
    user.last_sign_in_at = utcnow()
    context = sessions.issue(user)
    logger.info('Admin %s signed in', user.email)
    return context


def sign_out(token):
    """Destroy the session for ``token``. Safe to call with no live session."""
    revoked = sessions.revoke(token)
    if revoked:
        logger.info('Admin session signed out')
    return revoked


def reset_password(context, current_password, new_password, confirmation=None):
    """Change the signed-in user's password.

    The current password must verify. On success the digest is replaced in a
    single transaction that also deletes every other session of the user; the
    session in ``context`` stays live.
    """
    user_id = context.user.id
    user = db.session.get(AdminUser, user_id, with_for_update=True)
    if user is None or not user.check_password(current_password or ''):
        db.session.rollback()
        raise InvalidCredentials('Current password is incorrect.')
    
    errors = password_errors(new_password, confirmation)
    if errors:
        db.session.rollback()
        raise ValidationFailed({'password': errors})
    
    try:
        revoked = sessions.delete_others(user, except_token=context.token)
        user.set_password(new_password)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Could not store new password for user %s', user_id)
        raise PersistenceUnavailable('could not store password') from e
    
    logger.info('Revoked %d admin session(s) for user %s', revoked, user_id)
    logger.info('Admin %s reset their password', user.email)
    return user
