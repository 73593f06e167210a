"""
Session Store Service

Issues, resolves and revokes server-side admin sessions. The browser only
holds an opaque token; everything else stays in the ``admin_sessions`` table
so a session can be killed from the server at any time.
"""

import hashlib
import logging
import secrets
from datetime import timedelta

from flask import current_app
from flask_login import UserMixin
from sqlalchemy.exc import SQLAlchemyError

from backoffice.errors import PersistenceUnavailable, Unauthenticated
from backoffice.extensions import db
from backoffice.models import AdminSession, utcnow

logger = logging.getLogger(__name__)


class AdminContext(UserMixin):
    """Authenticated context handed explicitly to every protected operation.

    Doubles as the Flask-Login principal: ``get_id`` returns the session
    token, so that is all the signed cookie ever stores.
    """

    def __init__(self, user, session, token):
        self.user = user
        self.session = session
        self.token = token

    def get_id(self):
        return self.token

    @property
    def email(self):
        return self.user.email

    def __repr__(self):
        return f'<AdminContext {self.user.email}>'


def digest_token(token):
    """sha256 hex digest stored in place of the raw token."""
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def _ttl():
    return timedelta(seconds=current_app.config['ADMIN_SESSION_TTL'])


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Session store write failed')
        raise PersistenceUnavailable('session store unavailable') from e


def issue(user):
    """Create a new session for ``user`` and return its context."""
    token = secrets.token_urlsafe(32)
    now = utcnow()
    record = AdminSession(admin_user=user,
                          token_digest=digest_token(token),
                          created_at=now,
                          last_seen_at=now,
                          expires_at=now + _ttl())
    db.session.add(record)
    _commit()
    logger.debug('Issued admin session %s for user %s', record.id, user.id)
    return AdminContext(user, record, token)


def resolve(token):
    """Map a token to its live context, or ``None``.

    Expired rows are removed on sight. Under the sliding policy every hit
    pushes the expiry forward.
    """
    if not token:
        return None
    try:
        record = AdminSession.query.filter_by(token_digest=digest_token(token)).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Session store lookup failed')
        raise PersistenceUnavailable('session store unavailable') from e
    
    if record is None:
        return None
    
    now = utcnow()
    if record.is_expired(now):
        db.session.delete(record)
        _commit()
        logger.debug('Dropped expired admin session %s', record.id)
        return None
    
    record.last_seen_at = now
    if current_app.config.get('ADMIN_SESSION_SLIDING'):
        record.expires_at = now + _ttl()
    _commit()
    return AdminContext(record.admin_user, record, token)


def authorize(token):
    """Like :func:`resolve` but raises :class:`Unauthenticated` on a miss."""
    context = resolve(token)
    if context is None:
        raise Unauthenticated()
    return context


def revoke(token):
    """Destroy the session behind ``token``. Returns False if none was live."""
    if not token:
        return False
    deleted = AdminSession.query.filter_by(token_digest=digest_token(token)).delete()
    _commit()
    return bool(deleted)


def delete_others(user, except_token=None):
    """Queue deletion of every session of ``user`` except ``except_token``.

    Does not commit, so callers can bundle it with their own write.
    """
    query = AdminSession.query.filter(AdminSession.admin_user_id == user.id)
    if except_token:
        query = query.filter(AdminSession.token_digest != digest_token(except_token))
    return query.delete(synchronize_session=False)


def revoke_all(user, except_token=None):
    """Destroy every session of ``user`` except the one for ``except_token``."""
    deleted = delete_others(user, except_token)
    _commit()
    if deleted:
        logger.info('Revoked %d admin session(s) for user %s', deleted, user.id)
    return deleted


def count_live():
    """Number of sessions that have not expired yet."""
    return AdminSession.query.filter(AdminSession.expires_at > utcnow()).count()


def prune_expired():
    """Delete expired sessions and return how many went."""
    deleted = AdminSession.query.filter(AdminSession.expires_at <= utcnow()) \
        .delete(synchronize_session=False)
    _commit()
    logger.info('Pruned %d expired admin session(s)', deleted)
    return deleted
