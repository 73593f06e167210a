"""
Admin User Service

CRUD over AdminUser records. Each write runs as explicit steps: filter the
allowed fields, validate, hash, persist, then side effects.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from backoffice.errors import NotFound, PersistenceUnavailable, ValidationFailed
from backoffice.extensions import db
from backoffice.models import AdminSession, AdminUser
from backoffice.services import sessions
from backoffice.services.passwords import password_errors

logger = logging.getLogger(__name__)

PERMITTED_FIELDS = ('email', 'password', 'password_confirmation')


def permit(attrs, permitted=PERMITTED_FIELDS):
    """Reject any attribute outside ``permitted`` instead of dropping it."""
    unknown = sorted(set(attrs) - set(permitted))
    if unknown:
        raise ValidationFailed({'base': [f'Unpermitted parameter: {name}' for name in unknown]})
    return {name: attrs[name] for name in permitted if name in attrs}


def _email_errors(email, user_id=None):
    """Presence, shape and uniqueness checks for an email."""
    if not email:
        return ["can't be blank"]
    local, _, domain = email.partition('@')
    if not local or '.' not in domain or ' ' in email:
        return ['is invalid']
    existing = AdminUser.query.filter_by(email=email).first()
    if existing is not None and existing.id != user_id:
        return ['has already been taken']
    return []


def _commit(user):
    email = user.email
    try:
        db.session.commit()
    except IntegrityError:
        # lost a race with a concurrent insert of the same email
        db.session.rollback()
        raise ValidationFailed({'email': ['has already been taken']})
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Could not save admin user %s', email)
        raise PersistenceUnavailable('could not save admin user') from e


def list_users():
    """All admin users ordered by email."""
    return AdminUser.query.order_by(AdminUser.email).all()


def get_user(user_id):
    """Fetch one admin user or raise :class:`NotFound`."""
    user = db.session.get(AdminUser, user_id)
    if user is None:
        raise NotFound(f'admin user {user_id} not found')
    return user


def create_user(attrs):
    """Create an admin user from ``attrs`` (email, password, confirmation)."""
    attrs = permit(attrs)
    email = AdminUser.normalize_email(attrs.get('email'))
    password = attrs.get('password') or ''
    
    errors = {}
    email_errors = _email_errors(email)
    if email_errors:
        errors['email'] = email_errors
    pw_errors = password_errors(password, attrs.get('password_confirmation'))
    if pw_errors:
        errors['password'] = pw_errors
    if errors:
        raise ValidationFailed(errors)
    
    user = AdminUser(email=email)
    user.set_password(password)
    db.session.add(user)
    _commit(user)
    logger.info('Created admin user %s', user.email)
    return user


def update_user(user_id, attrs, context=None):
    """Update email and/or password. A blank password keeps the current one.

    Changing the password revokes every session of that user except the
    acting one in ``context``.
    """
    user = get_user(user_id)
    attrs = permit(attrs)
    
    errors = {}
    email = user.email
    if 'email' in attrs:
        email = AdminUser.normalize_email(attrs['email'])
        email_errors = _email_errors(email, user_id=user.id)
        if email_errors:
            errors['email'] = email_errors
    
    password = attrs.get('password') or ''
    if password:
        pw_errors = password_errors(password, attrs.get('password_confirmation'))
        if pw_errors:
            errors['password'] = pw_errors
    if errors:
        raise ValidationFailed(errors)
    
    # other sessions go in the same transaction as the new digest
    revoked = 0
    if password:
        revoked = sessions.delete_others(user, except_token=context.token if context else None)
        user.set_password(password)
    user.email = email
    _commit(user)
    
    if revoked:
        logger.info('Revoked %d admin session(s) for user %s', revoked, user.id)
    logger.info('Updated admin user %s', user.id)
    return user


def delete_user(user_id, context=None):
    """Delete a user and their sessions. You cannot delete yourself."""
    user = get_user(user_id)
    if context is not None and context.user.id == user.id:
        raise ValidationFailed({'base': ['You cannot delete the account you are signed in with.']})
    
    AdminSession.query.filter_by(admin_user_id=user.id).delete(synchronize_session=False)
    db.session.delete(user)
    _commit(user)
    logger.info('Deleted admin user %s', user_id)
    return user


def count_users():
    """Total number of admin users."""
    return AdminUser.query.count()
