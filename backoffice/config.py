"""
Configuration settings for the Backoffice application
"""
import os


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Flask application configuration"""
    
    # Flask secret key for the signed cookie session
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'
    
    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'backoffice.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # Cookie hardening; the cookie only ever carries the opaque session token
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    
    # Admin sessions (server-side, revocable)
    ADMIN_SESSION_TTL = int(os.environ.get('ADMIN_SESSION_TTL') or 12 * 60 * 60)
    ADMIN_SESSION_SLIDING = _env_flag('ADMIN_SESSION_SLIDING')
    
    # Password policy
    ADMIN_PASSWORD_MIN_LENGTH = int(os.environ.get('ADMIN_PASSWORD_MIN_LENGTH') or 8)
    
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = 'DEBUG'
