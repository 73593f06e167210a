"""
Backoffice - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

from flask import Flask, g, redirect, render_template, request, url_for

from backoffice.config import Config
from backoffice.extensions import db, login_manager, csrf

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.getLogger('backoffice').setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    csrf.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'admin.sign_in_form'
    login_manager.login_message = 'Please sign in to continue.'
    login_manager.login_message_category = 'warning'

    from backoffice.middleware import MethodOverrideMiddleware
    app.wsgi_app = MethodOverrideMiddleware(app.wsgi_app)

    # Register blueprints
    from backoffice.admin import admin_bp
    from backoffice.main import main_bp

    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(main_bp)

    from backoffice.commands import admin_cli
    app.cli.add_command(admin_cli)

    # Resolve the cookie's session token to a live admin context
    @login_manager.user_loader
    def load_admin(token):
        from backoffice.services import sessions
        return sessions.resolve(token)

    _register_error_handlers(app)

    # Create database tables
    uri = app.config['SQLALCHEMY_DATABASE_URI']
    if uri.startswith('sqlite:///') and ':memory:' not in uri:
        os.makedirs(os.path.dirname(uri[len('sqlite:///'):]), exist_ok=True)
    with app.app_context():
        from backoffice import models  # noqa: F401
        db.create_all()

    return app


def _register_error_handlers(app):
    from backoffice.errors import NotFound, PersistenceUnavailable, Unauthenticated

    @app.errorhandler(Unauthenticated)
    def handle_unauthenticated(e):
        return redirect(url_for('admin.sign_in_form', next=request.path))

    @app.errorhandler(NotFound)
    @app.errorhandler(404)
    def handle_not_found(e):
        return render_template('errors/404.html'), 404

    @app.errorhandler(PersistenceUnavailable)
    def handle_persistence_unavailable(e):
        logger.error('Request to %s failed: %s', request.path, e)
        return _server_error()

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error('Unhandled error on %s: %s', request.path, getattr(e, 'original_exception', e))
        return _server_error()


def _server_error():
    """Generic 500 page rendered as an anonymous visitor.

    The store may be the thing that failed, so the user loader must not run
    again while the template is rendered.
    """
    db.session.rollback()
    g._login_user = login_manager.anonymous_user()
    return render_template('errors/500.html'), 500
