"""
Main Routes
"""

import logging

from flask import render_template
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from backoffice.extensions import db
from backoffice.main import main_bp

logger = logging.getLogger(__name__)


@main_bp.route('/')
def index():
    """Public landing page"""
    return render_template('main/index.html')


@main_bp.route('/up')
def health_check():
    """200 when the app booted and the database answers, 500 otherwise."""
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError:
        logger.exception('Health check failed')
        db.session.rollback()
        return 'DOWN', 500, {'Content-Type': 'text/plain'}
    return 'OK', 200, {'Content-Type': 'text/plain'}
