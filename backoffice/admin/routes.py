"""
Admin Routes

Namespace home plus the sign-in / sign-out gate.
"""

from urllib.parse import urlsplit

from flask import render_template, request, redirect, url_for, flash, session
from flask_login import login_user, logout_user, current_user

from backoffice.admin import admin_bp
from backoffice.admin.decorators import admin_required
from backoffice.errors import InvalidCredentials
from backoffice.services import auth, sessions, users


def _safe_next(target):
    """Only follow ``next`` back into the admin namespace on this host."""
    if not target or '\\' in target:
        return None
    parts = urlsplit(target)
    if parts.scheme not in ('', 'http', 'https') or parts.netloc not in ('', request.host):
        return None
    if parts.path != '/admin' and not parts.path.startswith('/admin/'):
        return None
    return parts.path + ('?' + parts.query if parts.query else '')


@admin_bp.route('/', methods=['GET'])
@admin_required
def home():
    """Admin home with a small overview."""
    return render_template('admin/home.html',
                           admin_email=current_user.email,
                           total_users=users.count_users(),
                           live_sessions=sessions.count_live())


@admin_bp.route('/sign_in', methods=['GET'])
def sign_in_form():
    """Present the credential form."""
    if current_user.is_authenticated:
        return redirect(url_for('admin.home'))
    return render_template('admin/sign_in.html', next=request.args.get('next', ''))


@admin_bp.route('/sign_in', methods=['POST'])
def sign_in():
    """Attempt sign-in. Failures re-render the form with one generic message."""
    email = request.form.get('email', '').strip()
    password = request.form.get('password', '')
    next_page = _safe_next(request.form.get('next') or request.args.get('next'))
    previous_token = current_user.get_id() if current_user.is_authenticated else None
    
    try:
        context = auth.sign_in(email, password)
    except InvalidCredentials as e:
        flash(e.message, 'danger')
        return render_template('admin/sign_in.html', email=email,
                               next=next_page or ''), 422
    
    # The session this browser held before is revoked, not just forgotten
    if previous_token:
        auth.sign_out(previous_token)
    session.clear()
    login_user(context)
    flash('Signed in successfully.', 'success')
    return redirect(next_page or url_for('admin.home'))


@admin_bp.route('/sign_out', methods=['DELETE'])
def sign_out():
    """Destroy the server-side session. Signing out twice is fine."""
    token = current_user.get_id() if current_user.is_authenticated else None
    auth.sign_out(token)
    logout_user()
    session.clear()
    flash('Signed out successfully.', 'info')
    return redirect(url_for('admin.sign_in_form'))
