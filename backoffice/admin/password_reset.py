"""
Password Reset Routes

Singleton resource: the signed-in admin changes their own password.
"""

from flask import render_template, redirect, url_for, flash
from flask_login import current_user

from backoffice.admin import admin_bp
from backoffice.admin.decorators import admin_required, form_attrs
from backoffice.errors import InvalidCredentials, ValidationFailed
from backoffice.services import auth, users

PERMITTED_FIELDS = ('current_password', 'password', 'password_confirmation')


@admin_bp.route('/password_reset', methods=['GET'])
@admin_required
def password_reset_form():
    return render_template('admin/password_reset.html', errors={})


@admin_bp.route('/password_reset', methods=['POST', 'PATCH'])
@admin_required
def password_reset():
    context = current_user._get_current_object()
    try:
        attrs = users.permit(form_attrs(), PERMITTED_FIELDS)
        auth.reset_password(context,
                            attrs.get('current_password', ''),
                            attrs.get('password', ''),
                            attrs.get('password_confirmation'))
    except InvalidCredentials as e:
        return render_template('admin/password_reset.html',
                               errors={'current_password': [e.message]}), 422
    except ValidationFailed as e:
        return render_template('admin/password_reset.html', errors=e.fields), 422
    
    flash('Your password was changed. Other sessions have been signed out.', 'success')
    return redirect(url_for('admin.home'))
