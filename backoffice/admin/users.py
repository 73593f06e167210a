"""
Admin Users Routes

Resourceful CRUD over admin users.
"""

from flask import render_template, redirect, url_for, flash
from flask_login import current_user

from backoffice.admin import admin_bp
from backoffice.admin.decorators import admin_required, form_attrs
from backoffice.errors import ValidationFailed
from backoffice.services import users


@admin_bp.route('/users', methods=['GET'])
@admin_required
def users_index():
    return render_template('admin/users/index.html', users=users.list_users())


@admin_bp.route('/users/new', methods=['GET'])
@admin_required
def users_new():
    return render_template('admin/users/new.html', attrs={}, errors={})


@admin_bp.route('/users', methods=['POST'])
@admin_required
def users_create():
    attrs = form_attrs()
    try:
        user = users.create_user(attrs)
    except ValidationFailed as e:
        return render_template('admin/users/new.html', attrs=attrs, errors=e.fields), 422
    
    flash(f'Admin user "{user.email}" was created.', 'success')
    return redirect(url_for('admin.users_show', user_id=user.id))


@admin_bp.route('/users/<int:user_id>', methods=['GET'])
@admin_required
def users_show(user_id):
    user = users.get_user(user_id)
    return render_template('admin/users/show.html', user=user,
                           session_count=user.sessions.count())


@admin_bp.route('/users/<int:user_id>/edit', methods=['GET'])
@admin_required
def users_edit(user_id):
    user = users.get_user(user_id)
    return render_template('admin/users/edit.html', user=user,
                           attrs={'email': user.email}, errors={})


@admin_bp.route('/users/<int:user_id>', methods=['PATCH', 'PUT'])
@admin_required
def users_update(user_id):
    context = current_user._get_current_object()
    attrs = form_attrs()
    try:
        user = users.update_user(user_id, attrs, context=context)
    except ValidationFailed as e:
        user = users.get_user(user_id)
        return render_template('admin/users/edit.html', user=user,
                               attrs=attrs, errors=e.fields), 422
    
    flash(f'Admin user "{user.email}" was updated.', 'success')
    return redirect(url_for('admin.users_show', user_id=user.id))


@admin_bp.route('/users/<int:user_id>', methods=['DELETE'])
@admin_required
def users_destroy(user_id):
    context = current_user._get_current_object()
    try:
        user = users.delete_user(user_id, context=context)
    except ValidationFailed as e:
        flash(e.full_messages(), 'danger')
        return redirect(url_for('admin.users_show', user_id=user_id))
    
    flash(f'Admin user "{user.email}" was deleted.', 'success')
    return redirect(url_for('admin.users_index'))
