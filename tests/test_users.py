import pytest
from sqlalchemy.exc import OperationalError

from backoffice.errors import NotFound, PersistenceUnavailable, ValidationFailed
from backoffice.extensions import db
from backoffice.models import AdminSession, AdminUser
from backoffice.services import auth, sessions, users

from conftest import sign_in


def test_users_index_lists_admins(signed_in_client, other_user):
    r = signed_in_client.get('/admin/users')
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert 'ops@example.com' in body
    assert 'second@example.com' in body


def test_create_user(app, signed_in_client):
    r = signed_in_client.post('/admin/users', data={
        'email': 'New.Admin@Example.com',
        'password': 'Fresh1Pass',
        'password_confirmation': 'Fresh1Pass',
    })
    assert r.status_code == 302
    assert '/admin/users/' in r.headers['Location']

    with app.app_context():
        user = AdminUser.query.filter_by(email='new.admin@example.com').first()
        assert user is not None
        assert user.password_digest != 'Fresh1Pass'
        assert user.check_password('Fresh1Pass')


def test_create_duplicate_email_fails(app, signed_in_client):
    r = signed_in_client.post('/admin/users', data={
        'email': 'OPS@example.com',
        'password': 'Fresh1Pass',
        'password_confirmation': 'Fresh1Pass',
    })
    assert r.status_code == 422
    assert 'has already been taken' in r.get_data(as_text=True)

    with app.app_context():
        assert AdminUser.query.count() == 1


def test_create_duplicate_email_service(app, ops_user):
    with app.app_context():
        with pytest.raises(ValidationFailed) as exc:
            users.create_user({'email': 'ops@example.com', 'password': 'Fresh1Pass'})
        assert 'email' in exc.value.fields
        assert AdminUser.query.count() == 1


def test_create_rejects_unpermitted_fields(app, signed_in_client):
    r = signed_in_client.post('/admin/users', data={
        'email': 'sneaky@example.com',
        'password': 'Fresh1Pass',
        'password_confirmation': 'Fresh1Pass',
        'id': '42',
    })
    assert r.status_code == 422
    assert 'Unpermitted parameter: id' in r.get_data(as_text=True)

    with app.app_context():
        assert AdminUser.query.filter_by(email='sneaky@example.com').first() is None


@pytest.mark.parametrize('attrs,field', [
    ({'email': '', 'password': 'Fresh1Pass'}, 'email'),
    ({'email': 'not-an-email', 'password': 'Fresh1Pass'}, 'email'),
    ({'email': 'a@example.com', 'password': ''}, 'password'),
    ({'email': 'a@example.com', 'password': 'short1'}, 'password'),
    ({'email': 'a@example.com', 'password': 'lettersonly'}, 'password'),
    ({'email': 'a@example.com', 'password': 'Fresh1Pass', 'password_confirmation': 'Other1Pass'}, 'password'),
])
def test_create_validation(app, attrs, field):
    with app.app_context():
        with pytest.raises(ValidationFailed) as exc:
            users.create_user(attrs)
        assert field in exc.value.fields
        assert AdminUser.query.count() == 0


def test_show_and_edit(signed_in_client, other_user):
    r = signed_in_client.get(f'/admin/users/{other_user}')
    assert r.status_code == 200
    assert 'second@example.com' in r.get_data(as_text=True)

    r = signed_in_client.get(f'/admin/users/{other_user}/edit')
    assert r.status_code == 200
    assert 'Edit admin user' in r.get_data(as_text=True)


def test_missing_user_is_404(signed_in_client):
    assert signed_in_client.get('/admin/users/999').status_code == 404
    assert signed_in_client.get('/admin/users/999/edit').status_code == 404
    assert signed_in_client.patch('/admin/users/999', data={'email': 'x@example.com'}).status_code == 404
    assert signed_in_client.delete('/admin/users/999').status_code == 404


def test_get_user_not_found(app):
    with app.app_context():
        with pytest.raises(NotFound):
            users.get_user(12345)


def test_update_email_keeps_password(app, signed_in_client, other_user):
    r = signed_in_client.patch(f'/admin/users/{other_user}', data={
        'email': 'renamed@example.com',
        'password': '',
        'password_confirmation': '',
    })
    assert r.status_code == 302

    with app.app_context():
        user = users.get_user(other_user)
        assert user.email == 'renamed@example.com'
        assert user.check_password('An0therPass')


def test_update_via_form_method_override(app, signed_in_client, other_user):
    r = signed_in_client.post(f'/admin/users/{other_user}?_http_method=PATCH',
                              data={'email': 'override@example.com'})
    assert r.status_code == 302

    with app.app_context():
        assert users.get_user(other_user).email == 'override@example.com'


def test_update_to_taken_email_fails(signed_in_client, other_user):
    r = signed_in_client.patch(f'/admin/users/{other_user}', data={'email': 'ops@example.com'})
    assert r.status_code == 422
    assert 'has already been taken' in r.get_data(as_text=True)


def test_update_password_revokes_that_users_sessions(app, signed_in_client, other_user):
    other_client = app.test_client()
    assert sign_in(other_client, 'second@example.com', 'An0therPass').status_code == 302
    assert other_client.get('/admin/').status_code == 200

    r = signed_in_client.patch(f'/admin/users/{other_user}', data={
        'password': 'Brand1New',
        'password_confirmation': 'Brand1New',
    })
    assert r.status_code == 302

    assert other_client.get('/admin/').status_code == 302
    assert signed_in_client.get('/admin/').status_code == 200

    with app.app_context():
        assert users.get_user(other_user).check_password('Brand1New')


def test_delete_user(app, signed_in_client, other_user):
    other_client = app.test_client()
    sign_in(other_client, 'second@example.com', 'An0therPass')

    r = signed_in_client.delete(f'/admin/users/{other_user}')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin/users')

    with app.app_context():
        assert AdminUser.query.filter_by(id=other_user).first() is None
        assert AdminSession.query.filter_by(admin_user_id=other_user).count() == 0
    assert other_client.get('/admin/').status_code == 302


def test_cannot_delete_yourself(app, signed_in_client, ops_user):
    r = signed_in_client.delete(f'/admin/users/{ops_user}')
    assert r.status_code == 302

    with app.app_context():
        assert users.get_user(ops_user) is not None
    r = signed_in_client.get(f'/admin/users/{ops_user}')
    assert 'You cannot delete the account you are signed in with.' in r.get_data(as_text=True)


def test_failed_commit_rolls_back_password_update(app, ops_user, other_user, monkeypatch):
    with app.app_context():
        acting = auth.sign_in('ops@example.com', 'Str0ngP@ss')
        victim = auth.sign_in('second@example.com', 'An0therPass')

        def failing_commit():
            raise OperationalError('COMMIT', {}, Exception('database is down'))

        monkeypatch.setattr(db.session(), 'commit', failing_commit)
        with pytest.raises(PersistenceUnavailable):
            users.update_user(other_user, {'password': 'Brand1New'}, context=acting)
        monkeypatch.undo()

        assert users.get_user(other_user).check_password('An0therPass')
        assert sessions.resolve(victim.token) is not None
