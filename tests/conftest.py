import pytest

from backoffice import create_app
from backoffice.config import TestConfig
from backoffice.extensions import db
from backoffice.services import users

OPS_EMAIL = 'ops@example.com'
OPS_PASSWORD = 'Str0ngP@ss'


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def ops_user(app):
    """AdminUser ops@example.com / Str0ngP@ss; yields its id."""
    with app.app_context():
        user = users.create_user({'email': OPS_EMAIL, 'password': OPS_PASSWORD})
        user_id = user.id
    return user_id


@pytest.fixture()
def other_user(app):
    with app.app_context():
        user = users.create_user({'email': 'second@example.com', 'password': 'An0therPass'})
        user_id = user.id
    return user_id


def sign_in(client, email=OPS_EMAIL, password=OPS_PASSWORD, **extra):
    data = {'email': email, 'password': password}
    data.update(extra)
    return client.post('/admin/sign_in', data=data)


def session_token(client):
    with client.session_transaction() as sess:
        return sess.get('_user_id')


@pytest.fixture()
def signed_in_client(client, ops_user):
    r = sign_in(client)
    assert r.status_code == 302
    return client
