import os
import sys
import pytest

# Ensure the backend root (containing the `wordrank` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordrank import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    PLAYER_SESSION_TTL_SEC = 3600
    ADMIN_SESSION_TTL_SEC = 600
    PLAYER_COOKIE_NAME = 'player_token'
    ADMIN_COOKIE_NAME = 'admin_token'
    ADMIN_SETUP_KEY = 'setup-key-for-tests'
    LEADERBOARD_DEFAULT_LIMIT = 10
    CHALLENGE_DEFAULT_LIMIT = 1000
    LEADERBOARD_MAX_LIMIT = 1000
    ADMIN_PAGE_MAX_LIMIT = 100
    MIN_PASSWORD_LENGTH = 6
    MAX_SCORE_POINTS = 1000000


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import wordrank.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def make_player(flask_app):
    from wordrank.models import Player

    def _make(email='alice@example.com', password='password', display_name='Alice', is_active=True):
        player = Player(email=email, display_name=display_name, is_active=is_active)
        player.set_password(password)
        db.session.add(player)
        db.session.commit()
        return player
    return _make


@pytest.fixture()
def make_admin(flask_app):
    from wordrank.models import AdminUser

    def _make(email='admin@example.com', password='password', role='admin'):
        admin_user = AdminUser(email=email, role=role)
        admin_user.set_password(password)
        db.session.add(admin_user)
        db.session.commit()
        return admin_user
    return _make


@pytest.fixture()
def login_player(client):
    def _login(email='alice@example.com', password='password'):
        return client.post('/api/auth/login', json={'email': email, 'password': password})
    return _login


@pytest.fixture()
def login_admin(client):
    def _login(email='admin@example.com', password='password'):
        return client.post('/api/admin/login', json={'email': email, 'password': password})
    return _login
