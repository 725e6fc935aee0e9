"""
Pytest fixtures for CabinOps backend tests.

Provides test database setup, seeded cabins, one user per role, and a test client.
"""

import pytest

from cabinops import create_app
from cabinops.constants import Role
from cabinops.extensions import db
from cabinops.models import Cabin
from cabinops.services import setup_service
from cabinops.services.auth_service import build_user


PASSWORD = "Password123!"

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'BCRYPT_ROUNDS': 4,
    'LOG_LEVEL': 'DEBUG',
}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    # Clear all data but keep schema
    meta = db.metadata
    for table in reversed(meta.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    # Cleanup after test
    db.session.rollback()


@pytest.fixture(scope='function')
def seed(db_session):
    """Nine cabins (EMPTY_CLEAN) and one user per role, named after the role."""
    setup_service.seed_cabins()

    users = {}
    for role in (Role.ADMIN, Role.RECEPTION, Role.HOUSEKEEPING, Role.TECHNICAL):
        user = build_user(role.lower(), PASSWORD, role)
        db_session.add(user)
        users[role] = user
    db_session.commit()

    return users


@pytest.fixture
def admin(seed):
    return seed[Role.ADMIN]


@pytest.fixture
def reception(seed):
    return seed[Role.RECEPTION]


@pytest.fixture
def housekeeping(seed):
    return seed[Role.HOUSEKEEPING]


@pytest.fixture
def technical(seed):
    return seed[Role.TECHNICAL]


@pytest.fixture
def find_cabin(seed):
    """Fresh read of a cabin row by name."""
    def _find(name: str) -> Cabin:
        db.session.expire_all()
        return db.session.query(Cabin).filter_by(name=name).one()
    return _find


def get_auth_token(client, username: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(client, seed):
    return auth_headers(get_auth_token(client, "admin"))


@pytest.fixture
def reception_headers(client, seed):
    return auth_headers(get_auth_token(client, "reception"))


@pytest.fixture
def housekeeping_headers(client, seed):
    return auth_headers(get_auth_token(client, "housekeeping"))


@pytest.fixture
def technical_headers(client, seed):
    return auth_headers(get_auth_token(client, "technical"))


@pytest.fixture
def bare_app(app):
    """A second application whose database has no tables at all."""
    bare = create_app(TEST_CONFIG)
    with bare.app_context():
        yield bare
        db.session.remove()
