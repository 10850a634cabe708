"""
Pytest configuration and fixtures for testing the Meal Coach API.
"""

import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mealcoach import create_app, db
from mealcoach.models.user import User

fake = Faker()


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, json_data=None, text=''):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError('No JSON object could be decoded')
        return self._json_data


@pytest.fixture
def make_response():
    """Factory for fake HTTP responses."""
    return FakeResponse


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'

    # Start every test from "no external credentials"; tests opt in
    app = create_app('testing', config_overrides={
        'EDAMAM_APP_ID': None,
        'EDAMAM_APP_KEY': None,
        'DEEPL_API_KEY': None,
        'OPENAI_API_KEY': None,
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


@pytest.fixture(autouse=True)
def translation_caches(app):
    """Both translation caches, emptied before each test."""
    caches = app.extensions['mealcoach']
    caches['ja_to_en_cache'].clear()
    caches['en_to_ja_cache'].clear()
    return caches


@pytest.fixture
def food_api_credentials(app, monkeypatch):
    """Configure Edamam and DeepL credentials for one test."""
    monkeypatch.setitem(app.config, 'EDAMAM_APP_ID', 'test-app-id')
    monkeypatch.setitem(app.config, 'EDAMAM_APP_KEY', 'test-app-key')
    monkeypatch.setitem(app.config, 'DEEPL_API_KEY', 'test-deepl-key')


def _create_user(password='testpassword123', **overrides):
    """Helper to create a user with sensible defaults."""
    data = {
        'name': fake.name(),
        'email': fake.unique.email(),
    }
    data.update(overrides)
    user = User(**data)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'password': password,
    }


@pytest.fixture
def test_user(app, db_session):
    """Create a test user."""
    with app.app_context():
        return _create_user()


@pytest.fixture
def second_user(app, db_session):
    """Create a second test user for isolation tests."""
    with app.app_context():
        return _create_user(password='testpassword456')


def _get_token(client, email, password):
    """Login and return JWT token."""
    resp = client.post('/api/auth/login', json={
        'email': email,
        'password': password,
    })
    data = resp.get_json()
    if data is None or 'token' not in data:
        raise RuntimeError(f"Login failed: status={resp.status_code}, body={resp.data[:200]}")
    return data['token']


@pytest.fixture
def auth_headers(client, test_user):
    """Get authentication headers for test user."""
    token = _get_token(client, test_user['email'], test_user['password'])
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def second_auth_headers(client, second_user):
    """Get authentication headers for second user."""
    token = _get_token(client, second_user['email'], second_user['password'])
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def sample_meal_data():
    """Request body for a typical meal record."""
    return {
        'mealType': 'breakfast',
        'date': '2024-05-01T08:00:00',
        'photoUrl': None,
        'items': [
            {
                'name': 'ごはん',
                'quantity': 150,
                'unit': 'g',
                'calories': 234,
                'protein': 3.8,
                'fat': 0.5,
                'carbohydrate': 55.7,
            },
            {
                'name': '納豆',
                'quantity': 1,
                'unit': '個',
                'calories': 90,
                'protein': 7.4,
                'fat': 4.5,
                'carbohydrate': 5.4,
            },
        ],
    }
