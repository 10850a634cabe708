"""
Backend Health Test Suite
=========================
Smoke tests that boot the app and walk the main user flow end to end.

Run with:
    pytest tests/test_backend_health.py -v
"""

import pytest
from faker import Faker

from mealcoach import create_app

fake = Faker()


# ============================================================
#  HEALTH & SMOKE TESTS
# ============================================================

class TestHealthEndpoints:
    """Verify the server boots and responds."""

    def test_root_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'ok'

    def test_unknown_route(self, client):
        resp = client.get('/api/nothing-here')
        assert resp.status_code == 404

    def test_blueprints_registered(self, app):
        assert {'auth', 'food', 'meals', 'profile', 'analysis'} <= set(app.blueprints)

    def test_one_cache_per_direction(self, app):
        caches = app.extensions['mealcoach']
        assert caches['ja_to_en_cache'] is not caches['en_to_ja_cache']


class TestConfig:
    """Configuration comes from the environment, overridable per app."""

    def test_env_values(self, monkeypatch):
        monkeypatch.setenv('TRANSLATION_CACHE_EXPIRY', '60')
        monkeypatch.setenv('OPENAI_MODEL', 'gpt-4o-mini')

        app = create_app('testing')

        assert app.config['OPENAI_MODEL'] == 'gpt-4o-mini'
        assert app.extensions['mealcoach']['ja_to_en_cache'].expiry_seconds == 60

    def test_overrides_win(self):
        app = create_app('testing', config_overrides={'FOOD_API_TIMEOUT': 3})

        assert app.config['FOOD_API_TIMEOUT'] == 3
        assert app.config['TESTING'] is True


# ============================================================
#  END-TO-END FLOW
# ============================================================

class TestUserFlow:
    """Register, log in, record a meal and read it back."""

    def test_register_login_and_record(self, client, db_session, sample_meal_data):
        email = fake.unique.email()
        resp = client.post('/api/auth/register', json={
            'name': fake.name(),
            'email': email,
            'password': 'securePassword123',
        })
        assert resp.status_code == 201

        resp = client.post('/api/auth/login', json={'email': email, 'password': 'securePassword123'})
        assert resp.status_code == 200
        headers = {'Authorization': f"Bearer {resp.get_json()['token']}"}

        resp = client.post('/api/meals', headers=headers, json=sample_meal_data)
        assert resp.status_code == 201

        resp = client.get('/api/meals', headers=headers)
        assert resp.status_code == 200
        assert len(resp.get_json()) == 1

        resp = client.get('/api/auth/check', headers=headers)
        assert resp.get_json()['authenticated'] is True

    @pytest.mark.parametrize('path', ['/api/meals', '/api/profile'])
    def test_protected_without_token(self, client, db_session, path):
        resp = client.get(path)
        assert resp.status_code == 401
