import os

# config.py falha no import sem SECRET_KEY (fail fast)
os.environ.setdefault('SECRET_KEY', 'test-secret')
os.environ.setdefault('FIREBASE_CONFIG', '{"apiKey": "test-key", "projectId": "test-project"}')

import pytest

from config import Config
from schoollink import create_app
from tests.fakes import FakeDocumentStore, FakeIdentityProvider


class ConfigDeTeste(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    FIREBASE_CONFIG = '{"apiKey": "test-key", "projectId": "test-project"}'
    INITIAL_AUTH_TOKEN = None
    SCHOOLLINK_APP_ID = 'schoollink-test'
    RETRY_MAX_ATTEMPTS = 3
    RETRY_BASE_DELAY = 0


@pytest.fixture
def store():
    return FakeDocumentStore()


@pytest.fixture
def provider():
    return FakeIdentityProvider()


@pytest.fixture
def app(store, provider):
    app = create_app(ConfigDeTeste, identity_provider=provider, document_store=store)
    yield app
    app.extensions['schoollink'].sync.close()


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, role, username=None, password='pass'):
    client.post(f'/role/{role}')
    return client.post('/login', data={'username': username or role.lower(), 'password': password})


@pytest.fixture
def teacher_client(client):
    login(client, 'Teacher')
    return client


@pytest.fixture
def student_client(client):
    login(client, 'Student')
    return client
