import os
import sys

import pytest

# ensure project root is on sys.path when running from tests/ folder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from techservice.app_container import AppContainer
from techservice.main import create_app
from techservice.models.entities import Account, AccessLevel
from techservice.repositories import AccountRepository
from techservice.services.persistence_service import seed_accounts


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / 'data')


@pytest.fixture
def container(data_dir):
    c = AppContainer(data_dir)
    yield c
    c.reset()


@pytest.fixture
def state(container):
    return container.state


@pytest.fixture
def app(data_dir):
    return create_app(data_dir, {'TESTING': True})


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def admin_client(client):
    r = client.post('/api/login', json={'username': 'ADMIN', 'password': 'ADMIN'})
    assert r.status_code == 200
    return client


@pytest.fixture
def support_client(data_dir):
    # conta SUPPORT com senha em texto plano, como nos backups antigos
    accounts = seed_accounts() + [
        Account(id='sup-01', username='tecnico', password='1234', access_level=AccessLevel.SUPPORT)
    ]
    AccountRepository(data_dir).save(accounts)
    app = create_app(data_dir, {'TESTING': True})
    with app.test_client() as c:
        r = c.post('/api/login', json={'username': 'tecnico', 'password': '1234'})
        assert r.status_code == 200
        yield c
