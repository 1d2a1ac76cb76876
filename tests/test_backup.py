import json
import os
from datetime import datetime

import pytest

from techservice.config import BACKUP_VERSION, DEFAULT_NFS_LINK, MAX_BACKUPS
from techservice.exceptions import ImportFormatError


def test_export_shape(container, state):
    payload = container.backup_service.export_backup()
    assert set(payload) == {'users', 'clients', 'services', 'nfsLink', 'version', 'timestamp'}
    assert payload['version'] == BACKUP_VERSION
    assert len(payload['services']) == 3
    assert payload['services'][0]['clientId'] == '1'


def test_restore_replaces_everything(container, state, data_dir):
    exported = container.backup_service.export_json()
    container.client_service.create_client({'name': 'Temporário'})
    container.settings_service.update_nfs_link('https://outro.example/nfse')

    container.backup_service.import_backup(exported)

    assert [c.name for c in state.clients] == ['João Silva', 'Maria Oliveira', 'Tech Corp Ltda']
    assert state.nfs_link == DEFAULT_NFS_LINK
    for name in ('users.json', 'clients.json', 'services.json', 'nfs_link.json'):
        assert os.path.exists(os.path.join(data_dir, name))


def test_restore_missing_key_changes_nothing(container, state):
    payload = container.backup_service.export_backup()
    del payload['services']
    clients_before = list(state.clients)

    with pytest.raises(ImportFormatError):
        container.backup_service.import_backup(payload)

    assert state.clients == clients_before
    assert len(state.service_orders) == 3


@pytest.mark.parametrize('payload', [
    '[]',
    'not json',
    {'users': [], 'clients': [], 'services': {}},
    {'users': [], 'clients': ['x'], 'services': []},
])
def test_restore_rejects_malformed_payloads(container, state, payload):
    with pytest.raises(ImportFormatError):
        container.backup_service.import_backup(payload)
    assert len(state.clients) == 3


def test_restore_without_nfs_link_uses_default(container, state):
    container.settings_service.update_nfs_link('https://outro.example/nfse')
    payload = container.backup_service.export_backup()
    del payload['nfsLink']
    container.backup_service.import_backup(payload)
    assert state.nfs_link == DEFAULT_NFS_LINK


def test_backup_file_rotation(container, state, data_dir):
    backup_root = os.path.join(data_dir, 'backups')
    os.makedirs(backup_root)
    for day in range(1, 10):
        with open(os.path.join(backup_root, f'backup-sistema-2024-01-{day:02d}.json'), 'w') as f:
            f.write('{}')
    # arquivo fora do padrão não entra na rotação
    with open(os.path.join(backup_root, 'notas.txt'), 'w') as f:
        f.write('x')

    path = container.backup_service.write_backup_file(now=datetime(2030, 1, 1))

    remaining = sorted(n for n in os.listdir(backup_root) if n.startswith('backup-sistema-'))
    assert len(remaining) == MAX_BACKUPS
    assert os.path.basename(path) in remaining
    assert 'backup-sistema-2024-01-01.json' not in remaining
    assert os.path.exists(os.path.join(backup_root, 'notas.txt'))
    with open(path, encoding='utf-8') as f:
        assert json.load(f)['version'] == BACKUP_VERSION


def test_export_then_restore_keeps_every_field(container, state):
    container.settings_service.update_nfs_link('https://nfse.example/emitir')
    container.client_service.create_client({
        'name': 'Loja Centro', 'phone': '(31) 3333-4444', 'address': 'Rua A, 10',
        'cnpj': '98.765.432/0001-10', 'notes': 'Pagamento mensal',
    })
    before = container.backup_service.export_backup()

    container.backup_service.import_backup(json.dumps(before))
    after = container.backup_service.export_backup()

    for key in ('users', 'clients', 'services', 'nfsLink'):
        assert after[key] == before[key]


def test_restore_keeps_only_cnpj_when_both_documents(container, state):
    payload = container.backup_service.export_backup()
    payload['clients'][0]['cpf'] = '123.456.789-00'
    payload['clients'][0]['cnpj'] = '12.345.678/0001-90'

    container.backup_service.import_backup(payload)

    assert state.clients[0].cpf is None
    assert state.clients[0].cnpj == '12.345.678/0001-90'


@pytest.mark.parametrize('user', [
    {'id': 'x', 'username': None, 'password': 'abc', 'accessLevel': 'ADMIN'},
    {'id': 'x', 'username': 'novo', 'password': None, 'accessLevel': 'ADMIN'},
    {'id': 'x', 'username': '   ', 'password': 'abc', 'accessLevel': 'ADMIN'},
    {'id': 'x', 'username': 42, 'password': 'abc', 'accessLevel': 'ADMIN'},
])
def test_restore_rejects_bad_accounts(container, state, user):
    payload = container.backup_service.export_backup()
    payload['users'].append(user)
    accounts_before = list(state.accounts)

    with pytest.raises(ImportFormatError):
        container.backup_service.import_backup(payload)

    assert state.accounts == accounts_before
    assert container.account_service.authenticate('ADMIN', 'ADMIN').username == 'ADMIN'


def test_restore_rejects_usernames_differing_by_case(container, state):
    payload = container.backup_service.export_backup()
    payload['users'].append(dict(payload['users'][0], id='copia', username='admin'))

    with pytest.raises(ImportFormatError):
        container.backup_service.import_backup(payload)

    assert len(state.accounts) == len(payload['users']) - 1
