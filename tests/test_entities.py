import pytest

from techservice.exceptions import ValidationError
from techservice.models.entities import (
    Account,
    AccessLevel,
    Client,
    ServiceOrder,
    ServiceStatus,
    View,
    coerce_value,
    parse_date,
)
from techservice.models.validators import (
    exclusive_documents,
    validate_cnpj,
    validate_cpf,
    validate_url,
)


@pytest.mark.parametrize('raw,expected', [
    ('120', 120.0),
    ('120,50', 120.5),
    (80, 80.0),
    ('abc', 0.0),
    (None, 0.0),
    ('-5', 0.0),
    ('nan', 0.0),
    ('inf', 0.0),
    (True, 0.0),
])
def test_coerce_value(raw, expected):
    assert coerce_value(raw) == expected


def test_parse_date_naive_is_utc():
    parsed = parse_date('2024-03-10T12:00:00')
    assert parsed.tzinfo is not None
    assert parsed.utcoffset().total_seconds() == 0
    assert parse_date('not a date') is None
    assert parse_date('') is None


def test_service_order_from_dict_unknown_status_falls_back():
    order = ServiceOrder.from_dict({
        'id': 'x1', 'clientId': '1', 'equipment': 'TV', 'problem': 'Sem imagem',
        'status': 'LOST', 'value': 'abc', 'date': '2024-01-01T00:00:00Z',
    })
    assert order.status == ServiceStatus.PENDING
    assert order.value == 0.0
    assert order.to_dict()['clientId'] == '1'


def test_service_order_display_number():
    order = ServiceOrder(id='abcdef123456', client_id='1', equipment='TV', problem='x')
    assert order.display_number == 'ABCDEF12'
    assert order.date


def test_client_to_dict_omits_missing_documents():
    d = Client(id='c1', name='Ana').to_dict()
    assert 'cpf' not in d
    assert 'cnpj' not in d
    c = Client.from_dict({'id': 'c2', 'name': 'Bia', 'cpf': '', 'cnpj': '12.345.678/0001-90'})
    assert c.cpf is None
    assert c.document_type == 'CNPJ'


def test_account_access_levels():
    admin = Account(id='a', username='ADMIN', password='x', access_level=AccessLevel.ADMIN)
    support = Account(id='s', username='tec', password='x', access_level=AccessLevel.SUPPORT)
    for view in View:
        assert admin.can_access(view)
    assert support.can_access(View.SERVICES)
    assert support.can_access(View.CLIENTS)
    assert not support.can_access(View.FINANCE)
    assert not support.can_access(View.REPORTS)
    assert not support.can_access(View.SETTINGS)
    assert 'password' not in support.to_public_dict()


def test_account_from_dict_invalid_level():
    account = Account.from_dict({'id': '1', 'username': 'u', 'password': 'p', 'accessLevel': 'ROOT'})
    assert account.access_level == AccessLevel.SUPPORT


def test_exclusive_documents_cnpj_wins():
    assert exclusive_documents('123.456.789-00', '12.345.678/0001-90') == (None, '12.345.678/0001-90')
    assert exclusive_documents('123.456.789-00', '') == ('123.456.789-00', None)
    assert exclusive_documents(None, None) == (None, None)


def test_document_formats():
    validate_cpf('123.456.789-00')
    validate_cnpj('12.345.678/0001-90')
    validate_cpf(None)
    with pytest.raises(ValidationError):
        validate_cpf('123.456.789')
    with pytest.raises(ValidationError):
        validate_cnpj('12345678000190')


def test_validate_url():
    assert validate_url('  https://example.com/nfse ') == 'https://example.com/nfse'
    with pytest.raises(ValidationError):
        validate_url('')
    with pytest.raises(ValidationError):
        validate_url('example.com')


def test_client_from_dict_keeps_only_cnpj():
    client = Client.from_dict({
        'id': '9', 'name': 'Dupla', 'cpf': '123.456.789-00', 'cnpj': '12.345.678/0001-90',
    })
    assert client.cpf is None
    assert client.cnpj == '12.345.678/0001-90'


def test_account_from_dict_non_string_credentials():
    account = Account.from_dict({'id': '1', 'username': None, 'password': 1234})
    assert account.username == ''
    assert account.password == '1234'
