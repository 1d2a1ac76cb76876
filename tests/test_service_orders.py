import pytest

from techservice.exceptions import NotFoundError, ValidationError
from techservice.models.entities import ServiceStatus
from techservice.services.report_service import summarize


def test_create_order_defaults(container, state):
    order = container.service_order_service.create_service_order({
        'clientId': '3', 'equipment': 'Monitor LG', 'problem': 'Não liga', 'value': '150,00',
    })
    assert state.service_orders[0] is order
    assert order.status == ServiceStatus.PENDING
    assert order.value == 150.0
    assert order.date.endswith('Z')


def test_create_order_requires_existing_client(container, state):
    with pytest.raises(ValidationError):
        container.service_order_service.create_service_order(
            {'clientId': '', 'equipment': 'TV', 'problem': 'x'})
    with pytest.raises(ValidationError):
        container.service_order_service.create_service_order(
            {'clientId': 'ghost', 'equipment': 'TV', 'problem': 'x'})
    with pytest.raises(ValidationError):
        container.service_order_service.create_service_order(
            {'clientId': '1', 'equipment': '', 'problem': 'x'})
    assert len(state.service_orders) == 3


def test_status_can_move_backwards(container, state):
    assert summarize(state.service_orders).counts[ServiceStatus.COMPLETED] == 1

    container.service_order_service.set_status('3', 'PENDING')

    summary = summarize(state.service_orders)
    assert summary.counts[ServiceStatus.COMPLETED] == 0
    assert summary.counts[ServiceStatus.PENDING] == 2
    assert summary.received == 0.0


def test_set_status_errors(container):
    with pytest.raises(ValidationError):
        container.service_order_service.set_status('1', 'DONE')
    with pytest.raises(NotFoundError):
        container.service_order_service.set_status('999', 'COMPLETED')


def test_printable_order(container):
    printable = container.service_order_service.printable_dict('1')
    assert printable['clientName'] == 'João Silva'
    assert printable['documentType'] == 'CPF'
    assert printable['statusLabel'] == 'Pendente'
    assert printable['number'] == '1'


def test_printable_order_with_removed_client(container, state):
    state.clients[:] = [c for c in state.clients if c.id != '2']
    order, client = container.service_order_service.get_printable('2')
    assert client is None
    assert container.service_order_service.printable_dict('2')['clientName'] == 'Cliente não encontrado'
