from techservice.models.state import client_index, resolve_client
from techservice.services.query_service import filter_clients, filter_service_orders


def test_client_search_by_phone_fragment(state):
    result = filter_clients(state.clients, '11) 99999')
    assert [c.name for c in result] == ['João Silva']


def test_client_search_by_document_and_case(state):
    assert [c.id for c in filter_clients(state.clients, '12.345.678')] == ['2']
    assert [c.id for c in filter_clients(state.clients, 'TECH corp')] == ['3']
    assert len(filter_clients(state.clients, '')) == 3


def test_notes_are_not_searched(state):
    state.clients[2].notes = '999.999'
    assert filter_clients(state.clients, '999.999') == []


def test_service_search_by_client_name_or_equipment(state):
    by_client = filter_service_orders(state.service_orders, state.clients, 'maria')
    assert [o.id for o in by_client] == ['2']
    by_equipment = filter_service_orders(state.service_orders, state.clients, 'epson')
    assert [o.id for o in by_equipment] == ['3']


def test_service_status_filter(state):
    assert [o.id for o in filter_service_orders(state.service_orders, state.clients, '', 'COMPLETED')] == ['3']
    assert len(filter_service_orders(state.service_orders, state.clients, '', 'ALL')) == 3
    assert filter_service_orders(state.service_orders, state.clients, 'dell', 'COMPLETED') == []


def test_orphaned_order_still_matches_equipment(state):
    state.clients[:] = []
    assert [o.id for o in filter_service_orders(state.service_orders, state.clients, 'notebook')] == ['1']
    assert filter_service_orders(state.service_orders, state.clients, 'joão') == []


def test_order_client_resolution_is_shared(state):
    clients_by_id = client_index(state.clients)
    first = state.service_orders[0]
    assert resolve_client(first, clients_by_id) is state.resolve_client(first)
    assert resolve_client(first, clients_by_id).name == 'João Silva'

    del clients_by_id[first.client_id]
    assert resolve_client(first, clients_by_id) is None
