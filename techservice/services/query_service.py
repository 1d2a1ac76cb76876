# ==============================================================================
# SERVIÇO DE BUSCA - Filtros das listas de OS e de clientes
# ==============================================================================
# Funções puras: recalculadas a cada mudança de termo, filtro ou coleção.
# Todas as comparações são substring sem diferenciar maiúsculas.
# ==============================================================================

from typing import List, Optional

from techservice.models.entities import Client, ServiceOrder
from techservice.models.state import client_index, resolve_client

# Valor do filtro de status que aceita qualquer status
ALL_STATUSES = 'ALL'


def _contains(value: Optional[str], term: str) -> bool:
    """Campo ausente nunca casa (e nunca gera erro)."""
    if not value:
        return False
    return term in value.lower()


def matches_service_order(
    order: ServiceOrder,
    client: Optional[Client],
    term: str = '',
    status: str = ALL_STATUSES,
) -> bool:
    """
    Predicado da busca de serviços.

    Casa se (nome do cliente OU equipamento contém o termo)
    E (status == ALL OU status da OS == status).
    """
    if status and status != ALL_STATUSES and order.status.value != str(status).upper():
        return False
    term = (term or '').lower()
    if not term:
        return True
    client_name = client.name if client else ''
    return _contains(client_name, term) or _contains(order.equipment, term)


def filter_service_orders(
    orders: List[ServiceOrder],
    clients: List[Client],
    term: str = '',
    status: str = ALL_STATUSES,
) -> List[ServiceOrder]:
    """
    Filtra a lista de OS mantendo a ordem original.

    Args:
        orders: Ordens de serviço
        clients: Clientes (para resolver o nome)
        term: Texto digitado na busca
        status: Status exato ou 'ALL'

    Returns:
        OS que casam com a busca e o filtro
    """
    clients_by_id = client_index(clients)
    return [
        order for order in orders
        if matches_service_order(order, resolve_client(order, clients_by_id), term, status)
    ]


def matches_client(client: Client, term: str = '') -> bool:
    """Casa se nome OU telefone OU CPF OU CNPJ contém o termo."""
    term = (term or '').lower()
    if not term:
        return True
    return (
        _contains(client.name, term)
        or _contains(client.phone, term)
        or _contains(client.cpf, term)
        or _contains(client.cnpj, term)
    )


def filter_clients(clients: List[Client], term: str = '') -> List[Client]:
    """Filtra a lista de clientes mantendo a ordem original."""
    return [client for client in clients if matches_client(client, term)]
