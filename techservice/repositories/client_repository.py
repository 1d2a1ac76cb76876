# ==============================================================================
# REPOSITÓRIO DE CLIENTES
# ==============================================================================
# Encapsula todo o acesso a clients.json (array, mais recente primeiro)
# ==============================================================================

from techservice.models.entities import Client
from techservice.repositories.base import ListRepository


class ClientRepository(ListRepository):
    """Repositório de clientes."""

    FILE_NAME = 'clients.json'
    entity_class = Client
