# ==============================================================================
# REPOSITÓRIO DE ORDENS DE SERVIÇO
# ==============================================================================
# Encapsula todo o acesso a services.json (array, mais recente primeiro)
# ==============================================================================

from techservice.models.entities import ServiceOrder
from techservice.repositories.base import ListRepository


class ServiceOrderRepository(ListRepository):
    """Repositório de ordens de serviço."""

    FILE_NAME = 'services.json'
    entity_class = ServiceOrder
