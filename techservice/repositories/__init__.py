# ==============================================================================
# CAMADA DE REPOSITÓRIOS - Acesso a dados
# ==============================================================================
# Encapsula todo o acesso aos snapshots JSON na pasta de dados.
# Quatro chaves independentes:
# ├── account_repository.py       → users.json
# ├── client_repository.py        → clients.json
# ├── service_order_repository.py → services.json
# └── settings_repository.py      → nfs_link.json
#
# Somente o PersistenceService usa estes repositórios; os demais serviços
# recebem as coleções em memória.
# ==============================================================================

from .base import BaseRepository, ListRepository, ValueRepository
from .account_repository import AccountRepository
from .client_repository import ClientRepository
from .service_order_repository import ServiceOrderRepository
from .settings_repository import SettingsRepository

__all__ = [
    # Classes base
    'BaseRepository',
    'ListRepository',
    'ValueRepository',

    # Implementações JSON
    'AccountRepository',
    'ClientRepository',
    'ServiceOrderRepository',
    'SettingsRepository',
]
