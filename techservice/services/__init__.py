# ==============================================================================
# CAMADA DE SERVIÇOS - Regras de negócio
# ==============================================================================
# Os serviços recebem o AppState e o PersistenceService; as rotas só
# orquestram requisição → serviço → resposta.
# ==============================================================================

from .persistence_service import PersistenceService
from .account_service import AccountService
from .client_service import ClientService
from .service_order_service import ServiceOrderService
from .report_service import ReportService
from .settings_service import SettingsService
from .backup_service import BackupService

__all__ = [
    'PersistenceService',
    'AccountService',
    'ClientService',
    'ServiceOrderService',
    'ReportService',
    'SettingsService',
    'BackupService',
]
