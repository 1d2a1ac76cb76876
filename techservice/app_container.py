# ==============================================================================
# CONTENEDOR DE DEPENDÊNCIAS - Repositórios, estado e serviços
# ==============================================================================
# Ponto único para obter as instâncias de repositórios e serviços de uma
# pasta de dados. Facilita:
#   - Testes (cada teste usa sua própria pasta temporária)
#   - Trocar o armazenamento sem mexer nos serviços
#
# ESTADO:
# - Carregado dos snapshots na primeira vez que é pedido
# - end_session() esvazia o estado sem gravar; o próximo acesso recarrega
# - O objeto AppState é sempre o mesmo (os serviços guardam a referência)
# ==============================================================================

from typing import Optional

from techservice import config
from techservice.models.state import AppState
from techservice.repositories import (
    AccountRepository,
    ClientRepository,
    ServiceOrderRepository,
    SettingsRepository,
)
from techservice.services import (
    AccountService,
    BackupService,
    ClientService,
    PersistenceService,
    ReportService,
    ServiceOrderService,
    SettingsService,
)


class AppContainer:
    """
    Contenedor de dependências da aplicação.

    Uso:
        container = AppContainer(data_dir='/caminho/dos/dados')
        container.client_service.create_client({...})
        report = container.report_service.build_report('week')
    """

    def __init__(self, data_dir: str = None):
        """
        Args:
            data_dir: Pasta dos snapshots (padrão: config.DATA_DIR)
        """
        self.data_dir = data_dir or config.DATA_DIR

        self._state = AppState()
        self._loaded = False

        # Repositórios (lazy)
        self._account_repo: Optional[AccountRepository] = None
        self._client_repo: Optional[ClientRepository] = None
        self._service_order_repo: Optional[ServiceOrderRepository] = None
        self._settings_repo: Optional[SettingsRepository] = None

        # Serviços (lazy)
        self._persistence: Optional[PersistenceService] = None
        self._account_service: Optional[AccountService] = None
        self._client_service: Optional[ClientService] = None
        self._service_order_service: Optional[ServiceOrderService] = None
        self._report_service: Optional[ReportService] = None
        self._settings_service: Optional[SettingsService] = None
        self._backup_service: Optional[BackupService] = None

    # =========================================================================
    # REPOSITÓRIOS
    # =========================================================================

    @property
    def account_repo(self) -> AccountRepository:
        if self._account_repo is None:
            self._account_repo = AccountRepository(self.data_dir)
        return self._account_repo

    @property
    def client_repo(self) -> ClientRepository:
        if self._client_repo is None:
            self._client_repo = ClientRepository(self.data_dir)
        return self._client_repo

    @property
    def service_order_repo(self) -> ServiceOrderRepository:
        if self._service_order_repo is None:
            self._service_order_repo = ServiceOrderRepository(self.data_dir)
        return self._service_order_repo

    @property
    def settings_repo(self) -> SettingsRepository:
        if self._settings_repo is None:
            self._settings_repo = SettingsRepository(self.data_dir)
        return self._settings_repo

    # =========================================================================
    # ESTADO
    # =========================================================================

    @property
    def persistence(self) -> PersistenceService:
        if self._persistence is None:
            self._persistence = PersistenceService(
                self.account_repo,
                self.client_repo,
                self.service_order_repo,
                self.settings_repo,
            )
        return self._persistence

    def ensure_loaded(self) -> AppState:
        """Carrega os snapshots se o estado ainda não foi carregado (ou foi limpo)."""
        with self._state.lock:
            if not self._loaded:
                self._state.replace(self.persistence.load())
                self._loaded = True
        return self._state

    @property
    def state(self) -> AppState:
        """Estado da sessão, carregado dos snapshots no primeiro acesso."""
        return self.ensure_loaded()

    def end_session(self) -> None:
        """Logout: esvazia o estado em memória sem gravar nada."""
        with self._state.lock:
            self._state.clear()
            self._loaded = False

    # =========================================================================
    # SERVIÇOS
    # =========================================================================
    # Todo acesso a um serviço garante o estado carregado: um serviço nunca
    # grava coleções vazias por cima dos snapshots.

    @property
    def account_service(self) -> AccountService:
        state = self.ensure_loaded()
        if self._account_service is None:
            self._account_service = AccountService(state, self.persistence)
        return self._account_service

    @property
    def client_service(self) -> ClientService:
        state = self.ensure_loaded()
        if self._client_service is None:
            self._client_service = ClientService(state, self.persistence)
        return self._client_service

    @property
    def service_order_service(self) -> ServiceOrderService:
        state = self.ensure_loaded()
        if self._service_order_service is None:
            self._service_order_service = ServiceOrderService(state, self.persistence)
        return self._service_order_service

    @property
    def report_service(self) -> ReportService:
        state = self.ensure_loaded()
        if self._report_service is None:
            self._report_service = ReportService(state)
        return self._report_service

    @property
    def settings_service(self) -> SettingsService:
        state = self.ensure_loaded()
        if self._settings_service is None:
            self._settings_service = SettingsService(state, self.persistence)
        return self._settings_service

    @property
    def backup_service(self) -> BackupService:
        state = self.ensure_loaded()
        if self._backup_service is None:
            self._backup_service = BackupService(state, self.persistence, self.data_dir)
        return self._backup_service

    def reset(self) -> None:
        """Descarta instâncias e estado (útil para testes)."""
        self.end_session()
        self._account_repo = None
        self._client_repo = None
        self._service_order_repo = None
        self._settings_repo = None
        self._persistence = None
        self._account_service = None
        self._client_service = None
        self._service_order_service = None
        self._report_service = None
        self._settings_service = None
        self._backup_service = None
