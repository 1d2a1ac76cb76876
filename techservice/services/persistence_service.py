# ==============================================================================
# SERVIÇO DE PERSISTÊNCIA - Carga, sementes e gravação dos snapshots
# ==============================================================================
# Único componente que lê e grava os arquivos de dados.
#
# CARGA:
# - Cada chave (contas, clientes, OS, link NFS-e) é lida de forma independente
# - Chave sem snapshot → dados-semente embutidos
# - Na primeira carga, as contas-semente são gravadas na hora para que o
#   próximo login não semeie de novo
#
# GRAVAÇÃO:
# - save() é chamado após toda mutação bem-sucedida
# - Falhas viram PersistenceError e NUNCA são silenciadas
# ==============================================================================

from datetime import datetime, timedelta, timezone
from typing import List

from werkzeug.security import generate_password_hash

from techservice.config import DEFAULT_NFS_LINK
from techservice.exceptions import PersistenceError
from techservice.models.entities import (
    Account,
    AccessLevel,
    Client,
    ServiceOrder,
    ServiceStatus,
)
from techservice.models.state import AppState
from techservice.repositories import (
    AccountRepository,
    ClientRepository,
    ServiceOrderRepository,
    SettingsRepository,
)


# Coleções que podem ser gravadas individualmente
ACCOUNTS = 'accounts'
CLIENTS = 'clients'
SERVICE_ORDERS = 'service_orders'
NFS_LINK = 'nfs_link'

COLLECTIONS = (ACCOUNTS, CLIENTS, SERVICE_ORDERS, NFS_LINK)


# ==============================================================================
# DADOS-SEMENTE
# ==============================================================================

SEED_ADMIN_USERNAME = 'ADMIN'
SEED_ADMIN_PASSWORD = 'ADMIN'


def seed_accounts() -> List[Account]:
    """Uma conta ADMIN com credenciais fixas (senha gravada como hash)."""
    return [
        Account(
            id='admin-01',
            username=SEED_ADMIN_USERNAME,
            password=generate_password_hash(SEED_ADMIN_PASSWORD),
            access_level=AccessLevel.ADMIN,
        )
    ]


def seed_clients() -> List[Client]:
    """Três clientes de exemplo: um com CPF, um com CNPJ e um sem documento."""
    return [
        Client(
            id='1',
            name='João Silva',
            phone='(11) 99999-9999',
            address='Rua das Flores, 123',
            cpf='123.456.789-00',
            notes='Cliente desde 2023',
        ),
        Client(
            id='2',
            name='Maria Oliveira',
            phone='(21) 98888-7777',
            address='Av. Principal, 500, Apt 22',
            cnpj='12.345.678/0001-90',
            notes='',
        ),
        Client(
            id='3',
            name='Tech Corp Ltda',
            phone='(11) 3030-4040',
            address='Centro Empresarial, Sala 405',
            notes='Empresa parceira',
        ),
    ]


def seed_service_orders(now: datetime = None) -> List[ServiceOrder]:
    """Três OS de exemplo: hoje, ontem e anteontem."""
    now = now or datetime.now(timezone.utc)

    def iso(moment: datetime) -> str:
        return moment.isoformat().replace('+00:00', 'Z')

    return [
        ServiceOrder(
            id='1',
            client_id='1',
            equipment='Notebook Dell Inspiron',
            problem='Tela quebrada',
            status=ServiceStatus.PENDING,
            value=450.00,
            date=iso(now),
            notes='Aguardando peça',
        ),
        ServiceOrder(
            id='2',
            client_id='2',
            equipment='PC Gamer',
            problem='Limpeza e Formatação',
            status=ServiceStatus.IN_PROGRESS,
            value=120.00,
            date=iso(now - timedelta(days=1)),
            notes='Prioridade alta',
        ),
        ServiceOrder(
            id='3',
            client_id='3',
            equipment='Impressora Epson',
            problem='Não imprime preto',
            status=ServiceStatus.COMPLETED,
            value=80.00,
            date=iso(now - timedelta(days=2)),
            notes='Entregue',
        ),
    ]


# ==============================================================================
# SERVIÇO
# ==============================================================================

class PersistenceService:
    """
    Adaptador entre o estado em memória e os snapshots em disco.

    Uso:
        persistence = PersistenceService(account_repo, client_repo, order_repo, settings_repo)
        state = persistence.load()
        ...
        persistence.save(CLIENTS, state)
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        client_repo: ClientRepository,
        service_order_repo: ServiceOrderRepository,
        settings_repo: SettingsRepository,
    ):
        self.account_repo = account_repo
        self.client_repo = client_repo
        self.service_order_repo = service_order_repo
        self.settings_repo = settings_repo

    def load(self) -> AppState:
        """
        Carrega o último snapshot de cada chave ou as sementes.

        Returns:
            AppState hidratado

        Raises:
            PersistenceError: Snapshot corrompido ou gravação das sementes falhou
        """
        if self.account_repo.exists():
            accounts = self.account_repo.load()
        else:
            accounts = seed_accounts()
            self.account_repo.save(accounts)
            print(f"[PERSISTENCIA] Contas iniciais criadas em {self.account_repo.file_path}")

        if self.client_repo.exists():
            clients = self.client_repo.load()
        else:
            clients = seed_clients()

        if self.service_order_repo.exists():
            service_orders = self.service_order_repo.load()
        else:
            service_orders = seed_service_orders()

        return AppState(
            accounts=accounts,
            clients=clients,
            service_orders=service_orders,
            nfs_link=self.settings_repo.get_nfs_link(),
        )

    def save(self, collection: str, state: AppState) -> None:
        """
        Grava o snapshot atual de uma coleção.

        Args:
            collection: 'accounts', 'clients', 'service_orders' ou 'nfs_link'
            state: Estado em memória

        Raises:
            PersistenceError: Se a gravação falhar
            ValueError: Coleção desconhecida
        """
        try:
            if collection == ACCOUNTS:
                self.account_repo.save(state.accounts)
            elif collection == CLIENTS:
                self.client_repo.save(state.clients)
            elif collection == SERVICE_ORDERS:
                self.service_order_repo.save(state.service_orders)
            elif collection == NFS_LINK:
                self.settings_repo.set_nfs_link(state.nfs_link or DEFAULT_NFS_LINK)
            else:
                raise ValueError(f'Coleção desconhecida: {collection}')
        except PersistenceError as e:
            print(f"[PERSISTENCIA ERRO] {e}")
            raise

    def save_all(self, state: AppState) -> None:
        """Grava as quatro chaves (usado na restauração de backup)."""
        for collection in COLLECTIONS:
            self.save(collection, state)
