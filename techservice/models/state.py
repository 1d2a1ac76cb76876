# ==============================================================================
# ESTADO DA SESSÃO
# ==============================================================================
# Fonte única de verdade em memória durante a sessão.
# Ciclo de vida:
#   1. Construído na inicialização pelo PersistenceService.load()
#   2. Mutado apenas pelos serviços (que persistem logo em seguida)
#   3. Limpo no logout com clear(), nunca gravado por cima do snapshot
# ==============================================================================

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from techservice.config import DEFAULT_NFS_LINK
from techservice.models.entities import Account, Client, ServiceOrder


def client_index(clients: List[Client]) -> Dict[str, Client]:
    """Mapa id → cliente usado nas junções em lote (buscas e relatórios)."""
    return {client.id: client for client in clients}


def resolve_client(order: ServiceOrder, clients_by_id: Dict[str, Client]) -> Optional[Client]:
    """
    Junção OS → cliente. Único caminho usado por consultas, relatórios
    e impressão. Retorna None se o cliente foi removido.
    """
    return clients_by_id.get(order.client_id)


@dataclass
class AppState:
    """
    Coleções carregadas e a conta logada.

    Attributes:
        accounts: Contas de acesso
        clients: Clientes (mais recente primeiro)
        service_orders: Ordens de serviço (mais recente primeiro)
        nfs_link: Link de emissão de NFS-e
        current_account: Conta da sessão atual (None se deslogado)
    """
    accounts: List[Account] = field(default_factory=list)
    clients: List[Client] = field(default_factory=list)
    service_orders: List[ServiceOrder] = field(default_factory=list)
    nfs_link: str = DEFAULT_NFS_LINK
    current_account: Optional[Account] = None

    # Serializa as mutações (checagem + alteração + gravação)
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    # =========================================================================
    # BUSCAS POR ID
    # =========================================================================

    def find_client(self, client_id: str) -> Optional[Client]:
        for client in self.clients:
            if client.id == client_id:
                return client
        return None

    def find_service_order(self, order_id: str) -> Optional[ServiceOrder]:
        for order in self.service_orders:
            if order.id == order_id:
                return order
        return None

    def find_account(self, account_id: str) -> Optional[Account]:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def resolve_client(self, order: ServiceOrder) -> Optional[Client]:
        """Cliente da OS, ou None se foi removido."""
        return resolve_client(order, client_index(self.clients))

    def is_client_referenced(self, client_id: str) -> bool:
        """Verifica se alguma OS aponta para o cliente."""
        return any(order.client_id == client_id for order in self.service_orders)

    # =========================================================================
    # CICLO DE VIDA
    # =========================================================================

    def replace(self, other: 'AppState') -> None:
        """Substitui todas as coleções (restauração de backup)."""
        self.accounts = other.accounts
        self.clients = other.clients
        self.service_orders = other.service_orders
        self.nfs_link = other.nfs_link

    def clear(self) -> None:
        """Encerra a sessão: esvazia as coleções sem persistir."""
        self.accounts = []
        self.clients = []
        self.service_orders = []
        self.nfs_link = DEFAULT_NFS_LINK
        self.current_account = None
