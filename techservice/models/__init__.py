# ==============================================================================
# CAMADA DE MODELOS - Estruturas de dados do sistema
# ==============================================================================
# Entidades do domínio em dataclasses, independentes da persistência
# (snapshots JSON hoje), mais o estado da sessão e as validações de campo.
# ==============================================================================

from .entities import (
    # Contas
    Account,
    AccessLevel,
    View,
    RESTRICTED_VIEWS,

    # Clientes
    Client,

    # Ordens de serviço
    ServiceOrder,
    ServiceStatus,
    STATUS_LABELS,

    # Auxiliares
    coerce_value,
    new_id,
    parse_date,
    utc_now_iso,
)
from .state import AppState

__all__ = [
    'Account',
    'AccessLevel',
    'View',
    'RESTRICTED_VIEWS',
    'Client',
    'ServiceOrder',
    'ServiceStatus',
    'STATUS_LABELS',
    'coerce_value',
    'new_id',
    'parse_date',
    'utc_now_iso',
    'AppState',
]
