# ==============================================================================
# ENTIDADES DO DOMÍNIO - Definições de dataclasses
# ==============================================================================
# Cada entidade representa um conceito do negócio da assistência técnica.
# Independentes do mecanismo de persistência: to_dict()/from_dict() usam as
# mesmas chaves JSON (camelCase) gravadas pelo aplicativo desde a versão 1.x,
# para que backups antigos continuem importáveis.
# ==============================================================================

import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from techservice.models.validators import exclusive_documents


# ==============================================================================
# ENUMERAÇÕES - Estados e níveis válidos
# ==============================================================================

class ServiceStatus(str, Enum):
    """Estados possíveis de uma ordem de serviço (conjunto plano, sem grafo)."""
    PENDING = 'PENDING'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    CANCELED = 'CANCELED'


STATUS_LABELS = {
    ServiceStatus.PENDING: 'Pendente',
    ServiceStatus.IN_PROGRESS: 'Em Andamento',
    ServiceStatus.COMPLETED: 'Concluído',
    ServiceStatus.CANCELED: 'Cancelado',
}


class AccessLevel(str, Enum):
    """Níveis de acesso das contas."""
    ADMIN = 'ADMIN'
    SUPPORT = 'SUPPORT'    # Sem acesso a financeiro, relatórios e configurações


class View(str, Enum):
    """Telas da aplicação (usadas na checagem de nível de acesso)."""
    SERVICES = 'SERVICES'
    CLIENTS = 'CLIENTS'
    FINANCE = 'FINANCE'
    REPORTS = 'REPORTS'
    SETTINGS = 'SETTINGS'


# Telas bloqueadas para contas SUPPORT
RESTRICTED_VIEWS = frozenset([View.FINANCE, View.REPORTS, View.SETTINGS])


# ==============================================================================
# FUNÇÕES AUXILIARES
# ==============================================================================

def new_id() -> str:
    """Gera um identificador opaco e único."""
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    """Instante atual em ISO-8601 UTC com sufixo Z."""
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def coerce_value(raw: Any) -> float:
    """
    Converte o valor informado no formulário para float.

    Entrada malformada, não finita ou negativa vira 0.0 (não é rejeitada).
    Aceita vírgula decimal ("120,50").
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip().replace(',', '.')
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def parse_date(date_str: Optional[str]) -> Optional[datetime]:
    """
    Converte uma data ISO em datetime com timezone.
    Datas sem timezone são tratadas como UTC. Retorna None se inválida.
    """
    if not date_str:
        return None
    try:
        parsed = datetime.fromisoformat(str(date_str).replace('Z', '+00:00'))
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_str(value: Any) -> Optional[str]:
    """String vazia ou ausente vira None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


# ==============================================================================
# ENTIDADE DE CONTA
# ==============================================================================

@dataclass
class Account:
    """
    Conta de acesso ao sistema.

    Attributes:
        id: Identificador único
        username: Login (comparado sem diferenciar maiúsculas)
        password: Hash werkzeug da senha (ou texto plano legado de backups antigos)
        access_level: ADMIN ou SUPPORT
    """
    id: str
    username: str
    password: str
    access_level: AccessLevel = AccessLevel.SUPPORT

    def is_admin(self) -> bool:
        """Verifica se a conta tem acesso total."""
        return self.access_level == AccessLevel.ADMIN

    def can_access(self, view: View) -> bool:
        """Contas SUPPORT não acessam financeiro, relatórios e configurações."""
        if self.is_admin():
            return True
        return View(view) not in RESTRICTED_VIEWS

    def to_public_dict(self) -> Dict[str, Any]:
        """Dados seguros para exibir (sem senha)."""
        return {
            'id': self.id,
            'username': self.username,
            'accessLevel': self.access_level.value,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário de persistência."""
        return {
            'id': self.id,
            'username': self.username,
            'password': self.password,
            'accessLevel': self.access_level.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        """Cria instância a partir do dicionário persistido."""
        try:
            level = AccessLevel(data.get('accessLevel', 'SUPPORT'))
        except ValueError:
            level = AccessLevel.SUPPORT
        return cls(
            id=str(data.get('id', '')),
            username=str(data.get('username') or ''),
            password=str(data.get('password') or ''),
            access_level=level,
        )


# ==============================================================================
# ENTIDADE DE CLIENTE
# ==============================================================================

@dataclass
class Client:
    """
    Cliente (pessoa física ou jurídica).

    Attributes:
        id: Identificador único
        name: Nome de exibição
        phone: Telefone
        address: Endereço (opcional)
        cpf: CPF no formato NNN.NNN.NNN-NN (exclusivo com cnpj)
        cnpj: CNPJ no formato NN.NNN.NNN/NNNN-NN (exclusivo com cpf)
        notes: Observações (opcional)
    """
    id: str
    name: str
    phone: str = ''
    address: str = ''
    cpf: Optional[str] = None
    cnpj: Optional[str] = None
    notes: str = ''

    @property
    def document(self) -> Optional[str]:
        """Documento preenchido (CPF ou CNPJ)."""
        return self.cpf or self.cnpj

    @property
    def document_type(self) -> Optional[str]:
        """'CPF', 'CNPJ' ou None."""
        if self.cpf:
            return 'CPF'
        if self.cnpj:
            return 'CNPJ'
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário de persistência (documentos ausentes são omitidos)."""
        d = {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'address': self.address,
            'notes': self.notes,
        }
        if self.cpf:
            d['cpf'] = self.cpf
        if self.cnpj:
            d['cnpj'] = self.cnpj
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Client':
        """
        Cria instância a partir do dicionário persistido.

        Dados antigos com CPF e CNPJ juntos ficam só com o CNPJ.
        """
        cpf, cnpj = exclusive_documents(data.get('cpf'), data.get('cnpj'))
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            phone=data.get('phone', '') or '',
            address=data.get('address', '') or '',
            cpf=cpf,
            cnpj=cnpj,
            notes=data.get('notes', '') or '',
        )


# ==============================================================================
# ENTIDADE DE ORDEM DE SERVIÇO
# ==============================================================================

@dataclass
class ServiceOrder:
    """
    Ordem de serviço vinculada a um único cliente.

    Attributes:
        id: Identificador único
        client_id: ID do cliente (referência verificada só na exclusão do cliente)
        equipment: Equipamento recebido
        problem: Defeito relatado
        status: Estado atual
        value: Valor do serviço (float finito, não negativo)
        date: Data do serviço em ISO-8601
        notes: Observações (opcional)
        client_doc: Documento do cliente gravado por versões antigas (opcional)
    """
    id: str
    client_id: str
    equipment: str
    problem: str
    status: ServiceStatus = ServiceStatus.PENDING
    value: float = 0.0
    date: str = ''
    notes: str = ''
    client_doc: Optional[str] = None

    def __post_init__(self):
        self.value = coerce_value(self.value)
        if not self.date:
            self.date = utc_now_iso()

    @property
    def parsed_date(self) -> Optional[datetime]:
        """Data da OS como datetime com timezone."""
        return parse_date(self.date)

    @property
    def display_number(self) -> str:
        """Número curto impresso na OS (#A1B2C3D4)."""
        return self.id[:8].upper()

    @property
    def is_canceled(self) -> bool:
        return self.status == ServiceStatus.CANCELED

    @property
    def is_completed(self) -> bool:
        return self.status == ServiceStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário de persistência."""
        d = {
            'id': self.id,
            'clientId': self.client_id,
            'equipment': self.equipment,
            'problem': self.problem,
            'status': self.status.value,
            'value': self.value,
            'date': self.date,
            'notes': self.notes,
        }
        if self.client_doc:
            d['clientDoc'] = self.client_doc
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ServiceOrder':
        """Cria instância a partir do dicionário persistido."""
        try:
            status = ServiceStatus(data.get('status', 'PENDING'))
        except ValueError:
            status = ServiceStatus.PENDING
        return cls(
            id=str(data.get('id', '')),
            client_id=str(data.get('clientId', '')),
            equipment=data.get('equipment', ''),
            problem=data.get('problem', ''),
            status=status,
            value=data.get('value', 0.0),
            date=data.get('date', ''),
            notes=data.get('notes', '') or '',
            client_doc=_optional_str(data.get('clientDoc')),
        )
