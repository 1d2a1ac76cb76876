# ==============================================================================
# SERVIÇO DE ORDENS DE SERVIÇO
# ==============================================================================
# Regras:
# - Toda OS pertence a exatamente um cliente existente
# - Status nasce PENDING e pode ir para QUALQUER outro status
#   (conjunto plano, não há máquina de estados)
# - Valor malformado vira 0.0
# - OS nunca é excluída aqui; o "fim" de uma OS é o status CANCELED
# ==============================================================================

from typing import Any, Dict, Optional, Tuple

from techservice.exceptions import NotFoundError, ValidationError
from techservice.models.entities import (
    STATUS_LABELS,
    Client,
    ServiceOrder,
    ServiceStatus,
    new_id,
    parse_date,
    utc_now_iso,
)
from techservice.models.state import AppState
from techservice.models.validators import require
from techservice.services.persistence_service import SERVICE_ORDERS, PersistenceService


def parse_status(raw: Any) -> ServiceStatus:
    """
    Converte texto em ServiceStatus.

    Raises:
        ValidationError: Status fora do conjunto válido
    """
    try:
        return ServiceStatus(str(raw or '').strip().upper())
    except ValueError:
        raise ValidationError('Status inválido.')


class ServiceOrderService:
    """
    Serviço de ordens de serviço.

    Responsabilidades:
    - Abrir novas OS
    - Trocar o status de uma OS
    - Montar os dados da OS impressa (OS + cliente resolvido)
    """

    def __init__(self, state: AppState, persistence: PersistenceService):
        self.state = state
        self.persistence = persistence

    def _normalize_date(self, raw: Any) -> str:
        """Data do formulário (YYYY-MM-DD ou ISO) → ISO-8601 UTC."""
        if not raw:
            return utc_now_iso()
        parsed = parse_date(raw)
        if parsed is None:
            raise ValidationError('Data inválida.')
        return parsed.isoformat().replace('+00:00', 'Z')

    def create_service_order(self, data: Dict[str, Any]) -> ServiceOrder:
        """
        Abre uma nova ordem de serviço.

        Args:
            data: clientId/client_id, equipment, problem, value, status, date, notes

        Returns:
            OS criada (inserida no início da lista)

        Raises:
            ValidationError: Cliente vazio ou inexistente, campos obrigatórios vazios
        """
        client_id = str(data.get('clientId') or data.get('client_id') or '').strip()
        if not client_id:
            raise ValidationError('Selecione um cliente. Cadastre o primeiro cliente antes de abrir uma OS.')

        equipment = require(data.get('equipment'), 'Informe o equipamento.')
        problem = require(data.get('problem'), 'Informe o problema relatado.')
        status = parse_status(data.get('status') or ServiceStatus.PENDING.value)

        with self.state.lock:
            if self.state.find_client(client_id) is None:
                raise ValidationError('Cliente selecionado não existe.')
            order = ServiceOrder(
                id=new_id(),
                client_id=client_id,
                equipment=equipment,
                problem=problem,
                status=status,
                value=data.get('value'),
                date=self._normalize_date(data.get('date')),
                notes=str(data.get('notes') or '').strip(),
            )
            self.state.service_orders.insert(0, order)
            self.persistence.save(SERVICE_ORDERS, self.state)
        return order

    def set_status(self, order_id: str, status: Any) -> ServiceOrder:
        """
        Troca o status de uma OS (qualquer status → qualquer status).

        Raises:
            NotFoundError: OS inexistente
            ValidationError: Status inválido
        """
        new_status = parse_status(status)
        with self.state.lock:
            order = self.state.find_service_order(order_id)
            if order is None:
                raise NotFoundError('Ordem de serviço não encontrada.')
            order.status = new_status
            self.persistence.save(SERVICE_ORDERS, self.state)
        return order

    def get_printable(self, order_id: str) -> Tuple[ServiceOrder, Optional[Client]]:
        """
        OS e cliente resolvido para a via impressa.

        Raises:
            NotFoundError: OS inexistente
        """
        order = self.state.find_service_order(order_id)
        if order is None:
            raise NotFoundError('Ordem de serviço não encontrada.')
        return order, self.state.resolve_client(order)

    def printable_dict(self, order_id: str) -> Dict[str, Any]:
        """Dados prontos para a impressão da OS."""
        order, client = self.get_printable(order_id)
        parsed = order.parsed_date
        return {
            'number': order.display_number,
            'date': parsed.strftime('%d/%m/%Y') if parsed else '',
            'clientName': client.name if client else 'Cliente não encontrado',
            'documentType': client.document_type if client else None,
            'document': client.document if client else None,
            'equipment': order.equipment,
            'problem': order.problem,
            'status': order.status.value,
            'statusLabel': STATUS_LABELS[order.status],
            'value': order.value,
            'notes': order.notes,
        }
