# ==============================================================================
# SERVIÇO DE CLIENTES
# ==============================================================================
# Centraliza as regras de negócio de clientes.
#
# REGRAS:
# - CPF e CNPJ são exclusivos: preencher um limpa o outro.
#   Se os dois chegarem juntos, o CNPJ prevalece.
# - Um cliente NÃO pode ser excluído enquanto alguma OS apontar para ele.
#   A checagem e a remoção acontecem sob o mesmo lock do estado.
# - Novos clientes entram no início da lista (mais recente primeiro).
# ==============================================================================

from typing import Any, Dict

from techservice.exceptions import ConflictError, NotFoundError
from techservice.models.entities import Client, new_id
from techservice.models.state import AppState
from techservice.models.validators import (
    exclusive_documents,
    require,
    validate_cnpj,
    validate_cpf,
)
from techservice.services.persistence_service import CLIENTS, PersistenceService


class ClientService:
    """
    Serviço de cadastro de clientes.

    Responsabilidades:
    - Criar, editar e excluir clientes
    - Validar nome e documentos
    - Garantir integridade referencial com as ordens de serviço
    """

    def __init__(self, state: AppState, persistence: PersistenceService):
        """
        Args:
            state: Estado da sessão (coleções em memória)
            persistence: Adaptador de gravação dos snapshots
        """
        self.state = state
        self.persistence = persistence

    def _clean_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Valida e normaliza os campos vindos do formulário.

        Raises:
            ValidationError: Nome vazio ou documento malformado
        """
        name = require(data.get('name'), 'Informe o nome do cliente.')
        cpf, cnpj = exclusive_documents(data.get('cpf'), data.get('cnpj'))
        validate_cpf(cpf)
        validate_cnpj(cnpj)
        return {
            'name': name,
            'phone': str(data.get('phone') or '').strip(),
            'address': str(data.get('address') or '').strip(),
            'cpf': cpf,
            'cnpj': cnpj,
            'notes': str(data.get('notes') or '').strip(),
        }

    def create_client(self, data: Dict[str, Any]) -> Client:
        """
        Cadastra um novo cliente.

        Args:
            data: Campos do formulário (name, phone, address, cpf, cnpj, notes)

        Returns:
            Cliente criado
        """
        fields = self._clean_fields(data)
        with self.state.lock:
            client = Client(id=new_id(), **fields)
            self.state.clients.insert(0, client)
            self.persistence.save(CLIENTS, self.state)
        return client

    def update_client(self, client_id: str, data: Dict[str, Any]) -> Client:
        """
        Substitui todos os campos de um cliente, exceto o id.

        Raises:
            NotFoundError: Cliente inexistente
        """
        fields = self._clean_fields(data)
        with self.state.lock:
            client = self.state.find_client(client_id)
            if client is None:
                raise NotFoundError('Cliente não encontrado.')
            for key, value in fields.items():
                setattr(client, key, value)
            self.persistence.save(CLIENTS, self.state)
        return client

    def delete_client(self, client_id: str) -> None:
        """
        Exclui um cliente sem ordens de serviço vinculadas.

        Raises:
            ConflictError: Existe OS apontando para o cliente
            NotFoundError: Cliente inexistente
        """
        with self.state.lock:
            if self.state.is_client_referenced(client_id):
                raise ConflictError('Cliente vinculado a uma Ordem de Serviço!')
            client = self.state.find_client(client_id)
            if client is None:
                raise NotFoundError('Cliente não encontrado.')
            self.state.clients.remove(client)
            self.persistence.save(CLIENTS, self.state)
