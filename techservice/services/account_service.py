# ==============================================================================
# SERVIÇO DE CONTAS
# ==============================================================================
# Autenticação, edição de contas e checagem de nível de acesso.
#
# SENHAS:
# - Gravadas como hash werkzeug (pbkdf2/scrypt)
# - Valor sem prefixo de hash é texto plano legado (backups antigos):
#   comparado exatamente e convertido em hash na próxima gravação da conta
#
# A mensagem de falha de login é sempre a mesma, sem indicar se o erro
# foi no usuário ou na senha.
# ==============================================================================

from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from techservice.exceptions import AuthError, NotFoundError, ValidationError
from techservice.models.entities import Account, AccessLevel, View
from techservice.models.state import AppState
from techservice.models.validators import require
from techservice.services.persistence_service import ACCOUNTS, PersistenceService

AUTH_FAILED_MESSAGE = 'Usuário ou senha inválidos.'

_HASH_PREFIXES = ('pbkdf2:', 'scrypt:')


def is_password_hash(value: str) -> bool:
    """Verifica se o valor gravado já é um hash werkzeug."""
    return bool(value) and value.startswith(_HASH_PREFIXES)


def check_password(stored: str, password: str) -> bool:
    """Compara a senha digitada com o hash (ou texto plano legado)."""
    if is_password_hash(stored):
        return check_password_hash(stored, password)
    return stored == password


def parse_access_level(raw: Any) -> AccessLevel:
    try:
        return AccessLevel(str(raw or '').strip().upper())
    except ValueError:
        raise ValidationError('Nível de acesso inválido.')


def can_access(account: Optional[Account], view: Any) -> bool:
    """Sem conta logada nada é acessível; SUPPORT não vê financeiro, relatórios e configurações."""
    if account is None:
        return False
    return account.can_access(View(view))


class AccountService:
    """
    Serviço de contas de acesso.

    Responsabilidades:
    - Autenticação (login/logout da sessão)
    - Edição de conta existente (não há criação nem exclusão)
    - Checagem de acesso às telas
    """

    def __init__(self, state: AppState, persistence: PersistenceService):
        self.state = state
        self.persistence = persistence

    # =========================================================================
    # AUTENTICAÇÃO
    # =========================================================================

    def authenticate(self, username: str, password: str) -> Account:
        """
        Confere as credenciais.

        O usuário é comparado sem diferenciar maiúsculas.

        Raises:
            AuthError: Credenciais inválidas (mensagem genérica)
        """
        username = str(username or '').strip().lower()
        password = str(password or '')
        if not username or not password:
            raise AuthError(AUTH_FAILED_MESSAGE)

        for account in self.state.accounts:
            if account.username.lower() == username:
                if check_password(account.password, password):
                    return account
                break

        print(f"[AUTH] Falha de login para '{username}'")
        raise AuthError(AUTH_FAILED_MESSAGE)

    def login(self, username: str, password: str) -> Account:
        """Autentica e marca a conta como logada na sessão."""
        account = self.authenticate(username, password)
        self.state.current_account = account
        print(f"[AUTH] Login: {account.username}")
        return account

    def logout(self) -> None:
        self.state.current_account = None

    # =========================================================================
    # EDIÇÃO
    # =========================================================================

    def update_account(
        self,
        account_id: str,
        username: Any,
        password: Any = None,
        access_level: Any = None,
    ) -> Account:
        """
        Substitui usuário, senha e nível de acesso de uma conta.

        Senha vazia mantém a atual. Senha legada em texto plano é
        convertida em hash nesta gravação.

        Raises:
            ValidationError: Usuário vazio, nível inválido ou usuário já em uso
            NotFoundError: Conta inexistente
        """
        username = require(username, 'Informe o usuário.')
        level = parse_access_level(access_level) if access_level else None
        password = str(password or '')

        with self.state.lock:
            account = self.state.find_account(account_id)
            if account is None:
                raise NotFoundError('Conta não encontrada.')
            for other in self.state.accounts:
                if other.id != account.id and other.username.lower() == username.lower():
                    raise ValidationError('Usuário já está em uso.')

            account.username = username
            if password:
                account.password = generate_password_hash(password)
            elif not is_password_hash(account.password):
                account.password = generate_password_hash(account.password)
            if level is not None:
                account.access_level = level
            self.persistence.save(ACCOUNTS, self.state)
        return account

    def can_access(self, account: Optional[Account], view: Any) -> bool:
        return can_access(account, view)
