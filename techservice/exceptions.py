# ==============================================================================
# EXCEÇÕES DO DOMÍNIO
# ==============================================================================
# Cada falha de regra de negócio tem sua própria classe para que a camada HTTP
# possa traduzi-la numa notificação curta com o status adequado.
# ==============================================================================


class TechServiceError(Exception):
    """Erro base da aplicação."""

    status_code = 400

    def __init__(self, message: str = ''):
        super().__init__(message)
        self.message = message


class ConflictError(TechServiceError):
    """Remoção de cliente bloqueada por uma ordem de serviço vinculada."""

    status_code = 409


class NotFoundError(TechServiceError):
    """Registro alvo da operação não existe."""

    status_code = 404


class ValidationError(TechServiceError):
    """Campo obrigatório vazio, documento malformado, URL inválida, etc."""

    status_code = 400


class PersistenceError(TechServiceError):
    """Snapshot não pôde ser lido ou gravado."""

    status_code = 500


class AuthError(TechServiceError):
    """Credenciais inválidas. Nunca indica qual campo estava errado."""

    status_code = 401


class ImportFormatError(TechServiceError):
    """Backup sem os arrays obrigatórios (users, clients, services)."""

    status_code = 400
