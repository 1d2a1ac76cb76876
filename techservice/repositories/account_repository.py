# ==============================================================================
# REPOSITÓRIO DE CONTAS
# ==============================================================================
# Encapsula todo o acesso a users.json
# As contas são gravadas como array: [{id, username, password, accessLevel}]
# ==============================================================================

from techservice.models.entities import Account
from techservice.repositories.base import ListRepository


class AccountRepository(ListRepository):
    """
    Repositório de contas de acesso.

    Formato de users.json:
    [
        {"id": "admin-01", "username": "ADMIN", "password": "scrypt:...", "accessLevel": "ADMIN"}
    ]
    """

    FILE_NAME = 'users.json'
    entity_class = Account

    # NOTA: A validação de senha é feita SOMENTE no AccountService,
    # com check_password_hash. O repositório só cuida da persistência.
