# ==============================================================================
# SERVIÇO DE BACKUP - Exportação e restauração do sistema completo
# ==============================================================================
# Formato (JSON):
#   {users, clients, services, nfsLink, version, timestamp}
#
# RESTAURAÇÃO:
# - Tudo ou nada: o arquivo inteiro é validado e convertido em entidades
#   ANTES de qualquer mutação
# - users, clients e services são obrigatórios; nfsLink ausente volta ao padrão
# - O campo version é gravado mas não é conferido na importação
#
# ARQUIVOS:
# - write_backup_file() grava backups/backup-sistema-YYYY-MM-DD.json
# - Mantém só os últimos MAX_BACKUPS arquivos (rotação)
# ==============================================================================

import json
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from techservice.config import BACKUP_VERSION, DEFAULT_NFS_LINK, MAX_BACKUPS
from techservice.exceptions import ImportFormatError, PersistenceError
from techservice.models.entities import Account, Client, ServiceOrder, utc_now_iso
from techservice.models.state import AppState
from techservice.performance_logger import profile_function
from techservice.services.persistence_service import PersistenceService

REQUIRED_KEYS = ('users', 'clients', 'services')

INVALID_FILE_MESSAGE = 'Arquivo de backup inválido.'


class BackupService:
    """
    Serviço de backup do sistema.

    Responsabilidades:
    - Exportar todas as coleções num único documento
    - Restaurar um documento exportado (substitui tudo)
    - Gravar e rotacionar arquivos de backup em disco

    Uso:
        backup = BackupService(state, persistence, data_dir)
        payload = backup.export_backup()
        backup.import_backup(payload)
    """

    BACKUP_DIR_NAME = 'backups'
    FILE_PREFIX = 'backup-sistema-'
    FILE_SUFFIX = '.json'

    def __init__(self, state: AppState, persistence: PersistenceService, data_dir: str):
        self.state = state
        self.persistence = persistence
        self.backup_root = os.path.join(data_dir, self.BACKUP_DIR_NAME)

    # =========================================================================
    # EXPORTAÇÃO
    # =========================================================================

    def export_backup(self) -> Dict[str, Any]:
        """Documento com todas as coleções, versão e instante da exportação."""
        with self.state.lock:
            return {
                'users': [account.to_dict() for account in self.state.accounts],
                'clients': [client.to_dict() for client in self.state.clients],
                'services': [order.to_dict() for order in self.state.service_orders],
                'nfsLink': self.state.nfs_link,
                'version': BACKUP_VERSION,
                'timestamp': utc_now_iso(),
            }

    def export_json(self) -> str:
        return json.dumps(self.export_backup(), ensure_ascii=False, indent=2)

    def backup_filename(self, now: Optional[datetime] = None) -> str:
        """Nome do arquivo de download/gravação: backup-sistema-YYYY-MM-DD.json"""
        now = now or datetime.now()
        return f"{self.FILE_PREFIX}{now.strftime('%Y-%m-%d')}{self.FILE_SUFFIX}"

    # =========================================================================
    # RESTAURAÇÃO
    # =========================================================================

    def _parse_list(self, payload: Dict[str, Any], key: str, entity_class) -> List[Any]:
        items = payload.get(key)
        if not isinstance(items, list):
            raise ImportFormatError(INVALID_FILE_MESSAGE)
        if not all(isinstance(item, dict) for item in items):
            raise ImportFormatError(INVALID_FILE_MESSAGE)
        return [entity_class.from_dict(item) for item in items]

    def _check_accounts(self, users: List[Dict[str, Any]]) -> None:
        """Contas precisam de usuário e senha em texto, sem usuário repetido."""
        seen = set()
        for user in users:
            username = user.get('username')
            password = user.get('password')
            if not isinstance(username, str) or not username.strip():
                raise ImportFormatError(INVALID_FILE_MESSAGE)
            if not isinstance(password, str) or not password:
                raise ImportFormatError(INVALID_FILE_MESSAGE)
            key = username.strip().lower()
            if key in seen:
                raise ImportFormatError(INVALID_FILE_MESSAGE)
            seen.add(key)

    def parse_backup(self, payload: Any) -> AppState:
        """
        Converte um documento de backup num AppState novo, sem tocar no atual.

        Args:
            payload: dict ou texto JSON

        Raises:
            ImportFormatError: JSON inválido, não é objeto ou falta users/clients/services,
                ou alguma conta sem usuário/senha ou com usuário repetido
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError:
                raise ImportFormatError(INVALID_FILE_MESSAGE)
        if not isinstance(payload, dict):
            raise ImportFormatError(INVALID_FILE_MESSAGE)
        for key in REQUIRED_KEYS:
            if key not in payload:
                raise ImportFormatError(INVALID_FILE_MESSAGE)

        accounts = self._parse_list(payload, 'users', Account)
        self._check_accounts(payload['users'])

        nfs_link = payload.get('nfsLink')
        return AppState(
            accounts=accounts,
            clients=self._parse_list(payload, 'clients', Client),
            service_orders=self._parse_list(payload, 'services', ServiceOrder),
            nfs_link=nfs_link if isinstance(nfs_link, str) and nfs_link.strip() else DEFAULT_NFS_LINK,
        )

    @profile_function(name='Restaurar backup')
    def import_backup(self, payload: Any) -> AppState:
        """
        Substitui todas as coleções pelo conteúdo do backup e grava os snapshots.

        Returns:
            Estado atualizado

        Raises:
            ImportFormatError: Documento inválido (nada é alterado)
            PersistenceError: Falha ao gravar os snapshots
        """
        restored = self.parse_backup(payload)
        with self.state.lock:
            current_id = self.state.current_account.id if self.state.current_account else None
            self.state.replace(restored)
            self.state.current_account = self.state.find_account(current_id) if current_id else None
            self.persistence.save_all(self.state)
        print(f"[BACKUP] Restaurado: {len(restored.accounts)} contas, "
              f"{len(restored.clients)} clientes, {len(restored.service_orders)} OS")
        return self.state

    # =========================================================================
    # ARQUIVOS EM DISCO
    # =========================================================================

    def _get_existing_backups(self) -> List[str]:
        """Arquivos de backup válidos, mais recente primeiro."""
        if not os.path.isdir(self.backup_root):
            return []
        backups = []
        for item in os.listdir(self.backup_root):
            if not (item.startswith(self.FILE_PREFIX) and item.endswith(self.FILE_SUFFIX)):
                continue
            date_str = item[len(self.FILE_PREFIX):-len(self.FILE_SUFFIX)]
            try:
                datetime.strptime(date_str, '%Y-%m-%d')
            except ValueError:
                continue
            if os.path.isfile(os.path.join(self.backup_root, item)):
                backups.append(item)
        backups.sort(reverse=True)
        return backups

    def rotate_backups(self) -> int:
        """
        Remove os backups além dos MAX_BACKUPS mais recentes.

        Returns:
            Quantidade de arquivos removidos
        """
        deleted = 0
        for name in self._get_existing_backups()[MAX_BACKUPS:]:
            try:
                os.remove(os.path.join(self.backup_root, name))
            except OSError as e:
                print(f"[BACKUP ERRO] Não foi possível remover {name}: {e}")
                continue
            deleted += 1
            print(f"[BACKUP] Backup antigo removido: {name}")
        return deleted

    @profile_function(name='Gravar arquivo de backup')
    def write_backup_file(self, now: Optional[datetime] = None) -> str:
        """
        Grava o backup do dia (sobrescreve o do mesmo dia) e rotaciona.

        Returns:
            Caminho do arquivo gravado

        Raises:
            PersistenceError: Falha de escrita
        """
        path = os.path.join(self.backup_root, self.backup_filename(now))
        try:
            os.makedirs(self.backup_root, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(self.export_json())
        except OSError as e:
            print(f"[BACKUP ERRO] {e}")
            raise PersistenceError(f'Falha ao gravar backup: {e}')
        print(f"[BACKUP] Backup criado: {os.path.basename(path)}")
        self.rotate_backups()
        return path
