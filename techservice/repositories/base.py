# ==============================================================================
# REPOSITÓRIO BASE - Funcionalidade comum para acesso a snapshots JSON
# ==============================================================================

import json
import os
import threading
from abc import ABC, abstractmethod
from typing import Any, List

from techservice.exceptions import PersistenceError


class BaseRepository(ABC):
    """
    Classe base abstrata para todos os repositórios.
    Cada repositório é dono de um único arquivo de snapshot.

    Diferente de um cache, aqui nenhuma falha é silenciada:
    - Arquivo ausente → exists() retorna False (o chamador decide semear)
    - JSON corrompido ou erro de disco → PersistenceError
    """

    # Lock global para evitar escritas concorrentes nos arquivos
    _file_lock = threading.RLock()

    # Nome do arquivo dentro da pasta de dados (definido nas subclasses)
    FILE_NAME = ''

    def __init__(self, data_dir: str):
        """
        Inicializa o repositório.

        Args:
            data_dir: Pasta onde ficam os snapshots JSON
        """
        self.data_dir = data_dir
        self.file_path = os.path.join(data_dir, self.FILE_NAME)

    def exists(self) -> bool:
        """Verifica se já existe snapshot gravado."""
        return os.path.exists(self.file_path)

    @abstractmethod
    def _check_shape(self, data: Any) -> bool:
        """Confere se o conteúdo lido tem o formato esperado."""

    def _read_raw(self) -> Any:
        """
        Lê os dados crus do arquivo JSON.

        Raises:
            PersistenceError: Arquivo ilegível, JSON inválido ou formato inesperado
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise PersistenceError(
                    f'Falha ao ler {self.FILE_NAME}: {e}'
                ) from e
        if not self._check_shape(data):
            raise PersistenceError(f'Formato inesperado em {self.FILE_NAME}')
        return data

    def _write_raw(self, data: Any) -> None:
        """
        Grava os dados no arquivo JSON.

        Raises:
            PersistenceError: Se a gravação não puder ser concluída
        """
        with self._file_lock:
            # Grava num temporário primeiro para atomicidade
            temp_path = self.file_path + '.tmp'
            try:
                os.makedirs(self.data_dir, exist_ok=True)
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise PersistenceError(
                    f'Falha ao gravar {self.FILE_NAME}: {e}'
                ) from e


class ListRepository(BaseRepository):
    """
    Repositório para coleções gravadas como array JSON de entidades.

    Exemplo: clients.json -> [{...}, {...}]
    """

    # Dataclass com to_dict()/from_dict() (definida nas subclasses)
    entity_class = None

    def _check_shape(self, data: Any) -> bool:
        return isinstance(data, list) and all(isinstance(r, dict) for r in data)

    def load(self) -> List[Any]:
        """
        Carrega a coleção como entidades, na ordem gravada.

        Returns:
            Lista de entidades
        """
        return [self.entity_class.from_dict(record) for record in self._read_raw()]

    def save(self, entities: List[Any]) -> None:
        """
        Grava a coleção inteira (substituição completa).

        Args:
            entities: Lista completa de entidades
        """
        self._write_raw([entity.to_dict() for entity in entities])


class ValueRepository(BaseRepository):
    """
    Repositório para um único valor string.

    Exemplo: nfs_link.json -> "https://..."
    """

    def _check_shape(self, data: Any) -> bool:
        return isinstance(data, str)

    def load(self) -> str:
        return self._read_raw()

    def save(self, value: str) -> None:
        self._write_raw(value)
