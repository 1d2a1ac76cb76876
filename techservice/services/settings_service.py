# ==============================================================================
# SERVIÇO DE CONFIGURAÇÕES - Link de emissão de NFS-e
# ==============================================================================

from techservice.models.state import AppState
from techservice.models.validators import validate_url
from techservice.services.persistence_service import NFS_LINK, PersistenceService


class SettingsService:
    """Leitura e gravação do link do emissor de NFS-e."""

    def __init__(self, state: AppState, persistence: PersistenceService):
        self.state = state
        self.persistence = persistence

    def get_nfs_link(self) -> str:
        return self.state.nfs_link

    def update_nfs_link(self, link) -> str:
        """
        Valida e grava o novo link.

        Raises:
            ValidationError: Link vazio ou sem http(s)://host
        """
        link = validate_url(link)
        with self.state.lock:
            self.state.nfs_link = link
            self.persistence.save(NFS_LINK, self.state)
        return link
