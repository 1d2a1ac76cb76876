# ==============================================================================
# REPOSITÓRIO DE CONFIGURAÇÕES
# ==============================================================================
# Encapsula o acesso a nfs_link.json
# Guarda uma única string JSON: o link de emissão de NFS-e.
# ==============================================================================

from techservice.config import DEFAULT_NFS_LINK
from techservice.repositories.base import ValueRepository


class SettingsRepository(ValueRepository):
    """
    Repositório do link de NFS-e.

    Formato de nfs_link.json:
        "https://www.nfse.gov.br/EmissorNacional/..."
    """

    FILE_NAME = 'nfs_link.json'

    def get_nfs_link(self) -> str:
        """
        Obtém o link gravado.

        Returns:
            Link salvo ou o padrão, se nunca foi configurado
        """
        if not self.exists():
            return DEFAULT_NFS_LINK
        return self.load() or DEFAULT_NFS_LINK

    def set_nfs_link(self, link: str) -> None:
        self.save(link)
