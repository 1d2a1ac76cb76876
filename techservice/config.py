# ==============================================================================
# CONFIGURAÇÃO DA APLICAÇÃO
# ==============================================================================
# Valores lidos de variáveis de ambiente com padrões seguros para uso local.
#
# Variáveis:
#   TECHSERVICE_SECRET_KEY  → Chave de sessão do Flask (obrigatória em produção)
#   TECHSERVICE_DATA_DIR    → Pasta dos snapshots JSON
#   TECHSERVICE_PRODUCTION  → "1" ativa o modo produção
#   TECHSERVICE_PROFILING   → "0" desativa os logs de desempenho
# ==============================================================================

import os

BASE = os.path.dirname(os.path.abspath(__file__))

# Pasta padrão dos dados: <raiz do projeto>/data
DATA_DIR = os.environ.get(
    'TECHSERVICE_DATA_DIR',
    os.path.join(os.path.dirname(BASE), 'data')
)

PRODUCTION_MODE = os.environ.get('TECHSERVICE_PRODUCTION', '0') == '1'

ENABLE_PROFILING = os.environ.get('TECHSERVICE_PROFILING', '1') == '1'

_DEFAULT_SECRET = 'techservice_dev_secret_key_change_in_production'
SECRET_KEY = os.environ.get('TECHSERVICE_SECRET_KEY') or _DEFAULT_SECRET

# Sessão: 24 horas, cookie inacessível a JS
SESSION_CONFIG = {
    'SESSION_COOKIE_HTTPONLY': True,
    'SESSION_COOKIE_SECURE': False,
    'SESSION_COOKIE_SAMESITE': 'Lax',
    'PERMANENT_SESSION_LIFETIME': 86400,
}

# Limite do corpo das requisições (restauração de backup)
MAX_CONTENT_LENGTH = 5 * 1024 * 1024

# ═══════════════════════════════════════════════════════════════════════════
# CONSTANTES DE DOMÍNIO
# ═══════════════════════════════════════════════════════════════════════════

DEFAULT_NFS_LINK = 'https://www.nfse.gov.br/EmissorNacional/Login?ReturnUrl=%2fEmissorNacional'

# Etiqueta de esquema gravada em todo backup exportado
BACKUP_VERSION = '1.2.5'

# Quantidade de arquivos de backup mantidos na pasta backups/
MAX_BACKUPS = 7

# Tamanho do ranking de clientes nos relatórios
RANKING_SIZE = 5

# Nome exibido quando a OS aponta para um cliente removido
DELETED_CLIENT_NAME = 'Cliente Excluído'
