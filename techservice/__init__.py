# ==============================================================================
# TECHSERVICE - Ordens de serviço, clientes e relatórios
# ==============================================================================
# Pacote principal. Estrutura:
#   models/        → Entidades (dataclasses) e estado da sessão
#   repositories/  → Acesso aos snapshots JSON
#   services/      → Regras de negócio, consultas e relatórios
#   main.py        → Superfície HTTP (Flask, JSON)
# ==============================================================================

__version__ = '1.2.5'
