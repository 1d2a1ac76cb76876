# ==============================================================================
# PROFILING INTERNO
# ==============================================================================
# Mede o tempo das rotas e de funções críticas (relatórios, backup) e grava
# logs legíveis em <pasta de dados>/logs/.
#
# ATIVAR/DESATIVAR: variável TECHSERVICE_PROFILING (config.ENABLE_PROFILING)
# ==============================================================================

import os
import threading
import time
from datetime import datetime
from functools import wraps

from techservice import config

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURAÇÃO
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = config.ENABLE_PROFILING

# Limites de tempo (ms)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

LOGS_DIR = os.path.join(config.DATA_DIR, 'logs')

PERFORMANCE_LOG = 'performance.log'
SLOW_ROUTES_LOG = 'slow_routes.log'
SLOW_FUNCTIONS_LOG = 'slow_functions.log'

# Nomes legíveis das rotas para os logs
ROUTE_NAMES = {
    # Autenticação
    'POST /api/login': 'Entrar',
    'POST /api/logout': 'Sair',

    # Ordens de serviço
    'GET /api/services': 'Listar OS',
    'POST /api/services': 'Abrir OS',
    'POST /api/services/<order_id>/status': 'Alterar status da OS',
    'GET /api/services/<order_id>/print': 'Imprimir OS',

    # Clientes
    'GET /api/clients': 'Listar clientes',
    'POST /api/clients': 'Cadastrar cliente',
    'PUT /api/clients/<client_id>': 'Editar cliente',
    'DELETE /api/clients/<client_id>': 'Excluir cliente',

    # Financeiro e relatórios
    'GET /api/finance': 'Ver financeiro',
    'GET /api/reports': 'Ver relatórios',

    # Configurações
    'GET /api/settings/nfs-link': 'Ver link NFS-e',
    'POST /api/settings/nfs-link': 'Salvar link NFS-e',
    'PUT /api/settings/account': 'Editar conta',
    'GET /api/backup': 'Exportar backup',
    'POST /api/backup/restore': 'Restaurar backup',
}

_log_lock = threading.Lock()


def set_logs_dir(path):
    """Redireciona os logs (a aplicação usa <data_dir>/logs)."""
    global LOGS_DIR
    LOGS_DIR = path


# ═══════════════════════════════════════════════════════════════════════════
# ESCRITA DOS LOGS
# ═══════════════════════════════════════════════════════════════════════════

def _get_timestamp():
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filename, content):
    """Acrescenta ao arquivo de log. Falha de escrita não afeta a aplicação."""
    try:
        with _log_lock:
            os.makedirs(LOGS_DIR, exist_ok=True)
            with open(os.path.join(LOGS_DIR, filename), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        pass


def _get_route_name(method, path, rule=None):
    """Nome legível da rota; cai para 'MÉTODO /caminho'."""
    key = f"{method} {path}"
    if key in ROUTE_NAMES:
        return ROUTE_NAMES[key]
    if rule:
        rule_key = f"{method} {rule}"
        if rule_key in ROUTE_NAMES:
            return ROUTE_NAMES[rule_key]
    return key


# ═══════════════════════════════════════════════════════════════════════════
# ROTAS
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, user=None):
    if not ENABLE_PROFILING:
        return

    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Ação: {_get_route_name(method, path, rule)}
Usuário: {user or 'anônimo'}
Rota: {method} {path}
Tempo: {time_ms:.0f} ms
"""
    _write_log(PERFORMANCE_LOG, log_entry)


def log_slow_route(method, path, rule, time_ms, user=None, level='WARNING'):
    """
    Registra uma rota lenta em slow_routes.log.

    Args:
        level: 'WARNING' (>300ms) ou 'CRITICAL' (>700ms)
    """
    if not ENABLE_PROFILING:
        return

    severity = 'LENTA' if level == 'WARNING' else 'MUITO LENTA'
    threshold = THRESHOLD_WARNING if level == 'WARNING' else THRESHOLD_CRITICAL
    log_entry = f"""
[{level}] {_get_timestamp()}
────────────────────────────────────────
Rota {severity}: {_get_route_name(method, path, rule)}
Usuário: {user or 'anônimo'}
Detalhe: {method} {path}
Tempo: {time_ms:.0f} ms (limite: {threshold} ms)
────────────────────────────────────────
"""
    _write_log(SLOW_ROUTES_LOG, log_entry)


def init_profiling(app):
    """
    Registra os hooks before_request/after_request na app Flask.

    Uso:
        from techservice.performance_logger import init_profiling
        init_profiling(app)
    """
    if not ENABLE_PROFILING:
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request, session

        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        method = request.method
        path = request.path
        rule = str(request.url_rule) if request.url_rule else path
        user = session.get('username')

        log_route_performance(method, path, rule, elapsed, user)
        if elapsed >= THRESHOLD_CRITICAL:
            log_slow_route(method, path, rule, elapsed, user, 'CRITICAL')
        elif elapsed >= THRESHOLD_WARNING:
            log_slow_route(method, path, rule, elapsed, user, 'WARNING')
        return response


# ═══════════════════════════════════════════════════════════════════════════
# DECORADOR PARA FUNÇÕES
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Mede chamadas de funções críticas.

    Uso:
        @profile_function
        def summarize(...): ...

        @profile_function(name="Montar relatório")
        def build_report(...): ...
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn

        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                if elapsed_ms >= THRESHOLD_WARNING:
                    _log_slow_function_call(func_name, elapsed_ms)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name, time_ms):
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'
    log_entry = f"""
[{severity}] {_get_timestamp()}
Função: {func_name}
Tempo: {time_ms:.0f} ms
────────────────────────────────────────
"""
    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


__all__ = [
    'ENABLE_PROFILING',
    'set_logs_dir',
    'init_profiling',
    'profile_function',
]
