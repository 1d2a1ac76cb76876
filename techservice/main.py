# ==============================================================================
# APLICAÇÃO WEB - Rotas JSON da assistência técnica
# ==============================================================================
# create_app() monta a app Flask sobre um AppContainer (uma pasta de dados).
# As rotas só orquestram requisição → serviço → resposta; toda regra de
# negócio está em services/.
#
# RESPOSTAS:
#   sucesso → {"ok": true, ..., "message": "..."}
#   erro    → {"ok": false, "error": "..."} com o status do TechServiceError
# ==============================================================================

import os
from functools import wraps

from flask import Flask, Response, g, jsonify, request, session

from techservice import config
from techservice.app_container import AppContainer
from techservice.exceptions import TechServiceError, ValidationError
from techservice.models.entities import View
from techservice.performance_logger import init_profiling, set_logs_dir
from techservice.services.query_service import filter_clients, filter_service_orders


def _json_body():
    """Corpo JSON da requisição (ou formulário) como dict."""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError('Corpo da requisição inválido.')
    return data


def _order_dict(state, order):
    """OS com o nome do cliente resolvido para a listagem."""
    client = state.resolve_client(order)
    d = order.to_dict()
    d['clientName'] = client.name if client else config.DELETED_CLIENT_NAME
    return d


def create_app(data_dir=None, test_config=None):
    """
    Cria a aplicação Flask.

    Args:
        data_dir: Pasta dos snapshots (padrão: TECHSERVICE_DATA_DIR)
        test_config: Sobrescreve chaves de app.config (testes)
    """
    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY
    app.config.update(config.SESSION_CONFIG)
    app.config['MAX_CONTENT_LENGTH'] = config.MAX_CONTENT_LENGTH
    if config.PRODUCTION_MODE:
        app.config['SESSION_COOKIE_SECURE'] = True
    if test_config:
        app.config.update(test_config)

    container = AppContainer(data_dir)
    app.extensions['techservice'] = container

    set_logs_dir(os.path.join(container.data_dir, 'logs'))
    init_profiling(app)

    if config.PRODUCTION_MODE and config.SECRET_KEY == config._DEFAULT_SECRET:
        print("[CONFIG] AVISO: TECHSERVICE_SECRET_KEY não definida em produção")

    # ═══════════════════════════════════════════════════════════════════════
    # DECORADORES DE ACESSO
    # ═══════════════════════════════════════════════════════════════════════

    def login_required(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            account_id = session.get('account_id')
            account = container.state.find_account(account_id) if account_id else None
            if account is None:
                session.clear()
                return {"ok": False, "error": "Faça login para continuar."}, 401
            g.account = account
            return f(*args, **kwargs)
        return wrapper

    def view_required(view):
        """Bloqueia contas sem acesso à tela (SUPPORT em financeiro, relatórios e configurações)."""
        def deco(f):
            @wraps(f)
            @login_required
            def wrapper(*args, **kwargs):
                if not container.account_service.can_access(g.account, view):
                    return {"ok": False, "error": "Acesso restrito ao administrador."}, 403
                return f(*args, **kwargs)
            return wrapper
        return deco

    @app.errorhandler(TechServiceError)
    def handle_service_error(e):
        return jsonify({"ok": False, "error": e.message}), e.status_code

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
        return response

    # ═══════════════════════════════════════════════════════════════════════
    # AUTENTICAÇÃO
    # ═══════════════════════════════════════════════════════════════════════

    @app.route('/api/login', methods=['POST'])
    def login():
        data = _json_body()
        container.ensure_loaded()
        account = container.account_service.login(data.get('username'), data.get('password'))
        session.clear()
        session.permanent = True
        session['account_id'] = account.id
        session['username'] = account.username
        return {"ok": True, "account": account.to_public_dict(),
                "message": f"Bem-vindo, {account.username}."}

    @app.route('/api/logout', methods=['POST'])
    @login_required
    def logout():
        container.account_service.logout()
        container.end_session()
        session.clear()
        return {"ok": True, "message": "Sessão encerrada."}

    # ═══════════════════════════════════════════════════════════════════════
    # ORDENS DE SERVIÇO
    # ═══════════════════════════════════════════════════════════════════════

    @app.route('/api/services', methods=['GET'])
    @login_required
    def list_services():
        state = container.state
        orders = filter_service_orders(
            state.service_orders,
            state.clients,
            request.args.get('q', ''),
            request.args.get('status', 'ALL'),
        )
        return {"ok": True, "services": [_order_dict(state, order) for order in orders]}

    @app.route('/api/services', methods=['POST'])
    @login_required
    def create_service():
        order = container.service_order_service.create_service_order(_json_body())
        return {"ok": True, "service": _order_dict(container.state, order),
                "message": "Ordem de serviço criada!"}, 201

    @app.route('/api/services/<order_id>/status', methods=['POST'])
    @login_required
    def update_service_status(order_id):
        data = _json_body()
        order = container.service_order_service.set_status(order_id, data.get('status'))
        return {"ok": True, "service": _order_dict(container.state, order),
                "message": "Status atualizado!"}

    @app.route('/api/services/<order_id>/print', methods=['GET'])
    @login_required
    def print_service(order_id):
        return {"ok": True, "print": container.service_order_service.printable_dict(order_id)}

    # ═══════════════════════════════════════════════════════════════════════
    # CLIENTES
    # ═══════════════════════════════════════════════════════════════════════

    @app.route('/api/clients', methods=['GET'])
    @login_required
    def list_clients():
        clients = filter_clients(container.state.clients, request.args.get('q', ''))
        return {"ok": True, "clients": [client.to_dict() for client in clients]}

    @app.route('/api/clients', methods=['POST'])
    @login_required
    def create_client():
        client = container.client_service.create_client(_json_body())
        return {"ok": True, "client": client.to_dict(), "message": "Cliente cadastrado!"}, 201

    @app.route('/api/clients/<client_id>', methods=['PUT'])
    @login_required
    def update_client(client_id):
        client = container.client_service.update_client(client_id, _json_body())
        return {"ok": True, "client": client.to_dict(), "message": "Cliente atualizado!"}

    @app.route('/api/clients/<client_id>', methods=['DELETE'])
    @login_required
    def delete_client(client_id):
        container.client_service.delete_client(client_id)
        return {"ok": True, "message": "Cliente excluído."}

    # ═══════════════════════════════════════════════════════════════════════
    # FINANCEIRO E RELATÓRIOS
    # ═══════════════════════════════════════════════════════════════════════

    @app.route('/api/finance', methods=['GET'])
    @view_required(View.FINANCE)
    def finance():
        state = container.state
        return {
            "ok": True,
            "summary": container.report_service.finance_summary(),
            "services": [_order_dict(state, order) for order in state.service_orders],
        }

    @app.route('/api/reports', methods=['GET'])
    @view_required(View.REPORTS)
    def reports():
        report = container.report_service.build_report(
            request.args.get('period'),
            request.args.get('start'),
            request.args.get('end'),
        )
        return {"ok": True, "report": report}

    # ═══════════════════════════════════════════════════════════════════════
    # CONFIGURAÇÕES
    # ═══════════════════════════════════════════════════════════════════════

    @app.route('/api/settings/nfs-link', methods=['GET'])
    @login_required
    def get_nfs_link():
        return {"ok": True, "nfsLink": container.settings_service.get_nfs_link()}

    @app.route('/api/settings/nfs-link', methods=['POST'])
    @view_required(View.SETTINGS)
    def update_nfs_link():
        link = container.settings_service.update_nfs_link(_json_body().get('nfsLink'))
        return {"ok": True, "nfsLink": link, "message": "Link da NFS-e salvo!"}

    @app.route('/api/settings/account', methods=['PUT'])
    @view_required(View.SETTINGS)
    def update_account():
        data = _json_body()
        account = container.account_service.update_account(
            data.get('id') or g.account.id,
            data.get('username'),
            data.get('password'),
            data.get('accessLevel'),
        )
        if account.id == session.get('account_id'):
            session['username'] = account.username
        return {"ok": True, "account": account.to_public_dict(), "message": "Conta atualizada!"}

    # ═══════════════════════════════════════════════════════════════════════
    # BACKUP
    # ═══════════════════════════════════════════════════════════════════════

    @app.route('/api/backup', methods=['GET'])
    @login_required
    def export_backup():
        backup = container.backup_service
        backup.write_backup_file()
        return Response(
            backup.export_json(),
            mimetype='application/json',
            headers={'Content-Disposition': f'attachment; filename={backup.backup_filename()}'},
        )

    @app.route('/api/backup/restore', methods=['POST'])
    @login_required
    def restore_backup():
        upload = request.files.get('file')
        if upload is not None:
            payload = upload.read().decode('utf-8', errors='replace')
        else:
            payload = request.get_json(silent=True)
            if payload is None:
                payload = request.get_data(as_text=True)
        state = container.backup_service.import_backup(payload)
        if state.find_account(session.get('account_id')) is None:
            session.clear()
        return {"ok": True, "message": "Backup restaurado com sucesso!"}

    return app


if __name__ == "__main__":
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
    HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
    PORT = int(os.environ.get('FLASK_PORT', 5000))
    print(f"[SERVIDOR] http://{HOST}:{PORT} (dados em {config.DATA_DIR})")
    create_app().run(debug=DEBUG, host=HOST, port=PORT)
