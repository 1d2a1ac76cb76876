# ==============================================================================
# WSGI Entry Point - Para Gunicorn em produção
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUTURA DO PROJETO:
#   repo_root/           <- Diretório de trabalho (em sys.path automaticamente)
#   ├── wsgi.py          <- Este arquivo
#   ├── pyproject.toml
#   └── techservice/     <- Pacote Python
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# A pasta de dados vem de TECHSERVICE_DATA_DIR (padrão: ./data)
# ==============================================================================

from techservice.main import create_app

app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
