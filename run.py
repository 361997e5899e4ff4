"""
Ponto de Entrada da Aplicação (Runner)

Este script importa a "Application Factory" (create_app) do pacote
'schoollink' e inicia o servidor de desenvolvimento do Flask.

Para executar o servidor:
(Com o ambiente virtual .venv ativo)
$ python run.py
"""

from schoollink import create_app

# Cria a instância da aplicação usando a factory
app = create_app()

if __name__ == "__main__":
    # use_reloader=False: o reloader criaria um segundo processo com
    # listeners do Firestore duplicados
    app.run(host='0.0.0.0', port=5000, debug=app.config['DEBUG'], use_reloader=False)
