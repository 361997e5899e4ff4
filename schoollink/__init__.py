"""
Módulo Principal da Aplicação (Application Factory)
"""

import atexit
from typing import Optional

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix # Importação necessária para o Cloud Run
from config import Config

from .core.access import AccessGate
from .core.database import DocumentStore, create_document_store
from .core.errors import InitializationError
from .core.extensions import EXTENSION_KEY, SchoolLinkServices, csrf, limiter
from .core.identity import FirebaseIdentityProvider, IdentityProvider, parse_firebase_config
from .core.logger import get_logger
from .core.retry import RetryPolicy
from .core.session import IdentitySession
from .core.sync import CollectionSync

logger = get_logger(__name__)


def _iniciar_servicos(
    app: Flask,
    identity_provider: Optional[IdentityProvider],
    document_store: Optional[DocumentStore],
    credential_checker=None,
) -> SchoolLinkServices:
    """
    Sobe a sessão de identidade e a sincronização de coleções do processo.

    Falhas de construção viram `init_error` (tela de erro) em vez de exceção,
    para que a aplicação continue respondendo.
    """
    erro_inicializacao = None
    firebase_config = {}
    store = document_store

    try:
        firebase_config = parse_firebase_config(app.config.get('FIREBASE_CONFIG'))
        if store is None:
            store = create_document_store(firebase_config)
    except InitializationError as e:
        logger.critical(f"Falha na inicialização do banco: {e}")
        erro_inicializacao = e

    retry = RetryPolicy(
        max_attempts=app.config.get('RETRY_MAX_ATTEMPTS', 3),
        base_delay=app.config.get('RETRY_BASE_DELAY', 1.0),
    )
    sync = CollectionSync(store, app.config['SCHOOLLINK_APP_ID'], retry=retry)
    identidade = IdentitySession(
        identity_provider or FirebaseIdentityProvider(),
        firebase_config,
        bootstrap_token=app.config.get('INITIAL_AUTH_TOKEN'),
    )
    # As coleções só são assinadas depois que a sessão fica pronta
    identidade.add_ready_listener(lambda sessao: sync.subscribe(sessao.is_ready))

    if erro_inicializacao is None:
        try:
            identidade.start()
        except InitializationError as e:
            erro_inicializacao = e
    else:
        identidade.fail(erro_inicializacao)

    atexit.register(sync.close)
    atexit.register(identidade.stop)

    if credential_checker is None:
        from .auth.services import MockCredentialChecker
        credential_checker = MockCredentialChecker()

    return SchoolLinkServices(
        identity=identidade,
        sync=sync,
        gate=AccessGate(),
        credentials=credential_checker,
        init_error=erro_inicializacao,
    )


def create_app(
    config_class=Config,
    identity_provider: Optional[IdentityProvider] = None,
    document_store: Optional[DocumentStore] = None,
    credential_checker=None,
):
    """
    Cria e configura uma instância da aplicação Flask.

    `identity_provider` e `document_store` substituem os adaptadores do
    Firebase (usado nos testes). `credential_checker` substitui as contas
    ilustrativas do login.
    """

    app = Flask(__name__, instance_relative_config=True)

    # === CORREÇÃO HTTPS (Cloud Run) ===
    # Ajusta o Flask para entender que está atrás de um Proxy (Cloud Run)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # 1. Carrega a configuração
    app.config.from_object(config_class)

    # 2. Extensões
    csrf.init_app(app)
    limiter.init_app(app)

    # 3. Sessão de identidade + coleções vivas
    app.extensions[EXTENSION_KEY] = _iniciar_servicos(app, identity_provider, document_store, credential_checker)

    # 4. Configura os Blueprints (Módulos)

    # Escolha de papel, login e logout
    from .auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/')

    # Navegação e leitura das telas
    from .board import board_bp
    app.register_blueprint(board_bp, url_prefix='/')

    # Escritas do professor (eventos, avisos, notas)
    # O url_prefix='/publish' já está definido dentro do publish/__init__.py
    from .publish import publish_bp
    app.register_blueprint(publish_bp)

    # 5. Rota de Health Check
    @app.route("/health")
    def health_check():
        return "Servidor SchoolLink no ar!", 200

    return app
