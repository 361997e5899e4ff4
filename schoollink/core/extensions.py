"""
Módulo Central de Extensões.
Evita importações circulares centralizando as instâncias das extensões e
os serviços do SchoolLink que vivem durante todo o processo.
"""
from dataclasses import dataclass
from typing import Any, Optional

from flask import current_app, session
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_wtf.csrf import CSRFProtect

from .access import AccessGate
from .navigation import AppContext, ViewController, ViewState
from .session import IdentitySession
from .sync import CollectionSync

EXTENSION_KEY = 'schoollink'

# 1. Limiter (Rate Limiting) - usado só no login
limiter = Limiter(
    key_func=get_remote_address,
    # Em produção, idealmente usar Redis. Para dev/demo, memória é ok.
    storage_uri="memory://",
)

# 2. CSRF Protection
csrf = CSRFProtect()


@dataclass
class SchoolLinkServices:
    """Serviços de processo: sessão de identidade, coleções, controle de acesso e credenciais."""

    identity: IdentitySession
    sync: CollectionSync
    gate: AccessGate
    # CredentialChecker (schoollink.auth.services)
    credentials: Any = None
    init_error: Optional[Exception] = None


def get_services() -> SchoolLinkServices:
    return current_app.extensions[EXTENSION_KEY]


# === ESTADO POR NAVEGADOR (cookie de sessão do Flask) ===

def load_controller() -> ViewController:
    """Reconstrói o ViewController do usuário atual a partir da sessão do Flask."""
    servicos = get_services()
    contexto = AppContext.from_dict(session.get('app_context'), servicos.identity.identity_token)
    estado = ViewState.from_dict(session.get('view_state'), servicos.sync.events)
    return ViewController(context=contexto, state=estado, gate=servicos.gate)


def save_controller(controller: ViewController) -> None:
    session['app_context'] = controller.context.to_dict()
    session['view_state'] = controller.state.to_dict()
