"""
Rotas do Módulo de Autenticação

Gerencia as rotas de escolha de papel, login (contas ilustrativas) e logout.
Todas respondem JSON com a tela resultante.
"""

from flask import abort, current_app, jsonify

from . import auth_bp
from .forms import LoginForm
from schoollink.core.constants import MESSAGES
from schoollink.core.extensions import get_services, limiter, load_controller, save_controller
from schoollink.core.logger import get_logger
from schoollink.core.models import Role
from schoollink.core.views import View

logger = get_logger(__name__)


def _resumo(controller, status=200, **extra):
    corpo = {
        'view': controller.view.value,
        'role': controller.context.role.value if controller.context.role else None,
        'target_role': controller.context.target_role.value if controller.context.target_role else None,
        **extra,
    }
    return jsonify(corpo), status


@auth_bp.route('/role/<role>', methods=['POST'])
def select_role(role):
    """ Escolha de papel na tela inicial -> tela de Login. """
    try:
        papel = Role(role)
    except ValueError:
        abort(404)

    controller = load_controller()
    controller.select_role(papel)
    save_controller(controller)
    return _resumo(controller)


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('LOGIN_RATE_LIMIT', '10 per minute'))
def login():
    """ Confere as credenciais do papel escolhido e abre o painel dele. """
    controller = load_controller()
    papel = controller.context.target_role

    if controller.view != View.LOGIN or papel is None:
        return _resumo(controller, 409, message=MESSAGES['choose_role_first'])

    form = LoginForm()
    checker = get_services().credentials
    if not form.validate_on_submit() or not checker.verify(papel, form.username.data, form.password.data):
        return _resumo(controller, 401, message=MESSAGES['invalid_credentials'])

    controller.login_succeeded(papel)
    save_controller(controller)
    return _resumo(controller)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    controller = load_controller()
    controller.logout()
    save_controller(controller)
    return _resumo(controller)
