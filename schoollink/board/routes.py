"""
Rotas do Módulo do Mural

- GET  /                   tela atual + dados dela (ou tela de erro/carregando)
- POST /navigate/<view>    navegação (passa pelo AccessGate)
- POST /calendar/month     avança/volta o mês exibido no calendário
- POST /calendar/details   "Go to Event Details" com os eventos do mês
"""

from flask import abort, jsonify, request
from flask_wtf.csrf import generate_csrf

from . import board_bp
from schoollink.core.constants import EVENT_CATEGORIES, MESSAGES, MOCK_STUDENT_PROFILE
from schoollink.core.display import (
    blank_score_sheet,
    group_events_by_date,
    month_grid,
    sort_notices,
    sort_publications,
    sort_results,
)
from schoollink.core.extensions import get_services, load_controller, save_controller
from schoollink.core.logger import get_logger
from schoollink.core.models import Role
from schoollink.core.session import SessionState
from schoollink.core.views import View

logger = get_logger(__name__)

TEACHER_LINKS = [View.EVENT_CALENDAR, View.ADD_EVENT, View.NOTICE_BOARD, View.ADD_SCORES]
STUDENT_LINKS = [View.EVENT_CALENDAR, View.NOTICE_BOARD, View.VIEW_RESULTS, View.STUDENT_PROFILE]


def _dados_da_tela(controller, servicos) -> dict:
    """Monta o conteúdo da tela atual a partir das coleções sincronizadas."""
    sync = servicos.sync
    view = controller.view
    papel = controller.context.role

    if view == View.INITIAL_ROLE_CHOICE:
        return {'roles': [Role.STUDENT.value, Role.TEACHER.value]}

    if view == View.LOGIN:
        return {'target_role': controller.context.target_role.value if controller.context.target_role else None}

    if view in (View.TEACHER_DASHBOARD, View.STUDENT_DASHBOARD):
        links = TEACHER_LINKS if view == View.TEACHER_DASHBOARD else STUDENT_LINKS
        return {'links': [link.value for link in links]}

    if view == View.EVENT_CALENDAR:
        ano, mes = controller.displayed_month()
        dados = month_grid(ano, mes, sync.events, today=controller.today())
        dados['can_add_event'] = papel == Role.TEACHER
        return dados

    if view == View.EVENT_DETAILS:
        grupos = group_events_by_date(controller.details_events(sync.events))
        return {
            'groups': [
                {'date': data.isoformat(), 'events': [e.to_dict() for e in eventos]}
                for data, eventos in grupos.items()
            ],
            'message': None if grupos else MESSAGES['no_events'],
        }

    if view == View.ADD_EVENT:
        return {'categories': EVENT_CATEGORIES}

    if view == View.ADD_SCORES:
        return {
            'events': [{'id': e.id, 'title': e.title, 'date': e.date.isoformat()} for e in sync.events],
            'score_sheet': [r.to_dict() for r in blank_score_sheet()],
        }

    if view == View.VIEW_RESULTS:
        publicacoes = sort_publications(sync.scores)
        return {
            'publications': [
                {**p.to_dict(), 'results': [r.to_dict() for r in sort_results(p.results)]}
                for p in publicacoes
            ],
            'message': None if publicacoes else MESSAGES['no_scores'],
        }

    if view == View.NOTICE_BOARD:
        avisos = sort_notices(sync.notices)
        return {
            'notices': [n.to_dict() for n in avisos],
            'can_send': papel == Role.TEACHER,
            'message': None if avisos else MESSAGES['no_notices'],
        }

    if view == View.STUDENT_PROFILE:
        return {'id': controller.context.identity_token, **MOCK_STUDENT_PROFILE}

    return {}


def _resposta_tela(controller, status=200):
    servicos = get_services()
    token = servicos.identity.identity_token
    corpo = {
        'view': controller.view.value,
        'role': controller.context.role.value if controller.context.role else None,
        'user_id': f"{token[:8]}..." if token and controller.context.role else None,
        'errors': [str(erro) for erro in servicos.sync.errors.values()],
        'data': _dados_da_tela(controller, servicos),
        'csrf_token': generate_csrf(),
    }
    return jsonify(corpo), status


@board_bp.route('/')
def index():
    servicos = get_services()

    # Tela de erro de inicialização (sem retry)
    if servicos.init_error is not None:
        logger.error(f"Tela de erro exibida: {servicos.init_error}")
        return jsonify({'error': MESSAGES['init_failed']}), 500
    if servicos.identity.state == SessionState.FAILED:
        return jsonify({'error': MESSAGES['sign_in_failed']}), 500
    if not servicos.identity.is_settled:
        return jsonify({'status': 'initializing'}), 503

    controller = load_controller()
    return _resposta_tela(controller)


@board_bp.route('/navigate/<view_name>', methods=['POST'])
def navigate(view_name):
    try:
        destino = View(view_name)
    except ValueError:
        abort(404)

    controller = load_controller()
    controller.navigate(destino)
    save_controller(controller)
    return _resposta_tela(controller)


@board_bp.route('/calendar/month', methods=['POST'])
def change_month():
    dados = request.get_json(silent=True) or request.form
    try:
        delta = int(dados.get('delta', 0))
    except (TypeError, ValueError):
        return jsonify({'message': "delta inválido"}), 400

    controller = load_controller()
    controller.change_month(delta)
    save_controller(controller)
    return _resposta_tela(controller)


@board_bp.route('/calendar/details', methods=['POST'])
def calendar_details():
    controller = load_controller()
    controller.open_event_details(get_services().sync.events)
    save_controller(controller)
    return _resposta_tela(controller)
