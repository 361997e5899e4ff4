"""
Rotas do Módulo de Publicação

Escritas do professor. Validação acontece antes de qualquer chamada ao
banco; falha depois das retentativas volta como mensagem do formulário,
com os dados enviados para o formulário continuar preenchido.
"""
from flask import jsonify, abort, request

from . import publish_bp
from .forms import EventForm, NoticeForm, ScoresForm
from schoollink.core.constants import MESSAGES
from schoollink.core.errors import InitializationError, OperationFailed, ValidationError
from schoollink.core.extensions import get_services, load_controller
from schoollink.core.logger import get_logger
from schoollink.core.models import Role, ScoreResult
from schoollink.core.views import View

logger = get_logger(__name__)

# Tela correspondente a cada escrita (para consultar o AccessGate)
ENDPOINT_VIEWS = {
    'publish_bp.publish_event': View.ADD_EVENT,
    'publish_bp.publish_scores': View.ADD_SCORES,
    'publish_bp.publish_notice': View.NOTICE_BOARD,
}

# === FUNÇÕES AUXILIARES ===

def verificar_professor(controller):
    papel = controller.context.role
    if papel is None:
        return False
    tela = ENDPOINT_VIEWS.get(request.endpoint)
    permitido = papel == Role.TEACHER and (
        tela is None or get_services().gate.can_enter(papel, tela).allowed
    )
    if not permitido:
        logger.warning(f"Publicação negada: {papel.value} em {request.endpoint}")
    return permitido

@publish_bp.before_request
def restringir_acesso():
    controller = load_controller()
    if controller.context.role is None: abort(401)
    if not verificar_professor(controller): abort(403)

def _dados_enviados(form):
    return {nome: campo.data for nome, campo in form._fields.items() if nome != 'csrf_token'}

def _falha(form, mensagem, status):
    return jsonify({'message': mensagem, 'form': _dados_enviados(form)}), status

# === ROTAS ===

@publish_bp.route('/events', methods=['POST'])
def publish_event():
    form = EventForm()
    if not form.validate_on_submit():
        logger.info(f"Evento rejeitado na validação: {form.errors}")
        return jsonify({'message': MESSAGES['fill_all_fields'], 'errors': form.errors}), 400

    try:
        doc_id = get_services().sync.publish_event(
            title=form.title.data,
            event_date=form.date.data,
            description=form.description.data,
            category=form.category.data,
            created_by=Role.TEACHER,
        )
    except ValidationError as e:
        return _falha(form, e.message, 400)
    except OperationFailed as e:
        logger.error(f"Erro ao adicionar evento: {e.cause}")
        return _falha(form, MESSAGES['event_failed'], 502)
    except InitializationError:
        return _falha(form, MESSAGES['init_failed'], 500)

    return jsonify({'message': MESSAGES['event_added'], 'id': doc_id}), 201

@publish_bp.route('/notices', methods=['POST'])
def publish_notice():
    form = NoticeForm()
    if not form.validate_on_submit():
        return jsonify({'message': MESSAGES['notice_empty'], 'errors': form.errors}), 400

    servicos = get_services()
    try:
        doc_id = servicos.sync.publish_notice(form.content.data, created_by=servicos.identity.identity_token)
    except ValidationError as e:
        return _falha(form, e.message, 400)
    except OperationFailed as e:
        logger.error(f"Erro ao enviar aviso: {e.cause}")
        return _falha(form, MESSAGES['notice_failed'], 502)
    except InitializationError:
        return _falha(form, MESSAGES['init_failed'], 500)

    return jsonify({'message': MESSAGES['notice_sent'], 'id': doc_id}), 201

@publish_bp.route('/scores', methods=['POST'])
def publish_scores():
    form = ScoresForm()
    if not form.validate_on_submit():
        return jsonify({'message': MESSAGES['choose_event'], 'errors': form.errors}), 400

    linhas = [
        ScoreResult(
            student_id=linha.student_id.data,
            student_name=linha.student_name.data or '',
            score=(linha.score.data or '').strip(),
            rank=(linha.rank.data or '').strip(),
        )
        for linha in form.results
    ]

    servicos = get_services()
    try:
        publicacao = servicos.sync.publish_scores(
            form.event_id.data, linhas, teacher_id=servicos.identity.identity_token
        )
    except ValidationError as e:
        return _falha(form, e.message, 400)
    except OperationFailed as e:
        logger.error(f"Erro ao publicar notas: {e.cause}")
        return _falha(form, MESSAGES['scores_failed'], 502)
    except InitializationError:
        return _falha(form, MESSAGES['init_failed'], 500)

    return jsonify({'message': MESSAGES['scores_published'], 'publication': publicacao.to_dict()}), 200
