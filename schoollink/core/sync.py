"""
Sincronização de Coleções (Service Layer)

Mantém em memória as três coleções vivas do SchoolLink (eventos, avisos e
notas) a partir de listeners do DocumentStore, e concentra as escritas.

Regras:
- Cada snapshot substitui a coleção inteira (nunca aplicamos deltas).
- Eventos: seed primeiro (menos os que têm título igual a um evento vivo),
  depois os eventos vivos na ordem do banco.
- Erro em um listener marca só aquela coleção; as outras seguem normais.
- `close()` encerra todos os listeners exatamente uma vez. Um novo
  `subscribe()` sempre encerra os listeners anteriores antes de abrir outros.
"""

import threading
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Type, Union

from .constants import (
    COLLECTION_EVENTS,
    COLLECTION_NOTICES,
    COLLECTION_SCORES,
    MESSAGES,
    SEED_EVENTS,
    STORE_NAMESPACE,
    STORE_SCOPE,
)
from .database import DESCENDING, DocumentStore, Unsubscribe
from .errors import InitializationError, SubscriptionError, ValidationError
from .logger import get_logger
from .models import Event, Notice, Role, ScorePublication, ScoreResult, parse_category
from .retry import RetryPolicy

logger = get_logger(__name__)

UNKNOWN_EVENT_TITLE = 'Unknown Event'


def merge_seed_events(seed: Sequence[Event], live: Sequence[Event]) -> List[Event]:
    """Seed sem os títulos já presentes nos eventos vivos, seguido dos eventos vivos."""
    titulos_vivos = {evento.title for evento in live}
    return [evento for evento in seed if evento.title not in titulos_vivos] + list(live)


def to_entities(documentos: Iterable[Any], modelo: Type, colecao: str) -> List[Any]:
    entidades = []
    for documento in documentos:
        try:
            entidades.append(modelo.from_document(documento))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Documento ignorado em '{colecao}' ({getattr(documento, 'id', '?')}): {e}")
    return entidades


class CollectionSync:

    def __init__(
        self,
        store: Optional[DocumentStore],
        app_id: str,
        retry: Optional[RetryPolicy] = None,
        seed_events: Optional[Sequence[Dict[str, Any]]] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.store = store
        self.app_id = app_id
        self.retry = retry or RetryPolicy()
        self._clock = clock

        self._seed = tuple(Event.from_document(d) for d in (SEED_EVENTS if seed_events is None else seed_events))
        self._events: Tuple[Event, ...] = self._seed
        self._notices: Tuple[Notice, ...] = ()
        self._scores: Tuple[ScorePublication, ...] = ()
        self._errors: Dict[str, SubscriptionError] = {}

        self._unsubscribers: Dict[str, Unsubscribe] = {}
        self._generation = 0
        self._lock = threading.RLock()
        self._lifecycle_lock = threading.Lock()

    def __enter__(self) -> 'CollectionSync':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # === LEITURA ===

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    @property
    def notices(self) -> Tuple[Notice, ...]:
        return self._notices

    @property
    def scores(self) -> Tuple[ScorePublication, ...]:
        return self._scores

    @property
    def errors(self) -> Dict[str, SubscriptionError]:
        with self._lock:
            self._detect_dead_listeners()
            return dict(self._errors)

    @property
    def is_active(self) -> bool:
        return bool(self._unsubscribers)

    def find_event(self, event_id: str) -> Optional[Event]:
        return next((e for e in self._events if e.id == event_id), None)

    def _collection(self, nome: str) -> Any:
        return self.store.collection_ref(STORE_NAMESPACE, self.app_id, STORE_SCOPE, nome)

    # === ASSINATURAS ===

    def subscribe(self, is_ready: bool) -> bool:
        """
        Abre os três listeners. Sem sessão pronta ou sem banco não faz nada
        (e não é erro). Retorna True se os listeners foram abertos.
        """
        if not is_ready or self.store is None:
            logger.info("Assinaturas adiadas: sessão não está pronta ou banco indisponível.")
            return False

        with self._lifecycle_lock:
            self._close_listeners()

            with self._lock:
                self._errors.clear()
                geracao = self._generation

            consultas = [
                (COLLECTION_EVENTS, ('date', DESCENDING), self._apply_events),
                (COLLECTION_NOTICES, ('createdAt', DESCENDING), self._apply_notices),
                (COLLECTION_SCORES, None, self._apply_scores),
            ]
            for nome, ordem, aplicar in consultas:
                try:
                    consulta = self.store.query(self._collection(nome), order_by=ordem)
                    self._unsubscribers[nome] = self.store.on_snapshot(
                        consulta,
                        self._snapshot_handler(nome, geracao, aplicar),
                        self._error_handler(nome, geracao),
                    )
                except Exception as e:
                    with self._lock:
                        self._record_error(nome, e)

        logger.info(f"Assinaturas abertas: {sorted(self._unsubscribers)} (app {self.app_id}).")
        return True

    def close(self) -> None:
        with self._lifecycle_lock:
            self._close_listeners()

    def _close_listeners(self) -> None:
        # unsubscribe() do Firestore espera a thread do listener terminar,
        # então não pode rodar segurando self._lock
        with self._lock:
            self._generation += 1
            abertos, self._unsubscribers = self._unsubscribers, {}
        for nome, unsubscribe in abertos.items():
            try:
                unsubscribe()
                logger.info(f"Listener de '{nome}' encerrado.")
            except Exception as e:
                logger.error(f"Erro ao encerrar listener de '{nome}': {e}", exc_info=True)

    def _snapshot_handler(self, nome: str, geracao: int, aplicar: Callable[[List[Any]], None]):
        def on_next(documentos: Iterable[Any]) -> None:
            with self._lock:
                if geracao != self._generation:
                    return
                aplicar(list(documentos))
                self._errors.pop(nome, None)
        return on_next

    def _error_handler(self, nome: str, geracao: int):
        def on_error(erro: BaseException) -> None:
            with self._lock:
                if geracao != self._generation:
                    return
                self._record_error(nome, erro)
        return on_error

    def _detect_dead_listeners(self) -> None:
        # Stream encerrado pelo servidor não chama on_error no SDK Python
        for nome, unsubscribe in list(self._unsubscribers.items()):
            if nome not in self._errors and not getattr(unsubscribe, 'is_active', True):
                self._record_error(nome, ConnectionError(f"Listener de '{nome}' encerrado pelo servidor."))

    def _record_error(self, nome: str, erro: BaseException) -> None:
        logger.error(f"Erro no listener de '{nome}': {erro}", exc_info=erro)
        self._errors[nome] = SubscriptionError(nome, erro)

    def _apply_events(self, documentos: List[Any]) -> None:
        vivos = to_entities(documentos, Event, COLLECTION_EVENTS)
        self._events = tuple(merge_seed_events(self._seed, vivos))
        logger.info(f"Snapshot de eventos: {len(vivos)} vivos, {len(self._events)} no total.")

    def _apply_notices(self, documentos: List[Any]) -> None:
        self._notices = tuple(to_entities(documentos, Notice, COLLECTION_NOTICES))
        logger.info(f"Snapshot de avisos: {len(self._notices)}.")

    def _apply_scores(self, documentos: List[Any]) -> None:
        self._scores = tuple(to_entities(documentos, ScorePublication, COLLECTION_SCORES))
        logger.info(f"Snapshot de notas: {len(self._scores)}.")

    # === ESCRITAS ===

    def _require_store(self) -> DocumentStore:
        if self.store is None:
            raise InitializationError(MESSAGES['init_failed'])
        return self.store

    def publish_event(
        self,
        title: str,
        event_date: Union[str, date, None],
        description: str,
        category: Any = None,
        created_by: Optional[Role] = None,
    ) -> str:
        """
        Insere um evento novo e retorna o id gerado.

        Raises:
            ValidationError: título, data ou descrição vazios (nenhuma chamada ao banco).
            OperationFailed: escrita esgotou as tentativas.
        """
        title = (title or '').strip()
        description = (description or '').strip()
        if not title or not event_date or not description:
            logger.info("Evento rejeitado: campos obrigatórios vazios.")
            raise ValidationError(MESSAGES['fill_all_fields'])

        if isinstance(event_date, datetime):
            # Evento é um dia de calendário; o horário é descartado
            event_date = event_date.date()
        elif not isinstance(event_date, date):
            try:
                event_date = date.fromisoformat(str(event_date))
            except ValueError:
                raise ValidationError(MESSAGES['fill_all_fields'], field='date')

        evento = Event(
            id='',
            title=title,
            date=event_date,
            description=description,
            category=parse_category(category or 'Sports'),
            created_at=self._clock(),
            created_by=created_by,
        )
        store = self._require_store()
        referencia = self._collection(COLLECTION_EVENTS)

        def add_event() -> str:
            return store.add_doc(referencia, evento.to_document())

        doc_id = self.retry.execute(add_event)
        logger.info(f"Evento publicado: {doc_id} ({title})")
        return doc_id

    def publish_notice(self, content: str, created_by: Optional[str]) -> str:
        """
        Raises:
            ValidationError: aviso vazio.
            OperationFailed: escrita esgotou as tentativas.
        """
        content = (content or '').strip()
        if not content:
            logger.info("Aviso rejeitado: conteúdo vazio.")
            raise ValidationError(MESSAGES['notice_empty'], field='content')

        aviso = Notice(id='', content=content, created_at=self._clock(), created_by=created_by)
        store = self._require_store()
        referencia = self._collection(COLLECTION_NOTICES)

        def add_notice() -> str:
            return store.add_doc(referencia, aviso.to_document())

        doc_id = self.retry.execute(add_notice)
        logger.info(f"Aviso publicado: {doc_id}")
        return doc_id

    def publish_scores(
        self,
        event_id: str,
        results: Iterable[Union[ScoreResult, Dict[str, Any]]],
        teacher_id: Optional[str],
    ) -> ScorePublication:
        """
        Grava (upsert) as notas do evento no documento `scores/<event_id>`.
        Linhas sem nota e sem colocação são descartadas.

        Raises:
            ValidationError: nenhum evento escolhido.
            OperationFailed: escrita esgotou as tentativas.
        """
        if not event_id:
            raise ValidationError(MESSAGES['choose_event'], field='event_id')

        linhas = [r if isinstance(r, ScoreResult) else ScoreResult.from_dict(r) for r in results]
        evento = self.find_event(event_id)
        publicacao = ScorePublication(
            event_id=event_id,
            event_title=evento.title if evento else UNKNOWN_EVENT_TITLE,
            results=[r for r in linhas if not r.is_blank],
            published_at=self._clock(),
            teacher_id=teacher_id,
        )
        store = self._require_store()
        referencia = store.doc_ref(self._collection(COLLECTION_SCORES), event_id)

        def set_scores() -> None:
            store.set_doc(referencia, publicacao.to_document())

        self.retry.execute(set_scores)
        logger.info(f"Notas publicadas para '{publicacao.event_title}' ({len(publicacao.results)} linhas).")
        return publicacao
