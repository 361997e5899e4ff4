"""
Módulo de Conexão com o Banco de Dados (Core)

Define a capacidade `DocumentStore` usada pela sincronização de coleções e a
implementação sobre o Google Firestore. As coleções do SchoolLink ficam em
`artifacts/<app_id>/public/data/<coleção>`, para que várias instalações
possam dividir o mesmo projeto sem colidir.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .errors import InitializationError
from .logger import get_logger

logger = get_logger(__name__)

Unsubscribe = Callable[[], None]
OnNext = Callable[[Iterable[Any]], None]
OnError = Callable[[BaseException], None]

ASCENDING = 'asc'
DESCENDING = 'desc'


class DocumentStore(ABC):
    """
    Banco de documentos com consultas vivas.

    Os documentos entregues em `on_next` precisam expor `.id` e `.to_dict()`
    (a interface do DocumentSnapshot do Firestore).
    """

    @abstractmethod
    def collection_ref(self, namespace: str, app_id: str, scope: str, collection_name: str) -> Any:
        pass

    @abstractmethod
    def doc_ref(self, collection_ref: Any, doc_id: str) -> Any:
        pass

    @abstractmethod
    def query(
        self,
        collection_ref: Any,
        order_by: Optional[Tuple[str, str]] = None,
        where: Optional[Tuple[str, str, Any]] = None,
    ) -> Any:
        pass

    @abstractmethod
    def on_snapshot(self, query: Any, on_next: OnNext, on_error: OnError) -> Unsubscribe:
        """
        O retorno pode expor `is_active`; quando ele fica False o listener
        morreu sem passar por `on_error`.
        """

    @abstractmethod
    def add_doc(self, collection_ref: Any, data: Dict[str, Any]) -> str:
        """Insere um documento novo e retorna o id gerado."""

    @abstractmethod
    def set_doc(self, doc_ref: Any, data: Dict[str, Any]) -> None:
        """Cria ou substitui o documento (upsert)."""


class WatchHandle:
    """
    Unsubscribe de um Watch do Firestore. `is_active` fica False quando o
    stream morre sozinho (ex.: permissão negada).
    """

    def __init__(self, watch: Any) -> None:
        self._watch = watch

    @property
    def is_active(self) -> bool:
        return bool(self._watch.is_active)

    def __call__(self) -> None:
        self._watch.unsubscribe()


class FirestoreDocumentStore(DocumentStore):

    def __init__(self, client: firestore.Client) -> None:
        self.client = client

    def collection_ref(self, namespace, app_id, scope, collection_name):
        return self.client.collection(namespace, app_id, scope, 'data', collection_name)

    def doc_ref(self, collection_ref, doc_id):
        return collection_ref.document(doc_id)

    def query(self, collection_ref, order_by=None, where=None):
        consulta = collection_ref
        if where is not None:
            campo, operador, valor = where
            consulta = consulta.where(filter=FieldFilter(campo, operador, valor))
        if order_by is not None:
            campo, direcao = order_by
            direction = (
                firestore.Query.DESCENDING if direcao == DESCENDING else firestore.Query.ASCENDING
            )
            consulta = consulta.order_by(campo, direction=direction)
        return consulta

    def on_snapshot(self, query, on_next, on_error):
        # O Watch do SDK Python não tem callback de erro: falhas do stream
        # encerram o Watch (ver WatchHandle.is_active). Erros ao processar o
        # snapshot viram on_error.
        def _callback(docs, changes, read_time):
            try:
                on_next(docs)
            except Exception as e:
                on_error(e)

        return WatchHandle(query.on_snapshot(_callback))

    def add_doc(self, collection_ref, data):
        _, doc_ref = collection_ref.add(data)
        return doc_ref.id

    def set_doc(self, doc_ref, data):
        doc_ref.set(data)


def create_document_store(firebase_config: Dict[str, Any]) -> FirestoreDocumentStore:
    """
    Inicializa o cliente do Firestore para o projeto do `firebase_config`.

    As credenciais vêm do ambiente ('GOOGLE_APPLICATION_CREDENTIALS').

    Raises:
        InitializationError: configuração sem 'projectId' ou cliente não construído.
    """
    project_id = (firebase_config or {}).get('projectId')
    if not project_id:
        raise InitializationError("Configuração do Firebase sem 'projectId'.")

    try:
        client = firestore.Client(project=project_id)
    except Exception as e:
        logger.critical(f"ERRO AO CONECTAR COM O FIRESTORE: {e}", exc_info=True)
        raise InitializationError(f"Falha ao conectar com o Firestore: {e}") from e

    logger.info(f"Conexão com o Firestore estabelecida (projeto {project_id}).")
    return FirestoreDocumentStore(client)
