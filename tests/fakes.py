"""
Fakes em memória do DocumentStore e do IdentityProvider para os testes.
"""

import itertools
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from schoollink.core.database import DESCENDING, DocumentStore
from schoollink.core.errors import InitializationError
from schoollink.core.identity import AuthHandle, AuthUser, IdentityProvider


class FakeDocument:

    def __init__(self, doc_id: str, data: Dict[str, Any]) -> None:
        self.id = doc_id
        self._data = dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)


@dataclass(frozen=True)
class FakeQuery:
    ref: Tuple[str, ...]
    order_by: Optional[Tuple[str, str]] = None
    where: Optional[Tuple[str, str, Any]] = None


class FakeListener:

    def __init__(self, store, query, on_next, on_error):
        self.store = store
        self.query = query
        self.on_next = on_next
        self.on_error = on_error
        self.unsubscribe_calls = 0
        self.active = True

    @property
    def is_active(self):
        return self.active

    def unsubscribe(self):
        self.unsubscribe_calls += 1
        if self in self.store.listeners:
            self.store.listeners.remove(self)

    __call__ = unsubscribe


class FakeDocumentStore(DocumentStore):
    """
    Guarda os documentos por nome de coleção. Todo listener recebe o snapshot
    atual na hora em que é aberto e de novo após cada escrita.
    """

    def __init__(self, deliver_on_subscribe: bool = True) -> None:
        self.docs: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.listeners: List[FakeListener] = []
        self.all_listeners: List[FakeListener] = []
        self.write_calls: List[Tuple[str, Any, Dict[str, Any]]] = []
        self.fail_writes = 0
        self.deliver_on_subscribe = deliver_on_subscribe
        self._ids = itertools.count(1)

    # === DocumentStore ===

    def collection_ref(self, namespace, app_id, scope, collection_name):
        return (namespace, app_id, scope, 'data', collection_name)

    def doc_ref(self, collection_ref, doc_id):
        return (collection_ref, doc_id)

    def query(self, collection_ref, order_by=None, where=None):
        return FakeQuery(collection_ref, order_by, where)

    def on_snapshot(self, query, on_next, on_error):
        listener = FakeListener(self, query, on_next, on_error)
        self.listeners.append(listener)
        self.all_listeners.append(listener)
        if self.deliver_on_subscribe:
            listener.on_next(self.snapshot(query))
        return listener

    def add_doc(self, collection_ref, data):
        self._before_write('add', collection_ref, data)
        doc_id = f"doc-{next(self._ids)}"
        self.docs.setdefault(collection_ref[-1], {})[doc_id] = dict(data)
        self.notify(collection_ref[-1])
        return doc_id

    def set_doc(self, doc_ref, data):
        collection_ref, doc_id = doc_ref
        self._before_write('set', doc_ref, data)
        self.docs.setdefault(collection_ref[-1], {})[doc_id] = dict(data)
        self.notify(collection_ref[-1])

    # === Auxiliares de teste ===

    def _before_write(self, tipo, ref, data):
        self.write_calls.append((tipo, ref, dict(data)))
        if self.fail_writes > 0:
            self.fail_writes -= 1
            raise ConnectionError("store indisponível")

    def seed(self, collection_name, doc_id, data):
        self.docs.setdefault(collection_name, {})[doc_id] = dict(data)

    def snapshot(self, query):
        nome = query.ref[-1]
        documentos = [FakeDocument(i, d) for i, d in self.docs.get(nome, {}).items()]
        if query.order_by:
            campo, direcao = query.order_by
            documentos.sort(key=lambda d: d.to_dict().get(campo) or '', reverse=direcao == DESCENDING)
        return documentos

    def notify(self, collection_name):
        for listener in list(self.listeners):
            if listener.query.ref[-1] == collection_name:
                listener.on_next(self.snapshot(listener.query))

    def push(self, collection_name, documentos):
        """Entrega um snapshot arbitrário aos listeners da coleção."""
        for listener in list(self.listeners):
            if listener.query.ref[-1] == collection_name:
                listener.on_next(documentos)

    def fail(self, collection_name, erro):
        for listener in list(self.listeners):
            if listener.query.ref[-1] == collection_name:
                listener.on_error(erro)

    def listener_for(self, collection_name):
        return next(l for l in self.listeners if l.query.ref[-1] == collection_name)


class FakeIdentityProvider(IdentityProvider):

    def __init__(self, existing_user=None, sign_in_error=None, init_error=None, uid='anon-uid-0001'):
        self.existing_user = existing_user
        self.sign_in_error = sign_in_error
        self.init_error = init_error
        self.uid = uid
        self.anonymous_calls = 0
        self.custom_tokens: List[str] = []
        self.handle: Optional[AuthHandle] = None

    def initialize(self, config):
        if self.init_error is not None:
            raise self.init_error
        self.handle = AuthHandle(config)
        self.handle.current_user = self.existing_user
        return self.handle

    def _sign_in(self, handle, anonymous):
        if self.sign_in_error is not None:
            raise self.sign_in_error
        usuario = AuthUser(uid=self.uid, is_anonymous=anonymous)
        handle.set_user(usuario)
        return usuario

    def sign_in_anonymously(self, handle):
        self.anonymous_calls += 1
        return self._sign_in(handle, True)

    def sign_in_with_custom_token(self, handle, token):
        self.custom_tokens.append(token)
        return self._sign_in(handle, False)


class BrokenProvider(FakeIdentityProvider):

    def __init__(self):
        super().__init__(init_error=InitializationError("config inválida"))
