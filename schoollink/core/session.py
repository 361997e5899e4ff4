"""
Sessão de Identidade.

Estabelece a identidade do processo junto ao provedor e controla a
prontidão da aplicação como uma máquina de estados explícita:

    UNINITIALIZED -> INITIALIZING -> READY | FAILED

READY exige um login bem-sucedido (há um identity_token). Se o login
anônimo/customizado falhar, a sessão vai para FAILED: a interface é
liberada (`is_settled`), mas nenhuma coleção é assinada.
"""

import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .errors import InitializationError
from .identity import AuthHandle, AuthUser, IdentityProvider
from .logger import get_logger

logger = get_logger(__name__)

_NOT_SEEN = object()


class SessionState(str, Enum):
    UNINITIALIZED = 'uninitialized'
    INITIALIZING = 'initializing'
    READY = 'ready'
    FAILED = 'failed'


ReadyListener = Callable[['IdentitySession'], None]


class IdentitySession:

    def __init__(
        self,
        provider: IdentityProvider,
        config: Optional[Dict[str, Any]] = None,
        bootstrap_token: Optional[str] = None,
    ) -> None:
        self.provider = provider
        self.config = config or {}
        self.bootstrap_token = bootstrap_token

        self.state = SessionState.UNINITIALIZED
        self.identity_token: Optional[str] = None
        self.error: Optional[BaseException] = None

        self._handle: Optional[AuthHandle] = None
        self._stop_observing: Optional[Callable[[], None]] = None
        self._ready_listeners: List[ReadyListener] = []
        self._last_seen: Any = _NOT_SEEN
        self._lock = threading.RLock()

    # === ESTADO ===

    @property
    def is_ready(self) -> bool:
        return self.state == SessionState.READY

    @property
    def is_settled(self) -> bool:
        """Login já foi tentado (com ou sem sucesso); a interface pode sair do loading."""
        return self.state in (SessionState.READY, SessionState.FAILED)

    def add_ready_listener(self, listener: ReadyListener) -> None:
        """Registra um callback para a transição para READY (chamado na hora se já estiver pronta)."""
        with self._lock:
            if not self.is_ready:
                self._ready_listeners.append(listener)
                return
        listener(self)

    # === CICLO DE VIDA ===

    def start(self) -> None:
        """
        Inicializa o provedor e registra o único observador de autenticação.

        Raises:
            InitializationError: o provedor não pôde ser construído. A sessão
                fica em FAILED.
        """
        with self._lock:
            if self.state != SessionState.UNINITIALIZED:
                logger.warning(f"start() ignorado: sessão já está em {self.state.value}.")
                return
            self.state = SessionState.INITIALIZING

        try:
            self._handle = self.provider.initialize(self.config)
        except Exception as e:
            erro = e if isinstance(e, InitializationError) else InitializationError(str(e))
            self.fail(erro)
            if erro is e:
                raise
            raise erro from e

        logger.info("Provedor de identidade inicializado. Aguardando estado de autenticação.")
        self._stop_observing = self.provider.on_auth_state_changed(self._handle, self._on_auth_state_changed)

    def fail(self, error: BaseException) -> None:
        with self._lock:
            if self.state == SessionState.READY:
                return
            self.state = SessionState.FAILED
            self.error = error
        logger.critical(f"Sessão de identidade falhou: {error}")

    def stop(self) -> None:
        if self._stop_observing is not None:
            self._stop_observing()
            self._stop_observing = None

    # === OBSERVADOR ===

    def _on_auth_state_changed(self, user: Optional[AuthUser]) -> None:
        chave = user.uid if user else None
        with self._lock:
            if chave == self._last_seen:
                return
            self._last_seen = chave
            if self.state == SessionState.FAILED:
                logger.warning("Mudança de autenticação ignorada: sessão em FAILED.")
                return

        # 1. Identidade já reconhecida
        if user is not None:
            self._adopt(user)
            return

        # 2/3. Token pré-emitido ou login anônimo
        try:
            if self.bootstrap_token:
                novo = self.provider.sign_in_with_custom_token(self._handle, self.bootstrap_token)
            else:
                novo = self.provider.sign_in_anonymously(self._handle)
        except Exception as e:
            logger.error(f"Falha no login da sessão: {e}", exc_info=True)
            self.fail(e)
            return

        self._adopt(novo)

    def _adopt(self, user: AuthUser) -> None:
        with self._lock:
            if self.identity_token is None:
                self.identity_token = user.uid
            elif self.identity_token != user.uid:
                logger.warning(
                    f"Nova identidade {user.uid[:8]}... ignorada; sessão mantém {self.identity_token[:8]}..."
                )

            if self.state == SessionState.READY:
                return
            self.state = SessionState.READY
            listeners, self._ready_listeners = self._ready_listeners, []

        logger.info(f"Sessão pronta: {self.identity_token[:8]}...")
        for listener in listeners:
            listener(self)
