"""
Provedor de Identidade (Firebase Authentication)

Define a capacidade `IdentityProvider` e uma implementação sobre a API REST
do Identity Toolkit (a mesma usada pelo SDK web do Firebase):

- accounts:signUp                  -> login anônimo
- accounts:signInWithCustomToken   -> login com token pré-emitido
- accounts:lookup                  -> descobre o uid de um idToken

O estado de autenticação vive em um `AuthHandle`, que avisa os observadores
imediatamente ao se registrarem e a cada troca de usuário.
"""

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import requests

from .errors import InitializationError
from .logger import get_logger

logger = get_logger(__name__)

IDENTITY_TOOLKIT_URL = 'https://identitytoolkit.googleapis.com/v1'
REQUEST_TIMEOUT = 15


@dataclass(frozen=True)
class AuthUser:
    uid: str
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    is_anonymous: bool = False


AuthObserver = Callable[[Optional[AuthUser]], None]


class AuthHandle:
    """Estado de autenticação de uma instância inicializada do provedor."""

    def __init__(self, config: Dict[str, Any]) -> None:
        self.config = config
        self.current_user: Optional[AuthUser] = None
        self._observers: List[AuthObserver] = []
        self._lock = threading.Lock()

    def add_observer(self, observer: AuthObserver) -> Callable[[], None]:
        with self._lock:
            self._observers.append(observer)
            usuario = self.current_user
        observer(usuario)

        def remover() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return remover

    def set_user(self, user: Optional[AuthUser]) -> None:
        with self._lock:
            self.current_user = user
            observers = list(self._observers)
        for observer in observers:
            observer(user)


class IdentityProvider(ABC):

    @abstractmethod
    def initialize(self, config: Dict[str, Any]) -> AuthHandle:
        """
        Raises:
            InitializationError: configuração inválida.
        """

    def on_auth_state_changed(self, handle: AuthHandle, callback: AuthObserver) -> Callable[[], None]:
        return handle.add_observer(callback)

    @abstractmethod
    def sign_in_anonymously(self, handle: AuthHandle) -> AuthUser:
        pass

    @abstractmethod
    def sign_in_with_custom_token(self, handle: AuthHandle, token: str) -> AuthUser:
        pass


def parse_firebase_config(raw: Union[str, Dict[str, Any], None]) -> Dict[str, Any]:
    """
    Lê a configuração do Firebase (JSON em string ou dict já pronto).

    Raises:
        InitializationError: JSON malformado ou que não seja um objeto.
    """
    if raw is None or raw == '':
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    try:
        config = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise InitializationError(f"FIREBASE_CONFIG malformado: {e}") from e
    if not isinstance(config, dict):
        raise InitializationError("FIREBASE_CONFIG precisa ser um objeto JSON.")
    return config


class FirebaseIdentityProvider(IdentityProvider):

    def __init__(self, http: Optional[requests.Session] = None, timeout: int = REQUEST_TIMEOUT) -> None:
        self.http = http or requests.Session()
        self.timeout = timeout

    def initialize(self, config):
        if not isinstance(config, dict) or not config.get('apiKey'):
            raise InitializationError("Configuração do Firebase sem 'apiKey'.")
        return AuthHandle(config)

    def _post(self, handle: AuthHandle, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{IDENTITY_TOOLKIT_URL}/accounts:{endpoint}"
        try:
            response = self.http.post(
                url,
                params={'key': handle.config['apiKey']},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Chamada ao Identity Toolkit ({endpoint}) falhou: {e}")
            raise

    def sign_in_anonymously(self, handle):
        dados = self._post(handle, 'signUp', {'returnSecureToken': True})
        usuario = AuthUser(
            uid=dados['localId'],
            id_token=dados.get('idToken'),
            refresh_token=dados.get('refreshToken'),
            is_anonymous=True,
        )
        logger.info(f"Login anônimo efetuado: {usuario.uid[:8]}...")
        handle.set_user(usuario)
        return usuario

    def sign_in_with_custom_token(self, handle, token):
        dados = self._post(handle, 'signInWithCustomToken', {'token': token, 'returnSecureToken': True})
        id_token = dados['idToken']

        # A resposta não traz o uid; ele vem do lookup do idToken
        info = self._post(handle, 'lookup', {'idToken': id_token})
        usuarios = info.get('users') or []
        if not usuarios:
            raise ValueError("Lookup do idToken não retornou usuário.")

        usuario = AuthUser(
            uid=usuarios[0]['localId'],
            id_token=id_token,
            refresh_token=dados.get('refreshToken'),
        )
        logger.info(f"Login com token customizado efetuado: {usuario.uid[:8]}...")
        handle.set_user(usuario)
        return usuario
