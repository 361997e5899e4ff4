"""
Camada de Serviço (Service Layer) da Autenticação

Verificação de credenciais plugável. A implementação padrão compara com as
duas contas ilustrativas (uma por papel) e NÃO é uma barreira de
segurança. Outra implementação entra por
`create_app(credential_checker=...)`, sem tocar no ViewController nem no
AccessGate.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from schoollink.core.constants import MOCK_CREDENTIALS
from schoollink.core.logger import get_logger
from schoollink.core.models import Role

# Inicializa o logger para este módulo
logger = get_logger(__name__)


class CredentialChecker(ABC):

    @abstractmethod
    def verify(self, role: Role, username: str, password: str) -> bool:
        pass


class MockCredentialChecker(CredentialChecker):
    """Usuário sem diferenciar maiúsculas/espaços; senha só sem espaços nas pontas."""

    def __init__(self, credentials: Optional[Dict[str, Dict[str, str]]] = None) -> None:
        self.credentials = credentials or MOCK_CREDENTIALS

    def verify(self, role, username, password):
        esperado = self.credentials.get(role.value)
        if not esperado:
            return False

        usuario = (username or '').strip().lower()
        senha = (password or '').strip()
        valido = usuario == esperado['username'] and senha == esperado['password']

        if valido:
            logger.info(f"Login efetuado: {usuario} (Role: {role.value})")
        else:
            logger.warning(f"Credenciais inválidas para o papel {role.value}.")
        return valido

