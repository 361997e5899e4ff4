"""
Taxonomia de Erros do SchoolLink.

- InitializationError: provedor de identidade ou banco não pôde ser construído (fatal).
- SubscriptionError: o listener de uma coleção falhou (fatal só para aquela coleção).
- OperationFailed: uma escrita esgotou as tentativas do RetryPolicy (recuperável).
- ValidationError: campo obrigatório vazio, detectado antes de qualquer chamada remota.

Negação de acesso não é erro: o AccessGate devolve um redirecionamento.
"""

from typing import Optional


class SchoolLinkError(Exception):
    """Base de todos os erros da aplicação."""


class InitializationError(SchoolLinkError):
    pass


class SubscriptionError(SchoolLinkError):

    def __init__(self, collection: str, cause: Optional[BaseException] = None):
        self.collection = collection
        self.cause = cause
        super().__init__(f"Could not load {collection}.")


class OperationFailed(SchoolLinkError):

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(str(cause))


class ValidationError(SchoolLinkError):

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)
