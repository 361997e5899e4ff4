"""
Política de Retentativa (Backoff Exponencial).

Envolve uma operação que pode falhar (escritas no Firestore) com um número
limitado de tentativas. Sem jitter e sem circuit breaker.

Atenção: a operação pode ter efeito mais de uma vez se falhar depois de um
efeito parcial. Use apenas com escritas naturalmente idempotentes ou
aceitando a duplicação (ex.: addDoc).
"""

import time
from typing import Callable, Optional, TypeVar

from .errors import OperationFailed
from .logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0


def _check_attempts(max_attempts: int) -> int:
    if max_attempts < 1:
        raise ValueError("max_attempts deve ser pelo menos 1.")
    return max_attempts


class RetryPolicy:
    """
    Executa `operation()` até `max_attempts` vezes.

    Antes da tentativa de índice i (0-based, i >= 1) espera
    `2 ** (i - 1) * base_delay` segundos: 1s, 2s, 4s... Nenhuma espera antes
    da primeira tentativa.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.max_attempts = _check_attempts(max_attempts)
        self.base_delay = base_delay
        self._sleep = sleep

    def delay_before(self, attempt: int) -> float:
        """Espera (em segundos) antes da tentativa `attempt` (0-based)."""
        if attempt <= 0:
            return 0.0
        return (2 ** (attempt - 1)) * self.base_delay

    def execute(self, operation: Callable[[], T], max_attempts: Optional[int] = None) -> T:
        """
        Raises:
            OperationFailed: quando a última tentativa falha. A exceção da última tentativa
                fica em `.cause` e em `__cause__`.
            ValueError: `max_attempts` menor que 1 (nada é executado).
        """
        tentativas = self.max_attempts if max_attempts is None else _check_attempts(max_attempts)
        nome = getattr(operation, '__name__', repr(operation))

        for tentativa in range(tentativas):
            espera = self.delay_before(tentativa)
            if espera:
                self._sleep(espera)
            try:
                return operation()
            except Exception as e:
                if tentativa == tentativas - 1:
                    logger.error(
                        f"Operação '{nome}' falhou após {tentativas} tentativas: {e}",
                        exc_info=True
                    )
                    raise OperationFailed(e) from e
                logger.warning(
                    f"Tentativa {tentativa + 1}/{tentativas} de '{nome}' falhou ({e}). "
                    f"Nova tentativa em {self.delay_before(tentativa + 1):.1f}s."
                )

        raise AssertionError("unreachable")
