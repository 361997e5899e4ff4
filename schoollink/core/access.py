"""
Controle de Acesso por Papel (Role Gate)

Decide se um papel pode entrar em uma tela. Negar não é erro: a decisão
traz a tela para onde redirecionar.

| tela                     | Teacher | Student               | sem papel            |
|--------------------------|---------|-----------------------|----------------------|
| AddEvent, AddScores      | entra   | volta para o painel   | volta p/ escolha     |
| InitialRoleChoice, Login | entra   | entra                 | entra                |
| demais                   | entra   | entra                 | volta p/ escolha     |
"""

from dataclasses import dataclass
from typing import Optional

from .logger import get_logger
from .models import Role
from .views import View, dashboard_for

logger = get_logger(__name__)

TEACHER_ONLY_VIEWS = frozenset({View.ADD_EVENT, View.ADD_SCORES})
PUBLIC_VIEWS = frozenset({View.INITIAL_ROLE_CHOICE, View.LOGIN})


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    fallback: Optional[View] = None

    @classmethod
    def allow(cls) -> 'AccessDecision':
        return cls(True)

    @classmethod
    def deny(cls, fallback: View) -> 'AccessDecision':
        return cls(False, fallback)


class AccessGate:

    def can_enter(self, role: Optional[Role], target_view: View) -> AccessDecision:
        if target_view in PUBLIC_VIEWS:
            return AccessDecision.allow()

        if role is None:
            return AccessDecision.deny(View.INITIAL_ROLE_CHOICE)

        if target_view in TEACHER_ONLY_VIEWS and role != Role.TEACHER:
            logger.warning(f"Acesso negado: {role.value} tentou abrir {target_view.value}.")
            return AccessDecision.deny(dashboard_for(role))

        return AccessDecision.allow()
