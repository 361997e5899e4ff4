"""
Máquina de Estados de Navegação.

`transition(state, action, role)` é uma função total: toda ação em todo
estado produz um novo estado (ações que não se aplicam à tela atual
devolvem o mesmo estado). Toda entrada em tela passa pelo AccessGate.

O `ViewController` guarda o estado atual e o `AppContext` (papel logado e
papel escolhido antes do login), que só muda no login e no logout.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

from .access import AccessGate
from .display import events_in_month, shift_month
from .logger import get_logger
from .models import Event, Role
from .views import View, dashboard_for

logger = get_logger(__name__)


# === AÇÕES ===

@dataclass(frozen=True)
class SelectRole:
    role: Role


@dataclass(frozen=True)
class LoginSucceeded:
    role: Role


@dataclass(frozen=True)
class Navigate:
    view: View


@dataclass(frozen=True)
class ShowEventDetails:
    events: Tuple[Event, ...]


@dataclass(frozen=True)
class ChangeMonth:
    delta: int


@dataclass(frozen=True)
class Logout:
    pass


Action = Union[SelectRole, LoginSucceeded, Navigate, ShowEventDetails, ChangeMonth, Logout]


# === ESTADO ===

@dataclass(frozen=True)
class ViewState:
    """
    Tela atual mais os dados transitórios dela.

    `selected_events` só existe em EventDetails quando a tela foi aberta pelo
    calendário; `calendar_month` só existe em EventCalendar.
    """

    view: View = View.INITIAL_ROLE_CHOICE
    selected_events: Optional[Tuple[Event, ...]] = None
    calendar_month: Optional[Tuple[int, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'view': self.view.value,
            'selected_event_ids': (
                [e.id for e in self.selected_events] if self.selected_events is not None else None
            ),
            'calendar_month': list(self.calendar_month) if self.calendar_month else None,
        }

    @classmethod
    def from_dict(cls, dados: Optional[Dict[str, Any]], events: Sequence[Event] = ()) -> 'ViewState':
        """Reconstrói o estado; ids de eventos que sumiram da coleção são descartados."""
        if not dados:
            return cls()
        try:
            view = View(dados.get('view'))
        except ValueError:
            return cls()

        selecionados = None
        ids = dados.get('selected_event_ids')
        if view == View.EVENT_DETAILS and ids is not None:
            por_id = {e.id: e for e in events}
            selecionados = tuple(por_id[i] for i in ids if i in por_id)

        mes = dados.get('calendar_month')
        return cls(
            view=view,
            selected_events=selecionados,
            calendar_month=tuple(mes) if view == View.EVENT_CALENDAR and mes else None,
        )


@dataclass
class AppContext:
    """Papel do usuário logado. Criado no início, alterado só por login/logout."""

    role: Optional[Role] = None
    target_role: Optional[Role] = None
    identity_token: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'role': self.role.value if self.role else None,
            'target_role': self.target_role.value if self.target_role else None,
        }

    @classmethod
    def from_dict(cls, dados: Optional[Dict[str, Any]], identity_token: Optional[str] = None) -> 'AppContext':
        dados = dados or {}

        def _role(valor):
            try:
                return Role(valor) if valor else None
            except ValueError:
                return None

        return cls(
            role=_role(dados.get('role')),
            target_role=_role(dados.get('target_role')),
            identity_token=identity_token,
        )


# === TRANSIÇÕES ===

def _enter(state: ViewState, target: View, role: Optional[Role], gate: AccessGate, today: date) -> ViewState:
    decisao = gate.can_enter(role, target)
    destino = target if decisao.allowed else decisao.fallback

    if destino == state.view:
        return state
    if destino == View.EVENT_CALENDAR:
        return ViewState(view=destino, calendar_month=(today.year, today.month))
    # Sair de EventDetails (ou entrar direto nela) sempre limpa a lista filtrada
    return ViewState(view=destino)


def transition(
    state: ViewState,
    action: Action,
    role: Optional[Role],
    gate: Optional[AccessGate] = None,
    today: Optional[date] = None,
) -> ViewState:
    gate = gate or AccessGate()
    today = today or date.today()

    if isinstance(action, Logout):
        return ViewState()

    if isinstance(action, SelectRole):
        if state.view in (View.INITIAL_ROLE_CHOICE, View.LOGIN):
            return ViewState(view=View.LOGIN)
        return state

    if isinstance(action, LoginSucceeded):
        if state.view == View.LOGIN:
            return _enter(state, dashboard_for(action.role), action.role, gate, today)
        return state

    if isinstance(action, Navigate):
        if action.view == View.LOGIN:
            # Login só é aberto pela escolha de papel
            return state
        if action.view == View.INITIAL_ROLE_CHOICE:
            return ViewState()
        return _enter(state, action.view, role, gate, today)

    if isinstance(action, ShowEventDetails):
        if state.view != View.EVENT_CALENDAR:
            return state
        novo = _enter(state, View.EVENT_DETAILS, role, gate, today)
        if novo.view != View.EVENT_DETAILS:
            return novo
        return replace(novo, selected_events=tuple(action.events))

    if isinstance(action, ChangeMonth):
        if state.view != View.EVENT_CALENDAR:
            return state
        ano, mes = state.calendar_month or (today.year, today.month)
        return replace(state, calendar_month=shift_month(ano, mes, action.delta))

    raise TypeError(f"Ação desconhecida: {action!r}")


class ViewController:

    def __init__(
        self,
        context: Optional[AppContext] = None,
        state: Optional[ViewState] = None,
        gate: Optional[AccessGate] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.context = context or AppContext()
        self.state = state or ViewState()
        self.gate = gate or AccessGate()
        self._today = today

    @property
    def view(self) -> View:
        return self.state.view

    def today(self) -> date:
        return self._today()

    def displayed_month(self) -> Tuple[int, int]:
        """Mês exibido no calendário (o mês atual se ainda não houver um)."""
        hoje = self._today()
        return self.state.calendar_month or (hoje.year, hoje.month)

    def dispatch(self, action: Action) -> ViewState:
        anterior = self.state.view
        self.state = transition(self.state, action, self.context.role, self.gate, self._today())

        if isinstance(action, SelectRole) and self.state.view == View.LOGIN:
            self.context.target_role = action.role
        elif isinstance(action, LoginSucceeded) and anterior == View.LOGIN:
            self.context.role = action.role
            self.context.target_role = None

        if self.state.view == View.INITIAL_ROLE_CHOICE:
            self.context.role = None
            self.context.target_role = None

        if self.state.view != anterior:
            logger.info(f"Navegação: {anterior.value} -> {self.state.view.value}")
        return self.state

    # === ATALHOS ===

    def select_role(self, role: Role) -> ViewState:
        return self.dispatch(SelectRole(role))

    def login_succeeded(self, role: Role) -> ViewState:
        """O papel logado precisa ser o que foi escolhido na tela inicial."""
        if self.context.target_role is not None and role != self.context.target_role:
            logger.warning(f"Login como {role.value} ignorado: papel escolhido foi {self.context.target_role.value}.")
            return self.state
        return self.dispatch(LoginSucceeded(role))

    def navigate(self, view: View) -> ViewState:
        return self.dispatch(Navigate(view))

    def back_to_dashboard(self) -> ViewState:
        return self.dispatch(Navigate(dashboard_for(self.context.role)))

    def change_month(self, delta: int) -> ViewState:
        return self.dispatch(ChangeMonth(delta))

    def open_event_details(self, events: Iterable[Event]) -> ViewState:
        """'Go to Event Details': leva só os eventos do mês exibido no calendário."""
        if self.state.view != View.EVENT_CALENDAR:
            return self.state
        ano, mes = self.displayed_month()
        return self.dispatch(ShowEventDetails(tuple(events_in_month(events, ano, mes))))

    def logout(self) -> ViewState:
        return self.dispatch(Logout())

    def details_events(self, all_events: Sequence[Event]) -> Tuple[Event, ...]:
        """Lista filtrada pelo calendário, ou a coleção completa se a tela foi aberta direto."""
        if self.state.view == View.EVENT_DETAILS and self.state.selected_events is not None:
            return self.state.selected_events
        return tuple(all_events)
