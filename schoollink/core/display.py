"""
Ordenação e Agrupamento para Exibição.

Funções puras aplicadas às coleções já sincronizadas antes de montar cada
tela: agrupamento de eventos por data, grade do calendário, ordem dos
avisos, das publicações de notas e dos resultados por colocação.
"""

import calendar
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import MOCK_STUDENTS
from .models import Event, Notice, ScorePublication, ScoreResult

MONTH_NAMES = list(calendar.month_name)[1:]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def sort_events_ascending(events: Iterable[Event]) -> List[Event]:
    return sorted(events, key=lambda e: e.date)


def group_events_by_date(events: Iterable[Event]) -> Dict[date, List[Event]]:
    """Agrupa por data em ordem crescente; dentro do dia mantém a ordem de entrada."""
    grupos: Dict[date, List[Event]] = {}
    for evento in sort_events_ascending(events):
        grupos.setdefault(evento.date, []).append(evento)
    return grupos


def events_in_month(events: Iterable[Event], year: int, month: int) -> List[Event]:
    return sort_events_ascending(e for e in events if e.date.year == year and e.date.month == month)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    indice = year * 12 + (month - 1) + delta
    return indice // 12, indice % 12 + 1


def month_grid(year: int, month: int, events: Iterable[Event], today: Optional[date] = None) -> Dict[str, Any]:
    """
    Grade do calendário com a semana começando no domingo.

    Returns:
        dict: 'leading_blanks' (células vazias antes do dia 1) e 'days',
        uma entrada por dia com a contagem de eventos e se é hoje.
    """
    contagem: Dict[int, int] = {}
    for evento in events:
        if evento.date.year == year and evento.date.month == month:
            contagem[evento.date.day] = contagem.get(evento.date.day, 0) + 1

    primeiro_dia, total_dias = calendar.monthrange(year, month)
    return {
        'year': year,
        'month': month,
        'title': f"{MONTH_NAMES[month - 1]} {year}",
        # monthrange usa segunda=0; a grade usa domingo=0
        'leading_blanks': (primeiro_dia + 1) % 7,
        'days': [
            {
                'day': dia,
                'events': contagem.get(dia, 0),
                'is_today': today == date(year, month, dia),
            }
            for dia in range(1, total_dias + 1)
        ],
    }


def sort_notices(notices: Iterable[Notice]) -> List[Notice]:
    """Mais recentes primeiro."""
    return sorted(notices, key=lambda n: n.created_at or _EPOCH, reverse=True)


def sort_publications(scores: Iterable[ScorePublication]) -> List[ScorePublication]:
    """Publicações mais recentes primeiro."""
    return sorted(scores, key=lambda s: s.published_at or _EPOCH, reverse=True)


def rank_sort_key(rank: str) -> Tuple[Tuple[int, int, str], ...]:
    """
    Chave de ordenação "natural" para colocações: '2nd' antes de '10th',
    sem diferenciar maiúsculas. Colocação vazia vem primeiro.
    """
    partes = [p for p in re.split(r'(\d+)', rank or '') if p]
    return tuple((0, int(p), '') if p.isdigit() else (1, 0, p.casefold()) for p in partes)


def sort_results(results: Sequence[ScoreResult]) -> List[ScoreResult]:
    return sorted(results, key=lambda r: rank_sort_key(r.rank))


def blank_score_sheet(students: Sequence[Dict[str, str]] = MOCK_STUDENTS) -> List[ScoreResult]:
    """Planilha vazia (uma linha por aluno) para o evento escolhido."""
    return [ScoreResult(student_id=aluno['id'], student_name=aluno['name']) for aluno in students]
