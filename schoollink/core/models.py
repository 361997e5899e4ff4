"""
Modelos de Domínio do SchoolLink.

Entidades tipadas criadas a partir dos documentos do Firestore. A
conversão documento -> entidade acontece em `from_document` e a inversa
em `to_document`, que é exatamente o que é gravado no banco.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    TEACHER = 'Teacher'
    STUDENT = 'Student'


class EventCategory(str, Enum):
    SPORTS = 'Sports'
    ACADEMIC = 'Academic'
    CLUB = 'Club'
    ART = 'Art'
    CULTURE = 'Culture'
    OTHER = 'Other'


def parse_category(valor: Any) -> EventCategory:
    """Valores desconhecidos viram 'Other'."""
    try:
        return EventCategory(valor)
    except ValueError:
        return EventCategory.OTHER


def parse_timestamp(valor: Any) -> Optional[datetime]:
    """
    Aceita string ISO 8601 (inclusive com 'Z') ou datetime vindo do Firestore.
    Retorna sempre um datetime com fuso horário, ou None se não der para ler.
    """
    if valor is None or valor == '':
        return None
    if isinstance(valor, datetime):
        dt = valor
    else:
        texto = str(valor)
        if texto.endswith('Z'):
            texto = texto[:-1] + '+00:00'
        try:
            dt = datetime.fromisoformat(texto)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(dt: datetime) -> str:
    """ISO 8601 em UTC com milissegundos e sufixo 'Z' (ordena lexicograficamente)."""
    return dt.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _as_text(valor: Any) -> str:
    return '' if valor is None else str(valor)


def _document_fields(documento: Any) -> Dict[str, Any]:
    if isinstance(documento, dict):
        return dict(documento)
    dados = documento.to_dict() or {}
    dados['id'] = documento.id
    return dados


@dataclass(frozen=True)
class Event:
    id: str
    title: str
    date: date
    description: str = ''
    category: EventCategory = EventCategory.SPORTS
    created_at: Optional[datetime] = None
    created_by: Optional[Role] = None

    @classmethod
    def from_document(cls, documento: Any) -> 'Event':
        """
        Cria um Event a partir de um DocumentSnapshot (ou dict com 'id').

        Raises:
            ValueError: se faltar o título ou a data não for uma data de calendário.
        """
        dados = _document_fields(documento)
        titulo = dados.get('title')
        if not titulo:
            raise ValueError(f"Evento {dados.get('id')} sem título.")

        data_evento = dados.get('date')
        if isinstance(data_evento, datetime):
            data_evento = data_evento.date()
        elif not isinstance(data_evento, date):
            data_evento = date.fromisoformat(str(data_evento))

        try:
            criado_por = Role(dados.get('createdBy'))
        except ValueError:
            criado_por = None

        return cls(
            id=str(dados['id']),
            title=titulo,
            date=data_evento,
            description=dados.get('description', ''),
            category=parse_category(dados.get('category')),
            created_at=parse_timestamp(dados.get('createdAt')),
            created_by=criado_por,
        )

    def to_document(self) -> Dict[str, Any]:
        documento = {
            'title': self.title,
            'date': self.date.isoformat(),
            'description': self.description,
            'category': self.category.value,
        }
        if self.created_at is not None:
            documento['createdAt'] = format_timestamp(self.created_at)
        if self.created_by is not None:
            documento['createdBy'] = self.created_by.value
        return documento

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, **self.to_document()}


@dataclass(frozen=True)
class Notice:
    id: str
    content: str
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None

    @classmethod
    def from_document(cls, documento: Any) -> 'Notice':
        dados = _document_fields(documento)
        if not dados.get('content'):
            raise ValueError(f"Aviso {dados.get('id')} sem conteúdo.")
        return cls(
            id=str(dados['id']),
            content=dados['content'],
            created_at=parse_timestamp(dados.get('createdAt')),
            created_by=dados.get('createdBy'),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            'content': self.content,
            'createdAt': format_timestamp(self.created_at) if self.created_at else None,
            'createdBy': self.created_by,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, **self.to_document()}


@dataclass(frozen=True)
class ScoreResult:
    student_id: str
    student_name: str
    score: str = ''
    rank: str = ''

    @property
    def is_blank(self) -> bool:
        return not self.score and not self.rank

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'ScoreResult':
        """Nota ou colocação numérica (inclusive 0) vira texto; só None vira vazio."""
        return cls(
            student_id=str(dados.get('studentId', '')),
            student_name=dados.get('studentName', ''),
            score=_as_text(dados.get('score')),
            rank=_as_text(dados.get('rank')),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            'studentId': self.student_id,
            'studentName': self.student_name,
            'score': self.score,
            'rank': self.rank,
        }


@dataclass(frozen=True)
class ScorePublication:
    """Notas de um evento. O id do documento é o próprio event_id (upsert)."""

    event_id: str
    event_title: str
    results: List[ScoreResult] = field(default_factory=list)
    published_at: Optional[datetime] = None
    teacher_id: Optional[str] = None

    @property
    def id(self) -> str:
        return self.event_id

    @classmethod
    def from_document(cls, documento: Any) -> 'ScorePublication':
        dados = _document_fields(documento)
        return cls(
            event_id=str(dados.get('eventId') or dados['id']),
            event_title=dados.get('eventTitle', ''),
            results=[ScoreResult.from_dict(r) for r in dados.get('results', [])],
            published_at=parse_timestamp(dados.get('publishedAt')),
            teacher_id=dados.get('teacherId'),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            'eventId': self.event_id,
            'eventTitle': self.event_title,
            'results': [r.to_dict() for r in self.results],
            'publishedAt': format_timestamp(self.published_at) if self.published_at else None,
            'teacherId': self.teacher_id,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, **self.to_document()}
