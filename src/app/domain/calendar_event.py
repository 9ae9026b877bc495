"""Modelos de domínio de eventos de calendário.

CalendarEvent é o formato canônico que sai do normalizador; nenhum
serviço acima do gateway enxerga o payload bruto do provedor. Os aliases
camelCase seguem o formato da API do Google para que a camada HTTP
serialize sem mapeamento manual.
"""

from __future__ import annotations

from datetime import UTC, datetime  # noqa: TC003 - usado em runtime pelo schema do Pydantic

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UNKNOWN_EMAIL = "unknown@example.com"


def _ensure_aware(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


class EventCreator(BaseModel):
    """Criador do evento."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    email: str = Field(default=UNKNOWN_EMAIL)
    display_name: str | None = Field(default=None, alias="displayName")


class EventAttendee(BaseModel):
    """Convidado de um evento."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    email: str = Field(default=UNKNOWN_EMAIL)
    display_name: str | None = Field(default=None, alias="displayName")
    response_status: str | None = Field(default=None, alias="responseStatus")


class CalendarEvent(BaseModel):
    """Evento normalizado, com início e fim sempre timezone-aware."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., min_length=1, description="Identificador estável do evento.")
    summary: str = Field(..., min_length=1, description="Título do evento.")
    description: str | None = None
    location: str | None = None
    start: datetime = Field(..., description="Início do evento.")
    end: datetime = Field(..., description="Fim do evento.")
    creator: EventCreator | None = None
    attendees: list[EventAttendee] = Field(default_factory=list)
    recurring_event_id: str | None = Field(default=None, alias="recurringEventId")
    color_id: str | None = Field(default=None, alias="colorId")
    status: str | None = None
    html_link: str | None = Field(default=None, alias="htmlLink")

    @field_validator("start", "end")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return _ensure_aware(value)

    def to_payload(self) -> dict[str, object]:
        """Serializa no formato camelCase exposto pela API HTTP."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EventDraft(BaseModel):
    """Dados para criar um evento; summary, start e end são obrigatórios."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    summary: str = Field(..., min_length=1)
    start: datetime
    end: datetime
    description: str | None = None
    location: str | None = None
    attendees: list[EventAttendee] | None = None
    color_id: str | None = Field(default=None, alias="colorId")

    @field_validator("summary")
    @classmethod
    def _strip_summary(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("summary não pode ser vazio")
        return stripped

    @field_validator("start", "end")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return _ensure_aware(value)

    @model_validator(mode="after")
    def _check_order(self) -> EventDraft:
        if self.end < self.start:
            raise ValueError("end deve ser posterior ao start")
        return self


class EventPatch(BaseModel):
    """Atualização parcial: só campos explicitamente informados são enviados."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    summary: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    description: str | None = None
    location: str | None = None
    attendees: list[EventAttendee] | None = None
    color_id: str | None = Field(default=None, alias="colorId")

    @field_validator("start", "end")
    @classmethod
    def _aware(cls, value: datetime | None) -> datetime | None:
        return _ensure_aware(value) if value is not None else None

    def provided_fields(self) -> set[str]:
        """Nomes dos campos enviados pelo chamador."""
        return set(self.model_fields_set)


class ListEventsParams(BaseModel):
    """Filtros de listagem; None significa usar o default do gateway."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    calendar_id: str | None = Field(default=None, alias="calendarId")
    time_min: datetime | None = Field(default=None, alias="timeMin")
    time_max: datetime | None = Field(default=None, alias="timeMax")
    max_results: int | None = Field(default=None, ge=1, le=2500, alias="maxResults")
    single_events: bool | None = Field(default=None, alias="singleEvents")
    order_by: str | None = Field(default=None, alias="orderBy")
    q: str | None = None

    @field_validator("time_min", "time_max")
    @classmethod
    def _aware(cls, value: datetime | None) -> datetime | None:
        return _ensure_aware(value) if value is not None else None


class CalendarSummary(BaseModel):
    """Entrada da lista de calendários do usuário."""

    model_config = ConfigDict(extra="ignore")

    id: str
    summary: str


__all__ = [
    "UNKNOWN_EMAIL",
    "CalendarEvent",
    "CalendarSummary",
    "EventAttendee",
    "EventCreator",
    "EventDraft",
    "EventPatch",
    "ListEventsParams",
]
