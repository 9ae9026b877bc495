"""Gateway de eventos: limitador, retry e normalização sobre o provedor.

Toda tentativa passa pelo RateLimiter antes do provedor e o conjunto de
tentativas é conduzido pelo RetryExecutor. Nenhum registro bruto sai
daqui: listas e eventos únicos passam pelo normalizer injetado.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

import pydantic

from app.domain.calendar_event import (
    CalendarEvent,
    CalendarSummary,
    EventDraft,
    EventPatch,
    ListEventsParams,
)
from app.observability import record_latency
from app.services.view_ranges import day_bounds, month_window
from utils.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.calendar_provider import CalendarProviderProtocol
    from app.protocols.normalizer import EventNormalizerProtocol
    from app.services.rate_limiter import RateLimiter
    from app.services.retry_executor import RetryExecutor

logger = logging.getLogger(__name__)

_COMPONENT = "calendar_gateway"

DEFAULT_CALENDAR_ID = "primary"
DEFAULT_MAX_RESULTS = 100
MONTH_MAX_RESULTS = 500
DEFAULT_ORDER_BY = "startTime"


def _validation_message(exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"invalid_event:{location}:{first.get('msg', 'invalid')}"


def coerce_draft(draft: EventDraft | Mapping[str, Any]) -> EventDraft:
    """Valida o rascunho localmente; ValidationError antes de qualquer I/O."""
    if isinstance(draft, EventDraft):
        return draft
    if not isinstance(draft, Mapping):
        raise ValidationError("invalid_event:body:expected object", status_code=400)
    try:
        return EventDraft.model_validate(dict(draft))
    except pydantic.ValidationError as exc:
        raise ValidationError(_validation_message(exc), status_code=400) from exc


def coerce_patch(patch: EventPatch | Mapping[str, Any]) -> EventPatch:
    if isinstance(patch, EventPatch):
        return patch
    if not isinstance(patch, Mapping):
        raise ValidationError("invalid_event:body:expected object", status_code=400)
    try:
        return EventPatch.model_validate(dict(patch))
    except pydantic.ValidationError as exc:
        raise ValidationError(_validation_message(exc), status_code=400) from exc


def _iso(value: datetime) -> str:
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


class CalendarGateway:
    """Operações de evento com throttle, retry e saída normalizada."""

    def __init__(
        self,
        provider: CalendarProviderProtocol,
        *,
        normalizer: EventNormalizerProtocol,
        rate_limiter: RateLimiter,
        retry_executor: RetryExecutor,
        default_calendar_id: str = DEFAULT_CALENDAR_ID,
        default_max_results: int = DEFAULT_MAX_RESULTS,
        month_max_results: int = MONTH_MAX_RESULTS,
        timezone: str = "UTC",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._provider = provider
        self._normalizer = normalizer
        self._rate_limiter = rate_limiter
        self._retry_executor = retry_executor
        self._default_calendar_id = default_calendar_id
        self._default_max_results = default_max_results
        self._month_max_results = month_max_results
        self._tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    @property
    def default_calendar_id(self) -> str:
        return self._default_calendar_id

    async def list_events(
        self,
        access_token: str,
        params: ListEventsParams | None = None,
    ) -> list[CalendarEvent]:
        """Lista eventos com defaults timeMin=agora, maxResults=100,
        singleEvents=True e orderBy=startTime."""
        params = params or ListEventsParams()
        calendar_id = params.calendar_id or self._default_calendar_id
        query = self._build_query(params)
        raw_items = await self._call(
            "list_events",
            lambda: self._provider.list_events(
                access_token, calendar_id=calendar_id, query=query
            ),
        )
        return self._normalizer.normalize_many(raw_items)

    async def search_events(
        self,
        access_token: str,
        query: str,
        params: ListEventsParams | None = None,
    ) -> list[CalendarEvent]:
        base = params or ListEventsParams()
        return await self.list_events(access_token, base.model_copy(update={"q": query}))

    async def get_event(
        self,
        access_token: str,
        event_id: str,
        calendar_id: str | None = None,
    ) -> CalendarEvent:
        """Busca um evento; NotFoundError em 404."""
        target = calendar_id or self._default_calendar_id
        raw = await self._call(
            "get_event",
            lambda: self._provider.get_event(
                access_token, calendar_id=target, event_id=event_id
            ),
        )
        return self._normalizer.normalize(raw)

    async def create_event(
        self,
        access_token: str,
        draft: EventDraft | Mapping[str, Any],
        calendar_id: str | None = None,
    ) -> CalendarEvent:
        valid_draft = coerce_draft(draft)
        target = calendar_id or self._default_calendar_id
        raw = await self._call(
            "create_event",
            lambda: self._provider.insert_event(
                access_token, calendar_id=target, draft=valid_draft
            ),
        )
        event = self._normalizer.normalize(raw)
        self._log_mutation("create_event", event.id)
        return event

    async def update_event(
        self,
        access_token: str,
        event_id: str,
        patch: EventPatch | Mapping[str, Any],
        calendar_id: str | None = None,
    ) -> CalendarEvent:
        """Atualização parcial: só os campos informados vão ao provedor."""
        valid_patch = coerce_patch(patch)
        target = calendar_id or self._default_calendar_id
        raw = await self._call(
            "update_event",
            lambda: self._provider.patch_event(
                access_token, calendar_id=target, event_id=event_id, patch=valid_patch
            ),
        )
        event = self._normalizer.normalize(raw)
        self._log_mutation("update_event", event.id)
        return event

    async def delete_event(
        self,
        access_token: str,
        event_id: str,
        calendar_id: str | None = None,
    ) -> None:
        target = calendar_id or self._default_calendar_id
        await self._call(
            "delete_event",
            lambda: self._provider.delete_event(
                access_token, calendar_id=target, event_id=event_id
            ),
        )
        self._log_mutation("delete_event", event_id)

    async def list_calendars(self, access_token: str) -> list[CalendarSummary]:
        raw_items = await self._call(
            "list_calendars",
            lambda: self._provider.list_calendars(access_token),
        )
        calendars: list[CalendarSummary] = []
        for item in raw_items:
            if not isinstance(item, Mapping) or not item.get("id"):
                continue
            calendars.append(
                CalendarSummary(id=str(item["id"]), summary=str(item.get("summary") or item["id"]))
            )
        return calendars

    async def list_events_for_date(
        self,
        access_token: str,
        day: date,
        calendar_id: str | None = None,
    ) -> list[CalendarEvent]:
        """Eventos do dia inteiro (00:00 até 23:59:59.999 no fuso configurado)."""
        start, end = day_bounds(day, self._tz)
        params = ListEventsParams(calendar_id=calendar_id, time_min=start, time_max=end)
        return await self.list_events(access_token, params)

    async def list_events_for_month(
        self,
        access_token: str,
        year: int,
        month: int,
        calendar_id: str | None = None,
    ) -> list[CalendarEvent]:
        """Mês inteiro com maxResults ampliado para a grade mensal."""
        window = month_window(year, month, self._tz, self._month_max_results)
        params = ListEventsParams(
            calendar_id=calendar_id,
            time_min=window.start,
            time_max=window.end,
            max_results=window.max_results,
        )
        return await self.list_events(access_token, params)

    def _build_query(self, params: ListEventsParams) -> dict[str, Any]:
        time_min = params.time_min or self._clock()
        query: dict[str, Any] = {
            "timeMin": _iso(time_min),
            "maxResults": params.max_results or self._default_max_results,
            "singleEvents": True if params.single_events is None else params.single_events,
            "orderBy": params.order_by or DEFAULT_ORDER_BY,
        }
        if params.time_max is not None:
            query["timeMax"] = _iso(params.time_max)
        if params.q:
            query["q"] = params.q
        if not query["singleEvents"] and query["orderBy"] == DEFAULT_ORDER_BY:
            # A API só aceita orderBy=startTime com eventos expandidos.
            query.pop("orderBy")
        return query

    async def _call(self, operation: str, call: Callable[[], Awaitable[Any]]) -> Any:
        async def attempt() -> Any:
            await self._rate_limiter.acquire()
            return await call()

        started = time.perf_counter()
        try:
            result = await self._retry_executor.run(attempt, operation_name=operation)
        except Exception as exc:
            record_latency(_COMPONENT, operation, _elapsed_ms(started), type(exc).__name__)
            raise
        record_latency(_COMPONENT, operation, _elapsed_ms(started))
        return result

    def _log_mutation(self, action: str, event_id: str) -> None:
        logger.info(
            "calendar_event_mutated",
            extra={
                "component": _COMPONENT,
                "action": action,
                "result": "ok",
                "event_id": event_id,
            },
        )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
