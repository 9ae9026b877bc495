"""Contrato do provedor remoto de calendário.

Mantemos apenas o protocolo aqui para permitir troca de provider (ou um
fake em memória nos testes) sem impactar gateway e serviços de sync.
Implementações devolvem registros brutos e levantam exceções da
taxonomia de utils.errors carregando o status HTTP original.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.domain.calendar_event import EventDraft, EventPatch


@runtime_checkable
class CalendarProviderProtocol(Protocol):
    """Operações cruas de eventos, autenticadas por access_token."""

    async def list_events(
        self,
        access_token: str,
        *,
        calendar_id: str,
        query: dict[str, Any],
    ) -> list[Any]:
        """Lista registros brutos de eventos para a query informada."""
        ...

    async def get_event(self, access_token: str, *, calendar_id: str, event_id: str) -> Any:
        """Busca um evento; NotFoundError se o id for desconhecido."""
        ...

    async def insert_event(
        self,
        access_token: str,
        *,
        calendar_id: str,
        draft: EventDraft,
    ) -> Any:
        """Cria um evento e devolve o registro bruto criado."""
        ...

    async def patch_event(
        self,
        access_token: str,
        *,
        calendar_id: str,
        event_id: str,
        patch: EventPatch,
    ) -> Any:
        """Atualiza apenas os campos informados no patch."""
        ...

    async def delete_event(self, access_token: str, *, calendar_id: str, event_id: str) -> None:
        """Remove um evento; NotFoundError se já não existir."""
        ...

    async def list_calendars(self, access_token: str) -> list[Any]:
        """Lista os calendários acessíveis pelo usuário."""
        ...
