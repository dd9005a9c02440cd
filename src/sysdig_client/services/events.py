"""Events API (v2).

Example:
    ```python
    from sysdig_client.scope import Scope
    from sysdig_client.services.events import Category, ListEventOptions

    options = ListEventOptions(
        categories=[Category.ALERT, Category.CUSTOM],
        scope=Scope().add_is("kube_namespace_name", "prod"),
        limit=10,
    )
    events = await client.events.list_events(ctx, options)
    ```
"""

from datetime import datetime
from enum import IntEnum, StrEnum

from pydantic import Field

from sysdig_client.context import Context
from sysdig_client.scope import ScopeExpression
from sysdig_client.services.base import Service
from sysdig_client.types import MilliTime, SysdigModel


class Severity(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"
    NONE = "NONE"


class SeveritySyslog(IntEnum):
    """Syslog-style severity, 0 (most severe) to 7. Superseded by ``Severity``."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFORMATIONAL = 6
    DEBUG = 7


class Category(StrEnum):
    ALERT = "ALERT"
    CUSTOM = "CUSTOM"
    DOCKER = "DOCKER"
    CONTAINERD = "CONTAINERD"
    KUBERNETES = "KUBERNETES"


class Status(StrEnum):
    TRIGGERED = "triggered"
    RESOLVED = "resolved"
    ACKNOWLEDGED = "acknowledged"
    UNACKNOWLEDGED = "unacknowledged"


class Direction(StrEnum):
    BEFORE = "before"
    AFTER = "after"


class Event(SysdigModel):
    id: str = ""
    version: int = 0
    name: str = ""
    description: str = ""
    severity: Severity | str = ""
    scope: str = ""
    timestamp: MilliTime | None = None
    created_on: MilliTime | None = None
    scope_labels: dict[str, str] | None = None
    tags: dict[str, str] | None = None
    type: Category | str = ""


class EventOptions(SysdigModel):
    """An event to create. Only ``=`` selections are accepted in ``scope``."""

    name: str
    description: str | None = None
    timestamp: MilliTime | None = None
    severity: Severity | None = None
    scope: ScopeExpression | None = None
    tags: dict[str, str] | None = None


class EventResponse(SysdigModel):
    event: Event = Field(default_factory=Event)


class ListEventOptions(SysdigModel):
    """Filters for ``EventsService.list_events``. Unset filters are not sent."""

    filter: str | None = None
    alert_status: Status | None = None
    categories: list[Category] | None = None
    direction: Direction | None = None
    scope: ScopeExpression | None = None
    limit: int | None = None
    pivot: str | None = None
    from_: datetime | None = None
    to: datetime | None = None
    include_total: bool = False


class ListEventsResponse(SysdigModel):
    total: int = 0
    matched: int = 0
    events: list[Event] = Field(default_factory=list)


class EventsService(Service):
    async def list_events(self, ctx: Context, options: ListEventOptions | None = None) -> ListEventsResponse:
        """Events matching ``options``, newest first by default."""
        options = options or ListEventOptions()
        params = {
            "filter": options.filter or None,
            "alertStatus": options.alert_status,
            "category": options.categories or None,
            "dir": options.direction,
            "feed": True,
            "limit": options.limit or None,
            "pivot": options.pivot or None,
            "from": options.from_,
            "to": options.to,
            "scope": options.scope or None,
            "include_pivot": True,
            "include_total": options.include_total,
        }
        return await self._call(ctx, "GET", "v2/events", params=params, into=ListEventsResponse)

    async def get_event(self, ctx: Context, event_id: str) -> EventResponse:
        return await self._call(ctx, "GET", f"v2/events/{event_id}", into=EventResponse)

    async def delete_event(self, ctx: Context, event_id: str) -> None:
        await self._call(ctx, "DELETE", f"v2/events/{event_id}")

    async def create_event(self, ctx: Context, event: EventOptions) -> EventResponse:
        return await self._call(ctx, "POST", "v2/events", body={"event": event}, into=EventResponse)
