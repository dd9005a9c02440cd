"""Alerts API."""

from enum import StrEnum
from typing import Any

from pydantic import Field

from sysdig_client.context import Context
from sysdig_client.services.base import Service
from sysdig_client.types import MicroDuration, MilliTime, SysdigModel


class AlertType(StrEnum):
    EVENT = "EVENT"


class AlertCustomNotification(SysdigModel):
    title_template: str = ""
    use_new_template: bool = False


class AlertCriteria(SysdigModel):
    text: str = ""
    source: Any = None
    severity: Any = None
    query: Any = None
    scope: Any = None


class Alert(SysdigModel):
    """An alert configuration."""

    id: int | None = None
    version: int | None = None
    created_on: MilliTime | None = None
    modified_on: MilliTime | None = None
    type: AlertType | str = ""
    name: str = ""
    description: str = ""
    enabled: bool = False
    criteria: AlertCriteria = Field(default_factory=AlertCriteria)
    severity: int | str | None = None
    timespan: MicroDuration | None = None
    custom_notification: AlertCustomNotification = Field(default_factory=AlertCustomNotification)
    notification_count: int = 0
    team_id: int = 0
    auto_created: bool = False
    rate_of_change: bool = False
    re_notify_minutes: int = 0
    re_notify: bool = False
    invalid_metrics: list[Any] = Field(default_factory=list)
    group_name: str = ""
    valid: bool = False
    severity_label: str = ""
    condition: str = ""
    customer_id: int = 0


class AlertResponse(SysdigModel):
    alert: Alert = Field(default_factory=Alert)


class ListAlertsResponse(SysdigModel):
    alerts: list[Alert] = Field(default_factory=list)


class AlertsService(Service):
    async def get(self, ctx: Context, alert_id: int) -> AlertResponse:
        return await self._call(ctx, "GET", f"api/alerts/{alert_id}", into=AlertResponse)

    async def list(self, ctx: Context) -> ListAlertsResponse:
        return await self._call(ctx, "GET", "api/alerts", into=ListAlertsResponse)

    async def delete(self, ctx: Context, alert_id: int) -> None:
        await self._call(ctx, "DELETE", f"api/alerts/{alert_id}")
