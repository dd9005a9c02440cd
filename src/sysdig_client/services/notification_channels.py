"""Notification channels API."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from sysdig_client.context import Context
from sysdig_client.services.base import Service
from sysdig_client.types import MilliTime, SysdigModel


class NotificationChannelType(StrEnum):
    EMAIL = "EMAIL"
    SNS = "SNS"
    PAGER_DUTY = "PAGER_DUTY"
    SLACK = "SLACK"
    OPSGENIE = "OPSGENIE"
    VICTOROPS = "VICTOROPS"
    WEBHOOK = "WEBHOOK"


class NotificationChannelOptions(SysdigModel):
    """Delivery settings. Which fields apply depends on the channel type."""

    notify_on_ok: bool = False
    notify_on_resolve: bool = False
    resolve_on_ok: bool = False
    channel: str = ""
    email_recipients: list[str] = Field(default_factory=list)
    url: str = ""
    api_key: str = ""
    routing_key: str = ""
    account: str = ""
    service_key: str = ""
    service_name: str = ""


class NotificationChannel(SysdigModel):
    type: NotificationChannelType | str = ""
    name: str = ""
    enabled: bool = False
    options: NotificationChannelOptions = Field(default_factory=NotificationChannelOptions)
    id: str | None = None
    version: int | None = None
    created_on: MilliTime | None = None
    modified_on: MilliTime | None = None


class NotificationChannelResponse(SysdigModel):
    notification_channel: NotificationChannel = Field(default_factory=NotificationChannel)


class ListNotificationChannelsResponse(SysdigModel):
    notification_channels: list[NotificationChannel] = Field(default_factory=list)


class NotificationChannelsService(Service):
    async def get(self, ctx: Context, channel_id: str) -> NotificationChannelResponse:
        return await self._call(
            ctx, "GET", f"api/notificationChannels/{channel_id}", into=NotificationChannelResponse
        )

    async def list(self, ctx: Context, from_: datetime, to: datetime) -> ListNotificationChannelsResponse:
        """Channels in the ``from_``..``to`` window, sent as Unix milliseconds."""
        return await self._call(
            ctx,
            "GET",
            "api/notificationChannels",
            params={"from": from_, "to": to},
            into=ListNotificationChannelsResponse,
        )

    async def create(
        self,
        ctx: Context,
        channel_type: NotificationChannelType,
        name: str,
        options: NotificationChannelOptions,
    ) -> NotificationChannelResponse:
        """Create an enabled channel."""
        channel = NotificationChannel(type=channel_type, name=name, enabled=True, options=options)
        return await self._call(
            ctx,
            "POST",
            "api/notificationChannels",
            body={"notificationChannel": channel},
            into=NotificationChannelResponse,
        )

    async def delete(self, ctx: Context, channel_id: str) -> None:
        await self._call(ctx, "DELETE", f"api/notificationChannels/{channel_id}")
