"""Resource services, one per Sysdig API family.

Each service is reachable as an attribute of ``Client``:

    users, teams, events, alerts, dashboards, notification_channels, prometheus
"""

from sysdig_client.services.alerts import AlertsService
from sysdig_client.services.base import Service, add_options, format_query_value
from sysdig_client.services.dashboards import DashboardsService
from sysdig_client.services.events import EventsService
from sysdig_client.services.notification_channels import NotificationChannelsService
from sysdig_client.services.prometheus import PrometheusService
from sysdig_client.services.teams import TeamsService
from sysdig_client.services.users import UsersService

__all__ = [
    "AlertsService",
    "DashboardsService",
    "EventsService",
    "NotificationChannelsService",
    "PrometheusService",
    "Service",
    "TeamsService",
    "UsersService",
    "add_options",
    "format_query_value",
]
