"""Teams API."""

from enum import StrEnum
from typing import Any

from pydantic import Field

from sysdig_client.context import Context
from sysdig_client.services.base import Service
from sysdig_client.services.users import User
from sysdig_client.types import MilliTime, SysdigModel


class ProductType(StrEnum):
    """Sysdig product a team belongs to."""

    MONITOR = "SDC"
    SECURE = "SDS"
    ANY = ""


class TeamEntryPoint(SysdigModel):
    module: str = ""


class Team(SysdigModel):
    id: int = 0
    name: str = ""
    description: str = ""
    version: int = 0
    origin: str = ""
    last_updated: MilliTime | None = None
    date_created: MilliTime | None = None
    namespace_filters: Any = None
    customer_id: int = 0
    show: str = ""
    products: list[str] = Field(default_factory=list)
    theme: str = ""
    entry_point: TeamEntryPoint = Field(default_factory=TeamEntryPoint)
    default_team_role: str = ""
    immutable: bool = False
    can_use_sysdig_capture: bool = False
    can_use_agent_cli: bool = False
    can_use_custom_events: bool = False
    can_use_aws_metrics: bool = False
    can_use_beacon_metrics: bool = False
    can_use_rapid_response: bool = False
    user_count: int = 0
    properties: Any = None
    default: bool = False


class TeamResponse(SysdigModel):
    team: Team = Field(default_factory=Team)


class ListTeamsResponse(SysdigModel):
    teams: list[Team] = Field(default_factory=list)


class ListUsersResponse(SysdigModel):
    offset: int = 0
    total: int = 0
    users: list[User] = Field(default_factory=list)


class InfrastructureMetricCount(SysdigModel):
    total: int = 0
    jmx: int = 0
    stats_d: int = 0
    app_check: int = 0


class InfrastructureAgentMetricOverview(SysdigModel):
    exceeding_limit_count: int = 0
    total_agents: int = 0
    exceeding_limit_pct: float = 0.0


class OnPremOverview(SysdigModel):
    latest_version: str = ""
    customer_version: str = ""
    show_plan_info: bool = False


class Infrastructure(SysdigModel):
    """Counts of the hosts, containers and metrics visible to the current team."""

    host_count: int = 0
    container_count: int = 0
    unresolved_events: int = 0
    orchestrations: list[Any] = Field(default_factory=list)
    platforms: list[Any] = Field(default_factory=list)
    container_types: list[Any] = Field(default_factory=list)
    metric_count: InfrastructureMetricCount = Field(default_factory=InfrastructureMetricCount)
    on_prem_overview: OnPremOverview = Field(default_factory=OnPremOverview)
    agent_metric_overview: InfrastructureAgentMetricOverview = Field(
        default_factory=InfrastructureAgentMetricOverview
    )


class InfrastructureResponse(SysdigModel):
    infrastructure: Infrastructure = Field(default_factory=Infrastructure)


class TeamsService(Service):
    async def get(self, ctx: Context, team_id: int) -> TeamResponse:
        return await self._call(ctx, "GET", f"api/team/{team_id}", into=TeamResponse)

    async def list(self, ctx: Context, product: ProductType = ProductType.ANY) -> ListTeamsResponse:
        """Teams of ``product``; ``ProductType.ANY`` lists them all."""
        return await self._call(ctx, "GET", "api/team", params={"product": product}, into=ListTeamsResponse)

    async def list_users(self, ctx: Context, team_id: int) -> ListUsersResponse:
        return await self._call(ctx, "GET", f"api/team/{team_id}/users", into=ListUsersResponse)

    async def delete(self, ctx: Context, team_id: int) -> None:
        await self._call(ctx, "DELETE", f"api/team/{team_id}")

    async def infrastructure(self, ctx: Context) -> InfrastructureResponse:
        """Infrastructure overview of the team the credentials are scoped to."""
        return await self._call(ctx, "GET", "api/team/infrastructure", into=InfrastructureResponse)
