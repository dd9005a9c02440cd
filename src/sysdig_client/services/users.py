"""Users API: the current user, its API token and connected agents."""

from typing import Any

from pydantic import Field

from sysdig_client.context import Context
from sysdig_client.services.base import Service
from sysdig_client.types import MilliTime, SysdigModel


class UserProperties(SysdigModel):
    reset_password: bool = False
    open_id_connect_profile_id: str = Field("", alias="OpenID Connect profile id")
    iam_id: str = ""
    openid: bool = False
    user_email_alias: str = Field("", alias="user_email_alias")
    has_been_invited: bool = Field(False, alias="has_been_invited")


class AgentInstallParams(SysdigModel):
    access_key: str = ""
    collector_address: str = ""
    collector_port: int = 0
    check_certificate: bool = False
    ssl_enabled: bool = False


class Customer(SysdigModel):
    id: int = 0
    name: str = ""
    access_key: str = ""
    external_id: str = ""
    date_created: MilliTime | None = None


class TeamRole(SysdigModel):
    team_id: int = 0
    team_name: str = ""
    team_theme: str = ""
    user_id: int = 0
    user_name: str = ""
    role: str = ""
    admin: bool = False


class Timeline(SysdigModel):
    from_: MilliTime | None = Field(None, alias="from")
    to: MilliTime | None = None
    sampling: int = 0


class Limits(SysdigModel):
    """Metric ingestion limits of a plan."""

    jmx: int = 0
    statsd: int = 0
    app_check: int = 0
    prometheus: int = 0
    prometheus_per_process: int = 0
    connections: int = 0
    prog_aggregation_count: int = 0
    app_check_aggregation_count: int = 0
    prom_metrics_weight: float = 0.0
    top_files_count: int = 0
    top_devices_count: int = 0
    host_server_ports: int = 0
    container_server_ports: int = 0
    limit_kubernetes_resources: bool = False
    kubernetes_pods: int = 0
    kubernetes_jobs: int = 0
    container_density: int = 0
    meerkat_suited: bool = False


class MetricsSettings(SysdigModel):
    enforce: bool = False
    show_experimentals: bool = False
    limits: Limits = Field(default_factory=Limits)
    legacy_limits: Limits = Field(default_factory=Limits)
    enforce_agent_aggregation: bool = False
    enable_prom_calculated_ingestion: bool = False


class TTL(SysdigModel):
    ttl: int = 0


class PaymentsIntegrationID(SysdigModel):
    id: str = ""
    ttl: TTL = Field(default_factory=TTL)


class Plan(SysdigModel):
    max_agents: int = 0
    on_demand_agents: int = 0
    max_teams: int = 0
    timelines: list[Timeline] = Field(default_factory=list)
    metrics_settings: MetricsSettings = Field(default_factory=MetricsSettings)
    secure_enabled: bool = False
    monitor_enabled: bool = False
    allocated_agents_count: int = 0
    payments_integration_id: PaymentsIntegrationID = Field(default_factory=PaymentsIntegrationID)
    pricing_plan: str = ""
    indirect_customer: bool = False
    trial_plan_name: str = ""
    partner: str = ""
    migrated_to_v2_direct: bool = False
    overage_assessment_eligible: bool = False


class UserSysdigSettings(SysdigModel):
    enabled: bool = False
    enabled_sse: bool = Field(False, alias="enabledSSE")
    buckets: list[Any] = Field(default_factory=list)


class CustomerSettings(SysdigModel):
    sysdig: UserSysdigSettings = Field(default_factory=UserSysdigSettings)
    plan: Plan = Field(default_factory=Plan)
    environment: Any = None


class User(SysdigModel):
    """A Sysdig user account as returned by the users and teams APIs."""

    id: int = 0
    username: str = ""
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    system_role: str = ""
    status: str = ""
    enabled: bool = False
    version: int = 0
    terms_and_conditions: bool = False
    timezone: str = ""
    picture_url: str = ""
    customer_settings: CustomerSettings = Field(default_factory=CustomerSettings)
    customer: Customer = Field(default_factory=Customer)
    oauth: bool = False
    agent_install_params: AgentInstallParams = Field(default_factory=AgentInstallParams)
    properties: UserProperties = Field(default_factory=UserProperties)
    reset_password: bool = False
    additional_roles: list[Any] = Field(default_factory=list)
    team_roles: list[TeamRole] = Field(default_factory=list)
    last_updated: MilliTime | None = None
    access_key: str = ""
    intercom_user_id_hash: str = ""
    unique_intercom_user_id: str = ""
    current_team: int = 0
    date_created: MilliTime | None = None
    products: list[str] = Field(default_factory=list)
    last_seen: int = 0


class MeResponse(SysdigModel):
    user: User = Field(default_factory=User)


class Token(SysdigModel):
    key: str = ""


class TokenResponse(SysdigModel):
    token: Token = Field(default_factory=Token)


class Agent(SysdigModel):
    id: str = ""


class ConnectedAgentsResponse(SysdigModel):
    total: int = 0
    agents: list[Agent] = Field(default_factory=list)


class UsersService(Service):
    """Operations on the authenticated user."""

    async def me(self, ctx: Context) -> MeResponse:
        """The user the current credentials belong to."""
        return await self._call(ctx, "GET", "api/user/me", into=MeResponse)

    async def token(self, ctx: Context) -> TokenResponse:
        """The Sysdig API token of the current user."""
        return await self._call(ctx, "GET", "api/token", into=TokenResponse)

    async def connected_agents(self, ctx: Context) -> ConnectedAgentsResponse:
        return await self._call(ctx, "GET", "api/agents/connected", into=ConnectedAgentsResponse)
