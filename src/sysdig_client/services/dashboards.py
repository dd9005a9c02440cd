"""Dashboards API (v3)."""

from typing import Any

from pydantic import Field

from sysdig_client.context import Context
from sysdig_client.services.base import Service
from sysdig_client.services.events import Category, Severity, Status
from sysdig_client.types import MilliTime, SysdigModel

DASHBOARD_SCHEMA = 3


class SharingMember(SysdigModel):
    type: str = ""
    id: int = 0
    name: str = ""
    team_theme: str = ""


class SharingSetting(SysdigModel):
    role: str = ""
    member: SharingMember = Field(default_factory=SharingMember)


class ScopeExpression(SysdigModel):
    """One dashboard-level scope filter."""

    operand: str = ""
    operator: str = ""
    display_name: str = ""
    value: list[str] = Field(default_factory=list)
    descriptor: str | None = None
    variable: bool = False
    is_variable: bool = False


class Layout(SysdigModel):
    panel_id: int = 0
    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0


class BasicQueryCompareTo(SysdigModel):
    enabled: bool = False
    delta: int = 0
    time_format: str = ""


class BasicQueryScope(SysdigModel):
    expressions: list[str] = Field(default_factory=list)
    extends_dashboard_scope: bool = False


class BasicQueryMetric(SysdigModel):
    id: str = ""
    time_aggregation: str = ""
    group_aggregation: str = ""
    descriptor: str | None = None
    sorting: Any = None


class BasicQueryDisplayInfo(SysdigModel):
    display_name: str = ""
    time_series_display_name_template: str = ""
    type: str = ""


class BasicQueryFormat(SysdigModel):
    unit: str = ""
    input_format: str = ""
    display_format: str = ""
    decimals: int | None = None
    y_axis: str = ""
    null_value_display_mode: str = ""


class BasicQuerySegmentationLabel(SysdigModel):
    id: str = ""
    descriptor: str | None = None
    display_name: str | None = None
    sorting: str | None = None


class BasicQuerySegmentation(SysdigModel):
    labels: list[BasicQuerySegmentationLabel] = Field(default_factory=list)
    limit: int = 0
    direction: str = ""


class BasicQuery(SysdigModel):
    enabled: bool = False
    display_info: BasicQueryDisplayInfo = Field(default_factory=BasicQueryDisplayInfo)
    format: BasicQueryFormat = Field(default_factory=BasicQueryFormat)
    scope: BasicQueryScope = Field(default_factory=BasicQueryScope)
    compare_to: BasicQueryCompareTo = Field(default_factory=BasicQueryCompareTo)
    metrics: list[BasicQueryMetric] = Field(default_factory=list)
    segmentation: BasicQuerySegmentation | None = None


class ThresholdValue(SysdigModel):
    severity: str = ""
    value: float = 0.0
    input_format: str = ""
    display_text: str = ""


class ThresholdBase(SysdigModel):
    severity: str = ""
    display_text: str = ""


class Thresholds(SysdigModel):
    values: list[ThresholdValue] = Field(default_factory=list)
    base: ThresholdBase = Field(default_factory=ThresholdBase)
    use_defaults: bool | None = None


class LegendConfiguration(SysdigModel):
    enabled: bool = False
    position: str = ""
    layout: str = ""
    show_current: bool = False
    width: float | None = None
    height: float | None = None


class Axis(SysdigModel):
    enabled: bool = False
    display_name: str | None = None
    unit: str = ""
    display_format: str = ""
    decimals: Any = None
    min_value: float | None = None
    max_value: float | None = None
    min_input_format: str = ""
    max_input_format: str = ""
    scale: str = ""


class BottomAxis(SysdigModel):
    enabled: bool = False


class AxesConfiguration(SysdigModel):
    bottom: BottomAxis = Field(default_factory=BottomAxis)
    left: Axis = Field(default_factory=Axis)
    right: Axis = Field(default_factory=Axis)


class Panel(SysdigModel):
    id: int = 0
    type: str = ""
    name: str = ""
    description: str = ""
    null_value_display_text: str | None = None
    basic_queries: list[BasicQuery] | None = None
    number_thresholds: Thresholds | None = None
    apply_scope_to_all: bool | None = None
    apply_segmentation_to_all: bool | None = None
    legend_configuration: LegendConfiguration | None = None
    axes_configuration: AxesConfiguration | None = None
    markdown_source: str | None = None
    transparent_background: bool | None = None
    panel_title_visible: bool | None = None
    text_autosized: bool | None = None


class EventDisplaySettingsQueryParams(SysdigModel):
    severities: list[Severity] = Field(default_factory=list)
    alert_statuses: list[Status] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    filter: str | None = None
    team_scope: bool = False


class EventDisplaySettings(SysdigModel):
    enabled: bool = False
    query_params: EventDisplaySettingsQueryParams = Field(default_factory=EventDisplaySettingsQueryParams)


class Dashboard(SysdigModel):
    """A v3 dashboard.

    ``id`` and ``version`` are assigned by the server; leave them unset when
    creating a dashboard.
    """

    id: int | None = None
    team_id: int = 0
    user_id: int | None = None
    name: str = ""
    panels: list[Panel] | None = None
    event_display_settings: EventDisplaySettings = Field(default_factory=EventDisplaySettings)
    shared: bool = False
    public: bool = False
    version: int | None = None
    created_on: MilliTime | None = None
    modified_on: MilliTime | None = None
    description: str = ""
    layout: list[Layout] | None = None
    sharing_settings: list[SharingSetting] = Field(default_factory=list)
    public_notation: bool = False
    public_token: str = ""
    favorite: bool = False
    schema_: int = Field(DASHBOARD_SCHEMA, alias="schema")
    username: str = ""
    permissions: list[str] = Field(default_factory=list)
    scope_expression_list: list[ScopeExpression] | None = None


class DashboardResponse(SysdigModel):
    dashboard: Dashboard = Field(default_factory=Dashboard)


class ListDashboardsResponse(SysdigModel):
    dashboards: list[Dashboard] = Field(default_factory=list)


class DashboardTransferResults(SysdigModel):
    id: int = 0
    name: str = ""
    private: bool = Field(False, alias="privateDashboard")
    target_team_id: int = 0
    target_team_name: str = ""
    excluded: list[SharingSetting] = Field(default_factory=list, alias="sharingSettingsExcluded")
    kept: list[SharingSetting] = Field(default_factory=list, alias="sharingSettingsKept")
    current_team_id: int = 0
    current_team_name: str = ""


class DashboardTransferResponse(SysdigModel):
    results: DashboardTransferResults = Field(default_factory=DashboardTransferResults)


class DashboardTransferRequest(SysdigModel):
    owner_id: int
    target_owner_id: int
    simulate: bool
    dashboard_ids_to_be_transferred: list[int]


class DashboardsService(Service):
    async def get(self, ctx: Context, dashboard_id: int) -> DashboardResponse:
        return await self._call(ctx, "GET", f"api/v3/dashboards/{dashboard_id}", into=DashboardResponse)

    async def list(self, ctx: Context) -> ListDashboardsResponse:
        return await self._call(ctx, "GET", "api/v3/dashboards", into=ListDashboardsResponse)

    async def create(self, ctx: Context, dashboard: Dashboard) -> DashboardResponse:
        """Create ``dashboard``.

        The server assigns the id and version, so any set on ``dashboard``
        are dropped. The schema is always 3 and missing panels and layout
        are sent as empty lists. ``dashboard`` itself is not modified.
        """
        update = {"id": None, "version": None, "schema_": DASHBOARD_SCHEMA}
        if dashboard.panels is None:
            update["panels"] = []
            update["layout"] = []
        dashboard = dashboard.model_copy(update=update)
        return await self._call(
            ctx, "POST", "api/v3/dashboards", body={"dashboard": dashboard}, into=DashboardResponse
        )

    async def update(self, ctx: Context, dashboard: Dashboard) -> DashboardResponse:
        """Replace the dashboard with ``dashboard.id``."""
        return await self._call(
            ctx,
            "PUT",
            f"api/v3/dashboards/{dashboard.id}",
            body={"dashboard": dashboard},
            into=DashboardResponse,
        )

    async def delete(self, ctx: Context, dashboard_id: int) -> DashboardResponse:
        return await self._call(ctx, "DELETE", f"api/v3/dashboards/{dashboard_id}", into=DashboardResponse)

    async def favorite(self, ctx: Context, dashboard_id: int, favorite: bool) -> DashboardResponse:
        return await self._call(
            ctx,
            "PATCH",
            f"api/v3/dashboards/{dashboard_id}",
            body={"favorite": favorite},
            into=DashboardResponse,
        )

    async def transfer(
        self,
        ctx: Context,
        owner_id: int,
        target_owner_id: int,
        simulate: bool,
        *dashboard_ids: int,
    ) -> DashboardTransferResponse:
        """Move dashboards from ``owner_id`` to ``target_owner_id``.

        With ``simulate`` the server only reports what the transfer would do.

        Raises:
            ValueError: If no dashboard ids are given. Nothing is sent.
        """
        if not dashboard_ids:
            raise ValueError("no dashboard ids specified for transfer")
        request = DashboardTransferRequest(
            owner_id=owner_id,
            target_owner_id=target_owner_id,
            simulate=simulate,
            dashboard_ids_to_be_transferred=list(dashboard_ids),
        )
        return await self._call(
            ctx, "POST", "api/v3/dashboards/transfer", body=request, into=DashboardTransferResponse
        )
