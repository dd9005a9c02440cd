"""Prometheus-compatible query API.

Sysdig implements a subset of the Prometheus HTTP API under ``prometheus/``:
instant queries, range queries and the alerts listing.

Example:
    ```python
    result, warnings = await client.prometheus.query(ctx, "sysdig_host_cpu_used_percent")
    for sample in result.result:
        print(sample.metric, sample.value)
    ```
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Generic, TypeVar

from pydantic import Field

from sysdig_client.context import Context
from sysdig_client.errors.exceptions import PrometheusError
from sysdig_client.services.base import Service
from sysdig_client.types import SysdigModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_SUCCESS = "success"


class PrometheusResponse(SysdigModel, Generic[T]):
    """The envelope around every Prometheus API payload."""

    status: str = ""
    data: T | None = None
    error_type: str | None = None
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)


class VectorSample(SysdigModel):
    metric: dict[str, str] = Field(default_factory=dict)
    value: tuple[float, str]


class MatrixSeries(SysdigModel):
    metric: dict[str, str] = Field(default_factory=dict)
    values: list[tuple[float, str]]


class QueryResult(SysdigModel):
    """Result of a query.

    ``result`` is a list of ``VectorSample`` for ``vector``, a list of
    ``MatrixSeries`` for ``matrix`` and a ``(timestamp, value)`` pair for
    ``scalar`` and ``string`` result types.
    """

    result_type: str = ""
    result: list[VectorSample] | list[MatrixSeries] | tuple[float, str] | None = None


class PrometheusAlert(SysdigModel):
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    state: str = ""
    active_at: datetime | None = None
    value: str = ""


class AlertsResult(SysdigModel):
    alerts: list[PrometheusAlert] = Field(default_factory=list)


def format_time(value: datetime) -> str:
    """Unix seconds with fractional part, as Prometheus expects."""
    return f"{value.timestamp():.3f}".rstrip("0").rstrip(".")


def format_duration(value: timedelta) -> str:
    return f"{value.total_seconds():g}s"


class PrometheusService(Service):
    async def query(
        self,
        ctx: Context,
        query: str,
        ts: datetime | None = None,
        timeout: timedelta | None = None,
    ) -> tuple[QueryResult, list[str]]:
        """Evaluate ``query`` at ``ts`` (server time when omitted).

        Returns:
            The result and any warnings the server attached.

        Raises:
            PrometheusError: If the server reports a query error.
        """
        params = {
            "query": query,
            "time": format_time(ts) if ts is not None else None,
            "timeout": format_duration(timeout) if timeout is not None else None,
        }
        return await self._query(ctx, "prometheus/api/v1/query", params, QueryResult)

    async def query_range(
        self,
        ctx: Context,
        query: str,
        start: datetime,
        end: datetime,
        step: timedelta,
    ) -> tuple[QueryResult, list[str]]:
        """Evaluate ``query`` every ``step`` from ``start`` to ``end``."""
        params = {
            "query": query,
            "start": format_time(start),
            "end": format_time(end),
            "step": format_duration(step),
        }
        return await self._query(ctx, "prometheus/api/v1/query_range", params, QueryResult)

    async def alerts(self, ctx: Context) -> AlertsResult:
        result, _ = await self._query(ctx, "prometheus/api/v1/alerts", None, AlertsResult)
        return result

    async def _query(
        self, ctx: Context, path: str, params: dict[str, Any] | None, data_type: type
    ) -> tuple[Any, list[str]]:
        envelope = await self._call(ctx, "GET", path, params=params, into=PrometheusResponse[data_type])
        if envelope.status != STATUS_SUCCESS:
            raise PrometheusError(envelope.error_type, envelope.error)
        for warning in envelope.warnings:
            logger.debug(f"Prometheus warning for {path}: {warning}")
        data = envelope.data if envelope.data is not None else data_type()
        return data, envelope.warnings
