"""Shared model base and the JSON encodings Sysdig uses for time values.

Sysdig transmits instants as Unix milliseconds and most durations as integer
microseconds. ``MilliTime`` and ``MicroDuration`` are annotated pydantic types
that accept those integers on input, keep ``datetime``/``timedelta`` in
Python, and serialize back to integers.

Example:
    ```python
    class Window(SysdigModel):
        start: MilliTime
        span: MicroDuration

    Window.model_validate_json('{"start": 1600000000000, "span": 1000}')
    ```
"""

from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_MILLISECOND = timedelta(milliseconds=1)
_MICROSECOND = timedelta(microseconds=1)


def _as_integer(value: Any, unit: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected an integer number of {unit}, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise ValueError(f"expected an integer number of {unit}, got {value!r}")


def from_unix_millis(millis: int) -> datetime:
    return EPOCH + millis * _MILLISECOND


def to_unix_millis(value: datetime) -> int:
    """Milliseconds since the epoch. Naive datetimes are taken as local time."""
    if value.tzinfo is None:
        value = value.astimezone()
    return (value - EPOCH) // _MILLISECOND


def to_micros(value: timedelta) -> int:
    return value // _MICROSECOND


def _parse_milli_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return from_unix_millis(_as_integer(value, "milliseconds"))


def _parse_micro_duration(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return _as_integer(value, "microseconds") * _MICROSECOND


MilliTime = Annotated[
    datetime,
    BeforeValidator(_parse_milli_time),
    PlainSerializer(to_unix_millis, return_type=int),
]
"""A ``datetime`` carried as Unix milliseconds on the wire."""

MicroDuration = Annotated[
    timedelta,
    BeforeValidator(_parse_micro_duration),
    PlainSerializer(to_micros, return_type=int),
]
"""A ``timedelta`` carried as integer microseconds on the wire."""


class SysdigModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python.

    Unknown fields in responses are ignored so new server fields never break
    decoding, and a JSON null takes the field default.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
