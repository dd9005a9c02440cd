"""Sysdig API error envelope models."""

from dataclasses import dataclass, field
from typing import Annotated, Any

import httpx
from pydantic import BeforeValidator, TypeAdapter


def _null_as(default: Any) -> BeforeValidator:
    # JSON null decodes to the field's zero value.
    return BeforeValidator(lambda value: default if value is None else value)


@dataclass
class ErrorDetail:
    """A further explanation for the reason of an API error."""

    message: Annotated[str, _null_as("")] = ""
    reason: Annotated[str, _null_as("")] = ""

    def __str__(self) -> str:
        return f"{self.message} ({self.reason})" if self.reason else self.message


@dataclass
class ErrorPayload:
    """Body of a failed Sysdig API response.

    ``{"message": "...", "errors": [{"message": "...", "reason": "..."}]}``
    """

    message: str | None = None
    errors: Annotated[list[ErrorDetail], _null_as([])] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ErrorPayload":
        """Decode the error envelope from a buffered response.

        Raises:
            pydantic.ValidationError: If the body is not a JSON error envelope.
        """
        return _payload_adapter.validate_json(response.content)


_payload_adapter = TypeAdapter(ErrorPayload)
