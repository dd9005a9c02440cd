"""Builder for Sysdig scope expressions.

A scope narrows events to the entities matching label selections, such as
``kube_namespace_name = 'prod' and not host.hostName in ('a', 'b')``.

Example:
    ```python
    from sysdig_client.scope import Scope

    scope = Scope().add_is("kube_namespace_name", "prod").add_not_in("host.hostName", "a", "b")
    await client.events.list_events(ctx, ListEventOptions(scope=scope))
    ```
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BeforeValidator


class Selector(StrEnum):
    IS = "="
    IS_NOT = "!="
    IN = "in"
    NOT_IN = "not in"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does not contain"
    STARTS_WITH = "starts with"


# Negated selectors are written as "not <label> <positive operator>".
_NEGATED = {
    Selector.DOES_NOT_CONTAIN: Selector.CONTAINS,
    Selector.NOT_IN: Selector.IN,
}

_LIST_SELECTORS = frozenset([Selector.IN, Selector.NOT_IN])


@dataclass(frozen=True)
class Selection:
    selector: Selector
    label: str
    values: tuple[str, ...]

    def __str__(self) -> str:
        prefix = ""
        selector = self.selector
        if selector in _NEGATED:
            prefix = "not "
            selector = _NEGATED[selector]

        joined = ", ".join(f"'{value}'" for value in self.values)
        if self.selector in _LIST_SELECTORS:
            return f"{prefix}{self.label} {selector} ({joined})"
        return f"{prefix}{self.label} {selector} {joined}"


class Scope:
    """A conjunction of label selections, used to filter event listings.

    Every ``add_*`` method returns the scope, so calls chain.
    """

    def __init__(self) -> None:
        self._selections: list[Selection] = []

    def add_selection(self, selector: Selector | str, label: str, *values: str) -> "Scope":
        """Add a selection with an explicit selector.

        Prefer the dedicated ``add_*`` methods; passing several values to a
        single-value selector joins them, which the server will not match.
        """
        self._selections.append(Selection(Selector(selector), label, tuple(values)))
        return self

    def add_is(self, label: str, value: str) -> "Scope":
        return self.add_selection(Selector.IS, label, value)

    def add_is_not(self, label: str, value: str) -> "Scope":
        return self.add_selection(Selector.IS_NOT, label, value)

    def add_in(self, label: str, *values: str) -> "Scope":
        return self.add_selection(Selector.IN, label, *values)

    def add_not_in(self, label: str, *values: str) -> "Scope":
        return self.add_selection(Selector.NOT_IN, label, *values)

    def add_contains(self, label: str, value: str) -> "Scope":
        return self.add_selection(Selector.CONTAINS, label, value)

    def add_does_not_contain(self, label: str, value: str) -> "Scope":
        return self.add_selection(Selector.DOES_NOT_CONTAIN, label, value)

    def add_starts_with(self, label: str, value: str) -> "Scope":
        return self.add_selection(Selector.STARTS_WITH, label, value)

    @property
    def selections(self) -> list[Selection]:
        return list(self._selections)

    def __bool__(self) -> bool:
        return bool(self._selections)

    def __str__(self) -> str:
        return " and ".join(str(selection) for selection in self._selections)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class EventScope:
    """Scope labels attached to a created event. Only ``=`` is supported."""

    def __init__(self, labels: Mapping[str, str] | None = None) -> None:
        self._scope = Scope()
        for label, value in (labels or {}).items():
            self.add_is(label, value)

    def add_is(self, label: str, value: str) -> "EventScope":
        self._scope.add_is(label, value)
        return self

    def __bool__(self) -> bool:
        return bool(self._scope)

    def __str__(self) -> str:
        return str(self._scope)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


def _render(value: Any) -> Any:
    if isinstance(value, (Scope, EventScope)):
        return str(value)
    return value


ScopeExpression = Annotated[str, BeforeValidator(_render)]
"""A scope string field that also accepts a ``Scope`` or ``EventScope``."""
