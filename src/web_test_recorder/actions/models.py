"""
Action Models - Typed browser actions for replay.

Each stored step is one of four actions, discriminated by its ``type``
field. Pydantic validates the wire shape so the executor can dispatch on
concrete classes.

Example:
    >>> steps = parse_steps([
    ...     {"type": "click", "selector": "#submit"},
    ...     {"type": "fill", "selector": "#q", "value": "cats"},
    ... ])
    >>> steps[0].timeout_ms
    5000
"""

from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

DEFAULT_ACTION_TIMEOUT_MS = 5000
DEFAULT_WAIT_MS = 1000


class _BaseAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class NavigateAction(_BaseAction):
    """Load a URL in the current page."""
    type: Literal["navigate"] = "navigate"
    url: str


class ClickAction(_BaseAction):
    """Click the element matched by a locator."""
    type: Literal["click"] = "click"
    selector: str
    timeout_ms: int = Field(default=DEFAULT_ACTION_TIMEOUT_MS, ge=0, alias="timeoutMs")


class FillAction(_BaseAction):
    """Fill the input matched by a locator."""
    type: Literal["fill"] = "fill"
    selector: str
    value: str = ""
    timeout_ms: int = Field(default=DEFAULT_ACTION_TIMEOUT_MS, ge=0, alias="timeoutMs")


class WaitAction(_BaseAction):
    """Pause for a fixed duration. ``timeout`` is accepted for recorded steps."""
    type: Literal["wait"] = "wait"
    duration_ms: int = Field(default=DEFAULT_WAIT_MS, ge=0, alias="timeout")


Action = Annotated[
    Union[NavigateAction, ClickAction, FillAction, WaitAction],
    Field(discriminator="type"),
]

_steps_adapter: TypeAdapter[List[Action]] = TypeAdapter(List[Action])
_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(data: Dict[str, Any]) -> Action:
    """Validate one raw step dict into a typed action."""
    return _action_adapter.validate_python(data)


def parse_steps(data: List[Dict[str, Any]]) -> List[Action]:
    """
    Validate a list of raw step dicts, preserving order.

    Raises:
        pydantic.ValidationError: If any step has an unknown type or missing field
    """
    return _steps_adapter.validate_python(data)
