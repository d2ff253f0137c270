"""
Actions module - Typed replayable browser actions.
"""

from web_test_recorder.actions.models import (
    Action,
    NavigateAction,
    ClickAction,
    FillAction,
    WaitAction,
    DEFAULT_ACTION_TIMEOUT_MS,
    DEFAULT_WAIT_MS,
    parse_action,
    parse_steps,
)

__all__ = [
    "Action",
    "NavigateAction",
    "ClickAction",
    "FillAction",
    "WaitAction",
    "DEFAULT_ACTION_TIMEOUT_MS",
    "DEFAULT_WAIT_MS",
    "parse_action",
    "parse_steps",
]
