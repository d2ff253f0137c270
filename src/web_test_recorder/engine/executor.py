"""
Action Executor - Run one typed action against an automation page.

Stateless. Errors from the automation driver propagate unchanged so the
step runner can report the driver's own message.
"""

import logging

from web_test_recorder.actions.models import (
    Action,
    ClickAction,
    FillAction,
    NavigateAction,
    WaitAction,
)
from web_test_recorder.exceptions import ActionExecutionError
from web_test_recorder.interfaces.browser import IAutomationPage

logger = logging.getLogger(__name__)


def error_message(error: BaseException) -> str:
    """Best human-readable message for an exception from the driver or this package."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error) or error.__class__.__name__


class ActionExecutor:
    """
    Dispatches an action to the matching page capability.

    Example:
        >>> executor = ActionExecutor()
        >>> await executor.execute(page, ClickAction(selector="#submit"))
    """

    async def execute(self, page: IAutomationPage, action: Action) -> None:
        """
        Execute a single action.

        Raises:
            ActionExecutionError: For an action type the executor does not know
            Exception: Whatever the page raises when the action fails
        """
        if isinstance(action, NavigateAction):
            logger.debug(f"navigate -> {action.url}")
            await page.goto(action.url)

        elif isinstance(action, ClickAction):
            logger.debug(f"click {action.selector} (timeout={action.timeout_ms}ms)")
            await page.click(action.selector, action.timeout_ms)

        elif isinstance(action, FillAction):
            logger.debug(f"fill {action.selector} (timeout={action.timeout_ms}ms)")
            await page.fill(action.selector, action.value, action.timeout_ms)

        elif isinstance(action, WaitAction):
            logger.debug(f"wait {action.duration_ms}ms")
            await page.wait_for_timeout(action.duration_ms)

        else:
            action_type = getattr(action, "type", type(action).__name__)
            raise ActionExecutionError(
                f"Unsupported action type: {action_type}",
                action_type=str(action_type),
            )
