"""
Step Runner - Replay a stored action sequence with fail-fast semantics.

Algorithm:
    1. Open a fresh page and navigate to the target URL. A failure here
       aborts the run before any step and is reported as the top-level
       failure reason, not as a step failure.
    2. Execute steps strictly in order. The first failing step is recorded
       as failed and nothing after it is attempted.
    3. Wait a fixed settle delay so in-flight activity from the last action
       can finish, then release the browser.

Replay never raises for navigation or action failures; callers always get
a complete ReplayResult.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from web_test_recorder.actions.models import Action
from web_test_recorder.engine.executor import ActionExecutor, error_message
from web_test_recorder.engine.models import ReplayRequest, ReplayResult, RunStatus, StepResult, StepStatus
from web_test_recorder.exceptions import BrowserError, BrowserLaunchError, NavigationError
from web_test_recorder.interfaces.browser import IAutomationPage, IBrowserProvider
from web_test_recorder.sessions.models import ReplaySession, new_session_id
from web_test_recorder.sessions.registry import SessionRegistry

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY_MS = 2000


class StepRunner:
    """
    Sequences actions through the ActionExecutor.

    Example:
        >>> runner = StepRunner(PlaywrightBrowserProvider(), registry=registry)
        >>> result = await runner.run("https://example.com", [
        ...     ClickAction(selector="text=More information"),
        ... ])
        >>> result.status
        <RunStatus.PASSED: 'passed'>
    """

    def __init__(
        self,
        browser_provider: IBrowserProvider,
        executor: Optional[ActionExecutor] = None,
        registry: Optional[SessionRegistry] = None,
        settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            browser_provider: Launches one page per run
            executor: Action executor (a default one is created if omitted)
            registry: If given, each run is registered as a replay session while it executes
            settle_delay_ms: Grace period after the last step
            sleep: Coroutine used for the settle delay
        """
        self._browser_provider = browser_provider
        self._executor = executor or ActionExecutor()
        self._registry = registry
        self._settle_delay_ms = settle_delay_ms
        self._sleep = sleep

    async def run(self, target_url: str, steps: Sequence[Action]) -> ReplayResult:
        """
        Replay ``steps`` starting at ``target_url``.

        Returns:
            ReplayResult with status, duration, per-step results and failure reason
        """
        session = ReplaySession(id=new_session_id(), target_url=target_url, total_steps=len(steps))
        if self._registry is not None:
            self._registry.set(session)

        logger.info(f"[{session.id}] Running test with {len(steps)} steps against {target_url}")

        page: Optional[IAutomationPage] = None
        result: Optional[ReplayResult] = None
        try:
            try:
                page = await self._browser_provider.new_page()
            except Exception as e:
                logger.error(f"[{session.id}] Could not open browser: {e}")
                error = BrowserLaunchError(f"Browser launch failed: {error_message(e)}")
                result = _setup_failure(error, duration_ms=0)
            else:
                result = await self._run_on_page(session, page, target_url, steps)
        finally:
            if page is not None:
                try:
                    await page.close()
                except Exception as e:
                    logger.warning(f"[{session.id}] Error closing browser: {e}")
            session.result = result
            if self._registry is not None:
                self._registry.delete(session.id)

        logger.info(
            f"[{session.id}] Test {result.status.value} in {result.duration_ms:.0f}ms "
            f"({len(result.step_results)}/{len(steps)} steps attempted)"
        )
        return result

    async def replay(self, request: ReplayRequest) -> ReplayResult:
        return await self.run(request.target_url, request.steps)

    async def _run_on_page(
        self,
        session: ReplaySession,
        page: IAutomationPage,
        target_url: str,
        steps: Sequence[Action],
    ) -> ReplayResult:
        started = time.monotonic()

        try:
            await page.goto(target_url)
        except Exception as e:
            message = error_message(e)
            logger.error(f"[{session.id}] Initial navigation to {target_url} failed: {message}")
            error = NavigationError(f"Navigation to {target_url} failed: {message}", url=target_url)
            return _setup_failure(error, duration_ms=(time.monotonic() - started) * 1000)

        step_results: List[StepResult] = []
        failure_reason: Optional[str] = None

        for index, action in enumerate(steps):
            logger.info(f"[{session.id}] Executing step {index + 1}: {action.type}")
            step_started = time.monotonic()
            try:
                await self._executor.execute(page, action)
            except Exception as e:
                message = error_message(e)
                logger.error(f"[{session.id}] Step {index + 1} failed: {message}")
                step_results.append(StepResult(
                    index=index,
                    status=StepStatus.FAILED,
                    action=action.type,
                    error=message,
                    duration_ms=(time.monotonic() - step_started) * 1000,
                ))
                failure_reason = f"Step {index + 1} ({action.type}): {message}"
                break

            step_results.append(StepResult(
                index=index,
                status=StepStatus.PASSED,
                action=action.type,
                duration_ms=(time.monotonic() - step_started) * 1000,
            ))
            session.completed_steps = index + 1

        await self._sleep(self._settle_delay_ms / 1000)

        return ReplayResult(
            status=RunStatus.FAILED if failure_reason else RunStatus.PASSED,
            duration_ms=(time.monotonic() - started) * 1000,
            step_results=step_results,
            failure_reason=failure_reason,
            error_type="step_failure" if failure_reason else None,
        )


def _setup_failure(error: BrowserError, duration_ms: float) -> ReplayResult:
    """A run that ended before its first step."""
    return ReplayResult(
        status=RunStatus.FAILED,
        duration_ms=duration_ms,
        failure_reason=error.message,
        error_type=error.error_type,
    )
