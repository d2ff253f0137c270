"""
Tests for the fail-fast step runner.
"""

import pytest

from web_test_recorder.actions import ClickAction, FillAction, NavigateAction, WaitAction
from web_test_recorder.engine import RunStatus, StepRunner, StepStatus
from web_test_recorder.exceptions import NavigationError


@pytest.fixture
def runner(browser_provider, registry, fake_sleep):
    """Runner on the fake browser with a recorded settle delay."""
    return StepRunner(browser_provider, registry=registry, sleep=fake_sleep)


class TestSuccessfulRun:
    """Test runs where every step passes."""

    @pytest.mark.asyncio
    async def test_all_steps_pass(self, runner, page):
        """Test a passing run attempts every step in order."""
        steps = [
            ClickAction(selector="#login"),
            FillAction(selector="#user", value="alice"),
            WaitAction(duration_ms=10),
        ]
        result = await runner.run("https://example.com", steps)

        assert result.status == RunStatus.PASSED
        assert result.passed
        assert result.failure_reason is None
        assert result.error_type is None
        assert [r.status for r in result.step_results] == [StepStatus.PASSED] * 3
        assert [r.index for r in result.step_results] == [0, 1, 2]
        assert page.calls[0] == ("goto", "https://example.com")
        assert [c[0] for c in page.calls[1:]] == ["click", "fill", "wait"]

    @pytest.mark.asyncio
    async def test_empty_steps(self, runner, page):
        """Test a run with no steps only navigates."""
        result = await runner.run("https://example.com", [])
        assert result.status == RunStatus.PASSED
        assert result.step_results == []
        assert page.calls == [("goto", "https://example.com")]

    @pytest.mark.asyncio
    async def test_settle_delay_and_cleanup(self, runner, page, sleeps):
        """Test the settle delay runs once and the page is closed."""
        await runner.run("https://example.com", [ClickAction(selector="#a")])
        assert sleeps == [2.0]
        assert page.closed

    @pytest.mark.asyncio
    async def test_default_timeouts_reach_driver(self, runner, page):
        """Test the 5000ms action default and 1000ms wait default are used."""
        await runner.run("https://example.com", [
            ClickAction(selector="#a"),
            FillAction(selector="#b", value="x"),
            WaitAction(),
        ])
        assert ("click", "#a", 5000) in page.calls
        assert ("fill", "#b", "x", 5000) in page.calls
        assert ("wait", 1000) in page.calls

    @pytest.mark.asyncio
    async def test_duration_measured(self, runner):
        """Test duration is non-negative."""
        result = await runner.run("https://example.com", [WaitAction(duration_ms=1)])
        assert result.duration_ms >= 0


class TestFailFast:
    """Test that the first failing step stops the run."""

    @pytest.mark.asyncio
    async def test_click_failure_scenario(self, runner, page):
        """Test navigate, failing click, fill: fill is never attempted."""
        page.fail_on["#missing"] = Exception("Timeout 5000ms exceeded")
        steps = [
            NavigateAction(url="https://example.com/form"),
            ClickAction(selector="#missing", timeout_ms=5000),
            FillAction(selector="#name", value="x", timeout_ms=5000),
        ]
        result = await runner.run("https://example.com", steps)

        assert result.status == RunStatus.FAILED
        assert len(result.step_results) == 2
        assert result.step_results[0].index == 0
        assert result.step_results[0].status == StepStatus.PASSED
        assert result.step_results[1].index == 1
        assert result.step_results[1].status == StepStatus.FAILED
        assert result.step_results[1].error == "Timeout 5000ms exceeded"
        assert result.failure_reason == "Step 2 (click): Timeout 5000ms exceeded"
        assert result.error_type == "step_failure"
        assert not any(c[0] == "fill" for c in page.calls)

    @pytest.mark.parametrize("failing_index", [0, 1, 2, 3])
    @pytest.mark.asyncio
    async def test_results_stop_at_failure(self, runner, page, failing_index):
        """Test len(step_results) is k for a failure at 1-based position k."""
        steps = [ClickAction(selector=f"#b{i}") for i in range(4)]
        page.fail_on[f"#b{failing_index}"] = RuntimeError("not visible")

        result = await runner.run("https://example.com", steps)

        assert len(result.step_results) == failing_index + 1
        assert result.failure_reason == f"Step {failing_index + 1} (click): not visible"
        clicked = [c[1] for c in page.calls if c[0] == "click"]
        assert clicked == [f"#b{i}" for i in range(failing_index + 1)]

    @pytest.mark.asyncio
    async def test_settle_delay_after_failure(self, runner, page, sleeps):
        """Test the settle delay still runs after a step failure."""
        page.fail_on["#x"] = RuntimeError("boom")
        await runner.run("https://example.com", [ClickAction(selector="#x")])
        assert sleeps == [2.0]
        assert page.closed


class TestSetupFailures:
    """Test failures before the first step."""

    @pytest.mark.asyncio
    async def test_navigation_failure(self, runner, page, sleeps):
        """Test a failed initial navigation aborts with no step results."""
        page.goto_error = Exception("net::ERR_NAME_NOT_RESOLVED")
        result = await runner.run("https://nope.invalid", [ClickAction(selector="#a")])

        assert result.status == RunStatus.FAILED
        assert result.step_results == []
        assert result.failure_reason == "Navigation to https://nope.invalid failed: net::ERR_NAME_NOT_RESOLVED"
        assert result.error_type == NavigationError.error_type == "navigation_error"
        assert page.closed
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_browser_launch_failure(self, runner, browser_provider):
        """Test a browser that cannot start still yields a result."""
        from web_test_recorder.exceptions import BrowserLaunchError

        browser_provider.error = BrowserLaunchError("Executable doesn't exist")
        result = await runner.run("https://example.com", [ClickAction(selector="#a")])

        assert result.status == RunStatus.FAILED
        assert result.error_type == BrowserLaunchError.error_type == "browser_launch_error"
        assert "Executable doesn't exist" in result.failure_reason
        assert result.step_results == []

    @pytest.mark.asyncio
    async def test_plain_launch_error_is_wrapped(self, runner, browser_provider):
        """Test any exception from the provider is reported as a launch failure."""
        browser_provider.error = OSError("no display")
        result = await runner.run("https://example.com", [])

        assert result.error_type == "browser_launch_error"
        assert result.failure_reason == "Browser launch failed: no display"


class TestReplaySessions:
    """Test replay runs are tracked in the registry."""

    @pytest.mark.asyncio
    async def test_session_registered_during_run(self, browser_provider, registry, fake_sleep, page):
        """Test the run is visible in the registry while executing."""
        from web_test_recorder.sessions import SessionKind

        seen = []
        original_goto = page.goto

        async def goto(url):
            seen.extend(registry.sessions(SessionKind.REPLAY))
            await original_goto(url)

        page.goto = goto
        runner = StepRunner(browser_provider, registry=registry, sleep=fake_sleep)
        result = await runner.run("https://example.com", [])

        assert len(seen) == 1
        assert seen[0].target_url == "https://example.com"
        assert len(registry) == 0
        assert seen[0].result is result

    @pytest.mark.asyncio
    async def test_result_to_dict(self, runner, page):
        """Test the serialized result."""
        page.fail_on["#b"] = RuntimeError("detached")
        result = await runner.run("https://example.com", [ClickAction(selector="#a"), ClickAction(selector="#b")])
        data = result.to_dict()
        assert data["status"] == "failed"
        assert data["failure_reason"] == "Step 2 (click): detached"
        assert data["step_results"][1] == {
            "index": 1,
            "status": "failed",
            "action": "click",
            "duration_ms": data["step_results"][1]["duration_ms"],
            "error": "detached",
        }


class TestReplayRequest:
    """Test replaying a stored request."""

    @pytest.mark.asyncio
    async def test_replay_request(self, runner, page):
        """Test replay() runs the request's steps against its URL."""
        from web_test_recorder.engine import ReplayRequest

        request = ReplayRequest(target_url="https://example.com/a", steps=[ClickAction(selector="#go")])
        result = await runner.replay(request)

        assert result.passed
        assert page.calls[:2] == [("goto", "https://example.com/a"), ("click", "#go", 5000)]
