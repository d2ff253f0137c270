"""
Pytest configuration and fixtures.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from web_test_recorder.interfaces.browser import IAutomationPage, IBrowserProvider
from web_test_recorder.interfaces.recording import RecordingBackend, RecordingHandle


class FakePage(IAutomationPage):
    """Records every call; raises for selectors listed in ``fail_on``."""

    def __init__(
        self,
        fail_on: Optional[Dict[str, Exception]] = None,
        goto_error: Optional[Exception] = None,
    ):
        self.calls: List[Tuple[Any, ...]] = []
        self.fail_on = fail_on or {}
        self.goto_error = goto_error
        self.closed = False

    async def goto(self, url: str) -> None:
        self.calls.append(("goto", url))
        if self.goto_error is not None:
            raise self.goto_error

    async def click(self, selector: str, timeout_ms: int) -> None:
        self.calls.append(("click", selector, timeout_ms))
        if selector in self.fail_on:
            raise self.fail_on[selector]

    async def fill(self, selector: str, value: str, timeout_ms: int) -> None:
        self.calls.append(("fill", selector, value, timeout_ms))
        if selector in self.fail_on:
            raise self.fail_on[selector]

    async def wait_for_timeout(self, duration_ms: int) -> None:
        self.calls.append(("wait", duration_ms))

    async def close(self) -> None:
        self.closed = True


class FakeBrowserProvider(IBrowserProvider):
    """Hands out one FakePage, or fails to launch."""

    def __init__(self, page: Optional[FakePage] = None, error: Optional[Exception] = None):
        self.page = page or FakePage()
        self.error = error
        self.launches = 0

    async def new_page(self) -> FakePage:
        self.launches += 1
        if self.error is not None:
            raise self.error
        return self.page


@dataclass
class FakeRecorder:
    """Stand-in for a recorder process."""
    alive: bool = True
    exit_code: Optional[int] = None
    exited: asyncio.Event = field(default_factory=asyncio.Event)


class FakeRecordingBackend(RecordingBackend):
    """
    RecordingBackend that spawns nothing.

    Tests write the artifact file themselves and call ``exit()`` to
    simulate the user closing the recorder window.
    """

    def __init__(self, spawn_error: Optional[Exception] = None):
        self.spawn_error = spawn_error
        self.handles: List[RecordingHandle] = []
        self.stopped: List[RecordingHandle] = []

    async def start(self, target_url: str, artifact_path: Path) -> RecordingHandle:
        if self.spawn_error is not None:
            raise self.spawn_error
        artifact_path.parent.mkdir(parents=True, exist_ok=True)
        handle = RecordingHandle(artifact_path=artifact_path, pid=1000 + len(self.handles), native=FakeRecorder())
        self.handles.append(handle)
        return handle

    def poll(self, handle: RecordingHandle) -> bool:
        return handle.native.alive

    async def wait(self, handle: RecordingHandle) -> Optional[int]:
        await handle.native.exited.wait()
        return handle.native.exit_code

    async def stop(self, handle: RecordingHandle) -> None:
        self.stopped.append(handle)
        if handle.native.alive:
            self.exit(handle, -9)

    def exit(self, handle: RecordingHandle, code: int = 0) -> None:
        handle.native.alive = False
        handle.native.exit_code = code
        handle.native.exited.set()


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until ``predicate()`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def settings(tmp_path):
    """Provide test settings."""
    from web_test_recorder.config import Settings

    return Settings(
        browser={"headless": True},
        recorder={"artifact_dir": str(tmp_path / "artifacts"), "finished_ttl_seconds": 0},
        runner={"settle_delay_ms": 0},
        storage={"path": str(tmp_path / "test-cases.json")},
        server={"static_dir": str(tmp_path / "public")},
    )


@pytest.fixture
def registry():
    """Provide a clean session registry."""
    from web_test_recorder.sessions import SessionRegistry

    return SessionRegistry()


@pytest.fixture
def store(tmp_path):
    """Provide a test case store backed by a temp file."""
    from web_test_recorder.storage import TestCaseStore

    return TestCaseStore(tmp_path / "test-cases.json")


@pytest.fixture
def recording_backend():
    return FakeRecordingBackend()


@pytest.fixture
async def supervisor(recording_backend, registry, store, tmp_path):
    """Supervisor wired to the fake backend; finished sessions never expire."""
    from web_test_recorder.recorder import RecorderSupervisor

    supervisor = RecorderSupervisor(
        recording_backend,
        registry,
        store=store,
        artifact_dir=tmp_path / "artifacts",
        finished_ttl_seconds=0,
    )
    yield supervisor
    await supervisor.shutdown()


@pytest.fixture
def sleeps():
    """List that a fake sleep appends its delays to."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep


@pytest.fixture
def page():
    """FakePage; set ``fail_on`` / ``goto_error`` to script failures."""
    return FakePage()


@pytest.fixture
def browser_provider(page):
    """Provider returning the ``page`` fixture; set ``error`` to fail the launch."""
    return FakeBrowserProvider(page)


@pytest.fixture
def eventually():
    """``await eventually(predicate)`` waits for background tasks to catch up."""
    return wait_until


class FakeAIEndpoint:
    """
    httpx.MockTransport handler answering from a queue of replies.

    Queue ``httpx.Response`` objects, or httpx exception classes to fail
    that attempt. An empty queue answers with an empty code object.
    """

    def __init__(self):
        self.replies: List[Any] = []
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else httpx.Response(200, json={"code": ""})
        if isinstance(reply, type) and issubclass(reply, Exception):
            raise reply("simulated failure", request=request)
        return reply


@pytest.fixture
def ai_endpoint():
    return FakeAIEndpoint()


@pytest.fixture
def app_context(settings, registry, store, recording_backend, browser_provider, ai_endpoint, fake_sleep):
    """AppContext built from fakes: no browser, no recorder process, no network."""
    from web_test_recorder.context import AppContext
    from web_test_recorder.engine import StepRunner
    from web_test_recorder.llm import AIGatewayClient
    from web_test_recorder.recorder import RecorderSupervisor

    settings = settings.merge_with({"ai": {"endpoint": "https://api.openai.com/v1/chat/completions"}})
    return AppContext(
        settings=settings,
        registry=registry,
        supervisor=RecorderSupervisor(
            recording_backend,
            registry,
            store=store,
            artifact_dir=settings.recorder.artifact_dir,
            finished_ttl_seconds=0,
        ),
        runner=StepRunner(browser_provider, registry=registry, settle_delay_ms=0),
        gateway=AIGatewayClient(settings.ai, transport=httpx.MockTransport(ai_endpoint), sleep=fake_sleep),
        store=store,
    )
