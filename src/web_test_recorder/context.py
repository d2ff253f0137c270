"""
Application Context - The set of live components shared by the API and CLI.

Everything that holds state (session registry, recorder supervisor, step
runner, AI gateway client, test case store) is created here once and
handed to whoever needs it; nothing is kept in module globals.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from web_test_recorder.browsers.playwright_browser import PlaywrightBrowserProvider
from web_test_recorder.config import Settings, get_settings
from web_test_recorder.engine.step_runner import StepRunner
from web_test_recorder.llm.gateway import AIGatewayClient
from web_test_recorder.recorder.codegen import CodegenBackend, artifact_suffix
from web_test_recorder.recorder.supervisor import RecorderSupervisor
from web_test_recorder.sessions.registry import SessionRegistry
from web_test_recorder.storage.case_store import TestCaseStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Live components of one running application."""
    settings: Settings
    registry: SessionRegistry
    supervisor: RecorderSupervisor
    runner: StepRunner
    gateway: AIGatewayClient
    store: TestCaseStore

    async def aclose(self) -> None:
        """Stop live recordings and release network clients."""
        await self.supervisor.shutdown()
        await self.gateway.close()


def create_context(settings: Optional[Settings] = None) -> AppContext:
    """
    Build the production component graph from settings.

    Args:
        settings: Settings to use (global settings if omitted)
    """
    settings = settings or get_settings()
    registry = SessionRegistry()
    store = TestCaseStore(settings.storage.path)

    backend = CodegenBackend(
        command=settings.recorder.command,
        target=settings.recorder.target,
        startup_check_seconds=settings.recorder.startup_check_seconds,
        kill_grace_seconds=settings.recorder.kill_grace_seconds,
    )
    supervisor = RecorderSupervisor(
        backend,
        registry,
        store=store,
        artifact_dir=settings.recorder.artifact_dir,
        artifact_suffix=artifact_suffix(settings.recorder.target),
        finished_ttl_seconds=settings.recorder.finished_ttl_seconds,
    )
    runner = StepRunner(
        PlaywrightBrowserProvider(settings.browser),
        registry=registry,
        settle_delay_ms=settings.runner.settle_delay_ms,
    )
    gateway = AIGatewayClient(settings.ai)

    logger.debug(f"Application context created (store={store.path})")
    return AppContext(
        settings=settings,
        registry=registry,
        supervisor=supervisor,
        runner=runner,
        gateway=gateway,
        store=store,
    )
