"""
Test API routes - replay action sequences and manage saved test cases.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from web_test_recorder.actions.models import Action
from web_test_recorder.context import AppContext
from web_test_recorder.engine.models import ReplayRequest, ReplayResult
from web_test_recorder.server.routes import get_context

logger = logging.getLogger(__name__)

router = APIRouter()

# Failures that happen before any step runs
_SETUP_ERRORS = {"browser_launch_error", "navigation_error"}


class RunTestRequest(BaseModel):
    url: str = Field(min_length=1)
    steps: List[Action] = Field(default_factory=list)


class UpdateTestRequest(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    url: Optional[str] = None
    status: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class LinkTestsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    test_case_ids: List[str] = Field(alias="testCaseIds")
    title: str = ""
    number: str = ""


def replay_response(result: ReplayResult) -> Dict[str, Any]:
    """Wire format of a replay result."""
    return {
        "success": result.error_type not in _SETUP_ERRORS,
        "status": result.status.value,
        "duration": round(result.duration_ms),
        "steps": [
            {
                "stepIndex": r.index,
                "status": r.status.value,
                "action": r.action,
                **({"error": r.error} if r.error is not None else {}),
            }
            for r in result.step_results
        ],
        "error": result.failure_reason,
        "errorType": result.error_type,
    }


@router.post("/test/run")
async def run_test(data: RunTestRequest, context: AppContext = Depends(get_context)):
    """Replay steps against a URL."""
    result = await context.runner.replay(ReplayRequest(target_url=data.url, steps=data.steps))
    return replay_response(result)


@router.get("/tests")
async def list_tests(search: Optional[str] = None, context: AppContext = Depends(get_context)):
    """Saved test cases, newest first."""
    items = await context.store.list(search=search)
    return {"testCases": [t.to_dict() for t in items]}


@router.get("/tests/{test_id}")
async def get_test(test_id: str, context: AppContext = Depends(get_context)):
    artifact = await context.store.get(test_id)
    return artifact.to_dict()


@router.patch("/tests/{test_id}")
async def update_test(test_id: str, data: UpdateTestRequest, context: AppContext = Depends(get_context)):
    """Rename, edit code or set status of a test case."""
    artifact = await context.store.update(test_id, **data.model_dump(exclude_none=True))
    return {"success": True, "testCase": artifact.to_dict()}


@router.delete("/tests/{test_id}")
async def delete_test(test_id: str, context: AppContext = Depends(get_context)):
    await context.store.delete(test_id)
    return {"success": True}


@router.post("/stories/{story_id}/tests")
async def link_story_tests(story_id: str, data: LinkTestsRequest, context: AppContext = Depends(get_context)):
    """Replace the test cases linked to a story."""
    count = await context.store.link_tests(story_id, data.test_case_ids, data.title, data.number)
    return {"success": True, "linked": count}


@router.get("/stories/{story_id}/tests")
async def story_tests(story_id: str, context: AppContext = Depends(get_context)):
    items = await context.store.get_by_story(story_id)
    return {"testCases": [t.to_dict() for t in items]}
