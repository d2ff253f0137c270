"""
Recording API routes - start, poll, save and stop codegen sessions.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from web_test_recorder.context import AppContext
from web_test_recorder.server.routes import get_context

logger = logging.getLogger(__name__)

router = APIRouter()


class StartRecordingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(min_length=1)
    test_name: str = Field(default="", alias="testName")


class SaveRecordingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    test_name: Optional[str] = Field(default=None, alias="testName")


class StopRecordingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")


@router.post("/start")
async def start_recording(data: StartRecordingRequest, context: AppContext = Depends(get_context)):
    """Launch the recorder for a URL."""
    session_id = await context.supervisor.start(data.url, data.test_name)
    return {
        "success": True,
        "sessionId": session_id,
        "message": "Recording started. Close the browser window or call save when done.",
    }


@router.get("/status/{session_id}")
async def recording_status(session_id: str, context: AppContext = Depends(get_context)):
    """Latest generated code for a session."""
    status = await context.supervisor.status(session_id)
    return {
        "running": status.running,
        "state": status.state.value,
        "code": status.code,
        "exitCode": status.exit_code,
    }


@router.post("/save")
async def save_recording(data: SaveRecordingRequest, context: AppContext = Depends(get_context)):
    """Persist the recorded code as a test case and end the session."""
    artifact = await context.supervisor.save(data.session_id, data.test_name)
    return {"success": True, "testCase": artifact.to_dict()}


@router.post("/stop")
async def stop_recording(data: StopRecordingRequest, context: AppContext = Depends(get_context)):
    """Discard a session."""
    await context.supervisor.stop(data.session_id)
    return {"success": True}


@router.get("/sessions")
async def list_sessions(context: AppContext = Depends(get_context)):
    """Live recording sessions."""
    return {"sessions": [s.to_dict() for s in context.supervisor.sessions()]}
