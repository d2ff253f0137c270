"""
AI API routes - analyze recordings and generate test code.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from web_test_recorder.context import AppContext
from web_test_recorder.llm.models import AIRequest
from web_test_recorder.server.routes import get_context

router = APIRouter()


class AnalyzeRequest(BaseModel):
    steps: Optional[List[Any]] = None
    code: Optional[str] = None
    url: Optional[str] = None


class GenerateRequest(BaseModel):
    intent: Dict[str, Any]
    url: Optional[str] = None


@router.post("/analyze")
async def analyze(data: AnalyzeRequest, context: AppContext = Depends(get_context)):
    """Describe what a recording tests."""
    request = AIRequest.analyze(**data.model_dump(exclude_none=True))
    intent = await context.gateway.call(request)
    return {"success": True, "analysis": intent.model_dump()}


@router.post("/generate")
async def generate(data: GenerateRequest, context: AppContext = Depends(get_context)):
    """Write test code for an approved intent."""
    request = AIRequest.generate(**data.model_dump(exclude_none=True))
    result = await context.gateway.call(request)
    return {"success": True, "code": getattr(result, "code", "")}
