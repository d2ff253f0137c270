"""
LLM module - Client for the AI endpoint that analyzes recordings and generates tests.
"""

from web_test_recorder.llm.models import AIRequest, AIRequestKind, GeneratedCode, TestIntent
from web_test_recorder.llm.gateway import AIGatewayClient, is_openai_compatible, validate_endpoint
from web_test_recorder.llm.normalize import normalize_code, normalize_intent

__all__ = [
    "AIRequest",
    "AIRequestKind",
    "GeneratedCode",
    "TestIntent",
    "AIGatewayClient",
    "is_openai_compatible",
    "validate_endpoint",
    "normalize_code",
    "normalize_intent",
]
