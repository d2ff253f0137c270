"""
Prompts - Fixed system instructions for the AI gateway.

Used only when the configured endpoint speaks the OpenAI chat-completion
format; other endpoints receive the raw request payload.
"""

import json
from typing import Any, Dict

from web_test_recorder.llm.models import AIRequest, AIRequestKind

SYSTEM_PROMPT = """You are a test automation assistant for Playwright end-to-end tests.
You receive browser recordings produced by Playwright codegen and turn them into
maintainable tests.

Always answer with a single JSON object and nothing else. Do not add commentary."""

ANALYZE_PROMPT = """Analyze the following browser recording and describe what it tests.

Recording:
{payload}

Respond with a JSON object:
{{
  "intent": "one sentence describing what the user is verifying",
  "steps": ["human readable step", "..."],
  "assertions": ["what the test should check", "..."],
  "confidence": 0.0
}}

confidence is a number between 0.0 and 1.0."""

GENERATE_PROMPT = """Write a Playwright test for the following approved test intent.

Intent:
{payload}

Guidelines:
- Prefer getByRole, getByLabel and getByTestId locators over CSS selectors
- Add an expect() assertion for every listed assertion
- Keep the recorded navigation URL

Respond with a JSON object:
{{
  "code": "the complete test file"
}}"""

_USER_PROMPTS: Dict[AIRequestKind, str] = {
    AIRequestKind.ANALYZE: ANALYZE_PROMPT,
    AIRequestKind.GENERATE: GENERATE_PROMPT,
}


def build_user_prompt(request: AIRequest) -> str:
    """User message for a request, with its payload rendered as JSON."""
    payload = json.dumps(request.payload, indent=2, default=str)
    return _USER_PROMPTS[request.kind].format(payload=payload)


def build_chat_payload(request: AIRequest, model: str) -> Dict[str, Any]:
    """Chat-completion body for an OpenAI-compatible endpoint."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(request)},
        ],
        "temperature": 0.2,
    }


def build_raw_payload(request: AIRequest) -> Dict[str, Any]:
    """Body for a non-chat endpoint: the payload itself, tagged with its kind."""
    return {"kind": request.kind.value, **request.payload}
