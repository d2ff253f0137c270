"""
Response Normalization - Reduce whatever the AI endpoint returned to one shape.

Upstream replies arrive as any nesting of:

- an OpenAI-style object with ``choices[0].message.content``
- a JSON object whose field is itself JSON-encoded text
- markdown code fences around JSON or code
- plain text

Each pass below is a pure function that peels at most one layer and
returns its input unchanged when the layer is absent. The passes are run
in order, repeatedly, until a full round changes nothing (or the round
cap is hit), so layers may appear in any order.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, List, Sequence, Tuple

from pydantic import ValidationError

from web_test_recorder.llm.models import TestIntent

logger = logging.getLogger(__name__)

MAX_ROUNDS = 5

# Fields that carry generated code in wrapped replies, by preference
CODE_FIELDS: Tuple[str, ...] = ("code", "content", "text", "output")

_FENCE_RE = re.compile(r"```[\w+.-]*[ \t]*\n?(.*?)```", re.DOTALL)

Pass = Callable[[Any], Any]


def strip_fences(value: Any) -> Any:
    """Return the body of the first markdown code fence."""
    if not isinstance(value, str) or "```" not in value:
        return value
    match = _FENCE_RE.search(value)
    if match:
        return match.group(1).strip()
    # Unterminated fence: drop the opening line
    stripped = value.strip()
    if stripped.startswith("```"):
        _, _, rest = stripped.partition("\n")
        return rest.strip()
    return value


def extract_chat_content(value: Any) -> Any:
    """Return ``choices[0].message.content`` of a chat-completion object."""
    if not isinstance(value, dict):
        return value
    choices = value.get("choices")
    if not isinstance(choices, list) or not choices:
        return value
    first = choices[0]
    if not isinstance(first, dict):
        return value
    message = first.get("message")
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        return message["content"]
    # Legacy completions
    if isinstance(first.get("text"), str):
        return first["text"]
    return value


def decode_json_string(value: Any) -> Any:
    """Parse text that is a JSON document (object, array or string)."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text or text[0] not in "{[\"":
        return value
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return value


def extract_code_field(value: Any) -> Any:
    """Return the code field of a wrapper object."""
    if not isinstance(value, dict):
        return value
    for key in CODE_FIELDS:
        field_value = value.get(key)
        if isinstance(field_value, (str, dict)):
            return field_value
    return value


CODE_PASSES: Sequence[Pass] = (
    strip_fences,
    extract_chat_content,
    decode_json_string,
    extract_code_field,
)

INTENT_PASSES: Sequence[Pass] = (
    strip_fences,
    extract_chat_content,
    decode_json_string,
)


def run_passes(value: Any, passes: Sequence[Pass], max_rounds: int = MAX_ROUNDS) -> Any:
    """Apply ``passes`` in order until a round is a no-op or ``max_rounds`` is reached."""
    for _ in range(max_rounds):
        before = value
        for normalize_pass in passes:
            value = normalize_pass(value)
        if value == before:
            break
    else:
        logger.debug(f"Normalization stopped after {max_rounds} rounds without settling")
    return value


def normalize_code(raw: Any) -> str:
    """
    Reduce an upstream reply to a plain code string.

    Unrecognized shapes give an empty string.
    """
    value = run_passes(raw, CODE_PASSES)
    if isinstance(value, str):
        return value.strip()
    logger.warning(f"Could not extract code from AI reply of type {type(value).__name__}")
    return ""


def normalize_intent(raw: Any) -> TestIntent:
    """
    Reduce an upstream reply to a TestIntent.

    Missing fields take their defaults; an unrecognized shape gives an
    empty intent.
    """
    value = run_passes(raw, INTENT_PASSES)
    if isinstance(value, dict):
        return _intent_from_dict(value)
    if isinstance(value, str) and value.strip():
        # Prose answer: keep it as the intent description
        return TestIntent(intent=value.strip())
    return TestIntent()


def _intent_from_dict(data: Dict[str, Any]) -> TestIntent:
    fields: Dict[str, Any] = {
        "intent": data.get("intent") or data.get("description") or "",
        "steps": _as_list(data.get("steps")),
        "assertions": _as_list(data.get("assertions")),
        "confidence": data.get("confidence", 0.0),
    }
    if not isinstance(fields["intent"], str):
        fields["intent"] = json.dumps(fields["intent"])
    try:
        return TestIntent(**fields)
    except ValidationError as e:
        logger.warning(f"Discarding malformed intent fields: {e}")
        return TestIntent(intent=fields["intent"])


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
