"""
AI Gateway Models - Requests sent to and results returned by the AI endpoint.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AIRequestKind(str, Enum):
    """What the AI endpoint is asked to do."""
    ANALYZE = "analyze"     # recorded steps/code -> test intent
    GENERATE = "generate"   # approved intent -> test code


class AIRequest(BaseModel):
    """
    One call to the AI endpoint.

    Attributes:
        kind: analyze or generate
        payload: Free-form data (recorded steps/code, or an approved intent)
    """
    kind: AIRequestKind
    payload: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(use_enum_values=False)

    @classmethod
    def analyze(cls, **payload: Any) -> "AIRequest":
        return cls(kind=AIRequestKind.ANALYZE, payload=payload)

    @classmethod
    def generate(cls, **payload: Any) -> "AIRequest":
        return cls(kind=AIRequestKind.GENERATE, payload=payload)


class GeneratedCode(BaseModel):
    """Normalized result of a generate call."""
    code: str = ""


class TestIntent(BaseModel):
    """
    Normalized result of an analyze call.

    Attributes:
        intent: One-sentence description of what the recording tests
        steps: Human readable steps
        assertions: Checks the generated test should make
        confidence: 0.0 - 1.0
    """
    __test__: ClassVar[bool] = False

    intent: str = ""
    steps: List[Any] = Field(default_factory=list)
    assertions: List[Any] = Field(default_factory=list)
    confidence: float = 0.0

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        return min(max(number, 0.0), 1.0)

    @property
    def is_empty(self) -> bool:
        return not (self.intent or self.steps or self.assertions)
