"""
Engine Models - Replay requests and results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from web_test_recorder.actions.models import Action


class StepStatus(str, Enum):
    """Outcome of one attempted step."""
    PASSED = "passed"
    FAILED = "failed"


class RunStatus(str, Enum):
    """Outcome of a whole replay."""
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class ReplayRequest:
    """A stored action sequence to replay against a start URL."""
    target_url: str
    steps: List[Action] = field(default_factory=list)


@dataclass
class StepResult:
    """
    Result of one attempted step.

    Attributes:
        index: 0-based position in the step list
        status: passed or failed
        action: Action tag of the step
        error: Error message from the automation driver, if failed
        duration_ms: Time spent in the step
    """
    index: int
    status: StepStatus
    action: str
    error: Optional[str] = None
    duration_ms: float = 0

    @property
    def passed(self) -> bool:
        return self.status == StepStatus.PASSED

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "index": self.index,
            "status": self.status.value,
            "action": self.action,
            "duration_ms": round(self.duration_ms, 1),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class ReplayResult:
    """
    Complete outcome of a replay run.

    ``len(step_results)`` is the number of steps attempted. Steps after the
    first failure are never attempted and have no entry.
    """
    status: RunStatus
    duration_ms: float
    step_results: List[StepResult] = field(default_factory=list)
    failure_reason: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == RunStatus.PASSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "duration_ms": round(self.duration_ms),
            "step_results": [r.to_dict() for r in self.step_results],
            "failure_reason": self.failure_reason,
            "error_type": self.error_type,
        }
