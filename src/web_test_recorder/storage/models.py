"""
Storage Models - Persisted test cases and story links.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


def _now() -> str:
    return datetime.now().isoformat()


@dataclass
class TestArtifact:
    """
    A saved test case.

    Attributes:
        id: uuid4 string
        name: Test name
        code: Generated test code
        url: Start URL the test was recorded against
        status: "draft", "not run", "passed" or "failed"
        created_at: ISO timestamp
        updated_at: ISO timestamp
        metadata: Free-form extra data
    """
    __test__ = False

    name: str
    code: str
    url: Optional[str] = None
    status: str = "draft"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "url": self.url,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestArtifact":
        return cls(
            id=data["id"],
            name=data["name"],
            code=data.get("code", ""),
            url=data.get("url"),
            status=data.get("status", "draft"),
            created_at=data.get("created_at") or _now(),
            updated_at=data.get("updated_at") or _now(),
            metadata=data.get("metadata") or {},
        )


@dataclass
class StoryLink:
    """Link between a work-item story and a saved test case."""
    story_id: str
    test_case_id: str
    story_title: str = ""
    story_number: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    linked_at: str = field(default_factory=_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "story_id": self.story_id,
            "story_title": self.story_title,
            "story_number": self.story_number,
            "test_case_id": self.test_case_id,
            "linked_at": self.linked_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoryLink":
        return cls(
            id=data.get("id") or str(uuid.uuid4()),
            story_id=data["story_id"],
            test_case_id=data["test_case_id"],
            story_title=data.get("story_title", ""),
            story_number=data.get("story_number", ""),
            linked_at=data.get("linked_at") or _now(),
        )
