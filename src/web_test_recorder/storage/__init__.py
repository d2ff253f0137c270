"""
Storage module - Persistence for saved test cases.
"""

from web_test_recorder.storage.models import TestArtifact, StoryLink
from web_test_recorder.storage.case_store import TestCaseStore

__all__ = [
    "TestArtifact",
    "StoryLink",
    "TestCaseStore",
]
