"""
Test Case Store - JSON-file persistence for saved tests and story links.

All reads and writes go through one asyncio.Lock and run the file I/O in
a worker thread, so the event loop never blocks on disk.
"""

import asyncio
import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from web_test_recorder.exceptions import RecordNotFoundError, StorageError
from web_test_recorder.storage.models import StoryLink, TestArtifact

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {"name", "code", "url", "status", "metadata"}


class TestCaseStore:
    """
    CRUD over saved test cases.

    Example:
        >>> store = TestCaseStore("test-cases.json")
        >>> test_id = await store.create("login", code, "https://example.com")
        >>> await store.list(search="login")
    """

    __test__ = False

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self._path.exists():
            return {"test_cases": [], "story_links": []}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt test case store {self._path}: {e}", {"path": str(self._path)})
        if not isinstance(data, dict):
            raise StorageError(
                f"Corrupt test case store {self._path}: expected an object, got {type(data).__name__}",
                {"path": str(self._path)},
            )
        data.setdefault("test_cases", [])
        data.setdefault("story_links", [])
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self._path)

    async def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        return await asyncio.to_thread(self._read)

    async def _save(self, data: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._write, data)

    async def create(
        self,
        name: str,
        code: str,
        url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        status: str = "draft",
    ) -> str:
        """Insert a new test case and return its id."""
        artifact = TestArtifact(name=name, code=code, url=url, metadata=metadata or {}, status=status)
        await self.add(artifact)
        return artifact.id

    async def add(self, artifact: TestArtifact) -> TestArtifact:
        """Insert a fully built test case."""
        async with self._lock:
            data = await self._load()
            data["test_cases"].append(artifact.to_dict())
            await self._save(data)
        logger.info(f"Saved test case {artifact.id} ({artifact.name})")
        return artifact

    async def get(self, test_id: str) -> TestArtifact:
        """
        Raises:
            RecordNotFoundError: If no test case has this id
        """
        async with self._lock:
            data = await self._load()
        for row in data["test_cases"]:
            if row["id"] == test_id:
                return TestArtifact.from_dict(row)
        raise RecordNotFoundError(f"Test case {test_id} not found", record_id=test_id)

    async def list(self, search: Optional[str] = None) -> List[TestArtifact]:
        """All test cases, newest first, optionally filtered by free text."""
        async with self._lock:
            data = await self._load()
        items = [TestArtifact.from_dict(row) for row in data["test_cases"]]
        if search:
            needle = search.lower()
            items = [
                t for t in items
                if needle in t.name.lower()
                or needle in (t.url or "").lower()
                or needle in t.code.lower()
            ]
        return sorted(items, key=lambda t: t.created_at, reverse=True)

    async def update(self, test_id: str, **updates: Any) -> TestArtifact:
        """
        Update selected fields of a test case.

        Raises:
            StorageError: For fields that cannot be updated
            RecordNotFoundError: If no test case has this id
        """
        unknown = set(updates) - _UPDATABLE_FIELDS
        if unknown:
            raise StorageError(f"Cannot update fields: {sorted(unknown)}")

        async with self._lock:
            data = await self._load()
            for i, row in enumerate(data["test_cases"]):
                if row["id"] == test_id:
                    updated = replace(
                        TestArtifact.from_dict(row),
                        updated_at=datetime.now().isoformat(),
                        **updates,
                    )
                    data["test_cases"][i] = updated.to_dict()
                    await self._save(data)
                    return updated
        raise RecordNotFoundError(f"Test case {test_id} not found", record_id=test_id)

    async def delete(self, test_id: str) -> None:
        """
        Delete a test case and its story links.

        Raises:
            RecordNotFoundError: If no test case has this id
        """
        async with self._lock:
            data = await self._load()
            remaining = [row for row in data["test_cases"] if row["id"] != test_id]
            if len(remaining) == len(data["test_cases"]):
                raise RecordNotFoundError(f"Test case {test_id} not found", record_id=test_id)
            data["test_cases"] = remaining
            data["story_links"] = [
                link for link in data["story_links"] if link["test_case_id"] != test_id
            ]
            await self._save(data)
        logger.info(f"Deleted test case {test_id}")

    async def link_tests(
        self,
        story_id: str,
        test_case_ids: Iterable[str],
        story_title: str = "",
        story_number: str = "",
    ) -> int:
        """
        Replace the set of test cases linked to a story.

        Returns:
            Number of links written
        """
        unique_ids = list(dict.fromkeys(test_case_ids))
        async with self._lock:
            data = await self._load()
            known = {row["id"] for row in data["test_cases"]}
            missing = [tid for tid in unique_ids if tid not in known]
            if missing:
                raise RecordNotFoundError(
                    f"Test case {missing[0]} not found", record_id=missing[0]
                )
            links = [link for link in data["story_links"] if link["story_id"] != story_id]
            links.extend(
                StoryLink(
                    story_id=story_id,
                    test_case_id=tid,
                    story_title=story_title,
                    story_number=story_number,
                ).to_dict()
                for tid in unique_ids
            )
            data["story_links"] = links
            await self._save(data)
        return len(unique_ids)

    async def get_test_case_ids(self, story_id: str) -> List[str]:
        """Ids of test cases linked to a story."""
        async with self._lock:
            data = await self._load()
        return [link["test_case_id"] for link in data["story_links"] if link["story_id"] == story_id]

    async def get_by_story(self, story_id: str) -> List[TestArtifact]:
        """Test cases linked to a story, newest first."""
        async with self._lock:
            data = await self._load()
        linked = {link["test_case_id"] for link in data["story_links"] if link["story_id"] == story_id}
        items = [TestArtifact.from_dict(row) for row in data["test_cases"] if row["id"] in linked]
        return sorted(items, key=lambda t: t.created_at, reverse=True)
