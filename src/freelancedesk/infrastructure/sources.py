"""Raw collection sources and the failures they share.

A source produces the four raw collections (``clients``, ``invoices``,
``meetings``, ``projects``) as lists of JSON objects and accepts the one
write the tool performs: a project's status/progress change.
Normalization is not its concern; the domain snapshot does that once
per refresh.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from freelancedesk.domain.snapshot import COLLECTIONS

logger = logging.getLogger(__name__)

RawCollections = dict[str, list[Any]]


class SourceFetchError(Exception):
    """One or more collections could not be read.

    Attributes:
        failures: Source name -> reason, in the order the sources were tried.
    """

    def __init__(self, failures: dict[str, str]) -> None:
        self.failures = dict(failures)
        reasons = "; ".join(f"{name}: {reason}" for name, reason in self.failures.items())
        super().__init__(reasons or "unknown failure")

    @property
    def sources(self) -> list[str]:
        return list(self.failures)


class ProjectUpdateError(Exception):
    """A project update was refused or could not be delivered."""


class SnapshotSource(Protocol):
    """Anything that can hand over one complete set of raw collections."""

    def fetch(self) -> RawCollections: ...

    def update_project(self, project_id: str, changes: dict[str, Any]) -> dict[str, Any]: ...


def _matches(record: Any, project_id: str) -> bool:
    if not isinstance(record, dict):
        return False
    return str(record.get("_id", record.get("id", ""))) == project_id


class FileSnapshotSource:
    """Read collections from a JSON document on disk.

    The document is an object keyed by collection name; missing keys are
    empty collections.  A key holding anything but a list is a failure
    for that collection.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceFetchError({str(self.path): exc.strerror or str(exc)}) from exc
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SourceFetchError({str(self.path): f"invalid JSON ({exc.msg})"}) from exc
        if not isinstance(document, dict):
            raise SourceFetchError({str(self.path): "expected a JSON object"})
        return document

    def fetch(self) -> RawCollections:
        document = self._load()
        collections: RawCollections = {}
        failures: dict[str, str] = {}
        for name in COLLECTIONS:
            value = document.get(name, [])
            if isinstance(value, list):
                collections[name] = value
            else:
                failures[name] = "expected a list"
        if failures:
            raise SourceFetchError(failures)
        logger.debug("Read snapshot file %s", self.path)
        return collections

    def update_project(self, project_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply *changes* to the project record and write the file back.

        Raises:
            ProjectUpdateError: the file cannot be read or written, or holds
                no project with that id.
        """
        try:
            document = self._load()
        except SourceFetchError as exc:
            raise ProjectUpdateError(str(exc)) from exc

        projects = document.get("projects")
        record = next(
            (p for p in projects or [] if _matches(p, project_id)),
            None,
        )
        if record is None:
            raise ProjectUpdateError(f"no project {project_id} in {self.path}")
        record.update(changes)

        try:
            self.path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise ProjectUpdateError(exc.strerror or str(exc)) from exc
        logger.debug("Updated project %s in %s", project_id, self.path)
        return dict(record)
