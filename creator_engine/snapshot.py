"""
creator_engine/snapshot.py -- Load a store snapshot into typed entities.

The application exports its store as a JSON object with ``characters``,
``worlds`` and ``projects`` arrays (camelCase fields).  ``load_snapshot``
migrates the raw data to the current schema in memory, then validates each
collection into :mod:`creator_engine.models`.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from creator_engine.errors import SnapshotError
from creator_engine.migrations import migrate_snapshot, needs_migration
from creator_engine.models import Character, Project, World
from creator_engine.utils import safe_read_json

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    characters: list[Character] = []
    worlds: list[World] = []
    projects: list[Project] = []

    def find(self, entity_id: str):
        """Return the entity with *entity_id* from any collection, or None."""
        for collection in (self.characters, self.worlds, self.projects):
            for entity in collection:
                if entity.id == entity_id:
                    return entity
        return None


def parse_snapshot(data: dict[str, Any]) -> Snapshot:
    """Validate an in-memory store snapshot.

    Raises
    ------
    SnapshotError
        If *data* is not an object or a collection has the wrong shape.
    """
    if not isinstance(data, dict):
        raise SnapshotError("Store snapshot must be a JSON object")

    if needs_migration(data):
        result = migrate_snapshot(data)
        if not result.success:
            raise SnapshotError("; ".join(result.errors))
        data = result.data

    try:
        return Snapshot.model_validate({
            "characters": data.get("characters") or [],
            "worlds": data.get("worlds") or [],
            "projects": data.get("projects") or [],
        })
    except ValidationError as exc:
        raise SnapshotError(f"Invalid store snapshot: {exc}") from exc


def load_snapshot(path) -> Snapshot:
    """Read and parse a store snapshot file.  A missing file is an empty store."""
    data = safe_read_json(path)
    if data is None:
        logger.debug("No store snapshot at %s", path)
        return Snapshot()
    snapshot = parse_snapshot(data)
    logger.debug(
        "Loaded snapshot %s: %d characters, %d worlds, %d projects",
        path, len(snapshot.characters), len(snapshot.worlds), len(snapshot.projects),
    )
    return snapshot
