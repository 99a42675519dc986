"""
creator_engine/migrations.py -- Store snapshot schema migrations with backups.

A store snapshot is the JSON object the application persists::

    {"characters": [...], "worlds": [...], "projects": [...], ...}

The current schema adds three fields older snapshots lack:

    characters  voiceProfile (null until generated), canonicalFacts ([]), aliases ([])
    worlds      canonicalFacts ([]), aliases ([])
    projects    aliases ([])

Migration is idempotent and never mutates the caller's dict.
:func:`run_migrations` wraps it with the backup policy from
:class:`~creator_engine.config.MigrationConfig`: back up first, migrate, rotate
old backups, and fall back to the backup (or the untouched input) on failure.

Backups are JSON files named ``5d-storage-backup-<UTC timestamp>.json`` in
the user data directory (see :func:`default_backup_dir`).

Usage:
    from creator_engine.migrations import BackupStore, run_migrations

    store_data = run_migrations(store_data, backups=BackupStore(tmp_dir))
"""

from __future__ import annotations

import copy
import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from platformdirs import user_data_dir
from pydantic import BaseModel

from creator_engine.config import MigrationConfig
from creator_engine.errors import BackupError, MigrationError
from creator_engine.utils import safe_read_json, safe_write_json

logger = logging.getLogger(__name__)

_APP_NAME = "5DCharacterCreator"
_APP_AUTHOR = "5DCharacterCreator"

BACKUP_PREFIX = "5d-storage-backup-"
_KEY_RE = re.compile(r"^5d-storage-backup-[0-9TZ]+(-\d+)?$")

# Field defaults added per collection.
_REQUIRED_FIELDS: dict[str, dict[str, Any]] = {
    "characters": {"voiceProfile": None, "canonicalFacts": [], "aliases": []},
    "worlds": {"canonicalFacts": [], "aliases": []},
    "projects": {"aliases": []},
}


def default_backup_dir() -> Path:
    """Return the platform-appropriate directory for snapshot backups."""
    return Path(user_data_dir(_APP_NAME, _APP_AUTHOR)) / "backups"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Schema migration
# ---------------------------------------------------------------------------

class MigrationResult(BaseModel):
    success: bool = True
    data: dict[str, Any] = {}
    characters_updated: int = 0
    worlds_updated: int = 0
    projects_updated: int = 0
    errors: list[str] = []

    @property
    def total_updated(self) -> int:
        return self.characters_updated + self.worlds_updated + self.projects_updated


def _entity_needs_migration(entity: Any, collection: str) -> bool:
    return isinstance(entity, dict) and any(
        key not in entity for key in _REQUIRED_FIELDS[collection]
    )


def needs_migration(data: dict[str, Any]) -> bool:
    """Return True if any entity in *data* lacks a current-schema field."""
    for collection in _REQUIRED_FIELDS:
        entities = data.get(collection)
        if isinstance(entities, list) and any(
            _entity_needs_migration(e, collection) for e in entities
        ):
            return True
    return False


def migrate_snapshot(data: dict[str, Any]) -> MigrationResult:
    """Bring every entity in *data* up to the current schema.

    Works on a deep copy; the migrated snapshot is ``result.data``.  Entries
    that are not JSON objects are reported in ``result.errors`` and mark the
    migration as failed.
    """
    migrated = copy.deepcopy(data)
    result = MigrationResult()

    for collection, defaults in _REQUIRED_FIELDS.items():
        entities = migrated.get(collection)
        if entities is None:
            continue
        if not isinstance(entities, list):
            result.errors.append(f"'{collection}' is not a list")
            continue

        updated = 0
        for index, entity in enumerate(entities):
            if not isinstance(entity, dict):
                result.errors.append(f"{collection}[{index}] is not an object")
                continue
            missing = {k: copy.deepcopy(v) for k, v in defaults.items() if k not in entity}
            if missing:
                entity.update(missing)
                updated += 1
        setattr(result, f"{collection}_updated", updated)

    result.success = not result.errors
    result.data = migrated
    return result


# ---------------------------------------------------------------------------
# Backups
# ---------------------------------------------------------------------------

class BackupStore:
    """Timestamped JSON backups of store snapshots.

    Parameters
    ----------
    backup_dir : str or pathlib.Path, optional
        Where backup files live.  Defaults to :func:`default_backup_dir`.
        The directory is created on the first backup.
    """

    def __init__(self, backup_dir=None):
        self.backup_dir = Path(backup_dir) if backup_dir is not None else default_backup_dir()

    def _path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise BackupError(f"Invalid backup key: {key!r}")
        return self.backup_dir / f"{key}.json"

    def create(self, data: dict[str, Any]) -> str:
        """Write *data* to a new backup file and return its key.

        Raises
        ------
        BackupError
            If the backup file cannot be written.
        """
        now = _now_utc()
        base_key = BACKUP_PREFIX + now.strftime("%Y%m%dT%H%M%S%fZ")
        key = base_key
        counter = 1
        while (self.backup_dir / f"{key}.json").exists():
            key = f"{base_key}-{counter}"
            counter += 1

        try:
            safe_write_json(self._path_for(key), {"created_at": now.isoformat(), "data": data})
        except (OSError, TypeError, ValueError) as exc:
            raise BackupError(f"Backup creation failed: {exc}") from exc

        logger.info("Snapshot backup created: %s", key)
        return key

    def restore(self, key: str) -> dict[str, Any] | None:
        """Return the snapshot stored under *key*, or None if it is missing
        or unreadable.

        Raises
        ------
        BackupError
            If *key* is not a backup key (e.g. contains a path).
        """
        envelope = safe_read_json(self._path_for(key))
        if not isinstance(envelope, dict) or not isinstance(envelope.get("data"), dict):
            return None
        return envelope["data"]

    def list_backups(self) -> list[dict[str, str]]:
        """Return ``{"key", "timestamp", "path"}`` for every backup, newest first."""
        if not self.backup_dir.is_dir():
            return []

        backups = []
        for path in self.backup_dir.glob(f"{BACKUP_PREFIX}*.json"):
            key = path.stem
            if not _KEY_RE.match(key):
                continue
            envelope = safe_read_json(path, default={})
            timestamp = envelope.get("created_at", "") if isinstance(envelope, dict) else ""
            backups.append({"key": key, "timestamp": timestamp, "path": str(path)})

        backups.sort(key=lambda b: b["key"], reverse=True)
        return backups

    def cleanup(self, max_backups: int = 5) -> list[str]:
        """Delete all but the *max_backups* newest backups; return removed keys."""
        removed = []
        for backup in self.list_backups()[max_backups:]:
            try:
                os.remove(backup["path"])
            except OSError:
                logger.warning("Could not remove old backup %s", backup["key"], exc_info=True)
                continue
            removed.append(backup["key"])
        if removed:
            logger.info("Removed %d old snapshot backup(s)", len(removed))
        return removed


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def run_migrations(
    data: dict[str, Any],
    config: MigrationConfig | None = None,
    backups: BackupStore | None = None,
) -> dict[str, Any]:
    """Migrate *data* if needed, guarded by a backup.

    Returns the migrated snapshot.  If migration fails, the backup taken
    beforehand is restored; if that is unavailable too, the original *data*
    is returned unchanged.  This function does not raise for migration
    failures.
    """
    config = config or MigrationConfig()
    backups = backups or BackupStore()

    if not needs_migration(data):
        logger.debug("No snapshot migrations needed")
        return data

    backup_key = None
    try:
        if config.auto_backup:
            backup_key = backups.create(data)

        result = migrate_snapshot(data)
        if not result.success:
            raise MigrationError("; ".join(result.errors))

        logger.info(
            "Snapshot migrated: %d characters, %d worlds, %d projects updated",
            result.characters_updated, result.worlds_updated, result.projects_updated,
        )
        if config.cleanup_old_backups:
            backups.cleanup(config.max_backups)
        return result.data

    except (MigrationError, BackupError) as exc:
        logger.error("Snapshot migration failed: %s", exc)
        if backup_key is not None:
            restored = backups.restore(backup_key)
            if restored is not None:
                logger.warning("Restored snapshot from backup %s", backup_key)
                return restored
        return data


def get_migration_status(data: dict[str, Any], backups: BackupStore | None = None) -> dict[str, Any]:
    """Summarise pending migrations and available backups."""
    backups = backups or BackupStore()
    available = backups.list_backups()
    return {
        "migration_needed": needs_migration(data),
        "available_backups": len(available),
        "latest_backup": available[0]["timestamp"] if available else None,
    }
