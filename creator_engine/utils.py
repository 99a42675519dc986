"""
creator_engine/utils.py -- Shared helpers for the 5D Character Creator engine.

JSON file I/O for engine config files, store snapshots and snapshot
backups, plus the small text helpers the scoring heuristics share.
"""

import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# JSON I/O (atomic writes)
# ---------------------------------------------------------------------------

def safe_read_json(path, default=None):
    """Return the parsed JSON at *path*, or *default* if it is missing or corrupt.

    A missing config or snapshot file is a normal state (first run, no
    backups yet), so failures are logged at debug level only.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        logger.debug("Could not read JSON from %s", path, exc_info=True)
        return default


def safe_write_json(path, data, *, indent=2):
    """Write *data* to *path* so a crash never leaves a half-written backup.

    The parent directory is created on demand.  Raises ``TypeError`` or
    ``ValueError`` for data JSON cannot encode, and ``OSError`` if the file
    cannot be written; the target is left untouched in every case.
    """
    path = os.path.abspath(str(path))
    parent = os.path.dirname(path)
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=indent, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def join_text(*parts) -> str:
    """Join the non-empty string parts with single spaces.

    Accepts strings and iterables of strings; ``None`` and empty values
    are skipped so that missing fields contribute nothing.
    """
    pieces: list[str] = []
    for part in parts:
        if not part:
            continue
        if isinstance(part, str):
            pieces.append(part)
        else:
            pieces.extend(p for p in part if isinstance(p, str) and p)
    return " ".join(pieces)


def contains_ci(haystack: str | None, needle: str | None) -> bool:
    """Case-insensitive substring test.  Empty needles never match."""
    if not haystack or not needle:
        return False
    return needle.lower() in haystack.lower()


def round_percent(fraction: float) -> int:
    """Convert a 0-1 fraction to a whole percentage, rounding half up."""
    return int(fraction * 100 + 0.5)
