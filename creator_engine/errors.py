"""
creator_engine/errors.py -- Exception hierarchy for the engine.

The scoring and suggestion functions never raise for missing or malformed
entity data; these exceptions cover the stateful edges (link dispatch,
migrations, backups, configuration and snapshot loading).
"""


class CreatorEngineError(Exception):
    """Base class for every error raised by :mod:`creator_engine`."""


class UnsupportedLinkError(CreatorEngineError):
    """A suggestion names a source/target combination the store cannot link."""


class MigrationError(CreatorEngineError):
    """A store snapshot could not be migrated."""


class BackupError(CreatorEngineError):
    """A snapshot backup could not be written or addressed."""


class ConfigError(CreatorEngineError):
    """An engine configuration file holds invalid values."""


class SnapshotError(CreatorEngineError):
    """A store snapshot file does not have the expected shape."""
