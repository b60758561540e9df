"""One-time move of the roster from its deprecated root to the current one."""

from __future__ import annotations

import enum
import logging

from notenbuch.core import di
from notenbuch.model import BaseModel

from . import paths
from .kv import KeyValueStore
from .normalize import normalize_roster

logger = logging.getLogger(__name__)


class MigrationOutcome(enum.Enum):
    Migrated = "migrated"
    AlreadyMigrated = "already_migrated"
    NothingToMigrate = "nothing_to_migrate"


class MigrationResult(BaseModel):
    outcome: MigrationOutcome
    count: int = 0


async def migrate(
    *,
    source: str = paths.STUDENTS_LEGACY,
    target: str = paths.STUDENTS,
    store: KeyValueStore = di.Provide["storage.store"],
) -> MigrationResult:
    """Copy the roster from `source` to `target` unless `target` already exists.

    The roster is rewritten into its current shape on the way. The source is
    never deleted, and once `target` exists every further run is a no-op, so
    this is safe to call at every start.

    Raises:
        StoreUnavailableError: if the store cannot be reached
    """
    current = await store.get(target)
    if current is not None:
        return MigrationResult(outcome=MigrationOutcome.AlreadyMigrated)

    legacy = await store.get(source)
    if legacy is None:
        return MigrationResult(outcome=MigrationOutcome.NothingToMigrate)

    students = normalize_roster(legacy)
    if not students:
        logger.warning("legacy roster holds no students", extra={"source": source})
        return MigrationResult(outcome=MigrationOutcome.NothingToMigrate)

    await store.set(target, [s.to_record() for s in students])
    logger.info("migrated roster", extra={"source": source, "target": target, "count": len(students)})
    return MigrationResult(outcome=MigrationOutcome.Migrated, count=len(students))
