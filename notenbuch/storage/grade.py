"""Storage functions for grade entry sets.

An entry set holds one student's results for one template and lives at
``grades/<subject>/<template_id>/<student>``. The store cannot update single
fields, so a set is always written whole.
"""

from __future__ import annotations

import logging
import typing as t

from notenbuch.core import di
from notenbuch.core.logging import TRACE
from notenbuch.model import GradeEntrySet

from . import paths
from .kv import KeyValueStore
from .normalize import normalize_grade_entry_set

logger = logging.getLogger(__name__)


async def get(
    subject: str,
    template_id: str,
    student: str,
    *,
    store: KeyValueStore = di.Provide["storage.store"],
) -> GradeEntrySet:
    """Get a student's entry set; empty if nothing was recorded yet."""
    raw = await store.get(paths.grade_entry_set(subject, template_id, student))
    return normalize_grade_entry_set(raw)


async def put(
    subject: str,
    template_id: str,
    student: str,
    entries: GradeEntrySet,
    *,
    store: KeyValueStore = di.Provide["storage.store"],
) -> None:
    """Overwrite a student's entry set."""
    await store.set(paths.grade_entry_set(subject, template_id, student), entries.to_record())
    logger.debug(
        "saved grade entries",
        extra={"subject": subject, "template_id": template_id, "student": student, "count": len(entries.grades)},
    )


async def find(
    subject: str,
    template_id: str,
    students: t.Iterable[str],
    *,
    store: KeyValueStore = di.Provide["storage.store"],
) -> dict[str, GradeEntrySet]:
    """Entry sets of every listed student, keyed by student name.

    Issues one read per student, one after the other.
    """
    result = {s: await get(subject, template_id, s, store=store) for s in students}
    logger.log(
        TRACE, "read grade entry sets", extra={"subject": subject, "template_id": template_id, "count": len(result)}
    )
    return result
