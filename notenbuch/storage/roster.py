"""Subjects and students, with defaults seeded into an empty store."""

from __future__ import annotations

import logging
import typing as t

from notenbuch.model import Student

from . import paths
from .errors import StoreUnavailableError
from .kv import KeyValueStore
from .migration import migrate
from .normalize import normalize_roster, normalize_subjects

logger = logging.getLogger(__name__)


class Roster(object):
    """Cached subject list and student roster.

    Call `initialize()` once at start; it migrates the legacy roster root and
    loads both collections. `reload()` refetches them. The accessors only read
    the cache.
    """

    def __init__(
        self,
        store: KeyValueStore,
        default_subjects: t.Sequence[str] = (),
        default_students: t.Sequence[Student] = (),
    ) -> None:
        self._store = store
        self._default_subjects = list(default_subjects)
        self._default_students = list(default_students)
        self._subjects: list[str] = list(default_subjects)
        self._students: list[Student] = list(default_students)

    @property
    def subjects(self) -> list[str]:
        return list(self._subjects)

    @property
    def students(self) -> list[Student]:
        return list(self._students)

    def has_subject(self, subject: str) -> bool:
        return subject in self._subjects

    def student(self, name: str) -> Student | None:
        return next((s for s in self._students if s.name == name), None)

    async def initialize(self) -> None:
        try:
            await migrate(store=self._store)
        except StoreUnavailableError:
            logger.exception("roster migration failed")
        await self.reload()

    async def reload(self) -> None:
        self._subjects = await self._load_subjects()
        self._students = await self._load_students()

    async def _load_subjects(self) -> list[str]:
        try:
            raw = await self._store.get(paths.SUBJECTS)
            if raw is None:
                await self._store.set(paths.SUBJECTS, self._default_subjects)
                logger.info("seeded default subjects", extra={"count": len(self._default_subjects)})
                return list(self._default_subjects)
        except StoreUnavailableError:
            logger.exception("could not load subjects, using defaults")
            return list(self._default_subjects)
        return normalize_subjects(raw)

    async def _load_students(self) -> list[Student]:
        try:
            raw = await self._store.get(paths.STUDENTS)
            if raw is None:
                await self._store.set(paths.STUDENTS, [s.to_record() for s in self._default_students])
                logger.info("seeded default students", extra={"count": len(self._default_students)})
                return list(self._default_students)
        except StoreUnavailableError:
            logger.exception("could not load students, using defaults")
            return list(self._default_students)
        return normalize_roster(raw)
