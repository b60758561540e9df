"""Cached write path for grade entries.

A `GradingSession` follows one teacher through the grading screen: a subject
is chosen, then a template and a student, then entries are written one
criterion at a time. Entry sets are cached per (subject, template, student) so
that a write merges into what was read instead of re-reading the set first.
"""

from __future__ import annotations

import logging
import typing as t

from notenbuch.grading import grade_entry
from notenbuch.model import AssessmentTemplate, GradeEntry, GradeEntrySet, GradeLabel
from notenbuch.storage import grade as grade_storage
from notenbuch.storage import template as template_storage
from notenbuch.storage.errors import StoreUnavailableError, ValidationError
from notenbuch.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

PairKey = tuple[str, str, str]


class GradingSession(object):
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._subject: str | None = None
        self._templates: dict[str, AssessmentTemplate] = {}
        self._selection: tuple[str, str] | None = None
        self._cache: dict[PairKey, GradeEntrySet] = {}
        self._pending: set[PairKey] = set()

    @property
    def subject(self) -> str | None:
        return self._subject

    @property
    def templates(self) -> list[AssessmentTemplate]:
        """Templates of the selected subject, as last fetched."""
        if self._subject is None:
            return []
        return [tpl for tpl in self._templates.values() if tpl.subject == self._subject]

    @property
    def template(self) -> AssessmentTemplate | None:
        if self._selection is None:
            return None
        return self._templates.get(self._selection[0])

    @property
    def student(self) -> str | None:
        return self._selection[1] if self._selection else None

    @property
    def entries(self) -> GradeEntrySet:
        """Entries of the selected pair; empty when nothing is selected."""
        key = self._selected_key()
        if key is None:
            return GradeEntrySet()
        return self._cache.get(key, GradeEntrySet())

    @property
    def pending(self) -> frozenset[PairKey]:
        return frozenset(self._pending)

    def _selected_key(self) -> PairKey | None:
        if self._subject is None or self._selection is None:
            return None
        return (self._subject, *self._selection)

    async def select_subject(self, subject: str) -> list[AssessmentTemplate]:
        """Switch to `subject` and fetch its templates."""
        await self.flush()
        self._subject = subject
        self._selection = None
        # edits that could not be saved stay cached for the next flush
        self._cache = {k: v for k, v in self._cache.items() if k in self._pending}
        templates = await template_storage.find(subject=subject, store=self._store)
        self._templates = {tpl.template_id: tpl for tpl in templates}
        return self.templates

    async def select(self, template_id: str, student: str) -> GradeEntrySet:
        """Select a template and student, saving the previous pair first.

        Raises:
            ValidationError: if no subject is selected or the template is gone
                or belongs to another subject
            StoreUnavailableError: if the new pair cannot be read
        """
        if self._subject is None:
            raise ValidationError("Schulfach auswählen.")

        previous = self._selected_key()
        if previous is not None:
            try:
                await self._flush_pair(previous)
            except StoreUnavailableError:
                logger.exception("could not save entries of previous selection", extra={"pair": previous})

        template = await template_storage.get(template_id, store=self._store)
        if template is None or template.subject != self._subject:
            raise ValidationError("Beurteilung nicht gefunden.")
        self._templates[template.template_id] = template

        key = (self._subject, template_id, student)
        if key not in self._pending:
            self._cache[key] = await grade_storage.get(*key, store=self._store)
        self._selection = (template_id, student)
        return self._cache[key]

    async def write_entry(
        self,
        criterion: str,
        *,
        points: t.Any = None,
        label: GradeLabel | str | None = None,
    ) -> GradeEntry:
        """Record an entry for the selected template and student."""
        key = self._selected_key()
        if key is None:
            raise ValidationError("Bitte wählen Sie eine Beurteilung und einen Schüler aus.")
        return await self.write_entry_for(*key, criterion, points=points, label=label)

    async def write_entry_for(
        self,
        subject: str,
        template_id: str,
        student: str,
        criterion: str,
        *,
        points: t.Any = None,
        label: GradeLabel | str | None = None,
    ) -> GradeEntry:
        """Record an entry and write the student's whole set back.

        The entry is merged into the cached set, so entries of other criteria
        are preserved. If the write fails the edit stays cached and is retried
        by the next `flush()`.

        Raises:
            ValidationError: if the template or criterion is unknown or the
                input does not fit the criterion; nothing is written
            StoreUnavailableError: if the set cannot be read or written
        """
        template = self._templates.get(template_id)
        if template is None:
            template = await template_storage.get(template_id, store=self._store)
            if template is None:
                raise ValidationError("Beurteilung nicht gefunden.")
            self._templates[template.template_id] = template
        if template.subject != subject:
            raise ValidationError("Beurteilung nicht gefunden.")

        c = template.criterion(criterion)
        if c is None:
            raise ValidationError(f"Unbekanntes Bewertungskriterium: {criterion!r}")
        entry = grade_entry(c, points=points, label=label)

        key = (subject, template_id, student)
        current = self._cache.get(key)
        if current is None:
            current = await grade_storage.get(*key, store=self._store)
        self._cache[key] = current.with_entry(c.text, entry)
        self._pending.add(key)

        await self._flush_pair(key)
        return entry

    async def _flush_pair(self, key: PairKey) -> None:
        if key not in self._pending:
            return
        await grade_storage.put(*key, self._cache[key], store=self._store)
        self._pending.discard(key)

    async def flush(self) -> None:
        """Write every pending entry set.

        Raises:
            StoreUnavailableError: on the first set that cannot be written;
                it and the ones after it stay pending
        """
        for key in sorted(self._pending):
            await self._flush_pair(key)
