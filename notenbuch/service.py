"""Operations as a user interface calls them.

Every operation returns an `Outcome` instead of raising, carrying the message
to show when it did not succeed.
"""

from __future__ import annotations

import logging
import typing as t

from notenbuch.core import di
from notenbuch.core.provider import TimestampProvider
from notenbuch.overview import load as load_overview, Overview
from notenbuch.model import AssessmentTemplate, BaseModel, GradeEntry, GradeEntrySet, GradeLabel
from notenbuch.session import GradingSession
from notenbuch.storage import migration
from notenbuch.storage import template as template_storage
from notenbuch.storage.errors import StoreUnavailableError, ValidationError
from notenbuch.storage.kv import KeyValueStore
from notenbuch.storage.roster import Roster

logger = logging.getLogger(__name__)

T = t.TypeVar("T")

SAVE_FAILED: t.Final = "Beurteilung konnte nicht gespeichert werden. Bitte versuchen Sie es erneut."
DELETE_FAILED: t.Final = "Beurteilung konnte nicht gelöscht werden."
ENTRY_FAILED: t.Final = "Bewertung konnte nicht gespeichert werden. Bitte versuchen Sie es erneut."
MIGRATION_FAILED: t.Final = "Schülerliste konnte nicht übernommen werden. Bitte versuchen Sie es erneut."
NOT_SELECTED: t.Final = "Keine Beurteilung ausgewählt."
NOT_FOUND: t.Final = "Beurteilung nicht gefunden."
LOAD_FAILED: t.Final = "Daten konnten nicht geladen werden. Bitte versuchen Sie es erneut."


class Outcome(BaseModel, t.Generic[T]):
    ok: bool
    reason: str | None = None
    value: T | None = None

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> Outcome[T]:
        return cls(ok=False, reason=reason)


async def _attempt(operation: str, call: t.Awaitable[T], unavailable: str) -> Outcome[T]:
    try:
        value = await call
    except ValidationError as e:
        logger.info("rejected %s", operation, extra={"reason": str(e)})
        return Outcome.failure(str(e))
    except StoreUnavailableError:
        logger.exception("%s failed", operation)
        return Outcome.failure(unavailable)
    return Outcome.success(value)


class NotenbuchService(object):
    """Loading, saving and grading operations over one store and roster."""

    @di.inject
    def __init__(
        self,
        store: KeyValueStore = di.Provide["storage.store"],
        roster: Roster = di.Provide["roster"],
        utcnow: TimestampProvider = di.Provide["utcnow"],
    ) -> None:
        self.store = store
        self.roster = roster
        self.utcnow = utcnow
        self.session = GradingSession(store)

    async def save_template(
        self, params: template_storage.TemplateCreateParams
    ) -> Outcome[AssessmentTemplate]:
        return await _attempt(
            "save template",
            template_storage.save(
                params, known_subjects=self.roster.subjects, store=self.store, utcnow=self.utcnow
            ),
            SAVE_FAILED,
        )

    async def create_bulk(
        self,
        name: str,
        subject: str,
        text: str,
        points_per_line: int = template_storage.BULK_POINTS_PER_LINE,
    ) -> Outcome[AssessmentTemplate]:
        return await _attempt(
            "bulk template upload",
            template_storage.create_bulk(
                name,
                subject,
                text,
                points_per_line=points_per_line,
                known_subjects=self.roster.subjects,
                store=self.store,
                utcnow=self.utcnow,
            ),
            SAVE_FAILED,
        )

    async def delete_template(self, template_id: str | None) -> Outcome[bool]:
        if not template_id:
            return Outcome.failure(NOT_SELECTED)
        outcome = await _attempt(
            "delete template", template_storage.delete(template_id, store=self.store), DELETE_FAILED
        )
        if outcome.ok and not outcome.value:
            return Outcome.failure(NOT_FOUND)
        return outcome

    async def write_entry(
        self,
        criterion: str,
        *,
        points: t.Any = None,
        label: GradeLabel | str | None = None,
    ) -> Outcome[GradeEntry]:
        """Record an entry for the session's selected template and student."""
        return await _attempt(
            "write grade entry",
            self.session.write_entry(criterion, points=points, label=label),
            ENTRY_FAILED,
        )

    async def migrate(self) -> Outcome[migration.MigrationResult]:
        outcome = await _attempt("roster migration", migration.migrate(store=self.store), MIGRATION_FAILED)
        if outcome.ok:
            await self.roster.reload()
        return outcome

    async def select_subject(self, subject: str) -> Outcome[list[AssessmentTemplate]]:
        return await _attempt("select subject", self.session.select_subject(subject), LOAD_FAILED)

    async def select(self, template_id: str, student: str) -> Outcome[GradeEntrySet]:
        """Select a template and student in the grading session."""
        return await _attempt("select template", self.session.select(template_id, student), LOAD_FAILED)

    async def overview(self, subject: str, template_id: str) -> Outcome[Overview]:
        outcome = await _attempt(
            "load overview",
            load_overview(subject, template_id, roster=self.roster, store=self.store),
            LOAD_FAILED,
        )
        if outcome.ok and outcome.value is None:
            return Outcome.failure(NOT_FOUND)
        return outcome
