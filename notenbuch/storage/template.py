"""Storage functions for assessment templates."""

from __future__ import annotations

import collections
import logging
import typing as t

import pydantic as p

from notenbuch.core import di
from notenbuch.core.provider import TimestampProvider
from notenbuch.lib.util import split_lines
from notenbuch.model import AssessmentTemplate, Criterion, TemplateID, TemplateSummary

from . import paths
from .errors import ValidationError
from .kv import KeyValueStore
from .normalize import normalize_template

logger = logging.getLogger(__name__)

BULK_POINTS_PER_LINE: t.Final = 5


class CriterionParams(p.BaseModel):
    """A criterion as entered; text may still be blank."""

    model_config = p.ConfigDict(frozen=True)

    text: str = ""
    max_points: p.PositiveInt | None = None


class TemplateCreateParams(p.BaseModel):
    """Parameters for saving a template."""

    model_config = p.ConfigDict(frozen=True)

    name: str
    subject: str
    criteria: tuple[CriterionParams, ...]
    total_points: int | None = None


def derive_template_id(name: str) -> TemplateID:
    """Storage key for a template called `name`."""
    return TemplateID.from_name(name)


def _validate(params: TemplateCreateParams, known_subjects: t.Collection[str]) -> list[Criterion]:
    if not params.name.strip():
        raise ValidationError("Bitte geben Sie einen Namen für die Beurteilung ein.")
    if not params.subject or params.subject not in known_subjects:
        raise ValidationError("Schulfach auswählen.")

    criteria = [
        Criterion(text=c.text.strip(), max_points=c.max_points) for c in params.criteria if c.text.strip()
    ]
    if not criteria:
        raise ValidationError("Bitte fügen Sie mindestens ein Bewertungskriterium hinzu.")

    # grade entries are keyed by criterion text, so duplicates would share results
    duplicates = [text for text, n in collections.Counter(c.text for c in criteria).items() if n > 1]
    if duplicates:
        raise ValidationError(f"Bewertungskriterien müssen eindeutig sein: {', '.join(duplicates)}")
    return criteria


async def save(
    params: TemplateCreateParams,
    *,
    known_subjects: t.Collection[str],
    store: KeyValueStore = di.Provide["storage.store"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> AssessmentTemplate:
    """Save a template under the key derived from its name.

    Whatever is stored under that key is overwritten without a version check,
    including a template whose different name collapses to the same key. Grade
    entries recorded against the old criteria are left in place.

    Raises:
        ValidationError: if the name is blank, the subject unknown, or no
            criterion has text
        StoreUnavailableError: if the store cannot be reached
    """
    criteria = _validate(params, known_subjects)
    template = AssessmentTemplate(
        template_id=derive_template_id(params.name),
        name=params.name.strip(),
        subject=params.subject,
        criteria=criteria,
        total_points=params.total_points,
        created_at=utcnow(),
    )
    path = paths.template(template.template_id)

    previous = normalize_template(template.template_id, await store.get(path))
    if previous is not None and previous.name != template.name:
        logger.warning(
            "template key collision, overwriting",
            extra={"template_id": template.template_id, "previous": previous.name, "name": template.name},
        )

    await store.set(path, template.to_record())
    logger.debug("saved template", extra={"template_id": template.template_id, "subject": template.subject})
    return template


async def create_bulk(
    name: str,
    subject: str,
    text: str,
    *,
    points_per_line: int = BULK_POINTS_PER_LINE,
    known_subjects: t.Collection[str],
    store: KeyValueStore = di.Provide["storage.store"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> AssessmentTemplate:
    """Save a points-graded template with one criterion per line of `text`.

    Every criterion is worth `points_per_line` points and the template total is
    recorded alongside.
    """
    lines = split_lines(text)
    if not lines:
        raise ValidationError(
            "Bitte geben Sie mindestens ein Bewertungskriterium ein (eine Zeile pro Kriterium)."
        )
    params = TemplateCreateParams(
        name=name,
        subject=subject,
        criteria=tuple(CriterionParams(text=line, max_points=points_per_line) for line in lines),
        total_points=len(lines) * points_per_line,
    )
    return await save(params, known_subjects=known_subjects, store=store, utcnow=utcnow)


async def get(
    template_id: str,
    *,
    store: KeyValueStore = di.Provide["storage.store"],
) -> AssessmentTemplate | None:
    """Get a template by ID."""
    return normalize_template(template_id, await store.get(paths.template(template_id)))


async def find(
    *,
    subject: str | None = None,
    store: KeyValueStore = di.Provide["storage.store"],
) -> tuple[AssessmentTemplate, ...]:
    """Find templates, optionally only those of one subject.

    The store has no index, so this always reads every template.
    """
    raw = await store.get(paths.TEMPLATES)
    if not isinstance(raw, dict):
        return ()
    templates = (normalize_template(template_id, value) for template_id, value in raw.items())
    return tuple(
        tpl for tpl in templates if tpl is not None and (subject is None or tpl.subject == subject)
    )


async def list_by_subject(
    subject: str,
    *,
    store: KeyValueStore = di.Provide["storage.store"],
) -> tuple[TemplateSummary, ...]:
    """Summaries of the templates of one subject."""
    return tuple(tpl.summary() for tpl in await find(subject=subject, store=store))


async def delete(
    template_id: str,
    *,
    store: KeyValueStore = di.Provide["storage.store"],
) -> bool:
    """Delete a template.

    Grade entries recorded against it are not touched and stay in the store,
    unreachable through the template list.

    Returns:
        True if a template was deleted, False if not found
    """
    path = paths.template(template_id)
    if await store.get(path) is None:
        return False
    await store.remove(path)
    logger.debug("deleted template", extra={"template_id": template_id})
    return True
