"""Decoding of stored records into their current shape.

Records in the store carry no schema version, and several shapes have been
written over time. Every read goes through this module, which classifies the
raw value and returns the current shape. Decoding is total: a value that fits
no known shape is logged and treated as absent, so a damaged record never
blocks grading work.

Known shapes
------------

Template criteria (``descriptions``):
    - ``["Lesen", "Schreiben"]`` (label-graded only)
    - ``[{"text": "Lesen", "maxPoints": 5}, ...]``
    - either of the above as an index-keyed mapping

Grade entry sets:
    - ``{"Lesen": "gut"}`` (labels only)
    - ``{"grades": {"Lesen": "gut"}, "points": {"Lesen": 8}}``

Rosters:
    - ``["Anna", "Ben"]``
    - ``[{"name": "Anna", "Klasse": "1A"}, ...]``
    - either of the above as a keyed mapping
"""

from __future__ import annotations

import datetime
import logging
import typing as t

import pydantic as p

from notenbuch.lib.json import JSONValue
from notenbuch.model import AssessmentTemplate, Criterion, GradeEntrySet, GradeLabel, Student, TemplateID

from .errors import ShapeMismatchError

logger = logging.getLogger(__name__)

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.UTC)
_datetime = p.TypeAdapter(datetime.datetime)


def _sequence(raw: JSONValue) -> list[JSONValue]:
    """Items of a list, or of a mapping standing in for one."""
    if isinstance(raw, list):
        return [item for item in raw if item is not None]
    if isinstance(raw, dict):
        return [item for item in raw.values() if item is not None]
    raise ShapeMismatchError(f"expected a sequence, got {type(raw).__name__}")


def _positive_int(raw: JSONValue) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float) and raw.is_integer():
        value = int(raw)
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        return None
    return value if value > 0 else None


def _criterion(raw: JSONValue) -> Criterion | None:
    if isinstance(raw, str):
        text = raw.strip()
        return Criterion(text=text) if text else None
    if isinstance(raw, dict) and isinstance(raw.get("text"), str):
        text = t.cast(str, raw["text"]).strip()
        if not text:
            return None
        return Criterion(text=text, max_points=_positive_int(raw.get("maxPoints")))
    raise ShapeMismatchError(f"unrecognized criterion: {raw!r}")


def _criteria(raw: JSONValue) -> list[Criterion]:
    if raw is None:
        return []
    criteria: list[Criterion] = []
    for item in _sequence(raw):
        try:
            c = _criterion(item)
        except ShapeMismatchError as e:
            logger.warning("dropping criterion", extra={"reason": str(e)})
            continue
        if c is not None:
            criteria.append(c)
    return criteria


def _timestamp(raw: dict[str, JSONValue]) -> datetime.datetime:
    value = raw.get("timestamp", raw.get("createdAt"))
    try:
        ts = _datetime.validate_python(value)
    except p.ValidationError:
        return EPOCH
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=datetime.UTC)


def _classify_template(template_id: str, raw: JSONValue) -> AssessmentTemplate:
    if not isinstance(raw, dict):
        raise ShapeMismatchError(f"template is a {type(raw).__name__}")
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ShapeMismatchError("template has no name")
    subject = raw.get("schoolSubject", raw.get("subject"))
    if not isinstance(subject, str):
        raise ShapeMismatchError("template has no subject")

    total_points = raw.get("totalPoints")
    return AssessmentTemplate(
        template_id=TemplateID(template_id),
        name=name.strip(),
        subject=subject,
        criteria=_criteria(raw.get("descriptions", raw.get("criteria"))),
        total_points=total_points if isinstance(total_points, int) and not isinstance(total_points, bool) else None,
        created_at=_timestamp(raw),
    )


def normalize_template(template_id: str, raw: JSONValue) -> AssessmentTemplate | None:
    """Decode a stored template.

    Returns:
        The template in its current shape, or None when `raw` is absent or
        cannot be classified.
    """
    if raw is None:
        return None
    try:
        return _classify_template(template_id, raw)
    except ShapeMismatchError as e:
        logger.warning("ignoring unreadable template", extra={"template_id": template_id, "reason": str(e)})
        return None


def _labels(raw: dict[str, JSONValue]) -> dict[str, GradeLabel]:
    labels: dict[str, GradeLabel] = {}
    for criterion, value in raw.items():
        try:
            labels[criterion] = GradeLabel(value)
        except ValueError:
            logger.warning("dropping unknown grade label", extra={"criterion": criterion, "label": value})
    return labels


def _points(raw: JSONValue) -> dict[str, int]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("dropping unreadable points", extra={"points": raw})
        return {}
    points: dict[str, int] = {}
    for criterion, value in raw.items():
        if isinstance(value, int) and not isinstance(value, bool):
            points[criterion] = value
        elif isinstance(value, float) and value.is_integer():
            points[criterion] = int(value)
        else:
            logger.warning("dropping non-integer points", extra={"criterion": criterion, "points": value})
    return points


def _classify_grade_entry_set(raw: JSONValue) -> GradeEntrySet:
    if not isinstance(raw, dict):
        raise ShapeMismatchError(f"grade entry set is a {type(raw).__name__}")

    grades = raw.get("grades")
    if isinstance(grades, dict):
        labels = _labels(grades)
        # points without a grade would break the grade/points pairing
        points = {c: v for c, v in _points(raw.get("points")).items() if c in labels}
        return GradeEntrySet(grades=labels, points=points)

    if all(isinstance(v, str) for v in raw.values()):
        return GradeEntrySet(grades=_labels(t.cast(dict[str, JSONValue], raw)))

    raise ShapeMismatchError("grade entry set matches no known shape")


def normalize_grade_entry_set(raw: JSONValue) -> GradeEntrySet:
    """Decode a stored grade entry set.

    Returns:
        The entry set in its current wrapper shape; empty when `raw` is absent
        or cannot be classified.
    """
    if raw is None:
        return GradeEntrySet()
    try:
        return _classify_grade_entry_set(raw)
    except ShapeMismatchError as e:
        logger.warning("ignoring unreadable grade entry set", extra={"reason": str(e)})
        return GradeEntrySet()


def _student(raw: JSONValue) -> Student | None:
    if isinstance(raw, str):
        return Student(name=raw) if raw.strip() else None
    if isinstance(raw, dict):
        name = raw.get("name")
        if not name:
            raise ShapeMismatchError(f"student without name: {raw!r}")
        klasse = raw.get("Klasse", raw.get("class"))
        return Student(name=str(name), class_name=str(klasse) if klasse else "")
    if isinstance(raw, list):
        raise ShapeMismatchError("nested list in roster")
    return Student(name=str(raw))


def normalize_roster(raw: JSONValue) -> list[Student]:
    """Decode a stored roster, in any of its historical shapes.

    A lone scalar is read as a roster of one. Entries that cannot be read are
    dropped.
    """
    if raw is None:
        return []
    try:
        items = _sequence(raw)
    except ShapeMismatchError:
        items = [raw]

    students: list[Student] = []
    for item in items:
        try:
            s = _student(item)
        except ShapeMismatchError as e:
            logger.warning("dropping roster entry", extra={"reason": str(e)})
            continue
        if s is not None:
            students.append(s)
    return students


def normalize_subjects(raw: JSONValue) -> list[str]:
    """Decode the stored subject list; non-string entries are dropped."""
    if raw is None:
        return []
    try:
        items = _sequence(raw)
    except ShapeMismatchError as e:
        logger.warning("ignoring unreadable subject list", extra={"reason": str(e)})
        return []
    return [s for s in items if isinstance(s, str) and s.strip()]
