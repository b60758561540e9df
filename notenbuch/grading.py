"""Derivation of grade labels from points."""

from __future__ import annotations

import re
import typing as t

from notenbuch.model import Criterion, GradeEntry, GradeLabel
from notenbuch.storage.errors import ValidationError

# lower bounds in percent, best grade first; the first bound reached wins
THRESHOLDS: t.Final[tuple[tuple[int, GradeLabel], ...]] = (
    (90, GradeLabel.SehrGut),
    (75, GradeLabel.Gut),
    (60, GradeLabel.Genuegend),
)
FLOOR: t.Final[GradeLabel] = GradeLabel.Ungenuegend

_leading_int = re.compile(r"^\s*([+-]?\d+)")


def coerce_points(value: t.Any) -> int:
    """Read points typed into a free-text field.

    The field may be empty or half-typed while the teacher is entering a
    number, so nothing is rejected: strings are read up to the first non-digit
    (``"7.5"`` is 7), and empty, non-numeric and negative input counts as 0.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        n = value
    elif isinstance(value, float):
        n = int(value) if value == value and abs(value) != float("inf") else 0
    elif isinstance(value, str):
        m = _leading_int.match(value)
        n = int(m.group(1)) if m else 0
    else:
        return 0
    return max(n, 0)


def derive_grade(points: int, max_points: int) -> GradeLabel:
    """Grade earned with `points` out of `max_points`.

    Percentages are compared against inclusive lower bounds of 90, 75 and 60.
    Points above the maximum are not clamped and grade as "sehr gut".

    Raises:
        ValueError: if max_points is not positive
    """
    if max_points <= 0:
        raise ValueError(f"max_points must be positive, got {max_points}")
    points = coerce_points(points)
    for bound, label in THRESHOLDS:
        # 100 * points / max_points >= bound, without float rounding
        if 100 * points >= bound * max_points:
            return label
    return FLOOR


def grade_entry(
    criterion: Criterion,
    *,
    points: t.Any = None,
    label: GradeLabel | str | None = None,
) -> GradeEntry:
    """Entry to record for `criterion` from the teacher's input.

    Points-graded criteria take points only, and their label always comes
    from `derive_grade`. Label-graded criteria take a label only.

    Raises:
        ValidationError: if the input does not fit the criterion
    """
    if (points is None) == (label is None):
        raise ValidationError("Bitte entweder Punkte oder eine Note angeben.")

    if criterion.max_points is not None:
        if label is not None:
            raise ValidationError(f"Die Note für {criterion.text!r} ergibt sich aus den Punkten.")
        n = coerce_points(points)
        return GradeEntry(grade=derive_grade(n, criterion.max_points), points=n)

    if points is not None:
        raise ValidationError(f"{criterion.text!r} wird ohne Punkte bewertet.")
    try:
        grade = GradeLabel(label)
    except ValueError:
        raise ValidationError(f"Unbekannte Note: {label!r}") from None
    return GradeEntry(grade=grade)
