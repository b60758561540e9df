from __future__ import annotations

import pydantic as p

from .base import BaseModel
from .enum import GradeLabel


class GradeEntry(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    grade: GradeLabel
    points: int | None = None


class GradeEntrySet(BaseModel):
    """One student's results for one template, keyed by criterion text."""

    grades: dict[str, GradeLabel] = p.Field(default_factory=dict)
    points: dict[str, int] = p.Field(default_factory=dict)

    def entry(self, criterion: str) -> GradeEntry | None:
        grade = self.grades.get(criterion)
        if grade is None:
            return None
        return GradeEntry(grade=grade, points=self.points.get(criterion))

    def entries(self) -> dict[str, GradeEntry]:
        return {c: GradeEntry(grade=g, points=self.points.get(c)) for c, g in self.grades.items()}

    def with_entry(self, criterion: str, entry: GradeEntry) -> GradeEntrySet:
        """Copy of this set with one criterion replaced; siblings are kept."""
        grades = {**self.grades, criterion: entry.grade}
        points = {c: v for c, v in self.points.items() if c != criterion}
        if entry.points is not None:
            points[criterion] = entry.points
        return GradeEntrySet(grades=grades, points=points)
