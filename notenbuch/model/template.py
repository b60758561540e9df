import datetime

import pydantic as p

from .base import BaseModel
from .id import TemplateID


class Criterion(BaseModel):
    text: str
    max_points: p.PositiveInt | None = p.Field(default=None, alias="maxPoints")

    @property
    def points_graded(self) -> bool:
        return self.max_points is not None


class AssessmentTemplate(BaseModel):
    template_id: TemplateID = p.Field(exclude=True)
    name: str
    subject: str = p.Field(
        alias="schoolSubject",
        validation_alias=p.AliasChoices("schoolSubject", "subject"),
    )
    criteria: list[Criterion] = p.Field(
        default_factory=list,
        alias="descriptions",
        validation_alias=p.AliasChoices("descriptions", "criteria"),
    )
    total_points: int | None = p.Field(default=None, alias="totalPoints")
    created_at: datetime.datetime = p.Field(
        alias="timestamp",
        validation_alias=p.AliasChoices("timestamp", "createdAt"),
    )

    def criterion(self, text: str) -> Criterion | None:
        for c in self.criteria:
            if c.text == text:
                return c
        return None

    def summary(self) -> "TemplateSummary":
        return TemplateSummary(
            template_id=self.template_id,
            name=self.name,
            subject=self.subject,
            criterion_count=len(self.criteria),
            total_points=self.total_points,
            created_at=self.created_at,
        )


class TemplateSummary(BaseModel):
    template_id: TemplateID
    name: str
    subject: str
    criterion_count: int
    total_points: int | None = None
    created_at: datetime.datetime
