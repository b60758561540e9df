__all__ = [
    # Base
    "BaseModel",
    # Enums
    "DeploymentEnvironment",
    "GradeLabel",
    # ID Types
    "TemplateID",
    # Templates
    "AssessmentTemplate",
    "Criterion",
    "TemplateSummary",
    # Grades
    "GradeEntry",
    "GradeEntrySet",
    # Roster
    "Student",
]

from .base import BaseModel
from .enum import DeploymentEnvironment, GradeLabel
from .grade import GradeEntry, GradeEntrySet
from .id import TemplateID
from .roster import Student
from .template import AssessmentTemplate, Criterion, TemplateSummary
