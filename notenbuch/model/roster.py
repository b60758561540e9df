import pydantic as p

from .base import BaseModel


class Student(BaseModel):
    name: str
    class_name: str = p.Field(
        default="",
        alias="Klasse",
        validation_alias=p.AliasChoices("Klasse", "class", "class_name"),
    )
