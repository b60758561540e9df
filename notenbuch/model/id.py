from __future__ import annotations

import re
import typing as t

import pydantic as p
import pydantic_core.core_schema as core_schema

_whitespace = re.compile(r"\s+")


class TemplateID(str):
    """Storage key of an assessment template.

    The key is derived from the template name: surrounding whitespace is
    trimmed and every inner whitespace run becomes a single underscore. Two
    names that differ only in whitespace therefore share a key.
    """

    joiner: t.ClassVar[str] = "_"

    @classmethod
    def from_name(cls, name: str) -> TemplateID:
        return cls(_whitespace.sub(cls.joiner, name.strip()))

    @classmethod
    def __get_pydantic_core_schema__(cls, src: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        from_str_schema = core_schema.no_info_after_validator_function(cls, core_schema.str_schema())
        return core_schema.json_or_python_schema(
            json_schema=from_str_schema,
            python_schema=core_schema.union_schema([
                core_schema.is_instance_schema(cls),
                from_str_schema,
            ]),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {str(self)!s}>"
