from __future__ import annotations

import datetime
import enum
import json as pyjson
import typing as t

import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


# stdlib-compatible JSON encoder
class JSONEncoder(pyjson.JSONEncoder):
    def default(self, o: t.Any) -> JSONValue:
        if isinstance(o, p.BaseModel):
            return o.model_dump(mode="json")
        if isinstance(o, datetime.datetime | datetime.date):
            return o.isoformat()
        if isinstance(o, enum.Enum):
            return o.value
        return pyjson.JSONEncoder.default(self, o)


def dumps(obj: t.Any, *, sort_keys: bool = False, indent: int | None = None) -> str:
    # keep umlauts readable in stored documents
    return pyjson.dumps(obj, cls=JSONEncoder, ensure_ascii=False, sort_keys=sort_keys, indent=indent)


def loads(s: str | bytes | bytearray) -> JSONValue:
    """implemented for parity's sake"""
    return pyjson.loads(s)
