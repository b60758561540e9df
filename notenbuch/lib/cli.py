from __future__ import annotations

import enum
import pathlib
import typing as t

import click
import pydantic as p
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

# This module is a thin wrapper around Click, which is why we import `click.*`
# into our namespace, next to the parameter types the notenbuch commands share.


class EnumType(click.ParamType):
    """specify click params to be members of an enum"""

    def __init__(self, enum: t.Type[enum.Enum]):
        self.enum = enum
        self.name = self.enum_name

    @property
    def values(self) -> list[str]:
        return [e.value for e in self.enum]

    @property
    def enum_name(self) -> str:
        v = list(self.enum).pop()
        return v.__class__.__name__

    def convert(
        self, value: str | enum.Enum | None, param: click.Parameter | None, ctx: click.Context | None
    ) -> enum.Enum | None:
        if value is None:
            return None

        try:
            return self.enum(value)
        except ValueError:
            self.fail(f"valid {self.enum_name} values {self.values}")

    def __repr__(self) -> str:
        return self.enum_name


class URIParamType(click.ParamType):
    """
    Accept URIs as parameters, promoting filesystem paths to `file://` URIs

    Arguments:

        - `dir_ok`: (default `False`) accept a path that is a directory
        - `file_exists`: (default `True`) enforce that the path referenced exists
    """

    dir_ok: bool
    file_exists: bool
    name: str = "URI OR PATH"

    def __init__(self, dir_ok: bool = False, file_exists: bool = True):
        self.dir_ok = dir_ok
        self.file_exists = file_exists

    def convert(
        self, value: str | pathlib.Path | p.AnyUrl | None, param: click.Parameter | None, ctx: click.Context | None
    ) -> p.FileUrl | p.AnyUrl | None:
        if value is None or isinstance(value, p.AnyUrl):
            return value

        if isinstance(value, str) and "://" in value:
            u = p.AnyUrl(value)
            if u.scheme != "file" or u.path is None:
                return u
            path = pathlib.Path(u.path)
        else:
            path = pathlib.Path(value)

        if self.file_exists and not path.exists():
            self.fail(f"{value}: no such file or directory", param, ctx)
        if path.is_dir() and not self.dir_ok:
            self.fail("directory path not accepted", param, ctx)
        return p.FileUrl(f"file://{path.absolute()}")
