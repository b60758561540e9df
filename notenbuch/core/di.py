from __future__ import annotations

__all__ = [
    "Container",
    "Provider",
    "Provide",
    "as_",
    "inject",
    "providers",
    "containers",
]

import typing as t

import dependency_injector.containers as containers
import dependency_injector.providers as providers
import dependency_injector.wiring as wiring
from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import Provide, TypeModifier

inject = wiring.inject

TAs = t.TypeVar("TAs")


def as_(type_: t.Type[TAs]) -> TypeModifier:  # noqa: E302
    """Return custom type modifier."""
    # replace wiring.as_ because that one has typing issues
    return TypeModifier(type_)
