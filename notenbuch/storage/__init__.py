import importlib
import sys
import types
import typing as t

from .errors import NotenbuchError, ShapeMismatchError, StoreUnavailableError, ValidationError
from .kv import KeyValueStore

__all__ = [
    "KeyValueStore",
    "NotenbuchError",
    "ShapeMismatchError",
    "StoreUnavailableError",
    "ValidationError",
    # Repository modules
    "grade",
    "migration",
    "normalize",
    "roster",
    "template",
]

if t.TYPE_CHECKING:
    from . import grade, migration, normalize, roster, template


def __getattr__(name: str) -> types.ModuleType:
    if name in __all__:
        module = importlib.import_module(f"{__name__}.{name}")
        setattr(sys.modules[__name__], name, module)
        return module
    raise AttributeError(f"module {__name__} has no attribute {name}")
