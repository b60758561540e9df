import importlib
import json
import logging
import string
import textwrap
import typing as t

import colorlog
import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from notenbuch.lib.json import JSONEncoder, JSONValue

from .style import LogStyle

# attributes every LogRecord carries; anything else was passed as `extra`
ReservedKeys = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def _resolve(base: str | type[logging.Formatter]) -> type[logging.Formatter]:
    if not isinstance(base, str):
        return base
    module, _, name = base.removeprefix("ext://").rpartition(".")
    return getattr(importlib.import_module(module), name)


class ExtraFormatter(logging.Formatter):
    """Formats a record with `base`, then appends its `extra` fields as JSON.

    The JSON is highlighted with pygments when the stream is a terminal and
    `no_color` is not set.
    """

    def __init__(
        self,
        base: str | type[logging.Formatter],
        format: str | None = None,
        datefmt: str | None = None,
        indent: bool = False,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        *,
        stream: t.IO[str] | None = None,
        no_color: bool = False,
        defaults: t.Any = None,
        **kwargs: t.Any,
    ):
        cls = _resolve(base)
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        if issubclass(cls, colorlog.ColoredFormatter):
            kwargs.update(stream=stream, no_color=no_color)
        self.base = cls(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults, **kwargs)
        self.stream = stream
        self.no_color = no_color
        self.pyg_style = pyg_style
        self.indent = indent

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if "\n" in msg:
            # continuation lines line up under the first line of the message
            formatted = self.base.format(record)
            idx = formatted.find(msg)
            indent = " " * len([c for c in formatted[:idx] if c in string.printable])
            line, *lines = msg.splitlines()
            record.msg = record.message = f"{line}\n" + textwrap.indent("\n".join(lines), prefix=indent)
            record.args = None
        message = self.base.format(record)

        d = record.__dict__
        extra = {k: d[k] for k in sorted(d.keys() - ReservedKeys)}
        if not extra:
            return message

        encoder = JSONEncoder()

        def encode(obj: t.Any) -> JSONValue:
            try:
                return encoder.default(obj)
            except TypeError:
                return repr(obj)

        js = json.dumps(extra, indent=(4 if self.indent else None), default=encode, ensure_ascii=False)
        if self._colored():
            js = pygments.highlight(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style))
        return message + " " + js.strip()

    def _colored(self) -> bool:
        if self.no_color or self.stream is None:
            return False
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)
