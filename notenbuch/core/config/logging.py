import typing as t

import pydantic as p

from .base import BaseSettings


class BaseFormatterSettings(BaseSettings):
    datefmt: str | None = None
    format: str | None = None


class ColoredFormatterSettings(BaseFormatterSettings):
    class_: t.Literal["colorlog.ColoredFormatter", "colorlog.TTYColoredFormatter"] = p.Field(alias="()")
    log_colors: dict[str, str] | None = None


class PlainFormatterSettings(BaseFormatterSettings):
    class_: t.Literal["logging.Formatter"] = p.Field(alias="()")


class ExtraFormatterSettings(BaseFormatterSettings):
    class_: t.Literal["notenbuch.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    base: str
    log_colors: dict[str, str] | None = None
    stream: str | None = None
    no_color: bool = False
    indent: bool = False


FormatterSettings = t.Annotated[
    ColoredFormatterSettings | PlainFormatterSettings | ExtraFormatterSettings, p.Field(discriminator="class_")
]


# https://github.com/python/cpython/blob/3.10/Lib/logging/__init__.py#L91-L98
LogLevel = t.Literal["NOTSET", "TRACE", "DEBUG", "INFO", "WARNING", "WARN", "ERROR", "FATAL", "CRITICAL"]


class BaseHandlerSettings(BaseSettings):
    formatter: str
    level: LogLevel


class StreamHandlerSettings(BaseHandlerSettings):
    class_: t.Literal["colorlog.StreamHandler", "logging.StreamHandler"] = p.Field(alias="class")
    stream: str = "ext://sys.stderr"


class FileHandlerSettings(BaseHandlerSettings):
    class_: t.Literal["logging.handlers.TimedRotatingFileHandler"] = p.Field(alias="class")
    backupCount: int
    filename: str
    when: str


HandlerSettings = t.Annotated[
    FileHandlerSettings | StreamHandlerSettings,
    p.Field(discriminator="class_"),
]


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] | None = None


class RootLoggerSettings(BaseSettings):
    handlers: list[str]
    level: LogLevel = "NOTSET"


class LoggingSettings(BaseSettings):
    version: t.Literal[1]
    disable_existing_loggers: bool = False
    formatters: dict[str, FormatterSettings]
    handlers: dict[str, HandlerSettings]
    root: RootLoggerSettings
    loggers: dict[str, LoggerSettings] = {}
