import datetime
import inspect
import logging.config
import typing as t

from .logging import install_trace_level, NotenbuchLogger

TimestampProvider = t.Callable[..., datetime.datetime]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class LoggingProvider(object):
    def __init__(self, config: dict[str, t.Any], debug: bool):
        install_trace_level()
        logging.config.dictConfig(config)
        if debug:
            self.capture_warnings(True)

    @staticmethod
    def get_logger(name: str | None = None, n_frames: int = 1) -> NotenbuchLogger:
        """Logger named `name`, or after the calling module."""
        if name is None:
            name = inspect.stack()[n_frames].frame.f_globals["__name__"]
        return t.cast(NotenbuchLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool):
        logging.captureWarnings(capture)
