import logging
import typing as t

TRACE: t.Final = 5


class NotenbuchLogger(logging.Logger):
    def trace(self, message: str, *args: t.Any, **kwargs: t.Any):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)


def install_trace_level() -> None:
    """Register TRACE below DEBUG and make new loggers `NotenbuchLogger`s."""
    logging.setLoggerClass(NotenbuchLogger)
    logging.addLevelName(TRACE, "TRACE")
    logging.TRACE = TRACE  # pyright: ignore [reportAttributeAccessIssue]
