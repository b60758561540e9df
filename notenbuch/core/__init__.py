__all__ = [
    "BootConfiguration",
    "di",
    "NotenbuchContainer",
    "LoggingProvider",
    "Settings",
    "TimestampProvider",
]


from . import di
from .config import Settings
from .container import BootConfiguration, NotenbuchContainer
from .provider import LoggingProvider, TimestampProvider
