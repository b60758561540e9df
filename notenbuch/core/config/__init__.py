__all__ = [
    "LoggingSettings",
    "RedisSettings",
    "RosterSettings",
    "Settings",
    "StorageSettings",
]


from .logging import LoggingSettings
from .roster import RosterSettings
from .settings import Settings
from .storage import RedisSettings, StorageSettings
