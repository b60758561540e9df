__all__ = ["BootConfiguration", "NotenbuchContainer", "StorageContainer"]

from .notenbuch import BootConfiguration, NotenbuchContainer
from .storage import StorageContainer
