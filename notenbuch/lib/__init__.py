__all__ = ["NotReady", "Sentinel"]

from .sentinel import NotReady, Sentinel
