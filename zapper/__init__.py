"""Zapper - single-asset deposits into a three-asset stable pool."""

from zapper.zapper import Zapper

__version__ = "0.1.0"
__all__ = ["Zapper", "__version__"]
