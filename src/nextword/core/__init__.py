"""Core value types shared by the navigation and editor layers."""

from .ranges import WordRange

__all__ = ["WordRange"]
