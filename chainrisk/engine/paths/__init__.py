"""Path enumeration, shortest-path selection and path metrics."""

from .path_finder import PathFinder

__all__ = ["PathFinder"]
