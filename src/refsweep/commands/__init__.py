"""Command implementations exposed by the refsweep CLI."""

from .branches import cleanup_branches
from .tags import cleanup_tags

__all__ = [
    "cleanup_branches",
    "cleanup_tags",
]
