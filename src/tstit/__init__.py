"""tstit package initialization."""
from __future__ import annotations

from .version import __version__

DESCRIPTION = "Test It. REST It."

__all__ = [
    "DESCRIPTION",
    "__version__",
]
