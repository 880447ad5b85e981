"""
obstable - Observable Nested Tables

A drop-in replacement for plain dicts and lists that wraps every nested structure
in an observable container and bubbles change notifications up to the root.
"""

from .arena import NO_PARENT, ContainerArena
from .container import Container, is_structured
from .default_arena import _reset_default_arena, get_default_arena
from .entries import Entries
from .errors import ContainerError, FrozenError, NotFoundError, UsageError
from .signal import Signal

__all__ = [
    # Core
    "Container",
    "is_structured",
    # Collaborators
    "Entries",
    "Signal",
    # Arena
    "ContainerArena",
    "NO_PARENT",
    "get_default_arena",
    # Exceptions
    "ContainerError",
    "UsageError",
    "NotFoundError",
    "FrozenError",
    # Testing utilities (internal use)
    "_reset_default_arena",
]
