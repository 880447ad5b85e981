"""
Default Arena - module-level arena shared by containers created without one.

Provides get_default_arena() so ``Container(...)`` works without an explicit
``arena=`` argument. Trees that should not share slots with the rest of the
process can pass their own ``ContainerArena``.

Implementation:
    - get_default_arena(): lazy singleton pattern
    - _reset_default_arena(): replaces the singleton (test isolation)
"""

from .arena import ContainerArena

_default_arena = None


def get_default_arena() -> ContainerArena:
    """
    Get or create the default arena instance.

    Lazy singleton pattern: creates on first access, reuses thereafter.
    Testing can reset via _reset_default_arena().
    """
    global _default_arena
    if _default_arena is None:
        _default_arena = ContainerArena()
    return _default_arena


def _reset_default_arena() -> ContainerArena:
    """Replace the default arena with a fresh one and return it."""
    global _default_arena
    _default_arena = ContainerArena()
    return _default_arena
