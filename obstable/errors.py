"""
obstable Errors
===============

Exception taxonomy shared by containers, the structural primitives and the arena.

- ``ContainerError``: base class for everything raised by this package
- ``UsageError``: the call itself is malformed (wrong receiver, missing argument,
  position or range that cannot resolve, destroyed container)
- ``NotFoundError``: ``remove()`` found no position, value or key to remove
- ``FrozenError``: a structural mutation was attempted after ``freeze()``
"""


class ContainerError(Exception):
    """Base class for all obstable errors."""

    pass


class UsageError(ContainerError, TypeError):
    """Raised when an operation is invoked incorrectly."""

    pass


class NotFoundError(ContainerError, LookupError):
    """Raised when a value or key to remove is not present."""

    pass


class FrozenError(ContainerError, RuntimeError):
    """Raised when a frozen container or store is mutated."""

    pass
