"""
obstable Container - Observable Nested Tables
=============================================

This module provides ``Container``, a drop-in replacement for a plain ``dict`` or
``list`` that makes a whole tree of nested data observable.

How It Works
------------

Constructing a container over a structure wraps every nested ``dict``, ``list``
or ``tuple`` in its own child ``Container``. Each child records its parent, so a
change anywhere in the tree can be announced at every level above it:

```python
from obstable import Container

settings = Container({"theme": "dark", "editor": {"tab_size": 4}})

settings.subscribe(lambda: print("settings changed"))
settings.editor.subscribe(lambda: print("editor changed"))

settings.editor.tab_size = 2
# editor changed
# settings changed

settings.editor.tab_size = 2   # same value, nothing fires
settings.serialize()           # {"theme": "dark", "editor": {"tab_size": 2}}
```

Reads and Writes
----------------

- ``container.name`` resolves methods and properties first, then data keys.
  A data key that collides with a method name is still reachable through
  ``container["name"]``.
- ``container[key] = value`` and ``container.name = value`` snapshot the data,
  apply the write and fire only if the data actually changed.
- Direct writes store the value as given. Nested structures assigned this way
  are not wrapped; use ``insert()`` or build the tree at construction time to
  get observable children.
- Iterating a container yields ``(key, value)`` pairs in insertion order.

Mutation API
------------

``insert``, ``remove``, ``clear``, ``move``, ``sort`` and ``concat`` delegate to
the backing ``Entries`` and then fire unconditionally. ``find``, ``unpack``,
``clone`` and ``get_entries`` are reads. After ``freeze()`` every mutation raises
``FrozenError``.

Lifecycle
---------

- ``clone()`` returns an independent root container over a deep copy.
- ``serialize()`` returns plain ``dict``/``list`` data with no containers inside.
- ``destroy()`` tears the tree down, children before parents. A destroyed
  container rejects every API call with ``UsageError``.
"""

import logging
from collections.abc import Hashable, Mapping
from functools import wraps
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .arena import NO_PARENT, ContainerArena
from .default_arena import get_default_arena
from .entries import Entries, is_position
from .errors import FrozenError, NotFoundError, UsageError
from .signal import Signal


def is_structured(value: Any) -> bool:
    """True for values that get wrapped into child containers."""
    return isinstance(value, (Container, Mapping, list, tuple))


def _plain_copy(value: Any) -> Any:
    """Deep copy into plain data; containers are replaced by their serialized form."""
    if isinstance(value, Container):
        # A subtree destroyed on its own leaves an empty slot in its parent
        return None if value.destroyed else value.serialize()
    if isinstance(value, Mapping):
        return {key: _plain_copy(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain_copy(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_plain_copy(item) for item in value)
    return value


def _same(a: Any, b: Any) -> bool:
    """Deep equality that also requires matching types, so ``True`` differs from ``1``."""
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(_same(a[key], b[key]) for key in a)
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(_same(x, y) for x, y in zip(a, b))
    return a == b


def _instance_method(method: Callable) -> Callable:
    """Reject calls whose receiver is not a live Container."""

    @wraps(method)
    def wrapper(*args, **kwargs):
        if not args or not isinstance(args[0], Container):
            raise UsageError(
                f"{method.__name__}() must be called on a Container instance"
            )
        args[0]._check_live(method.__name__)
        return method(*args, **kwargs)

    return wrapper


class Container:
    """
    Observable wrapper over an ordered keyed store.

    Each instance owns a notifier, a backing ``Entries`` store and one child
    container per nested structured value. The parent relation is kept in a
    ``ContainerArena`` by id.
    """

    def __init__(
        self,
        initial: Any = None,
        parent: Optional["Container"] = None,
        *,
        arena: Optional[ContainerArena] = None,
        notifier_factory: Callable[[], Any] = Signal,
    ) -> None:
        """
        Create a container, wrapping every nested structure in ``initial``.

        Args:
            initial: A mapping, list, tuple or Container to seed from (default empty)
            parent: Owning container; set once and never reassigned
            arena: Arena to register in; defaults to the parent's arena, then the
                   module-level default arena
            notifier_factory: Zero-argument callable returning an object with
                              ``fire()`` (and optionally ``destroy()``)
        """
        self._destroyed = False
        if initial is not None and not is_structured(initial):
            raise UsageError(
                f"Container expects a mapping or sequence, got {type(initial).__name__}"
            )
        if isinstance(initial, Container):
            initial._check_live("Container")
        if parent is not None:
            if not isinstance(parent, Container):
                raise UsageError(
                    f"parent must be a Container, got {type(parent).__name__}"
                )
            parent._check_live("Container")
            if arena is None:
                arena = parent._arena
            elif arena is not parent._arena:
                raise UsageError("A child container must live in its parent's arena")

        self._arena = arena if arena is not None else get_default_arena()
        self._notifier_factory = notifier_factory
        self._notifier = notifier_factory()
        self._frozen = False
        self._sequence_seed = isinstance(initial, (list, tuple)) or (
            isinstance(initial, Container) and initial._sequence_seed
        )
        self._id = self._arena.allocate(
            self, parent._id if parent is not None else NO_PARENT
        )

        # Defensive copy, so later changes to the caller's data stay invisible
        seed = _plain_copy(initial) if initial is not None else {}
        items = seed.items() if isinstance(seed, Mapping) else enumerate(seed)
        self._entries = Entries({key: self._wrap(value) for key, value in items})

    def _wrap(self, value: Any) -> Any:
        if is_structured(value):
            return Container(
                value,
                self,
                arena=self._arena,
                notifier_factory=self._notifier_factory,
            )
        return value

    def _check_live(self, operation: str) -> None:
        if self._destroyed:
            raise UsageError(f"{operation}() called on a destroyed Container")

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenError("Attempt to modify a frozen Container")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Optional["Container"]:
        """The owning container, or None for a root."""
        return self._arena.get(self._arena.parent_of(self._id))

    @property
    def notifier(self) -> Any:
        return self._notifier

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    # ------------------------------------------------------------------
    # Intercepted access
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails, so methods shadow data keys
        if name.startswith("_"):
            raise AttributeError(name)
        entries = self.__dict__.get("_entries")
        if entries is None or name not in entries:
            raise AttributeError(
                f"{type(self).__name__!r} has no attribute or key {name!r}"
            )
        return entries[name]

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return
        try:
            del self[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} has no key {name!r}"
            ) from None

    def __getitem__(self, key: Hashable) -> Any:
        return self._entries[key]

    def __setitem__(self, key: Hashable, value: Any) -> None:
        self._check_live("__setitem__")
        self._check_mutable()
        before = self.serialize()
        self._entries[key] = value
        if not _same(self.serialize(), before):
            self._fire_changed_for_parents()

    def __delitem__(self, key: Hashable) -> None:
        self._check_live("__delitem__")
        self._check_mutable()
        before = self.serialize()
        del self._entries[key]
        if not _same(self.serialize(), before):
            self._fire_changed_for_parents()

    def __contains__(self, key: Any) -> bool:
        return isinstance(key, Hashable) and key in self._entries

    def __iter__(self) -> Iterator[Tuple[Hashable, Any]]:
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __dir__(self) -> List[str]:
        names = set(super().__dir__())
        names.update(
            key for key in self._entries if isinstance(key, str) and key.isidentifier()
        )
        return sorted(names)

    def __repr__(self) -> str:
        if self._destroyed:
            return "Container(<destroyed>)"
        flag = ", frozen" if self._frozen else ""
        return f"Container({self.serialize()!r}{flag})"

    @_instance_method
    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._entries.get(key, default)

    @_instance_method
    def keys(self):
        return self._entries.keys()

    @_instance_method
    def values(self):
        return self._entries.values()

    @_instance_method
    def items(self):
        return self._entries.items()

    # ------------------------------------------------------------------
    # Change propagation
    # ------------------------------------------------------------------

    def _fire_changed_for_parents(self) -> None:
        """Fire this container's notifier, then every ancestor's, up to the root."""
        self._notifier.fire()
        for ancestor_id in self._arena.ancestors(self._id):
            ancestor = self._arena.get(ancestor_id)
            if ancestor is not None:
                ancestor._notifier.fire()

    @_instance_method
    def subscribe(self, callback: Callable[[], Any]) -> "Container":
        """Call ``callback()`` whenever this container or a descendant changes."""
        self._notifier.subscribe(callback)
        return self

    @_instance_method
    def unsubscribe(self, callback: Callable[[], Any]) -> None:
        self._notifier.remove_listener(callback)

    # ------------------------------------------------------------------
    # Mutation API
    # ------------------------------------------------------------------

    @_instance_method
    def insert(self, value: Any = None) -> int:
        """
        Append ``value`` to the sequence part and return its position.

        Structured values are wrapped into a child container owned by this one.

        Raises:
            UsageError: If ``value`` is None
            FrozenError: If the container is frozen
        """
        if value is None:
            raise UsageError("insert() requires a value")
        self._check_mutable()
        position = self._entries.insert(self._wrap(value))
        self._fire_changed_for_parents()
        return position

    @_instance_method
    def remove(self, pos: Any = None) -> Any:
        """
        Remove an entry and return its value.

        - ``pos`` omitted: the last entry of the sequence part
        - integer ``pos``: the entry at that position; later positions shift down
        - anything else: the first entry whose value equals ``pos``, otherwise the
          entry whose key is ``pos``

        Raises:
            UsageError: If a position does not resolve
            NotFoundError: If no value or key matches
            FrozenError: If the container is frozen
        """
        self._check_mutable()
        entries = self._entries
        if pos is None:
            value = entries.remove_at(entries.length() - 1)
        elif is_position(pos):
            value = entries.remove_at(pos)
        else:
            key = entries.find(pos)
            if key is None and isinstance(pos, Hashable) and pos in entries:
                key = pos
            if key is None:
                raise NotFoundError(f"{pos!r} not found in Container")
            if is_position(key) and 0 <= key < entries.length():
                value = entries.remove_at(key)
            else:
                value = entries[key]
                del entries[key]
        self._fire_changed_for_parents()
        return value

    @_instance_method
    def clear(self) -> None:
        self._check_mutable()
        self._entries.clear()
        self._fire_changed_for_parents()

    @_instance_method
    def move(
        self, a: int, b: int, t: int, dst: Optional["Container"] = None
    ) -> "Container":
        """
        Copy positions ``a..b`` (inclusive) to start at position ``t`` of ``dst``.

        ``dst`` defaults to this container. Both containers fire. A copied child
        container that would end up with a second owner or a second key is
        replaced by a fresh child of ``dst`` holding the same data.

        Returns:
            The destination container
        """
        if dst is not None and not isinstance(dst, Container):
            raise UsageError(f"move() destination must be a Container, got {type(dst).__name__}")
        target = self if dst is None else dst
        target._check_live("move")
        self._check_mutable()
        target._check_mutable()
        self._entries.move(a, b, t, target._entries)
        if b >= a:
            target._adopt_range(t, t + b - a)
        self._fire_changed_for_parents()
        if target is not self:
            target._fire_changed_for_parents()
        return target

    def _adopt_range(self, first: int, last: int) -> None:
        """Rewrap children in positions ``first..last`` that are shared or foreign."""
        entries = self._entries
        for position in range(first, last + 1):
            value = entries[position]
            if not isinstance(value, Container):
                continue
            shared = any(
                other is value for key, other in entries.items() if key != position
            )
            if shared or value.parent is not self:
                entries[position] = self._wrap(_plain_copy(value))

    @_instance_method
    def sort(
        self,
        comp: Optional[Callable[[Any, Any], bool]] = None,
        *,
        key: Optional[Callable[[Any], Any]] = None,
        reverse: bool = False,
    ) -> None:
        """Sort the sequence part in place; ``comp(x, y)`` means ``x`` before ``y``."""
        self._check_mutable()
        self._entries.sort(comp, key=key, reverse=reverse)
        self._fire_changed_for_parents()

    @_instance_method
    def concat(self, sep: str = "", i: int = 0, j: Optional[int] = None) -> str:
        """Join positions ``i..j`` (inclusive) of the sequence part with ``sep``."""
        self._check_mutable()
        result = self._entries.concat(sep, i, j)
        self._fire_changed_for_parents()
        return result

    @_instance_method
    def find(self, needle: Any, init: int = 0) -> Optional[Hashable]:
        """Key of the first entry equal to ``needle`` at or after offset ``init``."""
        return self._entries.find(needle, init)

    @_instance_method
    def unpack(self, i: int = 0, j: Optional[int] = None) -> Tuple[Any, ...]:
        return self._entries.unpack(i, j)

    @_instance_method
    def get_entries(self) -> Entries:
        """The live backing store. Writing to it bypasses change notification."""
        return self._entries

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @_instance_method
    def clone(self) -> "Container":
        """Independent root container over a deep copy of this one's data."""
        return Container(
            self.serialize(),
            arena=self._arena,
            notifier_factory=self._notifier_factory,
        )

    @_instance_method
    def freeze(self) -> "Container":
        """Reject all further structural changes. Children are not affected."""
        if not self._frozen:
            self._frozen = True
            self._entries.freeze()
            logging.debug(f"Froze container {self._id}")
        return self

    @_instance_method
    def serialize(self) -> Any:
        """
        Plain copy of the tree with every container unwrapped.

        A store keyed exactly ``0..n-1`` becomes a ``list``; any other store
        becomes a ``dict``. An empty store is a ``list`` only when the container
        was seeded from a sequence.
        """
        data: Dict[Hashable, Any] = {
            key: _plain_copy(value) for key, value in self._entries.items()
        }
        if self._entries.is_sequence() and (data or self._sequence_seed):
            return [data[i] for i in range(len(data))]
        return data

    @_instance_method
    def destroy(self) -> None:
        """
        Destroy this container and every container reachable through its store.

        Children are torn down before their parents. Destroying a container
        twice raises ``UsageError``.
        """
        order: List[Container] = []
        seen = set()
        stack: List[Container] = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            order.append(node)
            stack.extend(
                value
                for value in node._entries.values()
                if isinstance(value, Container) and not value._destroyed
            )

        for node in reversed(order):
            node._teardown()
        logging.debug(f"Destroyed {len(order)} container(s)")

    def _teardown(self) -> None:
        teardown = getattr(self._notifier, "destroy", None)
        if callable(teardown):
            teardown()
        self._entries.release()
        self._arena.release(self._id)
        self._destroyed = True
