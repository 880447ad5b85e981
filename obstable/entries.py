"""
obstable Entries - Ordered Keyed Backing Store
==============================================

``Entries`` is the flat structure every container keeps its data in: an
insertion-ordered ``dict`` whose non-negative integer keys ``0..n-1`` form the
*sequence part* and whose remaining keys are *named entries*.

The class only knows about keys and values. It performs the structural
operations a container needs (append, positional removal, block move, sort,
join, search, slicing) and enforces freezing, but it never wraps values or
sends notifications; that is the container's job.

Positions are zero-based. Ranges given as ``(i, j)`` are inclusive on both ends,
so ``unpack(0, 2)`` returns three values.

All operations are O(size).
"""

from functools import cmp_to_key
from itertools import islice
from numbers import Integral
from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Iterator,
    Optional,
    Tuple,
)

from .errors import FrozenError, UsageError


def is_position(key: Any) -> bool:
    """True for integer keys that can address the sequence part."""
    return isinstance(key, Integral) and not isinstance(key, bool)


def is_joinable(value: Any) -> bool:
    """True for values ``concat`` can turn into text."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, int, float))


class Entries:
    """
    Ordered keyed store with a sequence part.

    Usage:
        entries = Entries({0: "a", 1: "b", "name": "letters"})
        entries.length()        # 2
        entries.insert("c")     # 2
        entries.unpack()        # ("a", "b", "c")
        entries.remove_at(0)    # "a"
        entries.concat("-")     # "b-c"
    """

    __slots__ = ("_data", "_frozen")

    def __init__(self, data: Optional[Dict[Hashable, Any]] = None):
        self._data: Dict[Hashable, Any] = dict(data) if data else {}
        self._frozen = False

    # ------------------------------------------------------------------
    # Freezing
    # ------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "Entries":
        self._frozen = True
        return self

    def _check_writable(self) -> None:
        if self._frozen:
            raise FrozenError("Attempt to modify a frozen store")

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, key: Hashable) -> Any:
        return self._data[key]

    def __setitem__(self, key: Hashable, value: Any) -> None:
        self._check_writable()
        self._data[key] = value

    def __delitem__(self, key: Hashable) -> None:
        self._check_writable()
        del self._data[key]

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._data)

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._data.get(key, default)

    def keys(self):
        return self._data.keys()

    def values(self):
        return self._data.values()

    def items(self):
        return self._data.items()

    def copy(self) -> Dict[Hashable, Any]:
        """Shallow copy of the underlying dict."""
        return dict(self._data)

    def __repr__(self) -> str:
        flag = ", frozen" if self._frozen else ""
        return f"Entries({self._data!r}{flag})"

    # ------------------------------------------------------------------
    # Sequence part
    # ------------------------------------------------------------------

    def length(self) -> int:
        """Number of consecutive positions starting at 0."""
        n = 0
        while n in self._data:
            n += 1
        return n

    def is_sequence(self) -> bool:
        """True when every key is a position and there are no gaps."""
        return self.length() == len(self._data)

    def _resolve_range(self, i: int, j: Optional[int]) -> Tuple[int, int]:
        n = self.length()
        if j is None:
            j = n - 1
        if not is_position(i) or not is_position(j):
            raise UsageError(f"Range bounds must be integers, got ({i!r}, {j!r})")
        if i <= j and (i < 0 or j >= n):
            raise UsageError(f"Range [{i}, {j}] is outside the sequence of length {n}")
        return i, j

    def insert(self, value: Any) -> int:
        """Append ``value`` at the end of the sequence part and return its position."""
        self._check_writable()
        position = self.length()
        self._data[position] = value
        return position

    def remove_at(self, position: int) -> Any:
        """Remove the value at ``position``, shifting later positions down."""
        self._check_writable()
        n = self.length()
        if not is_position(position) or not 0 <= position < n:
            raise UsageError(
                f"Position {position!r} is outside the sequence of length {n}"
            )
        value = self._data[position]
        for i in range(position, n - 1):
            self._data[i] = self._data[i + 1]
        del self._data[n - 1]
        return value

    def find(self, needle: Any, init: int = 0) -> Optional[Hashable]:
        """Return the first key whose value equals ``needle``, skipping ``init`` entries."""
        for key, value in islice(self._data.items(), init, None):
            if value == needle:
                return key
        return None

    def unpack(self, i: int = 0, j: Optional[int] = None) -> Tuple[Any, ...]:
        i, j = self._resolve_range(i, j)
        return tuple(self._data[k] for k in range(i, j + 1))

    def move(
        self, a: int, b: int, t: int, dest: Optional["Entries"] = None
    ) -> "Entries":
        """
        Copy positions ``a..b`` so they start at position ``t`` of ``dest``.

        ``dest`` defaults to this store. Overlapping ranges within one store are
        copied in the direction that preserves the source values. The source
        positions are left in place.

        Args:
            a: First source position
            b: Last source position (inclusive); ``b < a`` moves nothing
            t: First destination position, at most the destination's length
            dest: Destination store

        Returns:
            The destination store
        """
        dest = self if dest is None else dest
        self._check_writable()
        dest._check_writable()
        if b < a:
            return dest
        a, b = self._resolve_range(a, b)
        limit = dest.length()
        if not is_position(t) or not 0 <= t <= limit:
            raise UsageError(
                f"Destination position {t!r} is outside the sequence of length {limit}"
            )

        count = b - a + 1
        if t > b or t <= a or dest is not self:
            for offset in range(count):
                dest._data[t + offset] = self._data[a + offset]
        else:
            for offset in range(count - 1, -1, -1):
                dest._data[t + offset] = self._data[a + offset]
        return dest

    def sort(
        self,
        comp: Optional[Callable[[Any, Any], bool]] = None,
        key: Optional[Callable[[Any], Any]] = None,
        reverse: bool = False,
    ) -> None:
        """
        Sort the sequence part in place.

        ``comp(x, y)`` must return True when ``x`` orders strictly before ``y``.
        ``key`` and ``reverse`` behave as in ``list.sort``; ``comp`` and ``key``
        are mutually exclusive.
        """
        self._check_writable()
        if comp is not None and key is not None:
            raise UsageError("sort() accepts either comp or key, not both")
        if comp is not None:
            key = cmp_to_key(lambda x, y: -1 if comp(x, y) else (1 if comp(y, x) else 0))

        n = self.length()
        values = [self._data[i] for i in range(n)]
        values.sort(key=key, reverse=reverse)
        for i, value in enumerate(values):
            self._data[i] = value

    def concat(self, sep: str = "", i: int = 0, j: Optional[int] = None) -> str:
        """Join positions ``i..j`` into a string separated by ``sep``."""
        i, j = self._resolve_range(i, j)
        parts = []
        for position in range(i, j + 1):
            value = self._data[position]
            if not is_joinable(value):
                raise UsageError(
                    f"Invalid value ({type(value).__name__}) at position {position} in concat"
                )
            parts.append(str(value))
        return sep.join(parts)

    def clear(self) -> None:
        self._check_writable()
        self._data.clear()

    def release(self) -> None:
        """Drop all data regardless of the frozen flag. Used during teardown."""
        self._data.clear()
