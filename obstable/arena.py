"""
obstable Arena - Id-Indexed Container Registry
==============================================

This module provides the arena that owns the identity of every live container
and the parent relation between them.

Containers refer to their parent by integer id instead of holding a reference
to it. The arena resolves ids back to containers, which keeps ownership one-way:
a parent owns its children through its store, a child only knows a number.

Key Features:
- Pre-allocated numpy arrays for per-slot metadata (parent id, generation, liveness)
- Weak references to containers, so an arena never keeps a tree alive
- Free list for slot reuse, with a generation counter bumped on every release
- Releasing a slot detaches surviving children (their parent id becomes NO_PARENT)
- Capacity doubles when exhausted
"""

import logging
import weakref
from typing import Any, Iterator, List, Optional

import numpy as np

NO_PARENT = -1


class ContainerArena:
    """
    Arena holding container slots.

    All metadata lives in parallel numpy arrays indexed by container id:
    - parents: parent id or NO_PARENT
    - generations: bumped each time a slot is released
    - alive: whether the slot currently holds a container
    """

    def __init__(self, capacity: int = 1024):
        """
        Initialize arena with pre-allocated storage.

        Args:
            capacity: Initial number of slots; grows by doubling when exhausted
        """
        if capacity < 1:
            raise ValueError(f"Arena capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.count = 0

        self.parents = np.full(capacity, NO_PARENT, dtype=np.int64)
        self.generations = np.zeros(capacity, dtype=np.uint32)
        self.alive = np.zeros(capacity, dtype=bool)
        self.refs: List[Optional[weakref.ref]] = [None] * capacity

        # Free list for reuse
        self.free_list: List[int] = []

    def _grow(self) -> None:
        new_capacity = self.capacity * 2
        logging.debug(f"Growing container arena from {self.capacity} to {new_capacity}")

        parents = np.full(new_capacity, NO_PARENT, dtype=np.int64)
        parents[: self.capacity] = self.parents
        generations = np.zeros(new_capacity, dtype=np.uint32)
        generations[: self.capacity] = self.generations
        alive = np.zeros(new_capacity, dtype=bool)
        alive[: self.capacity] = self.alive

        self.parents = parents
        self.generations = generations
        self.alive = alive
        self.refs.extend([None] * (new_capacity - self.capacity))
        self.capacity = new_capacity

    def allocate(self, container: Any, parent_id: int = NO_PARENT) -> int:
        """
        Register ``container`` and return its id.

        Args:
            container: The object occupying the slot (held weakly)
            parent_id: Id of the owning container, or NO_PARENT for a root

        Returns:
            Container id (index in arena)
        """
        if parent_id != NO_PARENT and not self.is_alive(parent_id):
            raise ValueError(f"Parent id {parent_id} is not a live container")

        if self.free_list:
            cid = self.free_list.pop()
        else:
            if self.count >= self.capacity:
                self._grow()
            cid = self.count
            self.count += 1

        generation = int(self.generations[cid])
        self.refs[cid] = weakref.ref(
            container, lambda _ref, cid=cid, gen=generation: self._collect(cid, gen)
        )
        self.parents[cid] = parent_id
        self.alive[cid] = True
        return cid

    def _collect(self, cid: int, generation: int) -> None:
        """Weakref callback: release a slot whose container was garbage collected."""
        if self.alive[cid] and int(self.generations[cid]) == generation:
            logging.debug(f"Collecting container slot {cid} released by the garbage collector")
            self.release(cid)

    def release(self, cid: int) -> None:
        """Free a slot for reuse and detach any children still pointing at it."""
        if not self.is_alive(cid):
            raise ValueError(f"Container id {cid} is not live")
        self.alive[cid] = False
        self.refs[cid] = None
        self.parents[cid] = NO_PARENT
        self.generations[cid] += 1
        self.parents[: self.count][self.parents[: self.count] == cid] = NO_PARENT
        self.free_list.append(cid)

    def is_alive(self, cid: int) -> bool:
        return 0 <= cid < self.count and bool(self.alive[cid])

    def get(self, cid: int) -> Optional[Any]:
        """Resolve an id to its container, or None if the slot is empty."""
        if not self.is_alive(cid):
            return None
        ref = self.refs[cid]
        return ref() if ref is not None else None

    def parent_of(self, cid: int) -> int:
        if not self.is_alive(cid):
            return NO_PARENT
        return int(self.parents[cid])

    def ancestors(self, cid: int) -> Iterator[int]:
        """Yield the ids of every ancestor, nearest first."""
        current = self.parent_of(cid)
        while current != NO_PARENT:
            yield current
            current = self.parent_of(current)

    @property
    def live_count(self) -> int:
        return int(np.count_nonzero(self.alive[: self.count]))

    def __len__(self) -> int:
        return self.live_count

    def __repr__(self) -> str:
        return f"ContainerArena(live={self.live_count}, capacity={self.capacity})"
