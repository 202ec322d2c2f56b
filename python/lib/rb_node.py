#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
rb_node.py
----------

Storage units of the red‑black tree and the allocators that hand them out.

The tree never calls ``_Node(...)`` itself: every node is obtained from an
allocator and given back to it once it has been unlinked.  Any object that
provides the two methods below can be plugged in::

    allocate(key, value, color, nil) -> _Node
    release(node) -> None

Two allocators ship with the module:

* ``NodeAllocator`` – a fresh object per node, released nodes are left to
  the garbage collector.
* ``PooledNodeAllocator`` – keeps a bounded free list of released nodes and
  recycles them, which avoids allocator churn for insert/delete heavy loads.

>>> from rb_node import PooledNodeAllocator
>>> pool = PooledNodeAllocator(capacity=2)
>>> nil = pool.sentinel()
>>> n = pool.allocate(1, "one", RED, nil)
>>> pool.release(n)
>>> pool.pooled
1
"""

from __future__ import annotations

from typing import Any, Generic, List, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")

# ----------------------------------------------------------------------
#  Node colour constants – using simple booleans is fastest
# ----------------------------------------------------------------------
RED = True
BLACK = False


class _Node(Generic[K, V]):
    """Internal node object – not meant to be used directly by callers."""

    __slots__ = ("key", "value", "color", "left", "right", "parent")

    def __init__(
        self,
        key: Optional[K] = None,
        value: Optional[V] = None,
        color: bool = BLACK,
        left: Optional["_Node[K, V]"] = None,
        right: Optional["_Node[K, V]"] = None,
        parent: Optional["_Node[K, V]"] = None,
    ) -> None:
        self.key = key
        self.value = value
        self.color = color
        self.left = left
        self.right = right
        self.parent = parent

    def __repr__(self) -> str:
        col = "R" if self.color == RED else "B"
        return f"<{col} {self.key!r}:{self.value!r}>"


class NodeAllocator(Generic[K, V]):
    """Default allocator: one new ``_Node`` per call."""

    def __init__(self) -> None:
        self.allocated = 0
        self.released = 0

    @staticmethod
    def sentinel() -> _Node[K, V]:
        """Return a fresh BLACK sentinel whose links all point at itself."""
        nil: _Node[K, V] = _Node(color=BLACK)
        nil.left = nil.right = nil.parent = nil
        return nil

    def allocate(self, key: K, value: V, color: bool, nil: _Node[K, V]) -> _Node[K, V]:
        node = self._new_node()
        node.key = key
        node.value = value
        node.color = color
        node.left = node.right = node.parent = nil
        self.allocated += 1
        return node

    def release(self, node: _Node[K, V]) -> None:
        # Drop references so a stale handle cannot keep a subtree alive.
        node.key = node.value = None
        node.left = node.right = node.parent = None
        self.released += 1

    @property
    def live(self) -> int:
        """Number of nodes handed out and not yet released."""
        return self.allocated - self.released

    def _new_node(self) -> _Node[K, V]:
        return _Node()


class PooledNodeAllocator(NodeAllocator[K, V]):
    """
    Allocator that recycles released nodes through a bounded free list.

    Parameters
    ----------
    capacity : int, default 1024
        Maximum number of released nodes kept for reuse.  Nodes released
        while the pool is full are simply dropped.
    """

    def __init__(self, capacity: int = 1024) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity!r}")
        super().__init__()
        self.capacity = capacity
        self._free: List[_Node[Any, Any]] = []

    @property
    def pooled(self) -> int:
        """Number of nodes currently waiting on the free list."""
        return len(self._free)

    def release(self, node: _Node[K, V]) -> None:
        super().release(node)
        if len(self._free) < self.capacity:
            self._free.append(node)

    def _new_node(self) -> _Node[K, V]:
        if self._free:
            return self._free.pop()
        return _Node()
