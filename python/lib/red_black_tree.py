#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
red_black_tree.py
-----------------

A self‑balancing ordered map based on the **Red‑Black** algorithm.
Keys are ordered by a caller supplied ``less(a, b)`` predicate (``a < b`` by
default); each key may carry a value.  Insert, delete and lookup are
O(log n) because the tree height never exceeds ``2·log2(n + 1)``.

Features
~~~~~~~~
* `tree.insert(key, value)`  – add a key (duplicate handling is configurable)
* `tree.delete(key)`         – ``True`` if removed, ``False`` if absent
* `tree.search(key)`         – the stored key or ``None``
* `tree.min_key()`, `tree.max_key()` – ``None`` on an empty tree
* `tree.traverse()`          – lazy ascending iterator, restartable
* dict style access: `tree[key] = value`, `tree[key]`, `del tree[key]`,
  `key in tree`, `len(tree)`, iteration, `reversed(tree)`
* `tree.items()`, `tree.keys()`, `tree.values()`, `tree.get()`
* `tree.successor(key)`, `tree.predecessor(key)` (KeyError if none)
* `tree.pop_min()`, `tree.pop_max()`, `tree.clear()`
* `tree.height()`, `tree.black_height()`
* `tree.validate()` – raise ``InvariantViolation`` if an invariant is broken

Duplicate keys
~~~~~~~~~~~~~~
Chosen once per tree with ``on_duplicate``:

* ``"replace"`` (default) – overwrite the stored value
* ``"ignore"``            – keep the stored value, do nothing
* ``"reject"``            – raise ``DuplicateKeyError``

Every tree owns a **private sentinel node** (`self._nil`) that stands for all
leaves, which eliminates `None` checks everywhere.  Deleting a node with two
children relinks its in‑order successor into its place instead of copying
the successor's key, so surviving nodes keep their identity.

Typical usage
~~~~~~~~~~~~~
>>> from red_black_tree import RedBlackTree
>>> rbt = RedBlackTree()
>>> for k in [7, 3, 18, 10, 22, 8, 11, 26]:
...     _ = rbt.insert(k)
>>> list(rbt.traverse())
[3, 7, 8, 10, 11, 18, 22, 26]
>>> rbt.delete(18), rbt.delete(99)
(True, False)
>>> rbt.min_key(), rbt.max_key()
(3, 26)
>>> rbt.search(11)
11
"""

from __future__ import annotations

import logging
import operator
from typing import (
    Any,
    Callable,
    Generator,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
    Generic,
)

from rb_errors import DuplicateKeyError, InvariantViolation
from rb_node import BLACK, RED, NodeAllocator, _Node

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

# ----------------------------------------------------------------------
#  Duplicate‑key policies
# ----------------------------------------------------------------------
REPLACE = "replace"
IGNORE = "ignore"
REJECT = "reject"
DUPLICATE_POLICIES = frozenset((REPLACE, IGNORE, REJECT))


class RedBlackTree(Generic[K, V]):
    """
    An ordered map implemented with a red‑black binary search tree.

    Parameters
    ----------
    items : iterable of (key, value)   optional
        Pairs inserted one by one with ``insert`` (O(n log n)).
    less : callable, optional
        Strict ordering predicate ``less(a, b) -> bool``.  Two keys are
        equal when neither is less than the other.  Defaults to ``a < b``.
    on_duplicate : {"replace", "ignore", "reject"}
        What ``insert`` does with a key that is already stored.
    allocator : object, optional
        Supplies ``allocate(key, value, color, nil)`` and ``release(node)``.
        Defaults to a private ``NodeAllocator``.
    check : bool, default ``False``
        Run ``validate()`` after every mutation.  Meant for debugging and
        tests; it makes every mutation O(n).
    """

    __slots__ = (
        "_root",
        "_nil",
        "_size",
        "_version",
        "_less",
        "_on_duplicate",
        "_allocator",
        "_check",
    )

    # ------------------------------------------------------------------
    #   Construction / basic container protocol
    # ------------------------------------------------------------------
    def __init__(
        self,
        items: Optional[Iterable[Tuple[K, V]]] = None,
        *,
        less: Optional[Callable[[K, K], bool]] = None,
        on_duplicate: str = REPLACE,
        allocator: Optional[Any] = None,
        check: bool = False,
    ) -> None:
        if on_duplicate not in DUPLICATE_POLICIES:
            raise ValueError(
                f"on_duplicate must be one of {sorted(DUPLICATE_POLICIES)}, "
                f"got {on_duplicate!r}"
            )
        self._less: Callable[[K, K], bool] = operator.lt if less is None else less
        self._on_duplicate = on_duplicate
        self._allocator = NodeAllocator() if allocator is None else allocator
        self._check = check

        self._nil: _Node[K, V] = NodeAllocator.sentinel()
        self._root: _Node[K, V] = self._nil
        self._size: int = 0
        # Bumped on every structural change; live iterators compare against it.
        self._version: int = 0

        if items is not None:
            for key, value in items:
                self.insert(key, value)

    @property
    def on_duplicate(self) -> str:
        return self._on_duplicate

    # ------------------------------------------------------------------
    #   Helper index look‑up (internal)
    # ------------------------------------------------------------------
    def _search_node(self, key: K) -> _Node[K, V]:
        """Return the node that holds *key* or the sentinel `_nil` if not found."""
        less = self._less
        cur = self._root
        while cur is not self._nil:
            if less(key, cur.key):
                cur = cur.left
            elif less(cur.key, key):
                cur = cur.right
            else:
                return cur
        return self._nil

    # ------------------------------------------------------------------
    #   Core API
    # ------------------------------------------------------------------
    def search(self, key: K) -> Optional[K]:
        """Return the stored key equal to *key*, or ``None`` if absent."""
        node = self._search_node(key)
        if node is self._nil:
            return None
        return node.key

    def insert(self, key: K, value: Optional[V] = None) -> bool:
        """
        Insert *key* (with an optional *value*).

        Returns ``True`` if a new node was created and ``False`` if the key
        was already present and the duplicate policy replaced or ignored it.
        Raises ``DuplicateKeyError`` under the ``"reject"`` policy.
        """
        created = self._insert_node(key, value)
        if self._check:
            self.validate()
        return created

    def delete(self, key: K) -> bool:
        """Remove *key*.  Return ``True`` if it was found, ``False`` otherwise."""
        node = self._search_node(key)
        if node is self._nil:
            logger.debug("delete: key %r not found", key)
            return False
        self._delete_node(node)
        if self._check:
            self.validate()
        return True

    def min_key(self) -> Optional[K]:
        """Return the smallest key, or ``None`` for an empty tree."""
        if self._root is self._nil:
            return None
        return self._minimum_node(self._root).key

    def max_key(self) -> Optional[K]:
        """Return the largest key, or ``None`` for an empty tree."""
        if self._root is self._nil:
            return None
        return self._maximum_node(self._root).key

    def traverse(self) -> Generator[K, None, None]:
        """
        Yield keys in ascending order.

        Each call starts a new walk, so calling it again on an unmodified
        tree yields the same sequence.  Changing the tree's structure while
        the walk is running raises ``RuntimeError`` on the next step.
        """
        for node in self._walk(reverse=False):
            yield node.key  # type: ignore[misc]

    # ------------------------------------------------------------------
    #   Public mapping methods
    # ------------------------------------------------------------------
    def __contains__(self, key: object) -> bool:  # type: ignore[override]
        return self._search_node(key) is not self._nil  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, key: K) -> V:
        node = self._search_node(key)
        if node is self._nil:
            raise KeyError(key)
        return node.value  # type: ignore[no-any-return]

    def __setitem__(self, key: K, value: V) -> None:
        """Insert *key* with *value*, following the duplicate policy."""
        self.insert(key, value)

    def __delitem__(self, key: K) -> None:
        if not self.delete(key):
            raise KeyError(key)

    def __iter__(self) -> Generator[K, None, None]:
        return self.traverse()

    def __reversed__(self) -> Generator[K, None, None]:
        """Yield keys in descending order."""
        for node in self._walk(reverse=True):
            yield node.key  # type: ignore[misc]

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        node = self._search_node(key)
        if node is self._nil:
            return default
        return node.value

    # ------------------------------------------------------------------
    #   Convenience collection‑like view methods
    # ------------------------------------------------------------------
    def keys(self) -> List[K]:
        """Return a list of all keys in sorted order."""
        return list(self.traverse())

    def values(self) -> List[V]:
        """Return a list of all values in key order."""
        return [node.value for node in self._walk(reverse=False)]

    def items(self) -> List[Tuple[K, V]]:
        """Return a list of ``(key, value)`` pairs in sorted order."""
        return [(node.key, node.value) for node in self._walk(reverse=False)]

    def _walk(self, reverse: bool) -> Generator[_Node[K, V], None, None]:
        """Iterative in‑order walk over the nodes, optionally mirrored."""
        nil = self._nil
        version = self._version
        stack: List[_Node[K, V]] = []
        cur: _Node[K, V] = self._root
        while stack or cur is not nil:
            while cur is not nil:
                stack.append(cur)
                cur = cur.right if reverse else cur.left
            cur = stack.pop()
            yield cur
            if version != self._version:
                raise RuntimeError("tree changed during iteration")
            cur = cur.left if reverse else cur.right

    # ------------------------------------------------------------------
    #   Minimum / maximum helpers
    # ------------------------------------------------------------------
    def _minimum_node(self, node: _Node[K, V]) -> _Node[K, V]:
        """Return the node with the smallest key in the subtree rooted at *node*."""
        while node.left is not self._nil:
            node = node.left
        return node

    def _maximum_node(self, node: _Node[K, V]) -> _Node[K, V]:
        """Return the node with the largest key in the subtree rooted at *node*."""
        while node.right is not self._nil:
            node = node.right
        return node

    def pop_min(self) -> Tuple[K, V]:
        """Remove and return the ``(key, value)`` pair with the smallest key."""
        if self._root is self._nil:
            raise KeyError("pop_min(): tree is empty")
        return self._pop(self._minimum_node(self._root))

    def pop_max(self) -> Tuple[K, V]:
        """Remove and return the ``(key, value)`` pair with the largest key."""
        if self._root is self._nil:
            raise KeyError("pop_max(): tree is empty")
        return self._pop(self._maximum_node(self._root))

    def _pop(self, node: _Node[K, V]) -> Tuple[K, V]:
        pair = (node.key, node.value)
        self._delete_node(node)
        if self._check:
            self.validate()
        return pair  # type: ignore[return-value]

    # ------------------------------------------------------------------
    #   Successor / predecessor
    # ------------------------------------------------------------------
    def successor(self, key: K) -> K:
        """Return the smallest key greater than *key*; raise KeyError if none."""
        node = self._search_node(key)
        if node is self._nil:
            raise KeyError(key)

        if node.right is not self._nil:
            return self._minimum_node(node.right).key  # type: ignore[no-any-return]

        # Walk up until we find a node that is a left child of its parent.
        y = node.parent
        while y is not self._nil and node is y.right:
            node = y
            y = y.parent
        if y is self._nil:
            raise KeyError(f"No successor for {key!r}")
        return y.key  # type: ignore[no-any-return]

    def predecessor(self, key: K) -> K:
        """Return the greatest key smaller than *key*; raise KeyError if none."""
        node = self._search_node(key)
        if node is self._nil:
            raise KeyError(key)

        if node.left is not self._nil:
            return self._maximum_node(node.left).key  # type: ignore[no-any-return]

        y = node.parent
        while y is not self._nil and node is y.left:
            node = y
            y = y.parent
        if y is self._nil:
            raise KeyError(f"No predecessor for {key!r}")
        return y.key  # type: ignore[no-any-return]

    # ------------------------------------------------------------------
    #   Core BST insertion (red‑black fixup follows)
    # ------------------------------------------------------------------
    def _insert_node(self, key: K, value: Optional[V]) -> bool:
        less = self._less
        parent = self._nil
        cur = self._root
        go_left = False

        while cur is not self._nil:
            parent = cur
            if less(key, cur.key):
                go_left = True
                cur = cur.left
            elif less(cur.key, key):
                go_left = False
                cur = cur.right
            else:
                return self._on_existing(cur, key, value)

        # At this point `cur` is the sentinel, `parent` is where we attach.
        new_node = self._allocator.allocate(key, value, RED, self._nil)
        new_node.parent = parent

        if parent is self._nil:
            self._root = new_node
        elif go_left:
            parent.left = new_node
        else:
            parent.right = new_node

        self._size += 1
        self._version += 1
        self._fix_insert(new_node)
        logger.debug("insert: added key %r (size=%d)", key, self._size)
        return True

    def _on_existing(self, node: _Node[K, V], key: K, value: Optional[V]) -> bool:
        """Apply the duplicate policy to an already stored *node*."""
        if self._on_duplicate == REJECT:
            logger.debug("insert: rejected duplicate key %r", key)
            raise DuplicateKeyError(key)
        if self._on_duplicate == REPLACE:
            node.value = value
        else:
            logger.debug("insert: ignored duplicate key %r", key)
        return False

    # ------------------------------------------------------------------
    #   Insert fix‑up (preserves red‑black properties)
    # ------------------------------------------------------------------
    def _fix_insert(self, z: _Node[K, V]) -> None:
        """Restore red‑black properties after inserting node `z` (which is RED)."""
        # A RED parent is never the root, so the grandparent is a real node.
        while z.parent.color == RED:
            if z.parent is z.parent.parent.left:
                y = z.parent.parent.right  # uncle
                if y.color == RED:
                    # Case 1 – recolour
                    z.parent.color = BLACK
                    y.color = BLACK
                    z.parent.parent.color = RED
                    z = z.parent.parent
                else:
                    if z is z.parent.right:
                        # Case 2 – left‑rotate at parent
                        z = z.parent
                        self._rotate_left(z)
                    # Case 3 – right‑rotate at grandparent
                    z.parent.color = BLACK
                    z.parent.parent.color = RED
                    self._rotate_right(z.parent.parent)
            else:  # Mirror of the above (parent is a right child)
                y = z.parent.parent.left  # uncle
                if y.color == RED:
                    z.parent.color = BLACK
                    y.color = BLACK
                    z.parent.parent.color = RED
                    z = z.parent.parent
                else:
                    if z is z.parent.left:
                        z = z.parent
                        self._rotate_right(z)
                    z.parent.color = BLACK
                    z.parent.parent.color = RED
                    self._rotate_left(z.parent.parent)
        self._root.color = BLACK

    # ------------------------------------------------------------------
    #   Left / right rotations – helper primitives
    # ------------------------------------------------------------------
    def _rotate_left(self, x: _Node[K, V]) -> None:
        """Left‑rotate the subtree rooted at `x`; colours are not touched."""
        y = x.right
        if x is self._nil or y is self._nil:
            raise InvariantViolation("rotate_left needs a real node with a real right child")
        # Turn y's left subtree into x's right subtree
        x.right = y.left
        if y.left is not self._nil:
            y.left.parent = x
        # Link x's parent to y
        y.parent = x.parent
        if x.parent is self._nil:
            self._root = y
        elif x is x.parent.left:
            x.parent.left = y
        else:
            x.parent.right = y
        # Put x on y's left
        y.left = x
        x.parent = y

    def _rotate_right(self, y: _Node[K, V]) -> None:
        """Right‑rotate the subtree rooted at `y`; colours are not touched."""
        x = y.left
        if y is self._nil or x is self._nil:
            raise InvariantViolation("rotate_right needs a real node with a real left child")
        y.left = x.right
        if x.right is not self._nil:
            x.right.parent = y
        x.parent = y.parent
        if y.parent is self._nil:
            self._root = x
        elif y is y.parent.right:
            y.parent.right = x
        else:
            y.parent.left = x
        x.right = y
        y.parent = x

    # ------------------------------------------------------------------
    #   Deletion
    # ------------------------------------------------------------------
    def _transplant(self, u: _Node[K, V], v: _Node[K, V]) -> None:
        """Replace subtree rooted at `u` with the subtree rooted at `v`."""
        if u.parent is self._nil:
            self._root = v
        elif u is u.parent.left:
            u.parent.left = v
        else:
            u.parent.right = v
        # May write the sentinel's parent; _delete_node resets it.
        v.parent = u.parent

    def _delete_node(self, z: _Node[K, V]) -> None:
        """Unlink node `z`, fix up colour violations and release `z`."""
        key = z.key
        y = z  # node removed from its position
        y_original_color = y.color
        if z.left is self._nil:
            x = z.right
            self._transplant(z, z.right)
        elif z.right is self._nil:
            x = z.left
            self._transplant(z, z.left)
        else:
            # Two children: the in‑order successor `y` takes z's place.
            y = self._minimum_node(z.right)
            y_original_color = y.color
            x = y.right
            if y.parent is z:
                x.parent = y
            else:
                self._transplant(y, y.right)
                y.right = z.right
                y.right.parent = y
            self._transplant(z, y)
            y.left = z.left
            y.left.parent = y
            y.color = z.color

        self._size -= 1
        self._version += 1

        if y_original_color == BLACK:
            self._fix_delete(x)

        self._nil.parent = self._nil
        self._allocator.release(z)
        logger.debug("delete: removed key %r (size=%d)", key, self._size)

    # ------------------------------------------------------------------
    #   Delete fix‑up (preserves red‑black properties)
    # ------------------------------------------------------------------
    def _fix_delete(self, x: _Node[K, V]) -> None:
        """
        Restore red‑black properties after removing a black node.
        `x` is the node that moved into the removed position (could be `nil`)
        and is short one black node compared with its sibling's subtree.
        The sibling `w` is re‑read after every rotation.
        """
        while x is not self._root and x.color == BLACK:
            if x is x.parent.left:
                w = x.parent.right  # sibling
                if w.color == RED:
                    # Case 1 – sibling is red
                    w.color = BLACK
                    x.parent.color = RED
                    self._rotate_left(x.parent)
                    w = x.parent.right
                if w.left.color == BLACK and w.right.color == BLACK:
                    # Case 2 – both of sibling's children are black
                    w.color = RED
                    x = x.parent
                else:
                    if w.right.color == BLACK:
                        # Case 3 – sibling's right child is black, left child is red
                        w.left.color = BLACK
                        w.color = RED
                        self._rotate_right(w)
                        w = x.parent.right
                    # Case 4 – sibling's right child is red
                    w.color = x.parent.color
                    x.parent.color = BLACK
                    w.right.color = BLACK
                    self._rotate_left(x.parent)
                    x = self._root
            else:
                # Mirror of the above, with "left" and "right" swapped
                w = x.parent.left
                if w.color == RED:
                    w.color = BLACK
                    x.parent.color = RED
                    self._rotate_right(x.parent)
                    w = x.parent.left
                if w.right.color == BLACK and w.left.color == BLACK:
                    w.color = RED
                    x = x.parent
                else:
                    if w.left.color == BLACK:
                        w.right.color = BLACK
                        w.color = RED
                        self._rotate_left(w)
                        w = x.parent.left
                    w.color = x.parent.color
                    x.parent.color = BLACK
                    w.left.color = BLACK
                    self._rotate_right(x.parent)
                    x = self._root
        x.color = BLACK

    def clear(self) -> None:
        """Remove every key, handing all nodes back to the allocator."""
        stack: List[_Node[K, V]] = []
        if self._root is not self._nil:
            stack.append(self._root)
        while stack:
            node = stack.pop()
            if node.left is not self._nil:
                stack.append(node.left)
            if node.right is not self._nil:
                stack.append(node.right)
            self._allocator.release(node)
        logger.debug("clear: released %d nodes", self._size)
        self._root = self._nil
        self._size = 0
        self._version += 1

    # ------------------------------------------------------------------
    #   Shape metrics
    # ------------------------------------------------------------------
    def height(self) -> int:
        """Number of nodes on the longest root‑to‑leaf path (0 when empty)."""
        best = 0
        stack: List[Tuple[_Node[K, V], int]] = []
        if self._root is not self._nil:
            stack.append((self._root, 1))
        while stack:
            node, depth = stack.pop()
            if depth > best:
                best = depth
            for child in (node.left, node.right):
                if child is not self._nil:
                    stack.append((child, depth + 1))
        return best

    def black_height(self) -> int:
        """
        Number of BLACK nodes on any path from the root down to a leaf,
        counting the root and not the sentinel.  Only meaningful on a valid
        tree, where every path gives the same number.
        """
        count = 0
        node = self._root
        while node is not self._nil:
            if node.color == BLACK:
                count += 1
            node = node.left
        return count

    # ------------------------------------------------------------------
    #   Validation/checking utilities – useful for debugging
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """
        Verify that the tree satisfies all red‑black invariants.
        Raises ``InvariantViolation`` with a descriptive message if something
        is broken.
        """
        nil = self._nil
        less = self._less
        if nil.color != BLACK:
            raise InvariantViolation("Sentinel is not black")
        if self._root is nil:
            if self._size != 0:
                raise InvariantViolation(f"Empty tree reports size {self._size}")
            return
        if self._root.color != BLACK:
            raise InvariantViolation("Root is not black")
        if self._root.parent is not nil:
            raise InvariantViolation("Root has a parent")

        def dfs(
            node: _Node[K, V],
            low: _Node[K, V],
            high: _Node[K, V],
        ) -> Tuple[int, int]:
            """
            Return ``(black_height, node_count)`` of the subtree at *node*.
            *low* / *high* are the nearest ancestors bounding its keys (or
            the sentinel when unbounded).
            """
            if node is nil:
                return 1, 0  # leaves count as black height 1 (they are black)

            if low is not nil and not less(low.key, node.key):
                raise InvariantViolation(f"Order violated: {node.key!r} after {low.key!r}")
            if high is not nil and not less(node.key, high.key):
                raise InvariantViolation(f"Order violated: {node.key!r} before {high.key!r}")

            if node.color == RED and (node.left.color == RED or node.right.color == RED):
                raise InvariantViolation(f"Red node {node.key!r} has a red child")

            for child in (node.left, node.right):
                if child is not nil and child.parent is not node:
                    raise InvariantViolation(f"Broken parent link below {node.key!r}")

            left_black, left_count = dfs(node.left, low, node)
            right_black, right_count = dfs(node.right, node, high)

            if left_black != right_black:
                raise InvariantViolation(
                    f"Black-height mismatch at {node.key!r}: {left_black} != {right_black}"
                )

            bh = left_black + (1 if node.color == BLACK else 0)
            return bh, left_count + right_count + 1

        _, count = dfs(self._root, nil, nil)
        if count != self._size:
            raise InvariantViolation(f"Tree holds {count} nodes but reports size {self._size}")

    # ------------------------------------------------------------------
    #   Convenience string representation (for debugging)
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"RedBlackTree({{{items}}})"
