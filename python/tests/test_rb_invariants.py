#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
test_rb_invariants.py
---------------------

Structural tests for the balancing machinery:

* the worked example 7, 3, 18, 10, 22, 8, 11, 26 and its deletions
* randomised bulk insert/delete compared against Python's built‑in dict,
  validating the red‑black invariants after each operation
* height bound ``height <= 2 * floor(log2(n + 1))``
* deleting an absent key leaves the tree untouched
* rotations keep the in‑order sequence and refuse the sentinel
"""

import math
import random
import unittest
from typing import Any, List, Tuple

from rb_errors import InvariantViolation
from red_black_tree import RedBlackTree, BLACK


def _shape(rbt: RedBlackTree) -> List[Tuple[Any, bool, Any, Any, Any]]:
    """Pre‑order snapshot of (key, colour, parent, left, right) keys."""
    nil = rbt._nil
    out = []
    stack = [rbt._root] if rbt._root is not nil else []
    while stack:
        node = stack.pop()
        out.append(
            (
                node.key,
                node.color,
                node.parent.key if node.parent is not nil else None,
                node.left.key if node.left is not nil else None,
                node.right.key if node.right is not nil else None,
            )
        )
        for child in (node.right, node.left):
            if child is not nil:
                stack.append(child)
    return out


class TestWorkedExample(unittest.TestCase):
    KEYS = [7, 3, 18, 10, 22, 8, 11, 26]

    def setUp(self):
        self.rbt = RedBlackTree[int, None](check=True)
        for k in self.KEYS:
            self.rbt.insert(k)

    def test_insertions(self):
        self.rbt.validate()
        self.assertEqual(list(self.rbt.traverse()), [3, 7, 8, 10, 11, 18, 22, 26])
        self.assertEqual(self.rbt._root.color, BLACK)
        self.assertEqual(self.rbt._root.key, 7)

    def test_deletions(self):
        for k, expected in [
            (18, [3, 7, 8, 10, 11, 22, 26]),
            (11, [3, 7, 8, 10, 22, 26]),
            (3, [7, 8, 10, 22, 26]),
        ]:
            self.assertTrue(self.rbt.delete(k))
            self.rbt.validate()
            self.assertEqual(list(self.rbt.traverse()), expected)
        self.assertEqual(len(self.rbt), 5)


class TestRandomisedOperations(unittest.TestCase):
    # ------------------------------------------------------------------
    #  Randomised stress test vs. Python dict
    # ------------------------------------------------------------------
    def test_random_operations_against_dict(self):
        rng = random.Random(12345)
        rbt = RedBlackTree[int, int]()
        reference = {}  # normal dict for ground truth

        for _ in range(5_000):
            op = rng.choice(["insert", "delete"])
            k = rng.randrange(0, 500)
            if op == "insert":
                v = rng.randint(-1_000, 1_000)
                rbt[k] = v
                reference[k] = v
            else:
                self.assertEqual(rbt.delete(k), k in reference)
                reference.pop(k, None)

            # After each mutation, validate red‑black invariants
            rbt.validate()

        # Final check – the entire contents must match
        self.assertEqual(len(rbt), len(reference))
        for k in reference:
            self.assertEqual(rbt[k], reference[k])

        # Verify iteration order matches sorted order of keys
        self.assertEqual(list(rbt), sorted(reference))

    def test_insert_then_delete_everything(self):
        rng = random.Random(7)
        keys = list(range(300))
        rng.shuffle(keys)
        rbt = RedBlackTree[int, None]()
        for k in keys:
            rbt.insert(k)

        rng.shuffle(keys)
        for k in keys:
            self.assertTrue(rbt.delete(k))
            rbt.validate()

        self.assertEqual(len(rbt), 0)
        self.assertIsNone(rbt.min_key())
        self.assertIsNone(rbt.max_key())
        for k in keys[:20]:
            self.assertIsNone(rbt.search(k))
        self.assertEqual(list(rbt.traverse()), [])

    def test_sequential_inserts_and_deletes(self):
        # Ascending and descending runs drive the mirrored fix‑up branches.
        for order in (range(200), range(199, -1, -1)):
            rbt = RedBlackTree[int, None](check=True)
            for k in order:
                rbt.insert(k)
            for k in order:
                rbt.delete(k)
            self.assertEqual(len(rbt), 0)

    def test_height_bound(self):
        rng = random.Random(99)
        rbt = RedBlackTree[int, None]()
        # Sorted input is the worst case for an unbalanced BST.
        for n in range(1, 1025):
            rbt.insert(n)
            if n in (1, 2, 3, 10, 100, 511, 1024):
                self.assertLessEqual(rbt.height(), 2 * math.floor(math.log2(n + 1)))

        keys = rng.sample(range(100_000), 2_000)
        rbt = RedBlackTree[int, None]((k, None) for k in keys)
        n = len(rbt)
        self.assertLessEqual(rbt.height(), 2 * math.floor(math.log2(n + 1)))
        self.assertGreaterEqual(rbt.height(), rbt.black_height())

    def test_delete_absent_key_changes_nothing(self):
        rbt = RedBlackTree[int, None]()
        for k in range(0, 100, 3):
            rbt.insert(k)
        before = _shape(rbt)
        size = len(rbt)

        for missing in (-1, 1, 50, 1000):
            self.assertFalse(rbt.delete(missing))

        self.assertEqual(_shape(rbt), before)
        self.assertEqual(len(rbt), size)
        self.assertIs(rbt._nil.parent, rbt._nil)


class TestRotations(unittest.TestCase):
    def setUp(self):
        self.rbt = RedBlackTree[int, None]()
        for k in [20, 10, 30, 5, 15, 25, 35]:
            self.rbt.insert(k)

    def test_rotate_left_and_back(self):
        rbt = self.rbt
        before = list(rbt)
        old_root = rbt._root
        pivot = old_root.right
        inner = pivot.left

        rbt._rotate_left(old_root)
        self.assertIs(rbt._root, pivot)
        self.assertIs(pivot.left, old_root)
        self.assertIs(old_root.right, inner)
        self.assertIs(inner.parent, old_root)
        self.assertIs(pivot.parent, rbt._nil)
        self.assertEqual(list(rbt), before)

        rbt._rotate_right(pivot)
        self.assertIs(rbt._root, old_root)
        self.assertEqual(_shape(rbt)[0][0], 20)
        self.assertEqual(list(rbt), before)
        rbt.validate()

    def test_rotation_leaves_colours_alone(self):
        rbt = self.rbt
        colours = {k: c for k, c, *_ in _shape(rbt)}
        rbt._rotate_right(rbt._root.left)
        self.assertEqual({k: c for k, c, *_ in _shape(rbt)}, colours)

    def test_rotation_on_sentinel_is_an_error(self):
        rbt = self.rbt
        leaf = rbt._root.left.left
        with self.assertRaises(InvariantViolation):
            rbt._rotate_left(leaf)
        with self.assertRaises(InvariantViolation):
            rbt._rotate_right(leaf)
        with self.assertRaises(InvariantViolation):
            rbt._rotate_left(rbt._nil)


if __name__ == "__main__":
    unittest.main(verbosity=2)
