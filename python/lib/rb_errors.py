#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
rb_errors.py
------------

Exceptions raised by the red‑black tree.

* ``InvariantViolation`` – an internal programming error (rotation on the
  sentinel, a red node with a red child, …).  It derives from
  ``AssertionError`` so debugging code that expects plain assertions keeps
  working.
* ``DuplicateKeyError`` – raised only by trees configured with
  ``on_duplicate="reject"``.  It is a ``KeyError``.

A missing key is *not* an error for ``search`` / ``delete``; those return
``None`` / ``False``.  Only the mapping dunders raise the usual ``KeyError``.
"""


class RedBlackTreeError(Exception):
    """Base class for every error raised by this package."""


class InvariantViolation(RedBlackTreeError, AssertionError):
    """A red‑black or ordering invariant does not hold."""


class DuplicateKeyError(RedBlackTreeError, KeyError):
    """Insertion of a key that is already stored (``"reject"`` policy)."""

    def __init__(self, key: object) -> None:
        super().__init__(key)
        self.key = key
