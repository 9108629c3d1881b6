# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""Linear, binary and Knuth-Morris-Pratt search over buffer storage."""

from __future__ import annotations

from typing import TypeVar

from .order import Compare, Equal, Order
from .storage import Storage

T = TypeVar('T')


def find_first(storage: Storage[T], element: T, equal: Equal[T]) -> int | None:
    """Index of the first occupied slot equal to ``element``, or None."""
    for index in range(storage.size):
        if equal(storage.value_at(index), element):
            return index
    return None


def find_last(storage: Storage[T], element: T, equal: Equal[T]) -> int | None:
    """Index of the last occupied slot equal to ``element``, or None."""
    for index in range(storage.size - 1, -1, -1):
        if equal(storage.value_at(index), element):
            return index
    return None


def bisect(storage: Storage[T], element: T, compare: Compare[T]) -> int | None:
    """
    Binary search for ``element`` in storage sorted ascending by ``compare``.

    Returns the first index probed that compares equal, which need not be the
    first or last of several equal elements.
    """
    low = 0
    high = storage.size
    while low < high:
        mid = (low + high) // 2
        order = compare(element, storage.value_at(mid))
        if order is Order.EQUAL:
            return mid
        if order is Order.LESS:
            high = mid
        else:
            low = mid + 1
    return None


def lps_table(pattern: Storage[T], equal: Equal[T]) -> list[int]:
    """
    Longest proper prefix of the pattern that is also a suffix, per position.

    ``table[i]`` is the length of the longest proper prefix of
    ``pattern[0..i]`` which is also a suffix of it.
    """
    size = pattern.size
    table = [0] * size
    length = 0
    index = 1
    while index < size:
        if equal(pattern.value_at(index), pattern.value_at(length)):
            length += 1
            table[index] = length
            index += 1
        elif length == 0:
            table[index] = 0
            index += 1
        else:
            length = table[length - 1]
    return table


def kmp_search(pattern: Storage[T], text: Storage[T], equal: Equal[T]) -> int | None:
    """
    Offset of the first occurrence of ``pattern`` in ``text``, or None.

    Runs in ``O(text.size + pattern.size)``. An empty pattern never matches, and
    neither does a pattern longer than the text.

    ``equal`` is called with the pattern element first.
    """
    pattern_size = pattern.size
    text_size = text.size
    if pattern_size == 0 or pattern_size > text_size:
        return None
    table = lps_table(pattern, equal)
    i = 0
    j = 0
    while i < text_size:
        if equal(pattern.value_at(j), text.value_at(i)):
            i += 1
            j += 1
            if j == pattern_size:
                return i - j
        elif j != 0:
            j = table[j - 1]
        else:
            i += 1
    return None
