# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""
Bottom-up merge sort over buffer storage.

The sort is iterative, stable and in place apart from a single scratch array
sized to the number of elements. Runs of length 1, 2, 4, ... are merged pairwise
until one run covers the whole storage. Runs are merged into the scratch array
and then copied back, so the scratch array never needs to be larger than the
storage.
"""

from __future__ import annotations

from typing import Any, TypeVar

from .order import Compare, Order
from .storage import Storage, allocate

T = TypeVar('T')


def merge_sort(storage: Storage[T], compare: Compare[T]) -> None:
    """
    Stably sort the occupied slots of ``storage`` in ascending order.

    Parameters
    ----------
    storage:
        Storage to sort in place.
    compare:
        Three-way comparison. Elements comparing ``EQUAL`` keep their relative
        order.

    Raises
    ------
    MalformedStateError:
        If an occupied slot is found empty.
    """
    size = storage.size
    if size == 0:
        return
    scratch = allocate(size)
    run = 1
    while run < size:
        left_start = 0
        while left_start < size - 1:
            mid = min(left_start + run - 1, size - 1)
            right_end = min(left_start + 2 * run - 1, size - 1)
            _merge(storage, scratch, left_start, mid, right_end, compare)
            left_start += 2 * run
        run *= 2


def _merge(
    storage: Storage[T],
    scratch: list[Any],
    left_start: int,
    mid: int,
    right_end: int,
    compare: Compare[T],
) -> None:
    """Merge ``[left_start, mid]`` and ``[mid + 1, right_end]`` via ``scratch``."""
    left = left_start
    right = mid + 1
    out = left_start
    while left <= mid and right <= right_end:
        left_element = storage.value_at(left)
        right_element = storage.value_at(right)
        # Taking the left element on ties keeps the sort stable.
        if compare(left_element, right_element) is Order.GREATER:
            scratch[out] = right_element
            right += 1
        else:
            scratch[out] = left_element
            left += 1
        out += 1
    while left <= mid:
        scratch[out] = storage.value_at(left)
        left += 1
        out += 1
    while right <= right_end:
        scratch[out] = storage.value_at(right)
        right += 1
        out += 1
    storage.slots[left_start : right_end + 1] = scratch[left_start : right_end + 1]
