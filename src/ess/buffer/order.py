# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""Three-way comparison results used by sorting and searching."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

T = TypeVar('T')


class Order(Enum):
    """Result of comparing two elements."""

    LESS = 'less'
    EQUAL = 'equal'
    GREATER = 'greater'

    def reversed(self) -> Order:
        if self is Order.LESS:
            return Order.GREATER
        if self is Order.GREATER:
            return Order.LESS
        return self


Compare = Callable[[T, T], Order]
Equal = Callable[[T, T], bool]


def natural_order(left: Any, right: Any) -> Order:
    """Compare two elements with ``<`` and ``==``."""
    if left < right:
        return Order.LESS
    if left == right:
        return Order.EQUAL
    return Order.GREATER


def reverse_order(compare: Compare[T]) -> Compare[T]:
    """Return a comparison that orders elements opposite to ``compare``."""

    def _reversed(left: T, right: T) -> Order:
        return compare(left, right).reversed()

    return _reversed


def natural_equal(left: Any, right: Any) -> bool:
    return left == right
