# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""Slot storage backing a buffer."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Generic, TypeVar

from .errors import MalformedStateError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class _Empty(Enum):
    """Marker for a slot that holds no element."""

    EMPTY = 'empty'

    def __repr__(self) -> str:
        return '<empty>'


EMPTY = _Empty.EMPTY


def allocate(capacity: int) -> list[Any]:
    """Allocate ``capacity`` empty slots."""
    return [EMPTY] * capacity


class Storage(Generic[T]):
    """
    An array of optionally-occupied slots plus a logical size.

    Slots ``[0, size)`` are occupied, slots ``[size, capacity)`` are empty. Empty
    slots hold the private ``EMPTY`` marker rather than a value of ``T``, so any
    value, including None, can be stored.

    The owning buffer mutates ``slots`` and ``size`` directly. Every change of the
    slot array goes through :meth:`replace_slots` so reallocations are counted.
    """

    __slots__ = ('_reallocations', 'size', 'slots')

    def __init__(self, capacity: int) -> None:
        self.slots: list[Any] = allocate(capacity)
        self.size = 0
        self._reallocations = 0

    @property
    def capacity(self) -> int:
        return len(self.slots)

    @property
    def reallocations(self) -> int:
        """Number of times the slot array has been replaced."""
        return self._reallocations

    def value_at(self, index: int) -> T:
        """
        Return the element in an occupied slot.

        Raises
        ------
        MalformedStateError:
            If the slot is empty although it lies within ``[0, size)``.
        """
        value = self.slots[index]
        if value is EMPTY:
            raise MalformedStateError(
                f"Slot {index} is empty in storage of size {self.size}"
            )
        return value

    def replace_slots(self, slots: list[Any]) -> None:
        """Install a freshly built slot array in place of the current one."""
        old_capacity = len(self.slots)
        self.slots = slots
        self._reallocations += 1
        logger.debug(
            'Reallocated storage from %d to %d slots', old_capacity, len(slots)
        )

    def reallocate(self, capacity: int) -> None:
        """Move the occupied slots into a new array of exactly ``capacity`` slots."""
        slots = allocate(capacity)
        slots[: self.size] = self.slots[: self.size]
        self.replace_slots(slots)

    def check(self) -> None:
        """Verify ``capacity >= size`` and that exactly ``[0, size)`` is occupied."""
        if self.size > len(self.slots):
            raise MalformedStateError(
                f"Size {self.size} exceeds capacity {len(self.slots)}"
            )
        for index, value in enumerate(self.slots):
            if (value is EMPTY) == (index < self.size):
                raise MalformedStateError(
                    f"Slot {index} occupancy does not match size {self.size}"
                )
