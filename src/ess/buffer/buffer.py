# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""Growable array container with explicit capacity management."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from . import search
from .errors import CapacityTooSmallError, IndexOutOfBoundsError
from .order import Compare, Equal, natural_equal, natural_order
from .policy import DEFAULT_CAPACITY, DEFAULT_POLICY, CapacityPolicy
from .sorting import merge_sort
from .storage import EMPTY, Storage, allocate

T = TypeVar('T')


class BufferIterator(Generic[T]):
    """
    Forward cursor over a buffer.

    The iterator is not a snapshot: it reads through to the owning buffer and
    keeps only a numeric cursor plus the size observed at creation. Mutating the
    buffer while iterating is unsupported. Inserting or removing elements can make
    the iterator skip, repeat, or return stale elements. Iteration stops early if
    the buffer has shrunk below the cursor.
    """

    __slots__ = ('_buffer', '_count', '_index')

    def __init__(self, buffer: Buffer[T]) -> None:
        self._buffer = buffer
        self._index = 0
        self._count = buffer.size

    def __iter__(self) -> BufferIterator[T]:
        return self

    def __next__(self) -> T:
        index = self._index
        if index >= self._count or index >= self._buffer.size:
            raise StopIteration
        self._index = index + 1
        return self._buffer.get(index)


class Buffer(Generic[T]):
    """
    Growable array of elements with amortized O(1) ``add`` and ``remove_last``.

    Storage grows by the policy's increase factor when full and halves once less
    than a quarter of it is in use (with the default policy). Operations that both
    shift elements and reallocate do so in a single copy into the new storage.

    A buffer is a single-owner, single-threaded value. Access from several threads
    must be serialized by the caller.

    Parameters
    ----------
    initial_capacity:
        Number of slots allocated up front. May be 0.
    policy:
        Capacity growth and shrink policy. Defaults to ``DEFAULT_POLICY``.

    Raises
    ------
    ValueError:
        If ``initial_capacity`` is negative.
    """

    __slots__ = ('_policy', '_storage')

    def __init__(
        self,
        initial_capacity: int = DEFAULT_CAPACITY,
        *,
        policy: CapacityPolicy | None = None,
    ) -> None:
        if initial_capacity < 0:
            raise ValueError("initial_capacity must be non-negative")
        self._policy = DEFAULT_POLICY if policy is None else policy
        self._storage: Storage[T] = Storage(initial_capacity)

    @classmethod
    def from_iterable(
        cls, items: Iterable[T], *, policy: CapacityPolicy | None = None
    ) -> Buffer[T]:
        """Create a buffer holding ``items`` in order."""
        values = list(items)
        policy = DEFAULT_POLICY if policy is None else policy
        buffer: Buffer[T] = cls(policy.next_capacity(len(values)), policy=policy)
        buffer._storage.slots[: len(values)] = values
        buffer._storage.size = len(values)
        return buffer

    @property
    def size(self) -> int:
        """Number of elements in the buffer."""
        return self._storage.size

    @property
    def capacity(self) -> int:
        """Number of allocated slots."""
        return self._storage.capacity

    @property
    def policy(self) -> CapacityPolicy:
        return self._policy

    @property
    def reallocations(self) -> int:
        """Number of storage reallocations since construction."""
        return self._storage.reallocations

    def check_invariants(self) -> None:
        """
        Verify the storage layout.

        Raises
        ------
        MalformedStateError:
            If ``capacity < size`` or slot occupancy does not match ``size``.
        """
        self._storage.check()

    def __len__(self) -> int:
        return self._storage.size

    def __iter__(self) -> BufferIterator[T]:
        return BufferIterator(self)

    def __getitem__(self, index: int) -> T:
        return self.get(index)

    def __setitem__(self, index: int, element: T) -> None:
        self.put(index, element)

    def __repr__(self) -> str:
        return (
            f"Buffer({self.to_list()!r}, size={self.size}, capacity={self.capacity})"
        )

    def vals(self) -> BufferIterator[T]:
        """Iterate over the elements. See :class:`BufferIterator` for caveats."""
        return BufferIterator(self)

    def is_empty(self) -> bool:
        return self._storage.size == 0

    def to_list(self) -> list[T]:
        return self._storage.slots[: self._storage.size]

    def clone(self) -> Buffer[T]:
        """Copy of this buffer with the same capacity and policy."""
        clone: Buffer[T] = Buffer(self.capacity, policy=self._policy)
        clone._storage.slots[: self.size] = self._storage.slots[: self.size]
        clone._storage.size = self.size
        return clone

    def add(self, element: T) -> None:
        """Add ``element`` to the end, growing the storage if it is full."""
        storage = self._storage
        if storage.size == storage.capacity:
            storage.reallocate(self._policy.next_capacity(storage.capacity))
        storage.slots[storage.size] = element
        storage.size += 1

    def get(self, index: int) -> T:
        """
        Return the element at ``index``.

        Raises
        ------
        IndexOutOfBoundsError:
            If ``index`` is not in ``[0, size)``.
        """
        storage = self._storage
        if not 0 <= index < storage.size:
            raise IndexOutOfBoundsError(index, storage.size)
        return storage.value_at(index)

    def get_opt(self, index: int, default: Any = None) -> T | Any:
        """Return the element at ``index``, or ``default`` if out of bounds."""
        storage = self._storage
        if not 0 <= index < storage.size:
            return default
        return storage.value_at(index)

    def put(self, index: int, element: T) -> None:
        """
        Overwrite the element at ``index``.

        Raises
        ------
        IndexOutOfBoundsError:
            If ``index`` is not in ``[0, size)``.
        """
        storage = self._storage
        if not 0 <= index < storage.size:
            raise IndexOutOfBoundsError(index, storage.size)
        storage.slots[index] = element

    def remove_last(self) -> T | None:
        """Remove and return the last element, or None if the buffer is empty."""
        storage = self._storage
        if storage.size == 0:
            return None
        last = storage.size - 1
        element = storage.value_at(last)
        storage.slots[last] = EMPTY
        storage.size = last
        if self._policy.should_shrink(last, storage.capacity):
            storage.reallocate(self._policy.shrunk_capacity(storage.capacity))
        return element

    def remove(self, index: int) -> T:
        """
        Remove and return the element at ``index``, shifting later elements left.

        Raises
        ------
        IndexOutOfBoundsError:
            If ``index`` is not in ``[0, size)``.
        """
        storage = self._storage
        size = storage.size
        if not 0 <= index < size:
            raise IndexOutOfBoundsError(index, size)
        element = storage.value_at(index)
        new_size = size - 1
        if self._policy.should_shrink(new_size, storage.capacity):
            slots = allocate(self._policy.shrunk_capacity(storage.capacity))
            slots[:index] = storage.slots[:index]
            slots[index:new_size] = storage.slots[index + 1 : size]
            storage.replace_slots(slots)
        else:
            storage.slots[index:new_size] = storage.slots[index + 1 : size]
            storage.slots[new_size] = EMPTY
        storage.size = new_size
        return element

    def insert(self, index: int, element: T) -> None:
        """
        Insert ``element`` at ``index``, shifting later elements right.

        Inserting at ``size`` is equivalent to :meth:`add`.

        Raises
        ------
        IndexOutOfBoundsError:
            If ``index`` is not in ``[0, size]``.
        """
        storage = self._storage
        size = storage.size
        if not 0 <= index <= size:
            raise IndexOutOfBoundsError(index, size)
        if size == storage.capacity:
            slots = allocate(self._policy.next_capacity(storage.capacity))
            slots[:index] = storage.slots[:index]
            slots[index] = element
            slots[index + 1 : size + 1] = storage.slots[index:size]
            storage.replace_slots(slots)
        else:
            storage.slots[index + 1 : size + 1] = storage.slots[index:size]
            storage.slots[index] = element
        storage.size = size + 1

    def insert_buffer(self, index: int, other: Buffer[T]) -> None:
        """
        Insert all elements of ``other`` at ``index``, preserving their order.

        Raises
        ------
        IndexOutOfBoundsError:
            If ``index`` is not in ``[0, size]``.
        """
        storage = self._storage
        size = storage.size
        if not 0 <= index <= size:
            raise IndexOutOfBoundsError(index, size)
        # Copy first: ``other`` may be this buffer.
        incoming = other.to_list()
        end = index + len(incoming)
        new_size = size + len(incoming)
        if new_size > storage.capacity:
            slots = allocate(self._policy.next_capacity(new_size))
            slots[:index] = storage.slots[:index]
            slots[index:end] = incoming
            slots[end:new_size] = storage.slots[index:size]
            storage.replace_slots(slots)
        else:
            storage.slots[end:new_size] = storage.slots[index:size]
            storage.slots[index:end] = incoming
        storage.size = new_size

    def filter_entries(self, predicate: Callable[[int, T], bool]) -> None:
        """
        Keep only the elements for which ``predicate(index, element)`` is true.

        The predicate sees every index and element as they were before any
        removal. Relative order of the kept elements is preserved.
        """
        storage = self._storage
        size = storage.size
        keep = [predicate(index, storage.value_at(index)) for index in range(size)]
        new_size = sum(1 for flag in keep if flag)
        shrink = self._policy.should_shrink(new_size, storage.capacity)
        if shrink:
            target = allocate(self._policy.shrunk_capacity(storage.capacity))
        else:
            target = storage.slots
        write = 0
        for read, flag in enumerate(keep):
            if flag:
                target[write] = storage.slots[read]
                write += 1
        if shrink:
            storage.replace_slots(target)
        else:
            target[new_size:size] = [EMPTY] * (size - new_size)
        storage.size = new_size

    def append(self, other: Buffer[T]) -> None:
        """Add all elements of ``other`` to the end with at most one reallocation."""
        storage = self._storage
        incoming = other.to_list()
        new_size = storage.size + len(incoming)
        if new_size > storage.capacity:
            storage.reallocate(self._policy.next_capacity(new_size))
        storage.slots[storage.size : new_size] = incoming
        storage.size = new_size

    def reserve(self, capacity: int) -> None:
        """
        Reallocate the storage to exactly ``capacity`` slots.

        Raises
        ------
        CapacityTooSmallError:
            If ``capacity`` is smaller than the current size.
        """
        if capacity < self._storage.size:
            raise CapacityTooSmallError(capacity, self._storage.size)
        self._storage.reallocate(capacity)

    def trim_to_size(self) -> None:
        """Release all unused slots."""
        if self._storage.size < self._storage.capacity:
            self.reserve(self._storage.size)

    def clear(self) -> None:
        """Remove all elements and reset the storage to the default capacity."""
        storage = self._storage
        storage.size = 0
        storage.replace_slots(allocate(self._policy.default_capacity))

    def reverse(self) -> None:
        """Reverse the element order in place."""
        storage = self._storage
        storage.slots[: storage.size] = reversed(storage.slots[: storage.size])

    def sort(self, compare: Compare[T] = natural_order) -> None:
        """Sort the buffer in place. The sort is stable."""
        merge_sort(self._storage, compare)

    def index_of(self, element: T, equal: Equal[T] = natural_equal) -> int | None:
        """Index of the first element equal to ``element``, or None."""
        return search.find_first(self._storage, element, equal)

    def last_index_of(self, element: T, equal: Equal[T] = natural_equal) -> int | None:
        """Index of the last element equal to ``element``, or None."""
        return search.find_last(self._storage, element, equal)

    def binary_search(
        self, element: T, compare: Compare[T] = natural_order
    ) -> int | None:
        """
        Index of some element comparing equal to ``element``, or None.

        The buffer must be sorted ascending by ``compare``, otherwise the result
        is meaningless. With duplicates, any matching index may be returned.
        """
        return search.bisect(self._storage, element, compare)

    def index_of_buffer(
        self, sub: Buffer[T], equal: Equal[T] = natural_equal
    ) -> int | None:
        """Offset of the first occurrence of ``sub`` in this buffer, or None."""
        return search.kmp_search(sub._storage, self._storage, equal)


def index_of_buffer(
    sub: Buffer[T], main: Buffer[T], equal: Equal[T] = natural_equal
) -> int | None:
    """
    Offset of the first occurrence of ``sub`` within ``main``, or None.

    An empty ``sub`` never matches.
    """
    return main.index_of_buffer(sub, equal)


def binary_search(
    element: T, buffer: Buffer[T], compare: Compare[T] = natural_order
) -> int | None:
    """Binary search ``buffer``, which must be sorted ascending by ``compare``."""
    return buffer.binary_search(element, compare)


