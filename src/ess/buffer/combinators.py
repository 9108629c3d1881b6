# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""
Derived operations over buffers.

Everything here is built from the public buffer contract only: ``size``,
``get``, ``add``, ``put``, iteration and, for :func:`remove_duplicates`,
``sort`` and ``filter_entries``. Results are new buffers using the policy of
the (first) input buffer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from .buffer import Buffer
from .errors import IndexOutOfBoundsError
from .order import Compare, Equal, Order, natural_equal, natural_order

T = TypeVar('T')
U = TypeVar('U')
V = TypeVar('V')


def _new(like: Buffer[Any], capacity: int) -> Buffer[Any]:
    return Buffer(capacity, policy=like.policy)


def map_buffer(buffer: Buffer[T], f: Callable[[T], U]) -> Buffer[U]:
    result = _new(buffer, buffer.capacity)
    for element in buffer:
        result.add(f(element))
    return result


def map_entries(buffer: Buffer[T], f: Callable[[int, T], U]) -> Buffer[U]:
    result = _new(buffer, buffer.capacity)
    for index, element in enumerate(buffer):
        result.add(f(index, element))
    return result


def map_filter(buffer: Buffer[T], f: Callable[[T], U | None]) -> Buffer[U]:
    """Map ``f`` over the buffer, dropping elements for which it returns None."""
    result = _new(buffer, buffer.capacity)
    for element in buffer:
        mapped = f(element)
        if mapped is not None:
            result.add(mapped)
    return result


def filter_buffer(buffer: Buffer[T], predicate: Callable[[T], bool]) -> Buffer[T]:
    """New buffer with the elements satisfying ``predicate``."""
    result = _new(buffer, buffer.capacity)
    for element in buffer:
        if predicate(element):
            result.add(element)
    return result


def chain(buffer: Buffer[T], k: Callable[[T], Buffer[U]]) -> Buffer[U]:
    """Concatenate the buffers produced by applying ``k`` to each element."""
    result = _new(buffer, buffer.capacity)
    for element in buffer:
        result.append(k(element))
    return result


def fold_left(buffer: Buffer[T], base: U, combine: Callable[[U, T], U]) -> U:
    accumulation = base
    for element in buffer:
        accumulation = combine(accumulation, element)
    return accumulation


def fold_right(buffer: Buffer[T], base: U, combine: Callable[[T, U], U]) -> U:
    accumulation = base
    for index in range(buffer.size - 1, -1, -1):
        accumulation = combine(buffer.get(index), accumulation)
    return accumulation


def for_all(buffer: Buffer[T], predicate: Callable[[T], bool]) -> bool:
    return all(predicate(element) for element in buffer)


def for_some(buffer: Buffer[T], predicate: Callable[[T], bool]) -> bool:
    return any(predicate(element) for element in buffer)


def for_none(buffer: Buffer[T], predicate: Callable[[T], bool]) -> bool:
    return not for_some(buffer, predicate)


def contains(
    buffer: Buffer[T], element: T, element_equal: Equal[T] = natural_equal
) -> bool:
    return any(element_equal(current, element) for current in buffer)


def max_of(buffer: Buffer[T], element_compare: Compare[T] = natural_order) -> T | None:
    """Largest element, the first of several equal ones, or None if empty."""
    if buffer.size == 0:
        return None
    best = buffer.get(0)
    for element in buffer:
        if element_compare(element, best) is Order.GREATER:
            best = element
    return best


def min_of(buffer: Buffer[T], element_compare: Compare[T] = natural_order) -> T | None:
    """Smallest element, the first of several equal ones, or None if empty."""
    if buffer.size == 0:
        return None
    best = buffer.get(0)
    for element in buffer:
        if element_compare(element, best) is Order.LESS:
            best = element
    return best


def zip_with(
    left: Buffer[T], right: Buffer[U], f: Callable[[T, U], V]
) -> Buffer[V]:
    """Combine elements pairwise; the result is as long as the shorter input."""
    size = min(left.size, right.size)
    result = _new(left, size)
    for index in range(size):
        result.add(f(left.get(index), right.get(index)))
    return result


def zip_buffers(left: Buffer[T], right: Buffer[U]) -> Buffer[tuple[T, U]]:
    return zip_with(left, right, lambda x, y: (x, y))


def partition(
    buffer: Buffer[T], predicate: Callable[[T], bool]
) -> tuple[Buffer[T], Buffer[T]]:
    """Split into the elements satisfying ``predicate`` and the rest."""
    true_buffer = _new(buffer, buffer.capacity)
    false_buffer = _new(buffer, buffer.capacity)
    for element in buffer:
        if predicate(element):
            true_buffer.add(element)
        else:
            false_buffer.add(element)
    return true_buffer, false_buffer


def sub_buffer(buffer: Buffer[T], start: int, length: int) -> Buffer[T]:
    """
    Copy of ``length`` elements beginning at ``start``.

    Raises
    ------
    IndexOutOfBoundsError:
        If the range does not lie within the buffer.
    """
    end = start + length
    if start < 0 or length < 0 or end > buffer.size:
        raise IndexOutOfBoundsError(end, buffer.size)
    result = _new(buffer, length)
    for index in range(start, end):
        result.add(buffer.get(index))
    return result


def prefix(buffer: Buffer[T], length: int) -> Buffer[T]:
    return sub_buffer(buffer, 0, length)


def suffix(buffer: Buffer[T], length: int) -> Buffer[T]:
    if length > buffer.size:
        raise IndexOutOfBoundsError(length, buffer.size)
    return sub_buffer(buffer, buffer.size - length, length)


def split(buffer: Buffer[T], index: int) -> tuple[Buffer[T], Buffer[T]]:
    """
    Split into elements before ``index`` and from ``index`` onward.

    Raises
    ------
    IndexOutOfBoundsError:
        If ``index`` is not in ``[0, size]``.
    """
    if not 0 <= index <= buffer.size:
        raise IndexOutOfBoundsError(index, buffer.size)
    return prefix(buffer, index), sub_buffer(buffer, index, buffer.size - index)


def chunk(buffer: Buffer[T], size: int) -> Buffer[Buffer[T]]:
    """
    Break the buffer into consecutive chunks of ``size`` elements.

    The last chunk may be shorter.

    Raises
    ------
    ValueError:
        If ``size`` is not positive.
    """
    if size <= 0:
        raise ValueError("Chunk size must be positive")
    result: Buffer[Buffer[T]] = _new(buffer, -(-buffer.size // size))
    current = _new(buffer, size)
    for element in buffer:
        current.add(element)
        if current.size == size:
            result.add(current)
            current = _new(buffer, size)
    if current.size > 0:
        result.add(current)
    return result


def group_by(
    buffer: Buffer[T], element_equal: Equal[T] = natural_equal
) -> Buffer[Buffer[T]]:
    """Group runs of adjacent elements that are equal to their predecessor."""
    result: Buffer[Buffer[T]] = _new(buffer, buffer.capacity)
    current: Buffer[T] | None = None
    previous: Any = None
    for element in buffer:
        if current is None or not element_equal(previous, element):
            current = _new(buffer, 1)
            result.add(current)
        current.add(element)
        previous = element
    return result


def flatten(buffers: Buffer[Buffer[T]]) -> Buffer[T]:
    total = sum(inner.size for inner in buffers)
    result = _new(buffers, total)
    for inner in buffers:
        result.append(inner)
    return result


def take_while(buffer: Buffer[T], predicate: Callable[[T], bool]) -> Buffer[T]:
    result = _new(buffer, buffer.capacity)
    for element in buffer:
        if not predicate(element):
            break
        result.add(element)
    return result


def drop_while(buffer: Buffer[T], predicate: Callable[[T], bool]) -> Buffer[T]:
    start = 0
    while start < buffer.size and predicate(buffer.get(start)):
        start += 1
    return sub_buffer(buffer, start, buffer.size - start)


def is_prefix_of(
    head: Buffer[T], buffer: Buffer[T], element_equal: Equal[T] = natural_equal
) -> bool:
    if head.size > buffer.size:
        return False
    return all(
        element_equal(head.get(index), buffer.get(index)) for index in range(head.size)
    )


def is_strict_prefix_of(
    head: Buffer[T], buffer: Buffer[T], element_equal: Equal[T] = natural_equal
) -> bool:
    return head.size < buffer.size and is_prefix_of(head, buffer, element_equal)


def is_suffix_of(
    tail: Buffer[T], buffer: Buffer[T], element_equal: Equal[T] = natural_equal
) -> bool:
    offset = buffer.size - tail.size
    if offset < 0:
        return False
    return all(
        element_equal(tail.get(index), buffer.get(offset + index))
        for index in range(tail.size)
    )


def is_strict_suffix_of(
    tail: Buffer[T], buffer: Buffer[T], element_equal: Equal[T] = natural_equal
) -> bool:
    return tail.size < buffer.size and is_suffix_of(tail, buffer, element_equal)


def is_sub_buffer_of(
    sub: Buffer[T], buffer: Buffer[T], element_equal: Equal[T] = natural_equal
) -> bool:
    """
    Whether ``sub`` occurs contiguously in ``buffer``.

    The empty buffer is a sub-buffer of every buffer.
    """
    if sub.size == 0:
        return True
    return buffer.index_of_buffer(sub, element_equal) is not None


def is_strict_sub_buffer_of(
    sub: Buffer[T], buffer: Buffer[T], element_equal: Equal[T] = natural_equal
) -> bool:
    return sub.size < buffer.size and is_sub_buffer_of(sub, buffer, element_equal)


def equal(
    left: Buffer[T], right: Buffer[T], element_equal: Equal[T] = natural_equal
) -> bool:
    """Element-wise equality of two buffers."""
    if left.size != right.size:
        return False
    return all(
        element_equal(left.get(index), right.get(index)) for index in range(left.size)
    )


def compare(
    left: Buffer[T], right: Buffer[T], element_compare: Compare[T] = natural_order
) -> Order:
    """Lexicographic comparison of two buffers."""
    for index in range(min(left.size, right.size)):
        order = element_compare(left.get(index), right.get(index))
        if order is not Order.EQUAL:
            return order
    return natural_order(left.size, right.size)


def hash_buffer(buffer: Buffer[T], hash_fn: Callable[[T], int] = hash) -> int:
    """Hash of the element sequence, consistent with :func:`equal`."""
    return hash(tuple(hash_fn(element) for element in buffer))


def to_text(buffer: Buffer[T], render: Callable[[T], str] = str) -> str:
    """Render as ``[a, b, c]``."""
    return '[' + ', '.join(render(element) for element in buffer) + ']'


def merge(
    left: Buffer[T], right: Buffer[T], element_compare: Compare[T] = natural_order
) -> Buffer[T]:
    """
    Merge two buffers sorted by ``element_compare`` into one sorted buffer.

    On ties the element from ``left`` comes first.
    """
    result = _new(left, left.size + right.size)
    i = 0
    j = 0
    while i < left.size and j < right.size:
        if element_compare(left.get(i), right.get(j)) is Order.GREATER:
            result.add(right.get(j))
            j += 1
        else:
            result.add(left.get(i))
            i += 1
    while i < left.size:
        result.add(left.get(i))
        i += 1
    while j < right.size:
        result.add(right.get(j))
        j += 1
    return result


def remove_duplicates(
    buffer: Buffer[T], element_compare: Compare[T] = natural_order
) -> None:
    """
    Remove duplicate elements in place, keeping the first occurrence of each.

    Index/element pairs are sorted stably by element, so the first pair of each
    run of equal elements carries the earliest index. Only those indices are kept.
    """
    size = buffer.size
    if size < 2:
        return
    pairs: Buffer[tuple[int, T]] = _new(buffer, size)
    for index, element in enumerate(buffer):
        pairs.add((index, element))
    pairs.sort(lambda x, y: element_compare(x[1], y[1]))

    keep = [False] * size
    run_start = pairs.get(0)
    keep[run_start[0]] = True
    for pair in pairs:
        if element_compare(run_start[1], pair[1]) is not Order.EQUAL:
            run_start = pair
            keep[pair[0]] = True
    buffer.filter_entries(lambda index, _: keep[index])
