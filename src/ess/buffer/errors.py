# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""Exceptions raised by buffer operations."""

from __future__ import annotations


class BufferOperationError(Exception):
    """Base class for all buffer errors."""


class IndexOutOfBoundsError(BufferOperationError, IndexError):
    """Raised by indexed access or mutation with an index outside the buffer."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Index {index} out of bounds for buffer of size {size}")
        self.index = index
        self.size = size


class CapacityTooSmallError(BufferOperationError, ValueError):
    """Raised when a reserve request would not hold the current elements."""

    def __init__(self, capacity: int, size: int) -> None:
        super().__init__(
            f"Capacity {capacity} is smaller than the current size {size}"
        )
        self.capacity = capacity
        self.size = size


class MalformedStateError(BufferOperationError, RuntimeError):
    """
    Raised when the storage engine finds an occupied slot empty.

    This signals a bug in the buffer implementation itself, never a caller error.
    It is not caught anywhere in this package.
    """
