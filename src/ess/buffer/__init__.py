# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
# ruff: noqa: E402, I

import importlib.metadata

try:
    __version__ = importlib.metadata.version("essbuffer")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

del importlib

from .buffer import Buffer, BufferIterator, binary_search, index_of_buffer
from .errors import (
    BufferOperationError,
    CapacityTooSmallError,
    IndexOutOfBoundsError,
    MalformedStateError,
)
from .order import Order, natural_equal, natural_order, reverse_order
from .policy import (
    DECREASE_FACTOR,
    DECREASE_THRESHOLD,
    DEFAULT_CAPACITY,
    DEFAULT_POLICY,
    INCREASE_FACTOR,
    CapacityPolicy,
    load_capacity_policy,
    next_capacity,
)

__all__ = [
    "DECREASE_FACTOR",
    "DECREASE_THRESHOLD",
    "DEFAULT_CAPACITY",
    "DEFAULT_POLICY",
    "INCREASE_FACTOR",
    "Buffer",
    "BufferIterator",
    "BufferOperationError",
    "CapacityPolicy",
    "CapacityTooSmallError",
    "IndexOutOfBoundsError",
    "MalformedStateError",
    "Order",
    "binary_search",
    "index_of_buffer",
    "load_capacity_policy",
    "natural_equal",
    "natural_order",
    "next_capacity",
    "reverse_order",
]
