# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""Command-line tool to profile buffer capacity behaviour.

Runs a synthetic workload against a Buffer and reports how often its storage
was reallocated and how its capacity evolved. Useful for checking that growth
stays amortized O(1) and that add/remove alternation near the shrink boundary
does not thrash.
"""
# ruff: noqa: T201  # print is appropriate for CLI output

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np
import structlog

from ..buffer import Buffer
from ..logging_config import configure_logging
from ..policy import DEFAULT_CAPACITY, CapacityPolicy, load_capacity_policy

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ProfileReport:
    """Outcome of a profiling run."""

    workload: str
    operations: int
    reallocations: int
    final_size: int
    final_capacity: int
    max_capacity: int
    mean_capacity: float

    def format(self) -> str:
        rows = [
            ('workload', self.workload),
            ('operations', str(self.operations)),
            ('reallocations', str(self.reallocations)),
            ('final size', str(self.final_size)),
            ('final capacity', str(self.final_capacity)),
            ('max capacity', str(self.max_capacity)),
            ('mean capacity', f'{self.mean_capacity:.1f}'),
        ]
        width = max(len(name) for name, _ in rows)
        return '\n'.join(f'{name:<{width}}  {value}' for name, value in rows)


def _append(buffer: Buffer[int], operations: int, rng: np.random.Generator):
    for i in range(operations):
        buffer.add(i)
        yield


def _thrash(buffer: Buffer[int], operations: int, rng: np.random.Generator):
    # Park the size right at the shrink boundary, then alternate around it.
    boundary = max(1, buffer.capacity // buffer.policy.decrease_threshold)
    for i in range(boundary):
        buffer.add(i)
    for i in range(operations):
        if i % 2 == 0:
            buffer.remove_last()
        else:
            buffer.add(i)
        yield


def _random(buffer: Buffer[int], operations: int, rng: np.random.Generator):
    inserts = rng.random(operations) < 0.55
    positions = rng.random(operations)
    for i in range(operations):
        if inserts[i] or buffer.size == 0:
            buffer.insert(int(positions[i] * (buffer.size + 1)), i)
        else:
            buffer.remove(int(positions[i] * buffer.size))
        yield


def _sort(buffer: Buffer[int], operations: int, rng: np.random.Generator):
    for value in rng.integers(0, max(1, operations // 4), size=operations):
        buffer.add(int(value))
    buffer.sort()
    for _ in range(operations):
        yield


WORKLOADS: dict[str, Callable] = {
    'append': _append,
    'thrash': _thrash,
    'random': _random,
    'sort': _sort,
}


def run_workload(
    workload: str,
    *,
    operations: int,
    seed: int | None = None,
    initial_capacity: int = DEFAULT_CAPACITY,
    policy: CapacityPolicy | None = None,
) -> ProfileReport:
    """
    Run a named workload and collect capacity statistics.

    Parameters
    ----------
    workload:
        One of the keys of ``WORKLOADS``.
    operations:
        Number of buffer operations to perform.
    seed:
        Seed for the random workloads.
    initial_capacity:
        Initial capacity of the profiled buffer.
    policy:
        Capacity policy of the profiled buffer.

    Returns
    -------
    :
        Summary of the run.
    """
    if workload not in WORKLOADS:
        raise ValueError(f"Unknown workload: {workload}")
    if operations <= 0:
        raise ValueError("operations must be positive")
    rng = np.random.default_rng(seed)
    buffer: Buffer[int] = Buffer(initial_capacity, policy=policy)
    capacities = np.empty(operations, dtype=np.int64)
    for step, _ in enumerate(WORKLOADS[workload](buffer, operations, rng)):
        capacities[step] = buffer.capacity
    buffer.check_invariants()
    report = ProfileReport(
        workload=workload,
        operations=operations,
        reallocations=buffer.reallocations,
        final_size=buffer.size,
        final_capacity=buffer.capacity,
        max_capacity=int(capacities.max()),
        mean_capacity=float(capacities.mean()),
    )
    logger.info(
        'profile_finished',
        workload=workload,
        operations=operations,
        reallocations=report.reallocations,
    )
    return report


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the buffer profiling tool."""
    parser = argparse.ArgumentParser(
        description="Profile capacity growth and shrinking of ess.buffer.Buffer"
    )
    parser.add_argument(
        "--workload",
        choices=sorted(WORKLOADS),
        default="append",
        help="Workload to run (default: append)",
    )
    parser.add_argument(
        "--operations",
        "-n",
        type=int,
        default=10_000,
        help="Number of buffer operations (default: 10000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the random and sort workloads",
    )
    parser.add_argument(
        "--initial-capacity",
        type=int,
        default=DEFAULT_CAPACITY,
        help=f"Initial buffer capacity (default: {DEFAULT_CAPACITY})",
    )
    parser.add_argument(
        "--policy",
        default=None,
        help="YAML file with a capacity policy (default: packaged policy)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Log level; DEBUG shows every reallocation (default: WARNING)",
    )
    parser.add_argument(
        "--log-json",
        default=None,
        help="Also write JSON logs to this file",
    )
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level, json_file=args.log_json)

    try:
        policy = load_capacity_policy(args.policy)
        report = run_workload(
            args.workload,
            operations=args.operations,
            seed=args.seed,
            initial_capacity=args.initial_capacity,
            policy=policy,
        )
    except (OSError, ValueError) as e:
        logger.error('profile_failed', error=str(e))
        return 1

    print(report.format())
    return 0


if __name__ == "__main__":
    sys.exit(main())
