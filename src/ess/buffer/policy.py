# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
"""
Capacity growth and shrink policy.

Growth happens when storage is 100% full, shrinking only when less than
``1/decrease_threshold`` of it is in use. The gap between the two thresholds keeps
alternating add/remove calls near a boundary from reallocating every time.

All arithmetic is integer-only.
"""

from __future__ import annotations

import os
from fractions import Fraction
from importlib import resources
from pathlib import Path
from typing import IO

import yaml
from pydantic import BaseModel, Field, model_validator

POLICY_ENV_VAR = 'ESSBUFFER_POLICY'

INCREASE_FACTOR = Fraction(3, 2)
DECREASE_THRESHOLD = 4
DECREASE_FACTOR = 2
DEFAULT_CAPACITY = 8


class CapacityPolicy(BaseModel, frozen=True, extra='forbid'):
    """
    Policy deciding when and how far a buffer's storage grows or shrinks.

    Parameters
    ----------
    default_capacity:
        Capacity a buffer is reset to by ``clear``.
    increase_numerator:
        Numerator of the growth factor.
    increase_denominator:
        Denominator of the growth factor.
    decrease_threshold:
        Storage shrinks once ``size < capacity // decrease_threshold``.
    decrease_factor:
        Shrinking divides the capacity by this factor. Must be at least 2 so a
        shrink always releases slots.
    """

    default_capacity: int = Field(
        default=DEFAULT_CAPACITY, ge=0, description="Capacity restored by clear."
    )
    increase_numerator: int = Field(
        default=INCREASE_FACTOR.numerator, ge=1, description="Growth numerator."
    )
    increase_denominator: int = Field(
        default=INCREASE_FACTOR.denominator, ge=1, description="Growth denominator."
    )
    decrease_threshold: int = Field(
        default=DECREASE_THRESHOLD, ge=2, description="Shrink threshold divisor."
    )
    decrease_factor: int = Field(
        default=DECREASE_FACTOR, ge=2, description="Shrink divisor."
    )

    @model_validator(mode='after')
    def _check_ratios(self) -> CapacityPolicy:
        if self.increase_numerator <= self.increase_denominator:
            raise ValueError("Growth factor must be greater than 1")
        if self.decrease_threshold < self.decrease_factor:
            # Shrinking would then be able to drop capacity below size.
            raise ValueError("decrease_threshold must be at least decrease_factor")
        return self

    @property
    def increase_factor(self) -> Fraction:
        return Fraction(self.increase_numerator, self.increase_denominator)

    def next_capacity(self, old: int) -> int:
        """
        Capacity following ``old`` on growth.

        Computes ``ceil(old * numerator / denominator)`` without floating point,
        and 1 for an empty storage.
        """
        if old == 0:
            return 1
        num = self.increase_numerator
        den = self.increase_denominator
        return (old * num + den - 1) // den

    def should_shrink(self, size: int, capacity: int) -> bool:
        return size < capacity // self.decrease_threshold

    def shrunk_capacity(self, capacity: int) -> int:
        return capacity // self.decrease_factor


DEFAULT_POLICY = CapacityPolicy()


def next_capacity(old: int) -> int:
    """Next capacity under the default policy, ``(old * 3 + 1) // 2``."""
    return DEFAULT_POLICY.next_capacity(old)


def load_capacity_policy(path: str | Path | None = None) -> CapacityPolicy:
    """
    Load a capacity policy from a YAML file.

    Parameters
    ----------
    path:
        File to read. If None, the file named by the ``ESSBUFFER_POLICY``
        environment variable is used, falling back to the packaged defaults.

    Returns
    -------
    :
        Validated capacity policy.

    Raises
    ------
    FileNotFoundError:
        If the policy file does not exist.
    ValueError:
        If the file is not valid YAML or does not hold a mapping.
    pydantic.ValidationError:
        If the mapping is not a valid policy, including unknown keys.
    """
    if path is None:
        path = os.getenv(POLICY_ENV_VAR)
    if path is None:
        resource = resources.files('ess.buffer').joinpath('policy.yaml')
        with resource.open() as f:
            return _parse_policy(f, 'packaged policy.yaml')
    try:
        with open(path) as f:
            return _parse_policy(f, path)
    except FileNotFoundError:
        raise FileNotFoundError(f"Capacity policy file '{path}' not found") from None


def _parse_policy(stream: IO[str], source: str | Path) -> CapacityPolicy:
    try:
        config_data = yaml.safe_load(stream)
    except yaml.YAMLError as e:
        raise ValueError(
            f"Capacity policy file '{source}' is not valid YAML: {e}"
        ) from e
    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        raise ValueError(
            f"Capacity policy file '{source}' must contain a mapping, "
            f"got {type(config_data).__name__}"
        )
    return CapacityPolicy.model_validate(config_data)
