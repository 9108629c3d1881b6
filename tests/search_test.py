# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
import numpy as np
import pytest

from ess.buffer import Buffer, Order, binary_search, index_of_buffer
from ess.buffer.search import lps_table
from ess.buffer.storage import Storage


def _storage(values: list) -> Storage:
    return Buffer.from_iterable(values)._storage


def case_insensitive(left: str, right: str) -> bool:
    return left.lower() == right.lower()


class TestLinearSearch:
    def test_index_of_returns_first(self) -> None:
        buffer = Buffer.from_iterable([1, 2, 3, 2])
        assert buffer.index_of(2) == 1

    def test_last_index_of_returns_last(self) -> None:
        buffer = Buffer.from_iterable([1, 2, 3, 2])
        assert buffer.last_index_of(2) == 3

    def test_missing(self) -> None:
        buffer = Buffer.from_iterable([1, 2, 3])
        assert buffer.index_of(4) is None
        assert buffer.last_index_of(4) is None

    def test_empty(self) -> None:
        assert Buffer().index_of(1) is None
        assert Buffer().last_index_of(1) is None

    def test_custom_equality(self) -> None:
        buffer = Buffer.from_iterable(['a', 'B', 'b'])
        assert buffer.index_of('b', case_insensitive) == 1
        assert buffer.last_index_of('A', case_insensitive) == 0


class TestBinarySearch:
    def test_found(self) -> None:
        buffer = Buffer.from_iterable([1, 4, 5, 6])
        assert buffer.binary_search(5) == 2

    def test_missing(self) -> None:
        buffer = Buffer.from_iterable([1, 4, 5, 6])
        assert buffer.binary_search(3) is None
        assert buffer.binary_search(0) is None
        assert buffer.binary_search(7) is None

    def test_empty(self) -> None:
        assert Buffer().binary_search(1) is None

    def test_every_element_is_found(self) -> None:
        values = list(range(0, 200, 3))
        buffer = Buffer.from_iterable(values)
        for index, value in enumerate(values):
            assert buffer.binary_search(value) == index

    def test_duplicates_return_some_matching_index(self) -> None:
        buffer = Buffer.from_iterable([1, 2, 2, 2, 2, 3])
        index = buffer.binary_search(2)
        assert index is not None
        assert buffer.get(index) == 2

    def test_custom_comparison(self) -> None:
        def by_length(left: str, right: str) -> Order:
            if len(left) < len(right):
                return Order.LESS
            if len(left) > len(right):
                return Order.GREATER
            return Order.EQUAL

        buffer = Buffer.from_iterable(['a', 'bb', 'ccc'])
        assert buffer.binary_search('xx', by_length) == 1

    def test_module_function(self) -> None:
        assert binary_search(6, Buffer.from_iterable([1, 4, 5, 6])) == 3


class TestLpsTable:
    @pytest.mark.parametrize(
        ('pattern', 'expected'),
        [
            ('AAACAAAA', [0, 1, 2, 0, 1, 2, 3, 3]),
            ('ABABCABAB', [0, 0, 1, 2, 0, 1, 2, 3, 4]),
            ('ABCD', [0, 0, 0, 0]),
            ('A', [0]),
            ('', []),
        ],
    )
    def test_known_tables(self, pattern: str, expected: list[int]) -> None:
        assert lps_table(_storage(list(pattern)), lambda x, y: x == y) == expected


class TestIndexOfBuffer:
    def test_found_at_end(self) -> None:
        main = Buffer.from_iterable([1, 2, 3, 4, 5, 6])
        sub = Buffer.from_iterable([4, 5, 6])
        assert index_of_buffer(sub, main) == 3

    def test_empty_pattern_never_matches(self) -> None:
        main = Buffer.from_iterable([1, 2, 3])
        assert index_of_buffer(Buffer(), main) is None
        assert index_of_buffer(Buffer(), Buffer()) is None

    def test_longer_pattern_never_matches(self) -> None:
        main = Buffer.from_iterable([1, 2])
        assert index_of_buffer(Buffer.from_iterable([1, 2, 3]), main) is None

    def test_whole_buffer(self) -> None:
        main = Buffer.from_iterable([1, 2, 3])
        assert main.index_of_buffer(main.clone()) == 0

    def test_no_match(self) -> None:
        main = Buffer.from_iterable([1, 2, 3, 4])
        assert main.index_of_buffer(Buffer.from_iterable([2, 4])) is None

    def test_first_of_several_occurrences(self) -> None:
        main = Buffer.from_iterable([1, 2, 1, 2, 1, 2])
        assert main.index_of_buffer(Buffer.from_iterable([2, 1])) == 1

    @pytest.mark.parametrize(
        ('text', 'pattern', 'expected'),
        [
            ('AAAB', 'AAB', 1),
            ('ABABAC', 'ABAC', 2),
            ('ABABDABACDABABCABAB', 'ABABCABAB', 10),
            ('AABAACAADAABAABA', 'AABA', 0),
        ],
    )
    def test_mismatch_after_partial_match(
        self, text: str, pattern: str, expected: int
    ) -> None:
        main = Buffer.from_iterable(list(text))
        sub = Buffer.from_iterable(list(pattern))
        assert main.index_of_buffer(sub) == expected

    def test_custom_equality_gets_pattern_element_first(self) -> None:
        calls = []

        def equal(pattern_element: str, text_element: str) -> bool:
            calls.append((pattern_element, text_element))
            return case_insensitive(pattern_element, text_element)

        main = Buffer.from_iterable(['x', 'A', 'b'])
        sub = Buffer.from_iterable(['a', 'B'])
        assert index_of_buffer(sub, main, equal) == 1
        assert ('a', 'x') in calls
        assert ('x', 'a') not in calls

    @pytest.mark.parametrize('seed', range(5))
    def test_matches_naive_search(self, seed: int) -> None:
        rng = np.random.default_rng(seed)
        for _ in range(200):
            text = [int(x) for x in rng.integers(0, 2, size=rng.integers(0, 12))]
            pattern = [int(x) for x in rng.integers(0, 2, size=rng.integers(1, 5))]
            expected = next(
                (
                    offset
                    for offset in range(len(text) - len(pattern) + 1)
                    if text[offset : offset + len(pattern)] == pattern
                ),
                None,
            )
            main = Buffer.from_iterable(text)
            sub = Buffer.from_iterable(pattern)
            assert main.index_of_buffer(sub) == expected
