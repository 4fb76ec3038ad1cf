"""Tests for the suffix-array repetition index."""

from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from mly.repeats import (  # noqa: E402
    RepeatPair,
    build_lcp_array,
    build_suffix_array,
    find_repeats,
    intern_symbols,
)


def _naive_suffix_array(seq):
    return sorted(range(len(seq)), key=lambda i: list(seq[i:]))


@pytest.mark.parametrize(
    "text",
    ["", "A", "ABABAB", "ABCABCD", "banana", "mississippi", "AAAAAAA"],
)
def test_suffix_array_matches_naive_sort(text: str) -> None:
    seq = [ord(c) for c in text]
    assert build_suffix_array(seq) == _naive_suffix_array(seq)


def test_lcp_array_for_banana() -> None:
    seq = [ord(c) for c in "banana"]
    sa = build_suffix_array(seq)
    # a, ana, anana, banana, na, nana
    assert sa == [5, 3, 1, 0, 4, 2]
    assert build_lcp_array(seq, sa) == [0, 1, 3, 0, 0, 2]


def test_intern_symbols_is_first_appearance_order() -> None:
    assert intern_symbols(["x", "y", "x", ("t", 1), "y"]) == [0, 1, 0, 2, 1]


def test_tandem_repeat_is_unique_pair() -> None:
    index = find_repeats(list("ABCABCD"))
    assert index.max_length == 3
    assert index.maximal_pairs() == [RepeatPair(first=0, second=3, length=3)]


def test_overlapping_repeat_counts_once() -> None:
    """ABABAB: ABAB occurs at 0 and 2; the shorter AB repeats do not matter."""
    index = find_repeats(list("ABABAB"))
    assert index.max_length == 4
    assert index.maximal_pairs() == [RepeatPair(first=0, second=2, length=4)]


def test_two_independent_pairs_at_max_length() -> None:
    index = find_repeats(list("ABXABYCDZCD"))
    assert index.max_length == 2
    assert index.maximal_pairs() == [
        RepeatPair(first=0, second=3, length=2),
        RepeatPair(first=6, second=9, length=2),
    ]


def test_three_occurrences_give_three_pairs() -> None:
    index = find_repeats(list("AXAYA"))
    assert index.max_length == 1
    assert [(p.first, p.second) for p in index.maximal_pairs()] == [
        (0, 2),
        (0, 4),
        (2, 4),
    ]


def test_no_repeat() -> None:
    index = find_repeats(list("ABCD"))
    assert index.max_length == 0
    assert index.maximal_pairs() == []
    assert [index.extent(i) for i in range(4)] == [0, 0, 0, 0]


def test_extent_per_start() -> None:
    index = find_repeats(list("ABCABCD"))
    assert [index.extent(i) for i in range(7)] == [3, 2, 1, 3, 2, 1, 0]


def test_occurrences_and_partner() -> None:
    index = find_repeats(list("ABABAB"))
    assert index.occurrences(0, 2) == [0, 2, 4]
    assert index.occurrences(2, 4) == [0, 2]
    assert index.partner(2, 4) == 0
    assert index.partner(0, 4) == 2
    assert index.partner(0, 5) is None


def test_tuple_symbols() -> None:
    symbols = [("on", 60), ("off", 60), ("on", 60), ("off", 60), ("on", 62)]
    index = find_repeats(symbols)
    assert index.max_length == 2
    assert index.maximal_pairs() == [RepeatPair(first=0, second=2, length=2)]


def test_pair_count_for_one_symbol_repeated_many_times() -> None:
    symbols = []
    for i in range(3000):
        symbols.extend(["X", f"u{i}"])
    index = find_repeats(symbols)
    assert index.max_length == 1
    assert index.maximal_pair_count() == 3000 * 2999 // 2
    assert [(p.first, p.second) for p in index.maximal_pairs(limit=4)] == [
        (0, 2),
        (0, 4),
        (0, 6),
        (0, 8),
    ]


def test_pair_count_matches_pair_list() -> None:
    for text in ("ABCABCD", "ABABAB", "ABXABYCDZCD", "AXAYA", "ABCD"):
        index = find_repeats(list(text))
        assert index.maximal_pair_count() == len(index.maximal_pairs())


def test_limited_pairs_are_the_smallest_across_blocks() -> None:
    index = find_repeats(list("ABXABYCDZCD"))
    assert index.maximal_pairs(limit=1) == [RepeatPair(first=0, second=3, length=2)]
