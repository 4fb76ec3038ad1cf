"""Exact repetition matching over a symbol sequence.

Symbols are interned to small integers and indexed with a suffix array plus
an LCP array, which answers the questions loop selection needs:

* the globally longest length ``L`` at which a run of symbols occurs at two
  different starts,
* every pair of starts that reaches ``L`` (more than one pair means the
  longest repeat is ambiguous),
* for any start, the longest run beginning there that also occurs at some
  other start (its *extent*).

Overlapping occurrences count: in ``ABABAB`` the run ``ABAB`` occurs at 0 and
at 2.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations, islice
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepeatPair:
    first: int
    second: int
    length: int


def intern_symbols(symbols: Sequence[Hashable]) -> List[int]:
    """Replace each symbol by the index of its first distinct appearance."""

    table: Dict[Hashable, int] = {}
    return [table.setdefault(symbol, len(table)) for symbol in symbols]


def build_suffix_array(seq: Sequence[int]) -> List[int]:
    """Prefix-doubling suffix array construction, O(n log^2 n)."""

    n = len(seq)
    sa = list(range(n))
    if n < 2:
        return sa

    rank = list(seq)
    k = 1
    while True:

        def key(i: int, k: int = k, rank: List[int] = rank) -> Tuple[int, int]:
            return (rank[i], rank[i + k] if i + k < n else -1)

        sa.sort(key=key)
        new_rank = [0] * n
        for prev, cur in zip(sa, sa[1:]):
            new_rank[cur] = new_rank[prev] + (key(prev) != key(cur))
        rank = new_rank
        if rank[sa[-1]] == n - 1 or k >= n:
            break
        k <<= 1
    return sa


def build_lcp_array(seq: Sequence[int], sa: Sequence[int]) -> List[int]:
    """Kasai's algorithm: ``lcp[r]`` is the common prefix of ``sa[r-1]`` and ``sa[r]``."""

    n = len(seq)
    rank = [0] * n
    for r, pos in enumerate(sa):
        rank[pos] = r

    lcp = [0] * n
    h = 0
    for i in range(n):
        r = rank[i]
        if r == 0:
            h = 0
            continue
        j = sa[r - 1]
        while i + h < n and j + h < n and seq[i + h] == seq[j + h]:
            h += 1
        lcp[r] = h
        if h:
            h -= 1
    return lcp


class RepeatIndex:
    """Longest-common-extension index over one symbol sequence."""

    def __init__(self, symbols: Sequence[Hashable]):
        self.seq = intern_symbols(symbols)
        self.sa = build_suffix_array(self.seq)
        self.lcp = build_lcp_array(self.seq, self.sa)
        self.rank = [0] * len(self.seq)
        for r, pos in enumerate(self.sa):
            self.rank[pos] = r
        self.max_length = max(self.lcp, default=0)

    def __len__(self) -> int:
        return len(self.seq)

    def _maximal_blocks(self) -> List[List[int]]:
        """Sorted starts of each suffix-array block sharing the longest prefix."""

        length = self.max_length
        if length == 0:
            return []

        blocks: List[List[int]] = []
        n = len(self.seq)
        r = 1
        while r < n:
            if self.lcp[r] != length:
                r += 1
                continue
            block_start = r - 1
            while r < n and self.lcp[r] == length:
                r += 1
            blocks.append(sorted(self.sa[block_start:r]))
        return blocks

    def maximal_pair_count(self) -> int:
        """Number of start pairs whose common run has length ``max_length``.

        A block of ``m`` suffixes sharing the longest prefix yields
        ``m * (m - 1) / 2`` pairs.
        """

        return sum(len(b) * (len(b) - 1) // 2 for b in self._maximal_blocks())

    def maximal_pairs(self, limit: Optional[int] = None) -> List[RepeatPair]:
        """Pairs of distinct starts whose common run has length ``max_length``.

        Pairs are ordered by ``(first, second)``; ``limit`` keeps only the
        first ones without building the rest.
        """

        pairs: List[RepeatPair] = []
        for starts in self._maximal_blocks():
            # combinations() of a sorted block is already in (first, second) order
            for a, b in islice(combinations(starts, 2), limit):
                pairs.append(RepeatPair(first=a, second=b, length=self.max_length))
        pairs.sort(key=lambda p: (p.first, p.second))
        return pairs[:limit]

    def extent(self, start: int) -> int:
        """Longest run beginning at ``start`` that also begins somewhere else."""

        r = self.rank[start]
        best = self.lcp[r]
        if r + 1 < len(self.lcp):
            best = max(best, self.lcp[r + 1])
        return best

    def occurrences(self, start: int, length: int) -> List[int]:
        """Every start (ascending) of the run ``seq[start:start+length]``."""

        r = self.rank[start]
        found = [start]
        lo = r
        while lo > 0 and self.lcp[lo] >= length:
            lo -= 1
            found.append(self.sa[lo])
        hi = r + 1
        while hi < len(self.sa) and self.lcp[hi] >= length:
            found.append(self.sa[hi])
            hi += 1
        return sorted(found)

    def partner(self, start: int, length: int) -> Optional[int]:
        """Smallest other start whose run of ``length`` symbols equals ``start``'s."""

        others = [pos for pos in self.occurrences(start, length) if pos != start]
        return others[0] if others else None


def find_repeats(symbols: Sequence[Hashable]) -> RepeatIndex:
    index = RepeatIndex(symbols)
    logger.debug(
        "repeat index over %d symbols: longest repeat %d", len(index), index.max_length
    )
    return index
