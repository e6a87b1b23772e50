from __future__ import annotations

from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Deque, FrozenSet, Iterator, List, Optional, Set, Tuple

import numpy as np
from numpy.typing import NDArray

from .encoder import EncodedMatrix, WordMatrix, decode_words
from ..utils.cancellation import CancellationToken
from ..utils.logging_utils import LOGGER
from ..utils.validation import validate_threshold

# (n, rho, decoded pattern) for one qualifying row pair (m, n)
Candidate = Tuple[int, NDArray[np.uint64], NDArray[np.uint8]]


@dataclass(frozen=True)
class Bicluster:
    """
    Rows sharing a 1 on every column of a common pattern.

    Attributes:
        rows: Row indices (0-based).
        cols: Column indices (0-based) set in the pattern.
        pattern: Masked bitwords of the pattern.
        n_features: Column count J of the searched matrix.
    """

    rows: FrozenSet[int]
    cols: FrozenSet[int]
    pattern: Tuple[int, ...]
    n_features: int

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return len(self.cols)

    def pattern_string(self) -> str:
        """Pattern as a length-J string of '0'/'1'."""
        return "".join("1" if j in self.cols else "0" for j in range(self.n_features))


def _pair_candidates(
    words: WordMatrix,
    xenc: EncodedMatrix,
    m: int,
    mnc: int,
    token: Optional[CancellationToken],
) -> List[Candidate]:
    """
    Patterns of every pair (m, n), n > m, with at least `mnc` shared columns,
    in increasing n.
    """
    if token is not None:
        token.raise_if_cancelled()

    rhos = words[m] & words[m + 1:]
    if rhos.shape[0] == 0:
        return []

    patterns = decode_words(rhos, xenc)
    ones = patterns.sum(axis=1, dtype=np.int64)
    keep = np.flatnonzero(ones >= mnc)

    # Copies, so a kept candidate does not pin the whole per-row block
    return [(m + 1 + int(k), rhos[k].copy(), patterns[k].copy()) for k in keep]


def _iter_candidates(
    words: WordMatrix,
    xenc: EncodedMatrix,
    mnc: int,
    token: Optional[CancellationToken],
    max_workers: int,
) -> Iterator[Tuple[int, List[Candidate]]]:
    outer = range(xenc.n_rows - 1)

    if max_workers <= 1:
        for m in outer:
            yield m, _pair_candidates(words, xenc, m, mnc, token)
        return

    # At most `window` outer rows are derived ahead of the consumer; futures
    # are popped in submission order, so pairs are consumed in (m, n) order
    window = 2 * max_workers
    pending: Deque[Future] = deque()
    next_m = 0

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        try:
            while next_m < len(outer) and len(pending) < window:
                pending.append(executor.submit(_pair_candidates, words, xenc, next_m, mnc, token))
                next_m += 1

            for m in outer:
                candidates = pending.popleft().result()
                if next_m < len(outer):
                    pending.append(executor.submit(_pair_candidates, words, xenc, next_m, mnc, token))
                    next_m += 1
                yield m, candidates
        finally:
            for future in pending:
                future.cancel()


def _grow(
    words: WordMatrix,
    rho: NDArray[np.uint64],
    pattern: NDArray[np.uint8],
    m: int,
    n: int,
    n_features: int,
) -> Bicluster:
    """Collect every row whose bits cover the pattern `rho`."""
    contained = np.all((words & rho) == rho, axis=1)
    contained[[m, n]] = True

    return Bicluster(
        rows=frozenset(int(r) for r in np.flatnonzero(contained)),
        cols=frozenset(int(c) for c in np.flatnonzero(pattern)),
        pattern=tuple(int(w) for w in rho),
        n_features=n_features,
    )


def search(
    xenc: EncodedMatrix,
    mnr: int,
    mnc: int,
    token: Optional[CancellationToken] = None,
    max_workers: int = 1,
) -> List[Bicluster]:
    """
    Bibit pairwise pattern search.

    Algorithm:
      - For every row pair (m, n), m < n, in row-index order, AND the two
        encoded rows to get the shared pattern rho.
      - Skip the pair when rho has fewer than `mnc` ones or when the same
        pattern was produced by an earlier pair (first found wins).
      - Otherwise grow the pair: add every other row q with
        rho & X[q] == rho.
      - Keep the bicluster when it has at least `mnr` rows.

    Row growth only runs for new patterns with at least `mnc` ones. Padding
    bits of the last word are masked before any comparison.

    Args:
        xenc: Encoded matrix (not modified).
        mnr: Minimum number of rows.
        mnc: Minimum number of columns.
        token: Optional cancellation token, checked once per outer row.
        max_workers: Threads deriving candidate patterns. Results are
            identical to the sequential search for any value.

    Returns:
        Biclusters in discovery order.

    Raises:
        SearchCancelled: the token fired before the search completed.
    """
    mnr = validate_threshold(mnr, "mnr")
    mnc = validate_threshold(mnc, "mnc")

    words = xenc.masked(xenc.words)
    seen: Set[bytes] = set()
    biclusters: List[Bicluster] = []

    for m, candidates in _iter_candidates(words, xenc, mnc, token, max_workers):
        if token is not None:
            token.raise_if_cancelled()

        for n, rho, pattern in candidates:
            key = pattern.tobytes()
            if key in seen:
                continue
            seen.add(key)

            bicluster = _grow(words, rho, pattern, m, n, xenc.n_cols)
            if bicluster.n_rows >= mnr:
                biclusters.append(bicluster)

    LOGGER.debug(
        f"search bwl={xenc.bwl} mnr={mnr} mnc={mnc}: "
        f"{len(seen)} unique patterns, {len(biclusters)} biclusters"
    )
    return biclusters
