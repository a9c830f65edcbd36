"""Longest common substring over byte strings.

`longest_common_substring` is the exact primitive. It costs O(|a|*|b|) in the
worst case, which is too slow when a short query is compared against a long
article, so `lcss_chunked` slices the longer input into windows sized from
the shorter one and runs the primitive per window.
"""

from __future__ import annotations

import logging

from cofacts_match.core.config import MatchSettings
from cofacts_match.core.utils import chunk_bytes

logger = logging.getLogger(__name__)


def longest_common_substring(a: bytes, b: bytes) -> bytes:
    """Return the longest byte run that occurs in both `a` and `b`.

    Ties go to the run starting earliest in `a`, then earliest in `b`.
    Returns b"" when the inputs share no byte.
    """
    if not a or not b:
        return b""

    # Positions of every byte value in b, ascending.
    index: dict[int, list[int]] = {}
    for j, byte in enumerate(b):
        index.setdefault(byte, []).append(j)

    best_i = best_j = best_len = 0
    # run[j] = length of the common run ending at a[i - 1] and b[j].
    run: dict[int, int] = {}
    for i, byte in enumerate(a):
        next_run: dict[int, int] = {}
        for j in index.get(byte, ()):
            k = run.get(j - 1, 0) + 1
            next_run[j] = k
            if k > best_len:
                best_i, best_j, best_len = i - k + 1, j - k + 1, k
        run = next_run

    return a[best_i : best_i + best_len]


def lcss_chunked(a: bytes, b: bytes, *, settings: MatchSettings | None = None) -> bytes:
    """Longest common substring, windowing the longer input when lengths differ a lot.

    The longer input is cut into windows of `window_multiplier * len(short)`
    bytes twice: once from offset 0 and once from offset `len(short)`. With
    the default multiplier of 2, a common run of at most `len(short)` bytes
    that crosses a boundary in the first pass lies wholly inside a window of
    the second pass, so nothing is lost compared to the unchunked primitive.

    For a 10 byte `a` the windows are [0:20], [20:40], ... and
    [10:30], [30:50], ...
    """
    settings = settings or MatchSettings()
    if len(a) > len(b):
        a, b = b, a

    if len(a) * settings.chunk_ratio > len(b):
        return longest_common_substring(a, b)

    if not a:
        return b""

    size = settings.window_multiplier * len(a)
    best = b""
    for offset in (0, len(a)):
        for window in chunk_bytes(b[offset:], size):
            current = longest_common_substring(a, window)
            if len(current) > len(best):
                best = current

    logger.debug("Chunked LCSS: short=%d long=%d window=%d best=%d", len(a), len(b), size, len(best))
    return best
