"""Structural similarity between sequences of tag nodes.

Each node sequence is flattened into a bracket string of its element tags
(``<li><a></a></li>``); text nodes contribute nothing, so only structure is
compared.  Two flattened strings are compared by an LCS-based normalized
edit distance::

    distance = (len1 + len2 - 2 * LCS) / ((len1 + len2) / 2)

capped at 1.0.  It is 0.0 for identical strings and grows as the structures
diverge.
Strings whose lengths differ by more than a factor of two are declared
maximally dissimilar (1.0) without running the alignment.

The LCS is computed one row at a time with numpy.  Because
``L[i][j] = max(L[i][j-1], max(L[i-1][j], L[i-1][j-1] + match))``, a whole row
is the running maximum of a vectorised expression over the previous row, so
only the shorter string is iterated in Python.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from mdr_miner.tree.nodes import TagNode

if TYPE_CHECKING:
    from mdr_miner.cache import DistanceCache

__all__ = ["StructuralSimilarity", "edit_distance", "flatten", "lcs_length"]


def flatten(node: TagNode) -> str:
    """Return the bracket-sequence signature of ``node``'s subtree."""
    parts: list[str] = []
    stack: list[tuple[TagNode, bool]] = [(node, False)]
    while stack:
        current, closing = stack.pop()
        if current.is_text:
            continue
        if closing:
            parts.append(f"</{current.tag}>")
            continue
        parts.append(f"<{current.tag}>")
        stack.append((current, True))
        stack.extend((child, False) for child in reversed(current.children))
    return "".join(parts)


def _codes(s: str) -> np.ndarray:
    return np.frombuffer(s.encode("utf-32-le"), dtype="<u4")


def lcs_length(s1: str, s2: str) -> int:
    """Length of the longest common subsequence of two strings."""
    if not s1 or not s2:
        return 0
    shorter, longer = (s1, s2) if len(s1) <= len(s2) else (s2, s1)
    columns = _codes(longer)
    prev = np.zeros(len(longer) + 1, dtype=np.int64)
    curr = np.zeros_like(prev)
    for code in _codes(shorter):
        match = columns == code
        np.maximum.accumulate(np.maximum(prev[1:], prev[:-1] + match), out=curr[1:])
        prev, curr = curr, prev
    return int(prev[-1])


def edit_distance(s1: str, s2: str) -> float:
    """Normalized LCS edit distance in [0, 1] between two signatures."""
    len1 = len(s1)
    len2 = len(s2)
    if len1 == 0 and len2 == 0:
        return 0.0
    # Also covers exactly one empty string.
    if max(len1, len2) > 2 * min(len1, len2):
        return 1.0
    if s1 == s2:
        return 0.0
    total_operations = len1 + len2 - 2 * lcs_length(s1, s2)
    # The raw ratio reaches 2.0 for disjoint strings.
    return min(1.0, total_operations / ((len1 + len2) / 2))


class StructuralSimilarity:
    """Memoised structural distance over the nodes of one ``TagTree``.

    Subtree signatures are memoised by arena index and built bottom-up from
    the children's signatures; pairwise distances are memoised in the run's
    ``DistanceCache``.  An instance must only ever see nodes of one tree,
    because two trees reuse the same indices.

    Args:
        cache: The per-run distance memo.
    """

    def __init__(self, cache: DistanceCache) -> None:
        self._cache = cache
        self._signatures: dict[int, str] = {}

    def signature(self, node: TagNode) -> str:
        """Flattened signature of ``node``, computing its whole subtree once."""
        cached = self._signatures.get(node.index)
        if cached is not None:
            return cached

        stack: list[tuple[TagNode, bool]] = [(node, False)]
        while stack:
            current, expanded = stack.pop()
            if current.index in self._signatures:
                continue
            if current.is_text:
                self._signatures[current.index] = ""
            elif expanded:
                inner = "".join(self._signatures[c.index] for c in current.children)
                self._signatures[current.index] = f"<{current.tag}>{inner}</{current.tag}>"
            else:
                stack.append((current, True))
                stack.extend((child, False) for child in reversed(current.children))
        return self._signatures[node.index]

    def sequence_signature(self, nodes: Sequence[TagNode]) -> str:
        return "".join(self.signature(node) for node in nodes)

    def distance(self, seq_a: Sequence[TagNode], seq_b: Sequence[TagNode]) -> float:
        """Normalized structural distance between two node sequences."""
        s1 = self.sequence_signature(seq_a)
        s2 = self.sequence_signature(seq_b)
        cached = self._cache.get(s1, s2)
        if cached is not None:
            return cached
        result = edit_distance(s1, s2)
        self._cache.put(s1, s2, result)
        return result

    def are_similar(
        self,
        seq_a: Sequence[TagNode],
        seq_b: Sequence[TagNode],
        threshold: float,
    ) -> bool:
        return self.distance(seq_a, seq_b) <= threshold

    def all_pairwise_similar(self, nodes: Sequence[TagNode], threshold: float) -> bool:
        """True when every pair of ``nodes`` is within ``threshold``.

        Fewer than two nodes are trivially similar.
        """
        for i in range(len(nodes) - 1):
            for j in range(i + 1, len(nodes)):
                if self.distance((nodes[i],), (nodes[j],)) > threshold:
                    return False
        return True
