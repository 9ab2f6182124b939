"""MDRConfig for the Mining Data Records algorithm.

MDRConfig is a frozen (immutable) dataclass holding the two algorithm
parameters: the maximum generalized-node size ``K`` and the similarity
threshold ``T``.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_GNODE_SIZE: int = 10
DEFAULT_THRESHOLD: float = 0.3


@dataclass(frozen=True, slots=True)
class MDRConfig:
    """Immutable configuration for the MDR algorithm.

    Attributes:
        max_gnode_size: ``K``, the largest number of adjacent siblings grouped
            into one generalized node (>= 1).  Higher values find records
            spread over more sibling blocks at a higher search cost.
        threshold: ``T``, the maximum normalized edit distance in [0, 1] for
            two structures to count as similar.  Lower is stricter.
    """

    max_gnode_size: int = DEFAULT_MAX_GNODE_SIZE
    threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        if isinstance(self.max_gnode_size, bool) or not isinstance(
            self.max_gnode_size, int
        ):
            msg = f"max_gnode_size must be an int, got {self.max_gnode_size!r}"
            raise ValueError(msg)
        if self.max_gnode_size < 1:
            msg = f"max_gnode_size must be >= 1, got {self.max_gnode_size}"
            raise ValueError(msg)
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)):
            msg = f"threshold must be a number, got {self.threshold!r}"
            raise ValueError(msg)
        if not 0.0 <= self.threshold <= 1.0:
            msg = f"threshold must be in [0, 1], got {self.threshold}"
            raise ValueError(msg)
