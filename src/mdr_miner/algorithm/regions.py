"""RegionDetector: finds data regions among the children of every node.

A generalized node is a block of ``g`` adjacent siblings.  A data region is a
maximal run of two or more adjacent generalized nodes of the same size whose
consecutive pairs are structurally similar (distance <= T).

Architecture:
- ``identify()`` works on one child list.  For every size ``g`` in ``1..K``
  and every start offset inside the first window, it scans the windows
  ``children[i:i+g]`` vs ``children[i+g:i+2g]`` and keeps the best candidate
  region: the larger node count wins, then the earlier start, then the
  smaller ``g``.  It then continues after the chosen region.
- ``detect()`` walks the whole tree in reverse pre-order, so a node is always
  visited after all of its descendants.  A node runs ``identify()`` only when
  it has at least two children and at least one grandchild.  Regions found
  below a child that the node's own regions do not cover are promoted into
  the node's list, so nested repeating structures surface even when their
  container does not repeat.

Promoted regions keep the arena index of the node that owns their child
list, so a region is always interpretable on its own.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mdr_miner.algorithm.config import MDRConfig
from mdr_miner.tree.nodes import TagNode

if TYPE_CHECKING:
    from mdr_miner.algorithm.similarity import StructuralSimilarity
    from mdr_miner.tree.nodes import TagTree

__all__ = ["DataRegion", "RegionDetector", "RegionMap"]


@dataclass(frozen=True, slots=True)
class DataRegion:
    """A run of similar generalized nodes within one parent's child list.

    Attributes:
        gn_size:    Number of siblings per generalized node (``g``).
        start:      Index of the first covered child.
        node_count: Number of covered children (a multiple of ``gn_size``).
        parent:     Arena index of the node whose children are covered.
    """

    gn_size: int
    start: int
    node_count: int
    parent: int

    @property
    def end(self) -> int:
        """Exclusive end index of the covered children."""
        return self.start + self.node_count

    @property
    def gn_count(self) -> int:
        return self.node_count // self.gn_size

    def covers(self, child_index: int) -> bool:
        return self.start <= child_index < self.end

    def generalized_nodes(self, children: Sequence[TagNode]) -> list[tuple[TagNode, ...]]:
        """Split the covered children into generalized-node tuples."""
        return [
            tuple(children[i : i + self.gn_size])
            for i in range(self.start, self.end, self.gn_size)
        ]

    def as_tuple(self) -> tuple[int, int, int]:
        """The classic ``(gn_size, start, node_count)`` triple."""
        return (self.gn_size, self.start, self.node_count)


RegionMap = dict[int, list[DataRegion]]


def _is_better(candidate: DataRegion, best: DataRegion | None) -> bool:
    if best is None:
        return True
    if candidate.node_count != best.node_count:
        return candidate.node_count > best.node_count
    if candidate.start != best.start:
        return candidate.start < best.start
    return candidate.gn_size < best.gn_size


class RegionDetector:
    """Detects data regions across a whole ``TagTree``.

    Example::

        detector = RegionDetector(StructuralSimilarity(DistanceCache()))
        region_map = detector.detect(tree)
        # {ul_index: [DataRegion(gn_size=1, start=0, node_count=3, parent=ul_index)]}
    """

    def __init__(
        self,
        similarity: StructuralSimilarity,
        config: MDRConfig | None = None,
    ) -> None:
        self._similarity = similarity
        self._config = config if config is not None else MDRConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def detect(self, tree: TagTree) -> RegionMap:
        """Return the regions of every node that has at least one.

        The map is ordered by pre-order index.  Each list holds the node's
        own regions (left to right) followed by the promoted regions of its
        uncovered children (in child order).
        """
        found: RegionMap = {}
        for node in reversed(tree.nodes):
            children = node.children
            own: list[DataRegion] = []
            if len(children) >= 2 and any(child.children for child in children):
                own = self.identify(node, children)

            promoted: list[DataRegion] = []
            for child_index, child in enumerate(children):
                child_regions = found.get(child.index)
                if not child_regions:
                    continue
                if any(region.covers(child_index) for region in own):
                    continue
                promoted.extend(child_regions)

            if own or promoted:
                found[node.index] = own + promoted

        return dict(sorted(found.items()))

    def identify(self, parent: TagNode, children: Sequence[TagNode]) -> list[DataRegion]:
        """Find the non-overlapping data regions of one child list, left to right."""
        regions: list[DataRegion] = []
        origin = 0
        while origin < len(children):
            best = self._best_region(parent, children, origin)
            if best is None:
                break
            regions.append(best)
            origin = best.end
        return regions

    # ------------------------------------------------------------------
    # Region search
    # ------------------------------------------------------------------

    def _best_region(
        self,
        parent: TagNode,
        children: Sequence[TagNode],
        origin: int,
    ) -> DataRegion | None:
        n = len(children)
        threshold = self._config.threshold
        best: DataRegion | None = None

        for gn_size in range(1, self._config.max_gnode_size + 1):
            if origin + 2 * gn_size > n:
                break
            for start in range(origin, min(origin + gn_size, n)):
                region_start = -1
                node_count = 0
                check = start
                while check + 2 * gn_size <= n:
                    left = children[check : check + gn_size]
                    right = children[check + gn_size : check + 2 * gn_size]
                    if self._similarity.are_similar(left, right, threshold):
                        if region_start < 0:
                            region_start = check
                            node_count = 2 * gn_size
                        else:
                            node_count += gn_size
                    elif region_start >= 0:
                        break
                    check += gn_size

                if region_start < 0:
                    continue
                candidate = DataRegion(gn_size, region_start, node_count, parent.index)
                if _is_better(candidate, best):
                    best = candidate

        return best
