"""OrphanRecovery: recovers records left outside every detected region.

For each node that owns data regions, the first component of its first
region is the representative record.  Each child not covered by one of the
node's own regions is compared against it, first child by child and then as
a whole; anything within the similarity threshold is recovered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdr_miner.algorithm.config import MDRConfig
from mdr_miner.tree.nodes import TagNode

if TYPE_CHECKING:
    from mdr_miner.algorithm.regions import RegionMap
    from mdr_miner.algorithm.similarity import StructuralSimilarity
    from mdr_miner.tree.nodes import TagTree

__all__ = ["OrphanRecovery"]


class OrphanRecovery:
    """Finds orphan records next to the regions of a ``RegionMap``."""

    def __init__(
        self,
        tree: TagTree,
        similarity: StructuralSimilarity,
        config: MDRConfig | None = None,
    ) -> None:
        self._tree = tree
        self._similarity = similarity
        self._config = config if config is not None else MDRConfig()

    def recover(self, region_map: RegionMap) -> list[TagNode]:
        """Return recovered nodes in document order, without duplicates."""
        threshold = self._config.threshold
        recovered: dict[int, TagNode] = {}

        for owner_index, regions in region_map.items():
            # Promoted regions index another node's children.
            own = [r for r in regions if r.parent == owner_index]
            if not own:
                continue

            children = self._tree.node(owner_index).children
            covered = {i for r in own for i in range(r.start, r.end)}
            representative = children[own[0].start]
            if not self._similarity.signature(representative):
                continue

            for child_index, orphan in enumerate(children):
                if child_index in covered:
                    continue
                for candidate in (*orphan.children, orphan):
                    if not self._similarity.signature(candidate):
                        continue
                    if self._similarity.are_similar((candidate,), (representative,), threshold):
                        recovered.setdefault(candidate.index, candidate)

        return [recovered[index] for index in sorted(recovered)]
