"""RecordIdentifier: turns detected data regions into data records.

- A single-node generalized node (``g == 1``) whose children are two or more
  mutually similar nodes holds one record per child, unless it is a table
  row, which is never split into its cells.  Otherwise the node itself is
  the record.
- A multi-node generalized node (``g > 1``) whose components all have the
  same number of mutually similar children holds non-contiguous records:
  record ``i`` gathers the ``i``-th child of every component.  Otherwise the
  component tuple itself is the record.
- Two index-contiguous regions of one parent with the same ``g > 1`` whose
  leading generalized nodes are not similar to each other, but are each
  alignable, are merged: their leading generalized nodes are aligned as one
  non-contiguous record set and the second region is consumed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from mdr_miner.algorithm.config import MDRConfig
from mdr_miner.tree.nodes import TABLE_ROW_TAG, TagNode

if TYPE_CHECKING:
    from mdr_miner.algorithm.regions import DataRegion, RegionMap
    from mdr_miner.algorithm.similarity import StructuralSimilarity
    from mdr_miner.tree.nodes import TagTree

__all__ = ["DataRecord", "RecordIdentifier", "record_nodes", "record_paths"]

DataRecord = TagNode | tuple[TagNode, ...]


def record_nodes(record: DataRecord) -> tuple[TagNode, ...]:
    """The constituent nodes of a record, in alignment order."""
    if isinstance(record, TagNode):
        return (record,)
    return record


def record_paths(record: DataRecord) -> list[str]:
    """Ordered, duplicate-free paths of a record's nodes."""
    return list(dict.fromkeys(node.path for node in record_nodes(record)))


class RecordIdentifier:
    """Identifies data records from a region map over one ``TagTree``."""

    def __init__(
        self,
        tree: TagTree,
        similarity: StructuralSimilarity,
        config: MDRConfig | None = None,
    ) -> None:
        self._tree = tree
        self._similarity = similarity
        self._config = config if config is not None else MDRConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def identify(self, region_map: RegionMap) -> list[DataRecord]:
        """Return records for every region, each region processed once.

        Node lists are visited in map order and, inside a list, regions in
        document order of their first covered child.  A promoted region is
        handled at the first list it appears in and skipped afterwards.
        """
        records: list[DataRecord] = []
        processed: set[tuple[int, int]] = set()

        for regions in region_map.values():
            ordered = sorted(regions, key=self._document_position)
            for position, region in enumerate(ordered):
                key = (region.parent, region.start)
                if key in processed:
                    continue
                processed.add(key)

                following = ordered[position + 1] if position + 1 < len(ordered) else None
                if following is not None and self._should_merge(region, following):
                    processed.add((following.parent, following.start))
                    records.extend(self._merge(region, following))
                    continue

                children = self._tree.node(region.parent).children
                for gnode in region.generalized_nodes(children):
                    records.extend(self._records_for(gnode))

        return records

    def find_records_1(self, node: TagNode) -> list[TagNode]:
        """Records inside a single-node generalized node."""
        children = node.children
        if (
            len(children) >= 2
            and node.tag != TABLE_ROW_TAG
            and self._similarity.all_pairwise_similar(children, self._config.threshold)
        ):
            return list(children)
        return [node]

    def find_records_n(self, components: Sequence[TagNode]) -> list[DataRecord]:
        """Records inside a multi-node generalized node."""
        if not components:
            return []
        if self._alignable(components):
            return self._align(components)
        return [tuple(components)]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _document_position(self, region: DataRegion) -> int:
        return self._tree.node(region.parent).children[region.start].index

    def _records_for(self, gnode: tuple[TagNode, ...]) -> list[DataRecord]:
        if len(gnode) == 1:
            return list(self.find_records_1(gnode[0]))
        return self.find_records_n(gnode)

    def _alignable(self, components: Sequence[TagNode]) -> bool:
        """Every component has the same, non-zero number of similar children."""
        child_count = len(components[0].children)
        if child_count == 0:
            return False
        threshold = self._config.threshold
        for component in components:
            if len(component.children) != child_count:
                return False
            if not self._similarity.all_pairwise_similar(component.children, threshold):
                return False
        return True

    @staticmethod
    def _align(components: Sequence[TagNode]) -> list[DataRecord]:
        width = max(len(component.children) for component in components)
        aligned: list[DataRecord] = []
        for i in range(width):
            group = tuple(c.children[i] for c in components if i < len(c.children))
            if group:
                aligned.append(group)
        return aligned

    def _should_merge(self, region: DataRegion, following: DataRegion) -> bool:
        if region.gn_size <= 1 or region.parent != following.parent:
            return False
        if region.gn_size != following.gn_size or region.end != following.start:
            return False
        children = self._tree.node(region.parent).children
        current = region.generalized_nodes(children)[0]
        upcoming = following.generalized_nodes(children)[0]
        if self._similarity.are_similar(current, upcoming, self._config.threshold):
            return False
        return self._alignable(current) and self._alignable(upcoming)

    def _merge(self, region: DataRegion, following: DataRegion) -> list[DataRecord]:
        children = self._tree.node(region.parent).children
        current, *current_rest = region.generalized_nodes(children)
        upcoming, *upcoming_rest = following.generalized_nodes(children)

        merged = self._align(current + upcoming)
        for gnode in current_rest + upcoming_rest:
            merged.extend(self._records_for(gnode))
        return merged
