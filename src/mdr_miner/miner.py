"""MDRMiner: orchestrator that wires TreeBuilder and the four MDR stages.

This is the central wiring layer between the raw algorithm stages and the
public API.  It turns an input tag tree into a rich MiningResult with
regions, records, recovered orphans, path output and timing data.

Architecture:
- mine() builds (and validates) a fresh ``TagTree`` before anything else, so
  malformed input fails before any traversal.
- A new ``DistanceCache`` and ``StructuralSimilarity`` are created for every
  call and dropped at return; nothing carries over between documents.
- Stages run strictly in order: RegionDetector -> RecordIdentifier ->
  OrphanRecovery -> merge.  Each stage only reads the previous stage's
  output.
- Orphans are appended only when their path is not part of an identified
  record, and no path is emitted twice in ``MiningResult.paths``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from mdr_miner.algorithm.config import MDRConfig
from mdr_miner.algorithm.orphans import OrphanRecovery
from mdr_miner.algorithm.records import (
    DataRecord,
    RecordIdentifier,
    record_nodes,
    record_paths,
)
from mdr_miner.algorithm.regions import DataRegion, RegionDetector, RegionMap
from mdr_miner.algorithm.similarity import StructuralSimilarity
from mdr_miner.cache import DistanceCache
from mdr_miner.result import MiningResult
from mdr_miner.tree.builder import TreeBuilder
from mdr_miner.tree.nodes import TagNode, TagTree

__all__ = ["MDRMiner"]

logger = logging.getLogger(__name__)


class MDRMiner:
    """Orchestrator for unsupervised data record mining.

    Wires ``TreeBuilder``, ``RegionDetector``, ``RecordIdentifier`` and
    ``OrphanRecovery`` into a single blocking ``mine()`` call.  The call has
    no timeout or cancellation of its own; callers wrap it with their own
    deadline policy.

    Example::

        from mdr_miner.miner import MDRMiner

        miner = MDRMiner()
        result = miner.mine(tag_tree_dict)
        print(result.paths)   # [["/html[1]/body[1]/ul[1]/li[1]"], ...]
    """

    def __init__(
        self,
        config: MDRConfig | None = None,
        max_cache_size: int = 4096,
    ) -> None:
        """Initialise the miner.

        Args:
            config: Algorithm hyper-parameters.  Defaults to ``MDRConfig()``.
            max_cache_size: Maximum number of signature pairs held in the
                per-run distance cache.  This is an infrastructure parameter,
                not part of ``MDRConfig``.
        """
        self._config: MDRConfig = config if config is not None else MDRConfig()
        self._max_cache_size = max_cache_size
        self._builder = TreeBuilder()

    @property
    def config(self) -> MDRConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def mine(self, tree: TagNode | Mapping[str, Any] | TagTree) -> MiningResult:
        """Mine data records from one document tree.

        Args:
            tree: Root ``TagNode``, wire-form mapping, or an already built
                ``TagTree``.

        Returns:
            A ``MiningResult``; an input without repeating structure yields
            empty record lists, not an error.

        Raises:
            MalformedTreeError: If the input tree is missing or invalid.
        """
        t0 = time.perf_counter()
        tag_tree = tree if isinstance(tree, TagTree) else self._builder.build(tree)

        cache = DistanceCache(max_size=self._max_cache_size)
        try:
            similarity = StructuralSimilarity(cache)
            region_map = RegionDetector(similarity, self._config).detect(tag_tree)
            records = RecordIdentifier(tag_tree, similarity, self._config).identify(
                region_map
            )
            orphans = OrphanRecovery(tag_tree, similarity, self._config).recover(
                region_map
            )
            logger.debug(
                "mdr run: %d nodes, %d region lists, %d records, %d orphans "
                "(cache hits=%d misses=%d)",
                len(tag_tree),
                len(region_map),
                len(records),
                len(orphans),
                cache.hits,
                cache.misses,
            )
        finally:
            cache.clear()

        final_records = self._merge_orphans(records, orphans)
        paths = self._unique_paths(final_records)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug("mdr run: %d final records in %.1f ms", len(paths), elapsed_ms)

        return MiningResult(
            regions=self._regions_by_path(tag_tree, region_map),
            records=records,
            orphans=orphans,
            final_records=final_records,
            paths=paths,
            texts=self._collect_texts(final_records),
            computation_time_ms=elapsed_ms,
        )

    def find_regions(
        self, tree: TagNode | Mapping[str, Any] | TagTree
    ) -> dict[str, list[DataRegion]]:
        """Run only region detection and return regions keyed by parent path."""
        tag_tree = tree if isinstance(tree, TagTree) else self._builder.build(tree)
        cache = DistanceCache(max_size=self._max_cache_size)
        try:
            region_map = RegionDetector(StructuralSimilarity(cache), self._config).detect(
                tag_tree
            )
        finally:
            cache.clear()
        return self._regions_by_path(tag_tree, region_map)

    # ------------------------------------------------------------------
    # Post-processing
    # ------------------------------------------------------------------

    @staticmethod
    def _merge_orphans(
        records: list[DataRecord], orphans: list[TagNode]
    ) -> list[DataRecord]:
        known = {path for record in records for path in record_paths(record)}
        final_records = list(records)
        added = 0
        for orphan in orphans:
            if orphan.path in known:
                continue
            known.add(orphan.path)
            final_records.append(orphan)
            added += 1
        if orphans:
            logger.debug("orphans: %d found, %d added", len(orphans), added)
        return final_records

    @staticmethod
    def _unique_paths(records: list[DataRecord]) -> list[list[str]]:
        """Paths per record; a path already emitted is never repeated."""
        seen: set[str] = set()
        out: list[list[str]] = []
        for record in records:
            fresh = [path for path in record_paths(record) if path not in seen]
            if fresh:
                seen.update(fresh)
                out.append(fresh)
        return out

    @staticmethod
    def _collect_texts(records: list[DataRecord]) -> list[str]:
        texts: list[str] = []
        for record in records:
            for node in record_nodes(record):
                stack = [node]
                while stack:
                    current = stack.pop()
                    if current.is_text and current.raw_text:
                        texts.append(current.raw_text)
                    stack.extend(reversed(current.children))
        return texts

    @staticmethod
    def _regions_by_path(
        tree: TagTree, region_map: RegionMap
    ) -> dict[str, list[DataRegion]]:
        return {tree.node(index).path: list(regions) for index, regions in region_map.items()}
