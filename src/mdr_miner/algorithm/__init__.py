"""Algorithm subpackage: the four MDR stages and their configuration.

Import from this module (not from sub-modules directly) to stay on the
stable public interface.

Example::

    from mdr_miner.algorithm import MDRConfig, RegionDetector, StructuralSimilarity
    from mdr_miner.cache import DistanceCache

    similarity = StructuralSimilarity(DistanceCache())
    regions = RegionDetector(similarity, MDRConfig(threshold=0.2)).detect(tree)
"""

from __future__ import annotations

from mdr_miner.algorithm.config import (
    DEFAULT_MAX_GNODE_SIZE,
    DEFAULT_THRESHOLD,
    MDRConfig,
)
from mdr_miner.algorithm.orphans import OrphanRecovery
from mdr_miner.algorithm.records import (
    DataRecord,
    RecordIdentifier,
    record_nodes,
    record_paths,
)
from mdr_miner.algorithm.regions import DataRegion, RegionDetector, RegionMap
from mdr_miner.algorithm.similarity import (
    StructuralSimilarity,
    edit_distance,
    flatten,
    lcs_length,
)

__all__ = [
    "DEFAULT_MAX_GNODE_SIZE",
    "DEFAULT_THRESHOLD",
    "DataRecord",
    "DataRegion",
    "MDRConfig",
    "OrphanRecovery",
    "RecordIdentifier",
    "RegionDetector",
    "RegionMap",
    "StructuralSimilarity",
    "edit_distance",
    "flatten",
    "lcs_length",
    "record_nodes",
    "record_paths",
]
