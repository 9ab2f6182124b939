"""mdr-miner - unsupervised mining of repeated data records from tag trees."""

from __future__ import annotations

from mdr_miner.algorithm.config import MDRConfig
from mdr_miner.algorithm.records import DataRecord
from mdr_miner.algorithm.regions import DataRegion
from mdr_miner.api import (
    find_regions,
    handle_message,
    mine,
    run,
    structural_distance,
)
from mdr_miner.miner import MDRMiner
from mdr_miner.result import MiningResult
from mdr_miner.tree import MalformedTreeError, TagNode, TagTree, TreeBuilder

__version__: str = "0.1.0"
__all__: list[str] = [
    "DataRecord",
    "DataRegion",
    "MDRConfig",
    "MDRMiner",
    "MalformedTreeError",
    "MiningResult",
    "TagNode",
    "TagTree",
    "TreeBuilder",
    "find_regions",
    "handle_message",
    "mine",
    "run",
    "structural_distance",
]
