"""MiningResult dataclass for MDR output.

This module provides the rich result type returned by mine() calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mdr_miner.algorithm.records import DataRecord
from mdr_miner.algorithm.regions import DataRegion
from mdr_miner.tree.nodes import TagNode

__all__ = ["MiningResult"]


@dataclass(frozen=True, slots=True)
class MiningResult:
    """Rich result of a mine() call.

    Attributes:
        regions: Data regions keyed by the path of the node whose list holds
            them, in pre-order.  Promoted regions appear under every ancestor
            that promoted them; ``DataRegion.parent`` names the real owner.
        records: Records identified from the regions, in region order.
        orphans: Nodes recovered next to the regions, in document order.
        final_records: ``records`` followed by the orphans whose path was not
            already part of a record.
        paths: The output contract: one list of paths per final record,
            where no path appears twice across the whole list.
        texts: Raw text of every text node under the final records.
        computation_time_ms: Wall-clock duration of the run in milliseconds.
    """

    regions: dict[str, list[DataRegion]]
    records: list[DataRecord]
    orphans: list[TagNode]
    final_records: list[DataRecord]
    paths: list[list[str]]
    texts: list[str]
    computation_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view: region triples by parent path and record paths."""
        return {
            "regions": {
                path: [list(region.as_tuple()) for region in regions]
                for path, regions in self.regions.items()
            },
            "records": [list(paths) for paths in self.paths],
        }
