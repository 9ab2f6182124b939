"""Public API functions for mdr-miner.

This module provides the user-facing functions: run, mine, find_regions,
structural_distance and handle_message.  Each call creates a fresh
``MDRMiner`` to guarantee zero state carried between documents.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from mdr_miner.algorithm.config import (
    DEFAULT_MAX_GNODE_SIZE,
    DEFAULT_THRESHOLD,
    MDRConfig,
)
from mdr_miner.algorithm.regions import DataRegion
from mdr_miner.algorithm.similarity import edit_distance, flatten
from mdr_miner.miner import MDRMiner
from mdr_miner.result import MiningResult
from mdr_miner.tree.builder import MalformedTreeError, TreeBuilder
from mdr_miner.tree.nodes import TagNode

__all__ = ["find_regions", "handle_message", "mine", "run", "structural_distance"]

TreeInput = TagNode | Mapping[str, Any]


def run(
    tree: TreeInput,
    k: int = DEFAULT_MAX_GNODE_SIZE,
    t: float = DEFAULT_THRESHOLD,
) -> list[list[str]]:
    """Mine a document tree and return its records as path lists.

    Args:
        tree: Root ``TagNode`` or wire-form mapping of the document.
        k:    Maximum generalized-node size (>= 1).  Defaults to 10.
        t:    Similarity threshold in [0, 1].  Defaults to 0.3.

    Returns:
        One list of paths per record, in discovery order.  A single-node
        record has one path; a multi-node record lists its paths in
        alignment order.  Empty when the document has no repeating structure.

    Raises:
        ValueError: If ``k`` or ``t`` is out of range.
        MalformedTreeError: If the tree is missing or invalid.
    """
    return mine(tree, MDRConfig(max_gnode_size=k, threshold=t)).paths


def mine(tree: TreeInput, config: MDRConfig | None = None) -> MiningResult:
    """Mine a document tree and return the full ``MiningResult``.

    Args:
        tree:   Root ``TagNode`` or wire-form mapping of the document.
        config: Algorithm hyper-parameters. Defaults to ``MDRConfig()`` when None.

    Returns:
        A ``MiningResult`` with regions, records, orphans, paths, texts and
        computation_time_ms populated.
    """
    return MDRMiner(config=config).mine(tree)


def find_regions(
    tree: TreeInput, config: MDRConfig | None = None
) -> dict[str, list[DataRegion]]:
    """Return the data regions of a document keyed by parent path."""
    return MDRMiner(config=config).find_regions(tree)


def structural_distance(
    left: TreeInput | Sequence[TreeInput],
    right: TreeInput | Sequence[TreeInput],
) -> float:
    """Normalized structural distance between two nodes or node sequences.

    Text content is ignored.  0.0 means structurally identical; 1.0 means
    maximally dissimilar.
    """
    return edit_distance(_signature(left), _signature(right))


def handle_message(message: Mapping[str, Any]) -> dict[str, Any]:
    """Serve one background-worker request.

    Args:
        message: ``{"documentTree": <wire tree>, "K": int, "T": float}``.
            ``K`` and ``T`` fall back to the defaults when absent.

    Returns:
        ``{"records": [[path, ...], ...]}``.

    Raises:
        MalformedTreeError: If the message carries no document tree.
        ValueError: If ``K`` or ``T`` is out of range.
    """
    if not isinstance(message, Mapping) or message.get("documentTree") is None:
        msg = "message has no 'documentTree'"
        raise MalformedTreeError(msg)
    k = message.get("K")
    t = message.get("T")
    records = run(
        message["documentTree"],
        k=DEFAULT_MAX_GNODE_SIZE if k is None else k,
        t=DEFAULT_THRESHOLD if t is None else t,
    )
    return {"records": records}


def _signature(value: TreeInput | Sequence[TreeInput]) -> str:
    builder = TreeBuilder()
    if isinstance(value, (TagNode, Mapping)):
        return flatten(builder.build(value).root)
    return "".join(flatten(builder.build(item).root) for item in value)
