"""Tree subpackage for the MDR input representation.

Re-exports the public API for the tree module:
- TagNode: dataclass representing a node in the tag tree
- TagTree: pre-order arena over one immutable document tree
- TreeBuilder: validates caller input and produces a TagTree
- MalformedTreeError: raised for invalid input trees
"""

from mdr_miner.tree.builder import MalformedTreeError, TreeBuilder
from mdr_miner.tree.nodes import TABLE_ROW_TAG, TEXT_TAG, TagNode, TagTree

__all__ = [
    "TABLE_ROW_TAG",
    "TEXT_TAG",
    "MalformedTreeError",
    "TagNode",
    "TagTree",
    "TreeBuilder",
]
