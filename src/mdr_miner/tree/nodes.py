"""TagNode dataclass and the TagTree arena for the MDR input tree.

Provides the foundational data types the MDR engine walks.  A ``TagTree`` is
built once per document by ``TreeBuilder`` and never changes afterwards; every
engine structure refers to nodes by their pre-order arena index.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

__all__ = ["TABLE_ROW_TAG", "TEXT_TAG", "TagNode", "TagTree"]

TEXT_TAG = "text"
TABLE_ROW_TAG = "tr"


@dataclass(slots=True, eq=False)
class TagNode:
    """A node in the generic tag tree.

    Attributes:
        tag:       Lowercased element name, or ``"text"`` for a text leaf.
        path:      XPath-like structural identifier, e.g. ``/html[1]/body[1]``.
                   Text nodes carry their parent's path.
        raw_text:  Trimmed text content; non-empty only for text nodes.
        children:  Ordered child nodes, owned by this node.
        index:     Pre-order position in the owning ``TagTree`` (-1 until the
                   node is placed in a tree by ``TreeBuilder``).

    Nodes compare by identity: two structurally equal subtrees are still two
    distinct nodes.
    """

    tag: str
    path: str = ""
    raw_text: str = ""
    children: list[TagNode] = field(default_factory=list)
    index: int = -1

    @property
    def is_text(self) -> bool:
        return self.tag == TEXT_TAG

    def to_dict(self) -> dict[str, Any]:
        """Render the subtree back to the JSON wire form read by TreeBuilder."""
        out: dict[str, Any] = {"tag": self.tag, "children": [], "path": self.path}
        if self.raw_text:
            out["rawText"] = self.raw_text
        stack: list[tuple[TagNode, dict[str, Any]]] = [(self, out)]
        while stack:
            node, rendered = stack.pop()
            for child in node.children:
                child_out: dict[str, Any] = {
                    "tag": child.tag,
                    "children": [],
                    "path": child.path,
                }
                if child.raw_text:
                    child_out["rawText"] = child.raw_text
                rendered["children"].append(child_out)
                stack.append((child, child_out))
        return out

    def __repr__(self) -> str:
        return f"TagNode({self.tag!r}, path={self.path!r}, children={len(self.children)})"


class TagTree:
    """Pre-order arena over an immutable tag tree.

    ``nodes[i].index == i`` for every node, and every child has a larger index
    than its parent, so iterating indices in reverse visits children before
    their parents.
    """

    __slots__ = ("_by_path", "_nodes")

    def __init__(self, nodes: list[TagNode]) -> None:
        if not nodes:
            msg = "a TagTree needs at least a root node"
            raise ValueError(msg)
        self._nodes = nodes
        self._by_path: dict[str, int] = {}
        for node in nodes:
            if not node.is_text:
                self._by_path.setdefault(node.path, node.index)

    @property
    def root(self) -> TagNode:
        return self._nodes[0]

    @property
    def nodes(self) -> list[TagNode]:
        return self._nodes

    def node(self, index: int) -> TagNode:
        return self._nodes[index]

    def find_by_path(self, path: str) -> TagNode | None:
        """Return the element with the given path, or None."""
        index = self._by_path.get(path)
        return None if index is None else self._nodes[index]

    def depth(self) -> int:
        """Height of the tree; a lone root has depth 1."""
        heights = [1] * len(self._nodes)
        for node in reversed(self._nodes):
            if node.children:
                heights[node.index] = 1 + max(heights[c.index] for c in node.children)
        return heights[0]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TagNode]:
        return iter(self._nodes)
