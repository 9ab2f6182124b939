"""TreeBuilder: validates an input tag tree and numbers it into a TagTree.

The input is either a ``TagNode`` tree assembled by the caller or the JSON
wire form produced by an external HTML tree builder::

    {"tag": "ul", "path": "/html[1]/body[1]/ul[1]", "children": [
        {"tag": "li", "path": "/html[1]/body[1]/ul[1]/li[1]", "children": [
            {"tag": "text", "rawText": "A", "children": []}]}]}

``"xpath"`` is accepted as an alias of ``"path"``.  The builder always creates
fresh nodes, so the caller's objects are never mutated, and numbers them in
pre-order with an explicit stack (no recursion limit on deep documents).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from mdr_miner.tree.nodes import TEXT_TAG, TagNode, TagTree

__all__ = ["MalformedTreeError", "TreeBuilder"]


class MalformedTreeError(ValueError):
    """Raised when an input tree is missing or structurally invalid."""


@dataclass
class TreeBuilder:
    """Converts an input tag tree into a validated, indexed ``TagTree``.

    Validation happens entirely before any mining starts.  Tags are
    lowercased, raw text is stripped, and text nodes inherit the path of their
    parent element.  Every non-text node must carry a path that is unique in
    the document.

    Example::

        builder = TreeBuilder()
        tree = builder.build({"tag": "ul", "path": "/ul[1]", "children": []})
        tree.root.tag   # "ul"
    """

    def build(self, value: TagNode | Mapping[str, Any] | None) -> TagTree:
        """Validate ``value`` and return a fresh ``TagTree``.

        Args:
            value: Root ``TagNode`` or wire-form mapping.

        Returns:
            A ``TagTree`` whose nodes are numbered in pre-order.

        Raises:
            MalformedTreeError: If the tree is None, a node has the wrong type,
                or a required field is missing or invalid.
        """
        if value is None:
            msg = "input tree is None"
            raise MalformedTreeError(msg)

        nodes: list[TagNode] = []
        seen_paths: set[str] = set()
        # (source, parent built node, location)
        stack: list[tuple[Any, TagNode | None, str]] = [(value, None, "root")]

        while stack:
            source, parent, location = stack.pop()
            tag, raw_text, path, children = self._read(source, location)

            if tag == TEXT_TAG:
                path = parent.path if parent is not None else path
            else:
                if not path:
                    msg = f"{location}: element <{tag}> has no path"
                    raise MalformedTreeError(msg)
                if path in seen_paths:
                    msg = f"{location}: duplicate path {path!r}"
                    raise MalformedTreeError(msg)
                seen_paths.add(path)

            node = TagNode(tag=tag, path=path, raw_text=raw_text, index=len(nodes))
            nodes.append(node)
            if parent is not None:
                parent.children.append(node)

            for i in range(len(children) - 1, -1, -1):
                stack.append((children[i], node, f"{location}.children[{i}]"))

        return TagTree(nodes)

    def _read(self, source: Any, location: str) -> tuple[str, str, str, list[Any]]:
        """Extract ``(tag, raw_text, path, children)`` from one input node."""
        if isinstance(source, TagNode):
            tag: Any = source.tag
            raw_text: Any = source.raw_text
            path: Any = source.path
            children: Any = source.children
        elif isinstance(source, Mapping):
            if "tag" not in source:
                msg = f"{location}: node has no 'tag'"
                raise MalformedTreeError(msg)
            tag = source["tag"]
            raw_text = source.get("rawText") or ""
            path = source.get("path", source.get("xpath")) or ""
            children = source.get("children")
            if children is None:
                children = []
        else:
            msg = f"{location}: expected a TagNode or mapping, got {type(source).__name__}"
            raise MalformedTreeError(msg)

        if not isinstance(tag, str) or not tag:
            msg = f"{location}: 'tag' must be a non-empty string, got {tag!r}"
            raise MalformedTreeError(msg)
        if not isinstance(raw_text, str):
            msg = f"{location}: 'rawText' must be a string, got {type(raw_text).__name__}"
            raise MalformedTreeError(msg)
        if not isinstance(path, str):
            msg = f"{location}: 'path' must be a string, got {type(path).__name__}"
            raise MalformedTreeError(msg)
        if not isinstance(children, list):
            msg = f"{location}: 'children' must be a list, got {type(children).__name__}"
            raise MalformedTreeError(msg)

        tag = tag.lower()
        return tag, raw_text.strip() if tag == TEXT_TAG else "", path, children
