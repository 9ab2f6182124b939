"""Shared fixtures: compact construction of wire-form tag trees.

A tree is written as nested ``(tag, [children])`` tuples where a plain string
is a text leaf.  Paths follow the XPath convention of the external tree
builder: ``/tag[i]`` per level, ``i`` counting same-tag siblings from 1.

    ("ul", [("li", ["A"]), ("li", ["B"])])
    # /ul[1] -> /ul[1]/li[1] (text "A"), /ul[1]/li[2] (text "B")
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from mdr_miner.tree import TagTree, TreeBuilder

Shape = tuple[str, list[Any]]


def build_wire_tree(shape: Shape) -> dict[str, Any]:
    tag, children = shape
    root: dict[str, Any] = {"tag": tag, "path": f"/{tag}[1]", "children": []}
    # Explicit stack: test documents can be deeper than the recursion limit.
    stack: list[tuple[dict[str, Any], list[Any]]] = [(root, children)]
    while stack:
        out, pending = stack.pop()
        counts: dict[str, int] = {}
        for child in pending:
            if isinstance(child, str):
                out["children"].append({"tag": "text", "rawText": child, "children": []})
                continue
            child_tag, grandchildren = child
            counts[child_tag] = counts.get(child_tag, 0) + 1
            child_out: dict[str, Any] = {
                "tag": child_tag,
                "path": f"{out['path']}/{child_tag}[{counts[child_tag]}]",
                "children": [],
            }
            out["children"].append(child_out)
            stack.append((child_out, grandchildren))
    return root


@pytest.fixture
def tag_tree() -> Callable[[Shape], dict[str, Any]]:
    """Callable turning the nested tuple notation into a wire-form tree."""
    return build_wire_tree


@pytest.fixture
def indexed_tree() -> Callable[[Shape], TagTree]:
    """Callable turning the nested tuple notation into a built TagTree."""

    def _build(shape: Shape) -> TagTree:
        return TreeBuilder().build(build_wire_tree(shape))

    return _build


# ---------------------------------------------------------------------------
# Reusable documents
# ---------------------------------------------------------------------------


def _item(text: str) -> Shape:
    return ("li", [("a", [text])])


@pytest.fixture
def simple_list() -> Shape:
    """``<ul><li>A</li><li>B</li><li>C</li></ul>``."""
    return ("ul", [("li", ["A"]), ("li", ["B"]), ("li", ["C"])])


@pytest.fixture
def simple_table() -> Shape:
    """``<table><tr><td>1</td></tr><tr><td>2</td></tr></table>``."""
    return ("table", [("tr", [("td", ["1"])]), ("tr", [("td", ["2"])])])


@pytest.fixture
def list_with_orphan() -> Shape:
    """Three list items, then a wrapper holding one more item-shaped node."""
    return (
        "ul",
        [
            ("p", ["intro"]),
            _item("x"),
            _item("y"),
            _item("z"),
            ("div", [("h2", ["more"]), _item("w")]),
        ],
    )


@pytest.fixture
def split_rows_table() -> Shape:
    """Records split over two rows: a title row and a plain detail row."""
    title_row = ("tr", [("td", [("b", ["n1"])]), ("td", [("b", ["n2"])])])
    detail_row = ("tr", [("td", ["d1"]), ("td", ["d2"])])
    return ("tbody", [title_row, detail_row, title_row, detail_row])
