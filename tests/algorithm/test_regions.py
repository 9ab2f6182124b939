"""Tests for DataRegion and RegionDetector.

Tests cover:
- DataRegion helpers (end, gn_count, covers, generalized_nodes)
- identify() on one child list: single and multi-node regions, tie-breaking,
  several regions in one list
- detect() over a whole tree: the grandchild rule, promotion of regions from
  uncovered children, covered children not promoted, map ordering
- The K limit on generalized-node size
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from mdr_miner.algorithm.config import MDRConfig
from mdr_miner.algorithm.regions import DataRegion, RegionDetector
from mdr_miner.algorithm.similarity import StructuralSimilarity
from mdr_miner.cache import DistanceCache
from mdr_miner.tree.nodes import TagNode, TagTree

IndexedTree = Callable[[Any], TagTree]


def _detector(config: MDRConfig | None = None) -> RegionDetector:
    return RegionDetector(StructuralSimilarity(DistanceCache()), config)


def _item(text: str) -> tuple[str, list[Any]]:
    return ("li", [("a", [text])])


def _pair_paragraph(first: str, second: str) -> tuple[str, list[Any]]:
    return ("p", [("b", [first]), ("i", [second])])


def _triples(regions: list[DataRegion]) -> list[tuple[int, int, int]]:
    return [region.as_tuple() for region in regions]


# ---------------------------------------------------------------------------
# DataRegion
# ---------------------------------------------------------------------------


class TestDataRegion:
    def test_end_and_count(self) -> None:
        region = DataRegion(gn_size=2, start=1, node_count=6, parent=0)
        assert region.end == 7
        assert region.gn_count == 3

    def test_covers(self) -> None:
        region = DataRegion(gn_size=1, start=2, node_count=3, parent=0)
        assert not region.covers(1)
        assert region.covers(2)
        assert region.covers(4)
        assert not region.covers(5)

    def test_generalized_nodes(self) -> None:
        children = [TagNode(tag) for tag in ("h1", "p", "b", "p", "b")]
        region = DataRegion(gn_size=2, start=1, node_count=4, parent=0)
        gnodes = region.generalized_nodes(children)
        assert [[node.tag for node in gnode] for gnode in gnodes] == [["p", "b"], ["p", "b"]]
        assert gnodes[0][0] is children[1]

    def test_is_frozen(self) -> None:
        region = DataRegion(1, 0, 2, 0)
        with pytest.raises(AttributeError):
            region.start = 3  # type: ignore[misc]

    def test_value_equality(self) -> None:
        assert DataRegion(1, 0, 2, 5) == DataRegion(1, 0, 2, 5)
        assert DataRegion(1, 0, 2, 5) != DataRegion(1, 0, 2, 6)


# ---------------------------------------------------------------------------
# identify()
# ---------------------------------------------------------------------------


class TestIdentify:
    def test_single_node_region(self, indexed_tree: IndexedTree) -> None:
        tree = indexed_tree(("ul", [_item("a"), _item("b"), _item("c")]))
        regions = _detector().identify(tree.root, tree.root.children)
        assert regions == [DataRegion(1, 0, 3, tree.root.index)]

    def test_smaller_size_wins_tie(self, indexed_tree: IndexedTree) -> None:
        # g=1 and g=2 both cover all four children from index 0
        tree = indexed_tree(("div", [_item(str(i)) for i in range(4)]))
        regions = _detector().identify(tree.root, tree.root.children)
        assert _triples(regions) == [(1, 0, 4)]

    def test_earlier_start_wins_tie(self, indexed_tree: IndexedTree) -> None:
        p, q = _item("x"), _pair_paragraph("u", "v")
        tree = indexed_tree(("div", [p, q, p, q, p]))
        regions = _detector().identify(tree.root, tree.root.children)
        assert _triples(regions) == [(2, 0, 4)]

    def test_several_regions_left_to_right(self, indexed_tree: IndexedTree) -> None:
        block = ("div", [("p", ["t"]), ("p", ["u"])])
        tree = indexed_tree(("div", [_item("1"), _item("2"), block, block]))
        regions = _detector().identify(tree.root, tree.root.children)
        assert _triples(regions) == [(1, 0, 2), (1, 2, 2)]

    def test_region_starts_after_unrelated_prefix(self, indexed_tree: IndexedTree) -> None:
        tree = indexed_tree(
            ("div", [("h1", ["title"]), _item("a"), _item("b"), _item("c")])
        )
        regions = _detector().identify(tree.root, tree.root.children)
        assert _triples(regions) == [(1, 1, 3)]

    def test_no_similar_neighbours(self, indexed_tree: IndexedTree) -> None:
        tree = indexed_tree(("div", [("h1", ["t"]), _item("a"), ("table", [])]))
        assert _detector().identify(tree.root, tree.root.children) == []

    def test_empty_child_list(self) -> None:
        node = TagNode("div", index=0)
        assert _detector().identify(node, []) == []

    def test_max_gnode_size_limits_search(self, indexed_tree: IndexedTree) -> None:
        p, q = _item("x"), _pair_paragraph("u", "v")
        tree = indexed_tree(("div", [p, q, p, q]))
        regions = _detector(MDRConfig(max_gnode_size=1)).identify(
            tree.root, tree.root.children
        )
        assert regions == []

    def test_threshold_zero_needs_identical_structure(
        self, indexed_tree: IndexedTree
    ) -> None:
        tree = indexed_tree(("ul", [_item("a"), ("li", [("a", []), ("b", [])])]))
        strict = _detector(MDRConfig(threshold=0.0))
        assert strict.identify(tree.root, tree.root.children) == []
        tree = indexed_tree(("ul", [_item("a"), _item("b")]))
        assert _triples(strict.identify(tree.root, tree.root.children)) == [(1, 0, 2)]

    def test_threshold_one_groups_everything_of_comparable_size(
        self, indexed_tree: IndexedTree
    ) -> None:
        tree = indexed_tree(("div", [("h1", [("b", [])]), ("p", [("i", [])])]))
        loose = _detector(MDRConfig(threshold=1.0))
        assert _triples(loose.identify(tree.root, tree.root.children)) == [(1, 0, 2)]


# ---------------------------------------------------------------------------
# detect()
# ---------------------------------------------------------------------------


class TestDetect:
    def test_simple_list(self, indexed_tree: IndexedTree, simple_list: Any) -> None:
        tree = indexed_tree(simple_list)
        assert _detector().detect(tree) == {0: [DataRegion(1, 0, 3, 0)]}

    def test_leaf_children_only_is_skipped(self, indexed_tree: IndexedTree) -> None:
        # No grandchildren: <div><br/><br/><br/></div>
        tree = indexed_tree(("div", [("br", []), ("br", []), ("br", [])]))
        assert _detector().detect(tree) == {}

    def test_single_child_has_no_own_region(self, indexed_tree: IndexedTree) -> None:
        tree = indexed_tree(("div", [_item("a")]))
        assert _detector().detect(tree) == {}

    def test_regions_are_promoted_to_ancestors(
        self, indexed_tree: IndexedTree, simple_list: Any
    ) -> None:
        tree = indexed_tree(("html", [("body", [simple_list])]))
        region = DataRegion(1, 0, 3, parent=2)
        assert _detector().detect(tree) == {0: [region], 1: [region], 2: [region]}

    def test_covered_children_are_not_promoted(self, indexed_tree: IndexedTree) -> None:
        inner = ("ul", [_item("a"), _item("b"), _item("c")])
        tree = indexed_tree(("div", [inner, inner]))
        region_map = _detector().detect(tree)
        ul_a, ul_b = tree.root.children
        assert region_map[0] == [DataRegion(1, 0, 2, 0)]
        assert region_map[ul_a.index] == [DataRegion(1, 0, 3, ul_a.index)]
        assert region_map[ul_b.index] == [DataRegion(1, 0, 3, ul_b.index)]

    def test_uncovered_children_are_promoted_in_child_order(
        self, indexed_tree: IndexedTree
    ) -> None:
        spans = [("span", [str(i)]) for i in range(3)]
        tree = indexed_tree(
            ("section", [("div", spans), ("div", [("p", ["x"])]), ("div", spans)])
        )
        region_map = _detector().detect(tree)
        div_a, _, div_b = tree.root.children
        assert region_map[0] == [
            DataRegion(1, 0, 3, div_a.index),
            DataRegion(1, 0, 3, div_b.index),
        ]

    def test_own_regions_precede_promoted(self, indexed_tree: IndexedTree) -> None:
        nested = ("div", [("h2", [("b", ["x"])]), ("ul", [_item("1"), _item("2")])])
        tree = indexed_tree(("section", [_item("a"), _item("b"), nested]))
        regions = _detector().detect(tree)[0]
        ul = tree.root.children[2].children[1]
        assert regions == [DataRegion(1, 0, 2, 0), DataRegion(1, 0, 2, ul.index)]

    def test_map_is_in_pre_order(self, indexed_tree: IndexedTree, simple_list: Any) -> None:
        tree = indexed_tree(("html", [("body", [simple_list, simple_list])]))
        keys = list(_detector().detect(tree))
        assert keys == sorted(keys)

    def test_deep_tree_does_not_recurse(self, indexed_tree: IndexedTree) -> None:
        shape: tuple[str, list[Any]] = ("ul", [_item("a"), _item("b")])
        for _ in range(2000):
            shape = ("div", [shape])
        tree = indexed_tree(shape)
        region_map = _detector().detect(tree)
        assert len(region_map) == 2001
        assert all(regions == region_map[0] for regions in region_map.values())
