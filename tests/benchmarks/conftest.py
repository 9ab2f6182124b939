"""Deterministic document generators for performance benchmarks.

All generators produce fixed, reproducible wire trees. No random values.
Three tiers: 10, 100 and 500 repeated records.
Each tier provides a "uniform" page (identical record shapes) and a "mixed"
page (records whose shapes vary, so the distance cache hits less often).
"""

from __future__ import annotations

from typing import Any

import pytest


def _node(tag: str, path: str, children: list[dict[str, Any]]) -> dict[str, Any]:
    return {"tag": tag, "path": path, "children": children}


def _text(value: str) -> dict[str, Any]:
    return {"tag": "text", "rawText": value, "children": []}


def _card(base: str, i: int, extra_links: int) -> dict[str, Any]:
    links = [
        _node("a", f"{base}/a[{j + 1}]", [_text(f"link {i}.{j}")])
        for j in range(extra_links)
    ]
    return _node(
        "div",
        base,
        [
            _node("h3", f"{base}/h3[1]", [_text(f"Product {i}")]),
            _node("span", f"{base}/span[1]", [_text(f"${i}.99")]),
            *links,
        ],
    )


def generate_listing(num_records: int, mixed: bool = False) -> dict[str, Any]:
    """A page with a header, ``num_records`` product cards and a footer.

    With ``mixed`` the cards cycle through zero to three extra links.
    """
    body = "/html[1]/body[1]"
    grid = f"{body}/div[1]"
    cards = [
        _card(f"{grid}/div[{i + 1}]", i, (i % 4) if mixed else 1)
        for i in range(num_records)
    ]
    return _node(
        "html",
        "/html[1]",
        [
            _node(
                "body",
                body,
                [
                    _node("h1", f"{body}/h1[1]", [_text("Catalogue")]),
                    _node("div", grid, cards),
                    _node("p", f"{body}/p[1]", [_text("footer")]),
                ],
            )
        ],
    )


# --- Fixtures for each size tier ---


@pytest.fixture
def listing_10_uniform() -> dict[str, Any]:
    return generate_listing(10)


@pytest.fixture
def listing_10_mixed() -> dict[str, Any]:
    return generate_listing(10, mixed=True)


@pytest.fixture
def listing_100_uniform() -> dict[str, Any]:
    return generate_listing(100)


@pytest.fixture
def listing_100_mixed() -> dict[str, Any]:
    return generate_listing(100, mixed=True)


@pytest.fixture
def listing_500_uniform() -> dict[str, Any]:
    return generate_listing(500)


@pytest.fixture
def listing_500_mixed() -> dict[str, Any]:
    return generate_listing(500, mixed=True)
