"""pytest plugin for mdr-miner.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from mdr_miner import MDRConfig, mine


@pytest.fixture(scope="session")
def assert_records() -> Any:
    """Fixture that returns a callable record-output asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to mine() which creates a fresh MDRMiner per call).

    Usage in tests::

        def test_listing(assert_records, listing_tree):
            assert_records(listing_tree, [["/ul[1]/li[1]"], ["/ul[1]/li[2]"]])

    Returns:
        A callable ``_assert(tree, expected, config=None) -> None`` that raises
        ``AssertionError`` when the mined paths differ from ``expected``.
    """

    def _assert(
        tree: Any,
        expected: list[list[str]],
        config: MDRConfig | None = None,
    ) -> None:
        """Assert that mining ``tree`` yields exactly ``expected``.

        Args:
            tree:     Root TagNode or wire-form mapping.
            expected: Expected path lists, in output order.
            config:   Optional MDRConfig for custom algorithm parameters.

        Raises:
            AssertionError: When the output differs, with a message listing
                the expected and actual paths and the regions found.
        """
        result = mine(tree, config=config)
        actual = [list(paths) for paths in result.paths]
        if actual != [list(paths) for paths in expected]:
            raise AssertionError(
                f"mined records differ: got {len(actual)}, expected {len(expected)}\n"
                f"  actual:   {actual}\n"
                f"  expected: {expected}\n"
                f"  regions:  {result.to_dict()['regions']}"
            )

    return _assert
