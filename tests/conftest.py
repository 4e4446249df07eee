"""Shared fixtures for price calculator tests."""
from decimal import Decimal

import pytest

from pricelib import Promotion, make_catalog


@pytest.fixture
def widget_catalog():
    """Synthetic catalog: widgets 4 for $3.00, gadgets without a sale."""
    return make_catalog(
        prices={"widget": "1.10", "gadget": "2.50", "freebie": "0"},
        promotions={"widget": Promotion(4, Decimal("3.00"))},
    )


@pytest.fixture
def catalog_yaml(tmp_path):
    """Write yaml text to a temp catalog file and return its path."""

    def _write(text, name="catalog.yaml"):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write
