"""Tests for loading a catalog from yaml."""
from decimal import Decimal

import pytest

from catalog_file import load_catalog, parse_catalog
from pricelib import CatalogError, Promotion, checkout

GOOD_CATALOG = """
items:
  milk: 3.97
  Bread: "2.17"
  apple: 0.89
promotions:
  milk: {required_count: 2, bundle_price: 5.00}
  bread:
    required_count: 3
    bundle_price: 6
"""


class TestLoadCatalog:
    """Tests for load_catalog."""

    def test_loads_prices_and_promotions(self, catalog_yaml):
        catalog = load_catalog(catalog_yaml(GOOD_CATALOG))
        assert catalog.names() == ["milk", "bread", "apple"]
        assert catalog.unit_price("milk") == Decimal("3.97")
        assert catalog.unit_price("bread") == Decimal("2.17")
        assert catalog.promotion("milk") == Promotion(2, Decimal("5.00"))
        assert catalog.promotion("bread") == Promotion(3, Decimal("6"))
        assert catalog.promotion("apple") is None

    def test_loaded_catalog_prices_a_basket(self, catalog_yaml):
        catalog = load_catalog(catalog_yaml(GOOD_CATALOG))
        receipt = checkout("milk, milk, bread, bread, bread, apple", catalog).unwrap()
        assert receipt.grand_total == Decimal("11.89")
        assert receipt.savings == Decimal("3.45")

    def test_accepts_string_path(self, catalog_yaml):
        path = catalog_yaml("items:\n  tea: 1.25\n")
        assert "tea" in load_catalog(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, catalog_yaml):
        with pytest.raises(CatalogError, match="Invalid YAML"):
            load_catalog(catalog_yaml("items: [milk: {"))

    def test_empty_file(self, catalog_yaml):
        with pytest.raises(CatalogError, match="empty"):
            load_catalog(catalog_yaml(""))

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "latin1.yaml"
        path.write_bytes(b"items:\n  caf\xe9: 1.00\n")
        with pytest.raises(CatalogError, match="UTF-8") as exc_info:
            load_catalog(path)
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_directory_instead_of_file(self, tmp_path):
        with pytest.raises(CatalogError, match="Could not read") as exc_info:
            load_catalog(tmp_path)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_yaml_error_is_chained(self, catalog_yaml):
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(catalog_yaml("items: [milk: {"))
        assert exc_info.value.__cause__ is not None


class TestParseCatalog:
    """Tests for validating loaded catalog data."""

    def test_items_section_required(self):
        with pytest.raises(CatalogError, match="items"):
            parse_catalog({"promotions": {}})

    def test_items_must_be_mapping(self):
        with pytest.raises(CatalogError):
            parse_catalog({"items": ["milk", "bread"]})

    def test_top_level_must_be_mapping(self):
        with pytest.raises(CatalogError):
            parse_catalog(["milk"])

    def test_promotion_missing_field(self):
        with pytest.raises(CatalogError, match="bundle_price"):
            parse_catalog({"items": {"milk": 1}, "promotions": {"milk": {"required_count": 2}}})

    def test_promotion_must_be_mapping(self):
        with pytest.raises(CatalogError):
            parse_catalog({"items": {"milk": 1}, "promotions": {"milk": "2 for 5"}})

    def test_promotion_for_unknown_item(self):
        with pytest.raises(CatalogError, match="kiwi"):
            parse_catalog(
                {
                    "items": {"milk": 1},
                    "promotions": {"kiwi": {"required_count": 2, "bundle_price": 1}},
                }
            )

    def test_promotion_dearer_than_base_price(self):
        with pytest.raises(CatalogError, match="tea"):
            parse_catalog(
                {
                    "items": {"tea": 1.00},
                    "promotions": {"tea": {"required_count": 2, "bundle_price": 5.00}},
                }
            )

    def test_bad_price(self):
        with pytest.raises(CatalogError):
            parse_catalog({"items": {"milk": "lots"}})

    def test_catalog_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_catalog({"items": {"milk": -1}})
