# catalog_file.py
# read the store catalog (prices + sales) from a yaml file instead of the
# constant in pricelib.py, so prices can change week to week without a release.

import logging
from pathlib import Path

import yaml

from pricelib import CatalogError, Promotion, make_catalog

logger = logging.getLogger(__name__)

# env var the cli and the streamlit app both look at
CATALOG_ENV_VAR = "PRICE_CALCULATOR_CATALOG"


def _parse_promotion(name, data):
    if not isinstance(data, dict):
        raise CatalogError(f"Promotion for '{name}' must be a mapping")
    missing = [key for key in ("required_count", "bundle_price") if key not in data]
    if missing:
        raise CatalogError(f"Promotion for '{name}' is missing: {', '.join(missing)}")
    return Promotion(data["required_count"], data["bundle_price"])


def parse_catalog(data):
    """
    Build a Catalog from already-loaded yaml data.

    Expected shape:
        items:
          milk: 3.97
        promotions:
          milk: {required_count: 2, bundle_price: 5.00}
    """
    if not data:
        raise CatalogError("Catalog file is empty")
    if not isinstance(data, dict):
        raise CatalogError("Catalog file must contain a mapping")

    items = data.get("items")
    if not isinstance(items, dict) or not items:
        raise CatalogError("Catalog needs a non-empty 'items' section")

    promotions = data.get("promotions") or {}
    if not isinstance(promotions, dict):
        raise CatalogError("'promotions' must be a mapping of item -> rule")

    rules = {name: _parse_promotion(name, rule) for name, rule in promotions.items()}
    return make_catalog(items, rules)


def load_catalog(path):
    """
    Load a catalog from a yaml file.

    Raises:
        CatalogError: if the file is missing or unreadable, is not valid yaml,
            or holds bad data.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in catalog file: {e}") from e
    except UnicodeDecodeError as e:
        raise CatalogError(f"Catalog file is not valid UTF-8: {path}") from e
    except OSError as e:
        raise CatalogError(f"Could not read catalog file {path}: {e.strerror or e}") from e

    catalog = parse_catalog(raw_data)
    logger.debug("loaded %d catalog items from %s", len(catalog), path)
    return catalog
