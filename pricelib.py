# pricelib.py
# pricing logic for the grocery till: "2 milk for $5, 3 bread for $6"
# This file only holds the catalog data and the calculator so the cli and app.py
# can stay focused on reading input and showing the receipt.

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class PriceCalculatorError(Exception):
    """Base class for everything the calculator raises."""


class InvalidItemError(PriceCalculatorError):
    """One or more purchased items are not in the catalog."""

    def __init__(self, items):
        self.items = list(items)
        super().__init__(f"Item(s) {', '.join(self.items)} are invalid. Please try again.")


class UnknownItemError(PriceCalculatorError, KeyError):
    """Pricing was asked about an item the catalog does not have."""

    def __init__(self, item):
        self.item = item
        super().__init__(item)

    def __str__(self):
        return f"Item '{self.item}' is not in the catalog"


class CatalogError(PriceCalculatorError, ValueError):
    """Catalog data is malformed."""


def to_money(value) -> Decimal:
    """Turn a price from config (str, int, float or Decimal) into a Decimal.

    Floats go through str() first so 3.97 stays 3.97 and not 3.9700000000000002.
    """
    if isinstance(value, bool):
        raise CatalogError(f"Price must be a number, got {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (ArithmeticError, TypeError, ValueError):
        raise CatalogError(f"Price must be a number, got {value!r}") from None
    if not amount.is_finite():
        raise CatalogError(f"Price must be a number, got {value!r}")
    return amount


@dataclass(frozen=True)
class Promotion:
    """Every `required_count` units of an item cost `bundle_price` together."""

    required_count: int
    bundle_price: Decimal

    def __post_init__(self):
        if isinstance(self.required_count, bool) or not isinstance(self.required_count, int):
            raise CatalogError(f"required_count must be an integer, got {self.required_count!r}")
        if self.required_count < 1:
            raise CatalogError(f"required_count must be at least 1, got {self.required_count}")
        price = to_money(self.bundle_price)
        if price < 0:
            raise CatalogError(f"bundle_price cannot be negative, got {price}")
        # frozen dataclass, so go around __setattr__
        object.__setattr__(self, "bundle_price", price)


@dataclass(frozen=True)
class Catalog:
    """Read-only store catalog: base prices plus optional promotion per item.

    Build one with `make_catalog`; the instance is shared freely since nothing
    ever changes it after construction.
    """

    prices: Mapping[str, Decimal]
    promotions: Mapping[str, Promotion] = field(default_factory=lambda: MappingProxyType({}))

    def __contains__(self, name):
        return name in self.prices

    def __len__(self):
        return len(self.prices)

    def names(self):
        return list(self.prices)

    def unit_price(self, name) -> Decimal:
        if name not in self.prices:
            raise UnknownItemError(name)
        return self.prices[name]

    def promotion(self, name) -> Optional[Promotion]:
        if name not in self.prices:
            raise UnknownItemError(name)
        return self.promotions.get(name)


def _clean_name(name):
    return str(name).strip().lower()


def _to_promotion(key, rule):
    if isinstance(rule, Promotion):
        return rule
    if isinstance(rule, Mapping):
        missing = [f for f in ("required_count", "bundle_price") if f not in rule]
        if missing:
            raise CatalogError(f"Promotion for '{key}' is missing: {', '.join(missing)}")
        return Promotion(rule["required_count"], rule["bundle_price"])
    if isinstance(rule, (tuple, list)) and len(rule) == 2:
        return Promotion(rule[0], rule[1])
    raise CatalogError(
        f"Promotion for '{key}' must be (required_count, bundle_price), got {rule!r}"
    )


def make_catalog(prices, promotions=None) -> Catalog:
    """Validate raw price/promotion data and freeze it into a Catalog.

    prices:     {"milk": "3.97", ...}
    promotions: {"milk": Promotion(2, "5.00")}, {"milk": (2, "5.00")}
                or {"milk": {"required_count": 2, "bundle_price": "5.00"}}

    A promotion that would charge more than the base price of its units is
    rejected, so a receipt total never exceeds its subtotal.
    """
    clean_prices = {}
    for name, price in prices.items():
        key = _clean_name(name)
        if not key:
            raise CatalogError("Item names cannot be blank")
        if key in clean_prices:
            raise CatalogError(f"Item '{key}' is listed twice")
        amount = to_money(price)
        if amount < 0:
            raise CatalogError(f"Price for '{key}' cannot be negative, got {amount}")
        clean_prices[key] = amount

    clean_promotions = {}
    for name, rule in (promotions or {}).items():
        key = _clean_name(name)
        if key not in clean_prices:
            raise CatalogError(f"Promotion given for '{key}' which has no price")
        rule = _to_promotion(key, rule)
        # a sale may never cost more than buying the same units at base price
        full_price = rule.required_count * clean_prices[key]
        if rule.bundle_price > full_price:
            raise CatalogError(
                f"Promotion for '{key}' charges {rule.bundle_price} for "
                f"{rule.required_count} units that cost {full_price} at base price"
            )
        clean_promotions[key] = rule

    return Catalog(MappingProxyType(clean_prices), MappingProxyType(clean_promotions))


# Catalog: what the store sells and the current sales.
# A constant stands in for prices that would normally come from a database
# and change week to week (catalog_file.py loads the same shape from yaml).
STORE_CATALOG = make_catalog(
    prices={
        "milk": "3.97",
        "bread": "2.17",
        "banana": "0.89",
        "apple": "0.89",
    },
    promotions={
        "milk": Promotion(required_count=2, bundle_price=Decimal("5.00")),
        "bread": Promotion(required_count=3, bundle_price=Decimal("6.00")),
    },
)


def parse_purchases(raw):
    '''
    turn the comma separated input into a histogram of item -> quantity

    Example: "Milk, milk , BREAD"  becomes {'milk': 2, 'bread': 1}

    Blank entries (empty input, stray commas) are skipped. Order of first
    appearance is kept because it is the order of the receipt lines.
    '''
    counts = {}
    for token in (raw or "").split(","):
        item = token.strip().lower()
        if not item:
            continue
        counts[item] = counts.get(item, 0) + 1
    logger.debug("parsed purchases: %s", counts)
    return MappingProxyType(counts)


def find_invalid_items(histogram, catalog):
    """Names in the histogram the catalog does not know, in purchase order."""
    return [item for item in histogram if item not in catalog]


def validate_items(histogram, catalog):
    """Check everything entered against the store's stock."""
    wrong_items = find_invalid_items(histogram, catalog)
    if wrong_items:
        logger.warning("rejected unknown items: %s", ", ".join(wrong_items))
        raise InvalidItemError(wrong_items)


def compute_subtotals(histogram, catalog):
    """Total per item without any sale applied.

    ex: {'bread': Decimal('6.51')} if 3 loaves were purchased
    """
    return {item: catalog.unit_price(item) * count for item, count in histogram.items()}


def compute_discounts(histogram, catalog):
    """Amount charged for the bundled units of each item on sale.

    ex: {'milk': Decimal('10.00')} if 4 cartons were purchased under "2 for 5".
    Items with no sale, or not enough units to fill one bundle, get no entry.
    """
    sale_totals = {}
    for item, count in histogram.items():
        rule = catalog.promotion(item)
        if rule is None or count < rule.required_count:
            continue
        # number of times the sale requirement has been reached
        bundles = count // rule.required_count
        sale_totals[item] = bundles * rule.bundle_price
    return sale_totals


@dataclass(frozen=True)
class ReceiptLine:
    name: str
    quantity: int
    subtotal: Decimal
    total: Decimal

    @property
    def display_name(self):
        return self.name.capitalize()


@dataclass(frozen=True)
class Receipt:
    lines: Tuple[ReceiptLine, ...] = ()
    grand_subtotal: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")
    savings: Decimal = Decimal("0.00")

    @property
    def item_totals(self):
        return {line.name: line.total for line in self.lines}

    @property
    def total_units(self):
        return sum(line.quantity for line in self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __len__(self):
        return len(self.lines)


def assemble(histogram, subtotals, discounts, catalog) -> Receipt:
    """Combine subtotals and sale amounts into the final receipt.

    Everything is worked out in one pass over the histogram so the lines come
    out in purchase order.
    """
    lines = []
    grand_subtotal = Decimal("0")
    grand_total = Decimal("0")

    for item, count in histogram.items():
        unit_price = catalog.unit_price(item)
        rule = catalog.promotion(item)
        if item not in subtotals:
            raise UnknownItemError(item)
        subtotal = subtotals[item]

        if item in discounts:
            # units left over after the last full bundle pay the base price
            remainder = count % rule.required_count if rule is not None else count
            item_total = discounts[item] + remainder * unit_price
        else:
            item_total = subtotal

        lines.append(ReceiptLine(item, count, subtotal, item_total))
        grand_subtotal += subtotal
        grand_total += item_total

    savings = (grand_subtotal - grand_total).quantize(CENT, rounding=ROUND_HALF_UP)
    logger.debug("subtotal %s, total %s, saved %s", grand_subtotal, grand_total, savings)
    return Receipt(tuple(lines), grand_subtotal, grand_total, savings)


@dataclass(frozen=True)
class CheckoutResult:
    """Either a receipt or the validation error that stopped the checkout."""

    receipt: Optional[Receipt] = None
    error: Optional[InvalidItemError] = None

    @property
    def ok(self):
        return self.error is None

    def unwrap(self) -> Receipt:
        if self.error is not None:
            raise self.error
        return self.receipt


def checkout(raw, catalog=STORE_CATALOG) -> CheckoutResult:
    """
    do all price math:
      1) parse the input into a histogram
      2) reject anything the store does not sell
      3) subtotals and sale amounts per item
      4) assemble the receipt
    """
    items = parse_purchases(raw)
    try:
        validate_items(items, catalog)
    except InvalidItemError as exc:
        return CheckoutResult(error=exc)

    subtotals = compute_subtotals(items, catalog)
    discounts = compute_discounts(items, catalog)
    return CheckoutResult(receipt=assemble(items, subtotals, discounts, catalog))
