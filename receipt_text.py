# receipt_text.py
# turn a Receipt from pricelib into text: the tabular till receipt, csv rows,
# and the one-line messages shown when something goes wrong.

import csv
import io
from decimal import Decimal, ROUND_HALF_UP

from pricelib import CENT

RULE = "-" * 38
CSV_FIELDS = ["Item", "Quantity", "Price"]


def format_money(amount):
    """Return amount formatted to two decimals."""
    return str(Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def describe_promotion(rule):
    """ex: '2 for $5.00'"""
    return f"{rule.required_count} for ${format_money(rule.bundle_price)}"


def receipt_rows(receipt):
    # simple dicts so the streamlit table and the csv share one shape
    return [
        {
            "Item": line.display_name,
            "Quantity": line.quantity,
            "Price": f"${format_money(line.total)}",
        }
        for line in receipt.lines
    ]


def format_receipt(receipt):
    """Tabular receipt: one row per item in purchase order, then the totals."""
    lines = ["Item\tQuantity\tPrice", RULE]
    for row in receipt_rows(receipt):
        lines.append(f"{row['Item']}\t{row['Quantity']}\t{row['Price']}")
    lines.append(f"Total price: ${format_money(receipt.grand_total)}")
    lines.append(f"You saved: ${format_money(receipt.savings)}")
    return "\n".join(lines)


def receipt_csv(receipt):
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for row in receipt_rows(receipt):
        writer.writerow(row)
    return buf.getvalue()


def format_error(error):
    return str(error)


def format_catalog(catalog):
    """One line per item: name, price and the sale if there is one."""
    lines = ["Item\tUnit price\tSale price", RULE]
    for name in catalog.names():
        rule = catalog.promotion(name)
        sale = describe_promotion(rule) if rule else "-"
        lines.append(f"{name.capitalize()}\t${format_money(catalog.unit_price(name))}\t{sale}")
    return "\n".join(lines)
