# price_calculator.py
# command line till: read the purchased items, print the receipt.
# All the price math lives in pricelib.py; this file only wires input and output.

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from catalog_file import CATALOG_ENV_VAR, load_catalog
from pricelib import STORE_CATALOG, CatalogError, checkout
from receipt_text import format_catalog, format_error, format_receipt, receipt_csv

logger = logging.getLogger(__name__)

PROMPT = "Enter items purchased by the customer, separated by comma"

EXIT_INVALID_ITEMS = 1
EXIT_CONFIG_ERROR = 2

app = typer.Typer(
    name="price-calculator",
    help="Price a basket of groceries, applying the store's bulk sales.",
    add_completion=False,
)

CATALOG_HELP = "YAML file with item prices and sales (default: built-in store catalog)"


def configure_logging(verbose=False):
    # logs go to stderr so stdout only ever holds the receipt
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _get_catalog(catalog_path):
    if catalog_path is None:
        return STORE_CATALOG
    logger.debug("using catalog file %s", catalog_path)
    try:
        return load_catalog(catalog_path)
    except CatalogError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)


@app.command("checkout")
def checkout_command(
    items: Optional[str] = typer.Argument(
        None,
        help="Comma separated items, e.g. 'milk, bread, apple'. Prompted for when left out.",
    ),
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", "-c", envvar=CATALOG_ENV_VAR, help=CATALOG_HELP
    ),
    as_csv: bool = typer.Option(False, "--csv", help="Print the receipt as CSV"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Price the purchased items and print the receipt."""
    configure_logging(verbose)
    catalog = _get_catalog(catalog_path)

    if items is None:
        items = typer.prompt(PROMPT, default="", show_default=False)

    result = checkout(items, catalog)
    if not result.ok:
        typer.echo(format_error(result.error))
        raise typer.Exit(EXIT_INVALID_ITEMS)

    if as_csv:
        typer.echo(receipt_csv(result.receipt), nl=False)
    else:
        typer.echo(format_receipt(result.receipt))


@app.command("catalog")
def catalog_command(
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", "-c", envvar=CATALOG_ENV_VAR, help=CATALOG_HELP
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """List the items for sale, their prices and current sales."""
    configure_logging(verbose)
    typer.echo(format_catalog(_get_catalog(catalog_path)))


def main():
    app()


if __name__ == "__main__":
    main()
