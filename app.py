# app.py
# streamlit ui for the grocery till

import os
from datetime import datetime

import streamlit as st

# bring in data and pricing functions from helper modules
from catalog_file import CATALOG_ENV_VAR, load_catalog
from pricelib import STORE_CATALOG, CatalogError, checkout
from receipt_text import describe_promotion, format_error, format_money, receipt_csv, receipt_rows

# page header
st.set_page_config(page_title="Grocery till - bulk sales", layout="wide")
st.title("Grocery till : buy more, pay less")

# same env var as the cli, so both read the same price list
catalog = STORE_CATALOG
catalog_path = os.environ.get(CATALOG_ENV_VAR)
if catalog_path:
    try:
        catalog = load_catalog(catalog_path)
    except CatalogError as e:
        st.error(f"Could not load catalog: {e}")
        st.stop()

# sidebar: this week's sales
with st.sidebar:
    st.header("Sales this week")
    on_sale = [name for name in catalog.names() if catalog.promotion(name)]
    if not on_sale:
        st.write("No sales running.")
    for name in on_sale:
        st.write(f"{name.capitalize()}: {describe_promotion(catalog.promotion(name))}")

# shelf view
with st.expander("See what's on the shelf", expanded=False):
    names = catalog.names()
    cols = st.columns(max(len(names), 1))
    for col, name in zip(cols, names):
        with col:
            # Escape the dollar sign so markdown shows it literally
            st.markdown(f"**{name.capitalize()}**  \n\\${format_money(catalog.unit_price(name))}")

# purchased items, typed the same way as at the cli prompt
st.subheader("Items purchased")
raw_items = st.text_input(
    "Enter items purchased by the customer, separated by comma",
    key="items",
    placeholder="milk, milk, bread, apple",
)

result = checkout(raw_items, catalog)

st.subheader("Receipt")

if not result.ok:
    st.error(format_error(result.error))
    st.stop()

receipt = result.receipt
rows = receipt_rows(receipt)

if not rows:
    # friendly greeter when nothing has been entered yet
    st.info("Type some items above to see the receipt.")
else:
    st.table(rows)
    units = receipt.total_units
    st.caption(f"{units} unit" + ("" if units == 1 else "s") + f" across {len(receipt)} line(s).")

st.success(
    f"Total price: \\${format_money(receipt.grand_total)}  \n\n"
    f"You saved \\${format_money(receipt.savings)} today."
)

# CSV download
if rows:
    today = datetime.now().strftime("%Y%m%d")
    st.download_button(
        label="Download receipt (CSV)",
        data=receipt_csv(receipt),
        file_name=f"receipt_{today}.csv",
        mime="text/csv",
    )


def _reset_cart():
    st.session_state["items"] = ""


st.button("Reset cart", on_click=_reset_cart)
