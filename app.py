# app.py
# -*- coding: utf-8 -*-
# Streamlit batch page: enter or upload barcode payloads, preview the SVGs, export a zip.
import pandas as pd
import streamlit as st
from lxml import etree

from barcodesvg import config
from barcodesvg.batch import (SYMBOLOGIES, build_zip, capped, generate_item, item_basename, load_data_file,
                              new_item, parse_lines)
from barcodesvg.export import archive_name, svg_to_png_bytes
from barcodesvg.logging_setup import configure_logging

logger = configure_logging()

# ---------- App config ----------
APP_TITLE = "Barcode SVG Generator"

st.set_page_config(page_title=APP_TITLE, layout="wide")
st.title(APP_TITLE)

# ---------- Session defaults ----------
if "items" not in st.session_state:
    st.session_state["items"] = [new_item(config.DEFAULT_CONTENTS)]
if "preview_scale" not in st.session_state:
    st.session_state.preview_scale = 1.0

# ---------- Sidebar ----------
with st.sidebar:
    st.header("Barcode settings")
    quiet_zone = st.number_input("Quiet zone (mm)", min_value=0.0, value=float(config.DEFAULT_QUIET_ZONE), step=0.5)
    ean13_font_size = st.number_input("EAN-13 font size", min_value=1, value=config.DEFAULT_EAN13_FONT_SIZE, step=1)
    label_font_size = st.number_input("Label font size (other)", min_value=1, value=config.DEFAULT_FONT_SIZE, step=1)
    st.caption("EAN-13 digit offsets (px)")
    offset_left = st.number_input("Left digit", value=0.0, step=0.5, format="%.1f")
    offset_middle = st.number_input("Left group", value=0.0, step=0.5, format="%.1f")
    offset_right = st.number_input("Right group", value=0.0, step=0.5, format="%.1f")
    st.markdown("---")
    st.header("Preview & Export")
    st.session_state.preview_scale = st.slider("Preview scale", 0.25, 3.0, st.session_state.preview_scale, step=0.25)
    export_format = st.radio("Export format", ["SVG only", "SVG + PDF"], index=0)

settings = {
    "quiet_zone": float(quiet_zone),
    "ean13_font_size": float(ean13_font_size),
    "label_font_size": float(label_font_size),
    "offset_left": float(offset_left),
    "offset_middle": float(offset_middle),
    "offset_right": float(offset_right),
}

# ---------- Input ----------
col_text, col_file = st.columns([3, 2])

with col_text:
    st.subheader("1) Enter barcodes")
    default_symbology = st.selectbox("Default symbology", SYMBOLOGIES, index=0, key="default_symbology")
    pasted = st.text_area("One per line (`contents` or `symbology,contents`)", height=140, key="pasted")
    if st.button("Add lines", key="add_lines"):
        st.session_state["items"], dropped = capped(st.session_state["items"], parse_lines(pasted, default_symbology))
        if dropped:
            st.warning(f"At most {config.MAX_BARCODES} barcodes; {dropped} line(s) ignored.")

with col_file:
    st.subheader("2) Or upload data")
    data_file = st.file_uploader("CSV or XML with a `contents` column", type=["csv", "xml"])
    if data_file is not None and st.button("Load file", key="load_file"):
        try:
            loaded = load_data_file(data_file, default_symbology)
        except (ValueError, etree.XMLSyntaxError, pd.errors.ParserError) as e:
            st.error(f"Failed to parse data file: {e}")
        else:
            kept, dropped = capped([], loaded)
            if dropped:
                st.warning(f"At most {config.MAX_BARCODES} barcodes; {dropped} row(s) ignored.")
            st.session_state["items"] = kept or [new_item()]
            st.success(f"Loaded {len(st.session_state['items'])} barcodes")

# ---------- Item list ----------
st.subheader("Barcodes")
items = st.session_state["items"]
# pick up edits made since the last run before any button acts on the items
for item in items:
    item["contents"] = st.session_state.get(f"contents_{item['id']}", item["contents"])
    item["symbology"] = st.session_state.get(f"sym_{item['id']}", item["symbology"])

c1, c2, c3 = st.columns([1, 1, 4])
if c1.button("Generate all", key="generate_all"):
    st.session_state["items"] = items = [generate_item(i, settings) for i in items]
if c2.button("Select all", key="select_all"):
    generated_items = [i for i in items if i["svg"]]
    select = not (generated_items and all(i["selected"] for i in generated_items))
    for i in items:
        i["selected"] = bool(i["svg"]) and select
        st.session_state[f"sel_{i['id']}"] = i["selected"]

to_delete = None
for idx, item in enumerate(items):
    iid = item["id"]
    # widget state is seeded from the item once, then owned by the widget
    st.session_state.setdefault(f"contents_{iid}", item["contents"])
    if item["symbology"] in SYMBOLOGIES:
        st.session_state.setdefault(f"sym_{iid}", item["symbology"])
    st.session_state.setdefault(f"sel_{iid}", item["selected"])

    row = st.columns([3, 1, 1, 1, 4])
    item["contents"] = row[0].text_input("Contents", key=f"contents_{iid}")
    item["symbology"] = row[1].selectbox("Symbology", SYMBOLOGIES, key=f"sym_{iid}")
    if row[2].button("Generate", key=f"gen_{iid}"):
        items[idx] = item = generate_item(item, settings)
    if row[3].button("Delete", key=f"del_{iid}"):
        if len(items) <= 1:
            st.warning("At least one barcode has to stay in the list.")
        else:
            to_delete = idx
    with row[4]:
        if item["error"]:
            st.error(item["error"])
        elif item["svg"]:
            item["selected"] = st.checkbox("Select", key=f"sel_{iid}")
            try:
                png = svg_to_png_bytes(item["svg"], scale=st.session_state.preview_scale)
                st.image(png, caption=item.get("processed") or item["contents"])
            except Exception as e:
                st.error(f"Preview rendering failed: {e}")
            st.download_button("Download SVG", item["svg"].encode("utf-8"), file_name=f"{item_basename(item)}.svg",
                               mime="image/svg+xml", key=f"dl_{iid}")

if to_delete is not None:
    items.pop(to_delete)
    st.rerun()

if len(items) < config.MAX_BARCODES and st.button("Add barcode", key="add_item"):
    items.append(new_item())
    st.rerun()

# ---------- Export ----------
st.markdown("---")
generated = [i for i in items if i["svg"]]
selected = [i for i in generated if i["selected"]]
with_pdf = export_format == "SVG + PDF"


def _pdf_failed(fname, e):
    st.warning(f"{fname}: PDF generation failed: {e}")


e1, e2 = st.columns(2)
if generated:
    e1.download_button(f"Download ZIP (all {len(generated)})", build_zip(generated, with_pdf, _pdf_failed),
                       file_name=archive_name(), mime="application/zip", key="zip_all")
else:
    e1.info("Generate barcodes to enable the ZIP export.")
if selected:
    e2.download_button(f"Download ZIP (selected {len(selected)})", build_zip(selected, with_pdf, _pdf_failed),
                       file_name=archive_name(), mime="application/zip", key="zip_selected")
