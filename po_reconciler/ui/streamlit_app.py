"""
Streamlit UI for the invoice PO reconciler

This is a visualization layer that:
- Accepts invoice PDF uploads
- Calls the existing reconciliation pipeline
- Shows the summary and the colour-coded reconciliation table
- Offers the CSV report download

NO BUSINESS LOGIC IS IMPLEMENTED HERE.
All logic is in po_reconciler.core and po_reconciler.main.
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import streamlit as st
import asyncio
import json
import tempfile
import time
from pathlib import Path
from typing import List, Optional

from po_reconciler.main import process_invoice
from po_reconciler.schemas.output import ReconciliationReport, ReconciliationResultRow, EXPORT_COLUMNS
from po_reconciler.schemas.po import MatchingOptions
from po_reconciler.sources import PurchaseOrderSourceError, load_purchase_orders
from po_reconciler.utils.export import results_to_dataframe, results_to_csv, report_filename
from po_reconciler.utils.pdf import validate_pdf_file
from po_reconciler.ui.ui_utils import (
    build_highlight_grid,
    format_mismatch_explanation,
    format_status_display,
    get_source_label,
    summary_metrics,
)
from po_reconciler.config import get_config


config = get_config()


# ============================================================================
# PAGE CONFIGURATION
# ============================================================================

st.set_page_config(
    page_title="Invoice Reconciliation",
    page_icon="📄",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.title("📄 Invoice ↔ Purchase Order Reconciliation")
st.markdown("""
Upload supplier invoices to compare each line item against the purchase-order
ledger. Matched pairs are shown together; mismatched quantities, prices and
dates are highlighted.
""")

st.divider()


# ============================================================================
# SIDEBAR - MATCHING OPTIONS
# ============================================================================

with st.sidebar:
    st.header("⚙️ Matching Options")

    quantity_tolerance = st.number_input(
        "Quantity tolerance", min_value=0.0, value=float(config.QUANTITY_TOLERANCE), step=0.01
    )
    price_tolerance = st.number_input(
        "Price tolerance", min_value=0.0, value=float(config.PRICE_TOLERANCE), step=0.01
    )
    min_keyword_matches = st.number_input(
        "Minimum keyword matches", min_value=0, value=int(config.MIN_KEYWORD_MATCHES), step=1
    )
    require_date_match = st.checkbox("Require date match", value=config.REQUIRE_DATE_MATCH)

    with st.expander("System Configuration", expanded=False):
        st.info(f"""
        **LLM Provider**: {config.LLM_PROVIDER}
        **Model**: {config.LLM_MODEL}
        **Mock Mode**: {config.LLM_MOCK_MODE}
        **PO Source**: {config.PO_DATA_URL or config.PO_DATABASE_PATH}
        """)

options = MatchingOptions(
    quantity_tolerance=quantity_tolerance,
    price_tolerance=price_tolerance,
    min_keyword_matches=int(min_keyword_matches),
    require_date_match=require_date_match,
)


# ============================================================================
# FILE UPLOAD SECTION
# ============================================================================

st.header("📤 Upload Invoices")

uploaded_files = st.file_uploader(
    "Choose invoice PDFs",
    type=["pdf"],
    accept_multiple_files=True,
    help="Text-based PDF invoices"
)

if not uploaded_files:
    st.info("👈 Upload one or more invoice PDFs to begin")


# ============================================================================
# PIPELINE EXECUTION
# ============================================================================

def run_pipeline(file_paths: List[str], file_names: List[str]) -> List[ReconciliationReport]:
    """
    Call the existing pipeline for each uploaded file.
    The PO ledger is loaded once for the whole batch.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    try:
        po_records = loop.run_until_complete(load_purchase_orders())

        reports = []
        for file_path, file_name in zip(file_paths, file_names):
            report = loop.run_until_complete(
                process_invoice(
                    file_path,
                    invoice_id=Path(file_name).stem,
                    po_records=po_records,
                    options=options,
                    file_name=file_name,
                )
            )
            reports.append(report)
        return reports
    finally:
        loop.close()


# ============================================================================
# RESULT DISPLAY
# ============================================================================

def display_summary(report: ReconciliationReport) -> None:
    """Metric cards for one invoice."""
    cols = st.columns(4)
    for col, metric in zip(cols, summary_metrics(report.summary)):
        with col:
            st.metric(metric["label"], metric["value"])


def display_results_table(results: List[ReconciliationResultRow]) -> None:
    """Colour-coded reconciliation table."""
    if not results:
        st.warning("⚠️ No line items to display")
        return

    frame = results_to_dataframe(results)
    grid = build_highlight_grid(results, EXPORT_COLUMNS)

    frame["Source"] = frame["Source"].map(get_source_label)
    frame["Status"] = frame["Status"].map(format_status_display)

    styled = frame.style.apply(
        lambda column: grid_column(grid, frame.columns.get_loc(column.name)),
        axis=0,
    ).format({"Qty": "{:g}", "Unit Price": "{:.2f}", "Total Price": "{:.2f}"})

    st.dataframe(styled, width='stretch', hide_index=True)

    explanations = [
        f"**{row.description}**: {format_mismatch_explanation(row)}"
        for row in results
        if row.is_invoice and format_mismatch_explanation(row)
    ]
    if explanations:
        with st.expander("⚠️ Discrepancy details", expanded=False):
            for line in explanations:
                st.markdown(line)


def grid_column(grid: List[List[str]], index: int) -> List[str]:
    return [row[index] for row in grid]


def display_report(report: ReconciliationReport) -> None:
    """Everything shown for one processed invoice."""
    title = report.file_name or report.invoice_id

    with st.expander(f"📄 {title}", expanded=True):
        if not report.success:
            st.error(f"❌ {report.error}")
            return

        po_number = (report.invoice_data or {}).get("poNumber", "")
        st.caption(f"PO #: {po_number} · {report.purchase_order_count} ledger rows checked")

        display_summary(report)
        display_results_table(report.results)

        with st.expander("Extracted invoice data", expanded=False):
            st.code(json.dumps(report.invoice_data, indent=2, default=str), language="json")


# ============================================================================
# MAIN EXECUTION
# ============================================================================

if uploaded_files:
    if st.button("▶️ Reconcile", key="run_button", width='stretch'):
        file_paths, file_names = [], []

        for uploaded_file in uploaded_files:
            with tempfile.NamedTemporaryFile(delete=False, suffix=".pdf") as tmp:
                tmp.write(uploaded_file.getbuffer())
                temp_path = tmp.name

            is_valid, reason = validate_pdf_file(temp_path)
            if not is_valid:
                st.error(f"❌ {uploaded_file.name}: {reason}")
                Path(temp_path).unlink(missing_ok=True)
                continue

            file_paths.append(temp_path)
            file_names.append(uploaded_file.name)

        if file_paths:
            with st.spinner("🔄 Processing invoices..."):
                start_time = time.time()
                try:
                    st.session_state.reports = run_pipeline(file_paths, file_names)
                    st.session_state.elapsed_time = time.time() - start_time
                except PurchaseOrderSourceError as e:
                    st.error(f"❌ Could not load purchase orders: {e}")
                finally:
                    for path in file_paths:
                        Path(path).unlink(missing_ok=True)

reports: Optional[List[ReconciliationReport]] = st.session_state.get("reports")

if reports:
    st.divider()
    st.header("📊 Results")
    st.caption(f"Processed {len(reports)} invoice(s) in {st.session_state.get('elapsed_time', 0):.2f}s")

    for report in reports:
        display_report(report)

    all_results = [row for report in reports for row in report.results]
    if all_results:
        st.download_button(
            "⬇️ Download CSV report",
            data=results_to_csv(all_results),
            file_name=report_filename(),
            mime="text/csv",
        )
