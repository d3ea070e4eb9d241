"""
FastAPI REST endpoints for invoice reconciliation.
Can be run with: uvicorn po_reconciler.api:app --reload
"""

import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, UploadFile, File, Form, Body
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from po_reconciler.main import process_invoice
from po_reconciler.core.reconciliation import reconcile, summarize
from po_reconciler.core.validation import validate_invoice_data, validate_po_records
from po_reconciler.schemas.output import ReconciliationResultRow
from po_reconciler.schemas.po import MatchingOptions
from po_reconciler.sources import PurchaseOrderSourceError, load_purchase_orders
from po_reconciler.utils.export import results_to_csv, report_filename
from po_reconciler.utils.pdf import validate_pdf_file
from po_reconciler.utils.logging import setup_logging
from po_reconciler.config import get_config


logger = setup_logging(__name__)
config = get_config()

app = FastAPI(
    title="Invoice PO Reconciler API",
    description="Reconciles supplier invoice line items against the purchase-order ledger",
    version="1.0.0",
)


class ReconcileDataRequest(BaseModel):
    """Invoice data plus (optionally) the PO ledger rows to reconcile against."""
    model_config = ConfigDict(populate_by_name=True)

    invoice: Any = None
    purchase_orders: Optional[Any] = Field(default=None, alias="purchaseOrders")
    options: Optional[MatchingOptions] = None


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        content={"success": False, "error": message},
        status_code=status_code,
    )


@app.post("/reconcile")
async def reconcile_invoice_endpoint(
    file: UploadFile = File(...),
    invoice_id: str = Form(None),
):
    """
    Extract an invoice PDF and reconcile it against the PO ledger.

    Args:
        file: Invoice PDF
        invoice_id: Optional invoice ID

    Returns:
        JSON with result rows and summary
    """
    suffix = Path(file.filename or "").suffix or ".pdf"

    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(await file.read())
        tmp_path = tmp.name

    try:
        is_valid, reason = validate_pdf_file(tmp_path)
        if not is_valid:
            return error_response(f"Invalid PDF file: {reason}", 400)

        report = await process_invoice(
            document_path=tmp_path,
            invoice_id=invoice_id,
            file_name=file.filename,
        )

        if not report.success:
            return error_response(report.error, 400)

        return JSONResponse(content={"success": True, "data": report.to_dict()})

    except PurchaseOrderSourceError as e:
        logger.error(f"Purchase order source failed: {e}")
        return error_response(str(e), 500)

    finally:
        Path(tmp_path).unlink(missing_ok=True)


@app.post("/reconcile/data")
async def reconcile_data_endpoint(request: ReconcileDataRequest):
    """Reconcile already-extracted invoice data."""
    if not validate_invoice_data(request.invoice):
        return error_response("Invalid invoice data structure", 400)

    po_records = request.purchase_orders
    if po_records is None:
        try:
            po_records = await load_purchase_orders()
        except PurchaseOrderSourceError as e:
            logger.error(f"Purchase order source failed: {e}")
            return error_response(str(e), 500)

    if not validate_po_records(po_records):
        return error_response("Invalid purchase order data structure", 400)

    options = request.options or MatchingOptions.from_config(config)
    results = reconcile(request.invoice, po_records, options)
    summary = summarize(results)

    return JSONResponse(content={
        "success": True,
        "data": {
            "invoiceData": request.invoice,
            "purchaseOrderCount": len(po_records),
            "reconciliationResults": [row.to_dict() for row in results],
            "summary": summary.model_dump(by_alias=True),
        },
    })


@app.get("/purchase-orders")
async def purchase_orders_endpoint():
    """Fetch and validate the PO ledger."""
    try:
        po_records = await load_purchase_orders()
    except PurchaseOrderSourceError as e:
        logger.error(f"Purchase order source failed: {e}")
        return JSONResponse(
            content={"success": False, "data": [], "recordCount": 0, "error": str(e)},
            status_code=500,
        )

    if not validate_po_records(po_records):
        return JSONResponse(
            content={
                "success": False,
                "data": [],
                "recordCount": 0,
                "error": "Invalid purchase order record structure",
            },
            status_code=500,
        )

    return {"success": True, "data": po_records, "recordCount": len(po_records)}


@app.post("/export/csv")
async def export_csv_endpoint(rows: List[Dict[str, Any]] = Body(...)):
    """Render result rows as a downloadable CSV report."""
    try:
        results = [ReconciliationResultRow.model_validate(row) for row in rows]
    except ValidationError as e:
        return error_response(f"Invalid result rows: {e.error_count()} errors", 400)

    return Response(
        content=results_to_csv(results),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{report_filename()}"'},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower(),
    )
