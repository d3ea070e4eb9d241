"""
Purchase-order ledger sources.

The ledger is a list of JSON rows, either served by a remote tabular data
endpoint or stored in a local JSON file. Rows are returned raw; callers
validate them before reconciling.
"""

import json
from typing import Any, Dict, List, Optional

import httpx

from po_reconciler.config import get_config
from po_reconciler.utils.logging import setup_logging


logger = setup_logging(__name__)
config = get_config()


class PurchaseOrderSourceError(RuntimeError):
    """Raised when the PO ledger cannot be fetched or is not a list of rows."""


async def fetch_purchase_orders(
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Dict[str, Any]]:
    """Fetch PO ledger rows from a JSON endpoint."""
    url = url or config.PO_DATA_URL
    if not url:
        raise PurchaseOrderSourceError("No purchase order URL configured (PO_DATA_URL)")

    timeout = timeout or config.PO_FETCH_TIMEOUT

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        try:
            response = await client.get(
                url,
                headers={"Accept": "application/json", "Cache-Control": "no-store"},
            )
        except httpx.HTTPError as e:
            raise PurchaseOrderSourceError(f"Failed to fetch purchase order data: {e}") from e

    if response.status_code >= 400:
        raise PurchaseOrderSourceError(
            f"Failed to fetch purchase order data: HTTP {response.status_code}"
        )

    try:
        data = response.json()
    except ValueError as e:
        raise PurchaseOrderSourceError("Purchase order endpoint did not return JSON") from e

    if not isinstance(data, list):
        raise PurchaseOrderSourceError("Expected an array of purchase order records")

    logger.info(f"Fetched {len(data)} purchase order rows from {url}")
    return data


def load_purchase_orders_from_file(po_file: str) -> List[Dict[str, Any]]:
    """Load PO ledger rows from a JSON file."""
    try:
        with open(po_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"PO file not found: {po_file}. Using empty PO list.")
        return []
    except json.JSONDecodeError as e:
        raise PurchaseOrderSourceError(f"PO file {po_file} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PurchaseOrderSourceError(f"PO file {po_file} must contain a JSON array")

    logger.info(f"Loaded {len(data)} purchase order rows from {po_file}")
    return data


async def load_purchase_orders(source: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Load the PO ledger from a URL or a file path.

    Defaults to PO_DATA_URL when configured, otherwise PO_DATABASE_PATH.
    """
    source = source or config.PO_DATA_URL or config.PO_DATABASE_PATH

    if source.startswith(("http://", "https://")):
        return await fetch_purchase_orders(source)
    return load_purchase_orders_from_file(source)
