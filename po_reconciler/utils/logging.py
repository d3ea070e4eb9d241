"""
Structured logging for the reconciler.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional
from po_reconciler.config import get_config


config = get_config()


class StructuredFormatter(logging.Formatter):
    """Formats log records as structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra"):
            log_obj.update(record.extra)

        return json.dumps(log_obj, default=str)


def setup_logging(name: str = __name__) -> logging.Logger:
    """Setup and return a configured logger."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    logger.addHandler(console_handler)

    # File handler with structured JSON
    if config.LOG_FILE:
        file_handler = logging.FileHandler(config.LOG_FILE)
        file_handler.setLevel(level)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def log_pipeline_event(
    logger: logging.Logger,
    stage: str,
    action: str,
    details: Optional[dict] = None,
) -> None:
    """Log a pipeline stage action with context."""
    extra = {
        "stage": stage,
        "action": action,
    }
    if details:
        extra.update(details)

    logger.info(
        f"[{stage}] {action}",
        extra={"extra": extra}
    )


def log_discrepancy(
    logger: logging.Logger,
    po_number: str,
    item: str,
    qty_match: bool,
    price_match: bool,
    date_match: bool,
) -> None:
    """Log a line item whose matched PO row disagrees on one or more fields."""
    fields = [
        name for name, matched in (
            ("quantity", qty_match),
            ("price", price_match),
            ("date", date_match),
        )
        if not matched
    ]
    extra = {
        "type": "discrepancy",
        "po_number": po_number,
        "item": item,
        "fields": fields,
    }
    logger.warning(
        f"Discrepancy on PO {po_number!r} item {item!r}: {', '.join(fields)}",
        extra={"extra": extra}
    )
