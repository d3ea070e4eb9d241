"""
PDF utilities for invoice documents.
Handles text extraction from text-based PDFs (no OCR).
"""

import os
import re
from pathlib import Path
from typing import Tuple

import pdfplumber

from po_reconciler.config import get_config
from po_reconciler.utils.logging import setup_logging


logger = setup_logging(__name__)
config = get_config()


def validate_pdf_file(file_path: str, max_bytes: int = None) -> Tuple[bool, str]:
    """
    Check that an uploaded file is a PDF we are willing to read.

    Returns:
        (is_valid, reason)
    """
    max_bytes = max_bytes or config.max_upload_bytes
    path = Path(file_path)

    if path.suffix.lower() != ".pdf":
        return False, "Only PDF files are supported"

    if not path.exists():
        return False, f"File not found: {file_path}"

    size = path.stat().st_size
    if size > max_bytes:
        return False, f"File is too large ({size} bytes, limit {max_bytes})"

    return True, ""


def extract_text_from_pdf(pdf_path: str) -> Tuple[str, int]:
    """
    Extract text from every page of a PDF.

    Returns:
        (extracted_text, page_count)
    """
    if not os.path.exists(pdf_path):
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")

    text_parts = []

    with pdfplumber.open(pdf_path) as pdf:
        page_count = len(pdf.pages)
        for page_num, page in enumerate(pdf.pages):
            page_text = page.extract_text() or ""
            if not page_text.strip():
                logger.warning(f"No text layer on PDF page {page_num + 1}")
                continue
            text_parts.append(page_text)

    logger.debug(f"Extracted text from {len(text_parts)}/{page_count} pages of {pdf_path}")
    return "\n".join(text_parts).strip(), page_count


def clean_extracted_text(text: str) -> str:
    """Normalize line endings, drop blank lines and collapse whitespace."""
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\n\s*\n", "\n", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()
