"""
Invoice Extraction Agent
Extracts the PO number and line items from an invoice PDF using an LLM.
"""

import json
import re
from typing import Any, Dict, Tuple

from langchain_openai import ChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.prompts import PromptTemplate

from po_reconciler.state import ReconciliationState
from po_reconciler.utils.pdf import extract_text_from_pdf, clean_extracted_text
from po_reconciler.utils.logging import setup_logging, log_pipeline_event
from po_reconciler.config import get_config


logger = setup_logging(__name__)
config = get_config()


class ExtractionError(ValueError):
    """Raised when invoice data cannot be extracted from a document."""


MOCK_EXTRACTION_RESPONSE = """
{
    "poNumber": "PO-MOCK-001",
    "invoiceDate": "2025-04-07",
    "lineItems": [
        {"productName": "Mock Widget A", "quantity": 10, "unitPrice": 5.0, "totalPrice": 50.0, "deliveryDate": ""},
        {"productName": "Mock Widget B", "quantity": 4, "unitPrice": null, "totalPrice": 20.0, "deliveryDate": "2025-04-14"}
    ]
}
"""


EXTRACTION_PROMPT_TEMPLATE = """From the extracted invoice text below, return the purchase order data as JSON:

{{"poNumber": "purchase order number", "invoiceDate": "document-level invoice date, if any", "lineItems": [{{"productName": "product name or description exactly as printed", "quantity": 1, "unitPrice": 0.0, "totalPrice": 0.0, "deliveryDate": "delivery or required date printed with this line, otherwise empty"}}]}}

Rules:
- Extract ALL line items.
- quantity, unitPrice and totalPrice are numbers, not strings.
- Give unitPrice and totalPrice when both are printed; otherwise give the one that is, and null for the other.
- deliveryDate is only for dates printed under or next to an individual line item.
- Return ONLY JSON.

Invoice text:
{invoice_text}"""


def get_llm(model_name: str = None):
    """Get LLM instance based on provider."""
    model = model_name or config.LLM_MODEL

    if config.LLM_PROVIDER == "gemini":
        if not config.GOOGLE_API_KEY:
            raise ExtractionError("GOOGLE_API_KEY must be set for the gemini provider")
        return ChatGoogleGenerativeAI(
            model=model,
            google_api_key=config.GOOGLE_API_KEY,
            temperature=config.LLM_TEMPERATURE,
            max_output_tokens=config.LLM_MAX_TOKENS,
        )

    if not config.LLM_API_KEY:
        raise ExtractionError("LLM_API_KEY must be set for the openai provider")
    return ChatOpenAI(
        model=model,
        api_key=config.LLM_API_KEY,
        base_url=config.LLM_API_BASE,
        temperature=config.LLM_TEMPERATURE,
        max_tokens=config.LLM_MAX_TOKENS,
    )


def get_llm_response_text(response: Any) -> str:
    """Pull the text out of a chat model response."""
    content = getattr(response, "content", response)

    # Some providers return a list of content blocks
    if isinstance(content, list):
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )

    if not isinstance(content, str) or not content.strip():
        raise ExtractionError(f"LLM returned no text content ({type(response).__name__})")
    return content


async def try_llm_extraction(text: str, model_name: str = None) -> str:
    """Run the extraction prompt against one model."""
    if config.LLM_MOCK_MODE or config.LLM_PROVIDER == "mock":
        logger.info("Mock mode enabled - returning sample JSON response")
        return MOCK_EXTRACTION_RESPONSE

    llm = get_llm(model_name)
    prompt = PromptTemplate(
        input_variables=["invoice_text"],
        template=EXTRACTION_PROMPT_TEMPLATE,
    )

    chain = prompt | llm
    response = await chain.ainvoke({"invoice_text": text})
    return get_llm_response_text(response).strip()


def parse_extracted_json(json_str: str) -> Dict[str, Any]:
    """
    Parse the JSON object out of an LLM reply.

    Accepts bare JSON, a fenced code block, or an object embedded in prose.
    """
    if not json_str or not json_str.strip():
        raise ExtractionError("Empty response from LLM")

    json_str = json_str.strip()
    candidates = [json_str]

    fenced = re.search(r"```(?:json)?\s*(.*?)\s*```", json_str, re.DOTALL)
    if fenced:
        candidates.append(fenced.group(1))

    start = json_str.find("{")
    end = json_str.rfind("}")
    if start >= 0 and end > start:
        candidates.append(json_str[start:end + 1])

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(result, dict) and result:
            return result

    preview = json_str[:300]
    raise ExtractionError(f"Could not parse JSON from LLM response:\n{preview}")


def extract_invoice_text(document_path: str) -> str:
    """Read and clean the text of an invoice PDF."""
    text, page_count = extract_text_from_pdf(document_path)
    cleaned = clean_extracted_text(text)

    if not cleaned:
        raise ExtractionError("No text found in PDF file")

    logger.debug(f"Extracted {len(cleaned)} characters from {page_count} pages")
    return cleaned


async def extract_invoice_data(document_path: str) -> Tuple[Dict[str, Any], str]:
    """
    Extract invoice data from a PDF.

    Tries the primary model, then the fallback model.

    Returns:
        (invoice_data, cleaned_text)
    """
    text = extract_invoice_text(document_path)

    try:
        response_text = await try_llm_extraction(text, config.LLM_MODEL)
    except ExtractionError:
        raise
    except Exception as primary_error:
        logger.warning(f"Primary model ({config.LLM_MODEL}) failed: {primary_error}")
        try:
            logger.info(f"Trying fallback model: {config.LLM_FALLBACK_MODEL}")
            response_text = await try_llm_extraction(text, config.LLM_FALLBACK_MODEL)
        except Exception as fallback_error:
            raise ExtractionError(
                f"Both models failed. Primary: {primary_error}. Fallback: {fallback_error}"
            ) from fallback_error

    return parse_extracted_json(response_text), text


async def extraction_agent(state: ReconciliationState) -> ReconciliationState:
    """
    Extraction node.

    Updates state:
    - extracted_text
    - invoice_data
    - error (if applicable)
    """
    logger.info(f"[ExtractionAgent] Processing invoice: {state.invoice_id}")

    try:
        invoice_data, text = await extract_invoice_data(state.document_path)
    except (ExtractionError, FileNotFoundError) as e:
        logger.error(f"[ExtractionAgent] {e}")
        state.error = f"Extraction failed: {e}"
        state.add_event("ExtractionAgent", state.error)
        return state
    except Exception as e:
        logger.exception(f"[ExtractionAgent] Unexpected error: {e}")
        state.error = f"Unexpected error during extraction: {e}"
        state.add_event("ExtractionAgent", state.error)
        return state

    state.extracted_text = text
    state.invoice_data = invoice_data

    line_items = invoice_data.get("lineItems")
    log_pipeline_event(
        logger,
        "ExtractionAgent",
        "Invoice extracted",
        {
            "po_number": invoice_data.get("poNumber"),
            "line_items_count": len(line_items) if isinstance(line_items, list) else 0,
        },
    )
    state.add_event(
        "ExtractionAgent",
        f"Extracted PO {invoice_data.get('poNumber')!r} from {len(text)} characters of text",
    )
    return state
