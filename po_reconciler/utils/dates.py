"""
Date normalization for invoice and purchase-order dates.

Invoices and the PO ledger spell dates many different ways. Every date is
converted to MM/DD/YYYY so the two sides can be compared as plain strings.

Known quirks:

- Slash- and dash-separated dates with a four-digit year are always read
  month-first. The day-first patterns share their regex with an earlier
  month-first pattern and can never win; they are kept in the table so the
  ordering stays explicit. Changing the order would change the output for
  existing ledger data.
- Fields out of calendar range roll over instead of failing, so
  13/04/2025 is month 13 of 2025, i.e. 01/04/2026, and 02/30/2025 is
  03/02/2025.
- Free-form text goes through dateutil before the month-name patterns, and
  dateutil already accepts every valid date those patterns do. The
  month-name step only picks up what dateutil rejects: an out-of-range day
  such as "April 31, 2025", which rolls over to 05/01/2025.
- Parts a partial date leaves out come from a fixed default (day 1, year
  2001), never from today, so "March 2025" is always 03/01/2025.
"""

import re
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


EMPTY_DATE = ""

# Fills the parts a partial free-form date leaves out
PARTIAL_DATE_DEFAULT = datetime(2001, 1, 1)

# Ordered by priority; the first regex that matches decides the field order.
DATE_PATTERNS = [
    (re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$"), "YYYY-MM-DD HH:mm:ss"),  # 2025-04-07 00:00:00
    (re.compile(r"^\d{4}-\d{2}-\d{2}$"), "YYYY-MM-DD"),  # 2025-04-07
    (re.compile(r"^\d{2}/\d{2}/\d{4}$"), "MM/DD/YYYY"),  # 04/07/2025
    (re.compile(r"^\d{2}/\d{2}/\d{2}$"), "MM/DD/YY"),  # 04/07/25
    (re.compile(r"^\d{2}/\d{2}/\d{4}$"), "DD/MM/YYYY"),  # unreachable, see module docstring
    (re.compile(r"^\d{2}-\d{2}-\d{4}$"), "MM-DD-YYYY"),  # 04-07-2025
    (re.compile(r"^\d{2}-\d{2}-\d{4}$"), "DD-MM-YYYY"),  # unreachable, see module docstring
]

# format -> (separator, field order)
_FIELD_LAYOUTS = {
    "YYYY-MM-DD": ("-", "ymd"),
    "MM/DD/YYYY": ("/", "mdy"),
    "MM/DD/YY": ("/", "mdy"),
    "DD/MM/YYYY": ("/", "dmy"),
    "MM-DD-YYYY": ("-", "mdy"),
    "DD-MM-YYYY": ("-", "dmy"),
}

MONTH_NAME_PATTERNS = [
    re.compile(r"^([A-Za-z]+)\s+(\d{1,2}),\s+(\d{4})$"),  # April 7, 2025
    re.compile(r"^([A-Za-z]{3})\s+(\d{1,2}),\s+(\d{4})$"),  # Apr 7, 2025
]

MONTHS = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]


class _UnparseableDate(Exception):
    """A fixed pattern matched but its fields fall outside the supported years."""


def expand_two_digit_year(year: int) -> int:
    """00-49 -> 2000-2049, 50-99 -> 1950-1999."""
    return 2000 + year if year < 50 else 1900 + year


def format_date(value: date) -> str:
    """Format a date as MM/DD/YYYY."""
    return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"


def _parse_with_format(text: str, fmt: str) -> date:
    if fmt == "YYYY-MM-DD HH:mm:ss":
        text, fmt = text.split(" ")[0], "YYYY-MM-DD"

    separator, order = _FIELD_LAYOUTS[fmt]
    fields = dict(zip(order, (int(part) for part in text.split(separator))))

    year = fields["y"]
    if fmt == "MM/DD/YY":
        year = expand_two_digit_year(year)

    return rollover_date(year, fields["m"], fields["d"], text)


def rollover_date(year: int, month: int, day: int, text: str = "") -> date:
    """
    Build a date, carrying out-of-range months and days into the next field.

    rollover_date(2025, 13, 4) is 2026-01-04; rollover_date(2025, 2, 30) is
    2025-03-02; day 0 is the last day of the previous month.
    """
    try:
        return date(year, 1, 1) + relativedelta(months=month - 1, days=day - 1)
    except (ValueError, OverflowError) as e:
        raise _UnparseableDate(text) from e


def get_month_index(name: str) -> int:
    """Return the 0-based month index for a full or three-letter month name, or -1."""
    folded = name.casefold()
    for index, month in enumerate(MONTHS):
        if folded == month or folded == month[:3]:
            return index
    return -1


def _parse_month_name(text: str) -> Optional[date]:
    for pattern in MONTH_NAME_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        month_index = get_month_index(match.group(1))
        if month_index == -1:
            continue
        try:
            return rollover_date(int(match.group(3)), month_index + 1, int(match.group(2)), text)
        except _UnparseableDate:
            continue
    return None


def standardize_date(value: Any) -> str:
    """
    Convert a date in any supported format to MM/DD/YYYY.

    Empty values, None and the literal "NULL" normalize to "". Strings that
    cannot be parsed are returned trimmed but otherwise unchanged; this
    function never raises.
    """
    if value is None or value == "" or value == "NULL":
        return EMPTY_DATE

    if isinstance(value, datetime):
        return format_date(value.date())
    if isinstance(value, date):
        return format_date(value)

    try:
        text = str(value).strip()

        for regex, fmt in DATE_PATTERNS:
            if regex.match(text):
                try:
                    return format_date(_parse_with_format(text, fmt))
                except _UnparseableDate:
                    return text

        try:
            return format_date(date_parser.parse(text, dayfirst=False, default=PARTIAL_DATE_DEFAULT).date())
        except (ValueError, OverflowError):
            pass

        parsed = _parse_month_name(text)
        if parsed is not None:
            return format_date(parsed)

        return text

    except Exception:
        return str(value)


def dates_equal(first: str, second: str) -> bool:
    """Compare two normalized dates. Two empty dates are equal."""
    if not first or not second:
        return not first and not second
    return first == second


def is_valid_date(value: Any) -> bool:
    """True when the value normalizes to something other than itself."""
    if value is None or value == "" or value == "NULL":
        return False

    standardized = standardize_date(value)
    return standardized != "" and standardized != value


def get_current_date() -> str:
    """Today's date as MM/DD/YYYY."""
    return format_date(date.today())
