"""
Report export helpers.
Converts result rows to display records, a DataFrame, or CSV text.
"""

import csv
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from po_reconciler.schemas.output import EXPORT_COLUMNS, ReconciliationResultRow


def filter_display_results(results: Iterable[ReconciliationResultRow]) -> List[Dict[str, Any]]:
    """Result rows as column-keyed dicts without the internal match flags."""
    return [row.to_dict(include_flags=False) for row in results]


def results_to_dataframe(results: Iterable[ReconciliationResultRow]) -> pd.DataFrame:
    """Result rows as a DataFrame in report column order."""
    return pd.DataFrame(filter_display_results(results), columns=EXPORT_COLUMNS)


def results_to_csv(results: Iterable[ReconciliationResultRow]) -> str:
    """
    Render the downloadable report.

    Text columns are quoted, numeric columns are not. The header is plain.
    """
    frame = results_to_dataframe(results)
    header = ",".join(EXPORT_COLUMNS) + "\n"
    body = frame.to_csv(
        index=False,
        header=False,
        quoting=csv.QUOTE_NONNUMERIC,
        lineterminator="\n",
    )
    return header + body


def report_filename(day: Optional[date] = None) -> str:
    """File name for a downloaded report, e.g. reconciliation_report_2025-04-07.csv."""
    day = day or date.today()
    return f"reconciliation_report_{day.isoformat()}.csv"
