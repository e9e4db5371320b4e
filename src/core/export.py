"""CSV export of the budget report.

Rows and their order come straight from ``build_report_rows`` so the file
matches the on-screen table.
"""

from pathlib import Path
from typing import Optional

import pandas as pd

from src.models.results import ReportRow

EXPORT_COLUMNS = ["Label", "Amount", "Remark", "Gap to Target"]


def report_to_dataframe(rows: list[ReportRow]) -> pd.DataFrame:
    return pd.DataFrame(
        [[r.label, r.amount, r.remark, r.target_gap] for r in rows],
        columns=EXPORT_COLUMNS,
    )


def export_report_csv(rows: list[ReportRow], path: Optional[Path] = None) -> str:
    """Serialize the report to CSV, writing *path* when given.

    Missing amounts are left blank. Returns the CSV text either way.
    """
    df = report_to_dataframe(rows)
    text = df.to_csv(index=False, float_format="%.2f")
    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return text
