"""
Print view of a complete report.
"""
from datetime import datetime, timezone
from typing import Optional

from app.features.reports.columns import ColumnSet, cell_text, column_value
from app.features.reports.listing import ReportList
from app.features.reports.schemas import PrintDocument
from app.features.users.models import User


def build_print_model(
    title: str,
    report_list: ReportList,
    columns: Optional[ColumnSet] = None,
    actor: Optional[User] = None,
    include_header: bool = True,
    now: Optional[datetime] = None,
) -> PrintDocument:
    """
    Build the document a print template renders.

    Every record of the report's source is included regardless of the grid's state.
    Cells hold plain text; the header holds column labels.
    """
    columns = columns or report_list.columns
    return PrintDocument(
        title=title,
        generated_at=now or datetime.now(timezone.utc),
        printed_by=actor.display_name if actor is not None else None,
        header=[column.label for column in columns] if include_header else None,
        rows=[
            [cell_text(column_value(record, column)) for column in columns]
            for record in report_list.source()
        ],
    )
