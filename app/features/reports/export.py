"""
Delimited-text export of a complete report.

Values are always quoted and embedded quotes are escaped as \\" (not doubled), which
is the format existing consumers of these exports parse.
"""
from datetime import datetime
from typing import Any, Iterable, Optional

from app.features.reports.columns import ColumnSet, cell_text, column_header, column_value
from app.features.reports.listing import ReportList


def quote_value(value: Any) -> str:
    text = cell_text(value).replace("\r", "\n")
    return '"' + text.replace('"', '\\"') + '"'


def format_delimited(
    records: Iterable[Any],
    columns: ColumnSet,
    delimiter: str = ",",
    include_header: bool = True,
) -> str:
    """
    Serialize records, one line per record, each line terminated by a newline.

    The header line holds each column's label (the key, for computed columns).
    """
    lines = []
    if include_header:
        lines.append(delimiter.join(quote_value(column_header(column)) for column in columns))

    for record in records:
        lines.append(delimiter.join(quote_value(column_value(record, column)) for column in columns))

    return "".join(line + "\n" for line in lines)


def export_delimited_text(
    report_list: ReportList,
    columns: Optional[ColumnSet] = None,
    delimiter: str = ",",
    include_header: bool = True,
) -> str:
    """Export every record of a report, ignoring any grid sort, filter or paging."""
    return format_delimited(
        report_list.source(),
        columns or report_list.columns,
        delimiter=delimiter,
        include_header=include_header,
    )


def export_filename(report_name: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{report_name}-export-{now.strftime('%Y-%m-%d_%H-%M-%S')}.csv"
