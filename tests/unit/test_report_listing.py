"""Tests for the source/view split of report records."""

import pytest

from app.features.reports.columns import ColumnSet, DirectColumn
from app.features.reports.listing import ReportList


COLUMNS = ColumnSet([DirectColumn("ID", "ID"), DirectColumn("Name", "Name"), DirectColumn("Note", "Note")])

RECORDS = [
    {"ID": 1, "Name": "carol", "Note": None},
    {"ID": 2, "Name": "Alice", "Note": "admin"},
    {"ID": 3, "Name": "bob", "Note": "Admin team"},
    {"ID": 4, "Name": "dave", "Note": "editor"},
]


@pytest.fixture
def report_list() -> ReportList:
    return ReportList(RECORDS, COLUMNS, sortable=["ID", "Name"])


class TestSource:
    def test_source_is_complete_and_in_generation_order(self, report_list: ReportList) -> None:
        assert [r["ID"] for r in report_list.source()] == [1, 2, 3, 4]

    def test_view_does_not_change_source(self, report_list: ReportList) -> None:
        report_list.view(sort="Name", direction="desc", filters={"Note": "admin"}, page=1, page_size=1)
        assert [r["ID"] for r in report_list.source()] == [1, 2, 3, 4]
        assert len(report_list) == 4


class TestView:
    def test_sort_is_case_insensitive(self, report_list: ReportList) -> None:
        view = report_list.view(sort="Name")
        assert [r["Name"] for r in view.items] == ["Alice", "bob", "carol", "dave"]

    def test_sort_descending(self, report_list: ReportList) -> None:
        view = report_list.view(sort="ID", direction="desc")
        assert [r["ID"] for r in view.items] == [4, 3, 2, 1]

    def test_filter_is_case_insensitive_substring(self, report_list: ReportList) -> None:
        view = report_list.view(filters={"Note": "ADMIN"})
        assert [r["ID"] for r in view.items] == [2, 3]
        assert view.total == 2

    def test_paging(self, report_list: ReportList) -> None:
        view = report_list.view(page=2, page_size=3)
        assert [r["ID"] for r in view.items] == [4]
        assert view.total == 4
        assert view.pages == 2
        assert view.page == 2

    def test_empty_page_past_the_end(self, report_list: ReportList) -> None:
        view = report_list.view(page=5, page_size=3)
        assert view.items == []
        assert view.total == 4

    def test_no_page_size_returns_everything(self, report_list: ReportList) -> None:
        view = report_list.view()
        assert len(view.items) == 4
        assert view.pages == 1
        assert view.page_size is None

    def test_unsortable_column(self, report_list: ReportList) -> None:
        with pytest.raises(ValueError, match="not sortable"):
            report_list.view(sort="Note")

    def test_unknown_filter_column(self, report_list: ReportList) -> None:
        with pytest.raises(ValueError, match="Unknown filter column"):
            report_list.view(filters={"Nope": "x"})

    @pytest.mark.parametrize("kwargs", [{"page": 0}, {"page_size": 0}, {"direction": "up"}])
    def test_invalid_arguments(self, report_list: ReportList, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            report_list.view(**kwargs)
