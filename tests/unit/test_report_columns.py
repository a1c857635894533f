"""Tests for report column definitions and value resolution."""

from dataclasses import FrozenInstanceError

import pytest

from app.features.reports.columns import (
    ColumnSet,
    ComputedColumn,
    DirectColumn,
    column_header,
    column_value,
    resolve_path,
    MISSING,
)
from app.features.reports.schemas import ReportRow


def _row(**overrides) -> ReportRow:
    data = dict(
        id=7,
        first_name="Ada",
        surname="Lovelace",
        email="ada@example.org",
        created="2013-01-01 10:00:00",
        last_visited="Never",
        groups="Administrators",
        permissions="Full administrative rights",
    )
    data.update(overrides)
    return ReportRow(**data)


class TestColumnSet:
    def test_labels_keep_declaration_order(self) -> None:
        columns = ColumnSet([DirectColumn("B", "Bee"), DirectColumn("A", "Ay")])
        assert list(columns.labels().items()) == [("B", "Bee"), ("A", "Ay")]
        assert columns.keys() == ["B", "A"]

    def test_duplicate_keys_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate column keys: A"):
            ColumnSet([DirectColumn("A", "One"), DirectColumn("A", "Two")])

    def test_lookup_by_key(self) -> None:
        column = DirectColumn("Email", "Email")
        columns = ColumnSet([column])
        assert columns["Email"] is column
        assert "Email" in columns
        assert "Missing" not in columns
        with pytest.raises(KeyError):
            columns["Missing"]

    def test_columns_are_immutable(self) -> None:
        column = DirectColumn("Email", "Email")
        with pytest.raises(FrozenInstanceError):
            column.label = "Changed"  # type: ignore[misc]


class TestResolvePath:
    def test_row_fields_resolve_by_column_key(self) -> None:
        row = _row()
        assert resolve_path(row, "FirstName") == "Ada"
        assert resolve_path(row, "ID") == 7

    def test_mapping_relation_path(self) -> None:
        record = {"Manager": {"Email": "boss@example.org"}}
        assert resolve_path(record, "Manager.Email") == "boss@example.org"

    def test_missing_step(self) -> None:
        assert resolve_path({"Manager": {}}, "Manager.Email") is MISSING

    def test_none_along_path(self) -> None:
        assert resolve_path({"Manager": None}, "Manager.Email") is None

    def test_properties_are_read(self) -> None:
        class Record:
            @property
            def Manager(self):
                return {"Email": "boss@example.org"}

        assert resolve_path(Record(), "Manager.Email") == "boss@example.org"

    def test_methods_are_not_called(self) -> None:
        class Record:
            def Manager(self):
                return {"Email": "boss@example.org"}

        assert resolve_path(Record(), "Manager.Email") is MISSING


class TestColumnValue:
    def test_direct_column_reads_field(self) -> None:
        assert column_value(_row(), DirectColumn("Email", "Email")) == "ada@example.org"

    def test_direct_column_missing_field_is_none(self) -> None:
        assert column_value({"A": 1}, DirectColumn("B", "Bee")) is None

    def test_computed_column_receives_relation(self) -> None:
        record = {"Manager": {"Email": "boss@example.org"}}
        column = ComputedColumn("Manager", "Manager email", lambda manager: manager["Email"].upper())
        assert column_value(record, column) == "BOSS@EXAMPLE.ORG"

    def test_computed_column_receives_record_when_key_is_not_a_relation(self) -> None:
        column = ComputedColumn("FullName", "Full name", lambda row: f"{row.first_name} {row.surname}")
        assert column_value(_row(), column) == "Ada Lovelace"

    def test_header_is_key_for_computed_columns(self) -> None:
        assert column_header(DirectColumn("Email", "Email address")) == "Email address"
        assert column_header(ComputedColumn("FullName", "Full name", str)) == "FullName"
