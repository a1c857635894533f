"""
Column definitions shared by the grid, the CSV export and the print view.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Tuple, Union

from pydantic import BaseModel


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class DirectColumn:
    """Column whose value is read from the record field named by key."""
    key: str
    label: str


@dataclass(frozen=True)
class ComputedColumn:
    """
    Column whose value is produced by resolver.

    The resolver receives the object key resolves to on the record (a relation such
    as "Manager" or "Manager.Address"), or the record itself when key doesn't resolve.
    """
    key: str
    label: str
    resolver: Callable[[Any], Any]


Column = Union[DirectColumn, ComputedColumn]


class ColumnSet:
    """Immutable, ordered set of columns with unique keys."""

    def __init__(self, columns: Iterable[Column]):
        self._columns: Tuple[Column, ...] = tuple(columns)
        keys = [column.key for column in self._columns]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValueError(f"Duplicate column keys: {', '.join(duplicates)}")

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, key: object) -> bool:
        return any(column.key == key for column in self._columns)

    def __getitem__(self, key: str) -> Column:
        for column in self._columns:
            if column.key == key:
                return column
        raise KeyError(key)

    def keys(self) -> List[str]:
        return [column.key for column in self._columns]

    def labels(self) -> Dict[str, str]:
        """Ordered {key: label}."""
        return {column.key: column.label for column in self._columns}


def _attribute(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, MISSING)

    if isinstance(obj, BaseModel):
        # Report rows expose their column keys as field aliases
        for field_name, field in type(obj).model_fields.items():
            if field.alias == name:
                return getattr(obj, field_name)

    return getattr(obj, name, MISSING)


def resolve_path(record: Any, path: str) -> Any:
    """
    Follow a dotted field/relation path from record.

    Returns MISSING when any step doesn't exist; a None along the way yields None.
    """
    value = record
    for part in path.split("."):
        if value is None:
            return None
        value = _attribute(value, part)
        if value is MISSING:
            return MISSING
    return value


def column_header(column: Column) -> str:
    """Export header: the label, or the key for computed columns."""
    if isinstance(column, ComputedColumn):
        return column.key
    return column.label


def column_value(record: Any, column: Column) -> Any:
    """Raw cell value for a record; None when the field doesn't exist."""
    if isinstance(column, ComputedColumn):
        related = resolve_path(record, column.key)
        return column.resolver(record if related is MISSING else related)

    value = resolve_path(record, column.key)
    return None if value is MISSING else value


def cell_text(value: Any) -> str:
    """Cell value as display text."""
    if value is None:
        return ""
    return str(value)
