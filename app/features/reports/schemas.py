"""
Pydantic schemas for report rows and report responses.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


# ============================================================================
# Report Rows
# ============================================================================

class ReportRow(BaseModel):
    """
    One display-ready line of the users, groups and permissions report.

    Field aliases are the report's column keys.
    """
    id: int = Field(..., alias="ID")
    first_name: Optional[str] = Field(None, alias="FirstName")
    surname: Optional[str] = Field(None, alias="Surname")
    email: str = Field(..., alias="Email")
    created: Optional[str] = Field(None, alias="Created")
    last_visited: str = Field(..., alias="LastVisited")
    groups: str = Field(..., alias="Groups")
    permissions: str = Field(..., alias="Permissions")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ============================================================================
# Report Responses
# ============================================================================

class ReportSummary(BaseModel):
    """A report the current user may open."""
    name: str
    title: str
    description: str


class ReportColumn(BaseModel):
    key: str
    label: str


class ReportPage(BaseModel):
    """Grid view of a report: one sorted/filtered page plus column metadata."""
    name: str
    title: str
    description: str
    columns: List[ReportColumn]
    sortable: List[str]
    items: List[Dict[str, Any]]
    total: int
    page: int
    page_size: Optional[int]
    pages: int


class PrintDocument(BaseModel):
    """Print-ready rendering of a complete report."""
    title: str
    generated_at: datetime
    printed_by: Optional[str] = None
    header: Optional[List[str]] = None
    rows: List[List[str]] = []
