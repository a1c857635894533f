"""
Report API routes.

Provides the report list, the interactive grid view, CSV export and print data.
Export and print always cover the whole report, whatever grid parameters are sent.
"""
from typing import Annotated, Dict, List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel
from starlette.responses import Response

from app.core import config
from app.core.i18n import get_translator
from app.core.limiter import limiter
from app.features.permissions.dependencies import SecurityStore, get_security_store
from app.features.reports import security  # noqa: F401  registers the bundled report
from app.features.reports.base import Report, registry
from app.features.reports.export import export_delimited_text, export_filename
from app.features.reports.printing import build_print_model
from app.features.reports.schemas import PrintDocument, ReportColumn, ReportPage, ReportSummary
from app.features.users.dependencies import get_current_user
from app.features.users.models import User
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


def _make_report(name: str, request: Request, store: SecurityStore) -> Report:
    try:
        report_class = registry.get(name)
    except KeyError:
        raise HTTPException(status_code=404, detail="Report not found")

    return report_class(
        store,
        site_url=config.SITE_URL or str(request.base_url),
        translator=get_translator(),
    )


async def get_viewable_report(
    name: str,
    request: Request,
    store: Annotated[SecurityStore, Depends(get_security_store)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> Report:
    """
    Resolve a report by name and make sure the current user may view it.

    Raises:
        HTTPException: 404 for unknown reports, 403 when access is denied
    """
    report = _make_report(name, request, store)
    if not await report.can_view(current_user):
        log.info("User %s denied access to report %s", current_user.id, name)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=get_translator().translate("reports.access_denied"),
        )
    return report


def _parse_filters(raw_filters: List[str]) -> Dict[str, str]:
    filters = {}
    for raw in raw_filters:
        key, sep, value = raw.partition(":")
        if not sep or not key:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid filter {raw!r}, expected Key:value",
            )
        filters[key] = value
    return filters


def _dump(record) -> dict:
    if isinstance(record, BaseModel):
        return record.model_dump(by_alias=True)
    return dict(record)


@router.get("/", response_model=List[ReportSummary])
async def list_reports(
    request: Request,
    store: Annotated[SecurityStore, Depends(get_security_store)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """List the reports the current user may view."""
    summaries = []
    for name in registry.names():
        report = _make_report(name, request, store)
        if await report.can_view(current_user):
            summaries.append(ReportSummary(name=name, title=report.title(), description=report.description()))
    return summaries


@router.get("/{name}", response_model=ReportPage)
async def show_report(
    report: Annotated[Report, Depends(get_viewable_report)],
    sort: Optional[str] = None,
    direction: Literal["asc", "desc"] = "asc",
    filters: Annotated[List[str], Query(alias="filter", description="Column filter as Key:value; repeatable")] = [],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[Optional[int], Query(ge=1, le=1000)] = None,
):
    """Sorted, filtered and paged grid view of a report."""
    report_list = await report.get_list()
    try:
        view = report_list.view(
            sort=sort,
            direction=direction,
            filters=_parse_filters(filters),
            page=page,
            page_size=page_size or config.DEFAULT_PAGE_SIZE,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    columns = report.columns()
    return ReportPage(
        name=report.name,
        title=report.title(),
        description=report.description(),
        columns=[ReportColumn(key=key, label=label) for key, label in columns.labels().items()],
        sortable=list(report.sort_columns()),
        items=[_dump(item) for item in view.items],
        total=view.total,
        page=view.page,
        page_size=view.page_size,
        pages=view.pages,
    )


@router.get("/{name}/export")
@limiter.limit(config.EXPORT_RATE_LIMIT)
async def export_report(
    request: Request,
    report: Annotated[Report, Depends(get_viewable_report)],
    current_user: Annotated[User, Depends(get_current_user)],
    delimiter: Annotated[Optional[str], Query(min_length=1, max_length=1)] = None,
    header: bool = True,
):
    """Download the complete report as delimited text."""
    report_list = await report.get_list()
    content = export_delimited_text(
        report_list,
        report.columns(),
        delimiter=delimiter or config.EXPORT_DELIMITER,
        include_header=header,
    )
    filename = export_filename(report.name)
    log.info("User %s exported report %s (%d rows)", current_user.id, report.name, len(report_list))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{name}/print", response_model=PrintDocument)
@limiter.limit(config.EXPORT_RATE_LIMIT)
async def print_report(
    request: Request,
    report: Annotated[Report, Depends(get_viewable_report)],
    current_user: Annotated[User, Depends(get_current_user)],
    header: bool = True,
):
    """Print-ready document covering the complete report."""
    report_list = await report.get_list()
    log.info("User %s printed report %s (%d rows)", current_user.id, report.name, len(report_list))
    return build_print_model(
        report.title(),
        report_list,
        report.columns(),
        actor=current_user,
        include_header=header,
    )
