"""
Users, Groups and Permissions report.

Lists every user with their security groups and the human-readable names of their
effective permissions, for auditing who has access to what.
"""
import re
from collections.abc import AsyncIterator
from datetime import datetime
from typing import List, Optional, Union

from app.core import config
from app.core.i18n import Translator
from app.features.permissions.catalog import PermissionCatalog, get_catalog
from app.features.permissions.dependencies import SecurityStore, has_capability
from app.features.reports.base import Report, registry
from app.features.reports.columns import ColumnSet, DirectColumn
from app.features.reports.schemas import ReportRow
from app.features.users.models import User
from app.utils import get_logger


log = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DESCRIPTION_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"
UNKNOWN_PERMISSION = "Unknown"

TAG_PATTERN = re.compile(r"</?[^>]+>")
SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def format_timestamp(value: Union[datetime, str, None]) -> Optional[str]:
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    return value


@registry.register
class UserSecurityReport(Report):
    """Security audit of every user account."""

    name = "user-security"

    def __init__(
        self,
        store: SecurityStore,
        site_url: Optional[str] = None,
        translator: Optional[Translator] = None,
        catalog: Optional[PermissionCatalog] = None,
    ):
        super().__init__(store, site_url=site_url, translator=translator)
        self.catalog = catalog or get_catalog()
        self._columns = ColumnSet([
            DirectColumn("ID", "User ID"),
            DirectColumn("FirstName", "First Name"),
            DirectColumn("Surname", "Surname"),
            DirectColumn("Email", "Email"),
            DirectColumn("Created", "Date Created"),
            DirectColumn("LastVisited", "Last Visit"),
            DirectColumn("Groups", "Groups"),
            DirectColumn("Permissions", "Permissions"),
        ])

    def title(self) -> str:
        return self.translator.translate("security_report.title")

    def description(self, now: Optional[datetime] = None) -> str:
        """
        Site host and the current date and time.

        e.g. "cms.example.org - 21/12/2112 09:30:00"
        """
        host = SCHEME_PATTERN.sub("", self.site_url or config.SITE_URL or "").rstrip("/")
        now = now or datetime.now()
        return f"{host} - {now.strftime(DESCRIPTION_DATE_FORMAT)}"

    def columns(self) -> ColumnSet:
        return self._columns

    async def source_records(self) -> List[ReportRow]:
        rows = [row async for row in self.iter_rows()]
        log.info("Generated %s report with %d rows", self.name, len(rows))
        return rows

    async def iter_rows(self) -> AsyncIterator[ReportRow]:
        """One row per user, ordered by user id."""
        async for user in self.store.iter_users():
            yield await self.build_row(user)

    async def build_row(self, user: User) -> ReportRow:
        return ReportRow(
            id=user.id,
            first_name=user.first_name,
            surname=user.surname,
            email=user.email,
            created=format_timestamp(user.created_at),
            last_visited=self.last_visited_status(user.last_visited),
            groups=await self.member_groups(user),
            permissions=await self.member_permissions(user),
        )

    def last_visited_status(self, last_visited: Union[datetime, str, None]) -> str:
        """The last visit timestamp, or "Never" when there isn't one."""
        if last_visited is None or last_visited == "":
            return self.translator.translate("security_report.never")
        return format_timestamp(last_visited)

    async def member_groups(self, user: User) -> str:
        """Comma separated group titles, without markup."""
        groups = await self.store.groups_of(user)
        if not groups:
            return self.translator.translate("security_report.no_groups")

        titles = [await self.store.tree_title(group) for group in groups]
        # Markup is stripped from the joined string, not per title
        return TAG_PATTERN.sub("", ", ".join(titles))

    async def member_permissions(self, user: User) -> str:
        """
        Comma separated permission names for a user.

        A code listed in several catalog categories contributes one name per category.
        """
        codes = await self.store.effective_permission_codes(user.id)
        catalog = self.catalog.all_entries()

        names = []
        for code in codes:
            code = code.upper()
            for entries in catalog.values():
                if code in entries:
                    names.append(entries[code].get("name") or UNKNOWN_PERMISSION)

        if not names:
            return self.translator.translate("security_report.no_permissions")

        return ", ".join(names)

    async def can_view(self, actor: Optional[User]) -> bool:
        """Only security administrators may view this report."""
        return await has_capability(self.store, actor, config.SECURITY_ADMIN_PERMISSION)
