"""
Read access to the security model and capability checks.

Implements:
- Lazy, id-ordered enumeration of users
- Group membership and hierarchical group titles
- Effective permission codes (direct + inherited through the group tree)
- FastAPI dependency providing a request-scoped store
"""
from collections.abc import AsyncIterator
from typing import Annotated, Dict, List, Optional
from fastapi import Depends
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.database.engine import get_db
from app.features.users.models import User
from app.features.permissions.models import (
    Group,
    Permission,
    group_members,
    PERMISSION_DENY,
)
from app.utils import get_logger


log = get_logger(__name__)

ADMIN_CODE = "ADMIN"
CMS_ACCESS_PREFIX = "CMS_ACCESS_"
ALL_CMS_ACCESS_CODE = "CMS_ACCESS_LEFTANDMAIN"
TREE_TITLE_SEPARATOR = " » "


class SecurityStore:
    """
    Request-scoped reader over users, groups and permission assignments.

    Groups are loaded once per store so hierarchy walks don't hit the database
    per user; a new store sees current data.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._groups: Optional[Dict[int, Group]] = None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def iter_users(self, batch_size: Optional[int] = None) -> AsyncIterator[User]:
        """
        Yield every user ordered by id ascending.

        Users are fetched in keyset-paginated batches so large account tables are
        never materialized at once.
        """
        batch_size = batch_size or config.REPORT_BATCH_SIZE
        last_id: Optional[int] = None
        while True:
            stmt = select(User).order_by(User.id).limit(batch_size)
            if last_id is not None:
                stmt = stmt.where(User.id > last_id)
            result = await self.db.execute(stmt)
            batch = result.scalars().all()
            if not batch:
                return
            for user in batch:
                yield user
            if len(batch) < batch_size:
                return
            last_id = batch[-1].id

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    async def _group_index(self) -> Dict[int, Group]:
        if self._groups is None:
            result = await self.db.execute(select(Group))
            self._groups = {group.id: group for group in result.scalars().all()}
        return self._groups

    async def groups_of(self, user: User) -> List[Group]:
        """Groups the user belongs to, ordered by sort then title."""
        result = await self.db.execute(
            select(Group)
            .join(group_members, group_members.c.group_id == Group.id)
            .where(group_members.c.user_id == user.id)
            .order_by(Group.sort, Group.title)
        )
        return list(result.scalars().all())

    async def ancestors_of(self, group: Group) -> List[Group]:
        """Ancestors of a group, root first. A cycle in parent links ends the walk."""
        index = await self._group_index()
        chain: List[Group] = []
        seen = {group.id}
        parent_id = group.parent_id
        while parent_id is not None and parent_id not in seen:
            parent = index.get(parent_id)
            if parent is None:
                break
            chain.append(parent)
            seen.add(parent_id)
            parent_id = parent.parent_id
        if parent_id is not None and parent_id in seen:
            log.warning("Group hierarchy cycle detected at group %s", parent_id)
        chain.reverse()
        return chain

    async def tree_title(self, group: Group) -> str:
        """Hierarchical display title, e.g. "Content Authors » News Desk"."""
        ancestors = await self.ancestors_of(group)
        return TREE_TITLE_SEPARATOR.join([g.title for g in ancestors] + [group.title])

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    async def effective_permission_codes(self, user_id: int) -> List[str]:
        """
        Get all permission codes a user holds.

        Includes:
        1. Codes granted directly to the user
        2. Codes granted to the user's groups
        3. Codes granted to any ancestor of those groups

        Codes denied in any of those scopes are removed. The result is uppercased and
        deduplicated, keeping the order in which codes were first granted.
        """
        result = await self.db.execute(
            select(group_members.c.group_id).where(group_members.c.user_id == user_id)
        )
        group_ids = set(result.scalars().all())

        index = await self._group_index()
        for group_id in list(group_ids):
            group = index.get(group_id)
            if group is not None:
                group_ids.update(g.id for g in await self.ancestors_of(group))

        conditions = [Permission.user_id == user_id]
        if group_ids:
            conditions.append(Permission.group_id.in_(group_ids))

        result = await self.db.execute(
            select(Permission).where(or_(*conditions)).order_by(Permission.id)
        )
        assignments = result.scalars().all()

        denied = {p.code.upper() for p in assignments if p.type == PERMISSION_DENY}
        direct = [p for p in assignments if p.user_id is not None and p.type != PERMISSION_DENY]
        inherited = [p for p in assignments if p.group_id is not None and p.type != PERMISSION_DENY]

        codes: List[str] = []
        for permission in direct + inherited:
            code = permission.code.upper()
            if code in denied or code in codes:
                continue
            codes.append(code)

        log.debug("User %s effective permission codes: %s", user_id, codes)
        return codes


async def has_capability(store: SecurityStore, actor: Optional[User], code: str) -> bool:
    """
    Check whether an actor holds a permission code.

    ADMIN implies every other code, and CMS_ACCESS_LeftAndMain implies every
    CMS_ACCESS_ code. No actor means no capability.
    """
    if actor is None:
        return False

    codes = await store.effective_permission_codes(actor.id)
    code = code.upper()
    if code in codes or ADMIN_CODE in codes:
        return True
    if code.startswith(CMS_ACCESS_PREFIX) and ALL_CMS_ACCESS_CODE in codes:
        return True

    log.debug("User %s lacks capability %s", actor.id, code)
    return False


# ============================================================================
# FastAPI Dependencies
# ============================================================================

async def get_security_store(
    db: Annotated[AsyncSession, Depends(get_db)]
) -> SecurityStore:
    """
    FastAPI dependency providing a store bound to the request's session.

    Usage:
        @router.get("/reports")
        async def list_reports(store: SecurityStore = Depends(get_security_store)):
            ...
    """
    return SecurityStore(db)
