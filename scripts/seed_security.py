"""
Seed script to populate demo security groups, users and permission assignments.

Run this script after database initialization to create:
- Default security groups (with a nested group)
- Group permission grants
- A few demo users and their memberships

Usage:
    python -m scripts.seed_security
"""
import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db, init_db
from app.features.permissions.models import Group, Permission, group_members
from app.features.users.auth import create_access_token
from app.features.users.models import User
from app.utils import get_logger, setup_logging


log = get_logger(__name__)


# code -> (title, parent code, permission codes)
DEFAULT_GROUPS = {
    "administrators": ("Administrators", None, ["ADMIN"]),
    "content-authors": ("Content Authors", None, ["CMS_ACCESS_LeftAndMain", "SITETREE_REORGANISE"]),
    "news-desk": ("News Desk", "content-authors", ["VIEW_DRAFT_CONTENT"]),
    "security-officers": ("Security Officers", None, ["CMS_ACCESS_SecurityAdmin"]),
}

# email -> (first name, surname, group codes)
DEFAULT_USERS = {
    "admin@example.org": ("Default", "Admin", ["administrators"]),
    "author@example.org": ("Alex", "Author", ["content-authors"]),
    "reporter@example.org": ("Robin", "Reporter", ["news-desk"]),
    "auditor@example.org": ("Sam", "Auditor", ["security-officers"]),
    "visitor@example.org": ("Vic", None, []),
}


async def seed_groups(db: AsyncSession) -> dict[str, Group]:
    """
    Create default groups and their permission grants.

    Returns:
        Dictionary mapping group codes to Group objects
    """
    log.info("Creating default groups...")
    groups_map = {}

    for code, (title, parent_code, permission_codes) in DEFAULT_GROUPS.items():
        result = await db.execute(select(Group).where(Group.code == code))
        existing = result.scalars().first()

        if existing:
            log.debug("Group '%s' already exists, skipping", code)
            groups_map[code] = existing
            continue

        parent = groups_map.get(parent_code) if parent_code else None
        group = Group(code=code, title=title, parent_id=parent.id if parent else None)
        db.add(group)
        await db.flush()

        for permission_code in permission_codes:
            db.add(Permission(code=permission_code, group_id=group.id))

        groups_map[code] = group
        log.info("Created group '%s' with %d permissions", title, len(permission_codes))

    await db.commit()
    return groups_map


async def seed_users(db: AsyncSession, groups_map: dict[str, Group]) -> dict[str, User]:
    """
    Create demo users and add them to their groups.

    Args:
        db: Database session
        groups_map: Dictionary of group code -> Group object
    """
    log.info("Creating demo users...")
    users_map = {}

    for email, (first_name, surname, group_codes) in DEFAULT_USERS.items():
        result = await db.execute(select(User).where(User.email == email))
        existing = result.scalars().first()

        if existing:
            log.debug("User '%s' already exists, skipping", email)
            users_map[email] = existing
            continue

        user = User(email=email, first_name=first_name, surname=surname)
        db.add(user)
        await db.flush()

        for group_code in group_codes:
            if group_code not in groups_map:
                log.warning("Group '%s' not found for user '%s'", group_code, email)
                continue
            await db.execute(
                group_members.insert().values(group_id=groups_map[group_code].id, user_id=user.id)
            )

        users_map[email] = user
        log.info("Created user '%s' in %d groups", email, len(group_codes))

    await db.commit()
    return users_map


async def main():
    """Seed groups and users, then print a bearer token for the admin."""
    setup_logging()
    log.info("Starting security seeding...")

    await init_db()

    async for db in get_db():
        try:
            groups_map = await seed_groups(db)
            users_map = await seed_users(db, groups_map)

            admin = users_map["admin@example.org"]
            log.info("Security seeding completed successfully!")
            log.info("Admin bearer token: %s", create_access_token(admin.id))

        except Exception as e:
            log.error("Error seeding security data: %s", e, exc_info=True)
            await db.rollback()
            raise

        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
