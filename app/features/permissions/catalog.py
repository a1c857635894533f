"""
Registry of known permission codes and their human-readable names.

Features contribute codes through providers; the registry groups them by category
the way the security admin screens list them.
"""
from typing import Any, Callable, Dict, List

from app.utils import get_logger


log = get_logger(__name__)

CatalogEntries = Dict[str, Dict[str, Dict[str, Any]]]
PermissionProvider = Callable[[], Dict[str, Dict[str, Any]]]


class PermissionCatalog:
    """
    Collects permission definitions from registered providers.

    A provider returns {code: {"name": ..., "category": ..., "help": ..., "sort": ...}}.
    The same code may be declared in several categories.
    """

    def __init__(self) -> None:
        self._providers: List[PermissionProvider] = []

    def register(self, provider: PermissionProvider) -> PermissionProvider:
        """Register a provider; usable as a decorator."""
        self._providers.append(provider)
        log.debug("Registered permission provider %s", getattr(provider, "__name__", provider))
        return provider

    def all_entries(self) -> CatalogEntries:
        """
        Return every entry grouped by category, keyed by uppercased code.

        Categories keep first-registration order; entries within a category are
        ordered by sort, then name.
        """
        grouped: CatalogEntries = {}
        for provider in self._providers:
            for code, definition in provider().items():
                category = definition.get("category") or "Other"
                grouped.setdefault(category, {})[code.upper()] = {
                    "name": definition.get("name"),
                    "help": definition.get("help"),
                    "sort": definition.get("sort", 0),
                }

        return {
            category: dict(
                sorted(entries.items(), key=lambda item: (item[1]["sort"], item[1]["name"] or ""))
            )
            for category, entries in grouped.items()
        }


def cms_permissions() -> Dict[str, Dict[str, Any]]:
    """Permission codes shipped with the CMS."""
    return {
        "ADMIN": {
            "name": "Full administrative rights",
            "category": "Roles and access permissions",
            "help": "Implies all other permissions.",
            "sort": -100,
        },
        "CMS_ACCESS_LeftAndMain": {
            "name": "Access to all CMS sections",
            "category": "CMS Access",
            "help": "Overrules more specific access settings.",
            "sort": -100,
        },
        "CMS_ACCESS_SecurityAdmin": {
            "name": "Access to 'Security' section",
            "category": "CMS Access",
            "help": "Allow viewing, adding and editing users, as well as assigning permissions and roles to them.",
        },
        "EDIT_PERMISSIONS": {
            "name": "Manage permissions for groups",
            "category": "Roles and access permissions",
            "help": "Ability to edit Permissions and IP Addresses for a group. Requires the \"Access to 'Security' section\" permission.",
        },
        "APPLY_ROLES": {
            "name": "Apply roles to groups",
            "category": "Roles and access permissions",
            "help": "Ability to edit the roles assigned to a group. Requires the \"Access to 'Users' section\" permission.",
        },
        "SITETREE_GRANT_ACCESS": {
            "name": "Manage access rights for content",
            "category": "Content permissions",
            "help": "Control which groups can access or edit certain pages",
            "sort": 100,
        },
        "SITETREE_VIEW_ALL": {
            "name": "View any page",
            "category": "Content permissions",
            "help": "Ignore login restrictions and access settings for viewing pages",
            "sort": -100,
        },
        "SITETREE_EDIT_ALL": {
            "name": "Edit any page",
            "category": "Content permissions",
            "help": "Ignore access settings and allow editing of any page",
            "sort": -50,
        },
        "SITETREE_REORGANISE": {
            "name": "Change site structure",
            "category": "Content permissions",
            "help": "Rearrange pages in the site tree through drag&drop.",
            "sort": 100,
        },
        "VIEW_DRAFT_CONTENT": {
            "name": "View draft content",
            "category": "Content permissions",
            "help": "Applies to viewing pages outside of the CMS in draft mode.",
        },
    }


_catalog = PermissionCatalog()
_catalog.register(cms_permissions)


def get_catalog() -> PermissionCatalog:
    """Process-wide catalog with the CMS provider registered."""
    return _catalog
