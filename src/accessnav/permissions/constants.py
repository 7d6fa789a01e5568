"""Permission constants for the RBAC console.

Provides ``Permissions`` — the permission strings the console's routes
declare, plus builders for ad-hoc ones.
"""

from __future__ import annotations


class Permissions:
    """Canonical permission constants.

    Format: ``{application}:{resource}:{operation}``; any segment may be
    the wildcard ``*``.

    Two modes of use:

    1. **Static constants** — permissions declared by console routes::

        satisfies(Permissions.GROUP_READ, principal.grants)

    2. **Builders** — for concrete application/resource pairs::

        Permissions.build("inventory", "hosts", "read")  → "inventory:hosts:read"
        Permissions.all_of("cost-management")            → "cost-management:*:*"
    """

    WILDCARD = "*"
    SEPARATOR = ":"

    # ── RBAC ────────────────────────────────────────────
    RBAC_ALL = "rbac:*:*"  # User Access administrator
    RBAC_READ_ALL = "rbac:*:read"
    PRINCIPAL_READ = "rbac:principal:read"
    GROUP_READ = "rbac:group:read"
    GROUP_WRITE = "rbac:group:write"
    ROLE_READ = "rbac:role:read"
    ROLE_WRITE = "rbac:role:write"
    WORKSPACE_READ = "rbac:workspace:read"
    WORKSPACE_WRITE = "rbac:workspace:write"

    # ── Inventory ───────────────────────────────────────
    INVENTORY_ALL = "inventory:*:*"
    INVENTORY_GROUPS_READ = "inventory:groups:read"
    INVENTORY_GROUPS_WRITE = "inventory:groups:write"

    # ── Builders ────────────────────────────────────────

    @staticmethod
    def build(application: str, resource: str, operation: str) -> str:
        """Build a permission string from its three segments.

        Example::

            Permissions.build("rbac", "group", "read")  # "rbac:group:read"
            Permissions.build("rbac", "*", "read")      # "rbac:*:read"
        """
        return f"{application}:{resource}:{operation}"

    @staticmethod
    def all_of(application: str) -> str:
        """Build the full wildcard grant for an application.

        Example::

            Permissions.all_of("inventory")  # "inventory:*:*"
        """
        return f"{application}:*:*"


__all__ = [
    "Permissions",
]
