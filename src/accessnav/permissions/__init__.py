"""Permission strings and wildcard matching.

Defines:
- Permissions: well-known permission constants (application:resource:operation)
- satisfies(): does a grant set satisfy one required permission
- satisfies_all() / satisfies_any(): AND / OR over several requirements
- covers() / permission_sets_equivalent(): compare declared permission sets
"""

from .constants import Permissions
from .matcher import (
    SEGMENT_COUNT,
    PermissionParts,
    covers,
    parse_permission,
    permission_sets_equivalent,
    satisfies,
    satisfies_all,
    satisfies_any,
)

__all__ = [
    "SEGMENT_COUNT",
    "PermissionParts",
    "Permissions",
    "covers",
    "parse_permission",
    "permission_sets_equivalent",
    "satisfies",
    "satisfies_all",
    "satisfies_any",
]
