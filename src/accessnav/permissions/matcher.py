"""Wildcard permission matching.

Grants and requirements are ``application:resource:operation`` strings.
A grant segment ``*`` matches any value in that position, so
``rbac:*:*`` satisfies every ``rbac`` permission and ``rbac:*:read``
satisfies every ``rbac`` read.

Malformed strings fail closed: a malformed grant never matches, a
malformed requirement is never satisfied. Neither raises.
"""

from __future__ import annotations

import logging
from typing import Iterable, NamedTuple

from ..logging import safe_preview
from .constants import Permissions

logger = logging.getLogger(__name__)

SEGMENT_COUNT = 3


class PermissionParts(NamedTuple):
    """A parsed permission string."""

    application: str
    resource: str
    operation: str

    def __str__(self) -> str:
        return Permissions.SEPARATOR.join(self)


def parse_permission(value: str) -> PermissionParts | None:
    """Split a permission string into its three segments.

    Returns:
        ``PermissionParts``, or ``None`` if ``value`` is not a string of
        exactly three non-empty colon-delimited segments.

    Example::

        parse_permission("rbac:group:read")  # PermissionParts("rbac", "group", "read")
        parse_permission("rbac:group")       # None
    """
    if not isinstance(value, str):
        return None
    segments = value.strip().split(Permissions.SEPARATOR)
    if len(segments) != SEGMENT_COUNT or not all(segments):
        return None
    return PermissionParts(*segments)


def _grant_matches(required: PermissionParts, grant: PermissionParts) -> bool:
    return all(g == Permissions.WILDCARD or g == r for r, g in zip(required, grant))


def satisfies(required: str, grants: Iterable[str]) -> bool:
    """Check if any grant satisfies one required permission.

    Args:
        required: Permission the caller needs (e.g. ``"rbac:group:write"``).
        grants: Permission strings the principal holds; may contain wildcards.

    Returns:
        True if at least one well-formed grant matches every segment.

    Example::

        satisfies("rbac:group:write", {"rbac:*:*"})        # True
        satisfies("rbac:group:write", {"inventory:*:*"})   # False
        satisfies("rbac:group:write", {"rbac:group"})      # False (malformed, logged)
    """
    parts = parse_permission(required)
    if parts is None:
        logger.warning("Malformed required permission %r never matches", safe_preview(required))
        return False

    for grant in grants:
        grant_parts = parse_permission(grant)
        if grant_parts is None:
            logger.warning("Ignoring malformed grant %r", safe_preview(grant))
            continue
        if _grant_matches(parts, grant_parts):
            return True
    return False


def satisfies_all(required: Iterable[str], grants: Iterable[str]) -> bool:
    """AND: every required permission is satisfied. Empty ``required`` is satisfied."""
    grant_list = list(grants)
    return all(satisfies(perm, grant_list) for perm in required)


def satisfies_any(required: Iterable[str], grants: Iterable[str]) -> bool:
    """OR: at least one required permission is satisfied. Empty ``required`` is satisfied."""
    required_list = list(required)
    if not required_list:
        return True
    grant_list = list(grants)
    return any(satisfies(perm, grant_list) for perm in required_list)


def covers(pattern: str, permission: str) -> bool:
    """Check if a wildcard ``pattern`` covers ``permission``.

    Unlike :func:`satisfies`, this compares declarations rather than
    grants: both sides may have any number of segments, but the counts
    must agree.

    Example::

        covers("rbac:*:read", "rbac:group:read")  # True
        covers("rbac:*", "rbac:group:read")       # False
    """
    if pattern == permission:
        return True
    pattern_parts = pattern.split(Permissions.SEPARATOR)
    permission_parts = permission.split(Permissions.SEPARATOR)
    if len(pattern_parts) != len(permission_parts):
        return False
    return all(p == Permissions.WILDCARD or p == q for p, q in zip(pattern_parts, permission_parts))


def permission_sets_equivalent(left: Iterable[str], right: Iterable[str]) -> bool:
    """Check that two declared permission sets cover each other.

    Used to verify that navigation entries and route declarations ask for
    the same access: every permission on each side must be covered by
    some pattern on the other side.

    Example::

        permission_sets_equivalent(["rbac:*:*"], ["rbac:*:*"])                # True
        permission_sets_equivalent(["rbac:*:read"], ["rbac:group:read"])      # False
        permission_sets_equivalent(["rbac:group:read"], ["rbac:group:read"])  # True
    """
    left_set = sorted(set(left))
    right_set = sorted(set(right))
    if left_set == right_set:
        return True

    def all_covered_by(perms: list[str], patterns: list[str]) -> bool:
        return all(any(covers(pattern, perm) for pattern in patterns) for perm in perms)

    return all_covered_by(left_set, right_set) and all_covered_by(right_set, left_set)


__all__ = [
    "PermissionParts",
    "SEGMENT_COUNT",
    "covers",
    "parse_permission",
    "permission_sets_equivalent",
    "satisfies",
    "satisfies_all",
    "satisfies_any",
]
