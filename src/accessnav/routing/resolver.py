"""Access decisions for requested paths.

Provides runtime helpers that answer "may this principal open this
path?" for the console router and the terminal client. The router acts
on the returned :class:`AccessDecision` (render, redirect, or show the
unauthorized view); nothing here raises for a denied or unknown path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from ..config import NavigatorConfig
from ..permissions import satisfies_all, satisfies_any
from .tree import Requirement, RouteNode, RouteTree, effective_requirement

logger = logging.getLogger(__name__)


class AccessOutcome(str, Enum):
    """Result of resolving a path."""

    ALLOW = "allow"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Principal:
    """Authorization context of the acting user.

    Attributes:
        grants: Permission strings the user holds; may contain wildcards.
        is_org_admin: Org admins are allowed everywhere (product rule).
        user_id: Optional identity, used only for logging.
    """

    grants: tuple[str, ...] = ()
    is_org_admin: bool = False
    user_id: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Principal:
        """Build a principal from the console's identity payload.

        Accepts ``isOrgAdmin`` / ``is_org_admin`` and ``grants`` /
        ``permissions``. Grants given as access entries
        (``{"permission": "rbac:group:read"}``) are flattened.
        """
        is_org_admin = data.get("isOrgAdmin", data.get("is_org_admin", False))
        raw_grants = data.get("grants", data.get("permissions")) or ()
        grants = tuple(
            entry.get("permission", "") if isinstance(entry, Mapping) else str(entry) for entry in raw_grants
        )
        user_id = data.get("userId", data.get("user_id"))
        return cls(grants=grants, is_org_admin=bool(is_org_admin), user_id=user_id)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of resolving one path for one principal.

    Attributes:
        outcome: Allow, unauthorized, or not found.
        path: The requested path.
        matched_node: Deepest matched route, None when not found.
        effective_requirement: Requirement enforced after inheritance.
        params: Values bound by ``:param`` and ``*`` segments.
    """

    outcome: AccessOutcome
    path: str
    matched_node: Optional[RouteNode] = None
    effective_requirement: Optional[Requirement] = None
    params: dict[str, str] = field(default_factory=dict)

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.ALLOW

    @property
    def effective_permission(self) -> Optional[str]:
        """First enforced permission string, or None for public/unmatched routes."""
        if self.effective_requirement is None or not self.effective_requirement.permissions:
            return None
        return self.effective_requirement.permissions[0]


def requirement_met(requirement: Requirement, principal: Principal) -> bool:
    """Check a resolved (non-inherit) requirement against a principal.

    Does not apply the org-admin bypass; :class:`RouteResolver` does.
    """
    if requirement.is_public or requirement.is_inherit:
        return True
    if requirement.require_org_admin and not principal.is_org_admin:
        return False
    check = satisfies_all if requirement.check_all else satisfies_any
    return check(requirement.permissions, principal.grants)


class RouteResolver:
    """Resolves request paths against a :class:`RouteTree`.

    Decision logic:
    1. No route matches → ``NOT_FOUND`` (for org admins too)
    2. Org admin (bypass enabled) → ``ALLOW``
    3. Effective requirement public → ``ALLOW``
    4. Requirement met → ``ALLOW``, otherwise ``UNAUTHORIZED``

    Args:
        tree: Declared routes.
        org_admin_bypass: Allow org admins on every declared path,
            whatever their grants. Defaults to the product rule (True).

    Example::

        resolver = RouteResolver(tree)
        decision = resolver.resolve("/user-access/groups/42", principal)
        if decision.outcome is AccessOutcome.UNAUTHORIZED:
            ...
    """

    __slots__ = ("tree", "org_admin_bypass")

    def __init__(self, tree: RouteTree, *, org_admin_bypass: bool = True) -> None:
        self.tree = tree
        self.org_admin_bypass = org_admin_bypass

    @classmethod
    def from_config(cls, tree: RouteTree, config: NavigatorConfig) -> RouteResolver:
        return cls(tree, org_admin_bypass=config.org_admin_bypass)

    def resolve(self, path: str, principal: Principal) -> AccessDecision:
        """Decide whether ``principal`` may open ``path``."""
        match = self.tree.match(path)
        node = match.node if match else None
        requirement = effective_requirement(match.chain) if match else None
        params = dict(match.params) if match else {}

        if match is None:
            outcome = AccessOutcome.NOT_FOUND
        elif principal.is_org_admin and self.org_admin_bypass:
            outcome = AccessOutcome.ALLOW
        elif requirement_met(requirement, principal):
            outcome = AccessOutcome.ALLOW
        else:
            outcome = AccessOutcome.UNAUTHORIZED

        decision = AccessDecision(
            outcome=outcome,
            path=path,
            matched_node=node,
            effective_requirement=requirement,
            params=params,
        )
        extra = {"path": path, "outcome": outcome.value, "user_id": principal.user_id}
        if outcome == AccessOutcome.UNAUTHORIZED:
            logger.info("Access denied to %s (requires %s)", node.path, requirement, extra=extra)
        else:
            logger.debug("Resolved %s -> %s", path, outcome.value, extra=extra)
        return decision

    def is_authorized(self, path: str, principal: Principal) -> bool:
        """True if ``principal`` may open ``path``."""
        return self.resolve(path, principal).allowed

    def reachable(self, principal: Principal) -> list[str]:
        """Route patterns ``principal`` may open, in declaration order.

        Used to decide which navigation entries to render.
        """
        bypass = principal.is_org_admin and self.org_admin_bypass
        return [
            path
            for path, requirement in self.tree.flatten().items()
            if bypass or requirement_met(requirement, principal)
        ]

    def decisions(self, paths: Iterable[str], principal: Principal) -> dict[str, AccessDecision]:
        """Resolve several paths at once (e.g. every link on a page)."""
        return {path: self.resolve(path, principal) for path in paths}


__all__ = [
    "AccessDecision",
    "AccessOutcome",
    "Principal",
    "RouteResolver",
    "requirement_met",
]
