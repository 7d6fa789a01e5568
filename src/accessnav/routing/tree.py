"""Declared route tree with tri-state permission requirements.

Provides:
- ``Requirement`` — what a route asks for: inherit, public, or require.
- ``RouteDefinition`` — validated shape of one declared route (pydantic).
- ``RouteNode`` / ``RouteTree`` — immutable tree built from definitions.
- ``RouteMatch`` — the node chain and bound params for a matched path.
- ``effective_requirement()`` — inheritance resolution along a chain.

Declarations look like::

    RouteTree.from_definitions([
        {
            "path": "/user-access",
            "permission": Permissions.PRINCIPAL_READ,
            "children": [
                {"path": "overview", "public": True},
                {"path": "groups/:groupId/*"},                 # inherits
                {"path": "roles", "permissions": [Permissions.ROLE_READ]},
                {"path": "audit-log", "requireOrgAdmin": True},
            ],
        },
    ])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..exceptions import RouteDefinitionError
from ..permissions import parse_permission

logger = logging.getLogger(__name__)

SPLAT = "*"
PARAM_PREFIX = ":"


# ── Requirements ────────────────────────────────────


class RequirementMode(str, Enum):
    """How a route decides what it requires."""

    INHERIT = "inherit"  # Use the nearest ancestor's requirement
    PUBLIC = "public"  # No restriction, regardless of ancestors
    REQUIRE = "require"  # Own permissions and/or org-admin


@dataclass(frozen=True)
class Requirement:
    """Permission requirement declared on a route.

    ``INHERIT`` and ``PUBLIC`` are distinct: an inheriting child of a
    permissioned parent is permissioned, a public child is not.

    Attributes:
        mode: Inherit, public, or require.
        permissions: Required permission strings (``REQUIRE`` only).
        check_all: True = every permission needed (AND), False = any (OR).
        require_org_admin: Only org admins may open the route.
    """

    mode: RequirementMode = RequirementMode.INHERIT
    permissions: tuple[str, ...] = ()
    check_all: bool = True
    require_org_admin: bool = False

    @classmethod
    def inherit(cls) -> Requirement:
        return cls(mode=RequirementMode.INHERIT)

    @classmethod
    def public(cls) -> Requirement:
        return cls(mode=RequirementMode.PUBLIC)

    @classmethod
    def require(cls, *permissions: str, check_all: bool = True) -> Requirement:
        if not permissions:
            raise ValueError("Requirement.require() needs at least one permission")
        return cls(mode=RequirementMode.REQUIRE, permissions=tuple(permissions), check_all=check_all)

    @classmethod
    def org_admin(cls) -> Requirement:
        return cls(mode=RequirementMode.REQUIRE, require_org_admin=True)

    @property
    def is_inherit(self) -> bool:
        return self.mode == RequirementMode.INHERIT

    @property
    def is_public(self) -> bool:
        return self.mode == RequirementMode.PUBLIC

    def __str__(self) -> str:
        if self.mode != RequirementMode.REQUIRE:
            return self.mode.value
        if self.require_org_admin:
            return "org-admin"
        joiner = " & " if self.check_all else " | "
        return joiner.join(self.permissions)


def effective_requirement(chain: Iterable[RouteNode]) -> Requirement:
    """Resolve the requirement enforced for the last node of ``chain``.

    Walks from the matched node toward the root and returns the first
    requirement that is not ``INHERIT``. A chain where every node
    inherits is public.
    """
    for node in reversed(tuple(chain)):
        if not node.requirement.is_inherit:
            return node.requirement
    return Requirement.public()


# ── Declarations ────────────────────────────────────


def split_path(path: str) -> tuple[str, ...]:
    """Split a URL path into non-empty segments, dropping query and fragment."""
    path = path.split("#", 1)[0].split("?", 1)[0]
    return tuple(segment for segment in path.split("/") if segment)


class RouteDefinition(BaseModel):
    """One declared route, as loaded from the static route table."""

    path: str
    id: Optional[str] = None
    permission: Optional[str] = None
    permissions: list[str] = Field(default_factory=list)
    public: bool = False
    check_all: bool = Field(default=True, alias="checkAll")
    require_org_admin: bool = Field(default=False, alias="requireOrgAdmin")
    children: list[RouteDefinition] = Field(default_factory=list)

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        segments = split_path(v)
        for i, segment in enumerate(segments):
            if segment == SPLAT and i != len(segments) - 1:
                raise ValueError(f"'*' must be the last segment of {v!r}")
            if SPLAT in segment and segment != SPLAT:
                raise ValueError(f"'*' must be a whole segment in {v!r}")
            if segment == PARAM_PREFIX:
                raise ValueError(f"Unnamed ':' placeholder in {v!r}")
        return v

    @field_validator("permission")
    @classmethod
    def validate_permission(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and parse_permission(v) is None:
            raise ValueError(f"Malformed permission {v!r}; expected application:resource:operation")
        return v

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v: list[str]) -> list[str]:
        for perm in v:
            if parse_permission(perm) is None:
                raise ValueError(f"Malformed permission {perm!r}; expected application:resource:operation")
        return v

    @model_validator(mode="after")
    def validate_requirement(self) -> RouteDefinition:
        declares_permissions = self.permission is not None or bool(self.permissions)
        if self.public and (declares_permissions or self.require_org_admin):
            raise ValueError(f"Route {self.path!r} cannot be public and require access")
        return self

    def requirement(self) -> Requirement:
        """Translate the declaration into a :class:`Requirement`."""
        if self.public:
            return Requirement.public()
        perms = tuple(([self.permission] if self.permission else []) + list(self.permissions))
        if self.require_org_admin:
            return Requirement(
                mode=RequirementMode.REQUIRE,
                permissions=perms,
                check_all=self.check_all,
                require_org_admin=True,
            )
        if perms:
            return Requirement.require(*perms, check_all=self.check_all)
        return Requirement.inherit()


RouteDefinition.model_rebuild()


# ── Tree ────────────────────────────────────────────


@dataclass(frozen=True)
class RouteNode:
    """One navigable route.

    Attributes:
        id: Stable identifier (declared, or the full path pattern).
        path: Full path pattern from the tree root (e.g. ``/groups/:groupId``).
        segments: This node's own pattern segments, relative to its parent.
        requirement: Declared requirement (before inheritance).
        children: Child routes in declaration order.
    """

    id: str
    path: str
    segments: tuple[str, ...] = ()
    requirement: Requirement = field(default_factory=Requirement.inherit)
    children: tuple[RouteNode, ...] = ()

    @property
    def has_splat(self) -> bool:
        return bool(self.segments) and self.segments[-1] == SPLAT


@dataclass(frozen=True)
class RouteMatch:
    """Result of matching a path: root → matched node chain and bound params."""

    chain: tuple[RouteNode, ...]
    params: dict[str, str] = field(default_factory=dict)

    @property
    def node(self) -> RouteNode:
        return self.chain[-1]


def _build_node(definition: RouteDefinition, prefix: tuple[str, ...]) -> RouteNode:
    own = split_path(definition.path)
    full = prefix + own
    full_path = "/" + "/".join(full)
    # Children match whatever the fixed segments leave over
    child_prefix = full[:-1] if own and own[-1] == SPLAT else full
    children = tuple(_build_node(child, child_prefix) for child in definition.children)
    return RouteNode(
        id=definition.id or full_path,
        path=full_path,
        segments=own,
        requirement=definition.requirement(),
        children=children,
    )


def _match_node(
    node: RouteNode,
    segments: tuple[str, ...],
    params: dict[str, str],
) -> Optional[tuple[tuple[RouteNode, ...], dict[str, str]]]:
    fixed = node.segments[:-1] if node.has_splat else node.segments
    if len(segments) < len(fixed):
        return None

    bound = dict(params)
    for pattern, value in zip(fixed, segments):
        if pattern.startswith(PARAM_PREFIX):
            bound[pattern[1:]] = value
        elif pattern != value:
            return None

    rest = segments[len(fixed) :]
    if not rest:
        if node.has_splat:
            bound[SPLAT] = ""
        return (node,), bound

    for child in node.children:
        found = _match_node(child, rest, bound)
        if found is not None:
            chain, child_params = found
            return (node,) + chain, child_params

    if node.has_splat:
        bound[SPLAT] = "/".join(rest)
        return (node,), bound
    return None


class RouteTree:
    """Immutable tree of declared routes.

    Matching is depth-first in declaration order; the first full match
    wins, so an earlier sibling is always preferred over a later one.
    """

    __slots__ = ("roots",)

    def __init__(self, roots: Iterable[RouteNode] = ()) -> None:
        self.roots: tuple[RouteNode, ...] = tuple(roots)

    @classmethod
    def from_definitions(cls, definitions: Iterable[Mapping[str, Any] | RouteDefinition]) -> RouteTree:
        """Build a tree from declared route mappings.

        Raises:
            RouteDefinitionError: If any declaration is malformed.
        """
        parsed: list[RouteDefinition] = []
        for raw in definitions:
            if isinstance(raw, RouteDefinition):
                parsed.append(raw)
                continue
            try:
                parsed.append(RouteDefinition.model_validate(raw))
            except ValidationError as e:
                label = raw.get("path", "<missing path>") if isinstance(raw, Mapping) else raw
                raise RouteDefinitionError(
                    f"Invalid route definition {label!r}: {e}",
                    errors=e.errors(),
                ) from e
        tree = cls(_build_node(definition, ()) for definition in parsed)
        logger.debug("Loaded route tree with %d routes", sum(1 for _ in tree.walk()))
        return tree

    def walk(self) -> Iterator[tuple[RouteNode, ...]]:
        """Yield every node's chain (root → node) in pre-order, declaration order."""

        def visit(node: RouteNode, ancestors: tuple[RouteNode, ...]) -> Iterator[tuple[RouteNode, ...]]:
            chain = ancestors + (node,)
            yield chain
            for child in node.children:
                yield from visit(child, chain)

        for root in self.roots:
            yield from visit(root, ())

    def match(self, path: str) -> Optional[RouteMatch]:
        """Find the first route matching ``path``, or None."""
        segments = split_path(path)
        for root in self.roots:
            found = _match_node(root, segments, {})
            if found is not None:
                chain, params = found
                return RouteMatch(chain=chain, params=params)
        return None

    def flatten(self) -> dict[str, Requirement]:
        """Map every full path pattern to its effective requirement.

        Keeps declaration order; a pattern declared twice keeps the first
        declaration, matching :meth:`match`.
        """
        flat: dict[str, Requirement] = {}
        for chain in self.walk():
            flat.setdefault(chain[-1].path, effective_requirement(chain))
        return flat

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    def __repr__(self) -> str:
        return f"RouteTree(roots={[root.path for root in self.roots]!r})"


__all__ = [
    "PARAM_PREFIX",
    "SPLAT",
    "Requirement",
    "RequirementMode",
    "RouteDefinition",
    "RouteMatch",
    "RouteNode",
    "RouteTree",
    "effective_requirement",
    "split_path",
]
