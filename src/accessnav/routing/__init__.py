"""Permission-aware route resolution.

Defines:
- RouteTree / RouteNode: declared routes with tri-state requirements
- Requirement: inherit / public / require(permissions, check_all, org-admin)
- RouteResolver: path + principal → AccessDecision (allow / unauthorized / not found)
"""

from .resolver import (
    AccessDecision,
    AccessOutcome,
    Principal,
    RouteResolver,
    requirement_met,
)
from .tree import (
    Requirement,
    RequirementMode,
    RouteDefinition,
    RouteMatch,
    RouteNode,
    RouteTree,
    effective_requirement,
    split_path,
)

__all__ = [
    "AccessDecision",
    "AccessOutcome",
    "Principal",
    "Requirement",
    "RequirementMode",
    "RouteDefinition",
    "RouteMatch",
    "RouteNode",
    "RouteResolver",
    "RouteTree",
    "effective_requirement",
    "requirement_met",
    "split_path",
]
