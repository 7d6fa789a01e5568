from .config import LogLevel, NavigatorConfig, load_config_from_env
from .exceptions import (
    AccessNavError,
    ConfigurationError,
    ErrorRegistry,
    RouteDefinitionError,
    error_registry,
    register_error,
)
from .hierarchy import (
    DEFAULT_PAGE_SIZE,
    FIRST_PAGE,
    NO_PARENT,
    Breadcrumb,
    BreadcrumbNavigator,
    HierarchyNode,
    NodeKind,
    PageSlice,
    TreeIndex,
    build_tree_index,
    slice_view,
)
from .logging import (
    AccessNavFormatter,
    AccessNavLoggerAdapter,
    get_logger,
    safe_preview,
    setup_logging,
)
from .permissions import (
    PermissionParts,
    Permissions,
    covers,
    parse_permission,
    permission_sets_equivalent,
    satisfies,
    satisfies_all,
    satisfies_any,
)
from .routing import (
    AccessDecision,
    AccessOutcome,
    Principal,
    Requirement,
    RequirementMode,
    RouteDefinition,
    RouteMatch,
    RouteNode,
    RouteResolver,
    RouteTree,
    effective_requirement,
    requirement_met,
)

__all__ = [
    'LogLevel',
    'NavigatorConfig',
    'load_config_from_env',
    'AccessNavError',
    'ConfigurationError',
    'ErrorRegistry',
    'RouteDefinitionError',
    'error_registry',
    'register_error',
    'DEFAULT_PAGE_SIZE',
    'FIRST_PAGE',
    'NO_PARENT',
    'Breadcrumb',
    'BreadcrumbNavigator',
    'HierarchyNode',
    'NodeKind',
    'PageSlice',
    'TreeIndex',
    'build_tree_index',
    'slice_view',
    'AccessNavFormatter',
    'AccessNavLoggerAdapter',
    'get_logger',
    'safe_preview',
    'setup_logging',
    'PermissionParts',
    'Permissions',
    'covers',
    'parse_permission',
    'permission_sets_equivalent',
    'satisfies',
    'satisfies_all',
    'satisfies_any',
    'AccessDecision',
    'AccessOutcome',
    'Principal',
    'Requirement',
    'RequirementMode',
    'RouteDefinition',
    'RouteMatch',
    'RouteNode',
    'RouteResolver',
    'RouteTree',
    'effective_requirement',
    'requirement_met',
]
