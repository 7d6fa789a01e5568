"""Hierarchical resource navigation.

Defines:
- HierarchyNode / NodeKind: one workspace from a flat snapshot
- build_tree_index() / TreeIndex: parent → children index per snapshot
- BreadcrumbNavigator: drill-in / drill-out position over the index
- slice_view() / PageSlice: per-level search and pagination
"""

from .index import TreeIndex, build_tree_index
from .models import Breadcrumb, HierarchyNode, NodeKind
from .navigator import FIRST_PAGE, NO_PARENT, BreadcrumbNavigator
from .slicer import DEFAULT_PAGE_SIZE, PageSlice, slice_view

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "FIRST_PAGE",
    "NO_PARENT",
    "Breadcrumb",
    "BreadcrumbNavigator",
    "HierarchyNode",
    "NodeKind",
    "PageSlice",
    "TreeIndex",
    "build_tree_index",
    "slice_view",
]
