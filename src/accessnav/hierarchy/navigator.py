"""Breadcrumb navigation over a :class:`TreeIndex`.

``BreadcrumbNavigator`` owns only the stack of visited nodes. The
"current parent" whose children are listed is always derived from it:
the last breadcrumb, or the root when the stack is empty. The page index
belongs to the caller; every transition returns the page to reset to.
"""

from __future__ import annotations

import logging
from typing import Optional

from .index import TreeIndex
from .models import Breadcrumb, HierarchyNode

logger = logging.getLogger(__name__)

# effective_parent_id when the hierarchy has no root
NO_PARENT: Optional[str] = None

FIRST_PAGE = 0


class BreadcrumbNavigator:
    """Drill-in / drill-out state machine.

    States are implicit: "at root" (empty stack) and "at depth N".
    There is no terminal state.

    Example::

        nav = BreadcrumbNavigator(root_id=index.root_id)
        page = nav.drill_into(child)
        index.children_of(nav.effective_parent_id)
        page = nav.go_back()
    """

    __slots__ = ("_stack", "root_id")

    def __init__(self, root_id: Optional[str] = NO_PARENT) -> None:
        self._stack: list[Breadcrumb] = []
        self.root_id = root_id

    @classmethod
    def for_index(cls, index: TreeIndex) -> BreadcrumbNavigator:
        return cls(root_id=index.root_id)

    @property
    def stack(self) -> tuple[Breadcrumb, ...]:
        return tuple(self._stack)

    @property
    def effective_parent_id(self) -> Optional[str]:
        if self._stack:
            return self._stack[-1].id
        return self.root_id

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def at_root(self) -> bool:
        return not self._stack

    @property
    def can_go_back(self) -> bool:
        return bool(self._stack)

    def drill_into(self, node: HierarchyNode) -> int:
        self._stack.append(Breadcrumb(id=node.id, name=node.name))
        return FIRST_PAGE

    def go_back(self) -> int:
        """Pop one level; no-op at root."""
        if self._stack:
            self._stack.pop()
        return FIRST_PAGE

    def go_to_root(self) -> int:
        self._stack.clear()
        return FIRST_PAGE

    def go_to(self, position: int) -> int:
        """Jump to the breadcrumb at ``position`` (0-based), dropping later ones.

        Out-of-range positions leave the stack unchanged.
        """
        if 0 <= position < len(self._stack):
            del self._stack[position + 1 :]
        return FIRST_PAGE

    def open_path(self, index: TreeIndex, node_id: str) -> int:
        """Replace the stack with the path to ``node_id`` (deep link).

        The root itself is never pushed. Unknown ids reset to root.
        """
        node = index.get(node_id)
        self._stack.clear()
        self.root_id = index.root_id
        if node is None or node.id == index.root_id:
            return FIRST_PAGE
        for ancestor in index.ancestors(node.id):
            if ancestor.id != index.root_id:
                self._stack.append(Breadcrumb(id=ancestor.id, name=ancestor.name))
        self._stack.append(Breadcrumb(id=node.id, name=node.name))
        return FIRST_PAGE

    def visible_children(self, index: TreeIndex) -> list[HierarchyNode]:
        """Children of the current position; ``[]`` when there is no root."""
        return index.children_of(self.effective_parent_id)

    def reconcile(self, index: TreeIndex) -> bool:
        """Re-validate the stack against a freshly built index.

        Adopts the new root id. If any breadcrumb target no longer exists,
        navigation falls back to root.

        Returns:
            True if the stack was reset.
        """
        self.root_id = index.root_id
        missing = [crumb.id for crumb in self._stack if crumb.id not in index]
        if not missing:
            return False
        logger.info("Breadcrumb target(s) %s vanished from snapshot; returning to root", missing)
        self.go_to_root()
        return True

    def __repr__(self) -> str:
        trail = " / ".join(crumb.name or crumb.id for crumb in self._stack)
        return f"BreadcrumbNavigator(root_id={self.root_id!r}, trail={trail!r})"


__all__ = [
    "BreadcrumbNavigator",
    "FIRST_PAGE",
    "NO_PARENT",
]
