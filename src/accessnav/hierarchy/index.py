"""Parent → children index over a flat hierarchy snapshot.

The listing endpoint returns workspaces as a flat list of parent
pointers. :func:`build_tree_index` turns one snapshot into a
:class:`TreeIndex` in a single pass; callers rebuild it whenever the
snapshot changes and pass it down instead of re-filtering the list.

A snapshot without a root node is a valid empty state: every lookup
returns an empty result.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Mapping, Optional, Sequence

from pydantic import ValidationError

from ..config import NavigatorConfig
from ..logging import safe_preview
from .models import HierarchyNode, NodeKind

logger = logging.getLogger(__name__)


class TreeIndex:
    """Immutable index over one hierarchy snapshot.

    Attributes:
        by_id: Node id → node (first occurrence wins).
        children_by_parent: Parent id → children, in display order.
        root: The first node of the root kind, or None.
        orphans: Non-root nodes whose parent is missing from the snapshot.
    """

    __slots__ = ("by_id", "children_by_parent", "root", "orphans", "root_kind", "default_kind")

    def __init__(
        self,
        *,
        by_id: Mapping[str, HierarchyNode],
        children_by_parent: Mapping[str, Sequence[HierarchyNode]],
        root: Optional[HierarchyNode],
        orphans: Sequence[HierarchyNode] = (),
        root_kind: str = NodeKind.ROOT.value,
        default_kind: str = NodeKind.DEFAULT.value,
    ) -> None:
        self.by_id = dict(by_id)
        self.root = root
        self.orphans = tuple(orphans)
        self.root_kind = root_kind
        self.default_kind = default_kind
        # Sorted once per snapshot; lookups only copy
        self.children_by_parent = {
            parent: tuple(sorted(children, key=self._sibling_key)) for parent, children in children_by_parent.items()
        }

    def _sibling_key(self, node: HierarchyNode) -> tuple[bool, str, str]:
        return (node.kind != self.default_kind, node.name.casefold(), node.id)

    @property
    def root_id(self) -> Optional[str]:
        return self.root.id if self.root is not None else None

    @property
    def is_empty(self) -> bool:
        """True when the snapshot has no root; all lookups return nothing."""
        return self.root is None

    def get(self, node_id: Optional[str]) -> Optional[HierarchyNode]:
        if node_id is None:
            return None
        return self.by_id.get(node_id)

    def children_of(self, node_id: Optional[str]) -> list[HierarchyNode]:
        """Children of ``node_id``: default kind first, then by name (case-insensitive)."""
        if self.is_empty or node_id is None:
            return []
        return list(self.children_by_parent.get(node_id, ()))

    def child_count(self, node_id: Optional[str]) -> int:
        if self.is_empty or node_id is None:
            return 0
        return len(self.children_by_parent.get(node_id, ()))

    def descendants(self, node_id: Optional[str], *, exclude: Iterable[str] = ()) -> list[HierarchyNode]:
        """All nodes below ``node_id`` in depth-first pre-order.

        Nodes listed in ``exclude`` are skipped together with everything
        below them (e.g. a workspace cannot be moved under itself or its
        own descendants). Unknown ids in ``exclude`` are ignored.
        """
        return list(self._iter_descendants(node_id, frozenset(exclude)))

    def descendant_ids(self, node_id: Optional[str], *, exclude: Iterable[str] = ()) -> list[str]:
        return [node.id for node in self._iter_descendants(node_id, frozenset(exclude))]

    def _iter_descendants(self, node_id: Optional[str], excluded: frozenset[str]) -> Iterator[HierarchyNode]:
        seen: set[str] = set()
        stack = list(reversed(self.children_of(node_id)))
        while stack:
            node = stack.pop()
            if node.id in excluded or node.id in seen:
                continue
            seen.add(node.id)
            yield node
            stack.extend(reversed(self.children_of(node.id)))

    def ancestors(self, node_id: str) -> list[HierarchyNode]:
        """Nodes from the root down to the parent of ``node_id``.

        Used to rebuild breadcrumbs for a deep link. Returns ``[]`` for
        unknown ids, and stops at a missing parent or a parent cycle.
        """
        node = self.get(node_id)
        if node is None:
            return []
        chain: list[HierarchyNode] = []
        visited = {node.id}
        parent = self.get(node.parent_id)
        while parent is not None:
            if parent.id in visited:
                logger.warning("Parent cycle at workspace %s", safe_preview(parent.id))
                break
            visited.add(parent.id)
            chain.append(parent)
            parent = self.get(parent.parent_id)
        chain.reverse()
        return chain

    def is_system(self, node: HierarchyNode) -> bool:
        """Root and default nodes cannot be deleted or moved."""
        return node.kind in (self.root_kind, self.default_kind)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.by_id

    def __len__(self) -> int:
        return len(self.by_id)

    def __repr__(self) -> str:
        return f"TreeIndex(nodes={len(self.by_id)}, root={self.root_id!r})"


def build_tree_index(
    nodes: Iterable[HierarchyNode | Mapping[str, object]],
    *,
    root_kind: str = NodeKind.ROOT.value,
    default_kind: str = NodeKind.DEFAULT.value,
    config: Optional[NavigatorConfig] = None,
) -> TreeIndex:
    """Index a flat snapshot in one pass.

    Args:
        nodes: Snapshot entries; mappings are validated into
            :class:`HierarchyNode` (``type`` and ``kind`` are both accepted).
            Entries that fail validation are logged and skipped.
        root_kind: Kind marking the root. The first such node wins.
        default_kind: Kind listed ahead of its siblings.
        config: If given, its ``root_kind`` and ``default_kind`` win.

    Returns:
        TreeIndex (``root`` is None when no node has ``root_kind``).

    Example::

        index = build_tree_index(workspaces)
        index.children_of(index.root_id)
    """
    if config is not None:
        root_kind, default_kind = config.root_kind, config.default_kind

    by_id: dict[str, HierarchyNode] = {}
    children_by_parent: dict[str, list[HierarchyNode]] = {}
    root: Optional[HierarchyNode] = None
    snapshot: list[HierarchyNode] = []

    for raw in nodes:
        if isinstance(raw, HierarchyNode):
            node = raw
        else:
            try:
                node = HierarchyNode.model_validate(raw)
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed workspace entry %s: %s",
                    safe_preview(raw),
                    safe_preview(e.errors(include_url=False)),
                )
                continue
        if node.id in by_id:
            logger.warning("Duplicate workspace id %s; keeping first", safe_preview(node.id))
            continue
        by_id[node.id] = node
        snapshot.append(node)

        if node.parent_id is not None:
            children_by_parent.setdefault(node.parent_id, []).append(node)

        if node.kind == root_kind:
            if root is None:
                root = node
            else:
                logger.warning(
                    "Multiple %s nodes in snapshot; using %s, ignoring %s",
                    root_kind,
                    safe_preview(root.id),
                    safe_preview(node.id),
                )

    orphans = [
        node
        for node in snapshot
        if node is not root and (node.parent_id is None or node.parent_id not in by_id)
    ]
    if orphans:
        logger.warning(
            "%d workspace(s) without a known parent: %s",
            len(orphans),
            safe_preview([node.id for node in orphans]),
        )
    if root is None and snapshot:
        logger.info("Snapshot of %d node(s) has no %s node", len(snapshot), root_kind)

    return TreeIndex(
        by_id=by_id,
        children_by_parent=children_by_parent,
        root=root,
        orphans=orphans,
        root_kind=root_kind,
        default_kind=default_kind,
    )


__all__ = [
    "TreeIndex",
    "build_tree_index",
]
