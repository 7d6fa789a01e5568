"""Tests for the workspace hierarchy index, breadcrumbs and paging."""

from __future__ import annotations

import logging

import pytest

from accessnav import (
    FIRST_PAGE,
    Breadcrumb,
    BreadcrumbNavigator,
    HierarchyNode,
    NavigatorConfig,
    NodeKind,
    TreeIndex,
    build_tree_index,
    slice_view,
)


def _node(node_id: str, name: str = "", parent: str | None = None, kind: str = "standard") -> HierarchyNode:
    return HierarchyNode(id=node_id, name=name or node_id, parent_id=parent, kind=kind)


@pytest.fixture
def snapshot() -> list[HierarchyNode]:
    """root → {Default, Prod → {Web, Db → {Replica}}, staging}."""
    return [
        _node("root", "Root workspace", kind="root"),
        _node("prod", "Prod", parent="root"),
        _node("staging", "staging", parent="root"),
        _node("default", "Default workspace", parent="root", kind="default"),
        _node("db", "Db", parent="prod"),
        _node("web", "Web", parent="prod"),
        _node("replica", "Replica", parent="db"),
    ]


@pytest.fixture
def index(snapshot: list[HierarchyNode]) -> TreeIndex:
    return build_tree_index(snapshot)


class TestHierarchyNode:
    """Tests for HierarchyNode validation."""

    def test_listing_payload(self) -> None:
        """Test the listing endpoint's field names and empty parent."""
        node = HierarchyNode.model_validate(
            {"id": "r", "name": "Root", "parent_id": "", "type": "root", "created": "2024-01-01"}
        )
        assert node.parent_id is None
        assert node.kind == NodeKind.ROOT.value

    def test_defaults(self) -> None:
        node = HierarchyNode.model_validate({"id": "x", "name": None})
        assert node.name == ""
        assert node.kind == "standard"
        assert node.description is None

    def test_enum_kind(self) -> None:
        assert HierarchyNode(id="x", kind=NodeKind.DEFAULT).kind == "default"

    def test_unknown_kind_kept(self) -> None:
        assert HierarchyNode(id="x", kind="ungrouped-hosts").kind == NodeKind.UNGROUPED_HOSTS.value


class TestTreeIndex:
    """Tests for build_tree_index and lookups."""

    def test_default_kind_sorts_first(self) -> None:
        """Default workspaces come first, then names case-insensitively."""
        index = build_tree_index(
            [
                {"id": "r", "type": "root"},
                {"id": "a", "name": "Beta", "parent_id": "r", "type": "standard"},
                {"id": "b", "name": "Alpha", "parent_id": "r", "type": "default"},
            ]
        )
        assert [node.id for node in index.children_of("r")] == ["b", "a"]
        assert index.child_count("r") == 2
        assert index.child_count("nonexistent") == 0

    def test_children_sorted(self, index: TreeIndex) -> None:
        assert [node.id for node in index.children_of("root")] == ["default", "prod", "staging"]
        assert [node.id for node in index.children_of("prod")] == ["db", "web"]

    def test_name_tie_broken_by_id(self) -> None:
        index = build_tree_index([_node("r", kind="root"), _node("z", "Same", "r"), _node("y", "same", "r")])
        assert [node.id for node in index.children_of("r")] == ["y", "z"]

    def test_leaf_and_unknown(self, index: TreeIndex) -> None:
        assert index.children_of("replica") == []
        assert index.children_of("nope") == []
        assert index.children_of(None) == []

    def test_root(self, index: TreeIndex) -> None:
        assert index.root_id == "root"
        assert not index.is_empty
        assert len(index) == 7
        assert "web" in index

    def test_no_root_is_empty(self) -> None:
        """Test a snapshot without a root answers every lookup with nothing."""
        index = build_tree_index([_node("a"), _node("b", parent="a")])
        assert index.root is None
        assert index.is_empty
        assert index.children_of("a") == []
        assert index.child_count("a") == 0

    def test_config_kinds(self) -> None:
        config = NavigatorConfig(root_kind="tenant", default_kind="fallback")
        index = build_tree_index(
            [_node("t", kind="tenant"), _node("x", "A", "t"), _node("f", "Z", "t", kind="fallback")],
            config=config,
        )
        assert index.root_id == "t"
        assert [node.id for node in index.children_of("t")] == ["f", "x"]

    def test_first_root_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="accessnav.hierarchy.index"):
            index = build_tree_index([_node("r1", kind="root"), _node("r2", kind="root")])
        assert index.root_id == "r1"
        assert any("Multiple" in record.getMessage() for record in caplog.records)

    def test_duplicate_id_keeps_first(self) -> None:
        index = build_tree_index(
            [_node("r", kind="root"), _node("a", "First", "r"), _node("a", "Second", "r")]
        )
        assert index.get("a").name == "First"
        assert index.child_count("r") == 1

    def test_malformed_entry_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """One bad entry is logged and dropped; the rest of the snapshot loads."""
        with caplog.at_level(logging.WARNING, logger="accessnav.hierarchy.index"):
            index = build_tree_index(
                [
                    {"id": "r", "type": "root"},
                    {"name": "No id", "parent_id": "r"},
                    {"id": "a", "name": "A", "parent_id": "r"},
                ]
            )
        assert index.root_id == "r"
        assert [node.id for node in index.children_of("r")] == ["a"]
        assert any("malformed" in record.getMessage() for record in caplog.records)

    def test_children_sorted_at_build(self) -> None:
        """Children are stored in display order; lookups hand out copies."""
        index = build_tree_index(
            [_node("r", kind="root"), _node("z", "Zed", "r"), _node("d", "Default", "r", kind="default")]
        )
        assert [node.id for node in index.children_by_parent["r"]] == ["d", "z"]
        children = index.children_of("r")
        children.clear()
        assert index.child_count("r") == 2
        assert [node.id for node in index.children_of("r")] == ["d", "z"]

    def test_orphans(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="accessnav.hierarchy.index"):
            index = build_tree_index([_node("r", kind="root"), _node("lost", parent="gone"), _node("top")])
        assert [node.id for node in index.orphans] == ["lost", "top"]
        assert index.get("lost") is not None
        assert index.children_of("r") == []
        assert caplog.records

    def test_is_system(self, index: TreeIndex) -> None:
        assert index.is_system(index.get("root"))
        assert index.is_system(index.get("default"))
        assert not index.is_system(index.get("prod"))


class TestDescendantsAndAncestors:
    """Tests for subtree and path lookups."""

    def test_descendants_pre_order(self, index: TreeIndex) -> None:
        assert index.descendant_ids("prod") == ["db", "replica", "web"]
        assert index.descendant_ids("root") == ["default", "prod", "db", "replica", "web", "staging"]

    def test_descendants_exclude_subtree(self, index: TreeIndex) -> None:
        """Excluding a node drops it and everything below it."""
        assert index.descendant_ids("root", exclude=["prod"]) == ["default", "staging"]
        assert index.descendant_ids("root", exclude=["db", "unknown"]) == ["default", "prod", "web", "staging"]

    def test_descendants_returns_nodes(self, index: TreeIndex) -> None:
        assert [node.name for node in index.descendants("db")] == ["Replica"]
        assert index.descendants("replica") == []

    def test_ancestors(self, index: TreeIndex) -> None:
        assert [node.id for node in index.ancestors("replica")] == ["root", "prod", "db"]
        assert index.ancestors("root") == []
        assert index.ancestors("unknown") == []

    def test_ancestors_cycle(self) -> None:
        index = build_tree_index([_node("r", kind="root"), _node("a", parent="b"), _node("b", parent="a")])
        assert [node.id for node in index.ancestors("a")] == ["b"]


class TestBreadcrumbNavigator:
    """Tests for drill-in / drill-out navigation."""

    def test_starts_at_root(self, index: TreeIndex) -> None:
        nav = BreadcrumbNavigator.for_index(index)
        assert nav.at_root
        assert not nav.can_go_back
        assert nav.effective_parent_id == "root"
        assert [node.id for node in nav.visible_children(index)] == ["default", "prod", "staging"]

    def test_drill_and_back_round_trip(self, index: TreeIndex) -> None:
        """Drilling into a child then going back restores the previous parent."""
        nav = BreadcrumbNavigator.for_index(index)
        before = nav.effective_parent_id
        assert nav.drill_into(index.get("prod")) == FIRST_PAGE
        assert nav.effective_parent_id == "prod"
        assert nav.stack == (Breadcrumb(id="prod", name="Prod"),)
        assert nav.go_back() == FIRST_PAGE
        assert nav.effective_parent_id == before

    @pytest.mark.parametrize(
        "moves",
        [
            ["prod", "db", "replica", "back", "back", "back"],
            ["prod", "back", "staging", "back", "default", "back"],
            ["prod", "web", "back", "db", "replica", "back", "back", "back"],
            ["prod", "db", "back", "web", "back", "back", "staging", "back"],
        ],
    )
    def test_drill_back_sequences(self, index: TreeIndex, moves: list[str]) -> None:
        """Interleaved drill/back calls track a plain history stack step by step."""
        nav = BreadcrumbNavigator.for_index(index)
        history: list[str] = []
        for move in moves:
            if move == "back":
                page = nav.go_back()
                history.pop()
            else:
                assert move in [node.id for node in nav.visible_children(index)]
                page = nav.drill_into(index.get(move))
                history.append(move)
            assert page == FIRST_PAGE
            assert nav.effective_parent_id == (history[-1] if history else "root")
            assert [crumb.id for crumb in nav.stack] == history
        assert nav.at_root

    def test_go_back_at_root_noop(self) -> None:
        nav = BreadcrumbNavigator(root_id="r")
        assert nav.go_back() == FIRST_PAGE
        assert nav.depth == 0

    def test_go_to_and_root(self, index: TreeIndex) -> None:
        nav = BreadcrumbNavigator.for_index(index)
        nav.drill_into(index.get("prod"))
        nav.drill_into(index.get("db"))
        nav.drill_into(index.get("replica"))
        nav.go_to(0)
        assert nav.effective_parent_id == "prod"
        nav.go_to(5)
        assert nav.depth == 1
        nav.go_to_root()
        assert nav.effective_parent_id == "root"

    def test_no_root(self) -> None:
        index = build_tree_index([])
        nav = BreadcrumbNavigator.for_index(index)
        assert nav.effective_parent_id is None
        assert nav.visible_children(index) == []

    def test_open_path(self, index: TreeIndex) -> None:
        nav = BreadcrumbNavigator()
        nav.open_path(index, "replica")
        assert [crumb.id for crumb in nav.stack] == ["prod", "db", "replica"]
        assert nav.root_id == "root"
        nav.open_path(index, "missing")
        assert nav.at_root

    def test_reconcile_keeps_valid_stack(self, index: TreeIndex) -> None:
        nav = BreadcrumbNavigator.for_index(index)
        nav.drill_into(index.get("prod"))
        assert nav.reconcile(index) is False
        assert nav.effective_parent_id == "prod"

    def test_reconcile_falls_back_to_root(self, snapshot: list[HierarchyNode], index: TreeIndex) -> None:
        """A vanished breadcrumb target sends navigation back to root."""
        nav = BreadcrumbNavigator.for_index(index)
        nav.drill_into(index.get("prod"))
        nav.drill_into(index.get("db"))
        refreshed = build_tree_index([node for node in snapshot if node.id not in ("db", "replica")])
        assert nav.reconcile(refreshed) is True
        assert nav.at_root
        assert nav.effective_parent_id == "root"


class TestSliceView:
    """Tests for search and pagination."""

    def test_clamps_page(self) -> None:
        items = [_node(f"n{i:02d}") for i in range(20)]
        view = slice_view(items, page=5, page_size=12)
        assert view.page == 1
        assert [node.id for node in view.page_items] == [f"n{i:02d}" for i in range(12, 20)]
        assert view.total_count == 20
        assert view.total_pages == 2
        assert view.has_previous and not view.has_next

    def test_first_page(self) -> None:
        view = slice_view([_node(f"n{i}") for i in range(5)])
        assert len(view.page_items) == 5
        assert view.total_pages == 1
        assert not view.has_previous and not view.has_next

    def test_search_case_insensitive(self) -> None:
        items = [_node("1", "Production"), _node("2", "Staging"), _node("3", "PRE-PROD")]
        view = slice_view(items, search_term="prod")
        assert [node.id for node in view.page_items] == ["1", "3"]
        assert view.total_count == 2

    def test_search_keeps_surrounding_spaces(self) -> None:
        """Spaces in the term are part of the substring."""
        items = [_node("1", "Prod"), _node("2", "My prod"), _node("3", "myworkspace"), _node("4", "my ws")]
        assert [node.id for node in slice_view(items, search_term=" prod").page_items] == ["2"]
        assert [node.id for node in slice_view(items, search_term="my ").page_items] == ["2", "4"]

    def test_page_size_from_config(self) -> None:
        items = [_node(f"n{i}") for i in range(12)]
        view = slice_view(items, config=NavigatorConfig(page_size=5))
        assert len(view.page_items) == 5
        assert view.total_pages == 3

    def test_explicit_page_size_overrides_config(self) -> None:
        items = [_node(f"n{i}") for i in range(12)]
        view = slice_view(items, page_size=4, config=NavigatorConfig(page_size=5))
        assert view.total_pages == 3
        assert len(view.page_items) == 4

    def test_blank_search_matches_all(self) -> None:
        assert slice_view([_node("a"), _node("b")], search_term="  ").total_count == 2

    def test_no_matches(self) -> None:
        view = slice_view([_node("a", "Alpha")], search_term="zzz")
        assert view.page_items == ()
        assert view.total_pages == 1
        assert view.page == 0

    def test_mappings(self) -> None:
        view = slice_view([{"name": "Web"}, {"name": "Db"}, {"title": "x"}], search_term="w")
        assert view.page_items == ({"name": "Web"},)

    def test_negative_page(self) -> None:
        assert slice_view([_node("a")], page=-3).page == 0
