"""Data models for hierarchical resources (workspaces).

These are Pydantic models validated from the listing endpoint's payload.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class NodeKind(str, Enum):
    """Workspace kinds the console knows about.

    ``HierarchyNode.kind`` is a plain string so unknown kinds from newer
    backends still load; compare against these values.
    """

    ROOT = "root"
    DEFAULT = "default"
    STANDARD = "standard"
    UNGROUPED_HOSTS = "ungrouped-hosts"


class HierarchyNode(BaseModel):
    """One resource in a parent/child hierarchy."""

    id: str
    name: str = ""
    parent_id: Optional[str] = None
    kind: str = Field(default=NodeKind.STANDARD.value, alias="type")
    description: Optional[str] = None

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("parent_id", mode="before")
    @classmethod
    def normalize_parent_id(cls, v: Optional[str]) -> Optional[str]:
        """The listing endpoint sends ``""`` for top-level nodes."""
        if v is None or v == "":
            return None
        return v

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Optional[str | NodeKind]) -> str:
        if isinstance(v, NodeKind):
            return v.value
        return v or NodeKind.STANDARD.value


class Breadcrumb(BaseModel):
    """One visited node on the navigation stack."""

    id: str
    name: str = ""

    model_config = {"frozen": True}


__all__ = [
    "Breadcrumb",
    "HierarchyNode",
    "NodeKind",
]
