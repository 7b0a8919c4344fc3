"""Folder tree rebuilt from the canonical folder list and a document snapshot."""
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from assemble.filing.taxonomy import normalize_folder_path

ROOT_NAME = "Documents"


class FolderNode(BaseModel):
    name: str
    path: str
    children: List["FolderNode"] = Field(default_factory=list)
    file_count: int = 0
    is_expandable: bool = False

    def find(self, path: str) -> Optional["FolderNode"]:
        if self.path == path:
            return self
        for child in self.children:
            if path == child.path or path.startswith(child.path + "/"):
                return child.find(path)
        return None


FolderNode.model_rebuild()


def _document_path(doc) -> str:
    if isinstance(doc, dict):
        return normalize_folder_path(doc.get("path") or "")
    return normalize_folder_path(getattr(doc, "path", "") or "")


def build_tree(canonical_folders: Iterable[str], documents: Iterable = ()) -> FolderNode:
    """Fresh tree for one read; nothing is cached between calls."""
    counts = Counter(_document_path(doc) for doc in documents)

    arena: Dict[str, FolderNode] = {"": FolderNode(name=ROOT_NAME, path="")}

    def ensure(path: str) -> None:
        parts = path.split("/")
        for depth in range(1, len(parts) + 1):
            node_path = "/".join(parts[:depth])
            if node_path in arena:
                continue
            node = FolderNode(name=parts[depth - 1], path=node_path)
            arena[node_path] = node
            arena["/".join(parts[: depth - 1])].children.append(node)

    canonical = [normalize_folder_path(path) for path in canonical_folders]
    for path in canonical:
        if path:
            ensure(path)

    # Document paths outside the taxonomy become extra nodes after the
    # canonical siblings, in lexicographic order.
    for path in sorted(path for path in counts if path and path not in arena):
        ensure(path)

    for path, node in arena.items():
        node.file_count = counts.get(path, 0)
        node.is_expandable = bool(node.children) or node.file_count > 0
    return arena[""]


def filter_empty_folders(node: FolderNode) -> Optional[FolderNode]:
    """Copy of ``node`` without branches that hold no files, or None."""
    children = [kept for kept in (filter_empty_folders(child) for child in node.children) if kept is not None]
    if node.file_count > 0 or children:
        return node.model_copy(
            update={
                "children": children,
                "is_expandable": bool(children) or node.file_count > 0,
            }
        )
    return None
