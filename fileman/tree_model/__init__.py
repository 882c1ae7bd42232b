"""Directory tree model: arena nodes, lazy expansion, structural edits."""

from __future__ import annotations

from .arena import DirectoryTree, ListingSubmitter, NodeRef, TreeListener, TreeNode

__all__ = [
    "NodeRef",
    "TreeNode",
    "TreeListener",
    "ListingSubmitter",
    "DirectoryTree",
]
