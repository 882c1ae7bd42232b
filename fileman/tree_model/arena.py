"""Arena-backed directory tree with lazy, coalesced child population.

Nodes are addressed by integer ``NodeRef`` slots; ``parent`` and ``children``
hold refs, never node objects. Freed slots bump their ``generation`` so a
listing that completes after its node was removed is recognised as stale.
All mutation happens on the interactive thread; background work only goes
through the listing scheduler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..file_model import ListingResult, PathEntry

logger = logging.getLogger(__name__)

NodeRef = int
ListingCallback = Callable[[ListingResult], None]
TreeListener = Callable[[NodeRef], None]


class ListingSubmitter(Protocol):
    def submit(self, target: Path, on_complete: ListingCallback | None = None) -> int: ...


@dataclass
class TreeNode:
    """One arena slot. ``children_loaded=False`` means not enumerated yet."""

    entry: PathEntry
    parent: NodeRef | None
    children: list[NodeRef] = field(default_factory=list)
    children_loaded: bool = False
    generation: int = 0
    alive: bool = True


class DirectoryTree:
    """Forest of directory nodes under one synthetic, invisible root."""

    FOREST_ROOT: NodeRef = 0

    def __init__(self, scheduler: ListingSubmitter | None = None) -> None:
        self._scheduler = scheduler
        self._nodes: list[TreeNode] = [
            TreeNode(entry=PathEntry(path=Path("")), parent=None, children_loaded=True)
        ]
        self._free: list[NodeRef] = []
        self._detached_since_collect = 0
        self._pending: dict[tuple[NodeRef, int], list[ListingCallback]] = {}
        self._listeners: list[TreeListener] = []

    # -- accessors -----------------------------------------------------

    def node(self, ref: NodeRef) -> TreeNode:
        if ref < 0 or ref >= len(self._nodes) or not self._nodes[ref].alive:
            raise KeyError(f"no live tree node {ref}")
        return self._nodes[ref]

    def entry(self, ref: NodeRef) -> PathEntry:
        return self.node(ref).entry

    def children(self, ref: NodeRef) -> tuple[NodeRef, ...]:
        return tuple(self.node(ref).children)

    def parent(self, ref: NodeRef) -> NodeRef | None:
        return self.node(ref).parent

    def roots(self) -> tuple[NodeRef, ...]:
        return self.children(self.FOREST_ROOT)

    def is_alive(self, ref: NodeRef) -> bool:
        return 0 <= ref < len(self._nodes) and self._nodes[ref].alive

    def is_loaded(self, ref: NodeRef) -> bool:
        return self.node(ref).children_loaded

    def is_pending(self, ref: NodeRef) -> bool:
        node = self.node(ref)
        return (ref, node.generation) in self._pending

    def __len__(self) -> int:
        """Live nodes, excluding the forest root."""
        return sum(1 for node in self._nodes[1:] if node.alive)

    def add_listener(self, listener: TreeListener) -> None:
        """Register ``listener(ref)``, called when ``ref``'s children change."""
        self._listeners.append(listener)

    def _notify(self, ref: NodeRef) -> None:
        for listener in list(self._listeners):
            listener(ref)

    # -- structural edits ----------------------------------------------

    def _allocate(self, entry: PathEntry, parent: NodeRef) -> NodeRef:
        if not self._free and self._detached_since_collect:
            self.collect_garbage()
        if self._free:
            ref = self._free.pop()
            slot = self._nodes[ref]
            slot.entry = entry
            slot.parent = parent
            slot.children = []
            slot.children_loaded = False
            slot.alive = True
            return ref
        self._nodes.append(TreeNode(entry=entry, parent=parent))
        return len(self._nodes) - 1

    def _free_slot(self, ref: NodeRef) -> None:
        slot = self._nodes[ref]
        slot.alive = False
        slot.generation += 1
        slot.children = []
        slot.parent = None
        self._free.append(ref)

    def insert_child(self, parent: NodeRef, entry: PathEntry) -> NodeRef:
        """Append a new unloaded leaf for ``entry`` under ``parent``."""
        parent_node = self.node(parent)
        ref = self._allocate(entry, parent)
        parent_node.children.append(ref)
        self._notify(parent)
        return ref

    def remove_node(self, ref: NodeRef) -> None:
        """Detach ``ref`` from its parent and free its slot.

        Descendants are not visited here; they become unreachable and are
        reclaimed by ``collect_garbage``.
        """
        if ref == self.FOREST_ROOT:
            raise ValueError("the forest root cannot be removed")
        node = self.node(ref)
        parent = node.parent
        if node.children:
            self._detached_since_collect += 1
        if parent is not None and self.is_alive(parent):
            self._nodes[parent].children.remove(ref)
        self._free_slot(ref)
        if parent is not None:
            self._notify(parent)

    def collect_garbage(self) -> int:
        """Free every live slot unreachable from the forest root."""
        reachable: set[NodeRef] = set()
        stack = [self.FOREST_ROOT]
        while stack:
            ref = stack.pop()
            reachable.add(ref)
            stack.extend(self._nodes[ref].children)

        freed = 0
        for ref, node in enumerate(self._nodes):
            if node.alive and ref not in reachable:
                self._free_slot(ref)
                freed += 1
        self._detached_since_collect = 0
        if freed:
            logger.debug("collected %d unreachable tree nodes", freed)
        return freed

    def _merge_children(self, ref: NodeRef, entries: Iterable[PathEntry]) -> list[NodeRef]:
        node = self.node(ref)
        existing = {self._nodes[child].entry.path for child in node.children}
        added: list[NodeRef] = []
        for entry in entries:
            if entry.path in existing:
                continue
            child = self._allocate(entry, ref)
            node.children.append(child)
            existing.add(entry.path)
            added.append(child)
        return added

    # -- lookup ----------------------------------------------------------

    def find_node(self, path: Path | str) -> NodeRef | None:
        """Return the first materialized node whose path equals ``path``.

        Only nodes reachable from the forest root are scanned, in pre-order.
        A path whose parent was never expanded is not found.
        """
        target = Path(path)
        stack = list(reversed(self._nodes[self.FOREST_ROOT].children))
        while stack:
            ref = stack.pop()
            node = self._nodes[ref]
            if node.entry.path == target:
                return ref
            stack.extend(reversed(node.children))
        return None

    # -- population ------------------------------------------------------

    def seed(
        self,
        roots: Iterable[PathEntry],
        list_fn: Callable[[Path], ListingResult],
    ) -> list[NodeRef]:
        """Synchronously add ``roots`` and their direct subdirectories."""
        refs: list[NodeRef] = []
        for root in roots:
            ref = self.insert_child(self.FOREST_ROOT, root)
            result = list_fn(root.path)
            self._merge_children(ref, result.snapshot.subdirectory_entries)
            self._nodes[ref].children_loaded = True
            refs.append(ref)
        self._notify(self.FOREST_ROOT)
        return refs

    def expand(self, ref: NodeRef, on_loaded: ListingCallback | None = None) -> bool:
        """Load ``ref``'s subdirectories once, in the background.

        Returns ``True`` while an enumeration for ``ref`` is in flight. A call
        on an already pending node joins it as a waiter instead of listing
        again. ``on_loaded`` is not called when the node is already loaded.
        """
        node = self.node(ref)
        if node.children_loaded:
            return False
        key = (ref, node.generation)
        waiters = self._pending.get(key)
        if waiters is not None:
            if on_loaded is not None:
                waiters.append(on_loaded)
            return True
        self._pending[key] = [on_loaded] if on_loaded is not None else []
        self._submit(ref, node, lambda result: self._finish_expansion(key, result))
        return True

    def refresh(self, ref: NodeRef, on_loaded: ListingCallback | None = None) -> None:
        """List ``ref`` again and merge subdirectories that are not children yet."""
        node = self.node(ref)
        generation = node.generation

        def finish(result: ListingResult) -> None:
            self._apply_listing(ref, generation, result)
            if on_loaded is not None:
                on_loaded(result)

        self._submit(ref, node, finish)

    def _submit(self, ref: NodeRef, node: TreeNode, callback: ListingCallback) -> None:
        if self._scheduler is None:
            raise RuntimeError("DirectoryTree has no listing scheduler")
        self._scheduler.submit(node.entry.path, callback)

    def _finish_expansion(self, key: tuple[NodeRef, int], result: ListingResult) -> None:
        ref, generation = key
        waiters = self._pending.pop(key, [])
        self._apply_listing(ref, generation, result)
        for waiter in waiters:
            waiter(result)

    def _is_attached(self, ref: NodeRef) -> bool:
        while ref != self.FOREST_ROOT:
            parent = self._nodes[ref].parent
            if parent is None or not self.is_alive(parent) or ref not in self._nodes[parent].children:
                return False
            ref = parent
        return True

    def _apply_listing(self, ref: NodeRef, generation: int, result: ListingResult) -> None:
        if (
            not self.is_alive(ref)
            or self._nodes[ref].generation != generation
            or not self._is_attached(ref)
        ):
            logger.debug("dropping listing for detached node %d", ref)
            return
        node = self._nodes[ref]
        if result.error is not None:
            logger.debug("expansion of %s found nothing: %s", node.entry.path, result.error.cause)
        self._merge_children(ref, result.snapshot.subdirectory_entries)
        node.children_loaded = True
        self._notify(ref)


__all__ = [
    "NodeRef",
    "TreeNode",
    "TreeListener",
    "ListingSubmitter",
    "DirectoryTree",
]
