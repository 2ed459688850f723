"""
ResultStore: holder of the latest published Snapshot.

The store is the only shared mutable state of the status board. It is
created once at startup and passed explicitly to the poller (its only
writer of snapshots) and to the dashboard (a reader).

Readers always see a complete snapshot: publish() swaps the reference in
one assignment, and UI-flag changes (set_expanded) build a new Snapshot
instead of editing the published one. The single-threaded event loop
serializes every write, so no lock is needed.
"""

import dataclasses
from datetime import datetime
from typing import Callable

from statusboard_core.types import ExpandedKey, Snapshot


StoreListener = Callable[["ResultStore"], None]


class ResultStore:
    """
    Latest snapshot plus derived UI flags.

    Attributes (read-only properties):
        snapshot: Latest published Snapshot, None before the first publish
        refreshing: True while a polling cycle is in flight
        progress: Completion ratio of the in-flight cycle (0.0 - 1.0)
        last_error: Message of the last unexpected cycle failure
        updated_at: When anything in the store last changed
    """

    def __init__(self) -> None:
        self._snapshot: Snapshot | None = None
        self._refreshing = False
        self._progress = 0.0
        self._last_error: str | None = None
        self._updated_at: datetime | None = None
        self._listeners: list[StoreListener] = []

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def refreshing(self) -> bool:
        return self._refreshing

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def publish(self, snapshot: Snapshot) -> None:
        """Replace the current snapshot with `snapshot` as a whole."""
        self._snapshot = snapshot
        if snapshot.is_complete:
            self._last_error = None
        self._changed()

    def set_refreshing(self, refreshing: bool) -> None:
        if refreshing != self._refreshing:
            self._refreshing = refreshing
            self._changed()

    def set_progress(self, ratio: float) -> None:
        self._progress = min(max(ratio, 0.0), 1.0)
        self._changed()

    def set_error(self, message: str | None) -> None:
        self._last_error = message
        self._changed()

    def expanded_keys(self) -> set[ExpandedKey]:
        if self._snapshot is None:
            return set()
        return self._snapshot.expanded_keys()

    def set_expanded(self, group_name: str, node_name: str, expanded: bool) -> bool:
        """
        Set the expanded flag of one node.

        Builds a new Snapshot with the flag changed and publishes it; the
        previous snapshot object is left untouched.

        Returns:
            True if the node was found
        """
        if self._snapshot is None:
            return False

        found = False
        groups = []
        for group in self._snapshot.groups:
            if group.name != group_name:
                groups.append(group)
                continue
            nodes = []
            for node in group.nodes:
                if node.name == node_name:
                    found = True
                    node = dataclasses.replace(node, is_expanded=expanded)
                nodes.append(node)
            groups.append(dataclasses.replace(group, nodes=nodes))

        if found:
            self._snapshot = dataclasses.replace(self._snapshot, groups=tuple(groups))
            self._changed()
        return found

    def toggle_all_expanded(self) -> bool:
        """
        Expand every node, or collapse all if every node is expanded.

        Returns:
            The new expanded state
        """
        if self._snapshot is None:
            return False

        nodes = [n for g in self._snapshot.groups for n in g.nodes]
        expanded = not (nodes and all(n.is_expanded for n in nodes))
        groups = tuple(
            dataclasses.replace(
                group,
                nodes=[dataclasses.replace(n, is_expanded=expanded) for n in group.nodes],
            )
            for group in self._snapshot.groups
        )
        self._snapshot = dataclasses.replace(self._snapshot, groups=groups)
        self._changed()
        return expanded

    def _changed(self) -> None:
        self._updated_at = datetime.now()
        for listener in list(self._listeners):
            listener(self)
