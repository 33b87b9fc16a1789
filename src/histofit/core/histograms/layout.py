"""Name-keyed placement of histograms into display containers.

The display layout itself (tabs, grids, tiles) lives outside the engine. The
engine only records which container each histogram belongs to, so that the
placement can be re-applied after the external layout moved things around.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import NewType

ContainerId = NewType("ContainerId", int)

FALLBACK_LABEL = "Other"


@dataclass
class Container:
    """A labelled group of histograms, listed in placement order."""

    label: str
    members: list[str] = field(default_factory=list)


class Layout:
    """Container bookkeeping plus the authoritative name -> container mapping."""

    def __init__(self) -> None:
        self.containers: dict[ContainerId, Container] = {}
        self.placements: dict[str, ContainerId] = {}
        self._ids = itertools.count()

    def create_container(self, label: str) -> ContainerId:
        container_id = ContainerId(next(self._ids))
        self.containers[container_id] = Container(label)
        return container_id

    def find(self, label: str) -> ContainerId | None:
        for container_id, container in self.containers.items():
            if container.label == label:
                return container_id
        return None

    def get_or_create(self, label: str) -> ContainerId:
        container_id = self.find(label)
        return container_id if container_id is not None else self.create_container(label)

    def fallback(self) -> ContainerId:
        """The shared 'Other' container, created on first use."""
        return self.get_or_create(FALLBACK_LABEL)

    def place(self, name: str, container_id: ContainerId) -> None:
        if container_id not in self.containers:
            msg = f"Unknown container id: {container_id}"
            raise KeyError(msg)
        self.discard(name)
        self.placements[name] = container_id
        self.containers[container_id].members.append(name)

    def discard(self, name: str) -> None:
        self.placements.pop(name, None)
        for container in self.containers.values():
            if name in container.members:
                container.members.remove(name)

    def container_of(self, name: str) -> ContainerId | None:
        return self.placements.get(name)

    def reorganize(self) -> None:
        """Rebuild every container's members from the recorded placements."""
        for container in self.containers.values():
            container.members.clear()
        for name, container_id in self.placements.items():
            self.containers[container_id].members.append(name)
