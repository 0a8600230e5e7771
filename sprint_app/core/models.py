"""Domain data models for work items, iterations, clusters, and patch documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .config import FIELD_ITERATION_PATH, FIELD_STATE, FIELD_TITLE, FIELD_WORK_ITEM_TYPE


class TimeFrame(str, Enum):
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


class Operation(str, Enum):
    ADD = "add"
    REPLACE = "replace"
    REMOVE = "remove"


@dataclass(slots=True)
class TeamContext:
    project: str
    project_id: str
    team: str
    team_id: str


@dataclass(slots=True)
class Iteration:
    id: str
    name: str
    path: str
    time_frame: TimeFrame | None
    start_date: datetime | None = None
    finish_date: datetime | None = None


@dataclass(slots=True)
class WorkItemRelation:
    rel: str
    url: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class WorkItem:
    id: int
    url: str
    fields: dict[str, Any] = field(default_factory=dict)
    relations: list[WorkItemRelation] = field(default_factory=list)

    @property
    def type(self) -> str | None:
        return self.fields.get(FIELD_WORK_ITEM_TYPE)

    @property
    def state(self) -> str | None:
        return self.fields.get(FIELD_STATE)

    @property
    def title(self) -> str:
        return self.fields.get(FIELD_TITLE) or ""

    @property
    def iteration_path(self) -> str | None:
        return self.fields.get(FIELD_ITERATION_PATH)


@dataclass(slots=True)
class WorkItemCluster:
    """A parent work item plus its direct child tasks.

    ``parent`` may be absent for orphaned tasks; callers must check it before
    dereferencing.
    """

    parent: WorkItem | None
    children: list[WorkItem] = field(default_factory=list)

    @property
    def all_items(self) -> list[WorkItem]:
        if self.parent is None:
            return list(self.children)
        return [self.parent, *self.children]


@dataclass(slots=True)
class PatchOperation:
    op: Operation
    path: str
    value: Any = None

    def to_wire(self) -> dict[str, Any]:
        return {"op": self.op.value, "path": self.path, "value": self.value}


PatchDocument = list[PatchOperation]


def patch_to_wire(patch: PatchDocument) -> list[dict[str, Any]]:
    """Serialize a patch document to the JSON shape the store expects."""
    return [operation.to_wire() for operation in patch]


@dataclass(slots=True)
class ErrorRecord:
    error: str
    work_item_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"error": self.error}
        if self.work_item_id is not None:
            out["workItemId"] = self.work_item_id
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ErrorRecord:
        return cls(error=str(data.get("error", "")), work_item_id=data.get("workItemId"))
