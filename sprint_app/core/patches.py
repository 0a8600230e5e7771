"""Patch document builders for every mutation the sprint closer issues.

All builders are pure. Field operations are always emitted before relation
operations because the store applies a patch positionally.
"""

from __future__ import annotations

from .config import (
    FIELD_ITERATION_PATH,
    FIELD_STATE,
    FIELD_TITLE,
    HIERARCHY_REVERSE,
    STATE_ACTIVE,
    SUPERSEDED_MARKER,
    SYSTEM_FIELDS,
)
from .errors import InvariantError
from .models import Operation, PatchDocument, PatchOperation, WorkItem, WorkItemRelation
from .titles import next_title


def field_path(name: str) -> str:
    return f"/fields/{name}"


def _hierarchy_link(url: str) -> dict[str, str]:
    return {"rel": HIERARCHY_REVERSE, "url": url}


def copy_fields(item: WorkItem) -> PatchDocument:
    """Add operations for every field of ``item`` outside the system deny-list."""
    return [
        PatchOperation(Operation.ADD, field_path(name), value)
        for name, value in item.fields.items()
        if name not in SYSTEM_FIELDS
    ]


def _copy_base(item: WorkItem, destination_path: str, destination_name: str | None) -> PatchDocument:
    patch = copy_fields(item)
    patch.append(PatchOperation(Operation.ADD, field_path(FIELD_TITLE), next_title(item.title, destination_name)))
    patch.append(PatchOperation(Operation.ADD, field_path(FIELD_ITERATION_PATH), destination_path))
    return patch


def copy_with_child_relation(
    item: WorkItem,
    parent_url: str,
    destination_path: str,
    destination_name: str | None = None,
) -> PatchDocument:
    """Clone a child task into the destination iteration under ``parent_url``."""
    patch = _copy_base(item, destination_path, destination_name)
    patch.append(PatchOperation(Operation.ADD, "/relations/-", _hierarchy_link(parent_url)))
    return patch


def copy_with_parent_relation(
    item: WorkItem,
    destination_path: str,
    destination_name: str | None = None,
) -> PatchDocument:
    """Clone a parent item into the destination iteration.

    The copy restarts its workflow as ``Active`` and keeps the original's own
    hierarchy parent (e.g. a Feature) when it has one.
    """
    patch = _copy_base(item, destination_path, destination_name)
    patch.append(PatchOperation(Operation.ADD, field_path(FIELD_STATE), STATE_ACTIVE))
    own_parent = find_parent_relation(item)
    if own_parent is not None:
        patch.append(PatchOperation(Operation.ADD, "/relations/-", _hierarchy_link(own_parent[1].url)))
    return patch


def mark_superseded(item: WorkItem) -> PatchDocument:
    """Append the superseded marker to the original item's title in place."""
    return [PatchOperation(Operation.REPLACE, field_path(FIELD_TITLE), f"{item.title}{SUPERSEDED_MARKER}")]


def move_to_iteration(destination_path: str) -> PatchDocument:
    return [PatchOperation(Operation.REPLACE, field_path(FIELD_ITERATION_PATH), destination_path)]


def find_parent_relation(item: WorkItem) -> tuple[int, WorkItemRelation] | None:
    """Locate the single hierarchy-parent relation by type.

    Raises
    ------
    InvariantError
        If the item carries more than one hierarchy-parent relation.
    """
    matches = [(idx, rel) for idx, rel in enumerate(item.relations) if rel.rel == HIERARCHY_REVERSE]
    if len(matches) > 1:
        raise InvariantError(
            "find_parent_relation",
            f"{len(matches)} hierarchy-parent relations, expected at most one",
            item.id,
        )
    return matches[0] if matches else None


def relink_child(child: WorkItem, parent_url: str, destination_path: str) -> PatchDocument:
    """Move a child into the destination iteration and re-parent it.

    The existing hierarchy-parent link is found by type, removed by index, and a
    new link to ``parent_url`` is appended.
    """
    patch = move_to_iteration(destination_path)
    current = find_parent_relation(child)
    if current is not None:
        patch.append(PatchOperation(Operation.REMOVE, f"/relations/{current[0]}", None))
    patch.append(PatchOperation(Operation.ADD, "/relations/-", _hierarchy_link(parent_url)))
    return patch


def transition_state(new_state: str) -> PatchDocument:
    return [PatchOperation(Operation.REPLACE, field_path(FIELD_STATE), new_state)]
