"""Cluster classification rules for sprint closing.

Each cluster routes to exactly one action, decided by its child states with
parent existence checked first:

- ``CARRY_FORWARD``: a parent is present and every child is still ``New``
  (a parent with no children is carried forward as well).
- ``RESOLVE``: there is at least one child and every child is ``Closed``.
- ``SPLIT``: anything else (mixed child states).

The empty-children case is guarded explicitly so it never reaches ``RESOLVE``
through a vacuous ``all()``.
"""

from __future__ import annotations

import re
from enum import Enum

from .config import CHILD_TYPE, STATE_CLOSED, STATE_NEW, STATE_RESOLVED
from .models import WorkItem, WorkItemCluster

SPRINT_NUMBER_RE = re.compile(r"^.*?(\d+\.\d+)$")


class ClusterAction(str, Enum):
    CARRY_FORWARD = "carry forward"
    RESOLVE = "resolve"
    SPLIT = "split"


def _all_children_in(cluster: WorkItemCluster, state: str) -> bool:
    return bool(cluster.children) and all(child.state == state for child in cluster.children)


def classify_cluster(cluster: WorkItemCluster) -> ClusterAction:
    if cluster.parent is not None:
        if not cluster.children or _all_children_in(cluster, STATE_NEW):
            return ClusterAction.CARRY_FORWARD
    if _all_children_in(cluster, STATE_CLOSED):
        return ClusterAction.RESOLVE
    return ClusterAction.SPLIT


def has_sprint_number(title: str | None) -> bool:
    """True when the title ends with a dotted sprint number such as ``2.1``."""
    return bool(title and SPRINT_NUMBER_RE.match(title))


def closing_state(item: WorkItem) -> str:
    """Terminal state for a superseded work item: tasks close, others resolve."""
    return STATE_CLOSED if item.type == CHILD_TYPE else STATE_RESOLVED
