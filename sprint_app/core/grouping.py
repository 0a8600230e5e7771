"""Group the work items of one iteration into parent/children clusters."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .config import CHILD_TYPE, HIERARCHY_REVERSE, PARENT_TYPES, STATE_CLOSED
from .devops_client import WorkItemStore
from .errors import FetchError
from .mappers import map_work_item
from .models import Iteration, TeamContext, WorkItem, WorkItemCluster

logger = logging.getLogger(__name__)


def _is_parent_candidate(item: WorkItem) -> bool:
    return item.type in PARENT_TYPES and item.state != STATE_CLOSED


def _is_child_of(item: WorkItem, parent: WorkItem) -> bool:
    return any(rel.rel == HIERARCHY_REVERSE and rel.url == parent.url for rel in item.relations)


def group_work_items(items: Iterable[WorkItem]) -> list[WorkItemCluster]:
    """Build one cluster per open parent with the tasks linked beneath it.

    Closed parents are left out along with their tasks. Tasks that match no
    parent are not emitted.
    """
    items = list(items)
    parents = [wi for wi in items if _is_parent_candidate(wi)]
    tasks = [wi for wi in items if wi.type == CHILD_TYPE]
    clusters = [WorkItemCluster(parent, [t for t in tasks if _is_child_of(t, parent)]) for parent in parents]
    claimed = {child.id for cluster in clusters for child in cluster.children}
    orphans = [t.id for t in tasks if t.id not in claimed]
    if orphans:
        logger.debug("Skipping %d task(s) without an open parent: %s", len(orphans), orphans)
    return clusters


def select_all_clusters(
    store: WorkItemStore,
    team_context: TeamContext,
    iteration: Iteration,
) -> list[WorkItemCluster]:
    """Fetch every work item linked to ``iteration`` and cluster it.

    Raises
    ------
    FetchError
        If either read against the store fails.
    """
    try:
        links = store.get_iteration_work_items(team_context, iteration.id)
        ids: list[int] = []
        for link in links:
            target_id = int(link["target"]["id"])
            if target_id not in ids:
                ids.append(target_id)
        raw = store.get_work_items_by_ids(ids, expand="All") if ids else []
        items = [map_work_item(r) for r in raw]
    except Exception as exc:
        raise FetchError(f"select_all_clusters: Failed to fetch work items: {exc}") from exc
    logger.info("Fetched %d work item(s) for iteration %s", len(items), iteration.name)
    return group_work_items(items)
