"""Central configuration, constants, and shared work item field definitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# Azure DevOps Connection Settings
# =============================================================================
DEVOPS_API_VERSION = "7.1"
TIMEZONE = "America/Santiago"

# getWorkItemsBatch / ids= accepts at most 200 ids per request
WORK_ITEMS_BATCH_SIZE = 200

# Team iterations rarely change during a session
ITERATION_CACHE_TTL = 300.0  # seconds

# =============================================================================
# Work Item Field Reference Names
# =============================================================================
FIELD_TITLE = "System.Title"
FIELD_STATE = "System.State"
FIELD_ITERATION_PATH = "System.IterationPath"
FIELD_WORK_ITEM_TYPE = "System.WorkItemType"

# Relation type encoding "this item's parent is at URL X"
HIERARCHY_REVERSE = "System.LinkTypes.Hierarchy-Reverse"

# =============================================================================
# Workflow Configuration
# =============================================================================
STATE_NEW = "New"
STATE_ACTIVE = "Active"
STATE_RESOLVED = "Resolved"
STATE_CLOSED = "Closed"

# Work item types that own a cluster of tasks
PARENT_TYPES: frozenset[str] = frozenset({"User Story", "Bug", "Ticket"})
CHILD_TYPE = "Task"

# Appended to the original title when a copy supersedes it
SUPERSEDED_MARKER = " ->"

# Store-managed fields never copied onto a new work item. Title, state,
# iteration path are set explicitly by the patch builders.
SYSTEM_FIELDS: frozenset[str] = frozenset(
    {
        "System.IterationId",
        "System.ExternalLinkCount",
        "System.HyperLinkCount",
        "System.AttachedFileCount",
        "System.NodeName",
        "System.RevisedDate",
        "System.ChangedDate",
        "System.Id",
        "System.AreaId",
        "System.AuthorizedAs",
        "System.State",
        "System.AuthorizedDate",
        "System.Watermark",
        "System.Rev",
        "System.ChangedBy",
        "System.Reason",
        "System.WorkItemType",
        "System.CreatedDate",
        "System.CreatedBy",
        "System.History",
        "System.RelatedLinkCount",
        "System.BoardColumn",
        "System.BoardColumnDone",
        "System.BoardLane",
        "System.CommentCount",
        "System.TeamProject",
        "System.AreaLevel1",
        "System.IterationLevel1",
        "System.IterationLevel2",
        "Microsoft.VSTS.Common.StateChangeDate",
        "Microsoft.VSTS.Common.ActivatedDate",
        "Microsoft.VSTS.Common.ActivatedBy",
        "System.AreaPath",
        "Microsoft.VSTS.Scheduling.CompletedWork",
        "System.IterationPath",
        "System.Title",
        "Microsoft.VSTS.Common.ClosedBy",
        "Microsoft.VSTS.Common.ClosedDate",
    }
)

# =============================================================================
# Preview Table Columns
# =============================================================================
PREVIEW_COLUMNS: Sequence[str] = (
    "Work Item",
    "title",
    "type",
    "state",
    "role",
    "action",
    "cluster",
    "iteration_path",
)

ERROR_LOG_COLUMNS: Sequence[str] = (
    "Work Item",
    "error",
)


@dataclass(slots=True)
class AppSettings:
    error_log_slot: str = "errors"
    error_log_path: str = "data/errors.json"
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"


SETTINGS = AppSettings()
