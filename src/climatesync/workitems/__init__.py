"""
Work items module - synchronization of analysis issues with work items.
"""

from climatesync.workitems.application.client import WorkItemClient
from climatesync.workitems.application.sync_service import IssueSynchronizer, SyncReport, load_issues
from climatesync.workitems.domain.enums import PatchOp, SyncOutcome, WorkItemType
from climatesync.workitems.domain.models import (
    AnalysisIssue,
    IssueLocation,
    PatchOperation,
    QueryCondition,
    WorkItem,
    WorkItemBatch,
    WorkItemField,
    WorkItemQueryResult,
)

__all__ = [
    "WorkItemClient",
    "IssueSynchronizer",
    "SyncReport",
    "load_issues",
    "AnalysisIssue",
    "IssueLocation",
    "PatchOperation",
    "PatchOp",
    "QueryCondition",
    "SyncOutcome",
    "WorkItem",
    "WorkItemBatch",
    "WorkItemField",
    "WorkItemQueryResult",
    "WorkItemType",
]
