"""Work item enums."""

from enum import Enum


class WorkItemType(str, Enum):
    """Built-in work item types across the Agile, Scrum and Basic processes."""

    BUG = "Bug"
    TASK = "Task"
    ISSUE = "Issue"
    USER_STORY = "User Story"
    PRODUCT_BACKLOG_ITEM = "Product Backlog Item"
    FEATURE = "Feature"
    EPIC = "Epic"


class PatchOp(str, Enum):
    """JSON patch operation kinds."""

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


class SyncOutcome(str, Enum):
    """What happened to a single issue during synchronization."""

    CREATED = "created"
    EXISTING = "existing"
    SKIPPED = "skipped"
