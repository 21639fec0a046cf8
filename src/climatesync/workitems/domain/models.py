"""
Work item domain models.

AnalysisIssue mirrors one entry of Code Climate's JSON output (snake_case on
the wire). The work item models mirror the work-tracking REST payloads
(camelCase on the wire) through BaseDomainModel.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from climatesync.shared.domain.base_model import BaseDomainModel
from climatesync.workitems.domain.enums import PatchOp


@dataclass(frozen=True)
class IssueLocation:
    """File path and line range of a finding."""

    path: str
    begin_line: Optional[int] = None
    end_line: Optional[int] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "IssueLocation":
        """
        Parse a Code Climate location.

        Engines report either `lines: {begin, end}` or
        `positions: {begin: {line, column}, end: {line, column}}`.
        """
        begin_line = end_line = None
        if "lines" in data:
            begin_line = data["lines"].get("begin")
            end_line = data["lines"].get("end")
        elif "positions" in data:
            begin_line = data["positions"].get("begin", {}).get("line")
            end_line = data["positions"].get("end", {}).get("line")

        return IssueLocation(path=data["path"], begin_line=begin_line, end_line=end_line)


@dataclass(frozen=True)
class AnalysisIssue:
    """A single finding produced by the analysis tool. Never mutated."""

    fingerprint: str
    check_name: str
    description: str
    location: IssueLocation
    categories: tuple[str, ...] = ()
    remediation_points: float = 0
    body: str = ""
    engine_name: Optional[str] = None
    severity: Optional[str] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "AnalysisIssue":
        """Parse one Code Climate issue object."""
        content = data.get("content") or {}
        return AnalysisIssue(
            fingerprint=data["fingerprint"],
            check_name=data["check_name"],
            description=data.get("description", ""),
            location=IssueLocation.from_dict(data["location"]),
            categories=tuple(data.get("categories", [])),
            remediation_points=data.get("remediation_points") or 0,
            body=content.get("body", ""),
            engine_name=data.get("engine_name"),
            severity=data.get("severity"),
        )


@dataclass
class PatchOperation(BaseDomainModel):
    """One `{op, path, value}` mutation of a work item."""

    op: PatchOp
    path: str
    value: Any = None
    from_: Optional[str] = field(default=None, metadata={"json_key": "from"})

    @staticmethod
    def add_field(reference_name: str, value: Any) -> "PatchOperation":
        return PatchOperation(op=PatchOp.ADD, path=f"/fields/{reference_name}", value=value)

    @staticmethod
    def replace_field(reference_name: str, value: Any) -> "PatchOperation":
        return PatchOperation(op=PatchOp.REPLACE, path=f"/fields/{reference_name}", value=value)


@dataclass
class WorkItem(BaseDomainModel):
    """A tracked work item."""

    id: int
    rev: Optional[int] = None
    fields: Dict[str, Any] = field(default_factory=dict)
    url: Optional[str] = None

    def get_field(self, reference_name: str, default: Any = None) -> Any:
        return self.fields.get(reference_name, default)


@dataclass
class WorkItemField(BaseDomainModel):
    """A work item field definition."""

    name: str
    reference_name: str
    type: str = "string"
    usage: Optional[str] = "workItem"
    description: Optional[str] = None
    read_only: Optional[bool] = None
    is_queryable: Optional[bool] = None
    can_sort_by: Optional[bool] = None
    is_picklist: Optional[bool] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class QueryCondition:
    """`[field_name] operator value`, inserted verbatim into a query."""

    field_name: str
    operator: str
    value: Any


@dataclass
class WorkItemBatch(BaseDomainModel):
    """Result of a multi-id fetch."""

    count: int = 0
    value: List[WorkItem] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "WorkItemBatch":
        items = [WorkItem.from_json(item) for item in data.get("value", [])]
        return cls(count=data.get("count", len(items)), value=items)


@dataclass
class WorkItemReference(BaseDomainModel):
    id: int
    url: Optional[str] = None


@dataclass
class WorkItemQueryResult(BaseDomainModel):
    """Result of a query: references to matching work items."""

    query_type: Optional[str] = None
    query_result_type: Optional[str] = None
    as_of: Optional[str] = None
    columns: List[Dict[str, Any]] = field(default_factory=list)
    work_items: List[WorkItemReference] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "WorkItemQueryResult":
        return cls(
            query_type=data.get("queryType"),
            query_result_type=data.get("queryResultType"),
            as_of=data.get("asOf"),
            columns=data.get("columns", []),
            work_items=[WorkItemReference.from_json(ref) for ref in data.get("workItems", [])],
        )

    @property
    def ids(self) -> List[int]:
        return [ref.id for ref in self.work_items]
