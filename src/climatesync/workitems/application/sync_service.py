"""
Sync Service - project a Code Climate report onto work items.

Upsert is composed here from the client's primitives: query by fingerprint,
then create only when nothing matches. Fan-out across issues is bounded by a
semaphore; the client itself imposes no limit.
"""

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from climatesync.shared.infrastructure.logging import get_logger
from climatesync.workitems.application.client import WorkItemClient
from climatesync.workitems.domain.constants import FINGERPRINT_FIELD
from climatesync.workitems.domain.enums import SyncOutcome, WorkItemType
from climatesync.workitems.domain.models import AnalysisIssue, WorkItemField

logger = get_logger(__name__)


def _parse_entries(text: str) -> List[Any]:
    text = text.strip()
    if not text:
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Engine stream format: one JSON document per NUL- or newline-separated chunk
        chunks = text.replace("\0", "\n").splitlines()
        return [json.loads(chunk) for chunk in chunks if chunk.strip()]
    return data if isinstance(data, list) else [data]


def load_issues(path: Union[str, Path]) -> List[AnalysisIssue]:
    """
    Load issues from Code Climate JSON output.

    Entries whose `type` is not "issue" (e.g. measurements) are ignored;
    malformed issue entries are logged and skipped.
    """
    entries = _parse_entries(Path(path).read_text(encoding="utf-8"))
    issues: List[AnalysisIssue] = []

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or str(entry.get("type", "")).lower() != "issue":
            continue
        try:
            issues.append(AnalysisIssue.from_dict(entry))
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("invalid_issue_skipped", index=index, error=str(e), error_type=type(e).__name__)

    logger.info("issues_loaded", path=str(path), count=len(issues))
    return issues


def fingerprint_field_factory(reference_name: str) -> WorkItemField:
    """Definition of the custom field holding issue fingerprints."""
    return WorkItemField(
        name=reference_name.rsplit(".", 1)[-1],
        reference_name=reference_name,
        type="string",
        usage="workItem",
        description="Code Climate issue fingerprint",
        read_only=False,
        is_queryable=True,
    )


@dataclass
class SyncReport:
    """Outcome of a synchronization run."""

    created: List[int] = field(default_factory=list)
    existing: List[int] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.created) + len(self.existing) + len(self.skipped)


class IssueSynchronizer:
    """Creates a work item for every issue not yet tracked."""

    def __init__(
        self,
        client: WorkItemClient,
        component: str,
        build_version: str,
        work_item_type: Union[WorkItemType, str] = WorkItemType.BUG,
        max_concurrency: int = 8,
    ):
        self.client = client
        self.component = component
        self.build_version = build_version
        self.work_item_type = work_item_type
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def ensure_fields(self) -> WorkItemField:
        """Make sure the fingerprint field exists. Propagates failures."""
        return await self.client.field_ensure(FINGERPRINT_FIELD, fingerprint_field_factory)

    async def sync_issue(self, issue: AnalysisIssue, report: Optional[SyncReport] = None) -> SyncOutcome:
        report = report if report is not None else SyncReport()

        async with self._semaphore:
            matches = await self.client.find_by_fingerprint(issue.fingerprint)
            if matches is None:
                # Unknown state; creating could duplicate an existing item
                report.skipped.append(issue.fingerprint)
                return SyncOutcome.SKIPPED

            if matches.ids:
                logger.debug("work_item_exists", fingerprint=issue.fingerprint, work_item_ids=matches.ids)
                report.existing.extend(matches.ids)
                return SyncOutcome.EXISTING

            work_item = await self.client.create(
                self.work_item_type, issue, self.component, self.build_version
            )
            if work_item is None:
                report.skipped.append(issue.fingerprint)
                return SyncOutcome.SKIPPED

            report.created.append(work_item.id)
            return SyncOutcome.CREATED

    async def sync(self, issues: Iterable[AnalysisIssue]) -> SyncReport:
        """
        Ensure the fingerprint field, then sync every issue.

        Issues repeating a fingerprint already seen in this run are ignored.
        """
        await self.ensure_fields()

        unique: dict[str, AnalysisIssue] = {}
        for issue in issues:
            if issue.fingerprint in unique:
                logger.debug("duplicate_fingerprint", fingerprint=issue.fingerprint)
                continue
            unique[issue.fingerprint] = issue

        report = SyncReport()
        await asyncio.gather(*(self.sync_issue(issue, report) for issue in unique.values()))

        logger.info(
            "sync_completed",
            created=len(report.created),
            existing=len(report.existing),
            skipped=len(report.skipped),
        )
        return report
