"""
Patch Builder - turns an analysis issue into the patch creating its work item.
"""

from typing import Callable, List, Optional

from climatesync.workitems.application.markup import render_markup
from climatesync.workitems.domain.constants import (
    EFFORT_FIELD,
    FINGERPRINT_FIELD,
    FOUND_IN_FIELD,
    INITIAL_STATE,
    MARKER_TAG,
    REMEDIATION_POINTS_PER_EFFORT,
    REPRO_STEPS_FIELD,
    STATE_FIELD,
    TAGS_FIELD,
    TITLE_FIELD,
)
from climatesync.workitems.domain.models import AnalysisIssue, PatchOperation

SECTION_SEPARATOR = "<br/><br/>"


def format_title_prefix(check_name: str) -> str:
    """'file-lines' -> 'File lines'. Only the first character changes case."""
    if not check_name:
        return ""
    spaced = check_name.replace("-", " ")
    return spaced[0].upper() + spaced[1:]


def format_effort(remediation_points: float) -> str:
    """
    Effort estimate from remediation points, clamped to at least 1.

    Integral values render without a decimal part.
    """
    effort = max(1, remediation_points / REMEDIATION_POINTS_PER_EFFORT)
    if float(effort).is_integer():
        return str(int(effort))
    return str(effort)


def _line(value: Optional[int]) -> str:
    return "?" if value is None else str(value)


def build_repro_steps(
    issue: AnalysisIssue,
    component: str,
    renderer: Callable[[str], str] = render_markup,
) -> str:
    location = issue.location
    steps = (
        f"<ol><li>Open {component} > {location.path} and observe lines "
        f"{_line(location.begin_line)} - {_line(location.end_line)}.</li></ol>"
    )
    return SECTION_SEPARATOR.join([issue.description, steps, renderer(issue.body)])


def build_create_patch(
    issue: AnalysisIssue,
    component: str,
    build_version: str,
    renderer: Callable[[str], str] = render_markup,
) -> List[PatchOperation]:
    """
    Build the ordered patch describing a new work item for `issue`.

    Always returns the same seven `add` operations in the same order:
    fingerprint, tags, title, state, found-in, effort, repro steps.
    """
    tags = ",".join([MARKER_TAG, *issue.categories, issue.check_name])
    title = f"{format_title_prefix(issue.check_name)} in {component} > {issue.location.path}"

    return [
        PatchOperation.add_field(FINGERPRINT_FIELD, issue.fingerprint),
        PatchOperation.add_field(TAGS_FIELD, tags),
        PatchOperation.add_field(TITLE_FIELD, title),
        PatchOperation.add_field(STATE_FIELD, INITIAL_STATE),
        PatchOperation.add_field(FOUND_IN_FIELD, f"{component}_{build_version}"),
        PatchOperation.add_field(EFFORT_FIELD, format_effort(issue.remediation_points)),
        PatchOperation.add_field(REPRO_STEPS_FIELD, build_repro_steps(issue, component, renderer)),
    ]
