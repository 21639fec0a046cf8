"""
Tests for the patch builder.

Covers:
1. Exactly seven add operations in a stable order
2. Tags, title, state and found-in formatting
3. Effort clamping and number formatting
4. Repro steps composition
"""

from dataclasses import replace

import pytest

from climatesync.workitems.application.patch_builder import (
    build_create_patch,
    build_repro_steps,
    format_effort,
    format_title_prefix,
)
from climatesync.workitems.domain.enums import PatchOp
from climatesync.workitems.domain.models import IssueLocation

EXPECTED_PATHS = [
    "/fields/CodeClimate.Fingerprint",
    "/fields/System.Tags",
    "/fields/System.Title",
    "/fields/System.State",
    "/fields/Microsoft.VSTS.Build.FoundIn",
    "/fields/Microsoft.VSTS.Scheduling.Effort",
    "/fields/Microsoft.VSTS.TCM.ReproSteps",
]


def _values(ops):
    return {op.path: op.value for op in ops}


class TestBuildCreatePatch:
    def test_seven_ops_in_stable_order(self, sample_issue):
        ops = build_create_patch(sample_issue, "web", "1.4.2")

        assert [op.path for op in ops] == EXPECTED_PATHS
        assert all(op.op == PatchOp.ADD for op in ops)

    def test_field_values(self, sample_issue):
        values = _values(build_create_patch(sample_issue, "web", "1.4.2"))

        assert values["/fields/CodeClimate.Fingerprint"] == sample_issue.fingerprint
        assert values["/fields/System.Tags"] == "Code Climate,Duplication,similar-code"
        assert values["/fields/System.Title"] == "Similar code in web > src/app/models.py"
        assert values["/fields/System.State"] == "New"
        assert values["/fields/Microsoft.VSTS.Build.FoundIn"] == "web_1.4.2"
        assert values["/fields/Microsoft.VSTS.Scheduling.Effort"] == "2.5"

    def test_tags_keep_category_order(self, sample_issue):
        issue = replace(sample_issue, categories=("Style", "Complexity", "Bug Risk"))

        values = _values(build_create_patch(issue, "web", "1"))

        assert values["/fields/System.Tags"] == "Code Climate,Style,Complexity,Bug Risk,similar-code"

    @pytest.mark.parametrize("points", [0, 1, 9999, -500])
    def test_effort_never_below_one(self, sample_issue, points):
        issue = replace(sample_issue, remediation_points=points)

        values = _values(build_create_patch(issue, "web", "1"))

        assert values["/fields/Microsoft.VSTS.Scheduling.Effort"] == "1"

    def test_serializes_to_rest_json(self, sample_issue):
        ops = build_create_patch(sample_issue, "web", "1")

        assert ops[0].to_json() == {
            "op": "add",
            "path": "/fields/CodeClimate.Fingerprint",
            "value": sample_issue.fingerprint,
        }


class TestFormatting:
    @pytest.mark.parametrize(
        "check_name, expected",
        [
            ("similar-code", "Similar code"),
            ("Rubocop/Style/Indent", "Rubocop/Style/Indent"),
            ("method-complexity-high", "Method complexity high"),
            ("argument_count", "Argument_count"),
            ("", ""),
        ],
    )
    def test_title_prefix(self, check_name, expected):
        assert format_title_prefix(check_name) == expected

    @pytest.mark.parametrize(
        "points, expected",
        [(10000, "1"), (20000, "2"), (15000, "1.5"), (2500000, "250"), (5000, "1")],
    )
    def test_effort(self, points, expected):
        assert format_effort(points) == expected


class TestReproSteps:
    def test_sections_joined_by_double_break(self, sample_issue):
        steps = build_repro_steps(sample_issue, "web", renderer=lambda body: "<p>BODY</p>")

        assert steps == (
            "Similar blocks of code found in 2 locations. Consider refactoring."
            "<br/><br/>"
            "<ol><li>Open web > src/app/models.py and observe lines 12 - 40.</li></ol>"
            "<br/><br/>"
            "<p>BODY</p>"
        )

    def test_unknown_lines_rendered_as_question_mark(self, sample_issue):
        issue = replace(sample_issue, location=IssueLocation(path="a.py"))

        steps = build_repro_steps(issue, "web", renderer=lambda body: "")

        assert "observe lines ? - ?." in steps

    def test_uses_markup_renderer_for_body(self, sample_issue):
        values = _values(build_create_patch(sample_issue, "web", "1"))
        repro = values["/fields/Microsoft.VSTS.TCM.ReproSteps"]

        assert "<h2>Duplicated code</h2>" in repro
        assert '<a href="https://docs.codeclimate.com">' in repro
