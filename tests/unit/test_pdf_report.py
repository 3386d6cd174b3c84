"""Tests for the summary PDF renderers."""
import re

from worklog.models.summary import ProjectSummary, SummaryOverview
from worklog.utils.pdf_report import (
    describe_period,
    render_overview_summary_pdf,
    render_projects_summary_pdf,
)

GENERATED_AT = "20-01-2026 12:00 PM"


def page_count(content: bytes) -> int:
    return len(re.findall(rb"/Type\s*/Page(?!s)", content))


def make_summary(index: int, is_billable: bool = True) -> ProjectSummary:
    return ProjectSummary(
        project_id=f"p{index}",
        name=f"Project number {index} with a rather long name",
        is_billable=is_billable,
        hourly_rate=40.0 if is_billable else None,
        project_created_on="01-01-2026 10:00 AM",
        project_started_on="10-01-2026 9:00 AM",
        project_last_work_on="12-01-2026 2:40 PM",
        total_working_hours=1.67,
        total_earnings=66.8 if is_billable else 0.0,
    )


class TestDescribePeriod:
    """Tests for the report period line."""

    def test_no_filter(self):
        """Test no period is described without a filter."""
        assert describe_period(None) is None
        assert describe_period({}) is None

    def test_bounds(self):
        """Test each combination of bounds."""
        assert describe_period({"from": "01-01-2026", "to": "31-01-2026"}) == "01-01-2026 to 31-01-2026"
        assert describe_period({"from": "01-01-2026"}) == "From 01-01-2026"
        assert describe_period({"to": "31-01-2026"}) == "Until 31-01-2026"


class TestProjectsSummaryPdf:
    """Tests for the per-project report."""

    def test_renders_pdf(self):
        """Test a small report is a single-page PDF."""
        content = render_projects_summary_pdf(
            [make_summary(1), make_summary(2, is_billable=False)],
            {"from": "01-01-2026"},
            GENERATED_AT,
        )

        assert content.startswith(b"%PDF")
        assert page_count(content) == 1

    def test_empty_report(self):
        """Test an empty result still renders a document."""
        content = render_projects_summary_pdf([], None, GENERATED_AT)

        assert content.startswith(b"%PDF")
        assert page_count(content) == 1

    def test_long_table_paginates(self):
        """Test many rows spill onto further pages."""
        content = render_projects_summary_pdf(
            [make_summary(i) for i in range(60)],
            None,
            GENERATED_AT,
        )

        assert page_count(content) > 1

    def test_non_latin_names(self):
        """Test names outside latin-1 do not break rendering."""
        summary = make_summary(1).model_copy(update={"name": "Café ☕ project"})

        content = render_projects_summary_pdf([summary], None, GENERATED_AT)

        assert content.startswith(b"%PDF")


class TestOverviewSummaryPdf:
    """Tests for the overview report."""

    def test_renders_pdf(self):
        """Test the overview renders with mixed hours."""
        overview = SummaryOverview(
            total_projects=2,
            total_working_hours=2.42,
            billable_projects=1,
            billable_hours=1.67,
            billable_earnings=83.5,
            non_billable_projects=1,
            non_billable_hours=0.75,
        )

        content = render_overview_summary_pdf(overview, {"to": "31-01-2026"}, GENERATED_AT)

        assert content.startswith(b"%PDF")
        assert page_count(content) == 1

    def test_all_zero(self):
        """Test an overview with no hours renders without a bar split."""
        content = render_overview_summary_pdf(SummaryOverview(), None, GENERATED_AT)

        assert content.startswith(b"%PDF")
