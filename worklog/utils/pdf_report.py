"""PDF rendering of summary reports.

The renderer only lays out values the aggregation already produced: hours,
earnings and dates arrive rounded and formatted.
"""
import logging
from typing import Optional, Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from worklog.models.summary import ProjectSummary, SummaryOverview
from worklog.utils.aggregation import NO_WORK_RECORDED

logger = logging.getLogger(__name__)

FONT = "Helvetica"
ROW_HEIGHT = 8
PROJECT_COLUMNS = (
    ("Project", 55),
    ("Hours", 22),
    ("Rate", 25),
    ("Earnings", 28),
    ("Work Period", 60),
)
BILLABLE_COLOR = (76, 175, 80)
NON_BILLABLE_COLOR = (158, 158, 158)
METRIC_COLORS = (
    (76, 175, 80),
    (33, 150, 243),
    (255, 152, 0),
    (156, 39, 176),
    (244, 67, 54),
    (0, 150, 136),
    (103, 58, 183),
)


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def _truncate(text: str, max_length: int) -> str:
    return text[:max_length] + "..." if len(text) > max_length else text


def _date_part(value: str) -> str:
    if value == NO_WORK_RECORDED:
        return "N/A"
    return value.split(" ", 1)[0]


def describe_period(filter_applied: Optional[dict]) -> Optional[str]:
    """
    Human-readable report period, or None when no range was applied.

    Examples:
        >>> describe_period({"from": "01-01-2026", "to": "31-01-2026"})
        '01-01-2026 to 31-01-2026'
        >>> describe_period({"to": "31-01-2026"})
        'Until 31-01-2026'
    """
    if not filter_applied:
        return None
    start = filter_applied.get("from")
    end = filter_applied.get("to")
    if start and end:
        return f"{start} to {end}"
    if start:
        return f"From {start}"
    if end:
        return f"Until {end}"
    return None


class SummaryPDF(FPDF):
    """A4 report with a title band and a generated-on footer."""

    def __init__(self, title: str, generated_at: str):
        super().__init__(unit="mm", format="A4")
        self.report_title = title
        self.generated_at = generated_at
        self.set_auto_page_break(auto=True, margin=20)
        self.set_margins(10, 10, 10)

    @property
    def effective_width(self) -> float:
        return self.w - self.l_margin - self.r_margin

    def header(self):
        self.set_fill_color(248, 249, 250)
        self.rect(0, 0, self.w, 28, style="F")
        self.set_xy(self.l_margin, 9)
        self.set_font(FONT, "B", 20)
        self.set_text_color(44, 62, 80)
        self.cell(self.effective_width, 10, self.report_title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_draw_color(52, 152, 219)
        self.set_line_width(0.7)
        self.line(self.l_margin, 23, self.w - self.r_margin, 23)
        self.set_y(32)
        self.set_text_color(0, 0, 0)

    def footer(self):
        self.set_y(-15)
        self.set_font(FONT, "", 8)
        self.set_text_color(128, 128, 128)
        self.cell(
            self.effective_width,
            5,
            f"Generated on {self.generated_at} - Page {self.page_no()}",
            align="C",
        )

    def period_line(self, filter_applied: Optional[dict]) -> None:
        period = describe_period(filter_applied)
        if period is None:
            return
        self.set_font(FONT, "", 10)
        self.set_text_color(128, 128, 128)
        self.cell(30, 6, "Report Period:")
        self.set_text_color(0, 0, 0)
        self.cell(self.effective_width - 30, 6, _latin1(period), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(3)

    def to_bytes(self) -> bytes:
        return bytes(self.output())


def _project_table_header(pdf: SummaryPDF) -> None:
    pdf.set_font(FONT, "B", 9)
    pdf.set_fill_color(240, 240, 240)
    for label, width in PROJECT_COLUMNS:
        pdf.cell(width, ROW_HEIGHT, label, fill=True)
    pdf.ln(ROW_HEIGHT)
    pdf.set_font(FONT, "", 8)


def _project_row(project: ProjectSummary) -> tuple[str, ...]:
    rate = f"{project.hourly_rate:g}/hr" if project.is_billable and project.hourly_rate else "N/A"
    earnings = f"{project.total_earnings:.2f}" if project.is_billable else "-"
    period = f"{_date_part(project.project_started_on)} - {_date_part(project.project_last_work_on)}"
    return (
        _latin1(_truncate(project.name, 28)),
        f"{project.total_working_hours:.2f}",
        rate,
        earnings,
        period,
    )


def render_projects_summary_pdf(
    projects: Sequence[ProjectSummary],
    filter_applied: Optional[dict],
    generated_at: str,
) -> bytes:
    """
    Render the per-project summary as a paginated table with totals.

    Args:
        projects: Per-project metrics from the aggregation
        filter_applied: The ``from``/``to`` strings used, or None
        generated_at: Preformatted generation timestamp for the footer

    Returns:
        PDF document bytes
    """
    pdf = SummaryPDF("Projects Summary Report", generated_at)
    pdf.add_page()
    pdf.period_line(filter_applied)

    if not projects:
        pdf.set_font(FONT, "", 12)
        pdf.set_text_color(128, 128, 128)
        pdf.cell(pdf.effective_width, 8, "No projects with activity in the selected date range.")
        return pdf.to_bytes()

    _project_table_header(pdf)
    for index, project in enumerate(projects):
        if pdf.will_page_break(ROW_HEIGHT):
            pdf.add_page()
            _project_table_header(pdf)
        pdf.set_fill_color(250, 250, 250)
        for (label, width), value in zip(PROJECT_COLUMNS, _project_row(project)):
            pdf.cell(width, ROW_HEIGHT, value, fill=index % 2 == 0)
        pdf.ln(ROW_HEIGHT)

    total_hours = sum(project.total_working_hours for project in projects)
    total_earnings = sum(project.total_earnings for project in projects)
    billable_count = sum(1 for project in projects if project.is_billable)

    if pdf.will_page_break(40):
        pdf.add_page()
    pdf.ln(8)
    pdf.set_font(FONT, "B", 11)
    pdf.cell(pdf.effective_width, 7, "Summary Totals", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(FONT, "", 10)
    third = pdf.effective_width / 3
    pdf.cell(third, 6, f"Total Projects: {len(projects)}")
    pdf.cell(third, 6, f"Billable Projects: {billable_count}")
    pdf.cell(third, 6, f"Non-Billable Projects: {len(projects) - billable_count}",
             new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.cell(third, 6, f"Total Hours: {total_hours:.2f}")
    pdf.cell(third, 6, f"Total Earnings: {total_earnings:.2f}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    logger.debug("Rendered projects summary PDF with %d rows", len(projects))
    return pdf.to_bytes()


def render_overview_summary_pdf(
    overview: SummaryOverview,
    filter_applied: Optional[dict],
    generated_at: str,
) -> bytes:
    """Render the overview metrics and a billable/non-billable hours bar."""
    pdf = SummaryPDF("Overview Summary Report", generated_at)
    pdf.add_page()
    pdf.period_line(filter_applied)

    metrics = [
        ("Total Projects", str(overview.total_projects)),
        ("Total Working Hours", f"{overview.total_working_hours:.2f} hrs"),
        ("Billable Projects", str(overview.billable_projects)),
        ("Billable Hours", f"{overview.billable_hours:.2f} hrs"),
        ("Total Earnings", f"{overview.billable_earnings:.2f}"),
        ("Non-Billable Projects", str(overview.non_billable_projects)),
        ("Non-Billable Hours", f"{overview.non_billable_hours:.2f} hrs"),
    ]

    box_width = (pdf.effective_width - 6) / 2
    box_height = 20
    top = pdf.get_y()
    for index, ((label, value), color) in enumerate(zip(metrics, METRIC_COLORS)):
        x = pdf.l_margin + (index % 2) * (box_width + 6)
        y = top + (index // 2) * (box_height + 6)
        pdf.set_fill_color(*color)
        pdf.rect(x, y, box_width, box_height, style="F")
        pdf.set_text_color(255, 255, 255)
        pdf.set_xy(x + 3, y + 3)
        pdf.set_font(FONT, "B", 16)
        pdf.cell(box_width - 6, 8, value)
        pdf.set_xy(x + 3, y + 12)
        pdf.set_font(FONT, "", 9)
        pdf.cell(box_width - 6, 5, label)

    rows = (len(metrics) + 1) // 2
    pdf.set_xy(pdf.l_margin, top + rows * (box_height + 6) + 6)
    pdf.set_text_color(0, 0, 0)
    pdf.set_font(FONT, "B", 13)
    pdf.cell(pdf.effective_width, 8, "Billable vs Non-Billable Hours", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    chart_width = pdf.effective_width
    total = overview.billable_hours + overview.non_billable_hours
    billable_width = chart_width * overview.billable_hours / total if total > 0 else 0
    y = pdf.get_y() + 2
    if billable_width > 0:
        pdf.set_fill_color(*BILLABLE_COLOR)
        pdf.rect(pdf.l_margin, y, billable_width, 10, style="F")
    if chart_width - billable_width > 0:
        pdf.set_fill_color(*NON_BILLABLE_COLOR)
        pdf.rect(pdf.l_margin + billable_width, y, chart_width - billable_width, 10, style="F")

    legend_y = y + 14
    pdf.set_font(FONT, "", 10)
    pdf.set_fill_color(*BILLABLE_COLOR)
    pdf.rect(pdf.l_margin, legend_y, 4, 4, style="F")
    pdf.set_xy(pdf.l_margin + 6, legend_y - 0.5)
    pdf.cell(60, 5, f"Billable: {overview.billable_hours:.2f} hrs")
    pdf.set_fill_color(*NON_BILLABLE_COLOR)
    pdf.rect(pdf.l_margin + 70, legend_y, 4, 4, style="F")
    pdf.set_xy(pdf.l_margin + 76, legend_y - 0.5)
    pdf.cell(60, 5, f"Non-Billable: {overview.non_billable_hours:.2f} hrs")

    return pdf.to_bytes()
