"""PDF generation for production run reports.

This module creates printable PDF reports showing:
- Per-operation planned vs. sewed bars with efficiency
- Hourly progress against the cumulative target curve
- Active alerts by severity
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from sewline.analysis.alerts import AlertEngine
from sewline.analysis.performance import (
    OperatorPerformance,
    SlotProgress,
    hourly_progress,
    operator_performance,
)
from sewline.analysis.reporting import summarize_run
from sewline.domain.models import LineStatus, ProductionRun, Severity

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    Severity.HIGH: (0.85, 0.3, 0.3),  # Red
    Severity.MEDIUM: (0.95, 0.7, 0.3),  # Orange
    Severity.LOW: (0.95, 0.9, 0.5),  # Yellow
    "planned": (0.8, 0.8, 0.8),  # Light gray
    "sewed": (0.4, 0.6, 0.8),  # Blue
    "target": (0.2, 0.2, 0.2),  # Dark gray
    "ahead": (0.4, 0.7, 0.4),  # Green
}

STATUS_COLORS = {
    LineStatus.NO_TARGET: (0.6, 0.6, 0.6),
    LineStatus.CRITICAL: COLORS[Severity.HIGH],
    LineStatus.BEHIND: COLORS[Severity.MEDIUM],
    LineStatus.ON_TRACK: COLORS["sewed"],
    LineStatus.AHEAD: COLORS["ahead"],
    LineStatus.EXCEEDING: COLORS["ahead"],
}


def _require_canvas():
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas, landscape(letter)


class PDFGenerator:
    """Generates printable PDF run reports.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(run, "line7.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        alert_engine: Optional[AlertEngine] = None,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.alert_engine = alert_engine or AlertEngine()

    def generate(
        self,
        run: ProductionRun,
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate PDF report and save to file.

        Args:
            run: The production run to render.
            output_path: Path to save the PDF.
            include_summary: Whether to include the hourly summary page.
        """
        canvas, pagesize = _require_canvas()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw(c, run, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        run: ProductionRun,
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer.

        Args:
            run: The production run to render.
            include_summary: Whether to include the hourly summary page.

        Returns:
            BytesIO buffer containing PDF data.
        """
        canvas, pagesize = _require_canvas()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw(c, run, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(self, c, run: ProductionRun, include_summary: bool) -> None:
        self._draw_operation_pages(c, run)
        if include_summary:
            self._draw_summary_page(c, run)

    def _draw_operation_pages(self, c, run: ProductionRun) -> None:
        """Draw pages with one planned vs. sewed bar per operation."""
        rows = operator_performance(run)

        row_height = 24
        header_height = 60
        footer_height = 40
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / row_height))

        bar_left = self.margin + 200  # Space for operator and operation names
        bar_right = self.page_width - self.margin - 120  # Space for figures
        bar_width = bar_right - bar_left
        scale = max([max(r.planned_qty, r.sewed_qty) for r in rows] + [1])

        total_pages = max(1, (len(rows) + rows_per_page - 1) // rows_per_page)
        for page_num in range(total_pages):
            page_rows = rows[page_num * rows_per_page : (page_num + 1) * rows_per_page]

            self._draw_header(c, run, header_height)

            y = self.page_height - self.margin - header_height - 10
            if not page_rows:
                c.setFont("Helvetica-Oblique", 10)
                c.drawString(self.margin, y - row_height, "No operations recorded")

            for row in page_rows:
                y -= row_height
                self._draw_operation_row(
                    c, row, bar_left, bar_width, scale, y, row_height - 6
                )

            self._draw_legend(c, self.margin, self.margin + 10)

            c.setFont("Helvetica", 9)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_num + 1} of {total_pages}",
            )

            c.showPage()

    def _draw_header(self, c, run: ProductionRun, header_height: float) -> None:
        """Draw page header with line, date and target."""
        params = run.params
        when = params.run_date.strftime("%A, %B %d, %Y") if params.run_date else "Undated"

        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Line {params.line_no or '?'} - {when}",
        )

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Style: {params.style or '-'}   Operators: {params.operator_count:g}   "
            f"Target: {run.target:.2f} pcs ({run.target_per_hour:.2f}/h)",
        )

    def _draw_operation_row(
        self,
        c,
        row: OperatorPerformance,
        x: float,
        width: float,
        scale: float,
        y: float,
        height: float,
    ) -> None:
        """Draw a single operation's planned vs. sewed bars."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 9)
        c.drawString(self.margin, y + height / 2, f"{row.operator_no}. {row.operator_name}"[:32])
        c.setFont("Helvetica", 7)
        c.drawString(self.margin, y + height / 2 - 9, row.operation_name[:40])

        # Planned bar behind, sewed bar in front
        c.setFillColorRGB(*COLORS["planned"])
        c.rect(x, y, width * row.planned_qty / scale, height, fill=1, stroke=0)

        severity = self.alert_engine.policy.variance_severity(row.variance, row.planned_qty)
        color = COLORS[severity] if severity else COLORS["sewed"]
        c.setFillColorRGB(*color)
        c.rect(x, y + height / 4, width * row.sewed_qty / scale, height / 2, fill=1, stroke=0)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 8)
        c.drawString(
            x + width + 8,
            y + height / 2 - 3,
            f"{row.sewed_qty:g}/{row.planned_qty:g}  eff {row.efficiency * 100:.0f}%",
        )

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for colors."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            ("planned", "Planned"),
            ("sewed", "Sewed"),
            (Severity.MEDIUM, "Behind >10%"),
            (Severity.HIGH, "Behind >30%"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45

        for key, label in items:
            c.setFillColorRGB(*COLORS[key])
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 80

    def _draw_summary_page(self, c, run: ProductionRun) -> None:
        """Draw summary page with hourly progress and alerts."""
        summary = summarize_run(run)

        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Run Summary - Line {run.params.line_no or '?'}",
        )

        y = self.page_height - self.margin - 60

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        c.setFont("Helvetica", 10)
        stats = [
            f"Target: {summary.total_target:.2f} pcs",
            f"Sewed: {summary.total_sewed:g} pcs ({summary.achievement_pct:.1f}%)",
            f"Variance: {summary.variance:+.2f} pcs ({summary.variance_pct:+.1f}%)",
            f"Operators: {summary.operators_count}   Operations: {summary.operations_count}",
        ]
        for stat in stats:
            c.drawString(self.margin + 20, y, stat)
            y -= 15

        c.setFillColorRGB(*STATUS_COLORS[summary.status])
        c.rect(self.margin + 20, y - 4, 90, 14, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 9)
        c.drawCentredString(self.margin + 65, y, summary.status.value)
        y -= 20

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Hourly Progress")
        y -= 10

        self._draw_progress_chart(c, hourly_progress(run), self.margin + 20, y - 150, 400, 140)

        # Alerts column to the right of the chart
        ax = self.margin + 460
        ay = self.page_height - self.margin - 60
        c.setFont("Helvetica-Bold", 12)
        c.drawString(ax, ay, "Alerts")
        ay -= 18

        alerts = self.alert_engine.evaluate_run(run)
        c.setFont("Helvetica", 7)
        if not alerts:
            c.drawString(ax, ay, "No alerts")
        for alert in alerts:
            if ay < self.margin:
                c.drawString(ax, ay, "...")
                break
            c.setFillColorRGB(*COLORS[alert.severity])
            c.rect(ax, ay - 2, 8, 8, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(ax + 12, ay, alert.message[:70])
            ay -= 12

        c.showPage()

    def _draw_progress_chart(
        self,
        c,
        progress: list[SlotProgress],
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw cumulative sewed bars against the cumulative target line."""
        if not progress:
            return

        top = max(
            [p.cumulative_target for p in progress]
            + [p.cumulative_sewed for p in progress]
        ) or 1
        bar_width = width / len(progress)

        # Draw axes
        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(1)
        c.line(x, y, x, y + height)  # Y axis
        c.line(x, y, x + width, y)  # X axis

        c.setFillColorRGB(*COLORS["sewed"])
        for i, slot in enumerate(progress):
            bar_height = (slot.cumulative_sewed / top) * height
            c.rect(x + i * bar_width, y, bar_width - 2, bar_height, fill=1, stroke=0)

        c.setStrokeColorRGB(*COLORS["target"])
        c.setLineWidth(1.5)
        prev = (x, y)
        for i, slot in enumerate(progress):
            point = (x + (i + 1) * bar_width, y + (slot.cumulative_target / top) * height)
            c.line(prev[0], prev[1], point[0], point[1])
            prev = point

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 7)
        c.drawRightString(x - 5, y, "0")
        c.drawRightString(x - 5, y + height - 5, f"{top:g}")

        for i, slot in enumerate(progress):
            c.drawCentredString(x + (i + 0.5) * bar_width, y - 12, slot.label)
