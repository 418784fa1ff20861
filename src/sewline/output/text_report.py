"""Plain-text output for production run review.

This module creates text reports showing:
- Run target and slot breakdown
- Hourly progress against the cumulative target
- Per-operation planned vs. sewed figures
- Active alerts
"""

from pathlib import Path
from typing import Optional, Union

from sewline.analysis.alerts import AlertEngine
from sewline.analysis.performance import hourly_progress, operator_performance
from sewline.analysis.reporting import summarize_run
from sewline.domain.models import ProductionRun
from sewline.validation.validator import PlanValidator


class TextReportGenerator:
    """Generates text reports for a production run.

    Creates human-readable text files showing:
    - Target and status overview
    - Hourly progress histogram
    - Operator performance table
    - Alerts and validation findings
    """

    def __init__(
        self,
        alert_engine: Optional[AlertEngine] = None,
        validator: Optional[PlanValidator] = None,
    ):
        self.alert_engine = alert_engine or AlertEngine()
        self.validator = validator or PlanValidator()

    def generate(self, run: ProductionRun, output_path: Union[str, Path]) -> str:
        """Generate the text report and save to file.

        Args:
            run: The production run to describe.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(run)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(self, run: ProductionRun) -> str:
        """Generate the text report and return as string."""
        return self._generate_content(run)

    def _generate_content(self, run: ProductionRun) -> str:
        """Generate the full report content."""
        lines = []
        params = run.params
        summary = summarize_run(run)

        # Header
        lines.append("=" * 80)
        when = params.run_date.isoformat() if params.run_date else "undated"
        lines.append(f"PRODUCTION REPORT - LINE {params.line_no or '?'} - {when}")
        lines.append("=" * 80)
        lines.append("")

        lines.append(f"Style: {params.style or '-'}")
        lines.append(f"Operators: {params.operator_count:g}")
        lines.append(f"Working Hours: {params.working_hours:g}")
        lines.append(f"SAM: {params.sam_minutes:g} min")
        lines.append(f"Efficiency: {params.efficiency * 100:.0f}%")
        lines.append(f"Target: {run.target:.2f} pcs ({run.target_per_hour:.2f} pcs/h)")
        lines.append(
            f"Sewed: {summary.total_sewed:g} pcs "
            f"({summary.achievement_pct:.1f}% of target, {summary.variance_pct:+.1f}%)"
        )
        lines.append(f"Status: {summary.status.value}")
        lines.append("")

        # Hourly progress
        lines.append("-" * 80)
        lines.append("HOURLY PROGRESS")
        lines.append("-" * 80)
        lines.append(
            f"{'Slot':<6} {'Hours':>6} {'Target':>9} {'Cum Tgt':>9} "
            f"{'Sewed':>8} {'Cum Sewed':>10} {'Cum Var':>9}"
        )
        lines.append("-" * 80)

        progress = hourly_progress(run)
        for slot in progress:
            lines.append(
                f"{slot.label:<6} {slot.hours:>6.2f} {slot.slot_target:>9.2f} "
                f"{slot.cumulative_target:>9.2f} {slot.sewed_qty:>8g} "
                f"{slot.cumulative_sewed:>10g} {slot.cumulative_variance:>+9.2f}"
            )
        if not progress:
            lines.append("No slots")
        lines.append("")

        top = max([p.sewed_qty for p in progress] + [0])
        if top > 0:
            lines.append("Sewed per slot:")
            for slot in progress:
                width = int(round(40 * slot.sewed_qty / top))
                bar = "#" * width if width else "."
                lines.append(f"{slot.label:>6}: {bar} ({slot.sewed_qty:g})")
            lines.append("")

        # Operator performance
        lines.append("-" * 80)
        lines.append("OPERATOR PERFORMANCE")
        lines.append("-" * 80)
        lines.append(
            f"{'#':>3} {'Name':<18} {'Operation':<22} {'Cap/h':>7} "
            f"{'Planned':>8} {'Sewed':>7} {'Var':>7} {'Eff':>6}"
        )
        lines.append("-" * 80)

        rows = operator_performance(run)
        for row in rows:
            lines.append(
                f"{row.operator_no:>3} {row.operator_name[:18]:<18} "
                f"{row.operation_name[:22]:<22} {row.capacity_per_hour:>7.2f} "
                f"{row.planned_qty:>8g} {row.sewed_qty:>7g} {row.variance:>+7g} "
                f"{row.efficiency * 100:>5.0f}%"
            )
        if not rows:
            lines.append("No operations recorded")
        lines.append("")

        # Alerts
        lines.append("-" * 80)
        lines.append("ALERTS")
        lines.append("-" * 80)

        alerts = self.alert_engine.evaluate(rows)
        for alert in alerts:
            lines.append(f"[{alert.severity.value:<6}] {alert.type.value:<17} {alert.message}")
        if not alerts:
            lines.append("No alerts")
        lines.append("")

        # Validation
        result = self.validator.validate(run)
        if result.errors or result.warnings:
            lines.append("-" * 80)
            lines.append("VALIDATION")
            lines.append("-" * 80)
            for error in result.errors:
                lines.append(f"ERROR: {error}")
            for warning in result.warnings:
                lines.append(f"WARNING: {warning}")
            lines.append("")

        lines.append("=" * 80)
        lines.append("END OF REPORT")
        lines.append("=" * 80)

        return "\n".join(lines)
