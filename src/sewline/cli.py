"""Command-line interface for the sewline production tracking tool."""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from sewline.analysis.alerts import AlertEngine
from sewline.analysis.reporting import fleet_totals, summarize_fleet, summarize_run
from sewline.config import Settings, configure_logging, load_settings
from sewline.domain.models import HourlyEntry, OperatorOperation, ProductionRun, RunParameters
from sewline.output.pdf_generator import PDFGenerator
from sewline.output.text_report import TextReportGenerator
from sewline.planning.planner import LinePlanner
from sewline.validation.validator import PlanValidator

logger = logging.getLogger(__name__)


def create_sample_run(
    planner: LinePlanner,
    operator_count: int = 8,
    run_date: Optional[date] = None,
) -> ProductionRun:
    """Create a sample run for demonstration.

    Operators sew at different paces so the demo shows every alert kind.
    The last operator runs two operations.

    Args:
        planner: Planner used to derive targets and capacities.
        operator_count: Number of operators on the line.
        run_date: Production date. If None, uses today.
    """
    params = RunParameters(
        line_no="7",
        run_date=run_date or date.today(),
        style="POLO-2041",
        operator_count=operator_count,
        working_hours=8.85,
        sam_minutes=18.5,
        efficiency=0.7,
    )

    names = [
        "Amara", "Bilal", "Chen", "Dilani", "Emeka", "Farah", "Gopal", "Hana",
        "Ines", "Jomo", "Kavya", "Luis", "Mei", "Nuwan", "Oya", "Priya",
    ]
    steps = [
        "Collar attach", "Sleeve join", "Side seam", "Placket", "Hemming",
        "Label attach", "Cuff attach", "Bartack",
    ]
    # Share of the stitched quantity each operator actually sews
    paces = [1.0, 0.95, 0.85, 1.1, 0.6, 0.4, 0.9, 0.0]
    # Typical time-study seconds per step; label attach is quick
    bases = [50, 55, 60, 65, 52, 8, 58, 62]

    operations = []
    for i in range(operator_count):
        base = bases[i % len(bases)]
        operations.append(
            OperatorOperation(
                operator_no=i + 1,
                operation_name=steps[i % len(steps)],
                operator_name=names[i % len(names)],
                samples=(base, base + 2, base - 1, base + 3, base),
            )
        )
    last = operator_count
    operations.append(
        OperatorOperation(
            operator_no=last,
            operation_name="Button hole",
            operator_name=names[(last - 1) % len(names)],
            samples=(40, 42, 41),
        )
    )

    plan = planner.plan(params)
    entries = []
    for op in operations:
        pace = paces[(op.operator_no - 1) % len(paces)]
        for slot in plan.slots[:6]:
            stitched = round(60 * slot.hours)
            entries.append(
                HourlyEntry(
                    operator_no=op.operator_no,
                    operation_name=op.operation_name,
                    slot_label=slot.label,
                    quantity=round(stitched * pace),
                    stitched_qty=stitched,
                )
            )

    return planner.build_run(params, operations, entries, plan.slots)


def _print_validation(run: ProductionRun) -> bool:
    result = PlanValidator().validate(run)
    if result.is_valid:
        print("\n  Validation: PASSED")
    else:
        print(f"\n  Validation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")
    for warning in result.warnings:
        print(f"    ! {warning}")
    return result.is_valid


def _print_run(run: ProductionRun, settings: Settings) -> None:
    summary = summarize_run(run)
    print(f"\nLine {summary.line_no or '?'} ({summary.style or 'no style'})"
          f" on {summary.run_date or 'undated'}")
    print(f"  Target: {summary.total_target:.2f} pcs ({run.target_per_hour:.2f}/h)")
    print(f"  Sewed: {summary.total_sewed:g} pcs ({summary.achievement_pct:.1f}%)")
    print(f"  Variance: {summary.variance:+.2f} pcs ({summary.variance_pct:+.1f}%)")
    print(f"  Overall efficiency: {summary.overall_efficiency * 100:.1f}%")
    print(f"  Status: {summary.status.value}")

    alerts = AlertEngine(settings.alert_thresholds()).evaluate_run(run)
    print(f"\n  Alerts: {len(alerts)}")
    for alert in alerts:
        print(f"    [{alert.severity.value}] {alert.message}")


def _write_outputs(
    run: ProductionRun,
    settings: Settings,
    pdf_path: Optional[str],
    text_path: Optional[str],
) -> None:
    engine = AlertEngine(settings.alert_thresholds())
    if pdf_path:
        print(f"\nGenerating PDF: {pdf_path}")
        PDFGenerator(alert_engine=engine).generate(run, pdf_path)
        print("  PDF created successfully!")
    if text_path:
        print(f"\nWriting text report: {text_path}")
        TextReportGenerator(alert_engine=engine).generate(run, text_path)


def _load_json(path: str):
    try:
        return json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read {path}: {e}")


def run_plan(
    settings: Settings,
    operators: float,
    hours: float,
    sam: float,
    efficiency: Optional[float] = None,
) -> None:
    """Print the target and slot table for run parameters."""
    planner = LinePlanner(settings.slot_config(), settings.default_efficiency)
    params = RunParameters(
        operator_count=operators,
        working_hours=hours,
        sam_minutes=sam,
        efficiency=efficiency if efficiency else settings.default_efficiency,
    )
    plan = planner.plan(params)

    print(f"Target: {plan.target.pieces_target:.2f} pcs")
    print(f"Per hour: {plan.target.pieces_per_hour:.2f} pcs/h")
    if not plan.is_ready:
        print("  (operators, hours, SAM and efficiency must all be positive)")

    print(f"\n{'Slot':<6} {'Hours':>6} {'Target':>9} {'Cumulative':>11}")
    for slot, target in zip(plan.slots, plan.slot_targets):
        print(f"{slot.label:<6} {slot.hours:>6.2f} {target.slot_target:>9.2f} "
              f"{target.cumulative_target:>11.2f}")


def run_report(
    settings: Settings,
    path: str,
    pdf_path: Optional[str] = None,
    text_path: Optional[str] = None,
) -> bool:
    """Load a run record, print its summary and write optional reports."""
    record = _load_json(path)
    if not isinstance(record, dict):
        raise ValueError(f"{path} must hold a single run record")

    planner = LinePlanner(settings.slot_config(), settings.default_efficiency)
    run = planner.load_run(record)

    _print_run(run, settings)
    is_valid = _print_validation(run)
    _write_outputs(run, settings, pdf_path, text_path)
    return is_valid


def run_fleet(settings: Settings, path: str, run_date: Optional[date] = None) -> None:
    """Print the per-line roll-up of a list of run records."""
    records = _load_json(path)
    if not isinstance(records, list):
        raise ValueError(f"{path} must hold a list of run records")

    planner = LinePlanner(settings.slot_config(), settings.default_efficiency)
    runs = [planner.load_run(r) for r in records]
    fleet = summarize_fleet(runs, run_date)
    totals = fleet_totals(fleet)

    print(f"Lines: {totals['total_lines']}")
    print(f"  Target: {totals['total_target']:.2f} pcs")
    print(f"  Sewed: {totals['total_sewed']:g} pcs ({totals['achievement_pct']:.1f}%)")
    print(f"  Efficiency: {totals['efficiency'] * 100:.1f}%")
    for status, count in totals["status_counts"].items():
        print(f"  {status}: {count}")
    if not fleet.empty:
        print()
        print(fleet.to_string(index=False, float_format=lambda v: f"{v:.2f}"))


def run_demo(
    settings: Settings,
    operator_count: int = 8,
    output_path: Optional[str] = None,
) -> None:
    """Run a demo production line."""
    print(f"Building demo run for {operator_count} operators...")
    planner = LinePlanner(settings.slot_config(), settings.default_efficiency)
    run = create_sample_run(planner, operator_count)

    _print_run(run, settings)
    _print_validation(run)
    _write_outputs(run, settings, output_path, None)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="sewline - Sewing Line Production Tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s plan --operators 25 --hours 8.85 --sam 18.5
  %(prog)s report run.json                 Summarize a run with alerts
  %(prog)s report run.json -o run.pdf      Also generate a PDF report
  %(prog)s fleet runs.json --date 2024-03-04
  %(prog)s demo --output demo.pdf          Run demo line with PDF output
        """,
    )
    parser.add_argument(
        "--env-file",
        type=str,
        help="Path to .env file with SEWLINE_* settings",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Plan command
    plan_parser = subparsers.add_parser("plan", help="Derive target and hourly slot targets")
    plan_parser.add_argument("--operators", "-n", type=float, required=True,
                             help="Number of operators on the line")
    plan_parser.add_argument("--hours", "-H", type=float, required=True,
                             help="Working hours for the day")
    plan_parser.add_argument("--sam", "-s", type=float, required=True,
                             help="Standard allowed minutes per piece")
    plan_parser.add_argument("--efficiency", "-e", type=float,
                             help="Efficiency in (0, 1] (default: SEWLINE_DEFAULT_EFFICIENCY)")

    # Report command
    report_parser = subparsers.add_parser("report", help="Summarize a run record")
    report_parser.add_argument("run", type=str, help="JSON file with the run record")
    report_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")
    report_parser.add_argument("--text", "-t", type=str, help="Output text report path")

    # Fleet command
    fleet_parser = subparsers.add_parser("fleet", help="Roll up runs per line")
    fleet_parser.add_argument("runs", type=str, help="JSON file with a list of run records")
    fleet_parser.add_argument("--date", "-d", type=_parse_date,
                              help="Only include runs on this date (YYYY-MM-DD)")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run a demo production line")
    demo_parser.add_argument(
        "--count", "-c",
        type=int,
        default=8,
        help="Number of operators to generate (default: 8)",
    )
    demo_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )

    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.env_file)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)

    try:
        if args.command == "plan":
            run_plan(settings, args.operators, args.hours, args.sam, args.efficiency)
            return 0
        elif args.command == "report":
            is_valid = run_report(settings, args.run, args.output, args.text)
            return 0 if is_valid else 1
        elif args.command == "fleet":
            run_fleet(settings, args.runs, args.date)
            return 0
        elif args.command == "demo":
            run_demo(settings, args.count, args.output)
            return 0
        else:
            parser.print_help()
            return 1
    except ValueError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
