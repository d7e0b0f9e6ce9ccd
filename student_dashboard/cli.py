"""Command line entry point to import, inspect, and export student spreadsheets."""
import argparse
import sys
from dataclasses import replace
from pathlib import Path

from student_dashboard.core.config import load_settings
from student_dashboard.core.errors import DashboardError
from student_dashboard.core.logging import configure_logging
from student_dashboard.export.sinks import records_to_export_rows, select_export_records, write_excel
from student_dashboard.ingestion.loader import read_student_file
from student_dashboard.review.query import SORTABLE_FIELDS
from student_dashboard.review.workflow import DashboardSession


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Import and validate a student spreadsheet")
    parser.add_argument(
        "--input",
        type=Path,
        help="Spreadsheet (.xlsx) to import; omit to work with the saved students",
    )
    parser.add_argument(
        "--store",
        type=Path,
        help="JSON file holding saved students (defaults to STUDENT_DASHBOARD_STORE)",
    )
    parser.add_argument("--search", default="", help="Case-insensitive text to match")
    parser.add_argument("--branch", default="", help="Only show this branch")
    parser.add_argument("--year", default="", help="Only show this year")
    parser.add_argument("--sort", choices=SORTABLE_FIELDS, help="Field to sort by")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--export", type=Path, help="Write the filtered students to this .xlsx file")
    parser.add_argument(
        "--show-invalid",
        action="store_true",
        help="List quarantined students with their validation errors",
    )
    return parser


def _print_table(session: DashboardSession) -> None:
    for record in session.filtered():
        print(
            f"{record.id:>4}  {record.name:<24} {record.branch:<12} "
            f"Year {record.year}  {record.gpa:.2f}  {record.email}"
        )


def _print_invalid(session: DashboardSession) -> None:
    for record in session.store.invalid:
        print(f"{record.id:>4}  {record.name}")
        for field, message in (record.validation_errors or {}).items():
            print(f"        {field}: {message}")


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for running the dashboard core from the command line."""

    configure_logging()
    args = build_parser().parse_args(argv)
    settings = load_settings()
    if args.store:
        settings = replace(settings, store_path=args.store)

    session = DashboardSession.from_settings(settings)
    try:
        if args.input:
            rows = read_student_file(args.input)
            summary = session.store.insert_from_import(rows, rng=session.rng)
            session.persist()
            print(
                f"Imported {summary.total} students: "
                f"{summary.valid_count} valid, {summary.invalid_count} invalid"
            )

        session.set_query(search=args.search, branch=args.branch, year=args.year)
        if args.sort:
            session.set_query(sort_key=args.sort, direction="desc" if args.desc else "asc")

        _print_table(session)
        if args.show_invalid:
            _print_invalid(session)

        if args.export:
            records = select_export_records(session.store.valid, session.filtered(), set())
            write_excel(records_to_export_rows(records), args.export)
            print(f"Wrote {args.export}")
    except DashboardError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
