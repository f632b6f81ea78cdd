"""
Command-line interface: parse (or fetch) a WebReg list view and export ICS.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import pytz

from . import __version__
from .export import TZ_PACIFIC, export_ics
from .models import Course
from .webreg_html import parse_webreg_html


def _term_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: '{text}'. Expected YYYY-MM-DD."
        )


def _time_zone(name: str) -> str:
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise argparse.ArgumentTypeError(f"Unknown time zone: '{name}'.")
    return name


def _print_courses(courses: list[Course]) -> None:
    print("Course       | Units | Title                          | Instructor")
    print("-" * 80)
    for c in courses:
        print(f"{c.code:<12} | {c.units:<5} | {c.title[:30]:<30} | {c.instructor}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Export a UCSD WebReg class list to ICS.\n"
            "Weekly meetings become repeating events; finals and midterms become single events."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-o",
        "--output",
        default="courses",
        help="Output path (without extension). Default: courses",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--webreg-html",
        metavar="HTML_PATH",
        help="WebReg list view saved from the browser (Save As → Complete Webpage).",
    )
    mode.add_argument(
        "--fetch",
        action="store_true",
        help="Open Chrome at WebReg: you log in and open the list view, then the page is read.",
    )
    parser.add_argument(
        "--term-start",
        metavar="YYYY-MM-DD",
        type=_term_date,
        required=True,
        help="First day of the term, e.g. 2024-01-08.",
    )
    parser.add_argument(
        "--term-end",
        metavar="YYYY-MM-DD",
        type=_term_date,
        required=True,
        help="Last day of the term (repeating events stop here), e.g. 2024-03-16.",
    )
    parser.add_argument(
        "--timezone",
        default=TZ_PACIFIC,
        type=_time_zone,
        help=f"Time zone for all events. Default: {TZ_PACIFIC}",
    )
    parser.add_argument(
        "--single-day-fallback",
        action="store_true",
        help="Sessions with no parsed weekdays get a single event instead of a weekly rule with no days.",
    )
    parser.add_argument(
        "--list-courses",
        action="store_true",
        help="List the parsed courses then exit.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.term_start > args.term_end:
        print("Error: --term-start must not be after --term-end.", file=sys.stderr)
        return 1

    if args.fetch:
        from .webreg_fetch import fetch_webreg_html

        try:
            html = fetch_webreg_html()
        except Exception as e:
            print(f"Error fetching WebReg page: {e}", file=sys.stderr)
            return 1
    else:
        p = Path(args.webreg_html)
        if not p.exists():
            print(f"Error: --webreg-html not found: {p}", file=sys.stderr)
            return 1
        html = p.read_text(encoding="utf-8", errors="replace")

    try:
        courses = parse_webreg_html(
            html_content=html,
            start_date=args.term_start,
            end_date=args.term_end,
        )
    except ValueError as e:
        print(f"Error parsing WebReg HTML: {e}", file=sys.stderr)
        return 1

    if args.list_courses:
        _print_courses(courses)
        return 0

    out_path = Path(args.output).with_suffix(".ics")
    export_ics(
        courses,
        out_path,
        tz=args.timezone,
        single_day_fallback=args.single_day_fallback,
    )
    print(f"Exported {len(courses)} course(s) to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
