"""
Timeline Summary CLI - print head summaries for a compact timeline JSON file.
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from downtime import summarize_downtime
from enums import TimeUnit
from error_handler import ErrorHandler
from head_summary import HeadSummary, net_cycle_minutes, summarize_head
from kpi import oee_rating, production_kpis
from logging_config import get_logger, setup_logging
from time_format import format_duration
from timeline_model import HeadChannel, TimelineDocument, TimelineParseError, parse_timeline_document

logger = get_logger(__name__)


def head_report(head: HeadChannel, summary: HeadSummary, document: TimelineDocument | None = None) -> dict:
    """JSON-ready report for one head."""
    report = asdict(summary)
    report["overlap"]["pairs"] = [p for p in report["overlap"]["pairs"] if p["minutes"] > 0]
    if head.downtime_items:
        downtime = summarize_downtime(
            head,
            summary.net_head_minutes,
            budget_minutes=document.downtime_budget() if document else None,
            categories=document.downtime_categories() if document else None,
        )
        report["downtime"] = asdict(downtime)
        # Payloads are model objects; keep the projected positions only
        for segment in report["downtime"]["segments"]:
            segment["payload"] = segment["payload"].id if segment["payload"] is not None else None
    return report


def document_report(document: TimelineDocument) -> dict:
    """JSON-ready report for a whole payload: productions, their heads and KPIs."""
    productions = []
    all_summaries: list[HeadSummary] = []
    for production in document.productions:
        summaries = [summarize_head(head) for head in production.heads]
        all_summaries.extend(summaries)
        entry = {
            "id": production.id,
            "name": production.name,
            "heads": [head_report(h, s, document) for h, s in zip(production.heads, summaries)],
        }
        # KPIs only exist for saved production documents
        if production.heads and document.settings is not None:
            kpis = production_kpis(production, summaries, document.downtime_budget())
            entry["kpi"] = asdict(kpis)
            entry["kpi"]["oee_cycle_rating"] = oee_rating(kpis.oee_cycle_base)
        productions.append(entry)

    return {
        "mode": document.mode,
        "productions": productions,
        "heads": [head for entry in productions for head in entry["heads"]],
        "net_cycle_minutes": net_cycle_minutes(all_summaries),
    }


def _text_lines(summary: HeadSummary, unit: TimeUnit) -> list[str]:
    def fmt(mins: float) -> str:
        return format_duration(mins, unit)

    lines = [
        f"{summary.name}: head {fmt(summary.head_minutes)}, cutoff -{fmt(summary.cutoff_minutes)}, "
        f"net {fmt(summary.net_head_minutes)}",
    ]
    for row in summary.rows:
        lines.append(
            f"  {row['name']}: raw {fmt(row['raw'])} | net {fmt(row['net'])} | "
            f"actual {fmt(row['actual'])} | {row['status']}"
        )
    totals = summary.totals
    lines.append(
        f"  TOTAL: raw {fmt(totals.raw)} | net {fmt(totals.net)} | actual {fmt(totals.actual)}"
        f" | overlap {fmt(summary.overlap.total)}"
    )
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='Summarize Raw/Net/Actual durations of a timeline JSON file')
    parser.add_argument('path', help='Path to a compact timeline JSON file ("-" for stdin)')
    parser.add_argument('--format', '-f', choices=['json', 'text'], default='json',
                        help='Output format (default: json)')
    parser.add_argument('--unit', '-u', choices=[u.value for u in TimeUnit], default=TimeUnit.MINUTES.value,
                        help='Duration unit for text output')
    parser.add_argument('--log-file', default='', help='Also log to this file')

    args = parser.parse_args(argv)
    setup_logging(log_file=args.log_file)

    try:
        text = sys.stdin.read() if args.path == '-' else Path(args.path).read_text(encoding='utf-8')
        document = parse_timeline_document(text)
    except (OSError, TimelineParseError) as e:
        print(f"Error: {ErrorHandler.log_exception(e, f'Loading {args.path}')}", file=sys.stderr)
        return 1

    ErrorHandler.show_info(
        f"{len(document.productions)} productions, {len(document.heads)} heads ({document.mode} mode)",
        title=args.path,
    )

    if args.format == 'text':
        unit = TimeUnit(args.unit)
        summaries = [summarize_head(head) for head in document.heads]
        for summary in summaries:
            if summary.has_overflow:
                ErrorHandler.show_warning("sub-channels reach outside the head range", title=summary.name)
            print("\n".join(_text_lines(summary, unit)))
        print(f"Net cycle time: {format_duration(net_cycle_minutes(summaries), unit)}")
    else:
        print(json.dumps(document_report(document), indent=2, default=str))

    return 0


if __name__ == '__main__':
    sys.exit(main())
