#!/usr/bin/env python3
"""Render a stored section with its highlights and notes into display segments.

Reads a section payload JSON file and prints the segment layout the reader
renders: clean text, ordered segments with their formats, resolved highlight
and note, and the note-end index.

Usage:
    # Segment a section payload
    python3 scripts/overlay_section.py --input section.json

    # Merged highlight ranges plus annotation counts, written to a file
    python3 scripts/overlay_section.py --input section.json --merge --summary \
      --output out/section_merged.json

Payload shape:
    {"section_id": "...", "text": "...", "annotations": [<stored rows>]}
    or separate "highlights" / "notes" row lists.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from overlay.io_utils import SectionPayload, load_section_payload, save_json
from overlay.merge import merge_overlapping
from overlay.segments import overlay_text
from overlay.summary import summarize_annotations, summary_lines
from overlay.types import annotation_to_dict, layout_to_dict

log = logging.getLogger("overlay_section")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a section payload into highlight/note display segments.",
    )
    parser.add_argument(
        "--input", required=True, type=Path, help="Path to a section payload JSON file",
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Write JSON here instead of stdout",
    )
    parser.add_argument(
        "--merge", action="store_true",
        help="Emit merged highlight ranges instead of display segments.",
    )
    parser.add_argument(
        "--summary", action="store_true",
        help="Include highlight/note counts in the output.",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def build_report(
    section: SectionPayload, *, merge: bool, summary: bool,
) -> dict[str, object]:
    """Assemble the JSON report for one section."""
    report: dict[str, object] = {"section_id": section.section_id}
    if merge:
        merged = merge_overlapping(section.highlights)
        log.debug(
            "Merged %d highlights into %d ranges",
            len(section.highlights), len(merged),
        )
        report["merged_highlights"] = [annotation_to_dict(row) for row in merged]
    else:
        layout = overlay_text(section.text, section.highlights, section.notes)
        log.debug("Built %d segments", len(layout.segments))
        report.update(layout_to_dict(layout))
    if summary:
        stats = summarize_annotations(section.highlights, section.notes)
        report["summary"] = {
            "highlight_count": stats.highlight_count,
            "for_review_count": stats.for_review_count,
            "merged_range_count": stats.merged_range_count,
            "covered_chars": stats.covered_chars,
            "note_count": stats.note_count,
            "anchored_note_count": stats.anchored_note_count,
            "by_color": stats.by_color,
            "line": " | ".join(summary_lines(stats)),
        }
    return report


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if not args.input.exists():
        print(f"Error: input not found: {args.input}", file=sys.stderr)
        return 1

    try:
        section, warnings = load_section_payload(args.input)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for warning in warnings:
        log.warning("Skipped annotation row: %s", warning)
    log.info(
        "Loaded section %s: %d chars, %d highlights, %d notes",
        section.section_id, len(section.text),
        len(section.highlights), len(section.notes),
    )

    report = build_report(section, merge=args.merge, summary=args.summary)

    if args.output is not None:
        save_json(report, args.output)
        log.info("Wrote %s", args.output)
    else:
        sys.stdout.buffer.write(
            orjson.dumps(report, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS),
        )
        sys.stdout.buffer.write(b"\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
