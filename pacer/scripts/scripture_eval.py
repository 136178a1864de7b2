#!/usr/bin/env python3
"""
Offline evaluation of the reference engine against labelled transcripts.

Reads JSON Lines records:

    {"index": 12, "text": "turn with me to Romans 8 28", "expected_references": ["Romans 8:28"]}

and writes one result per record:

    {"index": 12, "text": "...", "expected_references": [...],
     "parsed_references": ["Romans 8:28"], "pass": true}

Expected and parsed references are expanded to single verses before
comparison. A record passes when every expected verse was parsed; extra
parsed verses are allowed. A record that expects nothing but parses
something is marked "false_positive" and left out of the score.

Usage:
    python -m pacer.scripts.scripture_eval --input data/chunks.jsonl
    python -m pacer.scripts.scripture_eval --input data/chunks.jsonl --parse-out parsed.jsonl
    python -m pacer.scripts.scripture_eval --input data/chunks.jsonl --carry-context
"""

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Iterable, Optional

from ..core.config import configure_logging
from ..references.books import BookRecognizer
from ..references.context import ParseContext
from ..references.corpus import VerseCorpus, load_corpus
from ..references.engine import ReferenceEngine
from ..utils.errors import PacerError

logger = logging.getLogger(__name__)

CROSS_CHAPTER_RE = re.compile(r"^(.+?)\s+(\d+):(\d+)-(\d+):(\d+)$")
VERSE_RANGE_RE = re.compile(r"^(.+?)\s+(\d+):(\d+)-(\d+)$")


def normalize_reference(ref: str) -> str:
    """Comparison form: lowercase, tight ":" and "-", no trailing punctuation."""
    ref = re.sub(r"[–—]", "-", str(ref or ""))
    ref = re.sub(r"\s+", " ", ref)
    ref = re.sub(r"\s*:\s*", ":", ref)
    ref = re.sub(r"\s*-\s*", "-", ref)
    ref = re.sub(r"[)\],.;:]+$", "", ref.strip())
    return ref.strip().lower()


def expand_reference(ref: str) -> list[str]:
    """
    Expand a reference to single verses.

    "Isaiah 45:1-3" -> ["isaiah 45:1", "isaiah 45:2", "isaiah 45:3"]

    Cross-chapter ranges expand to the start verse, verse 1 of each later
    chapter, and the end verse, which is enough to match chapter-level
    expectations without listing whole chapters.
    """
    normalized = normalize_reference(ref)

    match = CROSS_CHAPTER_RE.match(normalized)
    if match:
        book = match.group(1)
        start_chapter, start_verse, end_chapter, end_verse = (int(g) for g in match.groups()[1:])
        if end_chapter >= start_chapter and min(start_chapter, start_verse, end_verse) > 0:
            expanded = [f"{book} {start_chapter}:{start_verse}"]
            expanded.extend(f"{book} {c}:1" for c in range(start_chapter + 1, end_chapter + 1))
            expanded.append(f"{book} {end_chapter}:{end_verse}")
            return expanded

    match = VERSE_RANGE_RE.match(normalized)
    if match:
        book, chapter = match.group(1), match.group(2)
        start, end = int(match.group(3)), int(match.group(4))
        return [f"{book} {chapter}:{v}" for v in range(start, end + 1)]

    return [normalized] if normalized else []


def expand_reference_set(refs: Iterable[str]) -> set[str]:
    expanded = set()
    for ref in refs:
        expanded.update(expand_reference(ref))
    return expanded


def score_record(expected: list[str], parsed: list[str], check_false_positives: bool = True):
    """
    Compare expected and parsed references for one record.

    Returns:
        True, False, or "false_positive"
    """
    expected_verses = expand_reference_set(expected)
    parsed_verses = expand_reference_set(parsed)

    if not expected_verses:
        if parsed_verses and check_false_positives:
            return "false_positive"
        return not parsed_verses

    return expected_verses.issubset(parsed_verses)


def read_jsonl(path: Path) -> list[dict]:
    records = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(f"Skipping invalid JSON on line {line_no}: {e}")
    return records


def write_jsonl(path: Path, records: list[dict]):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")


def evaluate(
    records: list[dict],
    engine: ReferenceEngine,
    check_false_positives: bool = True,
    carry_context: bool = False,
    aggressive_speech: bool = True,
) -> tuple[list[dict], list[dict], dict]:
    """
    Run the engine over labelled records.

    Returns:
        (results, failures, summary) where summary has passed, total,
        false_positives and score (percent, two decimals)
    """
    books = BookRecognizer()
    context = ParseContext()
    results = []
    failures = []
    passed = 0
    false_positives = 0

    for record in records:
        text = record.get("text") or ""
        expected = record.get("expected_references") or []

        if not carry_context:
            context.reset()
        passages = engine.resolve(text, context, aggressive_speech=aggressive_speech)
        parsed = [p.display_ref for p in passages]

        outcome = score_record(expected, parsed, check_false_positives)
        result = {
            "index": record.get("index"),
            "text": text,
            "expected_references": expected,
            "parsed_references": parsed,
            "pass": outcome,
        }
        results.append(result)

        if outcome == "false_positive":
            false_positives += 1
            failures.append(result)
        elif outcome:
            passed += 1
        elif books.contains_book(text):
            # Misses on book-less chatter are not actionable
            failures.append(result)

    failures.sort(key=lambda r: r["index"] if isinstance(r["index"], int) else 0)

    total = len(records) - false_positives if check_false_positives else len(records)
    total = total or 1
    summary = {
        "passed": passed,
        "total": total,
        "false_positives": false_positives,
        "score": round(passed / total * 100, 2),
    }
    return results, failures, summary


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Evaluate scripture reference detection against labelled transcripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m pacer.scripts.scripture_eval --input chunks.jsonl
  python -m pacer.scripts.scripture_eval --input chunks.jsonl --parse-out parsed.jsonl
  python -m pacer.scripts.scripture_eval --input chunks.jsonl --start 100 --limit 50
  python -m pacer.scripts.scripture_eval --input chunks.jsonl --verses data/verses-kjv.json
        """
    )
    parser.add_argument("--input", required=True, help="JSON Lines file of labelled records")
    parser.add_argument("--parse-out", default=None, help="Write every result to this file")
    parser.add_argument(
        "--failures-out",
        default=None,
        help="Failures file (default: processed_<input>.failed.jsonl next to the input)",
    )
    parser.add_argument("--verses", default=None, help="Verse corpus JSON file")
    parser.add_argument("--start", type=int, default=0, help="Skip the first N records")
    parser.add_argument("--limit", type=int, default=None, help="Evaluate at most N records")
    parser.add_argument(
        "--no-check-false-positives",
        action="store_true",
        help="Count records that expect nothing as plain pass/fail",
    )
    parser.add_argument(
        "--carry-context",
        action="store_true",
        help="Share one parse context across records, like a live session",
    )
    parser.add_argument(
        "--no-aggressive-speech",
        action="store_true",
        help='Do not read "Book C V" as "Book C:V"',
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: PACER_LOG_LEVEL)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input not found: {input_path}")
        return 1

    try:
        corpus = VerseCorpus.from_file(args.verses) if args.verses else load_corpus()
        engine = ReferenceEngine(corpus=corpus)
    except (PacerError, FileNotFoundError) as e:
        logger.error(f"Engine setup failed: {e}")
        return 1

    records = read_jsonl(input_path)[args.start:]
    if args.limit is not None:
        records = records[:args.limit]

    check_false_positives = not args.no_check_false_positives
    results, failures, summary = evaluate(
        records,
        engine,
        check_false_positives=check_false_positives,
        carry_context=args.carry_context,
        aggressive_speech=not args.no_aggressive_speech,
    )

    if args.parse_out:
        write_jsonl(Path(args.parse_out), results)
        print(f"Parse results written to {args.parse_out}")

    failures_out = Path(args.failures_out or input_path.with_name(f"processed_{input_path.stem}.failed.jsonl"))
    write_jsonl(failures_out, failures)

    print(f"Pass score: {summary['passed']}/{summary['total']} ({summary['score']}%)")
    if check_false_positives and summary["false_positives"]:
        print(f"{summary['false_positives']} false positive(s) excluded from the score")
    print(f"Failures written to {failures_out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
