"""Analyze an interview transcript file from the command line.

Usage::

    python scripts/analyze_transcript.py interview.txt --output analysis.json
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.analysis.pipeline import analyze_transcript
from src.llm.client import get_llm_client
from src.pipeline_config import AnalysisConfig, OversizedLinePolicy


def build_config(args: argparse.Namespace) -> AnalysisConfig:
    config = AnalysisConfig.from_settings()
    overrides: dict = {}
    if args.oversized_lines:
        overrides["oversized_line_policy"] = OversizedLinePolicy(args.oversized_lines)
    if args.no_speakers:
        overrides["attribute_speakers"] = False
    if args.no_rubric:
        overrides["apply_rubric"] = False
    if args.delay is not None:
        overrides["inter_call_delay_seconds"] = args.delay
    return dataclasses.replace(config, **overrides)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze an interview transcript with Claude.")
    parser.add_argument("transcript", type=Path, help="UTF-8 text file with the transcript")
    parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--no-speakers", action="store_true", help="Skip speaker attribution")
    parser.add_argument("--no-rubric", action="store_true", help="Skip rubric feedback")
    parser.add_argument("--delay", type=float, default=None, help="Seconds between chunk calls")
    parser.add_argument(
        "--oversized-lines",
        choices=[p.value for p in OversizedLinePolicy],
        default=None,
        help="Override OVERSIZED_LINE_POLICY for lines longer than the chunk size",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    transcript = args.transcript.read_text(encoding="utf-8")
    if not transcript.strip():
        print(f"{args.transcript} is empty", file=sys.stderr)
        return 1

    result = analyze_transcript(transcript, get_llm_client(), build_config(args))
    payload = json.dumps(result.model_dump(by_alias=True), ensure_ascii=False, indent=2)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload, encoding="utf-8")
        print(f"Wrote {args.output}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
