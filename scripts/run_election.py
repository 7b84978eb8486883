#!/usr/bin/env python3
"""
Run a ranked-choice election from a JSON file or a Qualtrics CSV export.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from data.qualtrics import CSVFormatError, parse_qualtrics_csv  # noqa: E402
from tabulation.engine import create_engine  # noqa: E402
from tabulation.errors import ElectionError, ValidationFailed  # noqa: E402
from tabulation.models import ElectionConfig  # noqa: E402
from tabulation.reference import (  # noqa: E402
    ReferenceVerifier,
    generate_verification_report,
)

logger = logging.getLogger(__name__)

STATUS_SYMBOLS = {
    "elected": "🏆",
    "eliminated": "❌",
    "continuing": "  ",
    "already_elected": "✓ ",
    "already_eliminated": "- ",
}


def load_config(args) -> ElectionConfig:
    """Build the election from --input or --csv plus command line overrides."""
    if args.input:
        with open(args.input) as f:
            data = json.load(f)
        if args.method:
            data["method"] = args.method
        data.setdefault("method", "irv")
        if args.seats is not None:
            data["seats"] = args.seats
        if args.title:
            data["title"] = args.title
        return ElectionConfig.from_dict(data)

    positions = parse_qualtrics_csv(Path(args.csv).read_text(encoding="utf-8-sig"))
    if args.position:
        matches = [p for p in positions if p.title == args.position]
        if not matches:
            titles = ", ".join(p.title for p in positions)
            raise CSVFormatError(f"Position '{args.position}' not found. Found: {titles}")
        position = matches[0]
    else:
        position = positions[0]
        if len(positions) > 1:
            logger.info(
                f"CSV has {len(positions)} positions, using '{position.title}' "
                "(select with --position)"
            )

    seats = args.seats if args.seats is not None else 1
    config = position.to_config(args.method or "irv", seats)
    if args.title:
        config.title = args.title
    return config


def print_rounds(result):
    print("\n=== Round-by-Round Results ===")
    round_summary = result.get_round_summary()
    if round_summary.empty:
        print("No rounds recorded.")
        return

    for round_num in sorted(round_summary["round"].unique()):
        round_data = round_summary[round_summary["round"] == round_num]
        threshold = round_data.iloc[0]["threshold"]
        print(f"\nRound {round_num}:")
        if pd.notna(threshold):
            print(f"Threshold: {threshold}")
        print(f"Active ballots: {round_data.iloc[0]['active_ballots']}")

        for _, row in round_data.sort_values("votes", ascending=False).iterrows():
            status_symbol = STATUS_SYMBOLS.get(row["status"], "  ")
            print(f"  {status_symbol} {row['candidate']:25s}: {row['votes']:8.2f}")


def main():
    parser = argparse.ArgumentParser(description="Run a ranked-choice election")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="JSON file with candidates and ballots")
    source.add_argument("--csv", help="Qualtrics CSV export")
    parser.add_argument("--position", help="Position title to count from the CSV")
    parser.add_argument(
        "--method", help="Voting method: irv or borda (default: irv)"
    )
    parser.add_argument("--seats", type=int, help="Number of seats to fill (default: 1)")
    parser.add_argument("--title", help="Election title")
    parser.add_argument("--export", help="Export results to CSV file")
    parser.add_argument(
        "--verify", action="store_true", help="Cross-check winners with PyRankVote"
    )
    parser.add_argument(
        "--log-level", default="INFO", help="Logging level (default: INFO)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    source_path = Path(args.input or args.csv)
    if not source_path.exists():
        logger.error(f"Input file not found: {source_path}")
        sys.exit(1)

    try:
        config = load_config(args)
        engine = create_engine()

        logger.info(
            f"=== {config.title or 'Election'} ({config.method}, {config.seats} seat(s)) ==="
        )
        result = engine.run_election(config)

        print_rounds(result)

        print("\n=== Final Results ===")
        print(result.summary)
        final_results = result.get_final_results()
        for _, row in final_results.iterrows():
            marker = "🏆" if row["status"] == "elected" else "  "
            print(f"  {marker} {row['candidate']:30s}: {row['final_votes']:8.2f}")
        print(
            f"\nBallots: {result.total_ballots}, exhausted: {result.exhausted_ballots}"
        )

        if args.export:
            export_path = Path(args.export)

            final_results.to_csv(export_path.with_suffix(".csv"), index=False)
            print(f"\n✓ Final results exported to: {export_path.with_suffix('.csv')}")

            rounds_path = export_path.with_stem(export_path.stem + "_rounds").with_suffix(
                ".csv"
            )
            result.get_round_summary().to_csv(rounds_path, index=False)
            print(f"✓ Round summary exported to: {rounds_path}")

        if args.verify:
            verifier = ReferenceVerifier(config.candidates, config.ballots, config.seats)
            print()
            print(generate_verification_report(verifier.verify_result(result)))

    except ValidationFailed as e:
        logger.error("Ballot validation failed:")
        for error in e.errors:
            logger.error(f"  {error}")
        sys.exit(1)
    except (ElectionError, CSVFormatError, ValueError, OSError) as e:
        logger.error(f"Error running election: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
