from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import requests

from .analysis import (
    DEFAULT_ANALYSIS_GENERATIONS,
    DEFAULT_PEDIGREE_GENERATIONS,
    PairwiseAnalysis,
    dog_pedigree,
)
from .ancestor_paths import appearance_summary
from .config import load_settings, open_store
from .errors import PedigreeError
from .models import LinebreedingResult, PedigreeNode
from .pedigree_ascii import render_pedigree_ascii
from .pedigree_tree import generation_counts
from .reports_xlsx import append_analysis_row

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------

def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kennel-pedigree",
        description="Dog pedigree display and sire/dam linebreeding analysis.",
    )

    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="JSON config file. When given, KENNEL_PEDIGREE_* env vars are ignored.",
    )
    parser.add_argument("--store", metavar="PATH", default=None, help="Dog snapshot JSON file.")
    parser.add_argument("--api-url", default=None, help="Registry API base URL (overrides --store).")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO).")

    sub = parser.add_subparsers(dest="command", required=True)

    p_ped = sub.add_parser("pedigree", help="Show the pedigree of one dog.")
    p_ped.add_argument("dog_id")
    p_ped.add_argument(
        "--generations",
        type=int,
        default=DEFAULT_PEDIGREE_GENERATIONS,
        help=f"Parent hops to include (default: {DEFAULT_PEDIGREE_GENERATIONS}).",
    )
    out = p_ped.add_mutually_exclusive_group()
    out.add_argument("--json", action="store_true")
    out.add_argument("--ascii", action="store_true")

    p_an = sub.add_parser("analyze", help="Linebreeding analysis of a sire/dam pair.")
    p_an.add_argument("sire_id")
    p_an.add_argument("dam_id")
    p_an.add_argument(
        "--generations",
        type=int,
        default=DEFAULT_ANALYSIS_GENERATIONS,
        help=f"Generations to search for common ancestors (default: {DEFAULT_ANALYSIS_GENERATIONS}).",
    )
    p_an.add_argument("--json", action="store_true")
    p_an.add_argument(
        "--append-report",
        action="store_true",
        help="Upsert one row per analysed pair into an Excel report.",
    )
    p_an.add_argument(
        "--report-xlsx",
        type=str,
        default="linebreeding.xlsx",
        help="Path to report Excel file (default: linebreeding.xlsx).",
    )
    p_an.add_argument(
        "--report-sheet",
        type=str,
        default="Analyses",
        help="Worksheet name in the report Excel file (default: Analyses).",
    )

    args = parser.parse_args(argv)
    if args.generations < 0:
        parser.error("--generations must be >= 0")
    return args


# ---------------------------------------------------------------------------

def print_pedigree_summary(tree: PedigreeNode, generations: int) -> None:
    print("\n[main] Pedigree")
    print("-" * 60)
    print(f"Dog: {tree.name} ({tree.id})")
    if tree.registration_number:
        print(f"Registration: {tree.registration_number}")
    if tree.breed:
        print(f"Breed: {tree.breed}")
    print(f"Generations: {generations}")

    counts = generation_counts(tree)
    print(f"Total nodes: {sum(counts.values())}")
    for g, n in counts.items():
        print(f"  Generation {g}: {n} of {2 ** g}")


def print_analysis(result: LinebreedingResult, implex: dict[str, Any]) -> None:
    print("\n[main] Linebreeding analysis")
    print("-" * 60)
    print(f"Sire: {result.dog.name} ({result.dog.canonical_id})")
    print(f"Dam:  {result.dam.name} ({result.dam.canonical_id})")
    print(f"Generations: {result.generations}")
    print(f"Inbreeding coefficient: {result.inbreeding_coefficient:.4f}")
    print(f"Genetic diversity:      {result.genetic_diversity:.4f}")

    if result.common_ancestors:
        print(f"\nCommon ancestors ({len(result.common_ancestors)}):")
        for ca in result.common_ancestors:
            print(f"  {ca.dog.name:<30} contribution={ca.contribution:.4f} occurrences={ca.occurrences}")
            for p in ca.pathways:
                print(f"      {p}")

    for side in ("sire", "dam"):
        appearances, unique = implex[side]
        if not appearances:
            continue
        print(f"\n{side.capitalize()} side, appearances vs unique per generation:")
        for g in appearances:
            print(f"  Generation {g}: {appearances[g]} / {unique[g]}")

    print("\nRecommendations:")
    for line in result.recommendations:
        print(f"  - {line}")


# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    # JSON output keeps stdout machine-readable: diagnostics go to stderr
    def _log(*a: Any) -> None:
        print(*a, file=sys.stderr if args.json else sys.stdout)

    settings = load_settings(args.config)
    if args.store:
        settings.store_path = Path(args.store)
    if args.api_url:
        settings.api_base_url = args.api_url
    if args.log_level:
        settings.log_level = args.log_level.upper()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        store = open_store(settings)

        if args.command == "pedigree":
            _log(f"[main] Building pedigree for {args.dog_id!r} ({args.generations} generations)")
            tree = dog_pedigree(store, args.dog_id, args.generations)

            if args.json:
                print(json.dumps(tree.to_dict(), ensure_ascii=False, indent=2, default=str))
            elif args.ascii:
                print(render_pedigree_ascii(tree, max_generations=args.generations))
            else:
                print_pedigree_summary(tree, args.generations)

        else:
            _log(f"[main] Analysing {args.sire_id!r} x {args.dam_id!r} ({args.generations} generations)")
            analysis = PairwiseAnalysis(store, args.sire_id, args.dam_id, args.generations)
            result = analysis.run()

            if args.json:
                print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2, default=str))
            else:
                implex = {
                    "sire": appearance_summary(analysis.sire_ancestors),
                    "dam": appearance_summary(analysis.dam_ancestors),
                }
                print_analysis(result, implex)

            if args.append_report:
                append_analysis_row(
                    xlsx_path=Path(args.report_xlsx),
                    sheet_name=args.report_sheet,
                    result=result,
                )
                _log(f"[main] Report updated -> {args.report_xlsx} [{args.report_sheet}]")

    except (PedigreeError, FileNotFoundError, ValueError, RuntimeError, requests.RequestException) as e:
        print(f"[main] ERROR: {e}", file=sys.stderr)
        return 1

    _log("\n[main] Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
