"""CLI entry point: python -m modelbridge [config.yaml]"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from modelbridge.config import ReconcileConfig, load_config
from modelbridge.core.catalog import load_source_catalog, load_target_ids
from modelbridge.core.matcher import Matcher
from modelbridge.core.overrides import POPULAR_MODEL_IDS, load_override_table
from modelbridge.core.reconciler import ReconciliationReport, reconcile
from modelbridge.output import write_mapping

logger = logging.getLogger("modelbridge")


def _print_matches(console: Console, report: ReconciliationReport) -> None:
    table = Table(title="Matches", show_lines=False)
    table.add_column("Source slug")
    table.add_column("Creator", style="dim")
    table.add_column("Target id", style="green")
    table.add_column("Tier")
    for o in sorted(report.outcomes, key=lambda o: o.source_slug):
        table.add_row(o.source_slug, o.creator_slug, o.target_id, o.tier)
    console.print(table)


def _print_stale(console: Console, stale: dict[str, str]) -> None:
    table = Table(title="Stale overrides", title_style="yellow")
    table.add_column("Source slug")
    table.add_column("Missing target id", style="yellow")
    for slug, target in sorted(stale.items()):
        table.add_row(slug, target)
    console.print(table)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modelbridge",
        description="Map benchmark model slugs to marketplace model ids",
    )
    parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=None,
        help="Path to reconciliation YAML config file",
    )
    parser.add_argument("--source", type=Path, default=None,
                        help="Source catalog JSON (benchmark provider models)")
    parser.add_argument("--targets", type=Path, default=None,
                        help="Target catalog (JSON or one id per line)")
    parser.add_argument("--overrides", type=Path, default=None,
                        help="Override table YAML (default: bundled table)")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Write the mapping as JSON to this path")
    parser.add_argument("--workers", type=int, default=None,
                        help="Thread pool size for matching (default: 1)")
    parser.add_argument("--log-level", default=None,
                        help="Logging level (default: WARNING)")
    parser.add_argument("-q", "--quiet", action="store_true", default=False,
                        help="Only print the summary line")
    parser.add_argument("--check-overrides", action="store_true", default=False,
                        help="Report overrides whose targets are missing; exit 1 if any")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    load_dotenv()
    console = Console()

    if args.config is not None:
        if not args.config.exists():
            print(f"Error: config file not found: {args.config}", file=sys.stderr)
            return 1
        config = load_config(args.config)
    else:
        config = ReconcileConfig()

    config.source_catalog = args.source or config.source_catalog
    config.target_catalog = args.targets or config.target_catalog
    config.overrides = args.overrides or config.overrides
    config.output = args.output or config.output
    if args.workers is not None:
        config.workers = max(1, args.workers)
    if args.log_level:
        config.log_level = args.log_level.upper()

    # Environment fills in whatever the config and flags left open
    if config.source_catalog is None and os.environ.get("MODELBRIDGE_SOURCE_CATALOG"):
        config.source_catalog = Path(os.environ["MODELBRIDGE_SOURCE_CATALOG"])
    if config.target_catalog is None and os.environ.get("MODELBRIDGE_TARGET_CATALOG"):
        config.target_catalog = Path(os.environ["MODELBRIDGE_TARGET_CATALOG"])

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    for label, p in (("overrides", config.overrides), ("target catalog", config.target_catalog)):
        if p is not None and not p.exists():
            print(f"Error: {label} file not found: {p}", file=sys.stderr)
            return 1

    table = load_override_table(config.overrides)
    if config.target_catalog is not None:
        target_ids = load_target_ids(config.target_catalog)
    else:
        target_ids = sorted(table.popular_model_ids or POPULAR_MODEL_IDS)
        logger.info("No target catalog given, using %d well-known ids", len(target_ids))

    if args.check_overrides:
        stale = table.stale_entries(target_ids)
        if stale:
            _print_stale(console, stale)
        console.print(f"{len(table)} overrides, {len(stale)} stale")
        return 1 if stale else 0

    if config.source_catalog is None:
        print("Error: no source catalog given (config, --source or "
              "MODELBRIDGE_SOURCE_CATALOG)", file=sys.stderr)
        return 1
    if not config.source_catalog.exists():
        print(f"Error: source catalog not found: {config.source_catalog}", file=sys.stderr)
        return 1

    records = load_source_catalog(config.source_catalog)
    report = reconcile(
        records, target_ids, matcher=Matcher(overrides=table), workers=config.workers,
    )

    if not args.quiet:
        console.print(f"Run: {config.name}")
        _print_matches(console, report)
        if report.unmatched:
            console.print(
                f"Unmatched: {', '.join(sorted(report.unmatched))}",
                style="dim", markup=False,
            )
        if report.stale_overrides:
            _print_stale(console, report.stale_overrides)

    tiers = ", ".join(f"{k}={v}" for k, v in sorted(report.tier_counts.items()))
    console.print(
        f"{report.matched_count}/{len(records)} matched"
        + (f" ({tiers})" if tiers else "")
        + f", {len(report.unmatched)} unmatched"
    )

    if config.output is not None:
        path = write_mapping(report.mapping, config.output, extra={"name": config.name})
        console.print(f"Mapping: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
