"""Batch reconciliation — match a whole source catalog against target ids.

Each record is matched independently, so with ``workers > 1`` the record
list is split into contiguous shards that run on a thread pool and the
partial results are merged afterwards. The target id set is a frozenset
and is only ever read.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from modelbridge.core.catalog import SourceModelRecord
from modelbridge.core.matcher import Matcher, MatchOutcome, default_matcher

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    mapping: dict[str, str] = field(default_factory=dict)
    outcomes: list[MatchOutcome] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)
    stale_overrides: dict[str, str] = field(default_factory=dict)

    @property
    def tier_counts(self) -> dict[str, int]:
        return dict(Counter(o.tier for o in self.outcomes))

    @property
    def matched_count(self) -> int:
        return len(self.outcomes)


def _match_shard(
    matcher: Matcher,
    shard: Sequence[SourceModelRecord],
    target_ids: frozenset[str],
) -> tuple[list[MatchOutcome], list[str]]:
    outcomes, unmatched = [], []
    for record in shard:
        outcome = matcher.resolve(record.slug, record.creator_slug, target_ids)
        if outcome is None:
            unmatched.append(record.slug)
        else:
            outcomes.append(outcome)
    return outcomes, unmatched


def _shards(records: Sequence[SourceModelRecord], count: int) -> list[Sequence[SourceModelRecord]]:
    size = -(-len(records) // count)  # ceil
    return [records[i:i + size] for i in range(0, len(records), size)]


def reconcile(
    records: Iterable[SourceModelRecord],
    target_ids: Iterable[str],
    *,
    matcher: Matcher | None = None,
    workers: int = 1,
) -> ReconciliationReport:
    """Match every source record and collect outcomes, misses and stale overrides."""
    matcher = matcher if matcher is not None else default_matcher()
    records = list(records)
    ids = frozenset(target_ids)
    report = ReconciliationReport(stale_overrides=matcher.overrides.stale_entries(ids))

    if not records or not ids:
        report.unmatched = [r.slug for r in records]
        logger.info("Nothing to reconcile (%d records, %d target ids)", len(records), len(ids))
        return report

    if workers <= 1 or len(records) < 2:
        parts = [_match_shard(matcher, records, ids)]
    else:
        shards = _shards(records, min(workers, len(records)))
        indexed: dict[int, tuple[list[MatchOutcome], list[str]]] = {}
        with ThreadPoolExecutor(max_workers=len(shards)) as pool:
            futures = {
                pool.submit(_match_shard, matcher, shard, ids): i
                for i, shard in enumerate(shards)
            }
            for future in as_completed(futures):
                indexed[futures[future]] = future.result()
        # Merge in shard order so outcomes keep record order
        parts = [indexed[i] for i in range(len(shards))]

    for outcomes, unmatched in parts:
        report.outcomes.extend(outcomes)
        report.unmatched.extend(unmatched)
    for outcome in report.outcomes:
        report.mapping[outcome.source_slug] = outcome.target_id

    logger.info(
        "Reconciled %d records against %d target ids: %d matched %s, %d unmatched",
        len(records), len(ids), report.matched_count, report.tier_counts,
        len(report.unmatched),
    )
    if report.stale_overrides:
        logger.info(
            "%d override(s) point at ids missing from the target catalog: %s",
            len(report.stale_overrides), ", ".join(sorted(report.stale_overrides)),
        )
    return report


def build_matching_map(
    records: Iterable[SourceModelRecord],
    target_ids: Iterable[str],
    *,
    matcher: Matcher | None = None,
    workers: int = 1,
) -> dict[str, str]:
    """Source slug → target id for every record that matched."""
    return reconcile(records, target_ids, matcher=matcher, workers=workers).mapping
