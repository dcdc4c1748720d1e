"""Matcher — resolve a source model slug to a target catalog id.

Tiers are tried in order, first hit wins:

1. override    — hand-curated table, only if its target is in the catalog
2. exact       — "<creator>/<slug>" lowercased, direct set membership
3. normalized  — composite keys compared after canonicalization and
                 version-suffix stripping

A miss at every tier returns None. Nothing here raises for unknown or
malformed input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass

from modelbridge.core.overrides import (
    POPULAR_MODEL_IDS,
    OverrideTable,
    default_override_table,
)
from modelbridge.core.slugs import canonicalize_slug, composite_key, normalize_model_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchQuery:
    """One source record as seen by the tiers."""

    slug: str
    creator_slug: str


@dataclass(frozen=True)
class MatchOutcome:
    """Matched target id and the tier that produced it."""

    source_slug: str
    creator_slug: str
    target_id: str
    tier: str


TierFn = Callable[[MatchQuery, Collection[str]], "str | None"]


@dataclass(frozen=True)
class Tier:
    """A named matching strategy in the resolution chain."""

    name: str
    find: TierFn


# ── Tier functions ───────────────────────────────────────────────

def match_override(
    query: MatchQuery, target_ids: Collection[str], overrides: OverrideTable,
) -> str | None:
    target = overrides.lookup(query.slug)
    if target is not None and target in target_ids:
        return target
    return None


def match_exact(query: MatchQuery, target_ids: Collection[str]) -> str | None:
    if not canonicalize_slug(query.slug):
        return None
    candidate = f"{query.creator_slug.lower()}/{query.slug.lower()}"
    return candidate if candidate in target_ids else None


def match_normalized(query: MatchQuery, target_ids: Collection[str]) -> str | None:
    # Linear scan; with several candidates on the same key the winner
    # depends on set iteration order.
    key = composite_key(query.slug, query.creator_slug)
    if key.endswith("/"):
        return None
    for target_id in target_ids:
        if normalize_model_id(target_id) == key:
            return target_id
    return None


def default_tiers(overrides: OverrideTable | None = None) -> tuple[Tier, ...]:
    """The standard override → exact → normalized chain."""
    table = overrides if overrides is not None else default_override_table()
    return (
        Tier("override", lambda q, ids: match_override(q, ids, table)),
        Tier("exact", match_exact),
        Tier("normalized", match_normalized),
    )


# ── Matcher ──────────────────────────────────────────────────────

class Matcher:
    """Runs an ordered chain of tiers against a set of target ids."""

    def __init__(
        self,
        overrides: OverrideTable | None = None,
        tiers: Sequence[Tier] | None = None,
    ):
        self.overrides = overrides if overrides is not None else default_override_table()
        self.tiers: tuple[Tier, ...] = (
            tuple(tiers) if tiers is not None else default_tiers(self.overrides)
        )

    @property
    def tier_names(self) -> list[str]:
        return [t.name for t in self.tiers]

    def resolve(
        self, slug: str, creator_slug: str, target_ids: Collection[str],
    ) -> MatchOutcome | None:
        """Return the first tier hit as a MatchOutcome, or None."""
        query = MatchQuery(slug=slug, creator_slug=creator_slug)
        for tier in self.tiers:
            target_id = tier.find(query, target_ids)
            if target_id is not None:
                logger.debug("%s/%s -> %s (%s)", creator_slug, slug, target_id, tier.name)
                return MatchOutcome(
                    source_slug=slug,
                    creator_slug=creator_slug,
                    target_id=target_id,
                    tier=tier.name,
                )
        logger.debug("%s/%s: no match", creator_slug, slug)
        return None

    def match(
        self, slug: str, creator_slug: str, target_ids: Collection[str],
    ) -> str | None:
        """Return the matched target id, or None."""
        outcome = self.resolve(slug, creator_slug, target_ids)
        return outcome.target_id if outcome else None


_DEFAULT_MATCHER = Matcher()


def default_matcher() -> Matcher:
    """Shared matcher over the bundled override table."""
    return _DEFAULT_MATCHER


def match_model(
    slug: str,
    creator_slug: str,
    target_ids: Collection[str] | None = None,
) -> str | None:
    """Match one source slug; defaults to the well-known target ids."""
    ids = target_ids if target_ids is not None else POPULAR_MODEL_IDS
    return default_matcher().match(slug, creator_slug, ids)
