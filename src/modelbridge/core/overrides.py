"""Manual override table for source slugs the normalizer cannot resolve.

Some models are renamed between catalogs in ways no canonicalization
rule recovers ("deepseek-v3" is sold as "deepseek/deepseek-chat"). Those
pairs live in ``data/overrides.yaml`` and are loaded once at import
time into an immutable table.

Usage:
    from modelbridge.core.overrides import MANUAL_OVERRIDES, default_override_table

    MANUAL_OVERRIDES["deepseek-v3"]                  # → "deepseek/deepseek-chat"
    default_override_table().lookup("Claude 3.5 Sonnet")
                                                     # → "anthropic/claude-3.5-sonnet"

To add new overrides: edit the YAML file, not this module.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import jsonschema
import yaml

from modelbridge.core.schemas import bundled_schema
from modelbridge.core.slugs import canonicalize_slug

logger = logging.getLogger(__name__)

DEFAULT_OVERRIDES_PATH = Path(__file__).resolve().parent.parent / "data" / "overrides.yaml"


@dataclass(frozen=True)
class OverrideTable:
    """Canonical source slug → target id pairs, plus a well-known id snapshot."""

    overrides: Mapping[str, str]
    popular_model_ids: frozenset[str] = field(default_factory=frozenset)

    def __len__(self) -> int:
        return len(self.overrides)

    def lookup(self, slug: str) -> str | None:
        """Return the override target for a raw source slug, if any."""
        return self.overrides.get(canonicalize_slug(slug))

    def stale_entries(self, target_ids: Iterable[str]) -> dict[str, str]:
        """Overrides whose target is missing from ``target_ids``."""
        available = target_ids if isinstance(target_ids, (set, frozenset)) else set(target_ids)
        return {
            slug: target
            for slug, target in self.overrides.items()
            if target not in available
        }


def parse_override_table(raw: dict, source: str = "<memory>") -> OverrideTable:
    """Validate a raw override document and build an OverrideTable.

    Raises ValueError when the document does not match the schema or a
    key is not already in canonical form.
    """
    try:
        jsonschema.validate(raw, bundled_schema("overrides.schema.json"))
    except jsonschema.ValidationError as e:
        raise ValueError(f"Invalid override table {source}: {e.message}") from e

    overrides: dict[str, str] = {}
    for slug, target in raw["overrides"].items():
        canonical = canonicalize_slug(slug)
        if canonical != slug:
            raise ValueError(
                f"Override key {slug!r} in {source} is not canonical "
                f"(expected {canonical!r})"
            )
        overrides[slug] = target

    popular = frozenset(raw.get("popular_model_ids", []))
    if popular:
        for slug, target in overrides.items():
            if target not in popular:
                logger.warning(
                    "Override %s -> %s targets an id outside the well-known snapshot",
                    slug, target,
                )

    return OverrideTable(
        overrides=MappingProxyType(overrides),
        popular_model_ids=popular,
    )


def load_override_table(path: Path | None = None) -> OverrideTable:
    """Load an override table from YAML (defaults to the bundled table)."""
    path = Path(path) if path is not None else DEFAULT_OVERRIDES_PATH
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    table = parse_override_table(raw, source=str(path))
    logger.debug("Loaded %d overrides from %s", len(table), path)
    return table


# ------------------------------------------------------------------
# Bundled table, built at import time
# ------------------------------------------------------------------

_DEFAULT_TABLE = load_override_table()

MANUAL_OVERRIDES: Mapping[str, str] = _DEFAULT_TABLE.overrides
POPULAR_MODEL_IDS: frozenset[str] = _DEFAULT_TABLE.popular_model_ids


def default_override_table() -> OverrideTable:
    """Return the bundled override table."""
    return _DEFAULT_TABLE
