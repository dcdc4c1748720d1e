"""Slug canonicalization for cross-catalog model matching.

Benchmark catalogs and model marketplaces spell the same model in
different ways:

    canonicalize_slug(" Claude_3.5 Sonnet ")     # → "claude-3-5-sonnet"
    normalize_slug("gemini-2.0-flash-001")       # → "gemini-2-0-flash"
    normalize_model_id("google/gemini-2.0-flash-001")
                                                 # → "google/gemini-2-0-flash"

Canonical forms are lookup keys only. They are never written out.
"""

from __future__ import annotations

import re

# Runs of ".", "_" or whitespace become a single "-"
_SEPARATOR_RE = re.compile(r"[._\s]+")
_DASH_RUN_RE = re.compile(r"-+")
_EDGE_DASH_RE = re.compile(r"^-|-$")

# Trailing "-001", "-0324", chained "-2024-01" ...
_VERSION_SUFFIX_RE = re.compile(r"(?:-\d{3,4})+$", re.ASCII)


def canonicalize_slug(slug: str) -> str:
    """Reduce a raw slug to its canonical comparison form.

    Lowercases, trims, turns separator runs into "-", collapses repeated
    dashes and strips one leading/trailing dash. Idempotent.
    """
    text = slug.lower().strip()
    text = _SEPARATOR_RE.sub("-", text)
    text = _DASH_RUN_RE.sub("-", text)
    return _EDGE_DASH_RE.sub("", text)


def normalize_slug(slug: str) -> str:
    """Canonicalize and drop trailing numeric version/date suffixes."""
    return _VERSION_SUFFIX_RE.sub("", canonicalize_slug(slug))


def normalize_model_id(model_id: str) -> str:
    """Normalize a "<creator>/<model>" identifier into a composite key.

    Only the model part loses its version suffix. Input without a "/"
    has an empty creator, which contributes no prefix, so the key of a
    malformed id never equals the key of a well-formed pair.
    """
    creator, sep, model = model_id.partition("/")
    if not sep:
        return normalize_slug(creator)
    return f"{canonicalize_slug(creator)}/{normalize_slug(model)}"


def composite_key(slug: str, creator_slug: str) -> str:
    """Composite key for a source (slug, creator) pair."""
    return f"{canonicalize_slug(creator_slug)}/{normalize_slug(slug)}"
