"""Shared test fixtures for modelbridge."""

import json

import pytest

from modelbridge.core.catalog import SourceModelRecord


def _make_record(slug: str, creator_slug: str) -> SourceModelRecord:
    return SourceModelRecord.from_record({
        "slug": slug,
        "model_creator": {"slug": creator_slug, "name": creator_slug},
        "evaluations": {
            "artificial_analysis_intelligence_index": 60,
            "mmlu_pro": 0.7,
        },
    })


@pytest.fixture
def sample_records():
    return [
        _make_record("claude-3-5-sonnet", "anthropic"),
        _make_record("gemini 2_5.flash", "google"),
        _make_record("unlisted-model", "unknown"),
    ]


@pytest.fixture
def sample_target_ids():
    return [
        "anthropic/claude-3.5-sonnet",
        "google/gemini-2.5-flash",
        "openai/gpt-4o",
    ]


@pytest.fixture
def catalog_files(tmp_path, sample_records, sample_target_ids):
    """Write the sample catalogs to disk; returns (source_path, target_path)."""
    source = tmp_path / "aa_models.json"
    source.write_text(json.dumps({"data": [
        {"slug": r.slug, "model_creator": {"slug": r.creator_slug, "name": r.creator_name}}
        for r in sample_records
    ]}))
    targets = tmp_path / "openrouter_models.json"
    targets.write_text(json.dumps({"data": [{"id": i} for i in sample_target_ids]}))
    return source, targets
