"""Tests for catalog readers."""

import json
import logging
from types import MappingProxyType

import pytest

from modelbridge.core.catalog import (
    SourceModelRecord,
    load_source_catalog,
    load_target_ids,
    parse_source_records,
    parse_target_ids,
)


def _raw(slug="gpt-4o", creator="openai", **extra):
    record = {"slug": slug, "model_creator": {"slug": creator, "name": creator.title()}}
    record.update(extra)
    return record


class TestSourceModelRecord:
    def test_from_record(self):
        rec = SourceModelRecord.from_record(_raw(evaluations={"mmlu_pro": 0.7, "gpqa": None}))
        assert rec.slug == "gpt-4o"
        assert rec.creator_slug == "openai"
        assert rec.creator_name == "Openai"
        assert rec.evaluations == {"mmlu_pro": 0.7, "gpqa": None}

    def test_evaluations_are_read_only(self):
        rec = SourceModelRecord.from_record(_raw(evaluations={"mmlu_pro": 0.7}))
        assert isinstance(rec.evaluations, MappingProxyType)
        with pytest.raises(TypeError):
            rec.evaluations["mmlu_pro"] = 1.0

    def test_missing_evaluations(self):
        assert SourceModelRecord.from_record(_raw()).evaluations == {}

    def test_frozen(self):
        rec = SourceModelRecord(slug="a", creator_slug="b")
        with pytest.raises(AttributeError):
            rec.slug = "c"


class TestParseSourceRecords:
    def test_plain_list(self):
        records = parse_source_records([_raw(), _raw("grok-3", "x-ai")])
        assert [r.slug for r in records] == ["gpt-4o", "grok-3"]

    def test_data_envelope(self):
        records = parse_source_records({"status": 200, "data": [_raw()]})
        assert len(records) == 1

    def test_skips_invalid_records(self, caplog):
        raw = [_raw(), {"slug": "orphan"}, {"model_creator": {"slug": "x"}}, "junk",
               _raw(evaluations={"mmlu_pro": "high"})]
        with caplog.at_level(logging.WARNING, logger="modelbridge.core.catalog"):
            records = parse_source_records(raw)
        assert [r.slug for r in records] == ["gpt-4o"]
        assert caplog.text.count("skipping source record") == 4

    def test_rejects_unknown_top_level(self):
        with pytest.raises(ValueError, match="'data' list"):
            parse_source_records({"models": []})


class TestTargetIds:
    def test_plain_list(self):
        assert parse_target_ids(["openai/gpt-4o"]) == ["openai/gpt-4o"]

    def test_data_envelope(self):
        raw = {"data": [{"id": "openai/gpt-4o", "name": "GPT-4o"}, {"name": "no id"}]}
        assert parse_target_ids(raw) == ["openai/gpt-4o"]

    def test_load_json(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text(json.dumps({"data": [{"id": "x-ai/grok-3"}]}))
        assert load_target_ids(path) == ["x-ai/grok-3"]

    def test_load_text(self, tmp_path):
        path = tmp_path / "models.txt"
        path.write_text("# snapshot\nopenai/gpt-4o\n\n  x-ai/grok-3  \n")
        assert load_target_ids(path) == ["openai/gpt-4o", "x-ai/grok-3"]


class TestLoadSourceCatalog:
    def test_load(self, catalog_files):
        source, _ = catalog_files
        records = load_source_catalog(source)
        assert [r.slug for r in records] == [
            "claude-3-5-sonnet", "gemini 2_5.flash", "unlisted-model",
        ]

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_source_catalog(path)
