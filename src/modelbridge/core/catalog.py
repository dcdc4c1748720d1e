"""Catalog readers — turn catalog snapshots on disk into matcher input.

Source catalog (benchmark provider), JSON:
    [{"slug": "gpt-4o", "model_creator": {"slug": "openai", "name": "OpenAI"},
      "evaluations": {"mmlu_pro": 0.75}}, ...]
    or the API envelope {"data": [...]}

Target catalog (marketplace), any of:
    ["openai/gpt-4o", ...]                 JSON list
    {"data": [{"id": "openai/gpt-4o"}]}    API envelope
    one id per line                        plain text, "#" comments
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import jsonschema

from modelbridge.core.schemas import bundled_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceModelRecord:
    """One model in the source catalog. Evaluations are carried, not read."""

    slug: str
    creator_slug: str
    creator_name: str = ""
    evaluations: Mapping[str, float | None] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_record(cls, record: dict) -> SourceModelRecord:
        creator = record.get("model_creator") or {}
        return cls(
            slug=record["slug"],
            creator_slug=creator.get("slug", ""),
            creator_name=creator.get("name", ""),
            evaluations=MappingProxyType(dict(record.get("evaluations") or {})),
        )


def _unwrap(raw: Any, path: Path) -> list:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("data"), list):
        return raw["data"]
    raise ValueError(f"{path}: expected a JSON list or an object with a 'data' list")


def parse_source_records(raw: Any, path: Path | str = "<memory>") -> list[SourceModelRecord]:
    """Validate raw source entries; invalid ones are skipped with a warning."""
    schema = bundled_schema("source_record.schema.json")
    records = []
    for i, entry in enumerate(_unwrap(raw, Path(path))):
        try:
            jsonschema.validate(entry, schema)
        except jsonschema.ValidationError as e:
            logger.warning("%s: skipping source record #%d: %s", path, i, e.message)
            continue
        records.append(SourceModelRecord.from_record(entry))
    return records


def load_source_catalog(path: Path) -> list[SourceModelRecord]:
    """Load source catalog records from a JSON file."""
    path = Path(path)
    with open(path) as f:
        raw = json.load(f)
    records = parse_source_records(raw, path)
    logger.info("Loaded %d source records from %s", len(records), path)
    return records


def parse_target_ids(raw: Any, path: Path | str = "<memory>") -> list[str]:
    """Extract target ids from a JSON list or a {"data": [{"id": ...}]} envelope."""
    ids = []
    for i, entry in enumerate(_unwrap(raw, Path(path))):
        if isinstance(entry, str):
            ids.append(entry)
        elif isinstance(entry, dict) and isinstance(entry.get("id"), str):
            ids.append(entry["id"])
        else:
            logger.warning("%s: skipping target entry #%d without an id", path, i)
    return ids


def load_target_ids(path: Path) -> list[str]:
    """Load target catalog ids from a JSON or plain-text file."""
    path = Path(path)
    text = path.read_text()
    if path.suffix.lower() == ".json":
        ids = parse_target_ids(json.loads(text), path)
    else:
        ids = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            ids.append(line)
    logger.info("Loaded %d target ids from %s", len(ids), path)
    return ids
