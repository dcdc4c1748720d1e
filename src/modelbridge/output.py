"""Mapping writer — atomic JSON output for a reconciliation run."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import modelbridge

_SCHEMA_VERSION = "1.0.0"


def build_document(mapping: dict[str, str], extra: dict | None = None) -> dict:
    """Wrap a mapping in the versioned output envelope."""
    record = {
        "schema_version": _SCHEMA_VERSION,
        "engine_version": modelbridge.__version__,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "mapping": dict(sorted(mapping.items())),
    }
    if extra:
        record.update(extra)
    return record


def write_mapping(mapping: dict[str, str], path: Path, extra: dict | None = None) -> Path:
    """Write mapping atomically (tmp + rename)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = build_document(mapping, extra)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(document, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    return path
