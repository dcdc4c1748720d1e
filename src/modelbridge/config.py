"""Reconciliation run configuration loader."""

import yaml
from dataclasses import dataclass
from pathlib import Path


@dataclass
class ReconcileConfig:
    name: str = "reconcile"
    source_catalog: Path | None = None
    target_catalog: Path | None = None  # None = bundled well-known ids
    overrides: Path | None = None       # None = bundled override table
    output: Path | None = None
    workers: int = 1
    log_level: str = "WARNING"


def _resolve(base: Path, value: str | None) -> Path | None:
    if value is None:
        return None
    p = Path(value).expanduser()
    return p if p.is_absolute() else base / p


def load_config(path: Path) -> ReconcileConfig:
    """Load reconciliation config from YAML file.

    Relative paths are resolved against the config file's directory.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    r = raw["reconcile"]
    base = path.resolve().parent

    workers = int(r.get("workers", 1))
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    return ReconcileConfig(
        name=r.get("name", "reconcile"),
        source_catalog=_resolve(base, r.get("source_catalog")),
        target_catalog=_resolve(base, r.get("target_catalog")),
        overrides=_resolve(base, r.get("overrides")),
        output=_resolve(base, r.get("output")),
        workers=workers,
        log_level=str(r.get("log_level", "WARNING")).upper(),
    )
