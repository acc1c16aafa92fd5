from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    events_dir: Path
    catalog_path: Optional[Path]
    strict: bool


def load_settings() -> Settings:
    load_dotenv(override=False)

    events_dir = Path(os.getenv("MCMETA_EVENTS_DIR", "runs"))
    catalog = os.getenv("MCMETA_CATALOG", "").strip()
    catalog_path = Path(catalog) if catalog else None
    strict = os.getenv("MCMETA_STRICT", "0").strip().lower() in _TRUTHY

    return Settings(
        events_dir=events_dir,
        catalog_path=catalog_path,
        strict=strict,
    )
