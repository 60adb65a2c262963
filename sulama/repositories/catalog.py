"""Read-only product and technical tables loaded from the data directory."""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CATALOG_FILES = {
    "price_list": "price_list.json",
    "ready_sets": "ready_sets.json",
    "nozzle_data": "nozzle_data.json",
    "pe100_friction": "pe100_friction.json",
    "drip_data": "drip_data.json",
    "zone_limits": "zone_limits.json",
    "k_factors": "k_factors.json",
}


@dataclass
class Catalog:
    price_list: list = field(default_factory=list)
    ready_sets: list = field(default_factory=list)
    nozzle_data: list = field(default_factory=list)
    pe100_friction: list = field(default_factory=list)
    drip_data: list = field(default_factory=list)
    zone_limits: list = field(default_factory=list)
    k_factors: list = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {name: len(getattr(self, name)) for name in CATALOG_FILES}


def load_json_array(path: Path) -> list:
    if not path.exists():
        logger.warning("Uyarı: JSON dosyası bulunamadı: %s", path)
        return []
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        logger.exception("JSON parse hatası: %s", path)
        return []
    if not isinstance(data, list):
        logger.warning("JSON dosyası dizi değil, yok sayıldı: %s", path)
        return []
    return data


def load_catalog(data_dir: Path) -> Catalog:
    tables = {name: load_json_array(data_dir / filename) for name, filename in CATALOG_FILES.items()}
    catalog = Catalog(**tables)
    logger.info("Katalog yüklendi: %s", catalog.counts())
    return catalog


def read_price_list_csv(path: Path, delimiter: str = ";") -> list[dict]:
    """Rows keyed by header; empty cells are dropped and blank rows skipped."""
    rows: list[dict] = []
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f, delimiter=delimiter)
        for record in reader:
            row = {
                (key or "").strip(): value.strip()
                for key, value in record.items()
                if key and isinstance(value, str) and value.strip()
            }
            if row:
                rows.append(row)
    return rows


def write_json(path: Path, rows: list) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8")


class CatalogStore:
    """Holds the loaded catalog so an admin reload is seen by every request."""

    def __init__(self, data_dir: Path, catalog: Catalog | None = None) -> None:
        self.data_dir = data_dir
        self.current = catalog if catalog is not None else load_catalog(data_dir)

    def reload(self) -> Catalog:
        self.current = load_catalog(self.data_dir)
        return self.current
