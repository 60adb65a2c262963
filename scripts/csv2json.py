#!/usr/bin/env python3
"""
Convert the supplier price list CSV into the JSON table the API loads.

Kullanım:
  python scripts/csv2json.py [--input data/price_list.csv] [--output data/price_list.json] [--delimiter ";"]

Reload a running server afterwards with POST /admin/reload-data.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sulama.core.log_config import configure_logging  # noqa: E402
from sulama.repositories.catalog import read_price_list_csv, write_json  # noqa: E402

logger = logging.getLogger("sulama.scripts.csv2json")


def convert(input_path: Path, output_path: Path, delimiter: str = ";") -> int:
    rows = read_price_list_csv(input_path, delimiter=delimiter)
    write_json(output_path, rows)
    return len(rows)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Fiyat listesi CSV -> JSON")
    ap.add_argument("--input", default=str(ROOT / "data" / "price_list.csv"), help="Kaynak CSV")
    ap.add_argument("--output", default=str(ROOT / "data" / "price_list.json"), help="Hedef JSON")
    ap.add_argument("--delimiter", default=";", help="CSV ayırıcı (varsayılan ';')")
    args = ap.parse_args(argv)

    configure_logging()
    count = convert(Path(args.input), Path(args.output), args.delimiter)
    logger.info("price_list.json güncellendi. Toplam satır: %d", count)
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:  # pragma: no cover - CLI
        sys.stderr.write(f"Dönüştürme hatası: {exc}\n")
        raise SystemExit(1)
