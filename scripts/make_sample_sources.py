#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from ordertrack.core.sources import DEFAULT_REGISTRY


def _orders(count: int) -> list[dict]:
    rows: list[dict] = []
    units = ["U1", "U2", "U3", "HUMUS", "TRILOK"]
    for index in range(count):
        series = "HJX"[index % 3]
        rows.append(
            {
                "jobno_oms": f"{series}{100 + index}",
                "mainimagepath": "" if index % 4 == 0 else f"https://example.invalid/img/{index}.jpg",
                "finaldelvdate": f"{(index % 28) + 1}-{(index % 12) + 1}-2025" if index % 5 else "N/A",
                "pono": f"PO-{5000 + index}",
                "buyer_sh": ["ZARA", "H&M", "NEXT"][index % 3],
                "punit_sh": units[index % len(units)],
                "styleid": f"ST{index:04d}",
                "quantity": 1200 + index * 10,
                "u46": "U46-OK" if index % 2 else None,
                "styleno": f"SN-{index}",
                "ourdeldate": "2025-06-30",
                "date": "2025-01-15",
                "merch": "Bala",
            }
        )
    return rows


def _linked(job_numbers: list[str], key_field: str, extra: dict) -> list[dict]:
    rows: list[dict] = []
    for index, job_no in enumerate(job_numbers):
        if index % 3 == 2:
            continue
        rows.append({key_field: job_no, **{key: f"{value} {index}" for key, value in extra.items()}})
    return rows


EXTRA_FIELDS = {
    "ordmatpen": {"material": "Blue Cotton", "status": "Pending"},
    "accessory": {"item": "Button", "status": "Received"},
    "Allotpen": {"yarn": "30s Combed", "allotted_kg": "120"},
    "knitst": {"machine": "KM", "status": "Knitting"},
    "Fabst": {"fabric": "Single Jersey", "status": "Dyed"},
    "Fabyarn": {"count": "40s", "supplier": "Sree Mills"},
}


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate sample JSON payloads for every order source")
    parser.add_argument("--output", required=True, help="Output directory for <source>.json files")
    parser.add_argument("--orders", type=int, default=60, help="Number of primary order records")
    args = parser.parse_args()

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.mkdir(exist_ok=True)

    orders = _orders(args.orders)
    job_numbers = [row["jobno_oms"] for row in orders]

    payloads = {DEFAULT_REGISTRY.primary.name: orders}
    for source in DEFAULT_REGISTRY.linked:
        payloads[source.name] = _linked(job_numbers, source.key_field, EXTRA_FIELDS.get(source.name, {}))

    for name, rows in payloads.items():
        target = output / f"{name}.json"
        target.write_text(json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"Sample payloads written to {output} ({len(orders)} orders)")
    print(f"Run the API with ORDER_SOURCE_DIR={output}")


if __name__ == "__main__":
    main()
