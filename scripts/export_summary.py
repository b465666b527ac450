#!/usr/bin/env python
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend.core.catalog import load_catalog
from backend.core.quarters import quarter_of
from backend.domain import ClaimStatus
from backend.exporters.summary_csv import export_summary
from backend.infrastructure import JsonFileClaimStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Export the bonus claim summary as CSV")
    parser.add_argument("--data-dir", required=True, help="Directory holding users.json / claims.json")
    parser.add_argument("--output", required=True, help="Output file path (.csv)")
    parser.add_argument("--quarter", choices=["Q1", "Q2", "Q3", "Q4"], help="Only claims submitted in this quarter")
    parser.add_argument("--status", choices=[status.value for status in ClaimStatus], help="Only claims in this status")
    parser.add_argument("--catalog", help="Alternative catalog YAML")
    args = parser.parse_args()

    claims = JsonFileClaimStore(args.data_dir).list_claims()
    if args.quarter:
        claims = [claim for claim in claims if quarter_of(claim.submit_date) == args.quarter]
    if args.status:
        claims = [claim for claim in claims if claim.status.value == args.status]
    claims.sort(key=lambda claim: claim.submit_date, reverse=True)

    output = export_summary(Path(args.output), claims, load_catalog(args.catalog))
    print(f"Wrote {len(claims)} claims to {output}")


if __name__ == "__main__":
    main()
