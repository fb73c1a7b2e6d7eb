#!/usr/bin/env python3
from __future__ import annotations

import argparse
import csv
import json
import os
import sys
from collections import Counter
from glob import glob
from typing import List, Optional, TextIO, Tuple

# Make las-backend importable
THIS_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.abspath(os.path.join(THIS_DIR, "..", "las-backend"))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from laspy.errors import LaspyException  # type: ignore

from app.crs.errors import CrsError  # type: ignore
from app.crs.resolver import crs_source, resolve_slots  # type: ignore
from app.logging_setup import configure_logging  # type: ignore
from lasvlr.las_io import read_las_vlrs  # type: ignore
from lasvlr.vlr import select_crs_vlrs  # type: ignore

CSV_FIELDS = ["file", "status", "source", "horizontal", "vertical", "detail"]


def _collect_files(data_dir: str, pattern: str, limit: int | None) -> List[str]:
    pats = [p.strip() for p in pattern.split(",") if p.strip()]
    files: List[str] = []
    for p in pats:
        files.extend(glob(os.path.join(data_dir, p)))
    files = sorted(set(files))
    if limit is not None:
        files = files[:limit]
    return files


def scan_file(path: str) -> dict:
    """Resolve one file; never raises for unreadable or CRS-less files."""
    row = {"file": path, "status": "ok", "source": None, "horizontal": None, "vertical": None, "detail": ""}
    try:
        src = read_las_vlrs(path)
    except (LaspyException, OSError, ValueError, EOFError) as e:
        row.update(status="unreadable_las", detail=str(e))
        return row
    slots = select_crs_vlrs(src.vlrs)
    row["source"] = crs_source(slots)
    try:
        epsg = resolve_slots(slots, src.has_wkt_crs)
    except CrsError as e:
        row.update(status=e.code, detail=str(e))
        return row
    row.update(horizontal=epsg.horizontal, vertical=epsg.vertical)
    return row


def write_csv(rows: List[dict], stream: TextIO) -> None:
    w = csv.DictWriter(stream, fieldnames=CSV_FIELDS)
    w.writeheader()
    w.writerows(rows)


def scan_files(files: List[str], fmt: str = "pretty") -> Tuple[List[dict], dict]:
    results = [scan_file(p) for p in files]
    agg = {"files": len(results), "outcomes": dict(Counter(r["status"] for r in results))}

    if fmt == "pretty":
        for r in results:
            name = os.path.basename(r["file"])
            if r["status"] == "ok":
                vert = f" + EPSG:{r['vertical']}" if r["vertical"] is not None else ""
                print(f"{name}: EPSG:{r['horizontal']}{vert} ({r['source']})")
            else:
                print(f"{name}: {r['status']} - {r['detail']}")
        print("\n--- aggregate ---")
        print(json.dumps(agg, indent=2))
    return results, agg


def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Report the EPSG codes stored in the projection VLRs of LAS/LAZ files.")
    ap.add_argument("--data-dir", default=os.path.join(os.getcwd(), "data"), help="Folder containing LAS/LAZ files")
    ap.add_argument("--pattern", default="*.las,*.laz,*.LAS,*.LAZ", help="Glob(s) for files, comma-separated")
    ap.add_argument("--limit", type=int, default=None, help="Max number of files")
    ap.add_argument("--format", choices=["pretty", "json", "csv"], default="pretty")
    ap.add_argument("--output", help="Optional path to write JSON/CSV output")
    args = ap.parse_args(argv)

    configure_logging()
    files = _collect_files(args.data_dir, args.pattern, args.limit)
    if not files:
        print("No files matched. Adjust --data-dir/--pattern.")
        sys.exit(1)

    results, agg = scan_files(files, fmt=args.format)

    if args.output:
        if args.format == "json":
            with open(args.output, "w") as f:
                json.dump({"aggregate": agg, "results": results}, f, indent=2)
            print(f"Wrote JSON to {args.output}")
        elif args.format == "csv":
            with open(args.output, "w", newline="") as f:
                write_csv(results, f)
            print(f"Wrote CSV to {args.output}")
    elif args.format == "json":
        print(json.dumps({"aggregate": agg, "results": results}, indent=2))
    elif args.format == "csv":
        write_csv(results, sys.stdout)


if __name__ == "__main__":
    main()
