"""Summarize compiled packet evidence - packet size distribution per chunk."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query.py <evidence_out> [min_length]")
        print("Example: python query.py out/ 64")
        sys.exit(1)

    out = Path(sys.argv[1])
    min_length = int(sys.argv[2]) if len(sys.argv) > 2 else 0

    df = pd.read_parquet(out / "evidence" / "packets.parquet")
    df = df[df["length"] >= min_length]

    print(f"--- Packets with length >= {min_length} ---\n")

    if df.empty:
        print("No packets found.")
        return

    per_chunk = df.groupby("chunk")["length"].agg(["count", "sum", "max"])
    for chunk, row in per_chunk.iterrows():
        print(f"CHUNK {chunk}: {row['count']} packets, {row['sum']} bytes (max {row['max']})")

    dupes = df[df.duplicated("content_hash", keep=False)]
    if not dupes.empty:
        print(f"\nDuplicate payloads: {dupes['content_hash'].nunique()}")


if __name__ == "__main__":
    main()
