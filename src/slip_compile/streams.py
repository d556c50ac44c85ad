from __future__ import annotations

import hashlib
import json
from pathlib import Path
from warnings import warn

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from slip_core.errors import TruncatedFrameWarning
from slip_core.protocol import (
    END,
    CAPTURE_STREAM_FILE,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_PENDING_BYTES,
)
from slip_core.stream import decode_stream

PACKETS_SCHEMA = pa.schema(
    [
        ("packet_id", pa.int64()),
        ("chunk", pa.int64()),
        ("length", pa.int32()),
        ("status", pa.string()),
        ("content_hash", pa.string()),
    ]
)


class LinkScanner:
    """Chunked reader for a captured SLIP link: disk is truth.

    - The stream is read in fixed-size chunks, as a serial driver would hand it over.
    - The remainder of each decode call is threaded into the next chunk.
    """

    def __init__(
        self,
        capture_path: Path,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        on_error: str = "raise",
    ):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.capture_path = Path(capture_path)
        self.chunk_size = chunk_size
        self.on_error = on_error
        self.packets: list[dict] = []
        self.remainder = b""
        self.scan_stats = {
            "chunks": 0,
            "packets": 0,
            "bytes_read": 0,
            "max_pending": 0,
            "truncated_bytes": 0,
        }

    @property
    def stream_path(self) -> Path:
        return self.capture_path / CAPTURE_STREAM_FILE

    def scan(self) -> list[dict]:
        """Decode the whole capture and return one record per packet."""
        with open(self.stream_path, "rb") as f:
            while True:
                chunk = f.read(self.chunk_size)
                # Clean EOF
                if not chunk:
                    break
                self._feed(chunk)

        self._finish()
        return self.packets

    def _feed(self, chunk: bytes) -> None:
        chunk_idx = self.scan_stats["chunks"]
        self.scan_stats["chunks"] += 1
        self.scan_stats["bytes_read"] += len(chunk)

        decoded, self.remainder = decode_stream(self.remainder + chunk, self.on_error)
        for payload in decoded:
            self.packets.append(
                {
                    "packet_id": len(self.packets),
                    "chunk": chunk_idx,
                    "length": len(payload),
                    "status": "DECODED",
                    "content_hash": hashlib.sha256(payload).hexdigest(),
                }
            )
        self.scan_stats["packets"] = len(self.packets)

        pending = len(self.remainder)
        if pending > self.scan_stats["max_pending"]:
            self.scan_stats["max_pending"] = pending
        if pending > DEFAULT_MAX_PENDING_BYTES:
            warn(f"Pending frame data {pending} bytes after chunk {chunk_idx}; frames are not closing")

    def _finish(self) -> None:
        tail = self.remainder
        # A lone opening END carries no data.
        if END in tail and tail.strip(bytes((END,))):
            self.scan_stats["truncated_bytes"] = len(tail)
            warn(
                f"Capture ends inside a frame: {len(tail)} bytes undecoded",
                TruncatedFrameWarning,
            )

    def get_scan_stats(self) -> dict:
        return dict(self.scan_stats)


def compile_packets_evidence(
    capture_path: Path,
    out_path: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_error: str = "raise",
) -> dict:
    """Build evidence/packets.parquet and summary.json for a link capture."""
    scanner = LinkScanner(capture_path, chunk_size=chunk_size, on_error=on_error)
    packets = scanner.scan()
    stats = scanner.get_scan_stats()

    out_path = Path(out_path)
    (out_path / "evidence").mkdir(parents=True, exist_ok=True)

    summary = {"capture": Path(capture_path).name, "chunk_size": chunk_size, **stats}
    (out_path / "summary.json").write_bytes(
        json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    )

    df = pd.DataFrame(packets, columns=PACKETS_SCHEMA.names)
    if df.empty:
        table = PACKETS_SCHEMA.empty_table()
    else:
        table = pa.Table.from_pandas(df, schema=PACKETS_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path / "evidence/packets.parquet")
    return stats
