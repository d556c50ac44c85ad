"""SLIP link compiler - Capture to packet evidence."""
from __future__ import annotations

from pathlib import Path

import click

from slip_compile.streams import compile_packets_evidence
from slip_core.protocol import DEFAULT_CHUNK_SIZE


def compile_capture(
    capture_path: Path,
    out_path: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    skip_bad_frames: bool = False,
) -> dict:
    """Decode a link capture and write its packet evidence."""
    print(f"Compiling link capture: {capture_path}")

    on_error = "skip" if skip_bad_frames else "raise"
    stats = compile_packets_evidence(capture_path, out_path, chunk_size=chunk_size, on_error=on_error)

    print(f"PASS: Evidence generated at {out_path}")
    print(f"  Chunks: {stats['chunks']}")
    print(f"  Packets: {stats['packets']}")
    print(f"  Bytes: {stats['bytes_read']}")
    if stats["truncated_bytes"]:
        print(f"  Truncated: {stats['truncated_bytes']}")
    return stats


@click.command()
@click.argument("capture", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("out", type=click.Path(path_type=Path))
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, show_default=True, type=click.IntRange(min=1),
              help="Bytes handed to the decoder per read")
@click.option("--skip-bad-frames", is_flag=True, help="Drop frames with invalid escapes instead of failing")
def main(capture: Path, out: Path, chunk_size: int, skip_bad_frames: bool) -> None:
    """Compile a link capture into packet evidence."""
    try:
        compile_capture(capture, out, chunk_size=chunk_size, skip_bad_frames=skip_bad_frames)
    except Exception as e:
        # Fail closed, with a single-line reason.
        print(f"FATAL: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
