from __future__ import annotations

import hashlib, json, random, uuid
from datetime import datetime, timezone
from pathlib import Path

from slip_core import encode
from slip_core.protocol import (
    END,
    ESC,
    CAPTURE_STREAM_FILE,
    CAPTURE_PACKETS_FILE,
    CAPTURE_META_FILE,
)

# --- CONFIGURATION ---
PACKETS_PER_CAPTURE = 200
MAX_PAYLOAD = 300
RESERVED_BIAS = 0.15     # Share of payload bytes forced to END/ESC
LINE_NOISE = bytes([0xA1, 0xA2, 0xA3])  # Garbage before the first frame
LEAD_IN = bytes([END])  # Extra delimiter; the first frame opens END END

def random_payload(rng: random.Random) -> bytes:
    n = rng.randint(1, MAX_PAYLOAD)
    out = bytearray()
    for _ in range(n):
        if rng.random() < RESERVED_BIAS:
            out.append(rng.choice([END, ESC]))
        else:
            out.append(rng.randrange(256))
    return bytes(out)

def corrupt_escape(stream: bytearray) -> int:
    """Break the first escape sequence. Returns the offset, or -1 if none."""
    idx = stream.find(bytes([ESC]))
    if idx == -1 or idx + 1 >= len(stream):
        return -1
    stream[idx + 1] = 0x00
    return idx

def generate_capture(out_dir, corrupt=False, seed=None) -> Path:
    cap_id = str(uuid.uuid4())
    rng = random.Random(seed)
    path = Path(out_dir) / f"capture-{cap_id[:8]}"
    path.mkdir(parents=True, exist_ok=True)

    stream = bytearray(LINE_NOISE + LEAD_IN)
    expected = []
    for seq in range(PACKETS_PER_CAPTURE):
        payload = random_payload(rng)
        stream += encode(payload)
        expected.append({"seq": seq, "length": len(payload), "sha256": hashlib.sha256(payload).hexdigest()})

    corrupt_at = corrupt_escape(stream) if corrupt else -1

    (path / CAPTURE_STREAM_FILE).write_bytes(bytes(stream))
    with open(path / CAPTURE_PACKETS_FILE, "wb") as f:
        for rec in expected:
            f.write(json.dumps(rec, sort_keys=True, separators=(",", ":")).encode("utf-8") + b"\n")

    (path / CAPTURE_META_FILE).write_text(json.dumps({
        "capture_id": cap_id,
        "seed": seed,
        "packets": len(expected),
        "stream_bytes": len(stream),
        "corrupt_offset": corrupt_at if corrupt_at != -1 else None,
        "created_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
    }, indent=2) + "\n", encoding="utf-8")

    print(f"GENERATED: {path} (Corrupt={corrupt})")
    return path

if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/sim_link.py OUT_DIR [--runs N] [--corrupt] [--seed S]

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    def pop_value(arg_list: list[str], flag: str) -> tuple[str | None, list[str]]:
        """Remove a valued option from an argv-style list."""
        if flag not in arg_list:
            return None, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return arg_list[i + 1], arg_list[:i] + arg_list[i + 2:]

    corrupt, args = pop_flag(args, "--corrupt")
    runs, args = pop_value(args, "--runs")
    seed, args = pop_value(args, "--seed")

    out = args[0] if len(args) > 0 else "captures"
    base_seed = int(seed) if seed is not None else None
    for i in range(int(runs) if runs is not None else 1):
        generate_capture(out, corrupt=corrupt, seed=None if base_seed is None else base_seed + i)
