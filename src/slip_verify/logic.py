import json
from pathlib import Path
from slip_core.errors import SlipError
from slip_core.protocol import CAPTURE_STREAM_FILE, CAPTURE_PACKETS_FILE, DEFAULT_CHUNK_SIZE
from slip_compile.streams import LinkScanner
from .const import ERRORS

def _fail(errors: list) -> dict:
    return {"status":"FAIL","error_count":len(errors),"errors":errors}

def _load_expected(path: Path) -> list[dict]:
    expected = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        rec = json.loads(line)
        expected.append({"seq": int(rec["seq"]), "length": int(rec["length"]), "sha256": str(rec["sha256"])})
    return expected

def verify_capture(capture_dir: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> dict:
    errors = []
    stream_path = capture_dir / CAPTURE_STREAM_FILE
    packets_path = capture_dir / CAPTURE_PACKETS_FILE

    for p in [stream_path, packets_path]:
        if not p.exists():
            errors.append({"code":"E_LAYOUT_MISSING","message":ERRORS["E_LAYOUT_MISSING"],"path":str(p)})
            return _fail(errors)

    try:
        expected = _load_expected(packets_path)
    except (ValueError, KeyError, TypeError) as e:
        errors.append({"code":"E_PACKETS_JSON","message":ERRORS["E_PACKETS_JSON"],"detail":str(e)})
        return _fail(errors)

    # Strict decode: one bad frame fails the capture.
    scanner = LinkScanner(capture_dir, chunk_size=chunk_size, on_error="raise")
    try:
        decoded = scanner.scan()
    except SlipError as e:
        err = {"code":e.code,"message":ERRORS[e.code],"detail":str(e)}
        err["chunk"] = scanner.scan_stats["chunks"] - 1
        errors.append(err)
        return _fail(errors)

    stats = scanner.get_scan_stats()
    if stats["truncated_bytes"]:
        errors.append({"code":"E_TRUNCATED_FRAME","message":ERRORS["E_TRUNCATED_FRAME"],"bytes":stats["truncated_bytes"]})
        return _fail(errors)

    if len(decoded) != len(expected):
        errors.append({"code":"E_PACKET_MISMATCH","message":ERRORS["E_PACKET_MISMATCH"],
                       "expected_count":len(expected),"decoded_count":len(decoded)})
        return _fail(errors)

    for got, exp in zip(decoded, expected):
        if got["length"] != exp["length"] or got["content_hash"] != exp["sha256"]:
            errors.append({"code":"E_PACKET_MISMATCH","message":ERRORS["E_PACKET_MISMATCH"],
                           "seq":exp["seq"],"expected":exp["sha256"],"computed":got["content_hash"]})
            return _fail(errors)

    return {"status":"PASS","error_count":0,"errors":[],"packets":len(decoded)}
