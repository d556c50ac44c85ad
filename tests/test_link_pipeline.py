import json
import os
import subprocess
import sys
from pathlib import Path

REPO = Path(__file__).resolve().parents[1]


def run(args, cwd):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO / "src"), env.get("PYTHONPATH")]))
    return subprocess.run([sys.executable, *args], cwd=cwd, check=False, capture_output=True, text=True, env=env)


def test_simulate_compile_verify_and_corrupt(tmp_path):
    captures = tmp_path / "captures"
    out = tmp_path / "out"

    # Clean capture
    r = run(["tools/sim_link.py", str(captures), "--runs", "1", "--seed", "7"], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout

    cap = next(captures.glob("capture-*"))
    meta = json.loads((cap / "meta.json").read_text(encoding="utf-8"))
    assert meta["corrupt_offset"] is None

    r = run(["-m", "slip_compile.cli", str(cap), str(out), "--chunk-size", "61"], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout
    assert f"Packets: {meta['packets']}" in r.stdout

    evidence = out / "evidence" / "packets.parquet"
    assert evidence.exists()
    assert evidence.stat().st_size > 0

    r = run(["-m", "slip_verify.cli", "capture", str(cap), "--chunk-size", "17"], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout
    result = json.loads(r.stdout)
    assert result["status"] == "PASS"
    assert result["packets"] == meta["packets"]

    # Corrupt one escape sequence and ensure failure
    r = run(["scripts/corrupt_one_byte.py", str(cap / "link.bin")], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout

    r = run(["-m", "slip_compile.cli", str(cap), str(tmp_path / "out_fail")], cwd=REPO)
    assert r.returncode != 0
    assert r.stdout.strip().splitlines()[-1].startswith("FATAL:")

    r = run(["-m", "slip_verify.cli", "capture", str(cap)], cwd=REPO)
    assert r.returncode != 0
    assert json.loads(r.stdout)["errors"][0]["code"] == "E_INVALID_ENCODING"

    # Lenient compile drops only the broken frame
    r = run(["-m", "slip_compile.cli", str(cap), str(tmp_path / "out_skip"), "--skip-bad-frames"], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout
    assert f"Packets: {meta['packets'] - 1}" in r.stdout


def test_simulator_corrupt_flag(tmp_path):
    r = run(["tools/sim_link.py", str(tmp_path), "--corrupt", "--seed", "3"], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout

    cap = next(tmp_path.glob("capture-*"))
    meta = json.loads((cap / "meta.json").read_text(encoding="utf-8"))
    assert meta["corrupt_offset"] is not None

    r = run(["-m", "slip_verify.cli", "capture", str(cap)], cwd=REPO)
    assert r.returncode != 0
    assert json.loads(r.stdout)["status"] == "FAIL"
