import json
from pathlib import Path
import click
from slip_core.protocol import DEFAULT_CHUNK_SIZE
from .logic import verify_capture

@click.group()
def main():
    pass

@main.command("capture")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, show_default=True, type=click.IntRange(min=1))
def capture_cmd(path: Path, chunk_size: int):
    result = verify_capture(path, chunk_size=chunk_size)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        raise SystemExit(1)

if __name__ == "__main__":
    main()
