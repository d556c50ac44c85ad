import sys
from pathlib import Path

ESC = 0xDB

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_one_byte.py <link.bin>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())

    # Replace the byte after the first ESC with one that is neither
    # ESC_END nor ESC_ESC, so the enclosing frame no longer decodes.
    idx = b.find(bytes([ESC]))
    if idx == -1 or idx + 1 >= len(b):
        print("No escape sequence to corrupt.")
        raise SystemExit(2)

    b[idx + 1] = 0x00
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx + 1} in {p}")

if __name__ == "__main__":
    main()
