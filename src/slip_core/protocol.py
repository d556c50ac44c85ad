"""SLIP wire constants.

Single source of truth for the reserved byte values and capture layout.
Keep this file stable. Encoder, decoder and tools must remain synchronized.
"""

# Reserved bytes (RFC 1055)
END = 0xC0      # Frame delimiter
ESC = 0xDB      # Escape marker
ESC_END = 0xDC  # ESC ESC_END stands in for a literal END
ESC_ESC = 0xDD  # ESC ESC_ESC stands in for a literal ESC

# Smallest possible frame: [END | END]
MIN_FRAME_LEN = 2

# Default read size when scanning a link capture
DEFAULT_CHUNK_SIZE = 4096

# Remainder size beyond which a scanner warns that frames are not closing
DEFAULT_MAX_PENDING_BYTES = 1024 * 1024  # 1 MiB

# Capture directory layout
CAPTURE_STREAM_FILE = "link.bin"
CAPTURE_PACKETS_FILE = "packets.jsonl"
CAPTURE_META_FILE = "meta.json"
