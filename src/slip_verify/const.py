from slip_core.errors import ERRORS as CODEC_ERRORS

ERRORS = {
  "E_LAYOUT_MISSING": "Required capture file missing",
  "E_PACKETS_JSON": "Expected packet list invalid",
  "E_TRUNCATED_FRAME": "Capture ends inside an unterminated frame",
  "E_PACKET_MISMATCH": "Decoded packets do not match expected packet list",
  **CODEC_ERRORS,
}
