import re

from place_ingest.errors import NumericParseError

_HEX = re.compile(r"[0-9A-Fa-f]+")


def read_color(text: str) -> int:
    # '#FF4500' -> 0xFF4500, packed value kept as-is
    digits = text[1:]
    if not _HEX.fullmatch(digits):
        raise NumericParseError(f"bad color {text!r}")
    value = int(digits, 16)
    if value > 0xFFFFFFFF:
        raise NumericParseError(f"color wider than 32 bits: {text!r}")
    return value
