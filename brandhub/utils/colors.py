"""Color value parsing for palettes and generated documents."""
from __future__ import annotations

import re
from typing import Dict, Optional, Union

HEX_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def is_valid_hex(value: Optional[str]) -> bool:
    return bool(value and HEX_PATTERN.match(value))


def normalize_hex(value: str) -> str:
    """Expand #RGB to #RRGGBB and upper-case the digits."""
    if not is_valid_hex(value):
        raise ValueError(f"Invalid hex color: {value!r}")
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return "#" + digits.upper()


def hex_to_rgb(value: str) -> Dict[str, int]:
    digits = normalize_hex(value)[1:]
    return {"r": int(digits[0:2], 16), "g": int(digits[2:4], 16), "b": int(digits[4:6], 16)}


def _clamp(value: float, upper: int) -> int:
    return max(0, min(upper, int(round(value))))


def parse_rgb(value: Union[str, Dict, None]) -> Optional[Dict[str, int]]:
    """Accept {"r","g","b"} or strings like "rgb(128, 42, 2)" / "128 42 2"."""
    if value is None:
        return None
    if isinstance(value, dict):
        try:
            return {k: _clamp(float(value[k]), 255) for k in ("r", "g", "b")}
        except (KeyError, TypeError, ValueError):
            return None
    numbers = _NUMBER.findall(str(value))
    if len(numbers) < 3:
        return None
    r, g, b = (float(n) for n in numbers[:3])
    return {"r": _clamp(r, 255), "g": _clamp(g, 255), "b": _clamp(b, 255)}


def parse_cmyk(value: Union[str, Dict, None]) -> Optional[Dict[str, int]]:
    """Accept {"c","m","y","k"} or strings like "C0 M67 Y100 K50" / "0, 67, 100, 50"."""
    if value is None:
        return None
    if isinstance(value, dict):
        try:
            return {k: _clamp(float(value[k]), 100) for k in ("c", "m", "y", "k")}
        except (KeyError, TypeError, ValueError):
            return None
    numbers = _NUMBER.findall(str(value))
    if len(numbers) < 4:
        return None
    c, m, y, k = (float(n) for n in numbers[:4])
    return {"c": _clamp(c, 100), "m": _clamp(m, 100), "y": _clamp(y, 100), "k": _clamp(k, 100)}
