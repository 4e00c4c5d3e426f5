"""
Color helpers for event chips and bars.
"""

import re
from typing import Optional

_RGB_RE = re.compile(r"rgb\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)", re.IGNORECASE)


def _hex_to_rgb(value: str) -> Optional[tuple[int, int, int]]:
    digits = value.lstrip('#')
    try:
        if len(digits) == 3:
            return tuple(int(ch * 2, 16) for ch in digits)
        if len(digits) == 6:
            return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None
    return None


def parse_color(color: Optional[str]) -> Optional[tuple[int, int, int]]:
    """Parse ``#rgb``, ``#rrggbb`` or ``rgb(r, g, b)``; None if unrecognized."""
    if not color:
        return None
    color = color.strip()
    if color.startswith('#'):
        return _hex_to_rgb(color)
    match = _RGB_RE.match(color)
    if match:
        return tuple(int(match.group(i)) for i in (1, 2, 3))
    return None


def contrast_text(color: Optional[str]) -> Optional[str]:
    """
    Pick black or white text for a background color (YIQ brightness).

    Returns None when the color cannot be parsed.
    """
    rgb = parse_color(color)
    if rgb is None:
        return None
    r, g, b = rgb
    yiq = (r * 299 + g * 587 + b * 114) / 1000
    return "black" if yiq >= 128 else "white"

