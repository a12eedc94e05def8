# src/auditor/dom/colors.py
import re
from typing import Dict, Optional, Tuple, Iterable

from .constants import CSS_NAMED_COLORS, CLASS_COLOR_TOKENS

_RGB_RE = re.compile(r"rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[\d.]+\s*)?\)")
_HEX_RE = re.compile(r"^#(?:[0-9a-f]{3}|[0-9a-f]{6})$")


def relative_luminance(r: int, g: int, b: int) -> float:
    """sRGB relative luminance per WCAG 2.x."""
    def _ch(c: int) -> float:
        v = c / 255.0
        return v / 12.92 if v <= 0.04045 else ((v + 0.055) / 1.055) ** 2.4
    return 0.2126 * _ch(r) + 0.7152 * _ch(g) + 0.0722 * _ch(b)


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    h = hex_color.strip().lstrip("#")
    if len(h) == 3:
        h = h[0] * 2 + h[1] * 2 + h[2] * 2
    if len(h) != 6:
        return None
    try:
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    except ValueError:
        return None


def contrast_ratio(color1: str, color2: str) -> Optional[float]:
    """WCAG contrast ratio between two hex colours. Returns None on parse failure."""
    rgb1 = hex_to_rgb(color1)
    rgb2 = hex_to_rgb(color2)
    if rgb1 is None or rgb2 is None:
        return None
    l1 = relative_luminance(*rgb1)
    l2 = relative_luminance(*rgb2)
    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def css_color_to_hex(val: str) -> Optional[str]:
    """Convert a CSS colour value to '#rrggbb'. Returns None if unparseable."""
    val = val.strip().lower()
    if val in CSS_NAMED_COLORS:
        return CSS_NAMED_COLORS[val]
    if _HEX_RE.match(val):
        rgb = hex_to_rgb(val)
        return "#{:02x}{:02x}{:02x}".format(*rgb) if rgb else None
    m = _RGB_RE.match(val)
    if m:
        r, g, b = (min(int(x), 255) for x in m.groups())
        return "#{:02x}{:02x}{:02x}".format(r, g, b)
    return None


def parse_inline_style(style: str) -> Dict[str, str]:
    """Splits a style attribute into a {property: value} mapping (lower-cased property names)."""
    declarations = {}
    for part in (style or "").split(";"):
        if ":" not in part:
            continue
        prop, _, value = part.partition(":")
        prop = prop.strip().lower()
        if prop:
            declarations[prop] = value.replace("!important", "").strip()
    return declarations


def declared_colors(style: Optional[str], classes: Iterable[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (foreground, background) declared directly on an element, from the
    inline style first and recognised 'text-*' / 'bg-*' class tokens second.
    """
    fg = bg = None
    decls = parse_inline_style(style or "")

    if "color" in decls:
        fg = css_color_to_hex(decls["color"])
    if "background-color" in decls:
        bg = css_color_to_hex(decls["background-color"])
    elif "background" in decls:
        # Only a plain colour shorthand is understood
        bg = css_color_to_hex(decls["background"])

    for token in classes:
        if fg is None and token.startswith("text-"):
            fg = CLASS_COLOR_TOKENS.get(token[len("text-"):])
        elif bg is None and token.startswith("bg-"):
            bg = CLASS_COLOR_TOKENS.get(token[len("bg-"):])

    return fg, bg
