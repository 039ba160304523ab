"""
CSS color token validation

Pure functions that check a color string against the subset of CSS color
grammar accepted in declarative attributes, and normalize it.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

NAMED_COLORS = frozenset([
    'aliceblue', 'antiquewhite', 'aqua', 'aquamarine', 'azure', 'beige', 'bisque', 'black',
    'blanchedalmond', 'blue', 'blueviolet', 'brown', 'burlywood', 'cadetblue', 'chartreuse',
    'chocolate', 'coral', 'cornflowerblue', 'cornsilk', 'crimson', 'cyan', 'darkblue',
    'darkcyan', 'darkgoldenrod', 'darkgray', 'darkgrey', 'darkgreen', 'darkkhaki',
    'darkmagenta', 'darkolivegreen', 'darkorange', 'darkorchid', 'darkred', 'darksalmon',
    'darkseagreen', 'darkslateblue', 'darkslategray', 'darkslategrey', 'darkturquoise',
    'darkviolet', 'deeppink', 'deepskyblue', 'dimgray', 'dimgrey', 'dodgerblue', 'firebrick',
    'floralwhite', 'forestgreen', 'fuchsia', 'gainsboro', 'ghostwhite', 'gold', 'goldenrod',
    'gray', 'grey', 'green', 'greenyellow', 'honeydew', 'hotpink', 'indianred', 'indigo',
    'ivory', 'khaki', 'lavender', 'lavenderblush', 'lawngreen', 'lemonchiffon', 'lightblue',
    'lightcoral', 'lightcyan', 'lightgoldenrodyellow', 'lightgray', 'lightgrey', 'lightgreen',
    'lightpink', 'lightsalmon', 'lightseagreen', 'lightskyblue', 'lightslategray',
    'lightslategrey', 'lightsteelblue', 'lightyellow', 'lime', 'limegreen', 'linen', 'magenta',
    'maroon', 'mediumaquamarine', 'mediumblue', 'mediumorchid', 'mediumpurple',
    'mediumseagreen', 'mediumslateblue', 'mediumspringgreen', 'mediumturquoise',
    'mediumvioletred', 'midnightblue', 'mintcream', 'mistyrose', 'moccasin', 'navajowhite',
    'navy', 'oldlace', 'olive', 'olivedrab', 'orange', 'orangered', 'orchid', 'palegoldenrod',
    'palegreen', 'paleturquoise', 'palevioletred', 'papayawhip', 'peachpuff', 'peru', 'pink',
    'plum', 'powderblue', 'purple', 'rebeccapurple', 'red', 'rosybrown', 'royalblue',
    'saddlebrown', 'salmon', 'sandybrown', 'seagreen', 'seashell', 'sienna', 'silver',
    'skyblue', 'slateblue', 'slategray', 'slategrey', 'snow', 'springgreen', 'steelblue',
    'tan', 'teal', 'thistle', 'tomato', 'turquoise', 'violet', 'wheat', 'white', 'whitesmoke',
    'yellow', 'yellowgreen',
])

_VAR_RE = re.compile(r'^var\(--[\w-]+\)$')
_HEX_RE = re.compile(r'^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{4}|[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$')
_ALPHA = r'(?:,\s*(0|1|0?\.\d+|1\.0+)\s*)?'
_RGB_RE = re.compile(r'^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*' + _ALPHA + r'\)$', re.IGNORECASE)
_HSL_RE = re.compile(r'^hsla?\(\s*(\d{1,3})\s*,\s*(\d{1,3})%\s*,\s*(\d{1,3})%\s*' + _ALPHA + r'\)$', re.IGNORECASE)


@dataclass
class ColorValidation:
    """Result of validating a single color token"""
    is_valid: bool
    normalized: Optional[str] = None
    format: Optional[str] = None
    error: Optional[str] = None


@dataclass
class ColorListValidation:
    """Result of validating a list of color tokens"""
    is_valid: bool
    colors: List[str] = field(default_factory=list)
    errors: Dict[int, str] = field(default_factory=dict)
    error: Optional[str] = None


def _invalid(error: str, fmt: Optional[str] = None) -> ColorValidation:
    return ColorValidation(is_valid=False, format=fmt, error=error)


def validate_color(color: str) -> ColorValidation:
    """
    Validate and normalize a CSS color token

    Accepted forms:
    - hex with 3/4/6/8 digits, '#' optional (added when missing)
    - rgb()/rgba() with 0-255 channels and 0-1 alpha
    - hsl()/hsla() with 0-360 hue, 0-100% saturation/lightness, 0-1 alpha
    - named colors, currentColor, transparent
    - var(--custom-property)

    Args:
        color: Raw attribute text

    Returns:
        ColorValidation with normalized value on success, error text otherwise

    Example:
        validate_color("fff").normalized                 # "#fff"
        validate_color("rgb(300, 0, 0)").is_valid        # False
        validate_color("CurrentColor").normalized        # "currentColor"
    """
    if not isinstance(color, str) or not color.strip():
        return _invalid("Color must be a non-empty string")

    token = color.strip()
    lowered = token.lower()

    if _VAR_RE.match(token):
        return ColorValidation(True, token, "css-variable")

    if lowered == "currentcolor":
        return ColorValidation(True, "currentColor", "keyword")

    if lowered == "transparent":
        return ColorValidation(True, "transparent", "keyword")

    if _HEX_RE.match(token):
        normalized = token if token.startswith("#") else f"#{token}"
        return ColorValidation(True, normalized, "hex")

    match = _RGB_RE.match(token)
    if match:
        r, g, b, a = match.groups()
        fmt = "rgba" if a is not None else "rgb"
        if any(int(c) > 255 for c in (r, g, b)):
            return _invalid("RGB values must be between 0-255", fmt)
        if a is not None and not 0.0 <= float(a) <= 1.0:
            return _invalid("Alpha value must be between 0-1", fmt)
        return ColorValidation(True, token, fmt)

    match = _HSL_RE.match(token)
    if match:
        h, s, l, a = match.groups()
        fmt = "hsla" if a is not None else "hsl"
        if int(h) > 360:
            return _invalid("Hue value must be between 0-360", fmt)
        if int(s) > 100 or int(l) > 100:
            return _invalid("Saturation and lightness must be between 0-100", fmt)
        if a is not None and not 0.0 <= float(a) <= 1.0:
            return _invalid("Alpha value must be between 0-1", fmt)
        return ColorValidation(True, token, fmt)

    if lowered in NAMED_COLORS:
        return ColorValidation(True, lowered, "named")

    return _invalid(f"Invalid color format: {token}")


def split_color_list(text: str) -> List[str]:
    """
    Split a comma-delimited color list.

    Commas inside parentheses belong to the color (rgb(0, 0, 0)) and do not
    split. A text starting with '[' is parsed as a JSON array literal.

    Raises:
        ValueError: malformed JSON array or non-string array entries
    """
    stripped = text.strip()
    if stripped.startswith("["):
        parsed = json.loads(stripped)
        if not isinstance(parsed, list) or not all(isinstance(c, str) for c in parsed):
            raise ValueError("Color array must be a JSON array of strings")
        return [c.strip() for c in parsed]

    parts: List[str] = []
    depth = 0
    current = []
    for ch in stripped:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def validate_color_list(text: str, min_count: int = 2) -> ColorListValidation:
    """
    Validate a delimited string or JSON array of colors

    Args:
        text: '#f00, #0f0' or '["#f00", "rgb(0, 255, 0)"]'
        min_count: Minimum number of colors required

    Returns:
        ColorListValidation; `errors` maps list index → error for each invalid entry

    Example:
        validate_color_list("#f00, rgb(0, 255, 0)").colors   # ["#f00", "rgb(0, 255, 0)"]
        validate_color_list("#f00").is_valid                 # False (min_count=2)
    """
    if not isinstance(text, str) or not text.strip():
        return ColorListValidation(False, error="Colors must be a non-empty string or array")

    try:
        tokens = split_color_list(text)
    except ValueError as ex:
        return ColorListValidation(False, error=f"Invalid color array: {ex}")

    if len(tokens) < min_count:
        return ColorListValidation(
            False, error=f"At least {min_count} colors are required, got {len(tokens)}"
        )

    colors: List[str] = []
    errors: Dict[int, str] = {}
    for index, token in enumerate(tokens):
        result = validate_color(token)
        if result.is_valid:
            colors.append(result.normalized)
        else:
            errors[index] = result.error or "invalid"

    if errors:
        return ColorListValidation(False, colors=colors, errors=errors, error="Invalid colors in list")
    return ColorListValidation(True, colors=colors)


def color_format_suggestion(color: str) -> str:
    """
    Human hint for a rejected color value

    Example:
        color_format_suggestion("ff00ff")  # 'Did you mean "#ff00ff"? ...'
    """
    token = (color or "").strip()
    if re.match(r'^[0-9A-Fa-f]{3,8}$', token):
        return f'Did you mean "#{token}"? (hex colors need # prefix)'
    if "rgb" in token.lower():
        return "RGB format should be: rgb(255, 255, 255) or rgba(255, 255, 255, 0.5)"
    if "hsl" in token.lower():
        return "HSL format should be: hsl(360, 100%, 50%) or hsla(360, 100%, 50%, 0.5)"
    return "Use valid CSS color format: hex (#FFF), rgb/rgba, hsl/hsla, named color, or CSS variable"
