"""
Viewport parameters for a Mandelbrot render.

Parameters arrive as a URL-fragment style string such as
``#w=800&h=600&x=-0.5&y=0&mag=1.5&limit=1000``. Parsing is total:
any key that is missing or does not parse falls back to its default,
so resolving never fails. Use validate_params() at the boundary to
reject values the renderer cannot work with (zero sizes and the like).
"""

import math
import re
from dataclasses import dataclass
from urllib.parse import parse_qsl


@dataclass(frozen=True)
class ViewParams:
    """Resolved render configuration."""
    width: int = 800
    height: int = 600
    center_x: float = -0.5
    center_y: float = 0.0
    magnification: float = 1.5
    limit: int = 1000

    @property
    def center(self):
        return (self.center_x, self.center_y)

    @property
    def buffer_size(self):
        """Length in bytes of the RGBA buffer for this viewport."""
        return self.width * self.height * 4


DEFAULTS = ViewParams()

# Integer fields are 32-bit signed; anything wider counts as malformed.
INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

# No whitespace, no '_' separators, ASCII digits only
_INT_RE = re.compile(r'[+-]?[0-9]+')
_FLOAT_RE = re.compile(
    r'[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)',
    re.IGNORECASE,
)


def parse_int32(raw):
    """Parse a strict decimal integer in the 32-bit signed range."""
    if not _INT_RE.fullmatch(raw):
        raise ValueError(f"not an integer: {raw!r}")
    value = int(raw)
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"integer out of range: {raw!r}")
    return value


def parse_float(raw):
    """Parse a strict decimal float (inf and nan spelled out are allowed)."""
    if not _FLOAT_RE.fullmatch(raw):
        raise ValueError(f"not a number: {raw!r}")
    return float(raw)


# Fragment key -> (field name, parser)
PARAM_KEYS = {
    'w': ('width', parse_int32),
    'h': ('height', parse_int32),
    'x': ('center_x', parse_float),
    'y': ('center_y', parse_float),
    'mag': ('magnification', parse_float),
    'limit': ('limit', parse_int32),
}


def _parse_or_default(raw, parser, default):
    if raw is None:
        return default
    try:
        return parser(raw)
    except (TypeError, ValueError):
        return default


def resolve_params(mapping):
    """
    Build a ViewParams from a mapping of raw string values.

    Args:
        mapping: dict-like of fragment key -> raw string (keys w, h, x, y,
            mag, limit). Unknown keys are ignored.

    Returns:
        A fully populated ViewParams. Never raises.
    """
    values = {}
    for key, (field_name, parser) in PARAM_KEYS.items():
        default = getattr(DEFAULTS, field_name)
        values[field_name] = _parse_or_default(mapping.get(key), parser, default)
    return ViewParams(**values)


def parse_fragment(text):
    """
    Split a form-encoded fragment into a dict.

    Leading '#' characters are dropped. Blank values are kept (they
    fail to parse later and so pick up the default). When a key repeats,
    the last value wins.
    """
    text = (text or '').lstrip('#')
    return dict(parse_qsl(text, keep_blank_values=True))


def params_from_fragment(text):
    """Resolve ViewParams straight from a fragment string."""
    return resolve_params(parse_fragment(text))


def validate_params(params):
    """
    Reject parameters the renderer cannot handle.

    Resolution itself never fails, but a caller can still ask for a
    zero-sized image or a non-positive magnification explicitly. The
    step size is undefined for those, so they are refused here before
    any buffer is allocated.

    Raises:
        ValueError naming the first offending field.
    """
    if params.width <= 0:
        raise ValueError(f"width must be positive, got {params.width}")
    if params.height <= 0:
        raise ValueError(f"height must be positive, got {params.height}")
    if not math.isfinite(params.magnification) or params.magnification <= 0:
        raise ValueError(
            f"magnification must be a positive finite number, got {params.magnification}"
        )
    if not (math.isfinite(params.center_x) and math.isfinite(params.center_y)):
        raise ValueError(
            f"center must be finite, got ({params.center_x}, {params.center_y})"
        )
    if params.limit < 0:
        raise ValueError(f"limit must be >= 0, got {params.limit}")
    for name in ('width', 'height', 'limit'):
        if getattr(params, name) > INT32_MAX:
            raise ValueError(f"{name} must be at most {INT32_MAX}, got {getattr(params, name)}")
    return params


def format_title(params, prefix="Mandelbrot2"):
    """Title line shown above the rendered image."""
    return (
        f"{prefix} x={params.center_x}, y={params.center_y}, "
        f"mag={params.magnification}, limit={params.limit}"
    )
