"""shields.io badge URL construction.

Only the URL string is built here; the image itself is rendered by the
external badge provider.
"""

from __future__ import annotations

import re
from urllib.parse import quote


DEFAULT_BASE_URL = 'https://img.shields.io/badge'
DEFAULT_LABEL = 'visitors'
DEFAULT_COLOR = '0e75b6'
DEFAULT_STYLE = 'flat'

BADGE_STYLES = ('flat', 'flat-square', 'plastic', 'for-the-badge', 'social')

_COLOR_RE = re.compile(r'^[A-Za-z0-9]{1,32}$')

# Characters JavaScript's encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def normalize_style(style: str | None, default: str = DEFAULT_STYLE) -> str:
    """Known shields.io style, or ``default`` for anything else."""
    value = (style or '').strip().lower()
    return value if value in BADGE_STYLES else default


def normalize_color(color: str | None, default: str = DEFAULT_COLOR) -> str:
    """Hex or named color without a leading ``#``, or ``default`` when unusable."""
    value = (color or '').strip().lstrip('#')
    return value if _COLOR_RE.match(value) else default


def build_badge_url(
    label: str,
    count: int,
    color: str = DEFAULT_COLOR,
    style: str = DEFAULT_STYLE,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    encoded_label = quote(label, safe=_URI_COMPONENT_SAFE)
    return f"{base_url.rstrip('/')}/{encoded_label}-{int(count)}-{color}?style={style}"
