"""Post-processing for rendered SVG output."""

import re

# Each block holds a base64 WOFF subset (~50-200 KB). Without it the SVG
# still displays but falls back to system fonts.
_FONT_FACE = re.compile(r"@font-face\s*\{[^{}]*\}")
_BLANK_RUNS = re.compile(r"\n{3,}")


def strip_font_faces(svg: str) -> str:
    """Remove embedded ``@font-face`` blocks and collapse leftover blank lines."""
    while True:
        stripped = _FONT_FACE.sub("", svg)
        if stripped == svg:
            break
        svg = stripped
    return _BLANK_RUNS.sub("\n\n", svg)
