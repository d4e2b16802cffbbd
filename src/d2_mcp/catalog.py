"""Built-in theme and layout catalogs (from ``d2 themes`` and ``d2 layout``)."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Theme:
    id: int
    name: str


@dataclass(frozen=True)
class LayoutEngine:
    name: str
    description: str
    features: Tuple[str, ...]


LIGHT_THEMES: Tuple[Theme, ...] = (
    Theme(0, "Neutral Default"),
    Theme(1, "Neutral Grey"),
    Theme(3, "Flagship Terrastruct"),
    Theme(4, "Cool Classics"),
    Theme(5, "Mixed Berry Blue"),
    Theme(6, "Grape Soda"),
    Theme(7, "Aubergine"),
    Theme(8, "Colorblind Clear"),
    Theme(100, "Vanilla Nitro Cola"),
    Theme(101, "Orange Creamsicle"),
    Theme(102, "Shirley Temple"),
    Theme(103, "Earth Tones"),
    Theme(104, "Everglade Green"),
    Theme(105, "Buttered Toast"),
    Theme(300, "Terminal"),
    Theme(301, "Terminal Grayscale"),
    Theme(302, "Origami"),
    Theme(303, "C4"),
)

DARK_THEMES: Tuple[Theme, ...] = (
    Theme(200, "Dark Mauve"),
    Theme(201, "Dark Flagship Terrastruct"),
)

LAYOUTS: Tuple[LayoutEngine, ...] = (
    LayoutEngine(
        name="dagre",
        description="Default layout. Fast directed graph using the Graphviz DOT algorithm. Best for most diagrams.",
        features=("near to constants", "direction control", "fast rendering"),
    ),
    LayoutEngine(
        name="elk",
        description="Eclipse Layout Kernel. More mature algorithm, better for complex graphs.",
        features=(
            "near to constants",
            "ancestor-to-descendant connections",
            "width/height on containers",
            "direction control",
        ),
    ),
)

LAYOUT_NAMES = tuple(layout.name for layout in LAYOUTS)


def themes_payload() -> dict:
    return {
        "light": [{"id": t.id, "name": t.name} for t in LIGHT_THEMES],
        "dark": [{"id": t.id, "name": t.name} for t in DARK_THEMES],
    }


def layouts_payload() -> dict:
    return {
        "layouts": [
            {"name": l.name, "description": l.description, "features": list(l.features)}
            for l in LAYOUTS
        ]
    }
