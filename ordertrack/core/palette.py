"""Background colours for production units, matched by substring in priority order."""
from __future__ import annotations

DEFAULT_COLOR = "#fff"

UNIT_COLORS: list[tuple[str, str]] = [
    ("U1", "#E3F2FD"),
    ("U2", "#E8F5E9"),
    ("U3", "#FCE4EC"),
    ("U4", "#F3E5F5"),
    ("U5", "#b4a9b66e"),
    ("HUMUS", "#FFF3E0"),
    ("TRILOK", "#FFFDE7"),
    ("Raj Kn", "#8fcfcca6"),
    ("RICHMO", "#E8EAF6"),
    ("Sample", "#eccb85a8"),
    ("Humus", "#f3b0b0a8"),
    ("Stock", "#f3949486"),
    ("Prime", "#F9FBE7"),
    ("Indoli", "#d4e2589a"),
]


def unit_color(unit: str | None) -> str:
    if not unit:
        return DEFAULT_COLOR
    for token, color in UNIT_COLORS:
        if token in unit:
            return color
    return DEFAULT_COLOR
