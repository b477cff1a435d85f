"""True-color ANSI escape construction."""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum

# Strict #RRGGBB form
HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

# All attributes off
RESET = "\033[0m"


class Layer(Enum):
    """Which half of a cell a color applies to.

    The value is the SGR parameter that selects a 24-bit color for the layer.
    """

    FOREGROUND = 38
    BACKGROUND = 48


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """Parse a ``#RRGGBB`` string into an RGB triple.

    Args:
        value: Hex color string

    Returns:
        (red, green, blue) components, each 0-255

    Raises:
        ValueError: If value is not exactly ``#`` followed by six hex digits
    """
    match = HEX_COLOR.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"invalid color: '{value}'")

    red, green, blue = (int(part, 16) for part in match.groups())
    return red, green, blue


def true_color_sequence(value: str, layer: Layer = Layer.FOREGROUND) -> str:
    """Convert a hex color to a true-color escape prefix.

    Examples:
        >>> true_color_sequence("#ff0000")
        '\\x1b[38;2;255;0;0m'
        >>> true_color_sequence("#000080", Layer.BACKGROUND)
        '\\x1b[48;2;0;0;128m'
    """
    red, green, blue = parse_hex_color(value)
    return f"\033[{layer.value};2;{red};{green};{blue}m"


def build_color_table(
    foreground: Mapping[str, str] | None = None,
    background: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Fold foreground and background color mappings into one table.

    A keyword present in both mappings gets the foreground sequence followed
    by the background sequence.

    Args:
        foreground: Keyword to hex color for the foreground layer
        background: Keyword to hex color for the background layer

    Returns:
        Keyword to escape sequence mapping

    Raises:
        ValueError: On the first malformed hex color
    """
    table: dict[str, str] = {}

    for layer, colors in ((Layer.FOREGROUND, foreground), (Layer.BACKGROUND, background)):
        for keyword, hex_color in (colors or {}).items():
            table[keyword] = table.get(keyword, "") + true_color_sequence(hex_color, layer)

    return table
