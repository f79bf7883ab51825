"""Color-order parsing and start/end gradient tables.

The chart colors each segment from its start color to its end color. Only the
first two entries of a color order are used; they are interpolated channel by
channel into a fixed-length table whose first row is the start color and whose
last row is the end color.
"""

from __future__ import annotations

from collections.abc import Sequence
from numbers import Real
from typing import Any

import matplotlib.colors as mcolors
import numpy as np
import plotly.colors as pc

GRADIENT_LENGTH = 255


def default_color_order() -> np.ndarray:
    """Return the first two colors of Plotly's default palette as RGB floats."""
    return parse_color_order(pc.DEFAULT_PLOTLY_COLORS[:2])


def _parse_one(value: Any) -> tuple[float, float, float]:
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith(("rgb(", "rgba(")):
            try:
                channels = pc.unlabel_rgb(text)
            except (ValueError, IndexError) as exc:
                raise ValueError(f"Invalid rgb color {value!r}") from exc
            channels = tuple(channels)[:3]
            if len(channels) != 3 or any(not 0 <= c <= 255 for c in channels):
                raise ValueError(f"Invalid rgb color {value!r}")
            return tuple(float(c) / 255.0 for c in channels)  # type: ignore[return-value]
        # Hex strings, CSS names and single-letter shorthands ("r", "b", ...).
        try:
            return tuple(float(c) for c in mcolors.to_rgb(text))  # type: ignore[return-value]
        except ValueError as exc:
            raise ValueError(f"Unrecognized color {value!r}") from exc

    channels = tuple(value)
    if len(channels) != 3 or not all(isinstance(c, Real) and not isinstance(c, bool) for c in channels):
        raise ValueError(f"RGB triplets must have three numeric values, got {value!r}")
    rgb = tuple(float(c) for c in channels)
    if any(not 0.0 <= c <= 1.0 for c in rgb):
        raise ValueError(f"RGB triplet values must be in the range [0, 1], got {value!r}")
    return rgb  # type: ignore[return-value]


def parse_color_order(value: Any) -> np.ndarray:
    """Parse ``value`` into a ``K x 3`` array of RGB floats in ``[0, 1]``.

    Accepted forms are a single color or a sequence of colors, where a color
    is an RGB triplet of floats in ``[0, 1]``, a ``#RRGGBB``/``#RGB`` hex
    string, a color name (``"red"``, ``"b"``) or an ``rgb()``/``rgba()``
    string.

    Raises
    ------
    ValueError
        If any color cannot be parsed or no color is given.
    """
    if isinstance(value, np.ndarray):
        value = value.tolist()
    if isinstance(value, str):
        colors = [value]
    elif isinstance(value, Sequence) and value and all(
        isinstance(c, Real) and not isinstance(c, bool) for c in value
    ):
        colors = [value]
    elif isinstance(value, Sequence):
        colors = list(value)
    else:
        raise ValueError(f"Unrecognized color specification {value!r}")
    if not colors:
        raise ValueError("Specify at least one color")
    try:
        return np.array([_parse_one(c) for c in colors], dtype=np.float64)
    except TypeError as exc:
        raise ValueError(f"Unrecognized color specification {value!r}") from exc


def color_gradient(colors: np.ndarray, length: int = GRADIENT_LENGTH) -> np.ndarray:
    """Return a ``length x 3`` linear gradient from ``colors[0]`` to ``colors[1]``.

    With a single color both ends use it and the table is constant.
    """
    start = colors[0]
    end = colors[1] if len(colors) >= 2 else colors[0]
    return np.column_stack([np.linspace(start[i], end[i], length) for i in range(3)])


def rgb_string(color: Sequence[float]) -> str:
    """Return ``rgb(r, g, b)`` for an RGB float triplet in ``[0, 1]``."""
    r, g, b = (int(round(float(c) * 255)) for c in color)
    return f"rgb({r}, {g}, {b})"


def to_plotly_colorscale(colormap: np.ndarray) -> list[list[Any]]:
    """Convert a gradient table into a Plotly colorscale."""
    n = len(colormap)
    if n == 1:
        return [[0.0, rgb_string(colormap[0])], [1.0, rgb_string(colormap[0])]]
    return [[i / (n - 1), rgb_string(row)] for i, row in enumerate(colormap)]


__all__ = [
    "GRADIENT_LENGTH",
    "color_gradient",
    "default_color_order",
    "parse_color_order",
    "rgb_string",
    "to_plotly_colorscale",
]
