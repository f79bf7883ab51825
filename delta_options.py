"""Option contracts shared by the ``deltaplot`` construction API.

This module centralizes the discoverable option metadata and the name
resolution rules used by :func:`deltaplot.DeltaPlot.deltaplot` and the
``DeltaPlot`` constructor. Options can be given with their CamelCase chart
names (``"ItemLabelsVisible"``) or as snake_case attribute names
(``item_labels_visible``); both resolve to the same widget attribute.
"""

from __future__ import annotations

import re
from typing import Any

DELTAPLOT_OPTIONS: dict[str, str] = {
    "XData": "N-by-2 start/end x coordinates, one row per item.",
    "YData": "N-by-2 start/end y coordinates. Empty means items are stacked by index.",
    "ItemLabels": "One label per item. Used as y tick labels when YData is empty.",
    "EndPointLabels": "Two legend names for the start and end points.",
    "Title": "Axes title. A sequence of strings renders as multiple lines.",
    "XLabel": "X-axis label.",
    "YLabel": "Y-axis label.",
    "ItemLabelsVisible": "Draw item labels next to start points (YData charts only). Accepts True/False or on/off.",
    "GridVisible": "Show grid lines. Accepts True/False or on/off.",
    "ColorOrder": "Start and end colors: RGB triplets in [0, 1], #RRGGBB or rgb()/rgba() strings.",
    "Marker": "Marker glyph: o * + p h ^ v > < x s d . none.",
    "LineWidth": "Segment line width in pixels (positive).",
    "XLimits": "X-axis limits as two increasing values.",
    "YLimits": "Y-axis limits as two increasing values. Setting them switches to manual y limits.",
    "ChartState": "A DeltaPlotSnapshot (or its dict form) restored after setup.",
}

_OPTION_ATTRIBUTES: dict[str, str] = {
    "xdata": "x_data",
    "ydata": "y_data",
    "itemlabels": "item_labels",
    "endpointlabels": "end_point_labels",
    "title": "title",
    "xlabel": "x_label",
    "ylabel": "y_label",
    "itemlabelsvisible": "item_labels_visible",
    "gridvisible": "grid_visible",
    "colororder": "color_order",
    "marker": "marker",
    "linewidth": "line_width",
    "xlimits": "x_limits",
    "ylimits": "y_limits",
    "chartstate": "chart_state",
}

_ON_OFF = {"on": True, "off": False}


def resolve_option_name(name: Any) -> str:
    """Return the widget attribute for an option name.

    Raises
    ------
    TypeError
        If ``name`` is not a string.
    ValueError
        If ``name`` does not match a known option.
    """
    if not isinstance(name, str):
        raise TypeError(f"Option names must be strings, got {type(name).__name__}")
    key = re.sub(r"[_\s]", "", name).lower()
    try:
        return _OPTION_ATTRIBUTES[key]
    except KeyError:
        known = ", ".join(DELTAPLOT_OPTIONS)
        raise ValueError(f"Unknown deltaplot option {name!r}. Known options: {known}") from None


def coerce_on_off(value: Any, *, name: str) -> bool:
    """Coerce ``True``/``False`` or ``"on"``/``"off"`` into a bool."""
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _ON_OFF:
            return _ON_OFF[key]
        raise ValueError(f"{name} must be True/False or 'on'/'off', got {value!r}")
    if isinstance(value, (bool, int)) and value in (0, 1):
        return bool(value)
    raise ValueError(f"{name} must be True/False or 'on'/'off', got {value!r}")


__all__ = ["DELTAPLOT_OPTIONS", "coerce_on_off", "resolve_option_name"]
