"""Display reconciliation for delta plots.

Purpose
-------
Given the dataset, the view state and the current geometry, compute every
derived visual setting of the chart as one immutable :class:`DisplayPlan`:
y ticks, y limits, grid axes, the start/end colormap, the two endpoint legend
entries and the item-label placements.

Architecture notes
------------------
``reconcile_display`` is a pure function. It never reads or writes the
rendering surface; ``DeltaPlot.render`` pushes the plan to the surface. Calling
it twice with equal inputs yields equal plans.

Rules
-----
- Ticks: ``"ItemLabels"`` charts tick ``1..N`` with the item labels; ``"YData"``
  charts leave ticks to the host.
- Y limits: manual limits win; otherwise ``"ItemLabels"`` charts center the
  ticks with ``[min - 0.5, max + 0.5]``; otherwise the host picks limits.
- Grid: off hides both axes' grid. On shows both for ``"YData"`` charts and
  only the x grid for ``"ItemLabels"`` charts, whose y rows are discrete.
- Item labels: ``"YData"`` charts only, when visible. Each label sits at the
  start point, nudged down by 1% of the y span, left/top aligned. Items with a
  non-finite coordinate get no label.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .delta_geometry import USES_ITEM_LABELS_AS_Y, GeometryBuffers, YDataSource
from .delta_view import LimitsMode, ViewState

LABEL_NUDGE_FRACTION = 0.01


@dataclass(frozen=True)
class LegendEntry:
    """One endpoint row of the legend."""

    label: str
    color: Tuple[float, float, float]
    marker: str
    line_width: float


@dataclass(frozen=True)
class ItemLabelPlacement:
    """One text label anchored next to an item start point."""

    text: str
    x: float
    y: float
    xanchor: str = "left"
    yanchor: str = "top"


@dataclass(frozen=True)
class DisplayPlan:
    """Derived visual state of a delta plot.

    ``tick_positions``/``tick_labels`` and ``y_limits`` are ``None`` when the
    host should compute them automatically.
    """

    y_data_source: YDataSource
    tick_positions: Optional[Tuple[float, ...]]
    tick_labels: Optional[Tuple[str, ...]]
    y_limits: Optional[Tuple[float, float]]
    y_limits_mode: LimitsMode
    grid_x: bool
    grid_y: bool
    colormap: np.ndarray
    legend_entries: Tuple[LegendEntry, LegendEntry]
    item_labels: Tuple[ItemLabelPlacement, ...]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DisplayPlan):
            return NotImplemented
        return (
            self.y_data_source == other.y_data_source
            and self.tick_positions == other.tick_positions
            and self.tick_labels == other.tick_labels
            and self.y_limits == other.y_limits
            and self.y_limits_mode == other.y_limits_mode
            and self.grid_x == other.grid_x
            and self.grid_y == other.grid_y
            and np.array_equal(self.colormap, other.colormap)
            and self.legend_entries == other.legend_entries
            and self.item_labels == other.item_labels
        )


def resolve_y_limits(
    view: ViewState,
    mode: YDataSource,
    tick_positions: Optional[Sequence[float]],
) -> Optional[Tuple[float, float]]:
    """Return the y limits to apply, or ``None`` for automatic limits."""
    if view.y_limits_mode == "manual":
        return view.y_limits
    if mode == USES_ITEM_LABELS_AS_Y and tick_positions:
        return (min(tick_positions) - 0.5, max(tick_positions) + 0.5)
    return None


def label_span(
    y_limits: Optional[Tuple[float, float]],
    geometry: GeometryBuffers,
    axis_y_limits: Optional[Tuple[float, float]] = None,
) -> float:
    """Return the y span used to nudge item labels.

    Fixed limits win, then the live axis range reported by the host. Infinite
    or unknown ranges fall back to the extent of the drawn data.
    """
    for rng in (y_limits, axis_y_limits):
        if rng is None:
            continue
        span = rng[1] - rng[0]
        if math.isfinite(span) and span > 0:
            return span
    extent = geometry.y_extent()
    if extent is not None and extent[1] > extent[0]:
        return extent[1] - extent[0]
    return 1.0


def place_item_labels(
    x_data: np.ndarray,
    y_data: np.ndarray,
    item_labels: Sequence[str],
    span: float,
) -> Tuple[ItemLabelPlacement, ...]:
    """Anchor one label per finite item at its start point."""
    finite = np.all(np.isfinite(x_data) & np.isfinite(y_data), axis=1)
    offset = span * LABEL_NUDGE_FRACTION
    return tuple(
        ItemLabelPlacement(
            text=str(item_labels[i]),
            x=float(x_data[i, 0]),
            y=float(y_data[i, 0]) - offset,
        )
        for i in np.flatnonzero(finite)
    )


def reconcile_display(
    *,
    x_data: np.ndarray,
    y_data: np.ndarray,
    item_labels: Sequence[str],
    mode: YDataSource,
    view: ViewState,
    geometry: GeometryBuffers,
    colormap: np.ndarray,
    marker: str,
    line_width: float,
    axis_y_limits: Optional[Tuple[float, float]] = None,
) -> DisplayPlan:
    """Compute the display plan of a chart.

    With automatic y limits the label nudge is sized from ``axis_y_limits``
    (the live axis range, when the host reports one) or else from the drawn
    data extent. The plan depends only on its arguments.
    """
    if mode == USES_ITEM_LABELS_AS_Y:
        tick_positions: Optional[Tuple[float, ...]] = tuple(
            float(i) for i in range(1, len(item_labels) + 1)
        )
        tick_labels: Optional[Tuple[str, ...]] = tuple(str(s) for s in item_labels)
    else:
        tick_positions = None
        tick_labels = None

    y_limits = resolve_y_limits(view, mode, tick_positions)

    grid_x = bool(view.grid_visible)
    grid_y = bool(view.grid_visible) and mode != USES_ITEM_LABELS_AS_Y

    start = tuple(float(c) for c in colormap[0])
    end = tuple(float(c) for c in colormap[-1])
    legend_entries = (
        LegendEntry(label=str(view.end_point_labels[0]), color=start, marker=marker, line_width=line_width),
        LegendEntry(label=str(view.end_point_labels[1]), color=end, marker=marker, line_width=line_width),
    )

    placements: Tuple[ItemLabelPlacement, ...] = ()
    if mode != USES_ITEM_LABELS_AS_Y and view.item_labels_visible and len(item_labels):
        span = label_span(y_limits, geometry, axis_y_limits)
        placements = place_item_labels(x_data, y_data, item_labels, span)

    return DisplayPlan(
        y_data_source=mode,
        tick_positions=tick_positions,
        tick_labels=tick_labels,
        y_limits=y_limits,
        y_limits_mode=view.y_limits_mode,
        grid_x=grid_x,
        grid_y=grid_y,
        colormap=colormap,
        legend_entries=legend_entries,
        item_labels=placements,
    )


__all__ = [
    "DisplayPlan",
    "ItemLabelPlacement",
    "LABEL_NUDGE_FRACTION",
    "LegendEntry",
    "label_span",
    "place_item_labels",
    "reconcile_display",
    "resolve_y_limits",
]
