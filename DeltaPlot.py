"""Delta plot chart: line segments between start and end values.

Purpose
-------
This module provides the public ``DeltaPlot`` class and the ``deltaplot``
factory. A delta plot draws one segment per item from a start value to an end
value, colored from a start color to an end color, with a two-row legend that
names the endpoints.

Concepts and structure
----------------------
The implementation is composition-based:

- ``delta_normalization`` parses the flexible constructor arguments,
- ``delta_geometry`` builds the NaN-broken segment buffers,
- ``delta_display`` derives ticks, limits, grid, legend and label placements,
- ``delta_surface`` draws into the host figure (Plotly by default),
- ``delta_legend`` keeps the two endpoint legend rows in sync,
- ``DeltaPlot`` owns the dataset and view state and coordinates rendering.

Call forms::

    deltaplot(x1, x2)                 # horizontal segments stacked by index
    deltaplot(x1, y1, x2, y2)         # segments from (x1, y1) to (x2, y2)
    deltaplot(..., labels)            # item labels
    deltaplot(..., "Name", value, Name=value)
    deltaplot(figure, ...)            # draw into an existing Plotly figure

Important gotchas
-----------------
- Every property assignment re-renders synchronously.
- When ``y_data`` is empty the items are stacked at ``y = 1..N`` and the item
  labels become the y tick labels; otherwise the labels are drawn as text next
  to the start points.
- Mismatched data heights do not raise. The chart warns with
  :class:`~deltaplot.errors.DataSizeMismatch` and draws nothing until the
  heights agree again.

Examples
--------
>>> from deltaplot import deltaplot
>>> d = deltaplot([10, 20], [15, 25], ["before", "after"])  # doctest: +SKIP
>>> d.y_data_source  # doctest: +SKIP
'ItemLabels'
>>> d.title = "Change per item"  # doctest: +SKIP
>>> d  # doctest: +SKIP

Discoverability
---------------
See next:

- ``delta_display.py`` for the display rules.
- ``delta_surface.py`` to draw into something other than Plotly.
- ``DeltaPlotSnapshot.py`` for save/restore.
"""

from __future__ import annotations

import logging
import math
import time
import warnings
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from IPython.display import display

from .DeltaPlotSnapshot import DeltaPlotSnapshot
from .delta_colors import color_gradient, default_color_order, parse_color_order
from .delta_display import DisplayPlan, reconcile_display
from .delta_geometry import (
    USES_EXPLICIT_Y,
    GeometryBuffers,
    YDataSource,
    as_coordinate_matrix,
    build_geometry,
    resolve_data_source,
)
from .delta_legend import EndpointLegendManager
from .delta_normalization import as_label_vector, normalize_delta_inputs
from .delta_options import DELTAPLOT_OPTIONS, coerce_on_off
from .delta_surface import MARKER_SYMBOLS, AxesSurface, PlotlyDeltaSurface
from .delta_view import LimitsLike, LimitsMode, ViewState, coerce_limits
from .errors import DataSizeMismatch, InvalidColorConfiguration

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

TextLike = Union[str, Sequence[str]]
Limits = Tuple[float, float]


def _join_lines(value: Any) -> str:
    """Return ``value`` as display text; sequences render one entry per line."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return "<br>".join(str(v) for v in value)


def _padded_extent(extent: Optional[Limits]) -> Optional[Limits]:
    if extent is None:
        return None
    low, high = extent
    if high > low:
        return extent
    return (low - 1.0, high + 1.0)


class DeltaPlot:
    """Chart of line segments from start to end values for a set of items.

    Parameters
    ----------
    *args : Any
        Positional call forms, see the module docstring.
    surface : AxesSurface, optional
        Rendering surface to draw into. Defaults to a
        :class:`~deltaplot.delta_surface.PlotlyDeltaSurface` over the leading
        figure argument, or over a new ``FigureWidget``.
    debug : bool, optional
        Enable debug logging for renders.
    **options : Any
        Name/value options (``DeltaPlot.options()`` lists them).

    Raises
    ------
    MalformedInput
        If the positional arguments do not form an accepted call.
    ValueError
        If an option name or value is invalid.

    Examples
    --------
    >>> d = DeltaPlot([1, 2, 3], [2, 2, 5], EndPointLabels=("2020", "2024"))  # doctest: +SKIP
    >>> d.item_labels  # doctest: +SKIP
    ('1', '2', '3')
    """

    __slots__ = [
        "_surface", "_legend", "_view", "_x_data", "_y_data", "_item_labels",
        "_y_data_source", "_title", "_x_label", "_y_label", "_marker", "_line_width",
        "_color_order", "_colormap", "_geometry", "_plan", "_data_valid",
        "_suspend_render", "_debug", "_render_info_last_log_t", "_render_debug_last_log_t",
    ]

    def __init__(
        self,
        *args: Any,
        surface: Optional[AxesSurface] = None,
        debug: bool = False,
        **options: Any,
    ) -> None:
        inputs = normalize_delta_inputs(*args, **options)
        if surface is not None and inputs.parent is not None:
            raise ValueError("Pass either a parent figure or surface=, not both")

        self._debug = debug
        if debug:
            logger.setLevel(logging.DEBUG)
        self._render_info_last_log_t = 0.0
        self._render_debug_last_log_t = 0.0

        # 1. Surface and legend
        self._surface = surface if surface is not None else PlotlyDeltaSurface(inputs.parent)
        self._legend = EndpointLegendManager(self._surface)

        # 2. Defaults
        self._view = ViewState()
        self._x_data = as_coordinate_matrix(None, name="x_data")
        self._y_data = as_coordinate_matrix(None, name="y_data")
        self._item_labels: Tuple[str, ...] = ()
        self._y_data_source: YDataSource = resolve_data_source(self._y_data)
        self._title = ""
        self._x_label = ""
        self._y_label = ""
        self._marker = "o"
        self._line_width = 2.0
        self._color_order = default_color_order()
        self._colormap = color_gradient(self._color_order)
        self._geometry: Optional[GeometryBuffers] = None
        self._plan: Optional[DisplayPlan] = None
        self._data_valid = True

        # 3. Apply positional fields, then options, with rendering suspended
        self._suspend_render = True
        if inputs.x_data is not None:
            self._x_data = inputs.x_data
        if inputs.y_data is not None:
            self._y_data = inputs.y_data
        if inputs.item_labels is not None:
            self._item_labels = inputs.item_labels
        self._sync_data_source()

        chart_state = inputs.options.pop("chart_state", None)
        for name, value in inputs.options.items():
            setattr(self, name, value)
        if chart_state is not None:
            self.restore(chart_state)

        # 4. Bind events and draw
        self._surface.observe_limits(self._on_viewport_change)
        self._suspend_render = False
        self.render(reason="setup")

    # --- Options ---

    @staticmethod
    def options() -> Dict[str, str]:
        """Return the supported name/value options and their descriptions."""
        return dict(DELTAPLOT_OPTIONS)

    # --- Data ---

    @property
    def x_data(self) -> np.ndarray:
        """Return the ``N x 2`` start/end x coordinates."""
        return self._x_data.copy()

    @x_data.setter
    def x_data(self, value: Any) -> None:
        self._x_data = as_coordinate_matrix(value, name="x_data")
        self._sync_data_source()
        self.render(reason="x_data")

    @property
    def y_data(self) -> np.ndarray:
        """Return the ``N x 2`` start/end y coordinates (``0 x 2`` when unset)."""
        return self._y_data.copy()

    @y_data.setter
    def y_data(self, value: Any) -> None:
        self._y_data = as_coordinate_matrix(value, name="y_data")
        self._sync_data_source()
        self.render(reason="y_data")

    @property
    def item_labels(self) -> Tuple[str, ...]:
        """Return one label per item."""
        return self._item_labels

    @item_labels.setter
    def item_labels(self, value: Any) -> None:
        labels = as_label_vector(value)
        if labels is None:
            if value is None or np.size(value) == 0:
                labels = ()
            else:
                labels = tuple(str(v) for v in np.asarray(value).ravel(order="F"))
        self._item_labels = labels
        self._sync_data_source()
        self.render(reason="item_labels")

    @property
    def y_data_source(self) -> YDataSource:
        """Return ``"YData"`` when numeric y data is set, else ``"ItemLabels"``."""
        return self._y_data_source

    def _sync_data_source(self) -> None:
        source = resolve_data_source(self._y_data)
        if source != self._y_data_source:
            logger.debug("y data source %s -> %s", self._y_data_source, source)
        self._y_data_source = source

    # --- Text ---

    @property
    def title(self) -> str:
        """Return the axes title."""
        return self._title

    @title.setter
    def title(self, value: TextLike) -> None:
        self._title = _join_lines(value)
        self.render(reason="title")

    def set_title(self, text: TextLike) -> None:
        """Set the axes title (convenience form of :attr:`title`)."""
        self.title = text

    @property
    def x_label(self) -> str:
        """Return the x-axis label."""
        return self._x_label

    @x_label.setter
    def x_label(self, value: TextLike) -> None:
        self._x_label = _join_lines(value)
        self.render(reason="x_label")

    @property
    def y_label(self) -> str:
        """Return the y-axis label."""
        return self._y_label

    @y_label.setter
    def y_label(self, value: TextLike) -> None:
        self._y_label = _join_lines(value)
        self.render(reason="y_label")

    @property
    def end_point_labels(self) -> Tuple[str, str]:
        """Return the legend names of the start and end points."""
        return self._view.end_point_labels

    @end_point_labels.setter
    def end_point_labels(self, value: Sequence[str]) -> None:
        labels = as_label_vector(value)
        if labels is None or len(labels) != 2:
            raise ValueError(f"end_point_labels must be two strings, got {value!r}")
        self._view.end_point_labels = (labels[0], labels[1])
        self.render(reason="end_point_labels")

    # --- Visibility ---

    @property
    def item_labels_visible(self) -> bool:
        """Return whether item labels are drawn next to start points."""
        return self._view.item_labels_visible

    @item_labels_visible.setter
    def item_labels_visible(self, value: Union[bool, str]) -> None:
        self._view.item_labels_visible = coerce_on_off(value, name="item_labels_visible")
        self.render(reason="item_labels_visible")

    @property
    def grid_visible(self) -> bool:
        """Return whether grid lines are shown."""
        return self._view.grid_visible

    @grid_visible.setter
    def grid_visible(self, value: Union[bool, str]) -> None:
        self._view.grid_visible = coerce_on_off(value, name="grid_visible")
        self.render(reason="grid_visible")

    # --- Style ---

    @property
    def color_order(self) -> np.ndarray:
        """Return the configured colors as a ``K x 3`` RGB array."""
        return self._color_order.copy()

    @color_order.setter
    def color_order(self, value: Any) -> None:
        try:
            colors = parse_color_order(value)
        except ValueError as exc:
            warnings.warn(str(exc), InvalidColorConfiguration, stacklevel=2)
            return
        if len(colors) > 2:
            warnings.warn(
                "Only the first two colors provided to color_order will be used.",
                InvalidColorConfiguration,
                stacklevel=2,
            )
        self._color_order = colors
        self._colormap = color_gradient(colors)
        self.render(reason="color_order")

    @property
    def colormap(self) -> np.ndarray:
        """Return the ``255 x 3`` start-to-end gradient table."""
        return self._colormap.copy()

    @property
    def marker(self) -> str:
        """Return the marker glyph."""
        return self._marker

    @marker.setter
    def marker(self, value: str) -> None:
        if value not in MARKER_SYMBOLS:
            allowed = " ".join(MARKER_SYMBOLS)
            raise ValueError(f"marker must be one of: {allowed}; got {value!r}")
        self._marker = value
        self.render(reason="marker")

    @property
    def line_width(self) -> float:
        """Return the segment line width."""
        return self._line_width

    @line_width.setter
    def line_width(self, value: Union[int, float]) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
            raise TypeError(f"line_width must be a number, got {type(value).__name__}")
        if not value > 0 or not math.isfinite(value):
            raise ValueError(f"line_width must be positive, got {value!r}")
        self._line_width = float(value)
        self.render(reason="line_width")

    # --- Limits ---

    @property
    def x_limits(self) -> Limits:
        """Return the current x-axis limits.

        The live axis range is returned when the host reports one; otherwise
        the fixed limits or the extent of the drawn data.
        """
        live = self._surface.get_xlim()
        if live is not None:
            return live
        if self._view.x_limits is not None:
            return self._view.x_limits
        return self._fallback_limits(axis="x")

    @x_limits.setter
    def x_limits(self, value: LimitsLike) -> None:
        rng = coerce_limits(value)
        self._view.x_limits = rng
        self._surface.set_xlim(rng)

    @property
    def y_limits(self) -> Limits:
        """Return the current y-axis limits.

        The live axis range is returned when the host reports one; otherwise
        the planned limits or the extent of the drawn data.
        """
        live = self._surface.get_ylim()
        if live is not None:
            return live
        if self._plan is not None and self._plan.y_limits is not None:
            return self._plan.y_limits
        return self._fallback_limits(axis="y")

    @y_limits.setter
    def y_limits(self, value: LimitsLike) -> None:
        self._view.set_manual_y_limits(value)
        self.render(reason="y_limits")

    @property
    def y_limits_mode(self) -> LimitsMode:
        """Return ``"manual"`` when y limits are fixed."""
        return self._view.y_limits_mode

    def _fallback_limits(self, *, axis: str) -> Limits:
        geometry = self.geometry
        extent = geometry.x_extent() if axis == "x" else geometry.y_extent()
        return _padded_extent(extent) or (0.0, 1.0)

    def xlim(self, *limits: Any) -> Limits:
        """Query or set x limits, mirroring the axes helper.

        ``xlim()`` returns the limits, ``xlim(lo, hi)`` or ``xlim((lo, hi))``
        fixes them, ``xlim("auto")`` returns to automatic limits and
        ``xlim("manual")`` freezes the current limits.
        """
        if not limits:
            return self.x_limits
        if len(limits) == 1 and isinstance(limits[0], str):
            mode = limits[0].strip().lower()
            if mode == "auto":
                self._view.x_limits = None
                self._surface.set_xlim(None)
                return self.x_limits
            if mode == "manual":
                self.x_limits = self.x_limits
                return self.x_limits
            raise ValueError(f"xlim mode must be 'auto' or 'manual', got {limits[0]!r}")
        self.x_limits = limits[0] if len(limits) == 1 else limits
        return self.x_limits

    def ylim(self, *limits: Any) -> Limits:
        """Query or set y limits, mirroring the axes helper.

        Any call with arguments other than ``"auto"`` stores the resulting
        limits as manual :attr:`y_limits`. ``ylim("auto")`` returns y limits to
        automatic mode.
        """
        if not limits:
            return self.y_limits
        if len(limits) == 1 and isinstance(limits[0], str):
            mode = limits[0].strip().lower()
            if mode == "auto":
                self._view.clear_manual_y_limits()
                self.render(reason="ylim")
                return self.y_limits
            if mode == "manual":
                self.y_limits = self.y_limits
                return self.y_limits
            raise ValueError(f"ylim mode must be 'auto' or 'manual', got {limits[0]!r}")
        self.y_limits = limits[0] if len(limits) == 1 else limits
        return self.y_limits

    def _on_viewport_change(self, x_range: Optional[Limits], y_range: Optional[Limits]) -> None:
        """Capture front-end pan/zoom into the view state."""
        changed = False
        if x_range is not None and x_range != self._view.x_limits and x_range[1] > x_range[0]:
            self._view.x_limits = x_range
        if (
            y_range is not None
            and self._y_data_source == USES_EXPLICIT_Y
            and y_range[1] > y_range[0]
            and (self._view.y_limits_mode != "manual" or self._view.y_limits != y_range)
        ):
            self._view.y_limits = y_range
            self._view.y_limits_mode = "manual"
            changed = True
        if changed:
            self.render(reason="relayout")

    # --- Derived state ---

    @property
    def geometry(self) -> GeometryBuffers:
        """Return the current segment buffers (empty while data sizes disagree)."""
        if self._geometry is None:
            return build_geometry(np.empty((0, 2)), None, "ItemLabels")
        return self._geometry

    @property
    def display_plan(self) -> Optional[DisplayPlan]:
        """Return the last display plan, or ``None`` while the chart is blank."""
        return self._plan

    @property
    def surface(self) -> AxesSurface:
        """Return the rendering surface."""
        return self._surface

    @property
    def figure_widget(self) -> Any:
        """Return the backing Plotly figure of the default surface."""
        return getattr(self._surface, "figure", None)

    @property
    def legend_labels(self) -> Tuple[str, ...]:
        """Return the labels currently shown in the endpoint legend."""
        return self._legend.labels if self._legend.has_legend else ()

    # --- Rendering ---

    def _validate_data_sizes(self) -> bool:
        n = len(self._x_data)
        if self._y_data_source == USES_EXPLICIT_Y and len(self._y_data) != n:
            warnings.warn("x_data and y_data must be the same size.", DataSizeMismatch, stacklevel=3)
            return False
        if len(self._item_labels) != n:
            warnings.warn("x_data and item_labels must be the same height.", DataSizeMismatch, stacklevel=3)
            return False
        return True

    def render(self, reason: str = "manual") -> None:
        """Recompute geometry and display plan and push them to the surface.

        Parameters
        ----------
        reason : str, optional
            Short tag recorded in the render log.
        """
        if self._suspend_render:
            return

        self._data_valid = self._validate_data_sizes()
        if not self._data_valid:
            self._geometry = None
            self._plan = None
            empty = self.geometry
            self._surface.draw_segments(
                empty.patch_x, empty.patch_y, empty.face_vertex_c,
                self._colormap, self._marker, self._line_width, visible=False,
            )
            self._surface.draw_item_labels(())
            self._legend.set_visible(False)
            logger.debug("render(reason=%s) skipped: data sizes disagree", reason)
            return

        geometry = build_geometry(self._x_data, self._y_data, self._y_data_source)
        inputs = dict(
            x_data=self._x_data,
            y_data=self._y_data,
            item_labels=self._item_labels,
            mode=self._y_data_source,
            view=self._view,
            geometry=geometry,
            colormap=self._colormap,
            marker=self._marker,
            line_width=self._line_width,
        )
        plan = reconcile_display(**inputs)
        # Limits go first so an automatic axis reports its own range.
        self._surface.set_ylim(plan.y_limits)
        if plan.y_limits is None and plan.item_labels:
            live = self._surface.get_ylim()
            if live is not None:
                plan = reconcile_display(**inputs, axis_y_limits=live)
        self._geometry = geometry
        self._plan = plan

        self._surface.draw_segments(
            geometry.patch_x, geometry.patch_y, geometry.face_vertex_c,
            plan.colormap, self._marker, self._line_width, visible=True,
        )
        self._legend.set_visible(True)
        self._legend.refresh(plan.legend_entries)
        self._surface.set_yticks(plan.tick_positions, plan.tick_labels)
        self._surface.set_grid(plan.grid_x, plan.grid_y)
        self._surface.set_titles(self._title, self._x_label, self._y_label)
        self._surface.draw_item_labels(plan.item_labels)
        self._log_render(reason)

    def _log_render(self, reason: str) -> None:
        """Log render information with rate-limiting."""
        now = time.monotonic()
        if logger.isEnabledFor(logging.INFO) and (now - self._render_info_last_log_t) > 1.0:
            self._render_info_last_log_t = now
            logger.info(f"render(reason={reason}) items={len(self._x_data)}")

        if logger.isEnabledFor(logging.DEBUG) and (now - self._render_debug_last_log_t) > 0.5:
            self._render_debug_last_log_t = now
            logger.debug(
                f"source={self._y_data_source} segments={self.geometry.segment_count} "
                f"y_limits_mode={self._view.y_limits_mode}"
            )

    # --- Save / restore ---

    def snapshot(self) -> DeltaPlotSnapshot:
        """Return the restorable view state as a :class:`DeltaPlotSnapshot`."""
        manual_y = self._view.y_limits_mode == "manual"
        return DeltaPlotSnapshot(
            x_limits=self._view.x_limits,
            y_limits=self._view.y_limits if manual_y else None,
            y_limits_mode=self._view.y_limits_mode,
            y_data_source=self._y_data_source,
            color_order=tuple(tuple(float(c) for c in row) for row in self._color_order),
        )

    def restore(self, snapshot: Union[DeltaPlotSnapshot, Mapping[str, Any]]) -> None:
        """Re-apply a snapshot; fields that are ``None`` or missing are left alone.

        The y source is derived from the data, so a recorded source that
        disagrees with the current data is logged and ignored.
        """
        if isinstance(snapshot, Mapping):
            snapshot = DeltaPlotSnapshot.from_dict(snapshot)
        if not isinstance(snapshot, DeltaPlotSnapshot):
            raise TypeError(f"restore() expects a DeltaPlotSnapshot or dict, got {type(snapshot).__name__}")

        # Validate every field before touching the chart.
        x_limits = None if snapshot.x_limits is None else coerce_limits(snapshot.x_limits)
        y_limits = None if snapshot.y_limits is None else coerce_limits(snapshot.y_limits)
        if snapshot.y_limits_mode not in (None, "auto", "manual"):
            raise ValueError(f"Unknown y_limits_mode {snapshot.y_limits_mode!r}")

        suspended = self._suspend_render
        self._suspend_render = True
        try:
            if x_limits is not None:
                self.x_limits = x_limits
            if y_limits is not None:
                self._view.y_limits = y_limits
            if snapshot.y_limits_mode is not None:
                self._view.y_limits_mode = snapshot.y_limits_mode
                if snapshot.y_limits_mode == "auto":
                    self._view.clear_manual_y_limits()
            if snapshot.y_data_source is not None and snapshot.y_data_source != self._y_data_source:
                logger.debug(
                    "snapshot y_data_source=%s ignored; data implies %s",
                    snapshot.y_data_source,
                    self._y_data_source,
                )
            if snapshot.color_order is not None:
                self.color_order = snapshot.color_order
        finally:
            self._suspend_render = suspended
        self.render(reason="restore")

    @property
    def chart_state(self) -> DeltaPlotSnapshot:
        """Alias for :meth:`snapshot`; assigning restores."""
        return self.snapshot()

    @chart_state.setter
    def chart_state(self, value: Union[DeltaPlotSnapshot, Mapping[str, Any]]) -> None:
        self.restore(value)

    # --- Display ---

    def _ipython_display_(self, **kwargs: Any) -> None:
        """Display the backing figure in IPython front ends."""
        display(self.figure_widget)

    def __repr__(self) -> str:
        fields: Dict[str, Any] = {"XData": self._x_data.tolist()}
        if self._y_data_source == USES_EXPLICIT_Y:
            fields["YData"] = self._y_data.tolist()
            fields["ItemLabels"] = list(self._item_labels)
            fields["ItemLabelsVisible"] = self.item_labels_visible
        else:
            fields["ItemLabels"] = list(self._item_labels)
        fields["EndPointLabels"] = list(self.end_point_labels)
        fields["GridVisible"] = self.grid_visible
        fields["Marker"] = self._marker
        fields["LineWidth"] = self._line_width
        fields["ColorOrder"] = self._color_order.round(4).tolist()
        body = "\n".join(f"  {name}: {value!r}" for name, value in fields.items())
        return f"DeltaPlot with properties:\n{body}"


def deltaplot(*args: Any, **kwargs: Any) -> DeltaPlot:
    """Create a :class:`DeltaPlot`; see the module docstring for call forms."""
    return DeltaPlot(*args, **kwargs)


__all__ = ["DeltaPlot", "deltaplot"]
