"""Rendering-surface boundary between delta plots and the host framework.

Purpose
-------
``DeltaPlot`` never talks to Plotly directly. It issues draw requests against
two narrow capabilities:

- :class:`AxesSurface`: limits, ticks, grid, titles, the segment draw and the
  item-label draws,
- :class:`LegendSurface`: the two endpoint legend rows.

:class:`PlotlyDeltaSurface` implements both on a Plotly figure. Any object
providing the same methods can be injected instead (tests use small fakes).

Important gotchas
-----------------
- Plotly line traces have a single stroke color, so the segment stroke uses
  the middle of the start/end gradient while markers are colored per vertex
  through the gradient colorscale.
- Layout-change callbacks fire for every write, including the surface's own.
  Writes made by the surface are bracketed by ``_writing`` so that only
  front-end pan/zoom reaches the limits observer.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np
import plotly.graph_objects as go
from plotly.basedatatypes import BaseFigure

from .delta_colors import rgb_string, to_plotly_colorscale
from .delta_display import ItemLabelPlacement, LegendEntry

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Limits = Tuple[float, float]
LimitsObserver = Callable[[Optional[Limits], Optional[Limits]], None]

# Marker glyph -> (Plotly symbol, size). ``None`` draws no markers.
MARKER_SYMBOLS: Dict[str, Optional[Tuple[str, int]]] = {
    "o": ("circle", 8),
    "*": ("asterisk-open", 9),
    "+": ("cross-thin-open", 9),
    "p": ("pentagon", 9),
    "h": ("hexagram", 9),
    "^": ("triangle-up", 8),
    "v": ("triangle-down", 8),
    ">": ("triangle-right", 8),
    "<": ("triangle-left", 8),
    "x": ("x-thin-open", 8),
    "s": ("square", 8),
    "d": ("diamond", 8),
    ".": ("circle", 4),
    "none": None,
}


@runtime_checkable
class AxesSurface(Protocol):
    def get_xlim(self) -> Optional[Limits]: ...

    def set_xlim(self, limits: Optional[Limits]) -> None: ...

    def get_ylim(self) -> Optional[Limits]: ...

    def set_ylim(self, limits: Optional[Limits]) -> None: ...

    def set_yticks(self, positions: Optional[Sequence[float]], labels: Optional[Sequence[str]]) -> None: ...

    def set_grid(self, x: bool, y: bool) -> None: ...

    def set_titles(self, title: str, x_label: str, y_label: str) -> None: ...

    def draw_segments(
        self,
        patch_x: np.ndarray,
        patch_y: np.ndarray,
        face_vertex_c: np.ndarray,
        colormap: np.ndarray,
        marker: str,
        line_width: float,
        visible: bool = True,
    ) -> None: ...

    def draw_item_labels(self, placements: Sequence[ItemLabelPlacement]) -> None: ...

    def observe_limits(self, callback: LimitsObserver) -> None: ...


@runtime_checkable
class LegendSurface(Protocol):
    def set_legend_entry(self, index: int, entry: LegendEntry, visible: bool) -> None: ...


def _default_layout() -> Dict[str, Any]:
    """Return the Plotly layout defaults applied to a fresh chart."""
    axis = dict(
        zeroline=False,
        showline=True,
        linecolor="#94a3b8",
        linewidth=1,
        mirror=True,
        ticks="outside",
        tickcolor="#94a3b8",
        ticklen=6,
        showgrid=True,
        gridcolor="rgba(148,163,184,0.35)",
        gridwidth=1,
    )
    return dict(
        template="plotly_white",
        showlegend=True,
        margin=dict(l=56, r=28, t=56, b=48),
        font=dict(
            family="Inter, -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif",
            size=14,
            color="#1f2933",
        ),
        paper_bgcolor="#ffffff",
        plot_bgcolor="#ffffff",
        legend=dict(
            x=1.02,
            xanchor="left",
            y=1.0,
            yanchor="top",
            bgcolor="rgba(255,255,255,0.7)",
            bordercolor="rgba(15,23,42,0.08)",
            borderwidth=1,
        ),
        modebar=dict(remove=["select2d", "lasso2d"]),
        xaxis=dict(axis),
        yaxis=dict(axis),
    )


def _as_limits(rng: Any) -> Optional[Limits]:
    if rng is None:
        return None
    low = -math.inf if rng[0] is None else float(rng[0])
    high = math.inf if rng[1] is None else float(rng[1])
    return low, high


def _axis_range_update(limits: Optional[Limits]) -> Dict[str, Any]:
    """Return the axis properties for ``limits``; infinite bounds autorange."""
    if limits is None:
        return dict(autorange=True, range=None)
    low = float(limits[0]) if math.isfinite(limits[0]) else None
    high = float(limits[1]) if math.isfinite(limits[1]) else None
    if low is None and high is None:
        return dict(autorange=True, range=None)
    if low is None:
        return dict(autorange="min", range=[None, high])
    if high is None:
        return dict(autorange="max", range=[low, None])
    return dict(autorange=False, range=[low, high])


class PlotlyDeltaSurface:
    """Axes and legend surface backed by a Plotly figure.

    Parameters
    ----------
    figure : plotly.basedatatypes.BaseFigure or None, optional
        Figure to draw into. A new ``go.FigureWidget`` is created when omitted.
    """

    def __init__(self, figure: Optional[BaseFigure] = None) -> None:
        self._figure = figure if figure is not None else go.FigureWidget()
        self._writing = False
        self._observers: list[LimitsObserver] = []
        # Last autorange value this surface wrote per axis.
        self._written_autorange: Dict[str, Any] = {"xaxis": None, "yaxis": None}

        self._figure.update_layout(**_default_layout())
        self._figure.add_scatter(
            x=[],
            y=[],
            mode="lines+markers",
            connectgaps=False,
            showlegend=False,
            hoverinfo="x+y",
            name="segments",
        )
        self._segments = self._figure.data[-1]
        self._legend_traces: list[go.Scatter] = []
        for _ in range(2):
            self._figure.add_scatter(
                x=[None],
                y=[None],
                mode="markers",
                showlegend=True,
                hoverinfo="skip",
            )
            self._legend_traces.append(self._figure.data[-1])

        self._figure.layout.on_change(
            self._on_range_change, "xaxis.range", "yaxis.range", append=True
        )

    @property
    def figure(self) -> BaseFigure:
        """Return the backing Plotly figure."""
        return self._figure

    @property
    def segment_trace(self) -> go.Scatter:
        """Return the trace holding all segments."""
        return self._segments

    @property
    def legend_traces(self) -> Tuple[go.Scatter, ...]:
        """Return the two legend-only traces."""
        return tuple(self._legend_traces)

    @contextmanager
    def _write(self) -> Iterator[None]:
        previous = self._writing
        self._writing = True
        try:
            with self._figure.batch_update():
                yield
        finally:
            self._writing = previous

    # --- limits ---

    def get_xlim(self) -> Optional[Limits]:
        return _as_limits(self._figure.layout.xaxis.range)

    def set_xlim(self, limits: Optional[Limits]) -> None:
        update = _axis_range_update(limits)
        with self._write():
            self._figure.layout.xaxis.update(**update)
        self._written_autorange["xaxis"] = update["autorange"]

    def get_ylim(self) -> Optional[Limits]:
        return _as_limits(self._figure.layout.yaxis.range)

    def set_ylim(self, limits: Optional[Limits]) -> None:
        update = _axis_range_update(limits)
        yaxis = self._figure.layout.yaxis
        current = None if yaxis.range is None else list(yaxis.range)
        if yaxis.autorange == update["autorange"] and current == update["range"]:
            return
        with self._write():
            yaxis.update(**update)
        self._written_autorange["yaxis"] = update["autorange"]

    def observe_limits(self, callback: LimitsObserver) -> None:
        """Register ``callback(x_range, y_range)`` for front-end pan/zoom."""
        self._observers.append(callback)

    def _user_range(self, name: str, axis: Any, rng: Any) -> Optional[Limits]:
        """Return ``rng`` when it comes from a pan/zoom, ``None`` for a reset.

        Front-end pans arrive as ``range[0]``/``range[1]`` edits that leave
        ``autorange`` untouched; a double-click reset switches ``autorange``
        back on.
        """
        if axis.autorange is True and self._written_autorange[name] is not True:
            return None
        return _as_limits(rng)

    def _on_range_change(self, layout: Any, x_range: Any, y_range: Any) -> None:
        if self._writing:
            return
        x = self._user_range("xaxis", layout.xaxis, x_range)
        y = self._user_range("yaxis", layout.yaxis, y_range)
        if x is None and y is None:
            return
        logger.debug("viewport changed x=%s y=%s", x, y)
        for callback in tuple(self._observers):
            callback(x, y)

    # --- axes decorations ---

    def set_yticks(self, positions: Optional[Sequence[float]], labels: Optional[Sequence[str]]) -> None:
        with self._write():
            if positions is None:
                self._figure.layout.yaxis.update(tickmode="auto", tickvals=None, ticktext=None)
            else:
                self._figure.layout.yaxis.update(
                    tickmode="array",
                    tickvals=list(positions),
                    ticktext=list(labels or ()),
                )

    def set_grid(self, x: bool, y: bool) -> None:
        with self._write():
            self._figure.layout.xaxis.update(showgrid=bool(x))
            self._figure.layout.yaxis.update(showgrid=bool(y))

    def set_titles(self, title: str, x_label: str, y_label: str) -> None:
        with self._write():
            self._figure.update_layout(title_text=title)
            self._figure.layout.xaxis.update(title_text=x_label)
            self._figure.layout.yaxis.update(title_text=y_label)

    # --- draws ---

    def draw_segments(
        self,
        patch_x: np.ndarray,
        patch_y: np.ndarray,
        face_vertex_c: np.ndarray,
        colormap: np.ndarray,
        marker: str,
        line_width: float,
        visible: bool = True,
    ) -> None:
        """Draw every segment as one NaN-broken polyline trace."""
        symbol = MARKER_SYMBOLS[marker]
        marker_style: Dict[str, Any] = dict(
            color=np.asarray(face_vertex_c, dtype=float),
            colorscale=to_plotly_colorscale(colormap),
            cmin=1,
            cmax=2,
        )
        if symbol is not None:
            marker_style.update(symbol=symbol[0], size=symbol[1])
        with self._write():
            self._segments.x = np.asarray(patch_x, dtype=float)
            self._segments.y = np.asarray(patch_y, dtype=float)
            self._segments.mode = "lines" if symbol is None else "lines+markers"
            self._segments.marker = marker_style
            self._segments.line = dict(width=float(line_width), color=rgb_string(colormap[len(colormap) // 2]))
            self._segments.visible = bool(visible)

    def draw_item_labels(self, placements: Sequence[ItemLabelPlacement]) -> None:
        annotations = tuple(
            dict(
                x=p.x,
                y=p.y,
                xref="x",
                yref="y",
                text=p.text,
                xanchor=p.xanchor,
                yanchor=p.yanchor,
                showarrow=False,
            )
            for p in placements
        )
        with self._write():
            self._figure.layout.annotations = annotations

    # --- legend ---

    def set_legend_entry(self, index: int, entry: LegendEntry, visible: bool) -> None:
        symbol = MARKER_SYMBOLS.get(entry.marker)
        trace = self._legend_traces[index]
        with self._write():
            trace.name = entry.label
            trace.visible = bool(visible)
            trace.mode = "lines" if symbol is None else "markers"
            trace.marker = dict(
                color=rgb_string(entry.color),
                symbol=symbol[0] if symbol else "circle",
                size=symbol[1] if symbol else 8,
            )
            trace.line = dict(color=rgb_string(entry.color), width=float(entry.line_width))


__all__ = [
    "AxesSurface",
    "LegendSurface",
    "MARKER_SYMBOLS",
    "PlotlyDeltaSurface",
]
