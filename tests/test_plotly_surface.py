"""Integration tests for drawing delta plots into Plotly figures."""

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
import pytest

from deltaplot import deltaplot
from deltaplot.delta_surface import AxesSurface, LegendSurface, PlotlyDeltaSurface


def _floats(values) -> np.ndarray:
    return np.array([np.nan if v is None else v for v in values], dtype=float)


def test_surface_satisfies_both_protocols() -> None:
    surface = PlotlyDeltaSurface(go.Figure())

    assert isinstance(surface, AxesSurface)
    assert isinstance(surface, LegendSurface)
    assert len(surface.figure.data) == 3
    assert surface.figure.layout.legend.x == 1.02


def test_stacked_chart_draws_into_parent_figure() -> None:
    fig = go.Figure()
    d = deltaplot(fig, [10, 20], [15, 25], ["a", "b"])

    assert d.figure_widget is fig
    segments = fig.data[0]
    assert np.array_equal(_floats(segments.x), [10, 15, np.nan, 20, 25, np.nan], equal_nan=True)
    assert np.array_equal(_floats(segments.y), [1, 1, np.nan, 2, 2, np.nan], equal_nan=True)
    assert segments.connectgaps is False
    assert tuple(segments.marker.color) == (1.0, 2.0, 2.0, 1.0, 2.0, 2.0)
    assert (segments.marker.cmin, segments.marker.cmax) == (1, 2)

    assert tuple(fig.layout.yaxis.tickvals) == (1.0, 2.0)
    assert tuple(fig.layout.yaxis.ticktext) == ("a", "b")
    assert tuple(fig.layout.yaxis.range) == (0.5, 2.5)
    assert fig.layout.xaxis.showgrid is True
    assert fig.layout.yaxis.showgrid is False
    assert [t.name for t in fig.data[1:]] == ["Beginning", "Ending"]
    assert fig.data[1].marker.color == "rgb(31, 119, 180)"


def test_explicit_chart_writes_item_label_annotations() -> None:
    fig = go.Figure()
    d = deltaplot(fig, [0, 1], [0, 4], [2, 3], [1, 5], ["first", "second"])

    assert [a.text for a in fig.layout.annotations] == ["first", "second"]
    assert fig.layout.annotations[0].xanchor == "left"
    assert fig.layout.yaxis.tickmode == "auto"

    d.item_labels_visible = "off"
    assert fig.layout.annotations == ()


def test_titles_and_marker_none() -> None:
    fig = go.Figure()
    d = deltaplot(fig, [1], [2], Title="T", XLabel="Value", YLabel="Item", Marker="none")

    assert fig.layout.title.text == "T"
    assert fig.layout.xaxis.title.text == "Value"
    assert fig.layout.yaxis.title.text == "Item"
    assert fig.data[0].mode == "lines"

    d.marker = "s"
    assert fig.data[0].mode == "lines+markers"
    assert fig.data[0].marker.symbol == "square"


def test_manual_infinite_bound_uses_partial_autorange() -> None:
    fig = go.Figure()
    d = deltaplot(fig, [0, 1], [0, 4], [2, 3], [1, 5])

    d.ylim("-oo", 5)

    assert fig.layout.yaxis.autorange == "min"
    assert tuple(fig.layout.yaxis.range) == (None, 5.0)
    assert d.y_limits == (float("-inf"), 5.0)


def test_frontend_pan_is_captured() -> None:
    fig = go.FigureWidget()
    d = deltaplot(fig, [0, 1], [0, 4], [2, 3], [1, 5])
    assert fig.layout.yaxis.autorange is True

    fig.plotly_relayout({"yaxis.range[0]": -2.0, "yaxis.range[1]": 6.0})

    assert d.y_limits_mode == "manual"
    assert d.snapshot().y_limits == (-2.0, 6.0)
    assert fig.layout.yaxis.autorange is False

    fig.plotly_relayout({"xaxis.range[0]": 0.5, "xaxis.range[1]": 2.5})
    assert d.snapshot().x_limits == (0.5, 2.5)
    assert d.snapshot().y_limits == (-2.0, 6.0)


def test_python_writes_are_not_captured() -> None:
    fig = go.FigureWidget()
    d = deltaplot(fig, [0, 1], [0, 4], [2, 3], [1, 5])

    d.surface.set_ylim((0.0, 9.0))

    assert d.y_limits_mode == "auto"


def test_double_click_reset_is_not_a_pan() -> None:
    fig = go.FigureWidget()
    d = deltaplot(fig, [0, 1], [0, 4], [2, 3], [1, 5])
    d.ylim(0, 4)

    fig.plotly_relayout({"yaxis.autorange": True, "yaxis.range[0]": 10.0, "yaxis.range[1]": 20.0})

    assert d.snapshot().y_limits == (0.0, 4.0)


def test_size_mismatch_hides_segments_and_legend() -> None:
    fig = go.Figure()
    d = deltaplot(fig, [10, 20], [15, 25])

    with pytest.warns(Warning):
        d.item_labels = ["one"]

    assert fig.data[0].visible is False
    assert [t.visible for t in fig.data[1:]] == [False, False]


def test_default_surface_creates_figure_widget() -> None:
    d = deltaplot([1, 2], [3, 4])

    assert isinstance(d.figure_widget, go.FigureWidget)
    assert len(d.figure_widget.data) == 3
