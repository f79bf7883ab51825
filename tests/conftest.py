from __future__ import annotations

from typing import Any, Callable, Optional

import pytest


class RecordingSurface:
    """In-memory axes/legend surface that records every draw request."""

    def __init__(self) -> None:
        self.xlim: Optional[tuple[float, float]] = None
        self.ylim: Optional[tuple[float, float]] = None
        self.yticks: Any = None
        self.grid: Optional[tuple[bool, bool]] = None
        self.titles: Optional[tuple[str, str, str]] = None
        self.segments: Optional[dict[str, Any]] = None
        self.labels: tuple[Any, ...] = ()
        self.legend: dict[int, tuple[Any, bool]] = {}
        self.observers: list[Callable[..., None]] = []
        self.calls: list[str] = []

    def get_xlim(self):
        return self.xlim

    def set_xlim(self, limits):
        self.calls.append("set_xlim")
        self.xlim = limits

    def get_ylim(self):
        return self.ylim

    def set_ylim(self, limits):
        self.calls.append("set_ylim")
        self.ylim = limits

    def set_yticks(self, positions, labels):
        self.calls.append("set_yticks")
        self.yticks = (positions, labels)

    def set_grid(self, x, y):
        self.calls.append("set_grid")
        self.grid = (x, y)

    def set_titles(self, title, x_label, y_label):
        self.calls.append("set_titles")
        self.titles = (title, x_label, y_label)

    def draw_segments(self, patch_x, patch_y, face_vertex_c, colormap, marker, line_width, visible=True):
        self.calls.append("draw_segments")
        self.segments = dict(
            patch_x=patch_x,
            patch_y=patch_y,
            face_vertex_c=face_vertex_c,
            colormap=colormap,
            marker=marker,
            line_width=line_width,
            visible=visible,
        )

    def draw_item_labels(self, placements):
        self.calls.append("draw_item_labels")
        self.labels = tuple(placements)

    def observe_limits(self, callback):
        self.observers.append(callback)

    def set_legend_entry(self, index, entry, visible):
        self.calls.append(f"legend[{index}]")
        self.legend[index] = (entry, visible)

    # Test helper: emulate a front-end pan/zoom.
    def pan(self, x_range=None, y_range=None):
        if x_range is not None:
            self.xlim = x_range
        if y_range is not None:
            self.ylim = y_range
        for callback in tuple(self.observers):
            callback(x_range, y_range)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()
