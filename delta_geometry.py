"""Segment geometry for delta plots.

Purpose
-------
Turns the chart dataset into the flat buffers consumed by a single
multi-segment draw call. Each surviving item contributes three vertices
``(start, end, NaN)``; the NaN breaks the polyline so every item renders as a
disconnected segment.

Concepts
--------
The y source of a chart is a derived tag:

- ``"ItemLabels"``: no numeric y data; item ``i`` (1-based, counted over all
  items) is drawn horizontally at ``y = i`` and labeled by the y ticks.
- ``"YData"``: numeric y data; segments run from ``(x1, y1)`` to ``(x2, y2)``.

:func:`resolve_data_source` is the only place the tag is computed, so it is
always a pure function of the current dataset.

Examples
--------
>>> import numpy as np
>>> from deltaplot.delta_geometry import build_geometry
>>> g = build_geometry(np.array([[10.0, 15.0], [20.0, 25.0]]), None, "ItemLabels")
>>> g.patch_x.tolist()
[10.0, 15.0, nan, 20.0, 25.0, nan]
>>> g.patch_y.tolist()
[1.0, 1.0, nan, 2.0, 2.0, nan]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

import numpy as np

YDataSource = Literal["ItemLabels", "YData"]

USES_ITEM_LABELS_AS_Y: YDataSource = "ItemLabels"
USES_EXPLICIT_Y: YDataSource = "YData"

# Gradient index per vertex: start -> 1, end and break marker -> 2.
_VERTEX_COLOR_INDEX = np.array([1.0, 2.0, 2.0])


@dataclass(frozen=True)
class GeometryBuffers:
    """Flat vertex buffers for one draw call.

    Parameters
    ----------
    patch_x, patch_y : numpy.ndarray
        ``[x1, x2, NaN, ...]`` and ``[y1, y2, NaN, ...]``, length ``3M``.
    face_vertex_c : numpy.ndarray
        ``[1, 2, 2, ...]`` gradient index per vertex, length ``3M``.
    rows : numpy.ndarray
        Original (0-based) row index of each surviving item, length ``M``.
    """

    patch_x: np.ndarray
    patch_y: np.ndarray
    face_vertex_c: np.ndarray
    rows: np.ndarray

    @property
    def segment_count(self) -> int:
        """Number of drawn segments."""
        return int(self.rows.size)

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when there is nothing to draw."""
        return self.rows.size == 0

    def x_extent(self) -> Optional[tuple[float, float]]:
        """Return ``(min, max)`` of the finite x vertices, or ``None``."""
        return _finite_extent(self.patch_x)

    def y_extent(self) -> Optional[tuple[float, float]]:
        """Return ``(min, max)`` of the finite y vertices, or ``None``."""
        return _finite_extent(self.patch_y)


def _finite_extent(values: np.ndarray) -> Optional[tuple[float, float]]:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return None
    return float(finite.min()), float(finite.max())


def as_coordinate_matrix(value, *, name: str) -> np.ndarray:
    """Return ``value`` as an ``N x 2`` float array.

    ``None`` and empty inputs become a ``0 x 2`` array. A flat vector of two
    values is a single row.

    Raises
    ------
    ValueError
        If ``value`` is not numeric or does not have two columns.
    """
    if value is None:
        return np.empty((0, 2), dtype=np.float64)
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be numeric") from exc
    if arr.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"{name} must have exactly two columns, got shape {arr.shape}")
    return arr


def resolve_data_source(y_data: Optional[np.ndarray]) -> YDataSource:
    """Return the y source tag for the current ``y_data``."""
    if y_data is None or np.size(y_data) == 0:
        return USES_ITEM_LABELS_AS_Y
    return USES_EXPLICIT_Y


def valid_row_mask(x_data: np.ndarray, y_data: Optional[np.ndarray], mode: YDataSource) -> np.ndarray:
    """Return the mask of rows whose required coordinates are all non-NaN."""
    mask = ~np.any(np.isnan(x_data), axis=1)
    if mode == USES_EXPLICIT_Y:
        mask &= ~np.any(np.isnan(y_data), axis=1)
    return mask


def build_geometry(
    x_data: np.ndarray,
    y_data: Optional[np.ndarray],
    mode: YDataSource,
) -> GeometryBuffers:
    """Build segment buffers from ``N x 2`` coordinate arrays.

    In ``"ItemLabels"`` mode ``y_data`` is ignored and surviving row ``i``
    (1-based, not renumbered after filtering) gets the y pair ``(i, i)``.
    The inputs are not modified.
    """
    x = np.asarray(x_data, dtype=np.float64).reshape(-1, 2)
    mask = valid_row_mask(x, None if y_data is None else np.asarray(y_data, dtype=np.float64), mode)
    rows = np.flatnonzero(mask)

    if mode == USES_EXPLICIT_Y:
        y = np.asarray(y_data, dtype=np.float64).reshape(-1, 2)[rows]
    else:
        index = (rows + 1).astype(np.float64)
        y = np.column_stack([index, index])

    breaks = np.full((rows.size, 1), np.nan)
    patch_x = np.hstack([x[rows], breaks]).ravel()
    patch_y = np.hstack([y.reshape(-1, 2), breaks]).ravel()
    face_vertex_c = np.tile(_VERTEX_COLOR_INDEX, rows.size)
    return GeometryBuffers(patch_x=patch_x, patch_y=patch_y, face_vertex_c=face_vertex_c, rows=rows)


__all__ = [
    "GeometryBuffers",
    "USES_EXPLICIT_Y",
    "USES_ITEM_LABELS_AS_Y",
    "YDataSource",
    "as_coordinate_matrix",
    "build_geometry",
    "resolve_data_source",
    "valid_row_mask",
]
