from __future__ import annotations

import numpy as np
import pytest

from deltaplot.delta_geometry import (
    USES_EXPLICIT_Y,
    USES_ITEM_LABELS_AS_Y,
    as_coordinate_matrix,
    build_geometry,
    resolve_data_source,
    valid_row_mask,
)


def _same(a, b) -> bool:
    return np.array_equal(np.asarray(a, dtype=float), np.asarray(b, dtype=float), equal_nan=True)


def test_item_label_mode_stacks_items_by_index() -> None:
    g = build_geometry(np.array([[10.0, 15.0], [20.0, 25.0]]), None, USES_ITEM_LABELS_AS_Y)

    assert _same(g.patch_x, [10, 15, np.nan, 20, 25, np.nan])
    assert _same(g.patch_y, [1, 1, np.nan, 2, 2, np.nan])
    assert g.face_vertex_c.tolist() == [1.0, 2.0, 2.0, 1.0, 2.0, 2.0]
    assert g.segment_count == 2


def test_explicit_y_mode_uses_y_pairs() -> None:
    x = np.array([[0.0, 1.0], [2.0, 3.0]])
    y = np.array([[5.0, 6.0], [7.0, 8.0]])
    g = build_geometry(x, y, USES_EXPLICIT_Y)

    assert _same(g.patch_x, [0, 1, np.nan, 2, 3, np.nan])
    assert _same(g.patch_y, [5, 6, np.nan, 7, 8, np.nan])


def test_rows_with_nan_are_dropped_without_renumbering() -> None:
    x = np.array([[1.0, 2.0], [np.nan, 3.0], [4.0, 5.0]])
    g = build_geometry(x, None, USES_ITEM_LABELS_AS_Y)

    assert g.rows.tolist() == [0, 2]
    assert _same(g.patch_y, [1, 1, np.nan, 3, 3, np.nan])


def test_nan_in_y_drops_row_in_explicit_mode() -> None:
    x = np.array([[1.0, 2.0], [3.0, 4.0]])
    y = np.array([[1.0, np.nan], [2.0, 2.0]])
    g = build_geometry(x, y, USES_EXPLICIT_Y)

    assert g.rows.tolist() == [1]
    assert valid_row_mask(x, y, USES_EXPLICIT_Y).tolist() == [False, True]
    assert valid_row_mask(x, y, USES_ITEM_LABELS_AS_Y).tolist() == [True, True]


def test_infinite_values_are_kept() -> None:
    x = np.array([[1.0, np.inf]])
    g = build_geometry(x, None, USES_ITEM_LABELS_AS_Y)

    assert g.segment_count == 1
    assert g.x_extent() == (1.0, 1.0)


def test_empty_input_yields_empty_buffers() -> None:
    g = build_geometry(np.empty((0, 2)), None, USES_ITEM_LABELS_AS_Y)

    assert g.is_empty
    assert g.patch_x.size == 0
    assert g.x_extent() is None


def test_inputs_are_not_modified() -> None:
    x = np.array([[1.0, 2.0], [np.nan, 3.0]])
    before = x.copy()
    build_geometry(x, None, USES_ITEM_LABELS_AS_Y)
    assert _same(x, before)


def test_extents_cover_finite_vertices() -> None:
    g = build_geometry(
        np.array([[0.0, 4.0], [-1.0, 2.0]]),
        np.array([[10.0, 12.0], [3.0, 5.0]]),
        USES_EXPLICIT_Y,
    )
    assert g.x_extent() == (-1.0, 4.0)
    assert g.y_extent() == (3.0, 12.0)


def test_coordinate_matrix_coercion() -> None:
    assert as_coordinate_matrix(None, name="x").shape == (0, 2)
    assert as_coordinate_matrix([], name="x").shape == (0, 2)
    assert as_coordinate_matrix([1, 2], name="x").tolist() == [[1.0, 2.0]]
    assert as_coordinate_matrix([[1, 2], [3, 4]], name="x").shape == (2, 2)

    with pytest.raises(ValueError, match="two columns"):
        as_coordinate_matrix([[1, 2, 3]], name="x_data")
    with pytest.raises(ValueError, match="numeric"):
        as_coordinate_matrix([["a", "b"]], name="x_data")


def test_data_source_is_derived_from_y_data() -> None:
    assert resolve_data_source(None) == USES_ITEM_LABELS_AS_Y
    assert resolve_data_source(np.empty((0, 2))) == USES_ITEM_LABELS_AS_Y
    assert resolve_data_source(np.array([[1.0, 2.0]])) == USES_EXPLICIT_Y
