from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
import pytest

from deltaplot.delta_normalization import (
    as_label_vector,
    as_numeric_vector,
    default_item_labels,
    normalize_delta_inputs,
)
from deltaplot.errors import MalformedInput


def test_two_vector_form_stacks_items_and_defaults_labels() -> None:
    inputs = normalize_delta_inputs([10, 20], [15, 25])

    assert inputs.parent is None
    assert inputs.x_data.tolist() == [[10.0, 15.0], [20.0, 25.0]]
    assert inputs.y_data is None
    assert inputs.item_labels == ("1", "2")
    assert inputs.options == {}


def test_four_vector_form_sets_explicit_y() -> None:
    inputs = normalize_delta_inputs([0, 1], [2, 3], [4, 5], [6, 7])

    assert inputs.x_data.tolist() == [[0.0, 4.0], [1.0, 5.0]]
    assert inputs.y_data.tolist() == [[2.0, 6.0], [3.0, 7.0]]
    assert inputs.item_labels == ("1", "2")


def test_trailing_labels_are_recognized_by_odd_leftover_count() -> None:
    inputs = normalize_delta_inputs([1, 2], [3, 4], ["a", "b"], "Title", "hello")

    assert inputs.item_labels == ("a", "b")
    assert inputs.options == {"title": "hello"}


def test_name_value_pairs_and_keywords_resolve_to_attributes() -> None:
    inputs = normalize_delta_inputs([1], [2], "GridVisible", "off", Marker="s", line_width=3)

    assert inputs.options == {"grid_visible": "off", "marker": "s", "line_width": 3}


def test_name_value_only_form_leaves_data_unset() -> None:
    inputs = normalize_delta_inputs("XData", [[1, 2]], "Title", "t")

    assert inputs.x_data is None
    assert inputs.item_labels is None
    assert inputs.options == {"x_data": [[1, 2]], "title": "t"}


def test_leading_figure_is_taken_as_parent() -> None:
    fig = go.Figure()
    inputs = normalize_delta_inputs(fig, [1, 2], [3, 4])

    assert inputs.parent is fig
    assert inputs.x_data.shape == (2, 2)


def test_matrices_are_flattened_column_major() -> None:
    inputs = normalize_delta_inputs(np.array([[1, 2], [3, 4]]), np.array([[5, 6], [7, 8]]))

    assert inputs.x_data[:, 0].tolist() == [1.0, 3.0, 2.0, 4.0]
    assert inputs.x_data[:, 1].tolist() == [5.0, 7.0, 6.0, 8.0]


def test_scalar_coordinates_form_a_single_item() -> None:
    inputs = normalize_delta_inputs(1, 2)
    assert inputs.x_data.tolist() == [[1.0, 2.0]]


def test_coordinate_size_mismatch_is_malformed() -> None:
    with pytest.raises(MalformedInput, match="Size of all coordinate vectors"):
        normalize_delta_inputs([1, 2], [3])

    with pytest.raises(MalformedInput, match="Size of all coordinate vectors"):
        normalize_delta_inputs([1, 2], [3, 4], [5, 6], [7])


def test_label_count_mismatch_is_malformed() -> None:
    with pytest.raises(MalformedInput, match="Number of item labels"):
        normalize_delta_inputs([1, 2], [3, 4], ["only-one"])


def test_non_label_leftover_is_malformed() -> None:
    with pytest.raises(MalformedInput, match="Wrong input arguments"):
        normalize_delta_inputs([1, 2], [3, 4], 5)


def test_odd_name_value_list_is_malformed() -> None:
    with pytest.raises(MalformedInput, match="Wrong input arguments"):
        normalize_delta_inputs([1, 2], [3, 4], ["a", "b"], "Title")


def test_unknown_option_raises_value_error() -> None:
    with pytest.raises(ValueError, match="Unknown deltaplot option"):
        normalize_delta_inputs([1], [2], Colour="red")


def test_vector_and_label_helpers() -> None:
    assert as_numeric_vector(True) is None
    assert as_numeric_vector("12") is None
    assert as_numeric_vector([1, "a"]) is None
    assert as_numeric_vector(np.array([1, 2], dtype=np.int64)).dtype == np.float64

    assert as_label_vector("one") == ("one",)
    assert as_label_vector(np.array(["a", "b"])) == ("a", "b")
    assert as_label_vector([1, 2]) is None
    assert as_label_vector([]) is None

    assert default_item_labels(3) == ("1", "2", "3")
    assert default_item_labels(0) == ()
