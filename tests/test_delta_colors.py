from __future__ import annotations

import numpy as np
import pytest

from deltaplot.delta_colors import (
    GRADIENT_LENGTH,
    color_gradient,
    default_color_order,
    parse_color_order,
    rgb_string,
    to_plotly_colorscale,
)


def test_default_color_order_uses_first_two_plotly_colors() -> None:
    colors = default_color_order()

    assert colors.shape == (2, 3)
    np.testing.assert_allclose(colors[0], np.array([31, 119, 180]) / 255.0)
    np.testing.assert_allclose(colors[1], np.array([255, 127, 14]) / 255.0)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#ff0000", [[1.0, 0.0, 0.0]]),
        ("#00f", [[0.0, 0.0, 1.0]]),
        ("red", [[1.0, 0.0, 0.0]]),
        ("b", [[0.0, 0.0, 1.0]]),
        (["red", "blue"], [[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]),
        ("rgb(0, 51, 255)", [[0.0, 0.2, 1.0]]),
        ([1, 0, 0], [[1.0, 0.0, 0.0]]),
        ([[1, 0, 0], "#0000ff"], [[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]),
        (np.array([[0.0, 0.5, 1.0], [1.0, 1.0, 1.0]]), [[0.0, 0.5, 1.0], [1.0, 1.0, 1.0]]),
    ],
)
def test_parse_color_order_accepts_supported_forms(value, expected) -> None:
    np.testing.assert_allclose(parse_color_order(value), np.array(expected))


@pytest.mark.parametrize(
    "value",
    ["not-a-color", "#12345", [2, 0, 0], [[1, 0]], [], 7, "rgb(300, 0, 0)"],
)
def test_parse_color_order_rejects_invalid_values(value) -> None:
    with pytest.raises(ValueError):
        parse_color_order(value)


def test_gradient_runs_from_start_to_end() -> None:
    cmap = color_gradient(np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]))

    assert cmap.shape == (GRADIENT_LENGTH, 3)
    np.testing.assert_allclose(cmap[0], [1.0, 0.0, 0.0])
    np.testing.assert_allclose(cmap[-1], [0.0, 0.0, 1.0])
    np.testing.assert_allclose(cmap[GRADIENT_LENGTH // 2], [0.5, 0.0, 0.5])


def test_single_color_gradient_is_constant() -> None:
    cmap = color_gradient(np.array([[0.2, 0.4, 0.6]]))
    assert np.allclose(cmap, [0.2, 0.4, 0.6])


def test_plotly_conversion_helpers() -> None:
    assert rgb_string((1.0, 0.0, 0.5)) == "rgb(255, 0, 128)"

    scale = to_plotly_colorscale(color_gradient(np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]), length=3))
    assert scale == [
        [0.0, "rgb(0, 0, 0)"],
        [0.5, "rgb(128, 128, 128)"],
        [1.0, "rgb(255, 255, 255)"],
    ]
