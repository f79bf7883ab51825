"""View state and axis-limit primitives for delta plots.

Purpose
-------
This module defines ``ViewState``, the state container for everything the
chart shows besides its data: limit modes, grid and label visibility, and the
legend names of the two endpoints. It also owns limit coercion, which accepts
numbers and numeric strings (including SymPy expressions such as ``"2*pi"``)
and enforces the increasing-pair rule.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Sequence, Tuple, Union

import sympy as sp

from .errors import InvalidLimits

LimitsMode = Literal["auto", "manual"]
NumberLikeOrStr = Union[int, float, str]
LimitsLike = Sequence[NumberLikeOrStr]

DEFAULT_END_POINT_LABELS: Tuple[str, str] = ("Beginning", "Ending")


@dataclass
class ViewState:
    """Mutable view state of one delta plot.

    Parameters
    ----------
    y_limits : tuple[float, float]
        Stored y limits, honored only while ``y_limits_mode == "manual"``.
    y_limits_mode : {"auto", "manual"}
        Whether y limits were fixed by the user (API or captured pan/zoom).
    x_limits : tuple[float, float] or None
        Fixed x limits, or ``None`` for automatic.
    grid_visible : bool
        Whether grid lines are shown.
    item_labels_visible : bool
        Whether item labels are drawn next to start points.
    end_point_labels : tuple[str, str]
        Legend names for the start and end points.
    """

    y_limits: Tuple[float, float] = (-math.inf, math.inf)
    y_limits_mode: LimitsMode = "auto"
    x_limits: Optional[Tuple[float, float]] = None
    grid_visible: bool = True
    item_labels_visible: bool = True
    end_point_labels: Tuple[str, str] = field(default=DEFAULT_END_POINT_LABELS)

    @property
    def x_limits_mode(self) -> LimitsMode:
        """Return ``"manual"`` when x limits are fixed."""
        return "auto" if self.x_limits is None else "manual"

    def set_manual_y_limits(self, limits: LimitsLike) -> Tuple[float, float]:
        """Validate ``limits`` and store them as manual y limits."""
        rng = coerce_limits(limits)
        self.y_limits = rng
        self.y_limits_mode = "manual"
        return rng

    def clear_manual_y_limits(self) -> None:
        """Return y limits to automatic mode."""
        self.y_limits = (-math.inf, math.inf)
        self.y_limits_mode = "auto"


def coerce_limit_value(value: Any) -> float:
    """Convert one limit bound to ``float``.

    Numbers are cast directly. Strings are parsed as floats first and then as
    SymPy expressions (``"pi/2"``, ``"-oo"``) evaluated to a real number.

    Raises
    ------
    InvalidLimits
        If the value is not a real number.
    """
    if isinstance(value, bool):
        raise InvalidLimits(f"Limits must be numeric, got {value!r}")
    if isinstance(value, str):
        text = value.strip()
        try:
            return float(text)
        except ValueError:
            pass
        try:
            expr = sp.sympify(text)
        except (sp.SympifyError, TypeError, SyntaxError) as exc:
            raise InvalidLimits(f"Could not interpret limit {value!r}") from exc
        if expr in (sp.oo, -sp.oo):
            return float(expr)
        if not expr.is_number or not expr.is_real:
            raise InvalidLimits(f"Could not interpret limit {value!r} as a real number")
        return float(expr.evalf())
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidLimits(f"Limits must be numeric, got {value!r}") from exc


def coerce_limits(value: Any) -> Tuple[float, float]:
    """Return ``value`` as an increasing ``(low, high)`` float pair.

    Raises
    ------
    InvalidLimits
        If ``value`` is not two values, a bound is NaN, or ``high <= low``.
    """
    if isinstance(value, (str, bytes)):
        raise InvalidLimits("Specify limits as two increasing values.")
    try:
        items = list(value)
    except TypeError as exc:
        raise InvalidLimits("Specify limits as two increasing values.") from exc
    if len(items) != 2:
        raise InvalidLimits("Specify limits as two increasing values.")
    low, high = (coerce_limit_value(v) for v in items)
    if math.isnan(low) or math.isnan(high) or not high > low:
        raise InvalidLimits("Specify limits as two increasing values.")
    return low, high


__all__ = [
    "DEFAULT_END_POINT_LABELS",
    "LimitsMode",
    "ViewState",
    "coerce_limit_value",
    "coerce_limits",
]
