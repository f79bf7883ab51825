"""Constructor input normalization for :class:`deltaplot.DeltaPlot.DeltaPlot`.

Purpose
-------
This module isolates the positional-argument grammar accepted by
``deltaplot(...)``. It converts the accepted call forms into a canonical
:class:`NormalizedDeltaInputs` record that the chart can apply without
embedding branching logic in its constructor.

Architecture
------------
The normalizer is stateless and side-effect free. Call forms are recognized by
an explicit, ordered list of matchers; each matcher either consumes a prefix of
the arguments completely or declines, so a failed match never leaves partial
state behind.

Accepted forms, in precedence order::

    deltaplot([parent,] x1, x2, [labels,] name, value, ..., **options)
    deltaplot([parent,] x1, y1, x2, y2, [labels,] name, value, ..., **options)
    deltaplot([parent,] name, value, ..., **options)

A trailing label argument is recognized by count: when an odd number of
positional arguments remains after the coordinates, the first of them must be
the labels and the rest are name/value pairs.

Examples
--------
>>> from deltaplot.delta_normalization import normalize_delta_inputs
>>> inputs = normalize_delta_inputs([10, 20], [15, 25])
>>> inputs.x_data.tolist()
[[10.0, 15.0], [20.0, 25.0]]
>>> inputs.item_labels
('1', '2')

Discoverability
---------------
Option names are resolved by ``delta_options.py``; the resulting fields are
applied by ``DeltaPlot.py``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Callable, Optional

import numpy as np
from plotly.basedatatypes import BaseFigure

from .delta_options import resolve_option_name
from .errors import MalformedInput

_SIZE_MISMATCH = "Size of all coordinate vectors must be the same."
_LABEL_MISMATCH = (
    "Number of item labels must match the number of elements in the coordinate vectors."
)
_WRONG_ARGUMENTS = "Wrong input arguments"


@dataclass(frozen=True)
class NormalizedDeltaInputs:
    """Canonical constructor fields.

    ``x_data``/``y_data``/``item_labels`` are ``None`` when the call did not
    provide them positionally; ``options`` maps resolved attribute names to
    values in application order.
    """

    parent: Optional[BaseFigure] = None
    x_data: Optional[np.ndarray] = None
    y_data: Optional[np.ndarray] = None
    item_labels: Optional[tuple[str, ...]] = None
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class _Match:
    consumed: int
    x_data: np.ndarray
    y_data: Optional[np.ndarray]
    count: int


def as_numeric_vector(value: Any) -> Optional[np.ndarray]:
    """Return ``value`` flattened to a float vector, or ``None`` if not numeric.

    Booleans and strings are not numeric. Multi-dimensional arrays are
    flattened in column-major order.
    """
    if isinstance(value, (bool, np.bool_, str, bytes)):
        return None
    if isinstance(value, Real):
        return np.asarray([float(value)], dtype=np.float64)
    if isinstance(value, np.ndarray):
        if value.dtype.kind not in {"i", "u", "f"}:
            return None
        return value.astype(np.float64).ravel(order="F")
    if isinstance(value, Sequence):
        arr = np.asarray(value, dtype=object)
        flat = arr.ravel(order="F")
        if not all(isinstance(v, Real) and not isinstance(v, (bool, np.bool_)) for v in flat):
            return None
        return np.asarray(flat, dtype=np.float64)
    return None


def as_label_vector(value: Any) -> Optional[tuple[str, ...]]:
    """Return ``value`` as a tuple of labels, or ``None`` if it is not textual.

    Accepts a single string, a sequence of strings, a NumPy string array or a
    categorical object exposing ``categories``.
    """
    if isinstance(value, str):
        return (value,)
    if hasattr(value, "categories"):
        return tuple(str(v) for v in np.asarray(value, dtype=object).ravel())
    if isinstance(value, np.ndarray):
        if value.dtype.kind in {"U", "S"}:
            return tuple(str(v) for v in value.astype(str).ravel(order="F"))
        if value.dtype.kind == "O" and all(isinstance(v, str) for v in value.ravel()):
            return tuple(value.ravel(order="F").tolist())
        return None
    if isinstance(value, Sequence) and value and all(isinstance(v, str) for v in value):
        return tuple(value)
    return None


def default_item_labels(count: int) -> tuple[str, ...]:
    """Return ``("1", ..., "count")``."""
    return tuple(str(i) for i in range(1, count + 1))


def _match_four_vectors(args: Sequence[Any]) -> Optional[_Match]:
    if len(args) < 4:
        return None
    vectors = [as_numeric_vector(a) for a in args[:4]]
    if any(v is None for v in vectors):
        return None
    x1, y1, x2, y2 = vectors
    if not (x1.size == y1.size == x2.size == y2.size):
        raise MalformedInput(_SIZE_MISMATCH)
    return _Match(
        consumed=4,
        x_data=np.column_stack([x1, x2]),
        y_data=np.column_stack([y1, y2]),
        count=x1.size,
    )


def _match_two_vectors(args: Sequence[Any]) -> Optional[_Match]:
    if len(args) < 2:
        return None
    x1, x2 = as_numeric_vector(args[0]), as_numeric_vector(args[1])
    if x1 is None or x2 is None:
        return None
    if x1.size != x2.size:
        raise MalformedInput(_SIZE_MISMATCH)
    return _Match(consumed=2, x_data=np.column_stack([x1, x2]), y_data=None, count=x1.size)


# Ordered; the first matcher that accepts wins.
_COORDINATE_MATCHERS: tuple[Callable[[Sequence[Any]], Optional[_Match]], ...] = (
    _match_four_vectors,
    _match_two_vectors,
)


def _match_coordinates(args: Sequence[Any]) -> Optional[_Match]:
    for matcher in _COORDINATE_MATCHERS:
        match = matcher(args)
        if match is not None:
            return match
    return None


def _pair_options(args: Sequence[Any], kwargs: dict[str, Any]) -> dict[str, Any]:
    if len(args) % 2 == 1:
        raise MalformedInput(_WRONG_ARGUMENTS)
    options: dict[str, Any] = {}
    for name, value in zip(args[0::2], args[1::2]):
        if not isinstance(name, str):
            raise MalformedInput(
                f"{_WRONG_ARGUMENTS}: expected an option name, got {type(name).__name__}"
            )
        options[resolve_option_name(name)] = value
    for name, value in kwargs.items():
        options[resolve_option_name(name)] = value
    return options


def normalize_delta_inputs(*args: Any, **kwargs: Any) -> NormalizedDeltaInputs:
    """Normalize ``deltaplot(...)`` arguments.

    Returns
    -------
    NormalizedDeltaInputs
        Parent figure, coordinate arrays, labels and resolved options.

    Raises
    ------
    MalformedInput
        If coordinate vectors or labels disagree in size, or the arguments do
        not match an accepted form.
    ValueError
        If an option name is unknown.
    """
    rest = list(args)
    parent: Optional[BaseFigure] = None
    if rest and isinstance(rest[0], BaseFigure):
        parent = rest.pop(0)

    match = _match_coordinates(rest)
    if match is None:
        return NormalizedDeltaInputs(parent=parent, options=_pair_options(rest, kwargs))

    rest = rest[match.consumed:]
    if len(rest) % 2 == 1:
        labels = as_label_vector(rest[0])
        if labels is None:
            raise MalformedInput(_WRONG_ARGUMENTS)
        if len(labels) != match.count:
            raise MalformedInput(_LABEL_MISMATCH)
        rest = rest[1:]
    else:
        labels = default_item_labels(match.count)

    return NormalizedDeltaInputs(
        parent=parent,
        x_data=match.x_data,
        y_data=match.y_data,
        item_labels=labels,
        options=_pair_options(rest, kwargs),
    )


__all__ = [
    "NormalizedDeltaInputs",
    "as_label_vector",
    "as_numeric_vector",
    "default_item_labels",
    "normalize_delta_inputs",
]
