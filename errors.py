"""Error and warning taxonomy for :mod:`deltaplot`.

Fatal conditions are exceptions raised from the operation that detected them
(construction or limit assignment) and leave prior state untouched. Soft
conditions are :class:`UserWarning` subclasses emitted through
:func:`warnings.warn`; the chart degrades its display instead of raising.
"""

from __future__ import annotations


class MalformedInput(ValueError):
    """Positional constructor arguments do not match an accepted shape."""


class InvalidLimits(ValueError):
    """An axis-limits pair is not two increasing values."""


class DataSizeMismatch(UserWarning):
    """``x_data``, ``y_data`` and ``item_labels`` heights disagree."""


class InvalidColorConfiguration(UserWarning):
    """A ``color_order`` value could not be used as configured."""


__all__ = [
    "DataSizeMismatch",
    "InvalidColorConfiguration",
    "InvalidLimits",
    "MalformedInput",
]
