"""Immutable, versioned snapshot of a delta plot's restorable view state.

A ``DeltaPlotSnapshot`` captures the parts of a chart that are not part of its
data but must survive a save/restore cycle: fixed axis limits, the y-limit
mode, the y source and the color order. Every field is optional; a missing
field means "leave the current state alone" when the snapshot is restored.

The plain form returned by :meth:`DeltaPlotSnapshot.to_dict` contains only
JSON-compatible values and carries a ``version`` key. Unknown keys are ignored
by :meth:`DeltaPlotSnapshot.from_dict`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

SNAPSHOT_VERSION = 1

_FIELDS = ("x_limits", "y_limits", "y_limits_mode", "y_data_source", "color_order")


@dataclass(frozen=True)
class DeltaPlotSnapshot:
    """Immutable record of a chart's restorable state.

    Parameters
    ----------
    x_limits : tuple[float, float] or None
        Fixed x limits, present only when x limits were manual.
    y_limits : tuple[float, float] or None
        Fixed y limits, present only when y limits were manual.
    y_limits_mode : {"auto", "manual"} or None
        Y-limit mode.
    y_data_source : {"ItemLabels", "YData"} or None
        Y source of the chart when the snapshot was taken.
    color_order : tuple[tuple[float, float, float], ...] or None
        RGB colors in ``[0, 1]``.
    version : int
        Snapshot format version.
    """

    x_limits: Optional[Tuple[float, float]] = None
    y_limits: Optional[Tuple[float, float]] = None
    y_limits_mode: Optional[str] = None
    y_data_source: Optional[str] = None
    color_order: Optional[Tuple[Tuple[float, float, float], ...]] = None
    version: int = SNAPSHOT_VERSION

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary, omitting fields that are ``None``."""
        data: Dict[str, Any] = {"version": self.version}
        for name in _FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if name in ("x_limits", "y_limits"):
                value = [float(v) for v in value]
            elif name == "color_order":
                value = [[float(c) for c in row] for row in value]
            data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeltaPlotSnapshot":
        """Build a snapshot from :meth:`to_dict` output.

        Raises
        ------
        ValueError
            If the snapshot was written by a newer format version.
        """
        version = int(data.get("version", SNAPSHOT_VERSION))
        if version > SNAPSHOT_VERSION:
            raise ValueError(
                f"DeltaPlotSnapshot version {version} is newer than supported version {SNAPSHOT_VERSION}"
            )

        def _pair(key: str) -> Optional[Tuple[float, float]]:
            value = data.get(key)
            if value is None:
                return None
            low, high = value
            return float(low), float(high)

        colors = data.get("color_order")
        return cls(
            x_limits=_pair("x_limits"),
            y_limits=_pair("y_limits"),
            y_limits_mode=data.get("y_limits_mode"),
            y_data_source=data.get("y_data_source"),
            color_order=None if colors is None else tuple(
                tuple(float(c) for c in row) for row in colors
            ),
            version=version,
        )

    def __repr__(self) -> str:
        return (
            f"DeltaPlotSnapshot(y_data_source={self.y_data_source!r}, "
            f"y_limits_mode={self.y_limits_mode!r}, y_limits={self.y_limits!r})"
        )


__all__ = ["DeltaPlotSnapshot", "SNAPSHOT_VERSION"]
