"""Endpoint legend manager for delta plots.

Purpose
-------
A delta plot always shows exactly two legend rows, one for the start points
and one for the end points, regardless of how many items are drawn. This
module defines :class:`EndpointLegendManager`, which owns the row models for
those two entries and pushes them to a :class:`~deltaplot.delta_surface.LegendSurface`.

Concepts and structure
----------------------
Each row keeps the last entry and visibility it synced. ``refresh()`` writes
to the surface only for rows whose entry or visibility changed, so repeated
refreshes with the same plan are free.

Examples
--------
>>> from deltaplot.delta_display import LegendEntry
>>> class _Surface:
...     def __init__(self):
...         self.calls = []
...     def set_legend_entry(self, index, entry, visible):
...         self.calls.append((index, entry.label, visible))
>>> surface = _Surface()
>>> mgr = EndpointLegendManager(surface)
>>> start = LegendEntry("Beginning", (1.0, 0.0, 0.0), "o", 2.0)
>>> end = LegendEntry("Ending", (0.0, 0.0, 1.0), "o", 2.0)
>>> mgr.refresh((start, end))
>>> mgr.refresh((start, end))
>>> surface.calls
[(0, 'Beginning', True), (1, 'Ending', True)]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .delta_display import LegendEntry
from .delta_surface import LegendSurface

ENDPOINT_ROLES: Tuple[str, str] = ("start", "end")


@dataclass
class LegendRowModel:
    """Last synced state of one endpoint legend row."""

    role: str
    index: int
    entry: Optional[LegendEntry] = None
    visible: bool = False


class EndpointLegendManager:
    """Keep the two endpoint legend rows in sync with the display plan."""

    def __init__(self, surface: LegendSurface) -> None:
        """Initialize a manager bound to ``surface``."""
        self._surface = surface
        self._rows = tuple(
            LegendRowModel(role=role, index=i) for i, role in enumerate(ENDPOINT_ROLES)
        )
        self._visible = True

    @property
    def rows(self) -> Tuple[LegendRowModel, ...]:
        """Return the start and end row models."""
        return self._rows

    @property
    def labels(self) -> Tuple[str, ...]:
        """Return the synced legend labels (empty strings before the first sync)."""
        return tuple(row.entry.label if row.entry is not None else "" for row in self._rows)

    @property
    def has_legend(self) -> bool:
        """Return ``True`` when both rows are currently shown."""
        return all(row.visible for row in self._rows)

    def set_visible(self, visible: bool) -> None:
        """Show or hide both rows without changing their entries."""
        self._visible = bool(visible)
        self.refresh()

    def refresh(self, entries: Optional[Sequence[LegendEntry]] = None) -> None:
        """Sync both rows with ``entries`` (or the last known entries)."""
        if entries is not None and len(entries) != len(self._rows):
            raise ValueError(f"Expected {len(self._rows)} legend entries, got {len(entries)}")
        for i, row in enumerate(self._rows):
            entry = entries[i] if entries is not None else row.entry
            if entry is None:
                continue
            if row.entry == entry and row.visible == self._visible:
                continue
            self._surface.set_legend_entry(row.index, entry, self._visible)
            row.entry = entry
            row.visible = self._visible


__all__ = ["ENDPOINT_ROLES", "EndpointLegendManager", "LegendRowModel"]
