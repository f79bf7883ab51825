"""Top-level public API for the ``deltaplot`` package.

This module re-exports the chart and its building blocks so users can import
from a single namespace, for example:

>>> from deltaplot import deltaplot, DeltaPlot  # doctest: +SKIP

Lower-level pieces (geometry, display reconciliation, the rendering-surface
protocols) are exported as well for custom hosts and tests.
"""

from .DeltaPlot import DeltaPlot, deltaplot
from .DeltaPlotSnapshot import SNAPSHOT_VERSION, DeltaPlotSnapshot
from .delta_colors import color_gradient, parse_color_order
from .delta_display import DisplayPlan, ItemLabelPlacement, LegendEntry, reconcile_display
from .delta_geometry import (
    USES_EXPLICIT_Y,
    USES_ITEM_LABELS_AS_Y,
    GeometryBuffers,
    YDataSource,
    build_geometry,
)
from .delta_legend import EndpointLegendManager
from .delta_normalization import NormalizedDeltaInputs, normalize_delta_inputs
from .delta_options import DELTAPLOT_OPTIONS
from .delta_surface import MARKER_SYMBOLS, AxesSurface, LegendSurface, PlotlyDeltaSurface
from .delta_view import ViewState
from .errors import DataSizeMismatch, InvalidColorConfiguration, InvalidLimits, MalformedInput

__version__ = "0.1.0"
