"""Analysis module: property extraction, DOS, smoothing, band structure and plotting."""

from latticeTensor.analysis.bandstr import BandStructure
from latticeTensor.analysis.dos import DOS, DOSCalculator
from latticeTensor.analysis.extractor import PropertyExtractor
from latticeTensor.analysis.plotter import Decoration, Plotter
from latticeTensor.analysis.smooth import gaussian, smooth_dos
from latticeTensor.analysis.plotting_style import (
    DEFAULT_FIGURE_SIZES,
    DEFAULT_COLORS,
    DEFAULT_FONTSIZES,
    DEFAULT_STYLING,
    DEFAULT_COLORMAPS,
    LINE_STYLES,
)

__all__ = [
    "BandStructure",
    "DOS",
    "DOSCalculator",
    "PropertyExtractor",
    "Decoration",
    "Plotter",
    "gaussian",
    "smooth_dos",
    # Plotting style constants
    "DEFAULT_FIGURE_SIZES",
    "DEFAULT_COLORS",
    "DEFAULT_FONTSIZES",
    "DEFAULT_STYLING",
    "DEFAULT_COLORMAPS",
    "LINE_STYLES",
]
