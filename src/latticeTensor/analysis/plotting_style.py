"""Standardized plotting style constants for latticeTensor.

All constants can be overridden via keyword arguments of the plotting
methods, or through a Decoration for Plotter curves.

Example:
    >>> from latticeTensor.analysis.plotting_style import DEFAULT_COLORS
    >>> fig, ax = plt.subplots(figsize=DEFAULT_FIGURE_SIZES['single'])
    >>> ax.plot(x, y, color=DEFAULT_COLORS['primary'])
"""

# Figure sizes for different plot types
DEFAULT_FIGURE_SIZES = {
    'single': (6, 5),
    'wide': (8, 5),
    'density': (6, 6),
}

# Color scheme for plots
DEFAULT_COLORS = {
    'primary': '#3498db',
    'reference': '#e74c3c',
    'potential': '#e04040',
    'separator': 'gray',
    'fermi_level': '#27ae60',
    'fill_default': 'skyblue',
}

# Font sizes for different text elements
DEFAULT_FONTSIZES = {
    'labels': 12,
    'titles': 12,
    'tick': 11,
}

# Styling options for plot elements
DEFAULT_STYLING = {
    'grid_alpha': 0.3,
    'band_linewidth': 1.0,
    'separator_alpha': 0.5,
    'dpi': 150,
    'fill_alpha': 0.3,
    'reference_linewidth': 1.5,
}

# Default colormaps for different data types
DEFAULT_COLORMAPS = {
    'density': 'viridis',
}

# Line styles for curves and reference lines
LINE_STYLES = {
    'solid': '-',
    'dashed': '--',
    'dotted': ':',
    'dash_dot': '-.',
}
