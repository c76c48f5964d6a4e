"""Plotter: render curves and density maps to image files with matplotlib."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union
import torch

try:
    import matplotlib.pyplot as plt
    import matplotlib.axes as maxes
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

from latticeTensor.analysis.dos import DOS
from latticeTensor.analysis.plotting_style import (
    DEFAULT_COLORMAPS,
    DEFAULT_COLORS,
    DEFAULT_FIGURE_SIZES,
    DEFAULT_FONTSIZES,
    DEFAULT_STYLING,
    LINE_STYLES,
)
from latticeTensor.analysis.smooth import smooth_dos
from latticeTensor.core.base import BaseTensor

ArrayLike = Union[torch.Tensor, BaseTensor, Sequence[float]]
ColorLike = Union[str, Tuple[int, int, int]]


@dataclass
class Decoration:
    """
    Line decoration for a curve.

    Attributes:
        color: Matplotlib color or an (r, g, b) tuple with 0-255 components
        line_style: One of LINE_STYLES keys or a matplotlib line style
        line_width: Line width in points
    """
    color: Optional[ColorLike] = None
    line_style: str = "solid"
    line_width: float = 1.0

    def as_kwargs(self) -> dict:
        kwargs = {
            "linestyle": LINE_STYLES.get(self.line_style, self.line_style),
            "linewidth": self.line_width,
        }
        if isinstance(self.color, tuple):
            kwargs["color"] = tuple(c / 255 for c in self.color)
        elif self.color is not None:
            kwargs["color"] = self.color
        return kwargs


def _to_tensor(values: ArrayLike) -> torch.Tensor:
    if isinstance(values, BaseTensor):
        return values.tensor.detach().cpu()
    return torch.as_tensor(values, dtype=torch.float64).detach().cpu()


class Plotter:
    """
    Accumulates curves or a density map on one figure and saves it.

    Without hold, every plot call replaces what was drawn before; with
    hold, curves are layered on top of each other.

    Example:
        >>> plotter = Plotter()
        >>> plotter.set_labels(x="Energy", y="DOS")
        >>> plotter.plot_dos(dos, sigma=0.03)
        >>> plotter.save("figures/DOS.png")
    """

    def __init__(self, figsize: Optional[Tuple[float, float]] = None) -> None:
        if not MATPLOTLIB_AVAILABLE:
            raise ImportError("matplotlib is required for plotting")
        self.figsize = figsize or DEFAULT_FIGURE_SIZES['single']
        self.hold = False
        self.label_x: Optional[str] = None
        self.label_y: Optional[str] = None
        self.title: Optional[str] = None
        self.bounds_x: Optional[Tuple[float, float]] = None
        self.bounds_y: Optional[Tuple[float, float]] = None
        self._fig = None
        self._ax: Optional["maxes.Axes"] = None

    @property
    def ax(self) -> "maxes.Axes":
        """Current axis, created on first use."""
        if self._ax is None:
            self._fig, self._ax = plt.subplots(figsize=self.figsize)
        return self._ax

    def set_hold(self, hold: bool) -> None:
        self.hold = hold

    def set_labels(self, x: Optional[str] = None, y: Optional[str] = None) -> None:
        if x is not None:
            self.label_x = x
        if y is not None:
            self.label_y = y

    def set_title(self, title: str) -> None:
        self.title = title

    def set_bounds_x(self, lower: float, upper: float) -> None:
        if upper <= lower:
            raise ValueError(f"Upper bound ({upper}) must exceed lower bound ({lower})")
        self.bounds_x = (lower, upper)

    def set_bounds_y(self, lower: float, upper: float) -> None:
        if upper <= lower:
            raise ValueError(f"Upper bound ({upper}) must exceed lower bound ({lower})")
        self.bounds_y = (lower, upper)

    def _prepare(self) -> "maxes.Axes":
        if not self.hold:
            self.clear()
        return self.ax

    def plot(self, values: ArrayLike, decoration: Optional[Decoration] = None) -> None:
        """
        Plot a 1-D curve against its sample index or a 2-D density map.

        Args:
            values: Tensor, BaseTensor or sequence; 1-D or 2-D
            decoration: Line decoration (1-D only)

        Raises:
            ValueError: For arrays with more than two dimensions
        """
        data = _to_tensor(values)
        if data.ndim == 1:
            self.plot_xy(torch.arange(data.shape[0]), data, decoration)
        elif data.ndim == 2:
            self.plot_density(data)
        else:
            raise ValueError(f"Can only plot 1-D or 2-D data, got shape {tuple(data.shape)}")

    def plot_xy(
        self,
        x: ArrayLike,
        y: ArrayLike,
        decoration: Optional[Decoration] = None,
    ) -> None:
        """Plot y against x."""
        x = _to_tensor(x)
        y = _to_tensor(y)
        if x.shape != y.shape:
            raise ValueError(f"x and y must have the same shape, got {tuple(x.shape)} and {tuple(y.shape)}")
        ax = self._prepare()
        kwargs = {"color": DEFAULT_COLORS['primary']}
        if decoration is not None:
            kwargs.update(decoration.as_kwargs())
        ax.plot(x.numpy(), y.numpy(), **kwargs)

    def plot_density(self, values: ArrayLike) -> None:
        """
        Plot a 2-D field with axis 0 along x and axis 1 along y.

        NaN entries (sites skipped by a filter) are left blank.
        """
        data = _to_tensor(values)
        if data.ndim != 2:
            raise ValueError(f"Density maps must be 2-D, got shape {tuple(data.shape)}")
        self.clear()
        image = self.ax.imshow(
            data.T.numpy(),
            origin="lower",
            cmap=DEFAULT_COLORMAPS['density'],
            interpolation="nearest",
        )
        self._fig.colorbar(image, ax=self.ax)

    def plot_dos(
        self,
        dos: DOS,
        sigma: Optional[float] = None,
        window_size: int = 51,
        decoration: Optional[Decoration] = None,
    ) -> None:
        """
        Plot a DOS against energy, optionally Gaussian smoothed.

        Args:
            dos: DOS to plot
            sigma: Smoothing width in energy units (None for no smoothing)
            window_size: Smoothing window in samples
            decoration: Line decoration
        """
        if sigma is not None:
            dos = smooth_dos(dos, sigma, window_size)
        self.plot_xy(dos.energies, dos.values, decoration)
        if self.bounds_x is None:
            self.ax.set_xlim(dos.lower, dos.upper)

    def clear(self) -> None:
        """Remove everything that has been drawn."""
        if self._fig is not None:
            plt.close(self._fig)
        self._fig = None
        self._ax = None

    def save(self, filename: Union[str, Path]) -> Path:
        """
        Apply labels and bounds and write the figure to an image file.

        Parent directories are created as needed.

        Returns:
            Path of the written file
        """
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)

        ax = self.ax
        fontsize = DEFAULT_FONTSIZES['labels']
        if self.label_x is not None:
            ax.set_xlabel(self.label_x, fontsize=fontsize)
        if self.label_y is not None:
            ax.set_ylabel(self.label_y, fontsize=fontsize)
        if self.title is not None:
            ax.set_title(self.title, fontsize=DEFAULT_FONTSIZES['titles'])
        if self.bounds_x is not None:
            ax.set_xlim(self.bounds_x)
        if self.bounds_y is not None:
            ax.set_ylim(self.bounds_y)

        self._fig.tight_layout()
        self._fig.savefig(path, dpi=DEFAULT_STYLING['dpi'])
        return path
