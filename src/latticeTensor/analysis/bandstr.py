"""Band structure analysis and plotting."""

from typing import Optional, List, Tuple
import torch

try:
    import matplotlib.pyplot as plt
    import matplotlib.axes as maxes
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

from latticeTensor.analysis.plotting_style import (
    DEFAULT_COLORS,
    DEFAULT_FIGURE_SIZES,
    DEFAULT_FONTSIZES,
    DEFAULT_STYLING,
    LINE_STYLES,
)


class BandStructure:
    """
    Band structure calculator with plotting.

    Stores eigenvalues along high-symmetry paths and
    provides visualization.
    """

    def __init__(self) -> None:
        """Initialize BandStructure calculator."""
        self.k_path: Optional[torch.Tensor] = None
        self.eigenvalues: Optional[torch.Tensor] = None
        self.ticks: Optional[List[Tuple[int, str]]] = None

    def compute(
        self,
        eigenvalues: torch.Tensor,
        k_path: torch.Tensor,
        ticks: Optional[List[Tuple[int, str]]] = None,
    ) -> None:
        """
        Store band structure results.

        Args:
            eigenvalues: Eigenvalues at each k-point, shape (N_k, N_band)
            k_path: K-point path, shape (N_k, dim)
            ticks: List of (index, label) for high-symmetry point markers

        Raises:
            ValueError: If eigenvalues and k_path disagree on N_k
        """
        if eigenvalues.ndim != 2:
            raise ValueError(f"eigenvalues must have shape (N_k, N_band), got {tuple(eigenvalues.shape)}")
        if eigenvalues.shape[0] != k_path.shape[0]:
            raise ValueError(
                f"Got {eigenvalues.shape[0]} eigenvalue rows for {k_path.shape[0]} k-points"
            )
        self.eigenvalues = eigenvalues
        self.k_path = k_path
        self.ticks = ticks

    def energy_bounds(self) -> Tuple[float, float]:
        """(min, max) over all bands."""
        if self.eigenvalues is None:
            raise ValueError("No eigenvalues stored. Call compute() first.")
        return self.eigenvalues.min().item(), self.eigenvalues.max().item()

    def plot(
        self,
        ax: Optional["maxes.Axes"] = None,
        energy_range: Optional[Tuple[float, float]] = None,
        ylabel: str = "Energy",
        xlabel: str = "k",
        title: Optional[str] = None,
        fontsize: int = DEFAULT_FONTSIZES['labels'],
        **kwargs,
    ) -> "maxes.Axes":
        """
        Plot band structure.

        Vertical separators are drawn at every interior tick, i.e. where
        one path segment ends and the next begins.

        Args:
            ax: Matplotlib axis (if None, creates new figure)
            energy_range: (ymin, ymax) for energy axis
            ylabel: Label for y-axis
            xlabel: Label for x-axis
            title: Plot title
            fontsize: Font size for labels
            **kwargs: Additional arguments for plot()

        Returns:
            Matplotlib axis with band structure plot
        """
        if not MATPLOTLIB_AVAILABLE:
            raise ImportError("matplotlib is required for plotting")

        if self.eigenvalues is None:
            raise ValueError("No eigenvalues stored. Call compute() first.")

        if ax is None:
            fig, ax = plt.subplots(figsize=DEFAULT_FIGURE_SIZES['single'])

        N_k, N_band = self.eigenvalues.shape

        k_dist = torch.arange(N_k).numpy()
        eigenvalues_np = self.eigenvalues.cpu().numpy()

        kwargs.setdefault("color", DEFAULT_COLORS['primary'])
        kwargs.setdefault("linewidth", DEFAULT_STYLING['band_linewidth'])
        for n in range(N_band):
            ax.plot(k_dist, eigenvalues_np[:, n], **kwargs)

        if self.ticks is not None:
            tick_positions = [pos for pos, _ in self.ticks]
            tick_labels = [label for _, label in self.ticks]
            ax.set_xticks(tick_positions)
            ax.set_xticklabels(tick_labels, fontsize=fontsize)
            for pos in tick_positions[1:-1]:
                ax.axvline(
                    x=pos,
                    color=DEFAULT_COLORS['separator'],
                    linestyle=LINE_STYLES['dashed'],
                    alpha=DEFAULT_STYLING['separator_alpha'],
                )

        ax.set_xlabel(xlabel, fontsize=fontsize)
        ax.set_ylabel(ylabel, fontsize=fontsize)
        if title is not None:
            ax.set_title(title, fontsize=fontsize)
        last = N_k - 1 if self.ticks is None else max(self.ticks[-1][0], N_k - 1)
        ax.set_xlim(0, max(last, 1))
        ax.grid(True, alpha=DEFAULT_STYLING['grid_alpha'])

        if energy_range is not None:
            ax.set_ylim(energy_range)

        return ax

    def add_reference_line(
        self,
        energy: float,
        label: Optional[str] = None,
        color: str = DEFAULT_COLORS['fermi_level'],
        linestyle: str = LINE_STYLES['dotted'],
        ax: Optional["maxes.Axes"] = None,
        **kwargs,
    ) -> None:
        """
        Add horizontal reference line to existing plot.

        Useful for marking the Fermi level or a band touching point.

        Args:
            energy: Energy value for horizontal line
            label: Label for the line (shown in legend)
            color: Line color
            linestyle: Line style ('-', '--', ':', '-.')
            ax: Matplotlib axis (if None, uses current axis)
            **kwargs: Additional arguments for axhline()
        """
        if not MATPLOTLIB_AVAILABLE:
            raise ImportError("matplotlib is required for plotting")

        if ax is None:
            ax = plt.gca()

        ax.axhline(
            y=energy,
            color=color,
            linestyle=linestyle,
            linewidth=DEFAULT_STYLING['reference_linewidth'],
            label=label,
            **kwargs,
        )
