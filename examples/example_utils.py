"""Shared utilities for latticeTensor examples.

Key utilities:
- Path setup: Automatic src/ path configuration
- Output: figures/ directory and consistent "Saved:" reporting
- Console: section banners
"""

from pathlib import Path
import sys

import matplotlib

# Examples only write image files
matplotlib.use("Agg")

# =============================================================================
# Path Setup (auto-run on import)
# =============================================================================


def setup_project_path() -> None:
    """Add src/ directory to Python path for imports.

    This function runs automatically when example_utils is imported,
    so the examples run from a plain checkout as well as an installed package.
    """
    src_path = Path(__file__).parent.parent / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


# Auto-run path setup on module import
setup_project_path()

from latticeTensor.analysis import DEFAULT_STYLING, Plotter  # noqa: E402

# =============================================================================
# Output Helpers
# =============================================================================

FIGURES_DIR = Path("figures")


def figure_path(filename: str) -> Path:
    """Path of an output figure inside the relative figures/ directory."""
    return FIGURES_DIR / filename


def save_plot(plotter: Plotter, filename: str) -> Path:
    """Save a Plotter figure into figures/ and report it.

    Args:
        plotter: Plotter holding the figure
        filename: File name inside figures/

    Returns:
        Path of the written file
    """
    path = plotter.save(figure_path(filename))
    print(f"   Saved: {path}")
    return path


def print_header(title: str) -> None:
    """Print a section banner."""
    print("=" * 70)
    print(title)
    print("=" * 70)


def save_figure(fig, filename: str, dpi: int = DEFAULT_STYLING['dpi']) -> Path:
    """Save a matplotlib figure into figures/ with standard settings.

    Args:
        fig: matplotlib Figure object
        filename: File name inside figures/
        dpi: Resolution

    Returns:
        Path of the written file
    """
    path = figure_path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    print(f"   Saved: {path}")
    return path
