"""
Unit tests for Plotter and BandStructure.

Figures are rendered with the Agg backend and written to a temporary
directory.
"""

import math

import matplotlib.pyplot as plt
import pytest
import torch

from latticeTensor.analysis import BandStructure, Decoration, DOS, Plotter
from latticeTensor.core import BaseTensor


@pytest.fixture
def plotter():
    p = Plotter()
    yield p
    p.clear()


class TestDecoration:
    """Test conversion to matplotlib keyword arguments."""

    def test_rgb_tuple(self):
        kwargs = Decoration(color=(255, 0, 51), line_style="dashed", line_width=2).as_kwargs()
        assert kwargs["color"] == pytest.approx((1.0, 0.0, 0.2))
        assert kwargs["linestyle"] == "--"
        assert kwargs["linewidth"] == 2

    def test_named_color(self):
        assert Decoration(color="red").as_kwargs()["color"] == "red"

    def test_no_color(self):
        assert "color" not in Decoration().as_kwargs()


class TestPlotter:
    """Test rendering to image files."""

    def test_save_curve(self, plotter, tmp_path):
        plotter.set_labels(x="x", y="y")
        plotter.plot(torch.sin(torch.linspace(0, 6, 50)))
        path = plotter.save(tmp_path / "figures" / "curve.png")
        assert path.exists()
        assert plotter.ax.get_xlabel() == "x"

    def test_save_density_with_nan(self, plotter, tmp_path):
        values = torch.rand(5, 4, dtype=torch.float64)
        values[2, 2] = float("nan")
        plotter.plot(BaseTensor(values, labels=["x", "y"]))
        assert plotter.save(tmp_path / "density.png").exists()

    def test_hold_layers_curves(self, plotter):
        plotter.set_hold(True)
        plotter.plot([0.0, 1.0, 2.0])
        plotter.plot([2.0, 1.0, 0.0], Decoration(color=(0, 0, 255)))
        assert len(plotter.ax.get_lines()) == 2

    def test_without_hold_replaces_curves(self, plotter):
        plotter.plot([0.0, 1.0, 2.0])
        plotter.plot([2.0, 1.0, 0.0])
        assert len(plotter.ax.get_lines()) == 1

    def test_bounds_applied_on_save(self, plotter, tmp_path):
        plotter.set_bounds_y(-1.0, 2.0)
        plotter.plot([0.0, 1.0])
        plotter.save(tmp_path / "bounds.png")
        assert plotter.ax.get_ylim() == pytest.approx((-1.0, 2.0))

    def test_plot_dos(self, plotter, tmp_path):
        values = torch.zeros(100, dtype=torch.float64)
        values[50] = 10.0
        plotter.plot_dos(DOS(-1.0, 1.0, values), sigma=0.05, window_size=21)
        assert plotter.ax.get_xlim() == pytest.approx((-1.0, 1.0))
        assert plotter.save(tmp_path / "dos.png").exists()

    def test_invalid_input(self, plotter):
        with pytest.raises(ValueError):
            plotter.plot(torch.zeros(2, 2, 2))
        with pytest.raises(ValueError):
            plotter.plot_xy([0.0, 1.0], [0.0])
        with pytest.raises(ValueError):
            plotter.set_bounds_x(1.0, 1.0)


class TestBandStructure:
    """Test band structure storage and plotting."""

    def test_compute_shape_mismatch(self):
        bs = BandStructure()
        with pytest.raises(ValueError):
            bs.compute(torch.zeros(5, 2), torch.zeros(4, 2))
        with pytest.raises(ValueError):
            bs.compute(torch.zeros(5), torch.zeros(5, 2))

    def test_energy_bounds(self):
        bs = BandStructure()
        with pytest.raises(ValueError):
            bs.energy_bounds()
        bs.compute(torch.tensor([[-1.0, 2.0], [-3.0, 0.5]]), torch.zeros(2, 1))
        assert bs.energy_bounds() == (-3.0, 2.0)

    def test_plot_with_ticks(self):
        k = torch.linspace(0, math.pi, 20, dtype=torch.float64)
        bands = torch.stack([-2 * torch.cos(k), 2 * torch.cos(k)], dim=1)
        bs = BandStructure()
        bs.compute(bands, k[:, None], ticks=[(0, "Γ"), (10, "X"), (20, "Γ")])
        ax = bs.plot()
        bs.add_reference_line(0.0, ax=ax)
        assert len(ax.get_xticks()) == 3
        # Two bands, one separator and one reference line
        assert len(ax.get_lines()) == 4
        plt.close(ax.figure)
