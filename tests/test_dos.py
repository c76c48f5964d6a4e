"""
Unit tests for DOS containers, DOS calculators and Gaussian smoothing.
"""

import pytest
import torch

from latticeTensor.analysis import DOS, DOSCalculator, gaussian, smooth_dos


class TestDOSContainer:
    """Test the DOS value object."""

    def test_energies_are_bin_centers(self):
        dos = DOS(0.0, 1.0, torch.zeros(4))
        assert dos.dE == pytest.approx(0.25)
        assert dos.energies.tolist() == pytest.approx([0.125, 0.375, 0.625, 0.875])

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            DOS(1.0, 1.0, torch.zeros(4))

    def test_normalize(self):
        dos = DOS(0.0, 1.0, torch.full((4,), 2.0))
        assert dos.normalize(4).values.tolist() == pytest.approx([0.5] * 4)
        with pytest.raises(ValueError):
            dos.normalize(0)


class TestHistogram:
    """Test histogram binning."""

    def test_integral_counts_states(self):
        eigenvalues = torch.tensor([-0.9, -0.1, 0.3, 0.35, 5.0], dtype=torch.float64)
        dos = DOSCalculator.histogram(eigenvalues, -1.0, 1.0, 20)
        assert len(dos) == 20
        assert dos.integral() == pytest.approx(4.0)

    def test_bin_placement(self):
        dos = DOSCalculator.histogram(torch.tensor([0.3, 0.35]), 0.0, 1.0, 2)
        assert dos.values.tolist() == pytest.approx([4.0, 0.0])

    def test_accepts_any_shape(self):
        eigenvalues = torch.tensor([[0.1, 0.2], [0.6, 0.7]], dtype=torch.float64)
        assert DOSCalculator.histogram(eigenvalues, 0.0, 1.0, 10).integral() == pytest.approx(4.0)

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            DOSCalculator.histogram(torch.zeros(3), 0.0, 1.0, 0)
        with pytest.raises(ValueError):
            DOSCalculator.histogram(torch.zeros(3), 1.0, 0.0, 10)


class TestLorentzian:
    """Test Lorentzian broadening."""

    def test_integral_close_to_band_count(self):
        E_k = torch.tensor([[-0.5, 0.5], [-0.4, 0.4]], dtype=torch.float64)
        omega = torch.linspace(-20, 20, 40001, dtype=torch.float64)
        _, rho = DOSCalculator.from_eigenvalues(E_k, omega, eta=0.05)
        integral = torch.trapezoid(rho, omega).item()
        assert integral == pytest.approx(2.0, rel=1e-2)

    def test_invalid_eta(self):
        with pytest.raises(ValueError):
            DOSCalculator.from_eigenvalues(torch.zeros(1, 1), torch.zeros(3), eta=0.0)


class TestGaussian:
    """Test Gaussian smoothing."""

    def test_preserves_interior_weight(self):
        values = torch.zeros(101, dtype=torch.float64)
        values[50] = 1.0
        smoothed = gaussian(values, sigma=2.0, window_size=11)
        assert smoothed.shape == (101,)
        assert smoothed.sum().item() == pytest.approx(1.0)
        assert smoothed.argmax().item() == 50
        assert smoothed[48].item() == pytest.approx(smoothed[52].item())

    def test_spacing_scales_width(self):
        values = torch.zeros(101, dtype=torch.float64)
        values[50] = 1.0
        narrow = gaussian(values, sigma=0.2, window_size=21, dx=0.1)
        wide = gaussian(values, sigma=2.0, window_size=21, dx=1.0)
        assert torch.allclose(narrow, wide)

    def test_invalid_arguments(self):
        values = torch.zeros(10)
        with pytest.raises(ValueError):
            gaussian(values, sigma=0.0, window_size=5)
        with pytest.raises(ValueError):
            gaussian(values, sigma=1.0, window_size=4)
        with pytest.raises(ValueError):
            gaussian(torch.zeros(3, 3), sigma=1.0, window_size=3)

    def test_smooth_dos_keeps_window(self):
        values = torch.zeros(200, dtype=torch.float64)
        values[100] = 50.0
        dos = DOS(-1.0, 1.0, values)
        smoothed = smooth_dos(dos, sigma=0.05, window_size=51)
        assert (smoothed.lower, smoothed.upper) == (-1.0, 1.0)
        assert len(smoothed) == 200
        assert smoothed.integral() == pytest.approx(dos.integral())
