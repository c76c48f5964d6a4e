"""
Unit tests for PropertyExtractor.

Tests:
- Eigenvalue and amplitude lookup with both solvers
- Probability densities, including filtered sites
- Histogram and Lorentzian DOS
- Band energies along a k-path
"""

import math

import pytest
import torch

from latticeTensor.analysis import PropertyExtractor
from latticeTensor.lattice import BrillouinZone, MeshType, Model, interpolate, nearest_neighbor_model
from latticeTensor.solvers import BlockDiagonalizer, Diagonalizer


def two_site_chain(t: float = 1.0) -> Model:
    model = Model((2,))
    model.add_hopping(-t, (1,), (0,), hermitian_conjugate=True)
    return model.construct()


def cosine_band(num_k: int):
    """Single band ε(k) = -2 cos k sampled on a nodal 1D mesh."""
    bz = BrillouinZone([[2 * math.pi]], MeshType.NODAL)
    mesh = bz.get_minor_mesh([num_k])
    cells = bz.get_minor_cell_index(mesh, [num_k])
    model = Model((num_k,), num_orbitals=1)
    for (k_index,), k in zip(cells.tolist(), mesh[:, 0].tolist()):
        model.add_hopping(-2 * math.cos(k), (k_index, 0), (k_index, 0))
    return bz, model.construct()


class TestEigenvalues:
    """Test eigenvalue extraction."""

    def test_solver_run_lazily(self):
        solver = Diagonalizer(two_site_chain())
        extractor = PropertyExtractor(solver)
        assert extractor.get_eigenvalue(0) == pytest.approx(-1.0, abs=1e-9)
        assert solver.is_solved

    def test_state_out_of_range(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        with pytest.raises(IndexError):
            extractor.get_eigenvalue(2)
        with pytest.raises(IndexError):
            extractor.get_eigenvalue(-1)

    def test_block_eigenvalue(self):
        model = Model((2,), num_orbitals=2)
        for k in range(2):
            model.add_hopping(k + 1.0, (k, 1), (k, 0), hermitian_conjugate=True)
        extractor = PropertyExtractor(BlockDiagonalizer(model))
        assert extractor.get_eigenvalue(1, block_index=(1,)) == pytest.approx(2.0)
        assert extractor.get_eigenvalue(0) == pytest.approx(-2.0)
        with pytest.raises(IndexError):
            extractor.get_eigenvalue(2, block_index=(1,))

    def test_block_index_requires_block_solver(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        with pytest.raises(ValueError):
            extractor.get_eigenvalue(0, block_index=(0,))

    def test_unsupported_solver(self):
        with pytest.raises(TypeError):
            PropertyExtractor(object())


class TestAmplitudes:
    """Test eigenvector amplitudes."""

    def test_ground_state_amplitudes(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        a0 = extractor.get_amplitude(0, (0,))
        a1 = extractor.get_amplitude(0, (1,))
        assert abs(a0) == pytest.approx(1 / math.sqrt(2))
        # Bonding state for negative hopping
        assert (a0 * a1.conjugate()).real == pytest.approx(0.5)

    def test_normalized(self):
        model = nearest_neighbor_model((3, 3)).construct()
        extractor = PropertyExtractor(Diagonalizer(model))
        norm = sum(abs(extractor.get_amplitude(4, site)) ** 2 for site in model.sites)
        assert norm == pytest.approx(1.0)

    def test_unknown_site(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        with pytest.raises(IndexError):
            extractor.get_amplitude(0, (3,))

    def test_block_amplitude_requires_block(self):
        model = Model((1,), num_orbitals=2)
        model.add_hopping(1.0, (0, 1), (0, 0), hermitian_conjugate=True)
        extractor = PropertyExtractor(BlockDiagonalizer(model))
        with pytest.raises(ValueError):
            extractor.get_amplitude(0, (0, 0))
        assert abs(extractor.get_amplitude(0, (0, 0), block_index=(0,))) == pytest.approx(1 / math.sqrt(2))


class TestProbabilityDensity:
    """Test |ψ(x)|² on the lattice."""

    def test_labels_and_normalization(self):
        model = nearest_neighbor_model((4, 3)).construct()
        density = PropertyExtractor(Diagonalizer(model)).calculate_probability_density(0)
        assert density.labels == ["x", "y"]
        assert density.shape == (4, 3)
        assert density.tensor.sum().item() == pytest.approx(1.0)

    def test_several_states(self):
        model = nearest_neighbor_model((5,)).construct()
        densities = PropertyExtractor(Diagonalizer(model)).calculate_probability_densities(range(3))
        assert densities.labels == ["state", "x"]
        assert densities.shape == (3, 5)
        assert torch.allclose(densities.tensor.sum(dim=1), torch.ones(3, dtype=torch.float64))

    def test_excluded_sites_are_nan(self):
        def not_center(index):
            return index != (1, 1)

        model = nearest_neighbor_model((3, 3), index_filter=not_center).construct()
        density = PropertyExtractor(Diagonalizer(model)).calculate_probability_density(
            0, index_filter=not_center
        )
        assert math.isnan(density.tensor[1, 1].item())
        assert torch.nansum(density.tensor).item() == pytest.approx(1.0)

    def test_orbitals_summed(self):
        model = Model((2,), num_orbitals=2)
        model.add_hopping(-1.0, (0, 1), (0, 0), hermitian_conjugate=True)
        model.add_hopping(-1.0, (1, 0), (0, 1), hermitian_conjugate=True)
        model.add_hopping(-1.0, (1, 1), (1, 0), hermitian_conjugate=True)
        density = PropertyExtractor(Diagonalizer(model)).calculate_probability_density(0)
        assert density.shape == (2,)
        assert density.tensor.sum().item() == pytest.approx(1.0)

    def test_state_out_of_range(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        with pytest.raises(IndexError):
            extractor.calculate_probability_density(5)

    def test_block_solver_rejected(self):
        model = Model((1,), num_orbitals=1)
        model.add_hopping(1.0, (0, 0), (0, 0))
        with pytest.raises(TypeError):
            PropertyExtractor(BlockDiagonalizer(model)).calculate_probability_density(0)


class TestDOS:
    """Test DOS extraction over the energy window."""

    def test_histogram(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        extractor.set_energy_window(-1.5, 1.5, 3)
        dos = extractor.calculate_dos()
        assert dos.values.tolist() == pytest.approx([1.0, 0.0, 1.0])
        assert dos.integral() == pytest.approx(2.0)

    def test_states_outside_window_ignored(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        extractor.set_energy_window(0.0, 2.0, 10)
        assert extractor.calculate_dos().integral() == pytest.approx(1.0)

    def test_lorentzian(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        extractor.set_energy_window(-3.0, 3.0, 600)
        dos = extractor.calculate_dos(eta=0.05)
        assert len(dos) == 600
        assert (dos.values > 0).all()
        assert dos.energies[dos.values.argmax()].abs().item() == pytest.approx(1.0, abs=0.02)

    def test_invalid_window(self):
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        with pytest.raises(ValueError):
            extractor.set_energy_window(1.0, -1.0, 10)
        with pytest.raises(ValueError):
            extractor.set_energy_window(-1.0, 1.0, 0)


class TestEigenvaluesAlongPath:
    """Test band lookup along a k-path."""

    def test_cosine_band(self):
        bz, model = cosine_band(8)
        extractor = PropertyExtractor(BlockDiagonalizer(model))
        _, k_path = interpolate([0.0], [2 * math.pi], 8)
        bands = extractor.get_eigenvalues_along_path(bz, k_path, [8])
        expected = -2 * torch.cos(k_path)
        assert bands.shape == (8, 1)
        assert torch.allclose(bands, expected, atol=1e-12)

    def test_band_selection(self):
        bz, model = cosine_band(4)
        extractor = PropertyExtractor(BlockDiagonalizer(model))
        k_path = bz.get_minor_mesh([4])
        assert extractor.get_eigenvalues_along_path(bz, k_path, [4], bands=[0]).shape == (4, 1)
        with pytest.raises(IndexError):
            extractor.get_eigenvalues_along_path(bz, k_path, [4], bands=[1])

    def test_single_k_point(self):
        bz, model = cosine_band(8)
        extractor = PropertyExtractor(BlockDiagonalizer(model))
        k = bz.get_minor_mesh([8])[2]
        bands = extractor.get_eigenvalues_along_path(bz, k, [8])
        assert bands.shape == (1, 1)
        assert bands[0, 0].item() == pytest.approx(-2 * math.cos(k.item()))

    def test_requires_block_solver(self):
        bz, _ = cosine_band(4)
        extractor = PropertyExtractor(Diagonalizer(two_site_chain()))
        with pytest.raises(TypeError):
            extractor.get_eigenvalues_along_path(bz, bz.get_minor_mesh([4]), [4])
