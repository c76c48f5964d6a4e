"""
Unit tests for the tight-binding Model builder.

Tests:
- Hopping bookkeeping and Hermitian conjugates
- Bounds checking and index filters
- Basis construction and Hamiltonian assembly
- Nearest-neighbor grids, reciprocal vectors and Bravais lattices
"""

import math

import pytest
import torch

from latticeTensor.lattice import BravaisLattice, Model, nearest_neighbor_model, reciprocal_vectors


def two_site_chain(t: float = 1.0) -> Model:
    model = Model((2,))
    model.add_hopping(-t, (1,), (0,), hermitian_conjugate=True)
    return model.construct()


class TestModelHoppings:
    """Test adding hopping amplitudes."""

    def test_hermitian_conjugate_added(self):
        model = Model((2,))
        model.add_hopping(-1.0, (1,), (0,), hermitian_conjugate=True)
        assert len(model) == 2
        directions = {(hop.to_index, hop.from_index) for hop in model}
        assert directions == {((1,), (0,)), ((0,), (1,))}

    def test_on_site_term_not_doubled(self):
        model = Model((2,))
        model.add_hopping(2.0, (0,), (0,), hermitian_conjugate=True)
        assert len(model) == 1

    def test_out_of_bounds_index(self):
        model = Model((3,))
        with pytest.raises(ValueError):
            model.add_hopping(1.0, (3,), (0,))
        with pytest.raises(ValueError):
            model.add_hopping(1.0, (0,), (-1,))

    def test_wrong_index_length(self):
        model = Model((3, 3))
        with pytest.raises(ValueError):
            model.add_hopping(1.0, (0,), (0,))

    def test_orbital_subindex_bounds(self):
        model = Model((3,), num_orbitals=2)
        model.add_hopping(1.0, (0, 1), (0, 0), hermitian_conjugate=True)
        with pytest.raises(ValueError):
            model.add_hopping(1.0, (0, 2), (0, 0))

    def test_filtered_hopping_dropped(self):
        model = Model((3,), index_filter=lambda index: index[0] != 1)
        model.add_hopping(-1.0, (1,), (0,), hermitian_conjugate=True)
        model.add_hopping(-1.0, (2,), (0,), hermitian_conjugate=True)
        assert len(model) == 2
        assert not model.is_included((1,))

    def test_filter_checked_before_bounds(self):
        """A site the filter rejects is dropped even when it is out of bounds."""
        model = Model((3,), index_filter=lambda index: index[0] < 3)
        model.add_hopping(1.0, (5,), (0,))
        assert len(model) == 0

    def test_add_after_construct(self):
        model = two_site_chain()
        with pytest.raises(RuntimeError):
            model.add_hopping(1.0, (0,), (0,))

    def test_invalid_shape(self):
        with pytest.raises(ValueError):
            Model(())
        with pytest.raises(ValueError):
            Model((0, 3))


class TestModelBasis:
    """Test basis construction."""

    def test_construct_without_hoppings(self):
        with pytest.raises(ValueError):
            Model((2,)).construct()

    def test_sites_sorted(self):
        model = Model((2, 2))
        model.add_hopping(-1.0, (1, 1), (0, 1), hermitian_conjugate=True)
        model.add_hopping(-1.0, (1, 0), (0, 0), hermitian_conjugate=True)
        model.construct()
        assert model.sites == [(0, 0), (0, 1), (1, 0), (1, 1)]
        assert model.get_basis_index((1, 0)) == 2
        assert model.get_physical_index(1) == (0, 1)

    def test_filtered_sites_not_in_basis(self):
        model = nearest_neighbor_model((3, 3), index_filter=lambda index: index != (1, 1)).construct()
        assert model.basis_size == 8
        assert not model.contains((1, 1))

    def test_unknown_site(self):
        model = two_site_chain()
        with pytest.raises(IndexError):
            model.get_basis_index((5,))
        with pytest.raises(IndexError):
            model.get_physical_index(2)

    def test_queries_require_construct(self):
        model = Model((2,))
        model.add_hopping(1.0, (0,), (0,))
        with pytest.raises(RuntimeError):
            model.basis_size


class TestHamiltonian:
    """Test Hamiltonian assembly."""

    def test_two_site_chain(self):
        H = two_site_chain(t=1.5).hamiltonian()
        expected = torch.tensor([[0.0, -1.5], [-1.5, 0.0]], dtype=torch.complex128)
        assert torch.allclose(H, expected)

    def test_amplitudes_accumulate(self):
        model = Model((1,))
        model.add_hopping(1.0, (0,), (0,))
        model.add_hopping(2.5, (0,), (0,))
        assert model.construct().hamiltonian()[0, 0].real.item() == pytest.approx(3.5)

    def test_hermitian(self):
        H = nearest_neighbor_model((3, 4), t=1.0, on_site=4.0).construct().hamiltonian()
        assert torch.allclose(H, H.conj().T)

    def test_callback_reevaluated(self):
        params = {"V": 1.0}
        model = Model((2,))
        model.add_hopping(lambda to, frm: params["V"], (0,), (0,))
        model.add_hopping(-1.0, (1,), (0,), hermitian_conjugate=True)
        model.construct()
        assert model.hamiltonian()[0, 0].real.item() == pytest.approx(1.0)
        params["V"] = 2.0
        assert model.hamiltonian()[0, 0].real.item() == pytest.approx(2.0)


class TestNearestNeighborModel:
    """Test the hypercubic nearest-neighbor builder."""

    def test_two_by_two_grid(self):
        model = nearest_neighbor_model((2, 2), t=1.0)
        assert len(model) == 8
        assert all(hop.get_amplitude() == -1.0 for hop in model)

    def test_on_site_terms(self):
        model = nearest_neighbor_model((2, 2), t=1.0, on_site=4.0)
        assert len(model) == 12

    def test_periodic_chain(self):
        assert len(nearest_neighbor_model((4,), periodic=True)) == 8
        assert len(nearest_neighbor_model((4,), periodic=False)) == 6

    def test_periodic_skips_two_site_dimension(self):
        assert len(nearest_neighbor_model((2,), periodic=True)) == 2

    def test_returns_unconstructed_model(self):
        model = nearest_neighbor_model((3,))
        assert not model.is_constructed
        model.add_hopping(1.0, (0,), (0,))
        assert model.construct().basis_size == 3


class TestReciprocalVectors:
    """Test a_i · b_j = 2π δ_ij."""

    @pytest.mark.parametrize("cell", [
        [[2.0]],
        [[2.5, 0.0], [-1.25, 2.5 * math.sqrt(3) / 2]],
        [[1.0, 0.0, 0.0], [0.5, 1.0, 0.0], [0.0, 0.3, 2.0]],
    ])
    def test_orthogonality(self, cell):
        a = torch.tensor(cell, dtype=torch.float64)
        b = reciprocal_vectors(a)
        eye = torch.eye(a.shape[0], dtype=torch.float64)
        assert torch.allclose(a @ b.T, 2 * math.pi * eye)

    def test_singular_basis(self):
        with pytest.raises(ValueError):
            reciprocal_vectors(torch.tensor([[1.0, 0.0], [2.0, 0.0]]))

    def test_non_square_basis(self):
        with pytest.raises(ValueError):
            reciprocal_vectors(torch.zeros(2, 3))


class TestBravaisLattice:
    """Test lattices with several sites per cell."""

    def test_default_single_site(self):
        lattice = BravaisLattice([[1.0, 0.0], [0.0, 1.0]])
        assert lattice.num_sites == 1

    def test_cartesian_positions(self):
        lattice = BravaisLattice(
            [[2.0, 0.0], [0.0, 4.0]],
            basis_positions=[torch.tensor([0.0, 0.0]), torch.tensor([0.5, 0.25])],
        )
        expected = torch.tensor([[0.0, 0.0], [1.0, 1.0]], dtype=torch.float64)
        assert torch.allclose(lattice.cartesian_positions(), expected)

    def test_basis_dimension_mismatch(self):
        with pytest.raises(ValueError):
            BravaisLattice([[1.0, 0.0], [0.0, 1.0]], basis_positions=[torch.zeros(3)])
