#!/usr/bin/env python3
"""
Assemble and print the Hamiltonian matrix of a small lattice

Shows how the hopping amplitudes of a Model map onto a dense matrix:
every amplitude <to|H|from> is added to H[basis(to), basis(from)]. The
on-site term 4t makes this the discretized -∇² on a 4 x 3 grid.
"""

import torch

from example_utils import print_header

from latticeTensor.lattice import Model

# Parameters
SIZE_X = 4
SIZE_Y = 3
T = 1.0


def create_model() -> Model:
    model = Model((SIZE_X, SIZE_Y))
    for x in range(SIZE_X):
        for y in range(SIZE_Y):
            model.add_hopping(4 * T, (x, y), (x, y))
            if x + 1 < SIZE_X:
                model.add_hopping(-T, (x + 1, y), (x, y), hermitian_conjugate=True)
            if y + 1 < SIZE_Y:
                model.add_hopping(-T, (x, y + 1), (x, y), hermitian_conjugate=True)
    return model.construct()


def assemble(model: Model) -> torch.Tensor:
    """Walk the hopping amplitudes and accumulate them into a dense matrix."""
    basis_size = model.basis_size
    hamiltonian = torch.zeros((basis_size, basis_size), dtype=torch.complex128)
    for hopping in model:
        row = model.get_basis_index(hopping.to_index)
        column = model.get_basis_index(hopping.from_index)
        hamiltonian[row, column] += hopping.get_amplitude()
    return hamiltonian


def main():
    print_header("Hamiltonian of a 4x3 lattice")
    model = create_model()
    hamiltonian = assemble(model)

    # Same matrix as the one the solvers use
    assert torch.allclose(hamiltonian, model.hamiltonian())

    for row in hamiltonian.real.tolist():
        print("\t".join(f"{value:g}" for value in row))


if __name__ == "__main__":
    main()
