#!/usr/bin/env python3
"""
Density of states and band structure of graphene

The honeycomb lattice has two sites (A, B) per unit cell and only A-B
nearest-neighbor hopping. In momentum space every k decouples into the
2x2 block

    H(k) = [[0, h(k)], [h*(k), 0]],   h(k) = -t Σ_δ exp(-i k·δ)

where δ runs over the three A→B bond vectors. One block per minor cell of
a nodal Brillouin-zone mesh is added to a Model indexed (k0, k1, orbital),
and the BlockDiagonalizer solves all blocks in batch.

Outputs:
    figures/DOS.png
    figures/BandStructure.png
"""

import math

import torch

from example_utils import print_header, save_figure, save_plot

from latticeTensor.analysis import BandStructure, Plotter, PropertyExtractor
from latticeTensor.lattice import BravaisLattice, BrillouinZone, MeshType, Model, generate_k_path
from latticeTensor.solvers import BlockDiagonalizer

# Parameters
T = 3.0
A = 2.5
BRILLOUIN_ZONE_RESOLUTION = 300
K_POINTS_PER_PATH = 100
LOWER_BOUND = -10.0
UPPER_BOUND = 10.0
RESOLUTION = 1000
SIGMA = 0.03


def create_lattice() -> BravaisLattice:
    """Honeycomb lattice: A at the origin, B at (1/3, 2/3) in cell coordinates."""
    cell_vectors = torch.tensor([
        [A, 0.0],
        [-A / 2, A * math.sqrt(3) / 2],
    ], dtype=torch.float64)
    return BravaisLattice(
        cell_vectors,
        basis_positions=[torch.tensor([0.0, 0.0]), torch.tensor([1 / 3, 2 / 3])],
    )


def bond_vectors(lattice: BravaisLattice) -> torch.Tensor:
    """The three vectors from an A site to its B neighbors, shape (3, 2)."""
    r0, r1 = lattice.cell_vectors
    r_ab = lattice.cartesian_positions()[1]
    return torch.stack([r_ab, r_ab - r1, r_ab - r0 - r1])


def create_model(brillouin_zone: BrillouinZone, bonds: torch.Tensor) -> Model:
    resolution = (BRILLOUIN_ZONE_RESOLUTION, BRILLOUIN_ZONE_RESOLUTION)
    mesh = brillouin_zone.get_minor_mesh(resolution)
    cells = brillouin_zone.get_minor_cell_index(mesh, resolution)

    # h(k) for every mesh point at once
    h_01 = -T * torch.exp(-1j * (mesh @ bonds.T)).sum(dim=-1)

    model = Model(resolution, num_orbitals=2)
    for (k0, k1), h in zip(cells.tolist(), h_01.tolist()):
        model.add_hopping(h, (k0, k1, 1), (k0, k1, 0), hermitian_conjugate=True)
    return model.construct()


def main():
    print_header("Graphene")

    print("\n1. Building model...")
    lattice = create_lattice()
    brillouin_zone = BrillouinZone(lattice.reciprocal_vectors(), MeshType.NODAL)
    model = create_model(brillouin_zone, bond_vectors(lattice))
    print(f"   {model}")

    print("\n2. Diagonalizing...")
    solver = BlockDiagonalizer(model)
    solver.run()

    extractor = PropertyExtractor(solver)
    extractor.set_energy_window(LOWER_BOUND, UPPER_BOUND, RESOLUTION)

    print("\n3. Density of states...")
    dos = extractor.calculate_dos()
    plotter = Plotter()
    plotter.set_labels(x="Energy", y="DOS")
    plotter.plot_dos(dos, sigma=SIGMA)
    save_plot(plotter, "DOS.png")

    print("\n4. Band structure along Γ-M-K-Γ...")
    high_symmetry_points = {
        "Γ": [0.0, 0.0],
        "M": [math.pi / A, -math.pi / (math.sqrt(3) * A)],
        "K": [4 * math.pi / (3 * A), 0.0],
    }
    k_path, ticks = generate_k_path(
        high_symmetry_points, ["Γ", "M", "K", "Γ"], K_POINTS_PER_PATH
    )
    bands = extractor.get_eigenvalues_along_path(
        brillouin_zone, k_path, (BRILLOUIN_ZONE_RESOLUTION, BRILLOUIN_ZONE_RESOLUTION)
    )
    print(f"   Band gap at K: {(bands[2 * K_POINTS_PER_PATH, 1] - bands[2 * K_POINTS_PER_PATH, 0]).item():.4f}")

    band_structure = BandStructure()
    band_structure.compute(bands, k_path, ticks)
    ax = band_structure.plot(energy_range=(LOWER_BOUND, UPPER_BOUND))
    band_structure.add_reference_line(0.0, ax=ax)
    save_figure(ax.figure, "BandStructure.png")


if __name__ == "__main__":
    main()
