#!/usr/bin/env python3
"""
Density of states of the nearest-neighbor band in 1, 2 and 3 dimensions

The square/cubic lattice is diagonal in momentum space:

    ε(k) = -2t Σ_i cos(k_i),  k_i = 2π n_i / N - π

so the model is a set of on-site terms on a momentum grid and the
BlockDiagonalizer treats every k-point as its own 1x1 block. The DOS is
normalized by the number of states and Gaussian smoothed. The van Hove
singularities show up as band edge divergences in 1D, a log peak at E = 0
in 2D and kinks in 3D.

Outputs:
    figures/DOS_1D.png, figures/DOS_2D.png, figures/DOS_3D.png
"""

import itertools
import math

from example_utils import print_header, save_plot

from latticeTensor.analysis import Plotter, PropertyExtractor, smooth_dos
from latticeTensor.lattice import Model
from latticeTensor.solvers import BlockDiagonalizer

# Parameters
T = 1.0
MESH_SIZES = {
    1: (10000,),
    2: (300, 300),
    3: (50, 50, 50),
}
ENERGY_LOWER_BOUND = -7
ENERGY_UPPER_BOUND = 7
ENERGY_RESOLUTION = 1000
SMOOTHING_SIGMA = 0.05
SMOOTHING_WINDOW = 101


def momentum(n: int, size: int) -> float:
    """Momentum of grid point n in [-π, π)."""
    return 2 * math.pi * n / size - math.pi


def create_model(shape) -> Model:
    """Momentum-space model with ε(k) = -2t Σ_i cos(k_i) on every grid point."""
    model = Model(shape)
    for k_index in itertools.product(*(range(n) for n in shape)):
        energy = -2 * T * sum(
            math.cos(momentum(n, size)) for n, size in zip(k_index, shape)
        )
        model.add_hopping(energy, k_index, k_index)
    return model.construct()


def main():
    """Compute and plot the DOS for each dimension."""
    print_header("Nearest-neighbor DOS in 1D, 2D and 3D")

    for dim, shape in MESH_SIZES.items():
        print(f"\n{dim}D: building model on a {'x'.join(map(str, shape))} k-mesh...")
        model = create_model(shape)
        print(f"   Basis size: {model.basis_size}")

        solver = BlockDiagonalizer(model)
        solver.run()

        extractor = PropertyExtractor(solver)
        extractor.set_energy_window(ENERGY_LOWER_BOUND, ENERGY_UPPER_BOUND, ENERGY_RESOLUTION)
        dos = extractor.calculate_dos().normalize(model.basis_size)
        dos = smooth_dos(dos, SMOOTHING_SIGMA, SMOOTHING_WINDOW)
        print(f"   ∫DOS dE = {dos.integral():.4f}")

        plotter = Plotter()
        plotter.set_labels(x="Energy", y="DOS")
        plotter.set_title(f"{dim}D nearest-neighbor DOS")
        plotter.plot_dos(dos)
        save_plot(plotter, f"DOS_{dim}D.png")
        plotter.clear()

    print("\nDone!")


if __name__ == "__main__":
    main()
