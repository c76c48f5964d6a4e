#!/usr/bin/env python3
"""
Lowest eigenstates of a 1D chain in different potentials

For each potential the chain Hamiltonian

    H = Σ_x (2t + V(x)) c†_x c_x - t Σ_x (c†_{x+1} c_x + H.c.)

is diagonalized and the probability densities of the NUM_STATES lowest
states are drawn on top of the potential, each shifted to its own energy
and scaled so that neighboring states do not overlap.

Every potential is a callback that captures its own parameters, so each
model is built independently.

Outputs:
    figures/InfiniteSquareWell.png, figures/SquareWell.png,
    figures/HarmonicOscillator.png, figures/DoubleWell.png,
    figures/Step.png, figures/Barrier.png
"""

import torch

from example_utils import print_header, save_plot

from latticeTensor.analysis import DEFAULT_COLORS, Decoration, Plotter, PropertyExtractor
from latticeTensor.core import AmplitudeCallback
from latticeTensor.lattice import Model, POTENTIAL_NAMES, make_potential, potential_profile
from latticeTensor.solvers import Diagonalizer

# Parameters
SIZE_X = 500
NUM_STATES = 7
T = 1.0


def create_model(potential: AmplitudeCallback) -> Model:
    model = Model((SIZE_X,))
    for x in range(SIZE_X):
        # Kinetic terms
        model.add_hopping(2 * T, (x,), (x,))
        if x + 1 < SIZE_X:
            model.add_hopping(-T, (x + 1,), (x,), hermitian_conjugate=True)
        # Potential term
        model.add_hopping(potential, (x,), (x,))
    return model.construct()


def stack_densities(
    densities: torch.Tensor,
    eigenvalues: torch.Tensor,
    lower: float,
    upper: float,
) -> torch.Tensor:
    """
    Scale the densities so NUM_STATES of them fit between lower and upper,
    then lift each one to its eigenvalue.
    """
    scale = (upper - lower) / (densities.max().item() * NUM_STATES) / 2
    return densities * scale + eigenvalues[:NUM_STATES, None]


def plot(potential: torch.Tensor, densities: torch.Tensor, eigenvalues: torch.Tensor, filename: str) -> None:
    # From the bottom of the potential up to the first state not drawn
    lower = potential.min().item()
    upper = eigenvalues[NUM_STATES].item()
    stacked = stack_densities(densities, eigenvalues, lower, upper)

    plotter = Plotter()
    plotter.set_bounds_y(lower, upper)
    plotter.set_hold(True)
    plotter.set_labels(x="x", y="Energy")
    plotter.plot(potential, Decoration(color=DEFAULT_COLORS['potential'], line_width=2))
    for state in range(NUM_STATES):
        plotter.plot(stacked[state])
    save_plot(plotter, filename)
    plotter.clear()


def main():
    print_header("1D chain in six potentials")

    for name in POTENTIAL_NAMES:
        print(f"\n{name}:")
        potential = make_potential(name, SIZE_X)
        model = create_model(potential)

        solver = Diagonalizer(model)
        solver.run()
        extractor = PropertyExtractor(solver)

        densities = extractor.calculate_probability_densities(range(NUM_STATES))
        eigenvalues = extractor.get_eigenvalues()
        print(f"   Lowest energies: {[round(e, 6) for e in eigenvalues[:NUM_STATES].tolist()]}")

        plot(potential_profile(potential, SIZE_X), densities.tensor, eigenvalues, f"{name}.png")


if __name__ == "__main__":
    main()
