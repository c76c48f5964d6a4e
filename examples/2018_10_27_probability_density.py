#!/usr/bin/env python3
"""
Probability density of an eigenstate of a square lattice

A SIZE_X x SIZE_Y square lattice with nearest-neighbor hopping -t and open
boundaries is diagonalized exactly. The energy of STATE is printed and
|ψ(x, y)|² is rendered as a density map.

Outputs:
    figures/ProbabilityDensity.png
"""

from example_utils import print_header, save_plot

from latticeTensor.analysis import Plotter, PropertyExtractor
from latticeTensor.lattice import nearest_neighbor_model
from latticeTensor.solvers import Diagonalizer

# Parameters
SIZE_X = 20
SIZE_Y = 20
T = 1.0
STATE = 0


def main():
    print_header("Square lattice eigenstate")

    print("\n1. Building model...")
    model = nearest_neighbor_model((SIZE_X, SIZE_Y), t=T).construct()
    print(f"   {model}")

    print("\n2. Diagonalizing...")
    solver = Diagonalizer(model)
    solver.run()

    extractor = PropertyExtractor(solver)
    print(f"The energy of state {STATE} is {extractor.get_eigenvalue(STATE)}")

    print("\n3. Plotting probability density...")
    density = extractor.calculate_probability_density(STATE)
    plotter = Plotter()
    plotter.set_labels(x="x", y="y")
    plotter.plot(density)
    save_plot(plotter, "ProbabilityDensity.png")


if __name__ == "__main__":
    main()
