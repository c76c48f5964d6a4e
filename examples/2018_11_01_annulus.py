#!/usr/bin/env python3
"""
Ground state of a square lattice cut into an annulus

The model is built on the full SIZE x SIZE square, but an index filter
keeps only sites with INNER_RADIUS < r < OUTER_RADIUS measured from the
center; hoppings touching any other site are dropped. Sites outside the
annulus are left blank in the density map.

Outputs:
    figures/ProbabilityDensity.png
"""

import math

from example_utils import print_header, save_plot

from latticeTensor.analysis import Plotter, PropertyExtractor
from latticeTensor.core import Index
from latticeTensor.lattice import nearest_neighbor_model
from latticeTensor.solvers import Diagonalizer

# Parameters
SIZE = 41
SIZE_X = SIZE
SIZE_Y = SIZE
OUTER_RADIUS = SIZE // 2
INNER_RADIUS = SIZE // 8
T = 1.0
STATE = 0


def in_annulus(index: Index) -> bool:
    """True if the site lies strictly between the inner and outer radius."""
    x, y = index[0], index[1]
    r = math.hypot(x - SIZE_X // 2, y - SIZE_Y // 2)
    return INNER_RADIUS < r < OUTER_RADIUS


def main():
    print_header("Annulus eigenstate")

    print("\n1. Building model...")
    model = nearest_neighbor_model((SIZE_X, SIZE_Y), t=T, index_filter=in_annulus).construct()
    print(f"   Sites in annulus: {model.basis_size} of {SIZE_X * SIZE_Y}")

    print("\n2. Diagonalizing...")
    solver = Diagonalizer(model)
    solver.run()

    extractor = PropertyExtractor(solver)
    print(f"The energy of state {STATE} is {extractor.get_eigenvalue(STATE)}")

    print("\n3. Plotting probability density...")
    density = extractor.calculate_probability_density(STATE, index_filter=in_annulus)
    plotter = Plotter()
    plotter.set_labels(x="x", y="y")
    plotter.plot(density)
    save_plot(plotter, "ProbabilityDensity.png")


if __name__ == "__main__":
    main()
