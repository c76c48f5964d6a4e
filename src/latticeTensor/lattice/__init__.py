"""Lattice module: Model builder, BravaisLattice, Brillouin zone sampling and potentials."""

from latticeTensor.lattice.model import (
    BravaisLattice,
    Model,
    nearest_neighbor_model,
    reciprocal_vectors,
)
from latticeTensor.lattice.bzone import (
    BrillouinZone,
    MeshType,
    generate_k_path,
    interpolate,
)
from latticeTensor.lattice.potentials import POTENTIAL_NAMES, make_potential, potential_profile

__all__ = [
    "BravaisLattice",
    "Model",
    "nearest_neighbor_model",
    "reciprocal_vectors",
    "BrillouinZone",
    "MeshType",
    "generate_k_path",
    "interpolate",
    "POTENTIAL_NAMES",
    "make_potential",
    "potential_profile",
]
