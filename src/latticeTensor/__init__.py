"""
latticeTensor: PyTorch-based tight-binding toolkit.

Build lattice models from hopping amplitudes, sample the Brillouin zone,
diagonalize (fully or block by block) and extract eigenvalues,
probability densities, densities of states and band structures.
"""

from latticeTensor.core import BaseTensor, HoppingAmplitude
from latticeTensor.lattice import BrillouinZone, MeshType, Model
from latticeTensor.solvers import BlockDiagonalizer, Diagonalizer
from latticeTensor.analysis import PropertyExtractor

__version__ = "0.0.1"

__all__ = [
    "BaseTensor",
    "HoppingAmplitude",
    "BrillouinZone",
    "MeshType",
    "Model",
    "BlockDiagonalizer",
    "Diagonalizer",
    "PropertyExtractor",
]
