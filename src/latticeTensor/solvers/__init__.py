"""Solvers: exact and block diagonalization."""

from latticeTensor.solvers.diag import BlockDiagonalizer, Diagonalizer, diagonalize

__all__ = ["BlockDiagonalizer", "Diagonalizer", "diagonalize"]
