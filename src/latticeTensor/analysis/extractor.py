"""Property extraction: eigenvalues, amplitudes, probability densities and DOS from a solver."""

from typing import Optional, Sequence, Union
import torch

from latticeTensor.analysis.dos import DOS, DOSCalculator
from latticeTensor.core.base import BaseTensor
from latticeTensor.core.types import IndexFilter, IndexLike, to_index
from latticeTensor.lattice.bzone import BrillouinZone
from latticeTensor.solvers.diag import BlockDiagonalizer, Diagonalizer

Solver = Union[Diagonalizer, BlockDiagonalizer]

AXIS_LABELS = ["x", "y", "z"]


class PropertyExtractor:
    """
    Translate solver output into physical quantities.

    Works with both solvers. States are numbered in ascending order of
    their eigenvalue; with a BlockDiagonalizer they are numbered inside
    the block given by ``block_index``.

    Example:
        >>> solver = Diagonalizer(model).run()
        >>> extractor = PropertyExtractor(solver)
        >>> extractor.get_eigenvalue(0)
        >>> extractor.get_amplitude(0, (3, 4))
    """

    def __init__(self, solver: Solver) -> None:
        """
        Initialize PropertyExtractor.

        Args:
            solver: Diagonalizer or BlockDiagonalizer (run() is called lazily)

        Raises:
            TypeError: For any other solver type
        """
        if not isinstance(solver, (Diagonalizer, BlockDiagonalizer)):
            raise TypeError(
                f"solver must be a Diagonalizer or BlockDiagonalizer, got {type(solver).__name__}"
            )
        self.solver = solver
        self.lower = -1.0
        self.upper = 1.0
        self.resolution = 1000

    @property
    def is_block_solver(self) -> bool:
        return isinstance(self.solver, BlockDiagonalizer)

    def set_energy_window(self, lower: float, upper: float, resolution: int) -> None:
        """
        Set the energy window used for energy-resolved properties.

        Raises:
            ValueError: If upper <= lower or resolution < 1
        """
        if upper <= lower:
            raise ValueError(f"Energy window upper bound ({upper}) must exceed lower bound ({lower})")
        if resolution < 1:
            raise ValueError(f"Energy resolution must be at least 1, got {resolution}")
        self.lower = float(lower)
        self.upper = float(upper)
        self.resolution = int(resolution)

    def _ensure_run(self) -> None:
        if not self.solver.is_solved:
            self.solver.run()

    @staticmethod
    def _check_state(state: int, size: int, where: str = "") -> None:
        if not 0 <= state < size:
            raise IndexError(f"State {state} out of range [0, {size}){where}")

    def get_eigenvalues(self) -> torch.Tensor:
        """All eigenvalues in ascending order."""
        self._ensure_run()
        if self.is_block_solver:
            return self.solver.all_eigenvalues()
        return self.solver.eigenvalues.clone()

    def get_eigenvalue(self, state: int, block_index: Optional[IndexLike] = None) -> float:
        """
        Eigenvalue of a state.

        Args:
            state: State ordinal (0 = lowest)
            block_index: Block to look in (BlockDiagonalizer only). Without
                it the ordinal counts across all blocks.

        Raises:
            IndexError: If the state or block is out of range
        """
        self._ensure_run()
        if block_index is None:
            eigenvalues = self.get_eigenvalues()
            self._check_state(state, eigenvalues.shape[0])
            return eigenvalues[state].item()

        if not self.is_block_solver:
            raise ValueError("block_index is only supported with a BlockDiagonalizer")
        block_index = to_index(block_index)
        eigenvalues, _, _ = self.solver.get_block(block_index)
        self._check_state(state, eigenvalues.shape[0], f" in block {block_index}")
        return eigenvalues[state].item()

    def get_amplitude(
        self,
        state: int,
        index: IndexLike,
        block_index: Optional[IndexLike] = None,
    ) -> complex:
        """
        Amplitude ψ_state(index) of an eigenvector.

        Args:
            state: State ordinal (0 = lowest)
            index: Physical site index
            block_index: Block of the state (required for a BlockDiagonalizer)

        Raises:
            IndexError: If the state, block or site is out of range
        """
        self._ensure_run()
        index = to_index(index)

        if not self.is_block_solver:
            basis_size = self.solver.basis_size
            self._check_state(state, basis_size)
            row = self.solver.model.get_basis_index(index)
            return complex(self.solver.eigenvectors[row, state].item())

        if block_index is None:
            raise ValueError("block_index is required to extract amplitudes from a BlockDiagonalizer")
        block_index = to_index(block_index)
        eigenvalues, eigenvectors, sites = self.solver.get_block(block_index)
        self._check_state(state, eigenvalues.shape[0], f" in block {block_index}")
        if index not in sites:
            raise IndexError(f"Index {index} is not part of block {block_index}")
        return complex(eigenvectors[sites.index(index), state].item())

    def calculate_probability_densities(
        self,
        states: Sequence[int],
        shape: Optional[Sequence[int]] = None,
        index_filter: Optional[IndexFilter] = None,
        fill_value: float = float("nan"),
    ) -> BaseTensor:
        """
        |ψ_n(x)|² on the lattice for several states.

        Sites that the filter (or the model's own filter) excludes, or that
        are not part of the basis, are skipped and keep ``fill_value``.
        Orbital subindices are summed over.

        Args:
            states: State ordinals
            shape: Lattice shape (default: the model shape)
            index_filter: Extra site predicate
            fill_value: Value of skipped sites (NaN renders blank)

        Returns:
            BaseTensor with labels ['state', 'x', ...]
        """
        if self.is_block_solver:
            raise TypeError("Probability densities require a Diagonalizer")
        self._ensure_run()
        model = self.solver.model
        shape = tuple(model.shape if shape is None else shape)
        if len(shape) > len(AXIS_LABELS):
            raise ValueError(f"Probability densities support at most 3 dimensions, got {shape}")
        states = list(states)
        for state in states:
            self._check_state(state, self.solver.basis_size)

        density = torch.zeros((len(states),) + shape, dtype=torch.float64)
        visited = torch.zeros(shape, dtype=torch.bool)
        weights = torch.abs(self.solver.eigenvectors[:, states]) ** 2  # (basis, n_states)

        for row, site in enumerate(model.sites):
            if not model.is_included(site):
                continue
            if index_filter is not None and not index_filter(site):
                continue
            position = site[:len(shape)]
            density[(slice(None),) + position] += weights[row]
            visited[position] = True

        density[:, ~visited] = fill_value
        return BaseTensor(density, labels=["state"] + AXIS_LABELS[:len(shape)])

    def calculate_probability_density(
        self,
        state: int,
        shape: Optional[Sequence[int]] = None,
        index_filter: Optional[IndexFilter] = None,
        fill_value: float = float("nan"),
    ) -> BaseTensor:
        """|ψ_state(x)|² on the lattice; see calculate_probability_densities."""
        densities = self.calculate_probability_densities(
            [state], shape=shape, index_filter=index_filter, fill_value=fill_value
        )
        return BaseTensor(densities.tensor[0], labels=densities.labels[1:])

    def calculate_dos(self, eta: Optional[float] = None) -> DOS:
        """
        Density of states over the energy window.

        Args:
            eta: Lorentzian broadening; None gives the plain histogram

        Returns:
            DOS with ``resolution`` bins on [lower, upper]
        """
        eigenvalues = self.get_eigenvalues()
        if eta is None:
            return DOSCalculator.histogram(eigenvalues, self.lower, self.upper, self.resolution)

        window = DOS(self.lower, self.upper, torch.zeros(self.resolution))
        _, rho = DOSCalculator.from_eigenvalues(eigenvalues[None, :], window.energies, eta=eta)
        return DOS(self.lower, self.upper, rho)

    def get_eigenvalues_along_path(
        self,
        brillouin_zone: BrillouinZone,
        k_path: torch.Tensor,
        num_mesh_points: Sequence[int],
        bands: Optional[Sequence[int]] = None,
    ) -> torch.Tensor:
        """
        Band energies along a k-path, looked up from the nearest mesh cell.

        Each k-point is mapped to its minor cell with
        BrillouinZone.get_minor_cell_index and the eigenvalues of that
        block are read out.

        Args:
            brillouin_zone: Zone used to build the mesh of the model
            k_path: K-points, shape (N_k, dim), or a single k-point of shape (dim,)
            num_mesh_points: Mesh resolution used to build the model
            bands: Band ordinals to extract (default: all bands of the block)

        Returns:
            Eigenvalues, shape (N_k, N_band)
        """
        if not self.is_block_solver:
            raise TypeError("Band structures require a BlockDiagonalizer")
        self._ensure_run()
        k_path = torch.atleast_2d(torch.as_tensor(k_path, dtype=torch.float64))
        cells = brillouin_zone.get_minor_cell_index(k_path, num_mesh_points)

        rows = []
        for cell in cells.tolist():
            eigenvalues, _, _ = self.solver.get_block(tuple(cell))
            if bands is None:
                rows.append(eigenvalues)
                continue
            for band in bands:
                self._check_state(band, eigenvalues.shape[0], f" in block {tuple(cell)}")
            rows.append(eigenvalues[list(bands)])
        return torch.stack(rows)
