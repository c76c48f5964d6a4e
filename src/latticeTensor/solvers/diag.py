"""Diagonalization solvers: full exact diagonalization and block diagonalization."""

from typing import Dict, List, Optional, Tuple
import torch

from latticeTensor.core.device import get_device
from latticeTensor.core.types import Index, IndexLike, to_index
from latticeTensor.lattice.model import Model


def diagonalize(
    Hk: torch.Tensor,
    hermitian: bool = True,
) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Diagonalize a batch of Hamiltonians.

    H_k |ψ_{nk}⟩ = ε_{nk} |ψ_{nk}⟩

    Args:
        Hk: Hamiltonians, shape (N_k, N_orb, N_orb)
        hermitian: If True, use eigh (faster, assumes Hermitian).
                   If False, use eig and keep the real part of the eigenvalues

    Returns:
        eigenvalues: Eigenvalues ε_{nk} in ascending order, shape (N_k, N_orb)
        eigenvectors: Eigenvectors, shape (N_k, N_orb, N_orb)
                     Column n corresponds to ε_{nk}
    """
    if hermitian:
        # eigh already returns ascending eigenvalues
        eigenvalues, eigenvectors = torch.linalg.eigh(Hk)
    else:
        eigenvalues_complex, eigenvectors = torch.linalg.eig(Hk)
        eigenvalues = eigenvalues_complex.real
        order = torch.argsort(eigenvalues, dim=-1)
        eigenvalues = torch.gather(eigenvalues, -1, order)
        eigenvectors = torch.gather(
            eigenvectors, -1, order[..., None, :].expand_as(eigenvectors)
        )

    return eigenvalues, eigenvectors


def _check_hermitian(H: torch.Tensor, atol: float = 1e-10) -> None:
    if not torch.allclose(H, H.conj().transpose(-2, -1), atol=atol):
        raise ValueError(
            "Hamiltonian is not Hermitian. Add the Hermitian conjugate of every "
            "hopping or run with check_hermitian=False"
        )


class Diagonalizer:
    """
    Exact diagonalization of the full Model Hamiltonian.

    Example:
        >>> solver = Diagonalizer()
        >>> solver.set_model(model)
        >>> solver.run()
        >>> solver.eigenvalues[0]
    """

    def __init__(
        self,
        model: Optional[Model] = None,
        check_hermitian: bool = True,
        device: Optional[torch.device] = None,
        verbose: bool = False,
    ) -> None:
        """
        Initialize Diagonalizer.

        Args:
            model: Model to diagonalize (can also be set with set_model)
            check_hermitian: Raise if the assembled Hamiltonian is not Hermitian
            device: Device for the eigensolver (default: CPU)
            verbose: Print progress information
        """
        self.model = model
        self.check_hermitian = check_hermitian
        self.device = get_device(device)
        self.verbose = verbose

        self.eigenvalues: Optional[torch.Tensor] = None
        self.eigenvectors: Optional[torch.Tensor] = None

    def set_model(self, model: Model) -> None:
        self.model = model
        self.eigenvalues = None
        self.eigenvectors = None

    def run(self) -> "Diagonalizer":
        """
        Assemble and diagonalize the Hamiltonian.

        Callback amplitudes are re-evaluated on every run.

        Raises:
            RuntimeError: If no model is set
            ValueError: If the Hamiltonian is not Hermitian and check_hermitian is set
        """
        if self.model is None:
            raise RuntimeError("No model set. Call set_model() first.")

        self.model.construct()
        H = self.model.hamiltonian(device=self.device)
        if self.verbose:
            print(f"Diagonalizing Hamiltonian of size {H.shape[0]}x{H.shape[1]}")

        hermitian = True
        if self.check_hermitian:
            _check_hermitian(H)
        else:
            hermitian = torch.allclose(H, H.conj().T)

        eigenvalues, eigenvectors = diagonalize(H[None], hermitian=hermitian)
        self.eigenvalues = eigenvalues[0].cpu()
        self.eigenvectors = eigenvectors[0].cpu()
        return self

    @property
    def is_solved(self) -> bool:
        return self.eigenvalues is not None

    @property
    def basis_size(self) -> int:
        self._require_run()
        return self.eigenvalues.shape[0]

    def _require_run(self) -> None:
        if self.eigenvalues is None:
            raise RuntimeError("Solver has not been run. Call run() first.")


class BlockDiagonalizer:
    """
    Diagonalization of a Model that is block diagonal in its leading subindices.

    Sites are grouped into blocks by their spatial/momentum subindices
    (``site[:len(model.shape)]``), leaving the orbital subindex inside the
    block. A momentum-space model with sites (kx, ky, orbital) therefore
    splits into one small block per k-point. Blocks of equal size are
    diagonalized together in a single batched eigh call.
    """

    def __init__(
        self,
        model: Optional[Model] = None,
        check_hermitian: bool = True,
        device: Optional[torch.device] = None,
        verbose: bool = False,
    ) -> None:
        """
        Initialize BlockDiagonalizer.

        Args:
            model: Model to diagonalize (can also be set with set_model)
            check_hermitian: Raise if a block is not Hermitian (otherwise such
                blocks are solved with eig)
            device: Device for the eigensolver (default: CPU)
            verbose: Print progress information
        """
        self.model = model
        self.check_hermitian = check_hermitian
        self.device = get_device(device)
        self.verbose = verbose

        self._blocks: Optional[Dict[Index, Tuple[int, int]]] = None
        self._block_sites: Dict[Index, List[Index]] = {}
        self._eigenvalues: Dict[int, torch.Tensor] = {}
        self._eigenvectors: Dict[int, torch.Tensor] = {}

    def set_model(self, model: Model) -> None:
        self.model = model
        self._blocks = None
        self._block_sites = {}
        self._eigenvalues = {}
        self._eigenvectors = {}

    def _block_of(self, site: Index) -> Index:
        return site[:len(self.model.shape)]

    def run(self) -> "BlockDiagonalizer":
        """
        Split the Hamiltonian into blocks and diagonalize them.

        Raises:
            RuntimeError: If no model is set
            ValueError: If a hopping connects two different blocks, or a
                block is not Hermitian and check_hermitian is set
        """
        if self.model is None:
            raise RuntimeError("No model set. Call set_model() first.")
        model = self.model.construct()

        # Sites are sorted lexicographically, so each block is contiguous
        block_sites: Dict[Index, List[Index]] = {}
        for site in model.sites:
            block_sites.setdefault(self._block_of(site), []).append(site)

        # Group blocks of equal size; (size, position within that group)
        groups: Dict[int, List[Index]] = {}
        blocks: Dict[Index, Tuple[int, int]] = {}
        local: Dict[Index, int] = {}
        for block, sites in block_sites.items():
            group = groups.setdefault(len(sites), [])
            blocks[block] = (len(sites), len(group))
            group.append(block)
            for n, site in enumerate(sites):
                local[site] = n

        entries: Dict[int, Tuple[List[int], List[int], List[int], List[complex]]] = {
            size: ([], [], [], []) for size in groups
        }
        for hop in model:
            block = self._block_of(hop.to_index)
            if self._block_of(hop.from_index) != block:
                raise ValueError(
                    f"Model is not block diagonal: hopping from {hop.from_index} "
                    f"to {hop.to_index} connects two blocks"
                )
            size, position = blocks[block]
            b, r, c, v = entries[size]
            b.append(position)
            r.append(local[hop.to_index])
            c.append(local[hop.from_index])
            v.append(hop.get_amplitude())

        for size, group in groups.items():
            b, r, c, v = entries[size]
            H = torch.zeros((len(group), size, size), dtype=torch.complex128)
            H.index_put_(
                (torch.tensor(b, dtype=torch.long), torch.tensor(r, dtype=torch.long), torch.tensor(c, dtype=torch.long)),
                torch.tensor(v, dtype=torch.complex128),
                accumulate=True,
            )
            hermitian = True
            if self.check_hermitian:
                _check_hermitian(H)
            else:
                hermitian = torch.allclose(H, H.conj().transpose(-2, -1))
            if self.verbose:
                print(f"Diagonalizing {len(group)} blocks of size {size}")
            eigenvalues, eigenvectors = diagonalize(H.to(self.device), hermitian=hermitian)
            self._eigenvalues[size] = eigenvalues.cpu()
            self._eigenvectors[size] = eigenvectors.cpu()

        self._blocks = blocks
        self._block_sites = block_sites
        return self

    @property
    def is_solved(self) -> bool:
        return self._blocks is not None

    def _require_run(self) -> None:
        if self._blocks is None:
            raise RuntimeError("Solver has not been run. Call run() first.")

    @property
    def block_indices(self) -> List[Index]:
        """Block indices in basis order."""
        self._require_run()
        return list(self._blocks)

    @property
    def basis_size(self) -> int:
        self._require_run()
        return sum(size for size, _ in self._blocks.values())

    def get_block(self, block_index: IndexLike) -> Tuple[torch.Tensor, torch.Tensor, List[Index]]:
        """
        Spectrum of a single block.

        Args:
            block_index: Block index, e.g. (kx, ky)

        Returns:
            (eigenvalues, eigenvectors, sites): ascending eigenvalues of shape
            (size,), eigenvectors as columns of shape (size, size) and the
            physical index of each row

        Raises:
            IndexError: If the block does not exist
        """
        self._require_run()
        block_index = to_index(block_index)
        if block_index not in self._blocks:
            raise IndexError(f"Block {block_index} is not part of the model")
        size, position = self._blocks[block_index]
        return (
            self._eigenvalues[size][position],
            self._eigenvectors[size][position],
            self._block_sites[block_index],
        )

    def all_eigenvalues(self) -> torch.Tensor:
        """Eigenvalues of every block, concatenated and sorted ascending."""
        self._require_run()
        return torch.sort(
            torch.cat([values.flatten() for values in self._eigenvalues.values()])
        ).values
