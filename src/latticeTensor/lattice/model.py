"""Lattice model classes: tight-binding Model builder and BravaisLattice."""

import itertools
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
import torch

from latticeTensor.core.types import (
    AmplitudeLike,
    HoppingAmplitude,
    Index,
    IndexFilter,
    IndexLike,
    to_index as as_index,
)


class Model:
    """
    Tight-binding model builder.

    Collects directed hopping amplitudes <to|H|from> between sites of a
    finite lattice (real space) or a discretized momentum grid and assembles
    the Hamiltonian matrix from them.

    Every site is an integer tuple with one subindex per entry of ``shape``
    and, when ``num_orbitals`` is given, one trailing orbital subindex:
        (x, y)              # shape=(SIZE_X, SIZE_Y)
        (kx, ky, orbital)   # shape=(NK, NK), num_orbitals=2

    Hoppings touching a site rejected by ``index_filter`` are dropped.
    Hoppings touching a site outside the declared bounds are an error.

    Attributes:
        shape: Extent of each spatial/momentum dimension
        num_orbitals: Number of orbitals per site, or None for no orbital subindex
        index_filter: Optional predicate selecting the sites to include
    """

    def __init__(
        self,
        shape: Sequence[int],
        num_orbitals: Optional[int] = None,
        index_filter: Optional[IndexFilter] = None,
    ) -> None:
        """
        Initialize Model.

        Args:
            shape: Number of sites along each dimension, e.g. (20, 20)
            num_orbitals: Orbitals per site (adds a trailing subindex)
            index_filter: Predicate returning True for sites to keep

        Raises:
            ValueError: If shape is empty or has non-positive entries
        """
        shape = tuple(int(n) for n in shape)
        if len(shape) == 0:
            raise ValueError("Model shape must have at least one dimension")
        if any(n < 1 for n in shape):
            raise ValueError(f"Model shape entries must be positive, got {shape}")
        if num_orbitals is not None and num_orbitals < 1:
            raise ValueError(f"num_orbitals must be positive, got {num_orbitals}")

        self.shape = shape
        self.num_orbitals = num_orbitals
        self.index_filter = index_filter

        self._hoppings: List[HoppingAmplitude] = []
        self._basis: Optional[Dict[Index, int]] = None
        self._sites: Optional[List[Index]] = None

    @property
    def index_length(self) -> int:
        """Number of subindices in a site index."""
        return len(self.shape) + (0 if self.num_orbitals is None else 1)

    @property
    def bounds(self) -> Tuple[int, ...]:
        """Exclusive upper bound of every subindex."""
        if self.num_orbitals is None:
            return self.shape
        return self.shape + (self.num_orbitals,)

    @property
    def is_constructed(self) -> bool:
        return self._basis is not None

    def is_included(self, index: IndexLike) -> bool:
        """Return False if the index filter rejects the site."""
        if self.index_filter is None:
            return True
        return bool(self.index_filter(as_index(index)))

    def _validate(self, index: Index) -> None:
        if len(index) != self.index_length:
            raise ValueError(
                f"Index {index} has {len(index)} subindices, expected {self.index_length}"
            )
        for subindex, bound in zip(index, self.bounds):
            if not 0 <= subindex < bound:
                raise ValueError(
                    f"Index {index} is outside the declared bounds {self.bounds}"
                )

    def add_hopping(
        self,
        amplitude: AmplitudeLike,
        to_index: IndexLike,
        from_index: IndexLike,
        hermitian_conjugate: bool = False,
    ) -> None:
        """
        Add a hopping amplitude <to_index|H|from_index>.

        Args:
            amplitude: Complex constant or callback f(to_index, from_index)
            to_index: Site the particle hops to
            from_index: Site the particle hops from
            hermitian_conjugate: If True, also add the reverse hopping with
                conjugated amplitude (ignored for on-site terms)

        Raises:
            RuntimeError: If the model is already constructed
            ValueError: If an index is outside the declared bounds
        """
        self.add(
            HoppingAmplitude(amplitude, as_index(to_index), as_index(from_index)),
            hermitian_conjugate=hermitian_conjugate,
        )

    def add(self, hopping: HoppingAmplitude, hermitian_conjugate: bool = False) -> None:
        """Add a HoppingAmplitude, optionally together with its Hermitian conjugate."""
        if self.is_constructed:
            raise RuntimeError("Cannot add hopping amplitudes after construct()")

        to_idx = as_index(hopping.to_index)
        from_idx = as_index(hopping.from_index)
        if not (self.is_included(to_idx) and self.is_included(from_idx)):
            return
        self._validate(to_idx)
        self._validate(from_idx)

        hopping = HoppingAmplitude(hopping.amplitude, to_idx, from_idx)
        self._hoppings.append(hopping)
        if hermitian_conjugate and to_idx != from_idx:
            self._hoppings.append(hopping.hermitian_conjugate())

    def construct(self) -> "Model":
        """
        Fix the basis: map every site that appears in a hopping to a linear index.

        Sites are ordered lexicographically, so the basis index of (x, y)
        increases with y fastest.

        Returns:
            self, to allow Model(...).construct() chaining

        Raises:
            ValueError: If the model has no hopping amplitudes
        """
        if self.is_constructed:
            return self
        if len(self._hoppings) == 0:
            raise ValueError("Cannot construct a Model without hopping amplitudes")

        sites = set()
        for hop in self._hoppings:
            sites.add(hop.to_index)
            sites.add(hop.from_index)
        self._sites = sorted(sites)
        self._basis = {site: n for n, site in enumerate(self._sites)}
        return self

    def _require_constructed(self) -> None:
        if not self.is_constructed:
            raise RuntimeError("Model is not constructed. Call construct() first.")

    @property
    def basis_size(self) -> int:
        """Number of sites in the basis."""
        self._require_constructed()
        return len(self._sites)

    @property
    def sites(self) -> List[Index]:
        """Physical indices in basis order."""
        self._require_constructed()
        return list(self._sites)

    def contains(self, index: IndexLike) -> bool:
        """True if the site is part of the constructed basis."""
        self._require_constructed()
        return as_index(index) in self._basis

    def get_basis_index(self, index: IndexLike) -> int:
        """
        Convert a physical index to its linear basis index.

        Raises:
            IndexError: If the site is not part of the basis
        """
        self._require_constructed()
        index = as_index(index)
        if index not in self._basis:
            raise IndexError(f"Index {index} is not part of the model basis")
        return self._basis[index]

    def get_physical_index(self, basis_index: int) -> Index:
        """
        Convert a linear basis index to its physical index.

        Raises:
            IndexError: If basis_index is outside [0, basis_size)
        """
        self._require_constructed()
        if not 0 <= basis_index < len(self._sites):
            raise IndexError(
                f"Basis index {basis_index} out of range [0, {len(self._sites)})"
            )
        return self._sites[basis_index]

    @property
    def hopping_amplitudes(self) -> Tuple[HoppingAmplitude, ...]:
        """All directed hopping amplitudes, in insertion order."""
        return tuple(self._hoppings)

    def __iter__(self) -> Iterator[HoppingAmplitude]:
        return iter(self._hoppings)

    def __len__(self) -> int:
        return len(self._hoppings)

    def hamiltonian(
        self,
        dtype: torch.dtype = torch.complex128,
        device: Optional[torch.device] = None,
    ) -> torch.Tensor:
        """
        Assemble the dense Hamiltonian H[to, from] = Σ amplitudes.

        Callback amplitudes are evaluated on every call, so a model whose
        callbacks read updated parameters yields an updated matrix.

        Returns:
            Tensor of shape (basis_size, basis_size)
        """
        self.construct()
        n = len(self._sites)
        rows = torch.tensor([self._basis[hop.to_index] for hop in self._hoppings], dtype=torch.long)
        cols = torch.tensor([self._basis[hop.from_index] for hop in self._hoppings], dtype=torch.long)
        values = torch.tensor([hop.get_amplitude() for hop in self._hoppings], dtype=dtype)

        H = torch.zeros((n, n), dtype=dtype)
        H.index_put_((rows, cols), values, accumulate=True)
        return H.to(device) if device is not None else H

    def __repr__(self) -> str:
        return (
            f"Model(shape={self.shape}, num_orbitals={self.num_orbitals}, "
            f"hoppings={len(self._hoppings)}, constructed={self.is_constructed})"
        )


def nearest_neighbor_model(
    shape: Sequence[int],
    t: float = 1.0,
    on_site: Optional[AmplitudeLike] = None,
    index_filter: Optional[IndexFilter] = None,
    periodic: bool = False,
) -> Model:
    """
    Build the nearest-neighbor tight-binding model on a hypercubic grid.

    H = Σ_i ε_i c†_i c_i - t Σ_<ij> (c†_i c_j + H.c.)

    Args:
        shape: Number of sites per dimension
        t: Hopping parameter (amplitude is -t)
        on_site: Optional on-site term, constant or callback f(to, from)
        index_filter: Optional site predicate (e.g. an annulus)
        periodic: Wrap bonds around dimensions with more than two sites

    Returns:
        Unconstructed Model, so more terms can still be added

    Examples:
        >>> model = nearest_neighbor_model((2, 2), t=1.0)
        >>> len(model)
        8
    """
    model = Model(shape, index_filter=index_filter)
    for site in itertools.product(*(range(n) for n in model.shape)):
        if on_site is not None:
            model.add_hopping(on_site, site, site)
        for dim, size in enumerate(model.shape):
            neighbor = list(site)
            neighbor[dim] += 1
            if neighbor[dim] == size:
                if not periodic or size <= 2:
                    continue
                neighbor[dim] = 0
            model.add_hopping(-t, neighbor, site, hermitian_conjugate=True)
    return model


def reciprocal_vectors(cell_vectors: torch.Tensor) -> torch.Tensor:
    """
    Compute reciprocal lattice vectors, a_i · b_j = 2π δ_ij.

    For 1D: b = 2π / a
    For 2D: b_i = 2π * ε_ij * a_j / |a_1 × a_2|
    For 3D: b_i = 2π * (a_j × a_k) / (a_i · (a_j × a_k))

    Args:
        cell_vectors: Lattice vectors as rows, shape (dim, dim)

    Returns:
        Reciprocal lattice vectors as rows, shape (dim, dim)

    Raises:
        ValueError: If the vectors are not square in shape or linearly dependent
    """
    a = torch.as_tensor(cell_vectors, dtype=torch.float64)
    if a.ndim != 2 or a.shape[0] != a.shape[1] or a.shape[0] not in (1, 2, 3):
        raise ValueError(
            f"cell_vectors must have shape (dim, dim) with dim in 1..3, got {tuple(a.shape)}"
        )
    dim = a.shape[0]

    if dim == 1:
        if a[0, 0] == 0:
            raise ValueError("Lattice vector must be non-zero")
        return 2 * torch.pi / a

    if dim == 2:
        det = a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0]
        if det == 0:
            raise ValueError("Lattice vectors are linearly dependent")
        b = torch.zeros_like(a)
        b[0, 0] = 2 * torch.pi * a[1, 1] / det
        b[0, 1] = -2 * torch.pi * a[1, 0] / det
        b[1, 0] = -2 * torch.pi * a[0, 1] / det
        b[1, 1] = 2 * torch.pi * a[0, 0] / det
        return b

    volume = torch.dot(a[0], torch.linalg.cross(a[1], a[2]))
    if volume == 0:
        raise ValueError("Lattice vectors are linearly dependent")
    b = torch.zeros_like(a)
    b[0] = 2 * torch.pi * torch.linalg.cross(a[1], a[2]) / volume
    b[1] = 2 * torch.pi * torch.linalg.cross(a[2], a[0]) / volume
    b[2] = 2 * torch.pi * torch.linalg.cross(a[0], a[1]) / volume
    return b


class BravaisLattice:
    """
    Bravais lattice with multiple sites per unit cell.

    Attributes:
        cell_vectors: Lattice vectors, shape (dim, dim), rows in Cartesian coordinates
        basis_positions: Basis site positions in fractional coordinates
        dim: Spatial dimension
    """

    def __init__(
        self,
        cell_vectors: Union[torch.Tensor, Sequence[Sequence[float]]],
        basis_positions: Optional[List[torch.Tensor]] = None,
    ) -> None:
        """
        Initialize BravaisLattice.

        Args:
            cell_vectors: Lattice vectors, shape (dim, dim)
            basis_positions: Basis positions in fractional coords (default: one site at origin)
        """
        self.cell_vectors = torch.as_tensor(cell_vectors, dtype=torch.float64)
        self.dim = self.cell_vectors.shape[0]
        if basis_positions is None:
            basis_positions = [torch.zeros(self.dim, dtype=torch.float64)]
        self.basis_positions = [
            torch.as_tensor(p, dtype=torch.float64) for p in basis_positions
        ]
        for p in self.basis_positions:
            if p.shape != (self.dim,):
                raise ValueError(
                    f"Basis position {p.tolist()} does not match lattice dimension {self.dim}"
                )

    @property
    def num_sites(self) -> int:
        """Number of basis sites in unit cell."""
        return len(self.basis_positions)

    def cartesian_positions(self) -> torch.Tensor:
        """Basis positions in Cartesian coordinates, shape (num_sites, dim)."""
        return torch.stack(self.basis_positions) @ self.cell_vectors

    def reciprocal_vectors(self) -> torch.Tensor:
        """Reciprocal lattice vectors, shape (dim, dim)."""
        return reciprocal_vectors(self.cell_vectors)

    def __repr__(self) -> str:
        return f"BravaisLattice(dim={self.dim}, num_sites={self.num_sites})"
