"""Brillouin zone utilities: minor mesh sampling, cell lookup and k-paths."""

from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union
import torch

from latticeTensor.core.types import Index

VectorLike = Union[torch.Tensor, Sequence[float]]

# Scaled coordinates this close to an integer are treated as lying on the cell boundary
BOUNDARY_TOLERANCE = 1e-9


class MeshType(Enum):
    """
    Placement of the mesh points inside one fundamental domain.

    NODAL: points on the nodes f_i = n_i / R_i; each cell is centered on its node.
    INTERIOR: points at the cell centers f_i = (n_i + 1/2) / R_i.
    """
    NODAL = "nodal"
    INTERIOR = "interior"


class BrillouinZone:
    """
    Regular partition of one fundamental domain of the reciprocal lattice.

    The domain is the parallelepiped spanned by the reciprocal basis
    vectors. A resolution (R_1, ..., R_dim) divides it into prod(R_i)
    minor cells, each labelled by an integer index (n_1, ..., n_dim) with
    0 <= n_i < R_i. Any momentum maps to exactly one cell: its fractional
    coordinates are binned with floor and wrapped modulo R_i, so momenta
    that differ by a reciprocal lattice vector share a cell.

    Attributes:
        basis_vectors: Reciprocal basis, rows are vectors, shape (dim, dim)
        mesh_type: MeshType used for the mesh points and the binning
        dim: Dimension of momentum space

    Examples:
        >>> bz = BrillouinZone([[2 * math.pi, 0], [0, 2 * math.pi]])
        >>> mesh = bz.get_minor_mesh([4, 4])
        >>> bz.get_minor_cell_index(mesh[5], [4, 4])
        (1, 1)
    """

    def __init__(
        self,
        basis_vectors: Union[torch.Tensor, Sequence[Sequence[float]]],
        mesh_type: MeshType = MeshType.INTERIOR,
    ) -> None:
        """
        Initialize BrillouinZone.

        Args:
            basis_vectors: 1 to 3 linearly independent reciprocal lattice vectors
            mesh_type: MeshType.INTERIOR (cell centers) or MeshType.NODAL

        Raises:
            ValueError: If the basis is not square or linearly dependent
        """
        basis = torch.as_tensor(basis_vectors, dtype=torch.float64)
        if basis.ndim != 2 or basis.shape[0] != basis.shape[1] or basis.shape[0] not in (1, 2, 3):
            raise ValueError(
                f"basis_vectors must have shape (dim, dim) with dim in 1..3, got {tuple(basis.shape)}"
            )
        if torch.linalg.det(basis).abs() < 1e-12:
            raise ValueError("Reciprocal basis vectors are linearly dependent")
        if not isinstance(mesh_type, MeshType):
            raise TypeError(f"mesh_type must be a MeshType, got {type(mesh_type)}")

        self.basis_vectors = basis
        self.mesh_type = mesh_type
        self.dim = basis.shape[0]

    def _check_resolution(self, num_mesh_points: Sequence[int]) -> Tuple[int, ...]:
        resolution = tuple(int(n) for n in num_mesh_points)
        if len(resolution) != self.dim:
            raise ValueError(
                f"Expected {self.dim} mesh resolutions, got {len(resolution)}: {resolution}"
            )
        if any(n < 1 for n in resolution):
            raise ValueError(f"Mesh resolutions must be at least 1, got {resolution}")
        return resolution

    @property
    def _offset(self) -> float:
        return 0.5 if self.mesh_type == MeshType.INTERIOR else 0.0

    def get_minor_mesh_indices(self, num_mesh_points: Sequence[int]) -> torch.Tensor:
        """
        Integer cell index of every mesh point, in row-major order.

        Returns:
            Tensor of shape (prod(R_i), dim), dtype long
        """
        resolution = self._check_resolution(num_mesh_points)
        grids = torch.meshgrid(
            *[torch.arange(n, dtype=torch.long) for n in resolution],
            indexing="ij",
        )
        return torch.stack(grids, dim=-1).reshape(-1, self.dim)

    def get_minor_mesh(self, num_mesh_points: Sequence[int]) -> torch.Tensor:
        """
        Generate one mesh point per minor cell.

        Args:
            num_mesh_points: Resolution (R_1, ..., R_dim)

        Returns:
            K-points in Cartesian coordinates, shape (prod(R_i), dim).
            Row j belongs to the cell get_minor_mesh_indices(...)[j].
        """
        resolution = torch.tensor(self._check_resolution(num_mesh_points), dtype=torch.float64)
        indices = self.get_minor_mesh_indices(num_mesh_points).to(torch.float64)
        k_frac = (indices + self._offset) / resolution
        return k_frac @ self.basis_vectors

    def fractional_coordinates(self, k: VectorLike) -> torch.Tensor:
        """
        Solve k = Σ_i f_i b_i for the fractional coordinates f.

        Args:
            k: Momentum, shape (dim,) or (N, dim)

        Returns:
            Fractional coordinates with the same shape as k
        """
        k = torch.as_tensor(k, dtype=torch.float64)
        if k.shape[-1] != self.dim:
            raise ValueError(
                f"Momentum has {k.shape[-1]} components, expected {self.dim}"
            )
        # f @ B = k  <=>  B^T f^T = k^T
        if k.ndim == 1:
            return torch.linalg.solve(self.basis_vectors.T, k)
        return torch.linalg.solve(self.basis_vectors.T, k.transpose(0, 1)).transpose(0, 1)

    def get_minor_cell_index(
        self,
        k: VectorLike,
        num_mesh_points: Sequence[int],
    ) -> Union[Index, torch.Tensor]:
        """
        Find the minor cell that contains a momentum.

        Fractional coordinates are scaled by the resolution, binned with
        floor (after shifting by 1/2 for nodal meshes, whose cells are
        centered on the nodes) and wrapped into [0, R_i). A point on a cell
        boundary, up to BOUNDARY_TOLERANCE, belongs to the upper cell.

        Args:
            k: Momentum in Cartesian coordinates, shape (dim,) or (N, dim)
            num_mesh_points: Resolution (R_1, ..., R_dim)

        Returns:
            Index tuple for a single momentum, or a long tensor of shape
            (N, dim) for a batch
        """
        resolution = torch.tensor(self._check_resolution(num_mesh_points), dtype=torch.float64)
        k = torch.as_tensor(k, dtype=torch.float64)
        scaled = self.fractional_coordinates(k) * resolution
        if self.mesh_type == MeshType.NODAL:
            scaled = scaled + 0.5
        nearest = torch.round(scaled)
        scaled = torch.where((scaled - nearest).abs() < BOUNDARY_TOLERANCE, nearest, scaled)
        cell = torch.remainder(torch.floor(scaled), resolution).to(torch.long)

        if k.ndim == 1:
            return tuple(cell.tolist())
        return cell

    def __repr__(self) -> str:
        return f"BrillouinZone(dim={self.dim}, mesh_type={self.mesh_type.name})"


def interpolate(
    start: VectorLike,
    end: VectorLike,
    n: int,
    device: Optional[torch.device] = None,
) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Evenly spaced points on the half-open segment [start, end).

    point(t) = (1 - t) * start + t * end,  t_j = j / n,  j = 0, ..., n - 1

    The end point is left out so that consecutive segments can be
    concatenated without sampling the joint twice.

    Args:
        start: Start point, shape (dim,)
        end: End point, shape (dim,)
        n: Number of points
        device: Device to place tensors on

    Returns:
        (t, points) with shapes (n,) and (n, dim)

    Raises:
        ValueError: If n < 1 or the points have different shapes
    """
    if n < 1:
        raise ValueError(f"Number of interpolation points must be at least 1, got {n}")
    start = torch.as_tensor(start, dtype=torch.float64, device=device)
    end = torch.as_tensor(end, dtype=torch.float64, device=device)
    if start.shape != end.shape:
        raise ValueError(
            f"Start and end points must have the same shape, got {tuple(start.shape)} and {tuple(end.shape)}"
        )

    t = torch.arange(n, dtype=torch.float64, device=device) / n
    points = (1 - t)[:, None] * start[None, :] + t[:, None] * end[None, :]
    return t, points


def generate_k_path(
    high_symmetry_points: Dict[str, VectorLike],
    points: List[str],
    n_per_segment: int,
    include_endpoint: bool = False,
    device: Optional[torch.device] = None,
) -> Tuple[torch.Tensor, List[Tuple[int, str]]]:
    """
    Generate k-point path along high-symmetry lines.

    Args:
        high_symmetry_points: Mapping from label to momentum (e.g. {'G': ..., 'M': ...})
        points: Labels along the path (e.g. ['G', 'M', 'K', 'G'])
        n_per_segment: Number of k-points per segment (start included, end excluded)
        include_endpoint: Append the final point of the path
        device: Device to place tensor on

    Returns:
        k_path: K-points, shape (n_total, dim)
        ticks: List of (index, label) for plot markers

    Raises:
        ValueError: If fewer than two points are given or a label is unknown
    """
    if len(points) < 2:
        raise ValueError(f"A path needs at least two points, got {points}")
    for label in points:
        if label not in high_symmetry_points:
            raise ValueError(
                f"Unknown high-symmetry point '{label}'. Known points: {list(high_symmetry_points)}"
            )

    path_segments = []
    ticks = [(0, points[0])]

    for i in range(len(points) - 1):
        start_label, end_label = points[i], points[i + 1]
        _, segment = interpolate(
            high_symmetry_points[start_label],
            high_symmetry_points[end_label],
            n_per_segment,
            device=device,
        )
        path_segments.append(segment)
        ticks.append((ticks[-1][0] + len(segment), end_label))

    if include_endpoint:
        end = torch.as_tensor(high_symmetry_points[points[-1]], dtype=torch.float64, device=device)
        path_segments.append(end[None, :])

    k_path = torch.cat(path_segments, dim=0)

    return k_path, ticks
