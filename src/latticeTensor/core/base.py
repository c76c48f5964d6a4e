"""BaseTensor class: labelled, fixed-shape result arrays."""

from typing import List, Optional, Sequence, Tuple, Union
import torch


class BaseTensor:
    """
    Unified tensor class for lattice results.

    Wraps a PyTorch tensor with a semantic label for each dimension
    (e.g. ['x', 'y'] for a probability density or ['band', 'k'] for a band
    structure). Element access with a full coordinate tuple is bounds
    checked, so a coordinate outside the declared shape fails instead of
    wrapping around like negative PyTorch indices do.

    Attributes:
        tensor: Underlying PyTorch tensor data
        labels: Semantic labels for each dimension
    """

    def __init__(
        self,
        tensor: torch.Tensor,
        labels: List[str],
    ) -> None:
        """
        Initialize BaseTensor.

        Args:
            tensor: Underlying tensor data
            labels: Semantic labels for each dimension

        Raises:
            ValueError: If the number of labels does not match tensor.ndim
        """
        if len(labels) != tensor.ndim:
            raise ValueError(
                f"Number of labels ({len(labels)}) must match tensor.ndim ({tensor.ndim})"
            )
        if len(set(labels)) != len(labels):
            raise ValueError(f"Labels must be unique, got {labels}")

        self.tensor = tensor
        self.labels = list(labels)

    @classmethod
    def full(
        cls,
        shape: Sequence[int],
        labels: List[str],
        fill_value: float = 0.0,
        dtype: torch.dtype = torch.float64,
        device: Optional[torch.device] = None,
    ) -> "BaseTensor":
        """Create a BaseTensor of the given shape filled with fill_value."""
        return cls(
            tensor=torch.full(tuple(shape), fill_value, dtype=dtype, device=device),
            labels=labels,
        )

    def _check_coordinate(self, coordinate: Tuple[int, ...]) -> Tuple[int, ...]:
        if not isinstance(coordinate, tuple):
            coordinate = (coordinate,)
        if len(coordinate) != self.ndim:
            raise IndexError(
                f"Expected {self.ndim} coordinates for labels {self.labels}, "
                f"got {len(coordinate)}: {coordinate}"
            )
        for axis, (c, size) in enumerate(zip(coordinate, self.shape)):
            if not 0 <= c < size:
                raise IndexError(
                    f"Coordinate {c} out of range [0, {size}) for axis '{self.labels[axis]}'"
                )
        return coordinate

    def __getitem__(self, coordinate: Union[int, Tuple[int, ...]]) -> Union[float, complex]:
        return self.tensor[self._check_coordinate(coordinate)].item()

    def __setitem__(self, coordinate: Union[int, Tuple[int, ...]], value) -> None:
        self.tensor[self._check_coordinate(coordinate)] = value

    def get_slice(self, label: str, position: int) -> torch.Tensor:
        """
        Fix one axis at a position and return the remaining sub-tensor.

        Args:
            label: Label of the axis to fix
            position: Position along that axis

        Returns:
            Tensor with the fixed axis removed

        Raises:
            ValueError: If label is unknown
            IndexError: If position is out of range
        """
        if label not in self.labels:
            raise ValueError(f"Unknown axis label '{label}'. Known labels: {self.labels}")
        axis = self.labels.index(label)
        size = self.shape[axis]
        if not 0 <= position < size:
            raise IndexError(
                f"Position {position} out of range [0, {size}) for axis '{label}'"
            )
        return self.tensor.select(axis, position)

    def numpy(self):
        """Return a NumPy copy of the data (for matplotlib)."""
        return self.tensor.detach().cpu().numpy()

    @property
    def shape(self) -> torch.Size:
        """Return tensor shape."""
        return self.tensor.shape

    @property
    def ndim(self) -> int:
        """Return number of dimensions."""
        return self.tensor.ndim

    @property
    def dtype(self) -> torch.dtype:
        """Return tensor dtype."""
        return self.tensor.dtype

    def __repr__(self) -> str:
        return f"BaseTensor(shape={tuple(self.shape)}, labels={self.labels}, dtype={self.dtype})"
