"""Type definitions for latticeTensor core module."""

import operator
from dataclasses import dataclass
from typing import Callable, Sequence, Tuple, Union


# Physical index of a lattice or momentum site, e.g. (x, y) or (kx, ky, orbital)
Index = Tuple[int, ...]
IndexLike = Union[Index, Sequence[int]]

# Position dependent amplitude: f(to_index, from_index) -> complex
AmplitudeCallback = Callable[[Index, Index], complex]
AmplitudeLike = Union[complex, float, int, AmplitudeCallback]

# Site inclusion predicate: f(index) -> bool
IndexFilter = Callable[[Index], bool]


def to_index(index: IndexLike) -> Index:
    """Normalize a list/tuple of integers to an immutable Index.

    Raises:
        TypeError: If a subindex is not an integer
        ValueError: If the index is empty
    """
    if isinstance(index, int):
        raise TypeError(f"Index must be a sequence of integers, got int {index}")
    subindices = tuple(index)
    if len(subindices) == 0:
        raise ValueError("Index must have at least one subindex")
    for subindex in subindices:
        # bool is an int subclass but never a valid coordinate
        if isinstance(subindex, bool) or not hasattr(subindex, "__index__"):
            raise TypeError(
                f"Subindices must be integers, got {type(subindex).__name__} in {subindices}"
            )
    return tuple(operator.index(s) for s in subindices)


@dataclass(frozen=True)
class HoppingAmplitude:
    """
    A single directed coupling <to_index| H |from_index>.

    The amplitude is either a constant or a callback evaluated with
    (to_index, from_index) every time the Hamiltonian is assembled, which
    allows position dependent potentials.

    Attributes:
        amplitude: Complex constant or AmplitudeCallback
        to_index: Row index of the matrix element
        from_index: Column index of the matrix element

    Examples:
        >>> hop = HoppingAmplitude(-1.0, (1, 0), (0, 0))
        >>> hop.hermitian_conjugate()
        HoppingAmplitude(amplitude=(-1-0j), to_index=(0, 0), from_index=(1, 0))
    """
    amplitude: AmplitudeLike
    to_index: Index
    from_index: Index

    @property
    def is_callback(self) -> bool:
        """True if the amplitude is evaluated lazily."""
        return callable(self.amplitude)

    def get_amplitude(self) -> complex:
        """Evaluate the amplitude."""
        if self.is_callback:
            return complex(self.amplitude(self.to_index, self.from_index))
        return complex(self.amplitude)

    def hermitian_conjugate(self) -> "HoppingAmplitude":
        """Return the reverse-direction amplitude with conjugated value."""
        if self.is_callback:
            return HoppingAmplitude(
                _ConjugateCallback(self.amplitude), self.from_index, self.to_index
            )
        return HoppingAmplitude(
            complex(self.amplitude).conjugate(), self.from_index, self.to_index
        )


class _ConjugateCallback:
    """Conjugate of an amplitude callback with swapped arguments."""

    def __init__(self, callback: AmplitudeCallback) -> None:
        self.callback = callback

    def __call__(self, to_index: Index, from_index: Index) -> complex:
        return complex(self.callback(from_index, to_index)).conjugate()

    def __repr__(self) -> str:
        return f"conj({self.callback!r})"
