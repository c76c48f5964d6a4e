"""One-dimensional potential landscapes as on-site amplitude callbacks.

Each factory returns a callback f(to_index, from_index) -> complex that
captures its parameters when it is created, so several potentials can be
built side by side and handed to separate models:

    >>> well = harmonic_oscillator(size=500)
    >>> model.add_hopping(well, (x,), (x,))

The potential is evaluated at the first subindex of ``from_index``.
"""

from typing import Callable, Dict, List
import torch

from latticeTensor.core.types import AmplitudeCallback, Index


class _Potential:
    """On-site callback V(x) built from a plain function of the site position."""

    def __init__(self, name: str, function: Callable[[int], float]) -> None:
        self.name = name
        self.function = function

    def __call__(self, to_index: Index, from_index: Index) -> complex:
        return complex(self.function(from_index[0]))

    def __repr__(self) -> str:
        return f"Potential({self.name})"


def infinite_square_well(size: int) -> AmplitudeCallback:
    """Zero potential inside the chain; the open chain ends act as infinite walls."""
    return _Potential("infinite_square_well", lambda x: 0.0)


def square_well(
    size: int,
    depth: float = -5e-3,
    left: int = 200,
    right: int = 300,
) -> AmplitudeCallback:
    """Potential ``depth`` for left <= x <= right, zero elsewhere."""

    def V(x: int) -> float:
        if x < left or x > right:
            return 0.0
        return depth

    return _Potential("square_well", V)


def harmonic_oscillator(size: int, curvature: float = 1e-6) -> AmplitudeCallback:
    """V(x) = curvature * (x - size/2)^2."""
    center = size // 2
    return _Potential("harmonic_oscillator", lambda x: curvature * (x - center) ** 2)


def double_well(
    size: int,
    quadratic: float = -1e-6,
    quartic: float = 3e-11,
) -> AmplitudeCallback:
    """V(x) = quadratic * (x - size/2)^2 + quartic * (x - size/2)^4."""
    center = size // 2
    return _Potential(
        "double_well",
        lambda x: quadratic * (x - center) ** 2 + quartic * (x - center) ** 4,
    )


def step(size: int, height: float = 3e-3) -> AmplitudeCallback:
    """Zero on the left half of the chain, ``height`` on the right half."""
    center = size // 2
    return _Potential("step", lambda x: 0.0 if x < center else height)


def barrier(
    size: int,
    left_potential: float = 0.0,
    barrier_potential: float = 4e-3,
    right_potential: float = 2e-3,
    left: int = 225,
    right: int = 275,
) -> AmplitudeCallback:
    """Piecewise constant potential with a barrier on [left, right)."""

    def V(x: int) -> float:
        if x < left:
            return left_potential
        if x < right:
            return barrier_potential
        return right_potential

    return _Potential("barrier", V)


POTENTIALS: Dict[str, Callable[..., AmplitudeCallback]] = {
    "InfiniteSquareWell": infinite_square_well,
    "SquareWell": square_well,
    "HarmonicOscillator": harmonic_oscillator,
    "DoubleWell": double_well,
    "Step": step,
    "Barrier": barrier,
}

POTENTIAL_NAMES: List[str] = list(POTENTIALS)


def make_potential(name: str, size: int, **kwargs) -> AmplitudeCallback:
    """
    Create the on-site callback for a named potential.

    Args:
        name: One of POTENTIAL_NAMES
        size: Number of sites of the chain
        **kwargs: Overrides for the potential parameters

    Raises:
        ValueError: If the name is unknown
    """
    if name not in POTENTIALS:
        raise ValueError(f"Unknown potential: {name}. Use one of {POTENTIAL_NAMES}")
    return POTENTIALS[name](size, **kwargs)


def potential_profile(potential: AmplitudeCallback, size: int) -> torch.Tensor:
    """Evaluate a potential on every site of a chain, shape (size,)."""
    return torch.tensor(
        [potential((x,), (x,)).real for x in range(size)], dtype=torch.float64
    )
