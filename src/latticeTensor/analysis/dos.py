"""Density of States (DOS): histogram and Lorentzian-broadened calculators."""

from typing import Tuple
import torch
import math


class DOS:
    """
    Density of states sampled on an energy window.

    The window [lower, upper] is divided into ``resolution`` bins of width
    dE; ``values[n]`` is the DOS in bin n, centered at ``energies[n]``.

    Attributes:
        lower: Lower bound of the energy window
        upper: Upper bound of the energy window
        values: DOS values, shape (resolution,)
    """

    def __init__(self, lower: float, upper: float, values: torch.Tensor) -> None:
        if upper <= lower:
            raise ValueError(f"Energy window upper bound ({upper}) must exceed lower bound ({lower})")
        self.lower = float(lower)
        self.upper = float(upper)
        self.values = torch.as_tensor(values, dtype=torch.float64)

    @property
    def resolution(self) -> int:
        return self.values.shape[0]

    @property
    def dE(self) -> float:
        """Bin width."""
        return (self.upper - self.lower) / self.resolution

    @property
    def energies(self) -> torch.Tensor:
        """Bin centers, shape (resolution,)."""
        return self.lower + (torch.arange(self.resolution, dtype=torch.float64) + 0.5) * self.dE

    def integral(self) -> float:
        """∫ DOS dE over the window (number of states inside the window)."""
        return float(self.values.sum() * self.dE)

    def normalize(self, norm: float) -> "DOS":
        """Return a copy divided by norm (e.g. the basis size)."""
        if norm == 0:
            raise ValueError("Cannot normalize DOS by zero")
        return DOS(self.lower, self.upper, self.values / norm)

    def __len__(self) -> int:
        return self.resolution

    def __repr__(self) -> str:
        return f"DOS(lower={self.lower}, upper={self.upper}, resolution={self.resolution})"


class DOSCalculator:
    """
    Density of States calculator.

    histogram():
        ρ(E_n) = #{ε ∈ bin n} / dE
    from_eigenvalues() with Lorentzian broadening:
        ρ(ω) = (1/N_k) Σ_{k,n} (η/π) / [(ω - εₙ(k))² + η²]
    """

    @staticmethod
    def histogram(
        eigenvalues: torch.Tensor,
        lower: float,
        upper: float,
        resolution: int,
    ) -> DOS:
        """
        Bin eigenvalues into a histogram DOS.

        Each eigenvalue inside [lower, upper] adds 1/dE to its bin, so the
        integral of the DOS counts the states in the window. Eigenvalues
        outside the window are ignored.

        Args:
            eigenvalues: Eigenvalues of any shape
            lower: Lower bound of the energy window
            upper: Upper bound of the energy window
            resolution: Number of bins

        Raises:
            ValueError: If resolution < 1 or upper <= lower
        """
        if resolution < 1:
            raise ValueError(f"Energy resolution must be at least 1, got {resolution}")
        if upper <= lower:
            raise ValueError(f"Energy window upper bound ({upper}) must exceed lower bound ({lower})")

        eps = torch.as_tensor(eigenvalues, dtype=torch.float64).flatten()
        counts = torch.histc(eps, bins=resolution, min=lower, max=upper)
        dE = (upper - lower) / resolution
        return DOS(lower, upper, counts / dE)

    @staticmethod
    def from_eigenvalues(
        E_k: torch.Tensor,
        omega: torch.Tensor,
        eta: float = 0.02,
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        """
        Compute DOS from eigenvalues using Lorentzian broadening.

        Args:
            E_k: Eigenvalues at each k-point, shape (N_k, N_band)
            omega: Energy grid for DOS, shape (n_omega,)
            eta: Lorentzian broadening width (smoothing parameter)

        Returns:
            (omega, rho) tuple
        """
        if eta <= 0:
            raise ValueError(f"Broadening eta must be positive, got {eta}")
        N_k, N_band = E_k.shape

        # Flatten eigenvalues for vectorized computation
        eps_flat = E_k.flatten()  # (N_k * N_band,)

        # omega: (n_omega, 1), eps: (1, N_k * N_band)
        omega_grid = omega[:, None]
        eps_grid = eps_flat[None, :]

        # Lorentzian: (η/π) / [(ω - ε)² + η²]
        lorentzian = (eta / math.pi) / ((omega_grid - eps_grid) ** 2 + eta ** 2)

        # DOS = (1/N_k) Σ over all states
        rho = torch.sum(lorentzian, dim=1) / N_k

        return omega, rho
