"""Gaussian smoothing of sampled curves."""

import torch
import torch.nn.functional as F

from latticeTensor.analysis.dos import DOS


def gaussian(
    values: torch.Tensor,
    sigma: float,
    window_size: int,
    dx: float = 1.0,
) -> torch.Tensor:
    """
    Convolve a 1-D curve with a normalized Gaussian kernel.

    kernel(m) ∝ exp(-(m·dx)² / (2σ²)),  m = -w/2, ..., w/2

    Samples beyond the ends of the curve count as zero.

    Args:
        values: Curve, shape (n,)
        sigma: Standard deviation, in the same units as dx
        window_size: Number of kernel points (odd, positive)
        dx: Spacing between samples

    Returns:
        Smoothed curve, shape (n,)

    Raises:
        ValueError: If sigma is not positive or window_size is not odd and positive
    """
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma}")
    if window_size < 1 or window_size % 2 == 0:
        raise ValueError(f"window_size must be odd and positive, got {window_size}")
    values = torch.as_tensor(values, dtype=torch.float64)
    if values.ndim != 1:
        raise ValueError(f"Expected a 1-D curve, got shape {tuple(values.shape)}")

    half = window_size // 2
    offsets = torch.arange(-half, half + 1, dtype=torch.float64) * dx
    kernel = torch.exp(-offsets ** 2 / (2 * sigma ** 2))
    kernel = kernel / kernel.sum()

    smoothed = F.conv1d(values[None, None, :], kernel[None, None, :], padding=half)
    return smoothed[0, 0]


def smooth_dos(dos: DOS, sigma: float, window_size: int) -> DOS:
    """
    Smooth a DOS with a Gaussian whose width is given in energy units.

    Args:
        dos: DOS to smooth
        sigma: Standard deviation in energy units
        window_size: Number of kernel points (odd, positive)
    """
    return DOS(
        lower=dos.lower,
        upper=dos.upper,
        values=gaussian(dos.values, sigma, window_size, dx=dos.dE),
    )
