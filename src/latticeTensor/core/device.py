"""Device management utilities.

Solvers and samplers accept an optional device so that large batches of
blocks can be diagonalized on a GPU. CPU stays the default so that every
example gives the same result on every machine.
"""

from typing import Optional, Union

import torch


def get_device(device: Optional[Union[str, torch.device]] = None) -> torch.device:
    """Get device with automatic CUDA detection and CPU fallback.

    Args:
        device: None (CPU), 'cpu', 'cuda' or a torch.device

    Returns:
        torch.device object, either 'cuda' or 'cpu'

    Raises:
        ValueError: For any other device string

    Examples:
        >>> from latticeTensor.core import get_device
        >>> get_device()
        device(type='cpu')
    """
    if device is None:
        return get_default_device()

    if isinstance(device, torch.device):
        return device

    if device == "cuda" and not is_cuda_available():
        print("Warning: CUDA requested but not available, using CPU")
        return torch.device("cpu")

    if device not in ("cuda", "cpu"):
        raise ValueError(f"Invalid device: {device}. Use 'cuda', 'cpu', or torch.device")

    return torch.device(device)


def get_default_device() -> torch.device:
    """Get the default device (CPU)."""
    return torch.device("cpu")


def is_cuda_available() -> bool:
    """Check if CUDA is available on the system."""
    return torch.cuda.is_available()


__all__ = ["get_device", "get_default_device", "is_cuda_available"]
