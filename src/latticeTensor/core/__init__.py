"""Core module: BaseTensor, index types and device utilities."""

from latticeTensor.core.base import BaseTensor
from latticeTensor.core.device import get_device, get_default_device, is_cuda_available
from latticeTensor.core.types import (
    AmplitudeCallback,
    HoppingAmplitude,
    Index,
    IndexFilter,
    IndexLike,
    to_index,
)

__all__ = [
    "BaseTensor",
    "get_device",
    "get_default_device",
    "is_cuda_available",
    "AmplitudeCallback",
    "HoppingAmplitude",
    "Index",
    "IndexFilter",
    "IndexLike",
    "to_index",
]
