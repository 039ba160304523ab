"""
Engine package - frame loop and the interactive sampling building blocks
"""

from .frame_loop import FrameLoop
from .sampling_loop import SamplingSession, SamplingProfile, SamplingCallbacks

__all__ = [
    "FrameLoop",
    "SamplingSession",
    "SamplingProfile",
    "SamplingCallbacks",
]
