"""Adaptive-hop framing and Hann windowing for spectral analysis."""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

import numpy as np


class DegenerateInputError(ValueError):
    """Signal is shorter than one analysis frame."""


@dataclass
class FramePlan:
    """Hop size and nominal frame count for one signal/width pairing."""
    signal_length: int
    fft_size: int
    width: int
    hop_size: int
    total_frames: int    # nominal; frames past the signal end are never emitted

    @property
    def is_degenerate(self) -> bool:
        return self.signal_length < self.fft_size


def plan_frames(signal_length: int, fft_size: int, width: int) -> FramePlan:
    """Choose a hop size so the frame count roughly matches ``width`` columns.

    For signals shorter than ``fft_size`` the hop clamps to 1 and the plan
    simply yields no frames.
    """
    if width < 2:
        raise ValueError(f"width must be at least 2, got {width}")
    if fft_size < 1:
        raise ValueError(f"fft_size must be positive, got {fft_size}")

    span = signal_length - fft_size
    max_hop = span // (width - 1)
    hop_size = max(1, max_hop)
    total_frames = math.ceil(span / hop_size) + 1

    return FramePlan(
        signal_length=signal_length,
        fft_size=fft_size,
        width=width,
        hop_size=hop_size,
        total_frames=total_frames,
    )


@lru_cache(maxsize=16)
def hann_window(size: int) -> np.ndarray:
    """Symmetric Hann window: 0.5 * (1 - cos(2*pi*k / (size - 1))).

    The returned array is shared and read-only.
    """
    if size == 1:
        window = np.ones(1)
    else:
        k = np.arange(size)
        window = 0.5 * (1 - np.cos(2 * np.pi * k / (size - 1)))
    window.flags.writeable = False
    return window


def iter_frames(
    samples: np.ndarray,
    plan: FramePlan,
) -> Iterator[tuple[int, np.ndarray]]:
    """Yield (frame_index, windowed_frame) in increasing time order.

    Stops at the first frame whose end runs past the signal; frames are
    never zero-padded, so fewer than ``plan.total_frames`` may be emitted.
    """
    window = hann_window(plan.fft_size)
    n = len(samples)

    for frame_index in range(plan.total_frames):
        start = frame_index * plan.hop_size
        end = start + plan.fft_size
        if end > n:
            break
        yield frame_index, samples[start:end] * window
