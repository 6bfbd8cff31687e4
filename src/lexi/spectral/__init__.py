"""Spectral analysis engine: decoded signal -> RGBA time-frequency image."""

import logging

import numpy as np

from lexi.spectral.fft import FixedSizeFFT, InvalidSizeError, get_fft
from lexi.spectral.framer import (
    DegenerateInputError,
    FramePlan,
    hann_window,
    iter_frames,
    plan_frames,
)
from lexi.spectral.mapper import (
    column_for_frame,
    frame_magnitudes,
    normalize_db,
    values_to_colors,
    write_column,
)
from lexi.types import SpectralImage

logger = logging.getLogger(__name__)

DEFAULT_FFT_SIZE = 512

__all__ = [
    "DEFAULT_FFT_SIZE",
    "DegenerateInputError",
    "FixedSizeFFT",
    "FramePlan",
    "InvalidSizeError",
    "compute_spectrogram",
    "get_fft",
    "hann_window",
    "iter_frames",
    "plan_frames",
]


def compute_spectrogram(
    samples: np.ndarray,
    sample_rate: int,
    width: int,
    fft_size: int = DEFAULT_FFT_SIZE,
    strict: bool = False,
) -> SpectralImage:
    """Render ``samples`` as a ``width`` x ``fft_size/2`` RGBA spectrogram.

    Args:
        samples: Decoded mono signal, floats in [-1, 1].
        sample_rate: Sample rate of ``samples`` in Hz.
        width: Output columns (>= 2).
        fft_size: Frame length; must be a power of two.
        strict: Raise DegenerateInputError for signals shorter than one
            frame instead of returning a blank image.

    Returns:
        SpectralImage whose row 0 is the highest frequency bin.

    Raises:
        InvalidSizeError: if ``fft_size`` is not a power of two.
        DegenerateInputError: in strict mode, for too-short signals.
    """
    fft = get_fft(fft_size)
    samples = np.asarray(samples, dtype=np.float64)
    plan = plan_frames(len(samples), fft_size, width)

    height = fft_size // 2
    pixels = np.zeros(width * height * 4, dtype=np.uint8)
    image = SpectralImage(
        width=width,
        height=height,
        pixels=pixels,
        sample_rate=sample_rate,
        fft_size=fft_size,
        hop_size=plan.hop_size,
        total_frames=plan.total_frames,
    )

    if plan.is_degenerate:
        message = (
            f"Signal of {len(samples)} samples is shorter than fft_size={fft_size}"
        )
        if strict:
            raise DegenerateInputError(message)
        logger.warning(f"{message}; returning blank spectrogram")
        return image

    logger.debug(
        f"Spectrogram: {len(samples)} samples, hop={plan.hop_size}, "
        f"nominal frames={plan.total_frames}, width={width}"
    )

    emitted = 0
    for frame_index, frame in iter_frames(samples, plan):
        normalized = normalize_db(frame_magnitudes(fft, frame))
        column = column_for_frame(frame_index, plan.total_frames, width)
        write_column(pixels, width, height, column, values_to_colors(normalized))
        emitted += 1

    image.frames_emitted = emitted
    logger.info(
        f"Spectrogram {width}x{height}: {emitted}/{plan.total_frames} frames "
        f"(hop {plan.hop_size})"
    )
    return image
