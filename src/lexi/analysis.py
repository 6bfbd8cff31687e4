"""Signal utilities: WAV input and waveform peak buckets.

All functions operate on numpy arrays (float64, normalized to [-1, 1]).
WAV I/O uses scipy.io.wavfile; compressed formats are not decoded here.
"""

import math
from pathlib import Path

import numpy as np
import scipy.io.wavfile as wavfile

from lexi.types import PeakBucket


# ---------------------------------------------------------------------------
# WAV input
# ---------------------------------------------------------------------------

def read_wav(path: str | Path) -> tuple[np.ndarray, int]:
    """Read a WAV file and return (samples, sample_rate).

    - Normalizes integer PCM to float64 in [-1, 1]
    - Passes through float WAVs as float64
    - Takes the first channel if stereo

    Raises:
        FileNotFoundError: if the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sr, data = wavfile.read(str(path))

    if data.ndim > 1:
        data = data[:, 0]

    if data.dtype == np.uint8:
        # 8-bit PCM is unsigned, centered on 128
        samples = (data.astype(np.float64) - 128) / 128
    elif np.issubdtype(data.dtype, np.integer):
        info = np.iinfo(data.dtype)
        samples = data.astype(np.float64) / max(abs(info.min), abs(info.max))
    else:
        samples = data.astype(np.float64)

    return samples, sr


# ---------------------------------------------------------------------------
# Waveform peaks
# ---------------------------------------------------------------------------

def waveform_peaks(
    samples: np.ndarray,
    width: int,
    height: int,
    margin: float = 0.1,
) -> list[PeakBucket]:
    """Bucket the signal into ``width`` columns of (min, max) amplitude.

    Each column covers ``ceil(N / width)`` samples; trailing columns past the
    end of the signal get an empty bucket (min = max = 0). Both extremes
    start at 0, so an all-positive column reports min 0. Amplitudes are
    scaled around the vertical center of a ``height``-pixel display, with
    ``margin`` of the height kept clear at top and bottom.
    """
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    if not 0 <= margin < 0.5:
        raise ValueError(f"margin must be in [0, 0.5), got {margin}")

    samples = np.asarray(samples, dtype=np.float64)
    n = len(samples)
    step = math.ceil(n / width) if n else 0
    center = height / 2
    amplitude_px = height * (1 - 2 * margin) / 2

    peaks = []
    for x in range(width):
        start = min(x * step, n)
        end = min((x + 1) * step, n)
        bucket = samples[start:end]
        lo = min(0.0, float(bucket.min())) if len(bucket) else 0.0
        hi = max(0.0, float(bucket.max())) if len(bucket) else 0.0
        peaks.append(PeakBucket(
            column=x,
            min=lo,
            max=hi,
            y_top=center - hi * amplitude_px,
            y_bottom=center - lo * amplitude_px,
        ))
    return peaks
