"""Map FFT frames onto a color-coded time-frequency RGBA buffer.

Per bin: magnitude -> dB (20*log10(mag + 1e-6)) -> clamp [-100, 0] ->
normalize [0, 1] -> hue (1 - v) * 240 at full saturation, 50% lightness.
Low frequencies are drawn at the bottom (row = height - 1 - bin).
"""

import logging
import math

import numpy as np

from lexi.spectral.fft import FixedSizeFFT

logger = logging.getLogger(__name__)

DB_FLOOR = -100.0
DB_CEILING = 0.0
MAGNITUDE_EPSILON = 1e-6


# ---------------------------------------------------------------------------
# Color mapping
# ---------------------------------------------------------------------------

def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def _round_half_up(x):
    return np.floor(x * 255 + 0.5)


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int, int]:
    """Convert HSL (degrees, percent, percent) to 8-bit RGBA, alpha 255."""
    h /= 360
    s /= 100
    l /= 100

    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_channel(p, q, h + 1 / 3)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1 / 3)

    return (
        math.floor(r * 255 + 0.5),
        math.floor(g * 255 + 0.5),
        math.floor(b * 255 + 0.5),
        255,
    )


def value_to_color(normalized: float) -> tuple[int, int, int, int]:
    """Blue (0.0) through green to red (1.0)."""
    return hsl_to_rgb((1 - normalized) * 240, 100, 50)


def _hue_to_channel_array(p: float, q: float, t: np.ndarray) -> np.ndarray:
    t = np.where(t < 0, t + 1, t)
    t = np.where(t > 1, t - 1, t)
    return np.select(
        [t < 1 / 6, t < 1 / 2, t < 2 / 3],
        [p + (q - p) * 6 * t, np.full_like(t, q), p + (q - p) * (2 / 3 - t) * 6],
        default=p,
    )


def values_to_colors(normalized: np.ndarray) -> np.ndarray:
    """Vectorized ``value_to_color``: returns an (n, 4) uint8 array."""
    h = (1 - np.asarray(normalized, dtype=np.float64)) * 240 / 360
    s, l = 1.0, 0.5
    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q

    colors = np.empty((len(h), 4), dtype=np.uint8)
    colors[:, 0] = _round_half_up(_hue_to_channel_array(p, q, h + 1 / 3))
    colors[:, 1] = _round_half_up(_hue_to_channel_array(p, q, h))
    colors[:, 2] = _round_half_up(_hue_to_channel_array(p, q, h - 1 / 3))
    colors[:, 3] = 255
    return colors


# ---------------------------------------------------------------------------
# Per-frame magnitudes
# ---------------------------------------------------------------------------

def frame_magnitudes(fft: FixedSizeFFT, windowed_frame: np.ndarray) -> np.ndarray:
    """FFT a windowed frame and return magnitudes for bins below Nyquist."""
    real = np.array(windowed_frame, dtype=np.float64)
    imag = np.zeros(fft.size)
    fft.transform(real, imag)
    half = fft.size // 2
    return np.sqrt(real[:half] ** 2 + imag[:half] ** 2)


def normalize_db(magnitudes: np.ndarray) -> np.ndarray:
    """Magnitudes -> dB clamped to [-100, 0] -> [0, 1]."""
    db = 20 * np.log10(magnitudes + MAGNITUDE_EPSILON)
    clamped = np.clip(db, DB_FLOOR, DB_CEILING)
    return (clamped - DB_FLOOR) / (DB_CEILING - DB_FLOOR)


# ---------------------------------------------------------------------------
# Buffer placement
# ---------------------------------------------------------------------------

def column_for_frame(frame_index: int, total_frames: int, width: int) -> int:
    """Column proportional to frame index over the nominal frame count."""
    return math.floor(frame_index / total_frames * width)


def write_column(
    pixels: np.ndarray,
    width: int,
    height: int,
    column: int,
    colors: np.ndarray,
) -> int:
    """Write one color per bin into ``column``; bin 0 lands on the bottom row.

    Pixels whose offset falls outside the buffer are skipped. Returns the
    number of pixels written.
    """
    bins = np.arange(len(colors))
    rows = height - 1 - bins
    offsets = (rows * width + column) * 4
    in_bounds = (offsets >= 0) & (offsets + 3 < len(pixels))

    dropped = len(offsets) - int(in_bounds.sum())
    if dropped:
        logger.debug(f"Column {column}: dropped {dropped} out-of-range pixels")

    for channel in range(4):
        pixels[offsets[in_bounds] + channel] = colors[in_bounds, channel]
    return int(in_bounds.sum())
