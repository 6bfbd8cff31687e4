"""File-based caching for computed spectrograms."""

import hashlib
import io
import logging
import os
import tempfile
import zipfile
from pathlib import Path

import numpy as np

from lexi.types import SpectralImage

logger = logging.getLogger(__name__)

CACHE_DIR = Path(os.environ.get("LEXI_CACHE_DIR", "~/.cache/lexi")).expanduser()


def file_hash(path: Path) -> str:
    """Compute SHA-256 hash of a file's contents."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def samples_hash(samples: np.ndarray, sample_rate: int) -> str:
    """SHA-256 of a decoded signal and its sample rate."""
    h = hashlib.sha256()
    h.update(str(sample_rate).encode())
    h.update(np.ascontiguousarray(samples, dtype=np.float64).tobytes())
    return h.hexdigest()


def _atomic_write(target: Path, data: bytes) -> None:
    """Write data to target atomically via temp file + rename."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=target.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, target)
    except Exception:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def _spectrogram_cache_path(audio_hash: str, fft_size: int, width: int) -> Path:
    return CACHE_DIR / "spectrogram" / f"{audio_hash}_{fft_size}_{width}.npz"


def get_cached_spectrogram(
    audio_hash: str, fft_size: int, width: int
) -> SpectralImage | None:
    """Return a cached SpectralImage, or None if not cached or unreadable."""
    path = _spectrogram_cache_path(audio_hash, fft_size, width)
    if not path.exists():
        return None
    try:
        with np.load(path) as data:
            image = SpectralImage(
                width=int(data["width"]),
                height=int(data["height"]),
                pixels=data["pixels"].astype(np.uint8),
                sample_rate=int(data["sample_rate"]),
                fft_size=int(data["fft_size"]),
                hop_size=int(data["hop_size"]),
                total_frames=int(data["total_frames"]),
                frames_emitted=int(data["frames_emitted"]),
            )
    except (OSError, ValueError, KeyError, zipfile.BadZipFile):
        return None
    logger.info(f"Cache hit: spectrogram ({audio_hash[:12]}...)")
    return image


def store_spectrogram_cache(audio_hash: str, image: SpectralImage) -> Path:
    """Store a SpectralImage in the cache. Returns the cache path."""
    path = _spectrogram_cache_path(audio_hash, image.fft_size, image.width)
    buf = io.BytesIO()
    np.savez_compressed(
        buf,
        width=image.width,
        height=image.height,
        pixels=image.pixels,
        sample_rate=image.sample_rate,
        fft_size=image.fft_size,
        hop_size=image.hop_size,
        total_frames=image.total_frames,
        frames_emitted=image.frames_emitted,
    )
    _atomic_write(path, buf.getvalue())
    logger.info(f"Cached spectrogram ({audio_hash[:12]}...)")
    return path
