"""Tests for the cache module."""

import numpy as np
import pytest

from lexi.cache import (
    _atomic_write,
    file_hash,
    get_cached_spectrogram,
    samples_hash,
    store_spectrogram_cache,
)
from lexi.types import SpectralImage


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Redirect cache to tmp_path so tests don't pollute the real cache."""
    monkeypatch.setattr("lexi.cache.CACHE_DIR", tmp_path / "cache")


def _image() -> SpectralImage:
    pixels = np.arange(3 * 2 * 4, dtype=np.uint8)
    return SpectralImage(
        width=3, height=2, pixels=pixels, sample_rate=16000, fft_size=4,
        hop_size=7, total_frames=3, frames_emitted=2,
    )


# --- hashing ---


def test_file_hash_deterministic(tmp_path):
    f = tmp_path / "data.bin"
    f.write_bytes(b"hello world")
    assert file_hash(f) == file_hash(f)
    assert len(file_hash(f)) == 64  # SHA-256 hex


def test_file_hash_different_content(tmp_path):
    f1 = tmp_path / "a.bin"
    f2 = tmp_path / "b.bin"
    f1.write_bytes(b"hello")
    f2.write_bytes(b"world")
    assert file_hash(f1) != file_hash(f2)


def test_samples_hash_depends_on_rate():
    samples = np.linspace(-1, 1, 100)
    assert samples_hash(samples, 16000) == samples_hash(samples.copy(), 16000)
    assert samples_hash(samples, 16000) != samples_hash(samples, 8000)


# --- atomic write ---


def test_atomic_write_creates_parents(tmp_path):
    target = tmp_path / "deep" / "dir" / "out.bin"
    _atomic_write(target, b"abc")
    assert target.read_bytes() == b"abc"
    assert not list(target.parent.glob("*.tmp"))


# --- spectrogram cache ---


def test_spectrogram_cache_miss():
    assert get_cached_spectrogram("nonexistent", 512, 800) is None


def test_spectrogram_cache_roundtrip():
    image = _image()
    path = store_spectrogram_cache("abc123", image)
    assert path.exists()

    cached = get_cached_spectrogram("abc123", 4, 3)
    assert cached is not None
    assert cached.width == 3
    assert cached.height == 2
    assert cached.hop_size == 7
    assert cached.total_frames == 3
    assert cached.frames_emitted == 2
    assert cached.sample_rate == 16000
    np.testing.assert_array_equal(cached.pixels, image.pixels)


def test_spectrogram_cache_keyed_on_size():
    store_spectrogram_cache("abc123", _image())
    assert get_cached_spectrogram("abc123", 4, 5) is None
    assert get_cached_spectrogram("abc123", 8, 3) is None


def test_corrupt_cache_is_a_miss():
    path = store_spectrogram_cache("abc123", _image())
    path.write_bytes(b"not a zip file")
    assert get_cached_spectrogram("abc123", 4, 3) is None
