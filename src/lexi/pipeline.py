"""Run both engines over one utterance and key the results to its duration."""

import logging

import numpy as np

from lexi.analysis import waveform_peaks
from lexi.cache import get_cached_spectrogram, samples_hash, store_spectrogram_cache
from lexi.landmarks import extract_landmarks
from lexi.spectral import DEFAULT_FFT_SIZE, compute_spectrogram
from lexi.types import PhonemeKeyframe, UtteranceAnalysis

logger = logging.getLogger(__name__)


def analyze(
    samples: np.ndarray,
    sample_rate: int,
    keyframes: list[PhonemeKeyframe],
    width: int,
    height: int = 200,
    fft_size: int = DEFAULT_FFT_SIZE,
    margin: float = 0.1,
    audio_hash: str | None = None,
    use_cache: bool = False,
) -> UtteranceAnalysis:
    """Spectrogram, waveform peaks and landmarks for one utterance.

    Args:
        samples: Decoded mono signal, floats in [-1, 1].
        sample_rate: Sample rate in Hz.
        keyframes: Phoneme keyframes, any order.
        width: Display columns shared by spectrogram and waveform.
        height: Waveform display height in pixels.
        fft_size: Spectral frame length (power of two).
        margin: Fraction of the waveform height kept clear top and bottom.
        audio_hash: Cache key for the signal; derived from the samples if
            omitted and caching is on.
        use_cache: Reuse/store spectrograms in the file cache.
    """
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")

    samples = np.asarray(samples, dtype=np.float64)
    duration = len(samples) / sample_rate
    logger.info(f"Analyzing {duration:.3f}s of audio at {sample_rate} Hz")

    image = None
    if use_cache:
        audio_hash = audio_hash or samples_hash(samples, sample_rate)
        image = get_cached_spectrogram(audio_hash, fft_size, width)

    if image is None:
        image = compute_spectrogram(samples, sample_rate, width, fft_size=fft_size)
        if use_cache:
            store_spectrogram_cache(audio_hash, image)

    peaks = waveform_peaks(samples, width, height, margin=margin)
    landmarks = extract_landmarks(keyframes)

    return UtteranceAnalysis(
        duration=duration,
        sample_rate=sample_rate,
        spectrogram=image,
        peaks=peaks,
        landmarks=landmarks,
    )
