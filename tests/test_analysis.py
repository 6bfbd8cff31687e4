"""Tests for WAV input and waveform peak bucketing."""

from pathlib import Path

import numpy as np
import pytest
import scipy.io.wavfile as wavfile

from lexi.analysis import read_wav, waveform_peaks


def _make_sine(freq: float, duration: float, sr: int = 16000) -> np.ndarray:
    """Generate a sine wave at the given frequency."""
    t = np.arange(int(sr * duration)) / sr
    return np.sin(2 * np.pi * freq * t)


class TestReadWav:
    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            read_wav(Path("/nonexistent/file.wav"))

    def test_int16_normalization(self, tmp_path):
        original = _make_sine(440, 0.25)
        int16 = (np.clip(original, -1, 1) * 32767).astype(np.int16)
        wavfile.write(str(tmp_path / "test.wav"), 16000, int16)
        samples, sr = read_wav(tmp_path / "test.wav")
        assert sr == 16000
        assert samples.dtype == np.float64
        np.testing.assert_allclose(samples, original, atol=1e-4)

    def test_float_passthrough(self, tmp_path):
        original = _make_sine(440, 0.25)
        wavfile.write(str(tmp_path / "f.wav"), 22050, original.astype(np.float32))
        samples, sr = read_wav(tmp_path / "f.wav")
        assert sr == 22050
        np.testing.assert_allclose(samples, original, atol=1e-6)

    def test_uint8_centered(self, tmp_path):
        data = np.array([0, 128, 255], dtype=np.uint8)
        wavfile.write(str(tmp_path / "u8.wav"), 8000, data)
        samples, _ = read_wav(tmp_path / "u8.wav")
        np.testing.assert_allclose(samples, [-1.0, 0.0, 127 / 128])

    def test_stereo_takes_first_channel(self, tmp_path):
        left = _make_sine(440, 0.1)
        right = _make_sine(880, 0.1)
        stereo = (np.column_stack([left, right]) * 32767).astype(np.int16)
        wavfile.write(str(tmp_path / "stereo.wav"), 16000, stereo)
        samples, _ = read_wav(tmp_path / "stereo.wav")
        assert samples.ndim == 1
        np.testing.assert_allclose(samples, left, atol=1e-4)


class TestWaveformPeaks:
    def test_one_bucket_per_column(self):
        peaks = waveform_peaks(_make_sine(100, 0.1), width=40, height=100)
        assert len(peaks) == 40
        assert [p.column for p in peaks] == list(range(40))

    def test_min_max_per_bucket(self):
        samples = np.array([0.1, -0.4, 0.3, 0.9, -0.2, 0.0])
        peaks = waveform_peaks(samples, width=3, height=100, margin=0.0)
        assert [(p.min, p.max) for p in peaks] == [(-0.4, 0.1), (0.0, 0.9), (-0.2, 0.0)]

    def test_extremes_start_at_zero(self):
        peaks = waveform_peaks(np.array([0.5, 0.6]), width=1, height=10)
        assert peaks[0].min == 0.0
        assert peaks[0].max == 0.6

    def test_trailing_columns_empty(self):
        # 5 samples over 4 columns: step 2, last column is past the end
        peaks = waveform_peaks(np.ones(5), width=4, height=10)
        assert peaks[2].max == 1.0
        assert (peaks[3].min, peaks[3].max) == (0.0, 0.0)

    def test_scaling_with_margin(self):
        samples = np.array([1.0, -1.0])
        peak = waveform_peaks(samples, width=1, height=100, margin=0.1)[0]
        assert peak.y_top == pytest.approx(10.0)
        assert peak.y_bottom == pytest.approx(90.0)

    def test_silence_sits_on_center_line(self):
        peaks = waveform_peaks(np.zeros(100), width=10, height=60)
        assert all(p.y_top == 30.0 and p.y_bottom == 30.0 for p in peaks)

    def test_empty_signal(self):
        peaks = waveform_peaks(np.array([]), width=3, height=10)
        assert len(peaks) == 3
        assert all(p.min == 0.0 and p.max == 0.0 for p in peaks)

    @pytest.mark.parametrize("margin", [-0.1, 0.5, 1.0])
    def test_rejects_bad_margin(self, margin):
        with pytest.raises(ValueError):
            waveform_peaks(np.zeros(10), width=2, height=10, margin=margin)

    def test_rejects_zero_width(self):
        with pytest.raises(ValueError):
            waveform_peaks(np.zeros(10), width=0, height=10)
