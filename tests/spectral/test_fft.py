"""Tests for the fixed-size radix-2 FFT."""

import numpy as np
import pytest

from lexi.spectral.fft import (
    FixedSizeFFT,
    InvalidSizeError,
    get_fft,
    is_power_of_two,
    reverse_bits,
)

SIZES = [1, 2, 4, 8, 16, 64, 512]


class TestConstruction:
    @pytest.mark.parametrize("size", [0, 3, 6, 12, 100, -8])
    def test_rejects_non_power_of_two(self, size):
        with pytest.raises(InvalidSizeError):
            FixedSizeFFT(size)

    def test_rejects_float_size(self):
        with pytest.raises(InvalidSizeError):
            FixedSizeFFT(8.0)

    def test_invalid_size_is_value_error(self):
        with pytest.raises(ValueError):
            FixedSizeFFT(10)

    def test_twiddle_tables(self):
        fft = FixedSizeFFT(8)
        assert len(fft.cos_table) == 8
        assert fft.cos_table[0] == 1.0
        assert fft.sin_table[0] == 0.0
        # angle -2*pi*2/8 = -pi/2
        assert fft.cos_table[2] == pytest.approx(0.0, abs=1e-15)
        assert fft.sin_table[2] == pytest.approx(-1.0)

    def test_tables_read_only(self):
        fft = FixedSizeFFT(8)
        with pytest.raises(ValueError):
            fft.cos_table[0] = 2.0

    def test_get_fft_is_shared(self):
        assert get_fft(256) is get_fft(256)
        assert get_fft(256) is not get_fft(128)


class TestHelpers:
    def test_is_power_of_two(self):
        assert is_power_of_two(1)
        assert is_power_of_two(1024)
        assert not is_power_of_two(0)
        assert not is_power_of_two(24)

    def test_reverse_bits(self):
        assert reverse_bits(1, 3) == 4
        assert reverse_bits(3, 3) == 6
        assert reverse_bits(6, 4) == 6
        assert reverse_bits(0, 5) == 0


class TestTransform:
    @pytest.mark.parametrize("n", SIZES)
    def test_impulse_has_flat_spectrum(self, n):
        real = np.zeros(n)
        imag = np.zeros(n)
        real[0] = 1.0
        FixedSizeFFT(n).transform(real, imag)
        np.testing.assert_allclose(np.hypot(real, imag), np.ones(n), atol=1e-12)

    @pytest.mark.parametrize("n", [2, 8, 64, 512])
    def test_matches_numpy(self, n):
        rng = np.random.default_rng(n)
        x = rng.standard_normal(n)
        y = rng.standard_normal(n)
        real, imag = x.copy(), y.copy()
        FixedSizeFFT(n).transform(real, imag)
        expected = np.fft.fft(x + 1j * y)
        np.testing.assert_allclose(real, expected.real, atol=1e-9)
        np.testing.assert_allclose(imag, expected.imag, atol=1e-9)

    @pytest.mark.parametrize("n", SIZES)
    def test_inverse_roundtrip(self, n):
        """Conjugate, transform, conjugate and scale by 1/n inverts the FFT."""
        rng = np.random.default_rng(7)
        original = rng.uniform(-1, 1, n)
        fft = FixedSizeFFT(n)

        real = original.copy()
        imag = np.zeros(n)
        fft.transform(real, imag)

        imag = -imag
        fft.transform(real, imag)
        real = real / n
        imag = -imag / n

        np.testing.assert_allclose(real, original, atol=1e-12)
        np.testing.assert_allclose(imag, np.zeros(n), atol=1e-12)

    def test_unnormalized_dc(self):
        """No 1/n scaling: a constant signal puts n * value in bin 0."""
        real = np.full(16, 0.5)
        imag = np.zeros(16)
        FixedSizeFFT(16).transform(real, imag)
        assert real[0] == pytest.approx(8.0)
        np.testing.assert_allclose(real[1:], 0.0, atol=1e-12)

    def test_in_place(self):
        real = np.zeros(8)
        imag = np.zeros(8)
        real[1] = 1.0
        real_id, imag_id = id(real), id(imag)
        FixedSizeFFT(8).transform(real, imag)
        assert id(real) == real_id and id(imag) == imag_id
        assert real[0] == pytest.approx(1.0)

    def test_length_mismatch(self):
        fft = FixedSizeFFT(8)
        with pytest.raises(ValueError):
            fft.transform(np.zeros(4), np.zeros(8))
        with pytest.raises(ValueError):
            fft.transform(np.zeros(8), np.zeros(16))

    def test_requires_arrays(self):
        with pytest.raises(TypeError):
            FixedSizeFFT(4).transform([0.0] * 4, [0.0] * 4)
