"""Fixed-size in-place radix-2 Cooley-Tukey FFT.

Twiddle factors and the bit-reversal permutation are computed once per size.
Butterfly passes are vectorized per stage with numpy, but each element sees
the same arithmetic as the scalar textbook loop:

    t = X[l] * W[k]
    X[l] = X[j] - t
    X[j] = X[j] + t

Output is the unnormalized DFT (no 1/n scaling).
"""

from functools import lru_cache

import numpy as np


class InvalidSizeError(ValueError):
    """FFT size is not a power of two."""


def is_power_of_two(n: int) -> bool:
    return isinstance(n, (int, np.integer)) and n > 0 and (n & (n - 1)) == 0


def reverse_bits(num: int, bits: int) -> int:
    """Reverse the lowest ``bits`` bits of ``num``."""
    reversed_ = 0
    for _ in range(bits):
        reversed_ = (reversed_ << 1) | (num & 1)
        num >>= 1
    return reversed_


class FixedSizeFFT:
    """In-place FFT for buffers of exactly ``size`` samples."""

    def __init__(self, size: int):
        if isinstance(size, bool) or not is_power_of_two(size):
            raise InvalidSizeError(f"FFT size must be a power of two, got {size!r}")

        self.size = int(size)
        self.bits = self.size.bit_length() - 1

        angles = -2 * np.pi * np.arange(self.size) / self.size
        self.cos_table = np.cos(angles)
        self.sin_table = np.sin(angles)
        self.cos_table.flags.writeable = False
        self.sin_table.flags.writeable = False

        # Swap pairs (i, j) with j > i, applied once each
        swap_i, swap_j = [], []
        for i in range(self.size):
            j = reverse_bits(i, self.bits)
            if j > i:
                swap_i.append(i)
                swap_j.append(j)
        self._swap_i = np.array(swap_i, dtype=np.intp)
        self._swap_j = np.array(swap_j, dtype=np.intp)

        # Butterfly index pairs (j, l = j + half) and twiddles per stage
        self._stages = []
        size = 2
        while size <= self.size:
            half = size // 2
            table_step = self.size // size
            offsets = np.arange(half)
            starts = np.arange(0, self.size, size)
            j = (starts[:, None] + offsets[None, :]).ravel()
            k = np.tile(offsets * table_step, len(starts))
            self._stages.append((j, j + half, self.cos_table[k], self.sin_table[k]))
            size *= 2

    def _check(self, buf: np.ndarray, name: str) -> None:
        if not isinstance(buf, np.ndarray):
            raise TypeError(f"{name} must be a numpy array, got {type(buf).__name__}")
        if buf.shape != (self.size,):
            raise ValueError(
                f"{name} must have length {self.size}, got shape {buf.shape}"
            )

    def transform(self, real: np.ndarray, imag: np.ndarray) -> None:
        """Transform ``real``/``imag`` in place."""
        self._check(real, "real")
        self._check(imag, "imag")

        # Bit-reversal permutation
        if len(self._swap_i):
            real[self._swap_i], real[self._swap_j] = real[self._swap_j], real[self._swap_i]
            imag[self._swap_i], imag[self._swap_j] = imag[self._swap_j], imag[self._swap_i]

        for j, l, cos_k, sin_k in self._stages:
            tpre = real[l] * cos_k - imag[l] * sin_k
            tpim = real[l] * sin_k + imag[l] * cos_k
            real_j = real[j]
            imag_j = imag[j]
            real[l] = real_j - tpre
            imag[l] = imag_j - tpim
            real[j] = real_j + tpre
            imag[j] = imag_j + tpim


@lru_cache(maxsize=None)
def get_fft(size: int) -> FixedSizeFFT:
    """Shared FFT instance for ``size``; tables are read-only."""
    return FixedSizeFFT(size)
