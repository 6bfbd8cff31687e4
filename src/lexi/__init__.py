"""Spectrogram and articulatory landmark analysis of spoken utterances."""

__version__ = "0.1.0"
