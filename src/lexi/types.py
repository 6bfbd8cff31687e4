"""Core data types for lexi."""

import math
from dataclasses import dataclass, field

import numpy as np


@dataclass
class PhonemeKeyframe:
    """A timestamped phoneme token from the annotation stream."""
    time: float          # seconds
    name: str            # raw token, e.g. "{b(1)}" or "i]"
    is_subphoneme: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "PhonemeKeyframe":
        """Build from a stream record ({time, name, isSubPhoneme})."""
        flag = data.get("isSubPhoneme", data.get("is_subphoneme", False))
        if isinstance(flag, str):
            flag = flag.strip().lower() in ("true", "1", "yes")
        return cls(
            time=float(data["time"]),
            name=str(data["name"]),
            is_subphoneme=bool(flag),
        )


@dataclass
class ParsedPhoneme:
    """Structured fields of one raw phoneme token."""
    base: str                  # lower-cased leading phoneme letters, "" if none
    subphoneme: int | None     # "(n)" index, None if absent
    leading_brace: bool        # token opened with "{"
    trailing_end: bool         # "}" after the base
    trailing_closure: bool     # "]" after the base


@dataclass
class LandmarkGroup:
    """A maximal run of consecutive keyframes sharing a group key."""
    key: str
    phoneme_class: str
    keyframes: list[PhonemeKeyframe] = field(default_factory=list)
    parses: list[ParsedPhoneme] = field(default_factory=list)

    def append(self, keyframe: PhonemeKeyframe, parsed: ParsedPhoneme) -> None:
        self.keyframes.append(keyframe)
        self.parses.append(parsed)


@dataclass
class LandmarkEvent:
    """An articulatory event placed on the timeline."""
    time: float     # seconds
    type: str       # "V", "G", "Sc", "Sr", "Fc", "Fr", "Nc", "Nr"
    label: str      # raw token name, or "transition"

    def to_dict(self) -> dict:
        return {"time": round(self.time, 6), "type": self.type, "label": self.label}


@dataclass
class PeakBucket:
    """Min/max amplitude of one waveform display column."""
    column: int
    min: float
    max: float
    y_top: float      # display y of max (pixels from top)
    y_bottom: float   # display y of min

    def to_dict(self) -> dict:
        return {
            "column": self.column,
            "min": round(self.min, 6),
            "max": round(self.max, 6),
            "y_top": round(self.y_top, 3),
            "y_bottom": round(self.y_bottom, 3),
        }


@dataclass
class SpectralImage:
    """Time-frequency magnitude image as a flat RGBA buffer.

    Row 0 is the highest displayed frequency bin, row ``height - 1`` is DC.
    """
    width: int
    height: int
    pixels: np.ndarray        # uint8, width * height * 4
    sample_rate: int
    fft_size: int
    hop_size: int = 1
    total_frames: int = 0     # nominal count used for column placement
    frames_emitted: int = 0

    def as_rgba(self) -> np.ndarray:
        """Return a (height, width, 4) view of the pixel buffer."""
        return self.pixels.reshape(self.height, self.width, 4)

    def row_frequency(self, row: int) -> float:
        """Frequency in Hz of the bin drawn at ``row``."""
        bin_index = self.height - 1 - row
        return bin_index * self.sample_rate / self.fft_size

    @property
    def is_blank(self) -> bool:
        return not self.pixels.any()


@dataclass
class UtteranceAnalysis:
    """Spectrogram, waveform peaks and landmarks on a shared time axis."""
    duration: float       # seconds
    sample_rate: int
    spectrogram: SpectralImage
    peaks: list[PeakBucket]
    landmarks: list[LandmarkEvent]

    def time_to_column(self, t: float) -> int:
        """Map a time in seconds onto a display column in ``[0, width - 1]``."""
        if self.duration <= 0:
            return 0
        column = math.floor(t / self.duration * self.spectrogram.width)
        return max(0, min(column, self.spectrogram.width - 1))

    def to_manifest(self) -> dict:
        """JSON-safe summary of the analysis (pixels excluded)."""
        image = self.spectrogram
        return {
            "duration": round(self.duration, 6),
            "sample_rate": self.sample_rate,
            "spectrogram": {
                "width": image.width,
                "height": image.height,
                "fft_size": image.fft_size,
                "hop_size": image.hop_size,
                "total_frames": image.total_frames,
                "frames_emitted": image.frames_emitted,
            },
            "peaks": [p.to_dict() for p in self.peaks],
            "landmarks": [
                {**lm.to_dict(), "column": self.time_to_column(lm.time)}
                for lm in self.landmarks
            ],
        }
