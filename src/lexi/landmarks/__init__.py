"""Articulatory landmark extraction from phoneme keyframe streams."""

import json
import logging
from pathlib import Path

from lexi.landmarks.classifier import (
    PHONEME_CLASSES,
    classify_phoneme,
    extract_landmarks,
    group_keyframes,
    group_landmarks,
)
from lexi.landmarks.parser import clean_phoneme, parse_phoneme
from lexi.types import PhonemeKeyframe

logger = logging.getLogger(__name__)

__all__ = [
    "PHONEME_CLASSES",
    "classify_phoneme",
    "clean_phoneme",
    "extract_landmarks",
    "group_keyframes",
    "group_landmarks",
    "load_keyframes",
    "parse_phoneme",
]


def load_keyframes(path: str | Path) -> list[PhonemeKeyframe]:
    """Read a keyframe list from JSON.

    Accepts either a bare list of ``{time, name, isSubPhoneme}`` records or
    an object with a ``"keyframes"`` list.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the JSON has neither shape.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("keyframes")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of keyframes")

    keyframes = [PhonemeKeyframe.from_dict(record) for record in data]
    logger.info(f"Loaded {len(keyframes)} keyframes from {path.name}")
    return keyframes
