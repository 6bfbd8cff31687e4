"""Articulatory classes and landmark extraction from phoneme keyframes.

Keyframes are walked once in time order. Consecutive tokens that share a
group key form one LandmarkGroup; each group then emits landmarks according
to its class:

    V  one vowel center per token
    G  one glide landmark at the midpoint of the run
    S  closure (Sc) at the first token, release (Sr) at the 0->1
       sub-phoneme transition or at the segment end
    F  closure (Fc) + release (Fr) at the segment end
    N  closure (Nc) + release (Nr) at the segment end
    A  classified, but no landmark is emitted
"""

import logging

from lexi.landmarks.parser import clean_phoneme, parse_phoneme
from lexi.types import LandmarkEvent, LandmarkGroup, ParsedPhoneme, PhonemeKeyframe

logger = logging.getLogger(__name__)

VOWEL = "V"
GLIDE = "G"
NASAL = "N"
FRICATIVE = "F"
STOP = "S"
AFFRICATE = "A"

SILENCE = "."

# Cleaned symbol -> articulatory class. Covers IPA, plain ASCII spellings and
# lower-cased ARPABET (stress digits are removed by clean_phoneme).
PHONEME_CLASSES: dict[str, str] = {
    # Vowels: IPA monophthongs
    **{v: VOWEL for v in (
        "a", "e", "i", "o", "u", "æ", "ɐ", "ɑ", "ɒ", "ɔ", "ə", "ɘ", "ɚ",
        "ɛ", "ɜ", "ɝ", "ɞ", "ɨ", "ɪ", "ɯ", "ɤ", "ʉ", "ʊ", "ʌ", "ʏ", "ø",
        "ɵ", "œ", "ɶ",
    )},
    # Vowels: diphthongs
    **{v: VOWEL for v in (
        "aɪ", "aʊ", "eɪ", "oʊ", "ɔɪ", "ai", "au", "ei", "oi", "ou",
    )},
    # Vowels: ARPABET
    **{v: VOWEL for v in (
        "aa", "ae", "ah", "ao", "aw", "ay", "eh", "er", "ey", "ih", "iy",
        "ow", "oy", "uh", "uw", "ax", "ix", "axr",
    )},
    # Glides and liquids
    **{g: GLIDE for g in (
        "j", "w", "y", "ɥ", "ɰ", "l", "r", "ɹ", "ɾ", "ɫ", "ɭ", "ʎ", "ɻ",
        "ʋ", "ʍ", "ɺ", "ʟ", "el", "dx",
    )},
    # Nasals
    **{n: NASAL for n in (
        "m", "n", "ŋ", "ɲ", "ɴ", "ɱ", "ɳ", "ng", "em", "en", "nx",
    )},
    # Fricatives
    **{f: FRICATIVE for f in (
        "f", "v", "s", "z", "h", "x", "θ", "ð", "ʃ", "ʒ", "ç", "ʝ", "ɣ",
        "χ", "ʁ", "ħ", "ʕ", "ɦ", "ɸ", "β", "ʂ", "ʐ", "ɕ", "ʑ", "ɧ",
        "th", "dh", "sh", "zh", "hh",
    )},
    # Stops
    **{s: STOP for s in (
        "p", "b", "t", "d", "k", "g", "ɡ", "q", "c", "ɟ", "ʈ", "ɖ", "ɢ",
        "ʔ", "ɓ", "ɗ", "ɠ", "ʄ", "ʛ",
    )},
    # Affricates
    **{a: AFFRICATE for a in (
        "tʃ", "dʒ", "ʧ", "ʤ", "ts", "dz", "tɕ", "dʑ", "tʂ", "dʐ", "pf",
        "ch", "jh",
    )},
}


def classify_phoneme(symbol: str) -> str | None:
    """Return the articulatory class code for a symbol, or None."""
    cleaned = clean_phoneme(symbol)
    if not cleaned:
        return None
    return PHONEME_CLASSES.get(cleaned)


def group_key(phoneme_class: str, base: str, position: int) -> str:
    """Key shared by consecutive tokens that belong to one landmark group.

    ``position`` is the token's index in the time-sorted stream, so
    singleton keys stay distinct even when timestamps collide.
    """
    if phoneme_class in (STOP, FRICATIVE, NASAL):
        return f"{phoneme_class}-{base}"
    if phoneme_class == GLIDE:
        return f"G-{base}"
    # Vowels (and anything else) never merge
    return f"single-{position}"


def group_keyframes(keyframes: list[PhonemeKeyframe]) -> list[LandmarkGroup]:
    """Sort by time, drop silence and unclassified tokens, group consecutive keys.

    Only the immediately preceding token is compared; groups never merge
    across an intervening token.
    """
    ordered = sorted(keyframes, key=lambda kf: kf.time)

    groups: list[LandmarkGroup] = []
    current: LandmarkGroup | None = None

    for position, keyframe in enumerate(ordered):
        if keyframe.name == SILENCE:
            continue

        phoneme_class = classify_phoneme(keyframe.name)
        if phoneme_class is None:
            logger.debug(f"Skipping unclassified token {keyframe.name!r} at {keyframe.time}")
            continue

        parsed = parse_phoneme(keyframe.name)
        key = group_key(phoneme_class, parsed.base, position)

        if current is None or current.key != key:
            current = LandmarkGroup(key=key, phoneme_class=phoneme_class)
            groups.append(current)
        current.append(keyframe, parsed)

    return groups


def _segment_end(group: LandmarkGroup) -> PhonemeKeyframe:
    """Last member marked with '}', else the group's last member."""
    for keyframe, parsed in zip(reversed(group.keyframes), reversed(group.parses)):
        if parsed.trailing_end:
            return keyframe
    return group.keyframes[-1]


def _first_release_index(parses: list[ParsedPhoneme]) -> int | None:
    for i, parsed in enumerate(parses):
        if parsed.subphoneme == 1:
            return i
    return None


def group_landmarks(group: LandmarkGroup) -> list[LandmarkEvent]:
    """Landmarks emitted by a single group."""
    members = group.keyframes
    cls = group.phoneme_class

    if cls == VOWEL:
        return [LandmarkEvent(time=kf.time, type=VOWEL, label=kf.name) for kf in members]

    if cls == GLIDE:
        midpoint = (members[0].time + members[-1].time) / 2
        return [LandmarkEvent(time=midpoint, type=GLIDE, label=members[0].name)]

    if cls not in (STOP, FRICATIVE, NASAL):
        return []

    first = members[0]
    events = [LandmarkEvent(time=first.time, type=f"{cls}c", label=first.name)]

    if cls == STOP:
        p = _first_release_index(group.parses)
        if p is not None and p > 0:
            midpoint = (members[p - 1].time + members[p].time) / 2
            events.append(LandmarkEvent(time=midpoint, type="Sr", label="transition"))
            return events

    end = _segment_end(group)
    events.append(LandmarkEvent(time=end.time, type=f"{cls}r", label=end.name))
    return events


def extract_landmarks(keyframes: list[PhonemeKeyframe]) -> list[LandmarkEvent]:
    """Ordered landmark events for a phoneme keyframe stream.

    Unknown symbols and silence produce nothing; an empty result is valid.
    """
    groups = group_keyframes(keyframes)
    landmarks = []
    for group in groups:
        landmarks.extend(group_landmarks(group))

    logger.info(
        f"Extracted {len(landmarks)} landmarks from {len(groups)} groups "
        f"({len(keyframes)} keyframes)"
    )
    return landmarks
