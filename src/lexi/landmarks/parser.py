"""Parse raw phoneme tokens into base symbol, sub-phoneme index and boundary marks.

Token markup:
    {      leading brace, segment start
    (n)    sub-phoneme index, e.g. "b(1)" is the release phase of /b/
    }      segment end
    ]      closure boundary

Examples: "{b(1)}", "i]", "AH0", "t͡ʃ".
"""

import re

from lexi.types import ParsedPhoneme

# Lower-case ASCII plus the IPA letters that appear in phoneme streams.
# Diacritics, tie bars, length marks and stress digits are excluded.
IPA_LETTERS = (
    "æɐɑɒɓɔɕçɖɗðʤəɘɚɛɜɝɞɟʄɡɠɢʛɦɧħɥʜɨɪʝɭɬɫɮʟɱɯɰŋɳɲɴøɵɸθœɶɹɺɾɻʀʁɽʂʃʈʧʉʊʋⱱʌβɣɤʍχʎʏʑʐʒʔʡʕʢ"
)
PHONEME_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyz" + IPA_LETTERS)

_SUBPHONEME_RE = re.compile(r"\((\d+)\)")
_BASE_RE = re.compile(f"^[a-z{IPA_LETTERS}]+", re.IGNORECASE)


def parse_phoneme(name: str) -> ParsedPhoneme:
    """Split a raw token into its structured fields.

    Unmatched or empty input yields ``base == ""``; nothing raises.
    """
    working = name or ""

    leading_brace = working.startswith("{")
    if leading_brace:
        working = working[1:]

    subphoneme = None
    match = _SUBPHONEME_RE.search(working)
    if match:
        subphoneme = int(match.group(1))
        working = working[:match.start()] + working[match.end():]

    base_match = _BASE_RE.match(working)
    if base_match:
        base = base_match.group(0).lower()
        rest = working[base_match.end():]
    else:
        base = ""
        rest = working

    return ParsedPhoneme(
        base=base,
        subphoneme=subphoneme,
        leading_brace=leading_brace,
        trailing_end="}" in rest,
        trailing_closure="]" in rest,
    )


def clean_phoneme(symbol: str) -> str:
    """Lower-case and drop anything outside PHONEME_LETTERS.

    Used for class lookup only; grouping and labels keep the parsed base.
    """
    return "".join(ch for ch in (symbol or "").lower() if ch in PHONEME_LETTERS)
