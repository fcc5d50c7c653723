"""Tone-mark stripping and answer grading for pinyin."""

TONE_MARKS = {
    "a": "āáǎà",
    "e": "ēéěè",
    "i": "īíǐì",
    "o": "ōóǒò",
    "u": "ūúǔù",
    "ü": "ǖǘǚǜ",
    "A": "ĀÁǍÀ",
    "E": "ĒÉĚÈ",
    "I": "ĪÍǏÌ",
    "O": "ŌÓǑÒ",
    "U": "ŪÚǓÙ",
    "Ü": "ǕǗǙǛ",
}

# One-to-one substitution, so the output always has the input's length.
_TONE_TABLE = str.maketrans(
    {marked: bare for bare, marks in TONE_MARKS.items() for marked in marks}
)


def strip_tones(text: str) -> str:
    """Replace every tone-marked vowel with its bare vowel.

    >>> strip_tones("nǐ hǎo")
    'ni hao'
    >>> strip_tones("LǛ")
    'LÜ'
    """
    return text.translate(_TONE_TABLE)


def normalize_answer(text: str) -> str:
    """Trim, case-fold and strip tone marks."""
    return strip_tones(text.strip().lower())


def grade(answer: str, pinyin: str) -> bool:
    """Check a typed answer against the expected pinyin, ignoring tones.

    Everything else must match exactly after trimming and lower-casing;
    an empty answer never matches.
    """
    typed = normalize_answer(answer)
    if not typed:
        return False
    return typed == normalize_answer(pinyin)
