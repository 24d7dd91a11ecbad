"""
Text normalisation shared by every SMART criterion.

Spanish input is expected: accents are stripped so "ejecución" and
"ejecucion" compare equal. Word characters are ASCII only, so results do not
depend on the interpreter locale.
"""
import re
import unicodedata
from typing import List, Optional

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")

# Shorter tokens behave like stopwords ("del", "los", "en")
MIN_KEYWORD_LENGTH = 4


def normalize(text: Optional[str]) -> str:
    """Lowercase, strip diacritics, turn punctuation into spaces, trim."""
    if not text:
        return ""
    lowered = text.lower()
    decomposed = unicodedata.normalize("NFD", lowered)
    stripped = _COMBINING_MARKS.sub("", decomposed)
    return _NON_WORD.sub(" ", stripped).strip()


def tokens(text: Optional[str]) -> List[str]:
    return [word for word in _WHITESPACE.split(normalize(text)) if word]


def count_words(text: Optional[str]) -> int:
    return len(tokens(text))


def common_words(text1: Optional[str], text2: Optional[str]) -> List[str]:
    """
    Keywords shared by both texts.

    Distinct tokens of ``text1`` in first-seen order that also occur in
    ``text2`` and are at least MIN_KEYWORD_LENGTH characters long.
    """
    other = set(tokens(text2))
    return [
        word
        for word in dict.fromkeys(tokens(text1))
        if word in other and len(word) >= MIN_KEYWORD_LENGTH
    ]
