from __future__ import annotations
import unicodedata
from typing import Optional

ZWNJ = '\u200c'

# Persian letters, each a single canonical code point
LETTERS = frozenset('آابپتثجچحخدذرزژسشصضطظعغفقکگلمنوهی')
ALPHABET = LETTERS | {ZWNJ}

# Legacy/Arabic code points folded into the Persian form
VARIANTS = str.maketrans({
    'ي': 'ی',  # Arabic yeh
    'ى': 'ی',  # alef maksura
    'ك': 'ک',  # Arabic kaf
    'ۀ': 'ه',  # heh with yeh above
    'ة': 'ه',  # teh marbuta
    'ـ': None,  # tatweel
})


def _is_mark(ch: str) -> bool:
    return unicodedata.category(ch) == 'Mn'


def normalize(text) -> str:
    """Canonical comparable form of ``text``; ``''`` for anything unusable."""
    if not isinstance(text, str) or not text:
        return ''
    s = unicodedata.normalize('NFC', text.casefold())
    s = s.translate(VARIANTS)
    chars = (ch if ch in ALPHABET else ' ' for ch in s if not _is_mark(ch))
    return ' '.join(''.join(chars).split())


# ZWNJ stays inside words but never counts as a boundary letter
def first_letter(text) -> Optional[str]:
    for ch in normalize(text):
        if ch in LETTERS:
            return ch
    return None


def last_letter(text) -> Optional[str]:
    for ch in reversed(normalize(text)):
        if ch in LETTERS:
            return ch
    return None


def starts_with_letter(text) -> bool:
    """True when the raw text (ignoring surrounding spaces) opens with a letter."""
    if not isinstance(text, str):
        return False
    s = text.strip()
    return bool(s) and first_letter(s[0]) is not None
