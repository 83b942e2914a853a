from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Collection, Optional, Sequence

from .normalizer import first_letter, last_letter, normalize
from .schemas import RejectReason, SubmissionEntry

MIN_WORD_LEN = 3
LONG_WORD_LEN = 6
STREAK_LENGTH = 3

# Letters with plenty of continuations in the word list
EASY_START_LETTERS = 'ابپتدرسشکگمنهی'


def random_start_letter(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(EASY_START_LETTERS)


@dataclass(frozen=True)
class Verdict:
    normalized: str
    reason: Optional[RejectReason] = None
    score: int = 0
    next_letter: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None


def word_score(normalized: str) -> int:
    return 1 + (1 if len(normalized) >= LONG_WORD_LEN else 0)


def validate_word(word, required_letter: str, dictionary, used_words: Collection[str],
                  min_len: int = MIN_WORD_LEN) -> Verdict:
    """Run the checks in order and stop at the first failure.

    Length is checked before anything else so a short fragment is never
    reported as unknown or already used.
    """
    norm = normalize(word)
    if not norm or len(norm) < min_len:
        return Verdict(norm, RejectReason.TOO_SHORT)
    start = first_letter(norm)
    if not start or start != required_letter:
        return Verdict(norm, RejectReason.WRONG_LETTER)
    if not dictionary.contains(norm):
        return Verdict(norm, RejectReason.NOT_IN_DICTIONARY)
    if norm in used_words:
        return Verdict(norm, RejectReason.ALREADY_USED)
    return Verdict(norm, score=word_score(norm), next_letter=last_letter(norm))


def earns_streak_bonus(history: Sequence[SubmissionEntry], user_id: str) -> bool:
    """Solo mode: the last three entries are valid and all by ``user_id``."""
    recent = history[-STREAK_LENGTH:]
    return len(recent) == STREAK_LENGTH and all(h.valid and h.userId == user_id for h in recent)
