from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, Optional

from .normalizer import normalize

logger = logging.getLogger(__name__)

# Bundled development word list. Point WORDS_FILE at a larger list in production.
DEFAULT_WORDS_FILE = Path(__file__).resolve().parent / 'data' / 'words.txt'


def read_word_file(path: Path) -> Iterable[str]:
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                yield line


class DictionaryService:
    def __init__(self, words: Optional[Iterable[str]] = None):
        # Entries are stored in normalized form only
        normalized = (normalize(w) for w in (words if words is not None else read_word_file(DEFAULT_WORDS_FILE)))
        self._words: frozenset = frozenset(w for w in normalized if w)

    @classmethod
    def from_file(cls, path) -> 'DictionaryService':
        service = cls(read_word_file(Path(path)))
        logger.info("Loaded %d words from %s", len(service), path)
        return service

    def contains(self, word: str) -> bool:
        if not word:
            return False
        return word in self._words

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def __len__(self) -> int:
        return len(self._words)
