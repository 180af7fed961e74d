"""
Lexical Heuristics — Gibberish Detection

Flags strings that are not plausibly natural language, independent of
subject matter. Each rule is a pure function of a normalized string
(lower-cased, whitespace collapsed, trimmed). Any rule firing means
gibberish.

Rules:
  repeated_char      — any character repeated 4+ times in a row
  low_diversity      — letters-only length > 5 with fewer distinct letters
                       than min(4, 0.3 * letter_count)
  consonant_cluster  — a token with 5+ consecutive consonants
  no_vowel_token     — a token of length >= 4 with no a/e/i/o/u/y
  keyboard_mash      — whitespace-stripped text contains a keyboard-row
                       fragment (qwer, asdf, hjkl, ...)
  short_tokens       — 3+ tokens averaging under 2.2 characters

No length precondition. The caller enforces minimum length separately.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from kaizen.vocabulary import DEFAULT_VOCABULARY, Vocabulary

_REPEATED_CHAR = re.compile(r"(.)\1{3,}")
_NON_LETTER = re.compile(r"[^a-z]")
_CONSONANT_CLUSTER = re.compile(r"[bcdfghjklmnpqrstvwxyz]{5,}")
_VOWEL = re.compile(r"[aeiouy]")
_WHITESPACE = re.compile(r"\s+")

MIN_DIVERSITY_LETTERS = 5
DIVERSITY_RATIO = 0.3
DIVERSITY_FLOOR = 4
NO_VOWEL_MIN_TOKEN = 4
SHORT_TOKEN_MIN_COUNT = 3
SHORT_TOKEN_MEAN = 2.2


def normalize(text: str) -> str:
    """Lower-case, collapse internal whitespace, trim."""
    return _WHITESPACE.sub(" ", text.lower()).strip()


def tokens(normalized: str) -> list[str]:
    return normalized.split()


# ============================================================
# RULES
# ============================================================

def has_repeated_char(normalized: str) -> bool:
    return bool(_REPEATED_CHAR.search(normalized))


def has_low_diversity(normalized: str) -> bool:
    letters = _NON_LETTER.sub("", normalized)
    if len(letters) <= MIN_DIVERSITY_LETTERS:
        return False
    return len(set(letters)) < min(DIVERSITY_FLOOR, len(letters) * DIVERSITY_RATIO)


def has_consonant_cluster(normalized: str) -> bool:
    return any(_CONSONANT_CLUSTER.search(t) for t in tokens(normalized))


def has_vowelless_token(normalized: str) -> bool:
    return any(
        len(t) >= NO_VOWEL_MIN_TOKEN and not _VOWEL.search(t)
        for t in tokens(normalized)
    )


def has_short_tokens(normalized: str) -> bool:
    words = tokens(normalized)
    if len(words) < SHORT_TOKEN_MIN_COUNT:
        return False
    return sum(len(w) for w in words) / len(words) < SHORT_TOKEN_MEAN


# ============================================================
# COMPOSITE
# ============================================================

class LexicalHeuristics:
    """
    Gibberish detector. Holds the compiled keyboard-fragment pattern
    for one Vocabulary; otherwise stateless.
    """

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self._keyboard = re.compile(
            "|".join(re.escape(f) for f in vocabulary.keyboard_fragments)
        ) if vocabulary.keyboard_fragments else None
        self._rules: list[tuple[str, Callable[[str], bool]]] = [
            ("repeated_char", has_repeated_char),
            ("low_diversity", has_low_diversity),
            ("consonant_cluster", has_consonant_cluster),
            ("no_vowel_token", has_vowelless_token),
            ("keyboard_mash", self.has_keyboard_mash),
            ("short_tokens", has_short_tokens),
        ]

    def has_keyboard_mash(self, normalized: str) -> bool:
        if self._keyboard is None:
            return False
        return bool(self._keyboard.search(_WHITESPACE.sub("", normalized)))

    def reasons(self, normalized: str) -> list[str]:
        """Names of every rule that fires, in evaluation order."""
        return [name for name, rule in self._rules if rule(normalized)]

    def is_gibberish(self, normalized: str) -> bool:
        return any(rule(normalized) for _, rule in self._rules)


_default_heuristics = LexicalHeuristics()


def is_gibberish(text: str, heuristics: Optional[LexicalHeuristics] = None) -> bool:
    """Normalize and test text against the gibberish rules."""
    return (heuristics or _default_heuristics).is_gibberish(normalize(text))


def gibberish_reasons(text: str, heuristics: Optional[LexicalHeuristics] = None) -> list[str]:
    return (heuristics or _default_heuristics).reasons(normalize(text))
