"""
Category Detectors — Semantic Screening

Each detector is a pure boolean predicate over a normalized string,
compiled once from a Vocabulary:

  has_profanity       — denylist term at a start-anchored word boundary
                        ("\\bshit" catches "shitty", not "mishit")
  is_prompt_injection — substring containment of high-signal trigger
                        phrases ("ignore previous", "<script", "sudo")
  is_off_topic        — question/imperative pattern without a LinkedIn
                        exemption term, a non-professional keyword, or
                        a pure coding request
  is_valid_audience   — professional role/industry/seniority term, a
                        broad collective noun, or "<noun> who/in/at ..."

ContentDetectors holds no mutable state after construction and is safe
to share across threads.
"""

from __future__ import annotations

import re
from typing import Optional

from kaizen.vocabulary import DEFAULT_VOCABULARY, Vocabulary


def _alternation(items: tuple[str, ...], escape: bool = True) -> str:
    parts = [re.escape(i) if escape else i for i in items]
    return "(?:" + "|".join(parts) + ")"


class ContentDetectors:
    """Compiled category detectors for one Vocabulary."""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

        self._profanity = [
            re.compile(rf"\b{re.escape(term)}") for term in vocabulary.profanity_terms
        ]
        self._injection_triggers = tuple(t.lower() for t in vocabulary.injection_triggers)

        self._questions = [re.compile(p) for p in vocabulary.question_patterns]
        self._linkedin_exempt = re.compile(
            rf"\b{_alternation(vocabulary.linkedin_exempt_terms)}\b"
        )
        self._off_topic_keywords = tuple(k.lower() for k in vocabulary.off_topic_keywords)
        self._code_requests = [re.compile(p) for p in vocabulary.code_request_patterns]

        self._audience_roles = re.compile(
            rf"\b{_alternation(vocabulary.audience_role_patterns, escape=False)}"
        )
        self._audience_collective = re.compile(
            rf"\b{_alternation(vocabulary.audience_collective_terms)}\b"
        )
        self._audience_relational = re.compile(vocabulary.audience_relational_pattern)

    # --- Profanity ---

    def has_profanity(self, normalized: str) -> bool:
        return any(p.search(normalized) for p in self._profanity)

    # --- Prompt injection / security ---

    def is_prompt_injection(self, normalized: str) -> bool:
        return any(t in normalized for t in self._injection_triggers)

    def injection_matches(self, normalized: str) -> list[str]:
        """Triggers found in the text. Used for security logging."""
        return [t for t in self._injection_triggers if t in normalized]

    # --- Off-topic (topic channel) ---

    def is_unexempt_question(self, normalized: str) -> bool:
        if not any(p.search(normalized) for p in self._questions):
            return False
        return not self._linkedin_exempt.search(normalized)

    def has_off_topic_keyword(self, normalized: str) -> bool:
        return any(k in normalized for k in self._off_topic_keywords)

    def is_code_request(self, normalized: str) -> bool:
        return any(p.search(normalized) for p in self._code_requests)

    def is_off_topic(self, normalized: str) -> bool:
        return (
            self.is_unexempt_question(normalized)
            or self.has_off_topic_keyword(normalized)
            or self.is_code_request(normalized)
        )

    # --- Audience plausibility (audience channel) ---

    def is_valid_audience(self, normalized: str) -> bool:
        return bool(
            self._audience_roles.search(normalized)
            or self._audience_collective.search(normalized)
            or self._audience_relational.search(normalized)
        )


_default_detectors = ContentDetectors()


def get_detectors(vocabulary: Optional[Vocabulary] = None) -> ContentDetectors:
    """Shared detectors for the default vocabulary, fresh ones otherwise."""
    if vocabulary is None or vocabulary is DEFAULT_VOCABULARY:
        return _default_detectors
    return ContentDetectors(vocabulary)
