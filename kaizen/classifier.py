"""
Classifier — Input Classification Pipeline

Decides whether a free-text field is acceptable before it is forwarded
to the generation backend. One verdict per call, chosen by a fixed
precedence so a string that trips several detectors always reports the
same one:

  1. normalize (trim + lower-case; the caller keeps original casing)
  2. trimmed length < channel minimum      -> too_short
  3. lexical heuristics                     -> gibberish
  4. profanity                              -> profanity
  5. prompt injection / security            -> irrelevant
  6. topic:    off-topic                    -> off_topic
     audience: no professional evidence     -> off_topic
     edit_instruction: skipped
  7. otherwise                              -> safe

Pure, synchronous, total over str. Never raises for any input text.
Maximum length is NOT a verdict; callers check exceeds_max_length().
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

from kaizen.detectors import ContentDetectors, get_detectors
from kaizen.heuristics import LexicalHeuristics, normalize
from kaizen.vocabulary import DEFAULT_VOCABULARY, Vocabulary


# ============================================================
# DATA STRUCTURES
# ============================================================

class Verdict(str, Enum):
    """Single classification outcome for one field."""
    SAFE = "safe"
    TOO_SHORT = "too_short"
    GIBBERISH = "gibberish"
    OFF_TOPIC = "off_topic"
    PROFANITY = "profanity"
    IRRELEVANT = "irrelevant"  # security / prompt-injection signal


class Channel(str, Enum):
    """The logical field being validated."""
    TOPIC = "topic"
    AUDIENCE = "audience"
    EDIT_INSTRUCTION = "edit_instruction"


@dataclass(frozen=True)
class Thresholds:
    """Per-channel length band, in characters of trimmed input."""
    min_length: int
    max_length: int


DEFAULT_THRESHOLDS: dict[Channel, Thresholds] = {
    Channel.TOPIC: Thresholds(min_length=10, max_length=500),
    Channel.AUDIENCE: Thresholds(min_length=3, max_length=100),
    Channel.EDIT_INSTRUCTION: Thresholds(min_length=5, max_length=200),
}

ChannelLike = Union[Channel, str]


# ============================================================
# THE PIPELINE
# ============================================================

class InputClassifier:
    """
    Priority-ordered composition of the lexical heuristics and the
    category detectors. Holds compiled patterns only; no per-call state.
    """

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        thresholds: Optional[Mapping[Channel, Thresholds]] = None,
    ):
        self.vocabulary = vocabulary
        self.thresholds: dict[Channel, Thresholds] = dict(DEFAULT_THRESHOLDS)
        if thresholds:
            self.thresholds.update(thresholds)
        self.heuristics = LexicalHeuristics(vocabulary)
        self.detectors: ContentDetectors = get_detectors(vocabulary)

    def classify(self, channel: ChannelLike, text: str) -> Verdict:
        channel = Channel(channel)
        limits = self.thresholds[channel]

        trimmed = text.strip()
        if len(trimmed) < limits.min_length:
            return Verdict.TOO_SHORT

        normalized = normalize(trimmed)

        if self.heuristics.is_gibberish(normalized):
            return Verdict.GIBBERISH
        if self.detectors.has_profanity(normalized):
            return Verdict.PROFANITY
        if self.detectors.is_prompt_injection(normalized):
            return Verdict.IRRELEVANT

        if channel is Channel.TOPIC and self.detectors.is_off_topic(normalized):
            return Verdict.OFF_TOPIC
        if channel is Channel.AUDIENCE and not self.detectors.is_valid_audience(normalized):
            return Verdict.OFF_TOPIC

        return Verdict.SAFE

    def exceeds_max_length(self, channel: ChannelLike, text: str) -> bool:
        """Caller-side ceiling check. Reported as "too long", not a verdict."""
        return len(text.strip()) > self.thresholds[Channel(channel)].max_length

    def explain(self, channel: ChannelLike, text: str) -> dict:
        """
        Verdict plus the evidence behind it. Diagnostic only, used by the
        calibration report and debug logging; classify() is the contract.
        """
        normalized = normalize(text)
        return {
            "channel": Channel(channel).value,
            "verdict": self.classify(channel, text).value,
            "length": len(text.strip()),
            "gibberish_rules": self.heuristics.reasons(normalized),
            "injection_triggers": self.detectors.injection_matches(normalized),
            "exceeds_max_length": self.exceeds_max_length(channel, text),
        }


# ============================================================
# SINGLETON
# ============================================================

classifier = InputClassifier()


def classify(channel: ChannelLike, text: str) -> Verdict:
    """Classify one field with the default vocabulary and thresholds."""
    return classifier.classify(channel, text)


def exceeds_max_length(channel: ChannelLike, text: str) -> bool:
    return classifier.exceeds_max_length(channel, text)


def thresholds_for(channel: ChannelLike) -> Thresholds:
    return classifier.thresholds[Channel(channel)]
