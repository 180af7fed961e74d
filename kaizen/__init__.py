"""
Kaizen — Input Screening for a LinkedIn Post Generator

Every free-text field (topic, audience, edit instruction) is classified
locally before any of it reaches a language model. Classification is
deterministic and costs nothing; only safe input is forwarded.

Public API:
  - classify:          Verdict for (channel, text)
  - describe:          User-facing error descriptor for (verdict, channel)
  - InputClassifier:   Classifier over a custom Vocabulary / Thresholds
  - FormSession:       Touched/blur/debounce state for the two-field form
  - generate_post, edit_post, suggest_completion: Gated LLM collaborators
  - LLMProvider:       Abstract LLM interface for provider swapping

Usage:
    from kaizen import classify, describe, Channel, Verdict
    verdict = classify(Channel.TOPIC, "my cat")
    if verdict is not Verdict.SAFE:
        print(describe(verdict, Channel.TOPIC).title)
"""

__version__ = "1.0.0"

from kaizen.vocabulary import Vocabulary, DEFAULT_VOCABULARY
from kaizen.heuristics import is_gibberish, gibberish_reasons
from kaizen.classifier import (
    Verdict,
    Channel,
    Thresholds,
    DEFAULT_THRESHOLDS,
    InputClassifier,
    classifier,
    classify,
    exceeds_max_length,
    thresholds_for,
)
from kaizen.catalog import (
    ErrorDescriptor,
    FALLBACK,
    describe,
    describe_blocker,
    describe_too_long,
    inline_hint,
)
from kaizen.session import FormSession, SubmitOutcome, should_autocomplete
from kaizen.composer import InputRejected, generate_post, edit_post, suggest_completion
from kaizen.llm import LLMProvider
from kaizen.llm.factory import get_provider

__all__ = [
    "Vocabulary",
    "DEFAULT_VOCABULARY",
    "is_gibberish",
    "gibberish_reasons",
    "Verdict",
    "Channel",
    "Thresholds",
    "DEFAULT_THRESHOLDS",
    "InputClassifier",
    "classifier",
    "classify",
    "exceeds_max_length",
    "thresholds_for",
    "ErrorDescriptor",
    "FALLBACK",
    "describe",
    "describe_too_long",
    "describe_blocker",
    "inline_hint",
    "FormSession",
    "SubmitOutcome",
    "should_autocomplete",
    "InputRejected",
    "generate_post",
    "edit_post",
    "suggest_completion",
    "LLMProvider",
    "get_provider",
]
