"""
Validation Session — Per-Field UI State

The classifier is stateless. The only state around it belongs to the
form that calls it:

  - touched:  Untouched -> Touched, one-way, on first blur or submit.
              Verdicts for untouched fields may be computed but are
              never surfaced as inline errors.
  - debounce: live (keystroke-driven) re-validation runs only after a
              quiet period, so typing doesn't reclassify every key.

Submit forces both fields touched and validates them in a fixed order,
audience first, then topic. The first blocking result stops submission
and is the one rendered in the modal; inline hints stay on both fields.

Clocks are injected (seconds, monotonic) so behavior is deterministic
under test.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from kaizen.catalog import (
    ErrorDescriptor,
    describe_blocker,
    inline_hint,
    too_long_hint,
)
from kaizen.classifier import Channel, Verdict, classify, exceeds_max_length
from kaizen.config import settings


# ============================================================
# FIELD STATE
# ============================================================

@dataclass
class FieldState:
    """One form field: current value, touched flag, last verdict."""
    channel: Channel
    value: str = ""
    touched: bool = False
    verdict: Optional[Verdict] = None
    too_long: bool = False

    def touch(self) -> None:
        self.touched = True

    def validate(self) -> Verdict:
        self.verdict = classify(self.channel, self.value)
        self.too_long = exceeds_max_length(self.channel, self.value)
        return self.verdict

    @property
    def blocking(self) -> bool:
        return self.too_long or (self.verdict is not None and self.verdict is not Verdict.SAFE)

    @property
    def visible_error(self) -> str:
        """Inline hint to render, or "" while untouched or valid."""
        if not self.touched or self.verdict is None:
            return ""
        if self.too_long:
            return too_long_hint(self.channel)
        return inline_hint(self.verdict, self.channel, self.value)


# ============================================================
# DEBOUNCE
# ============================================================

class Debouncer:
    """Fires once after `delay` seconds without a new poke."""

    def __init__(self, delay: float, clock: Callable[[], float] = time.monotonic):
        self.delay = delay
        self._clock = clock
        self._last_poke: Optional[float] = None

    def poke(self) -> None:
        self._last_poke = self._clock()

    @property
    def pending(self) -> bool:
        return self._last_poke is not None

    def ready(self) -> bool:
        """True once per quiet period; consumes the pending poke."""
        if self._last_poke is None:
            return False
        if self._clock() - self._last_poke < self.delay:
            return False
        self._last_poke = None
        return True

    def cancel(self) -> None:
        self._last_poke = None


# ============================================================
# FORM SESSION
# ============================================================

@dataclass
class SubmitOutcome:
    """Result of a submit attempt."""
    allowed: bool
    blocking_field: Optional[Channel] = None
    verdict: Optional[Verdict] = None
    too_long: bool = False
    error: Optional[ErrorDescriptor] = None
    inline: dict[str, str] = field(default_factory=dict)


# Audience is checked before topic on submit.
SUBMIT_ORDER = (Channel.AUDIENCE, Channel.TOPIC)

# Live-validation quiet period bounds, in ms
DEBOUNCE_MIN_MS = 300
DEBOUNCE_MAX_MS = 600


def effective_debounce_ms(debounce_ms: Optional[int] = None) -> int:
    """Configured debounce, clamped to DEBOUNCE_MIN_MS..DEBOUNCE_MAX_MS."""
    ms = debounce_ms if debounce_ms is not None else settings.DEBOUNCE_MS
    return min(max(ms, DEBOUNCE_MIN_MS), DEBOUNCE_MAX_MS)


class FormSession:
    """Topic + audience form with touched tracking and debounced validation."""

    def __init__(
        self,
        debounce_ms: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.debounce_ms = effective_debounce_ms(debounce_ms)
        delay = self.debounce_ms / 1000
        self.fields: dict[Channel, FieldState] = {
            Channel.TOPIC: FieldState(Channel.TOPIC),
            Channel.AUDIENCE: FieldState(Channel.AUDIENCE),
        }
        self._debouncers: dict[Channel, Debouncer] = {
            ch: Debouncer(delay, clock) for ch in self.fields
        }

    def __getitem__(self, channel: Channel | str) -> FieldState:
        return self.fields[Channel(channel)]

    def on_input(self, channel: Channel | str, value: str) -> None:
        """Keystroke: store the value and restart the field's quiet period."""
        channel = Channel(channel)
        self.fields[channel].value = value
        self._debouncers[channel].poke()

    def on_blur(self, channel: Channel | str) -> FieldState:
        """Blur touches the field and validates it immediately."""
        channel = Channel(channel)
        state = self.fields[channel]
        state.touch()
        self._debouncers[channel].cancel()
        state.validate()
        return state

    def tick(self) -> list[Channel]:
        """Run validations whose quiet period has elapsed. Returns those fields."""
        ran = []
        for channel, debouncer in self._debouncers.items():
            if debouncer.ready():
                self.fields[channel].validate()
                ran.append(channel)
        return ran

    def inline_errors(self) -> dict[str, str]:
        return {ch.value: state.visible_error for ch, state in self.fields.items()}

    def submit(self) -> SubmitOutcome:
        """
        Touch and validate both fields, then stop at the first blocker in
        SUBMIT_ORDER. Validation here is synchronous; pending debounces are
        dropped since their values are being checked now.
        """
        for channel, state in self.fields.items():
            state.touch()
            self._debouncers[channel].cancel()
            state.validate()

        inline = self.inline_errors()
        for channel in SUBMIT_ORDER:
            state = self.fields[channel]
            error = describe_blocker(state.verdict, channel, state.too_long)
            if error is not None:
                return SubmitOutcome(
                    allowed=False,
                    blocking_field=channel,
                    verdict=state.verdict,
                    too_long=state.too_long,
                    error=error,
                    inline=inline,
                )
        return SubmitOutcome(allowed=True, inline=inline)


def should_autocomplete(topic: str, min_chars: Optional[int] = None) -> bool:
    """Gate for the autocomplete collaborator: long enough and safe."""
    threshold = settings.AUTOCOMPLETE_MIN_CHARS if min_chars is None else min_chars
    return len(topic) > threshold and classify(Channel.TOPIC, topic) is Verdict.SAFE
