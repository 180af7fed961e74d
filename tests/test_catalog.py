"""
Error Catalog Tests

The catalog is a pure lookup; these tests pin down that it is total,
that channel-specific entries really differ by channel, and that the
inline hints distinguish empty from short.
"""

from __future__ import annotations

import pytest

from kaizen.catalog import (
    FALLBACK,
    ErrorDescriptor,
    describe,
    describe_blocker,
    describe_too_long,
    inline_hint,
    too_long_hint,
)
from kaizen.classifier import Channel, Verdict

NON_SAFE = [v for v in Verdict if v is not Verdict.SAFE]


class TestDescribe:

    @pytest.mark.parametrize("channel", list(Channel))
    @pytest.mark.parametrize("verdict", NON_SAFE)
    def test_total_over_non_safe_verdicts(self, verdict, channel):
        d = describe(verdict, channel)
        assert isinstance(d, ErrorDescriptor)
        assert d.title
        assert d.message
        assert d.icon
        assert len(d.suggestions) == 3
        assert all(s for s in d.suggestions)

    def test_safe_gets_fallback(self):
        assert describe(Verdict.SAFE, Channel.TOPIC) is FALLBACK

    def test_unknown_verdict_gets_fallback(self):
        assert describe("too_long", "topic") is FALLBACK
        assert describe("gibberish", "headline") is FALLBACK

    def test_accepts_string_values(self):
        assert describe("gibberish", "topic") == describe(Verdict.GIBBERISH, Channel.TOPIC)

    def test_off_topic_varies_by_channel(self):
        topic = describe(Verdict.OFF_TOPIC, Channel.TOPIC)
        audience = describe(Verdict.OFF_TOPIC, Channel.AUDIENCE)
        assert topic.title != audience.title
        assert topic.suggestions != audience.suggestions

    def test_security_and_profanity_are_channel_independent(self):
        for verdict in (Verdict.IRRELEVANT, Verdict.PROFANITY):
            descriptors = {describe(verdict, ch) for ch in Channel}
            assert len(descriptors) == 1

    def test_to_dict(self):
        data = describe(Verdict.PROFANITY, Channel.TOPIC).to_dict()
        assert set(data) == {"title", "message", "icon", "suggestions"}
        assert isinstance(data["suggestions"], list)
        assert len(data["suggestions"]) == 3


class TestTooLong:

    @pytest.mark.parametrize("channel,limit", [
        (Channel.TOPIC, 500),
        (Channel.AUDIENCE, 100),
        (Channel.EDIT_INSTRUCTION, 200),
    ])
    def test_mentions_limit(self, channel, limit):
        d = describe_too_long(channel)
        assert str(limit) in d.message
        assert len(d.suggestions) == 3
        assert too_long_hint(channel) == f"Maximum {limit} characters"


class TestDescribeBlocker:

    def test_safe_within_bounds_is_clear(self):
        assert describe_blocker(Verdict.SAFE, Channel.TOPIC) is None

    def test_verdict_descriptor(self):
        assert describe_blocker("off_topic", "audience") == describe(Verdict.OFF_TOPIC, Channel.AUDIENCE)

    @pytest.mark.parametrize("verdict", list(Verdict))
    def test_too_long_outranks_every_verdict(self, verdict):
        assert describe_blocker(verdict, Channel.TOPIC, too_long=True) == describe_too_long(Channel.TOPIC)


class TestInlineHint:

    def test_safe_is_empty(self):
        assert inline_hint(Verdict.SAFE, Channel.TOPIC, "anything") == ""

    def test_empty_field_is_required(self):
        assert inline_hint(Verdict.TOO_SHORT, Channel.TOPIC, "  ") == "Topic is required"
        assert inline_hint(Verdict.TOO_SHORT, Channel.AUDIENCE) == "Target audience is required"

    def test_short_field_shows_minimum(self):
        assert inline_hint(Verdict.TOO_SHORT, Channel.TOPIC, "AI tips") == "At least 10 characters needed"
        assert inline_hint(Verdict.TOO_SHORT, Channel.AUDIENCE, "HR") == "At least 3 characters needed"

    @pytest.mark.parametrize("channel", list(Channel))
    @pytest.mark.parametrize("verdict", NON_SAFE)
    def test_every_non_safe_verdict_has_a_hint(self, verdict, channel):
        assert inline_hint(verdict, channel, "some text")
