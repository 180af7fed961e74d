"""
Error Catalog — Verdict to User-Facing Descriptor

Pure lookup from (verdict, channel) to the structured explanation the UI
renders: title, message, icon, and three example suggestions.

Only too_short, gibberish and off_topic vary by channel. Profanity and
irrelevant (security) describe the same policy violation whatever the
field. Anything without an entry, safe included, gets the generic
"Invalid Input" descriptor.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from kaizen.classifier import Channel, ChannelLike, Verdict, thresholds_for


@dataclass(frozen=True)
class ErrorDescriptor:
    """Renderable explanation of a non-safe verdict."""
    title: str
    message: str
    icon: str
    suggestions: tuple[str, str, str]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["suggestions"] = list(self.suggestions)
        return data


# ============================================================
# CHANNEL-SPECIFIC ENTRIES
# ============================================================

_TOO_SHORT = {
    Channel.TOPIC: ErrorDescriptor(
        title="Too Short!",
        message="Your topic needs more detail to generate a quality LinkedIn post.",
        icon="📏",
        suggestions=(
            "Add more context about your topic",
            "Include specific details or experiences",
            "Mention what value you want to share",
        ),
    ),
    Channel.AUDIENCE: ErrorDescriptor(
        title="Too Short!",
        message="Your target audience needs more detail. Who exactly are you writing for?",
        icon="📏",
        suggestions=(
            "Try: 'Software Developers & Engineers'",
            "Try: 'SaaS Founders & CTOs'",
            "Try: 'Marketing Professionals in Tech'",
        ),
    ),
    Channel.EDIT_INSTRUCTION: ErrorDescriptor(
        title="Too Short!",
        message="Tell the AI a little more about how this text should change.",
        icon="📏",
        suggestions=(
            "Try: 'Make this sentence punchier'",
            "Try: 'Rephrase this for a non-technical reader'",
            "Try: 'Turn this into a question'",
        ),
    ),
}

_GIBBERISH = {
    Channel.TOPIC: ErrorDescriptor(
        title="That Doesn't Look Right 🤔",
        message="This doesn't look like a real topic. Please enter something meaningful.",
        icon="🤔",
        suggestions=(
            "Try: 'Why remote work is the future of tech'",
            "Try: 'Lessons from scaling my startup to 100 users'",
            "Try: 'The one skill every developer needs'",
        ),
    ),
    Channel.AUDIENCE: ErrorDescriptor(
        title="That Doesn't Look Right 🤔",
        message=(
            "This doesn't look like a real audience. "
            "Please enter a professional group or role."
        ),
        icon="🤔",
        suggestions=(
            "Try: 'Junior Developers'",
            "Try: 'Startup Founders'",
            "Try: 'Product Managers in SaaS'",
        ),
    ),
    Channel.EDIT_INSTRUCTION: ErrorDescriptor(
        title="That Doesn't Look Right 🤔",
        message="That doesn't look like a real instruction. Describe the change in plain words.",
        icon="🤔",
        suggestions=(
            "Try: 'Make it more concise'",
            "Try: 'Add a concrete example'",
            "Try: 'Sound more confident'",
        ),
    ),
}

_OFF_TOPIC = {
    Channel.TOPIC: ErrorDescriptor(
        title="Not LinkedIn Material 🚧",
        message=(
            "This doesn't seem related to professional content. LinkedIn posts "
            "should be about business, career, tech, leadership, or professional growth."
        ),
        icon="🚧",
        suggestions=(
            "Share a professional insight or experience",
            "Discuss industry trends or hot takes",
            "Talk about career growth or lessons learned",
        ),
    ),
    Channel.AUDIENCE: ErrorDescriptor(
        title="Not a Professional Audience",
        message=(
            "Your target audience should be a professional group, role, or "
            "industry. LinkedIn is for business networking!"
        ),
        icon="👥",
        suggestions=(
            "Try a job title: 'Software Engineers'",
            "Try an industry: 'FinTech Professionals'",
            "Try a role: 'Team Leads & Engineering Managers'",
        ),
    ),
    Channel.EDIT_INSTRUCTION: ErrorDescriptor(
        title="Not an Editing Instruction",
        message="Describe how the selected text should change, not a new subject.",
        icon="✏️",
        suggestions=(
            "Try: 'Make this more professional'",
            "Try: 'Shorten this to one line'",
            "Try: 'Add a call to action'",
        ),
    ),
}

# ============================================================
# CHANNEL-INDEPENDENT ENTRIES
# ============================================================

_IRRELEVANT = ErrorDescriptor(
    title="Security Alert 🛡️",
    message=(
        "This looks like it might be trying to manipulate the AI. "
        "Let's stick to genuine LinkedIn content!"
    ),
    icon="🛡️",
    suggestions=(
        "Share a real professional experience",
        "Discuss industry trends or opinions",
        "Talk about career growth or lessons learned",
    ),
)

_PROFANITY = ErrorDescriptor(
    title="Keep It Professional 🛑",
    message=(
        "LinkedIn is a professional network. Your post will reach recruiters, "
        "colleagues, and potential clients."
    ),
    icon="🛑",
    suggestions=(
        "Express frustration professionally: 'The challenge I faced...'",
        "Channel strong feelings into powerful insights",
        "Keep the energy — lose the language",
    ),
)

FALLBACK = ErrorDescriptor(
    title="Invalid Input",
    message="Please enter a valid topic for your LinkedIn post.",
    icon="⚠️",
    suggestions=(
        "Try entering a professional topic",
        "Describe a lesson, result, or opinion from your work",
        "Pick one of the topic templates",
    ),
)

_CATALOG: dict[tuple[Verdict, Channel], ErrorDescriptor] = {}
for _channel in Channel:
    _CATALOG[(Verdict.TOO_SHORT, _channel)] = _TOO_SHORT[_channel]
    _CATALOG[(Verdict.GIBBERISH, _channel)] = _GIBBERISH[_channel]
    _CATALOG[(Verdict.OFF_TOPIC, _channel)] = _OFF_TOPIC[_channel]
    _CATALOG[(Verdict.IRRELEVANT, _channel)] = _IRRELEVANT
    _CATALOG[(Verdict.PROFANITY, _channel)] = _PROFANITY


def describe(verdict: Verdict | str, channel: ChannelLike) -> ErrorDescriptor:
    """Descriptor for a verdict on a channel. Unknown pairs get FALLBACK."""
    try:
        key = (Verdict(verdict), Channel(channel))
    except ValueError:
        return FALLBACK
    return _CATALOG.get(key, FALLBACK)


_FIELD_NOUN = {
    Channel.TOPIC: "Topic",
    Channel.AUDIENCE: "Target audience",
    Channel.EDIT_INSTRUCTION: "Instruction",
}


def describe_too_long(channel: ChannelLike) -> ErrorDescriptor:
    """Caller-side ceiling violation, kept apart from the verdict table."""
    channel = Channel(channel)
    limit = thresholds_for(channel).max_length
    return ErrorDescriptor(
        title="Too Long!",
        message=f"{_FIELD_NOUN[channel]} is too long. Keep it under {limit} characters.",
        icon="✂️",
        suggestions=(
            "Cut it down to the single core idea",
            "Drop background details the reader doesn't need",
            "Save the specifics for the post itself",
        ),
    )


def describe_blocker(
    verdict: Verdict | str, channel: ChannelLike, too_long: bool = False,
) -> Optional[ErrorDescriptor]:
    """
    Descriptor for whatever blocks a field, or None when nothing does.

    The length ceiling outranks the verdict: an over-long field reports
    too long whatever it classifies as.
    """
    if too_long:
        return describe_too_long(channel)
    if Verdict(verdict) is Verdict.SAFE:
        return None
    return describe(verdict, channel)


# ============================================================
# INLINE HINTS (short text under the field)
# ============================================================

_INLINE = {
    Channel.TOPIC: {
        Verdict.GIBBERISH: "This doesn't look like a real topic",
        Verdict.OFF_TOPIC: "Not LinkedIn content — try a professional topic",
        Verdict.PROFANITY: "Keep it professional",
    },
    Channel.AUDIENCE: {
        Verdict.GIBBERISH: "This doesn't look like a real audience",
        Verdict.OFF_TOPIC: "Enter a professional role or industry",
        Verdict.PROFANITY: "Keep it professional",
    },
    Channel.EDIT_INSTRUCTION: {
        Verdict.GIBBERISH: "That doesn't look like a real instruction",
        Verdict.PROFANITY: "Keep it professional",
        Verdict.IRRELEVANT: "Please enter a genuine editing instruction",
    },
}

_INLINE_DEFAULT = {
    Channel.TOPIC: "Please enter a valid LinkedIn topic",
    Channel.AUDIENCE: "Please enter a valid professional audience",
    Channel.EDIT_INSTRUCTION: "Please enter a genuine editing instruction",
}

_INLINE_EMPTY = {
    Channel.TOPIC: "Topic is required",
    Channel.AUDIENCE: "Target audience is required",
    Channel.EDIT_INSTRUCTION: "Tell the AI what to do with this text",
}


def inline_hint(verdict: Verdict | str, channel: ChannelLike, text: str = "") -> str:
    """
    One-line hint shown beneath a touched field. Empty string for safe.

    too_short distinguishes an empty field from a short one, so the
    original text is needed for that case.
    """
    verdict, channel = Verdict(verdict), Channel(channel)
    if verdict is Verdict.SAFE:
        return ""
    if verdict is Verdict.TOO_SHORT:
        if not text.strip():
            return _INLINE_EMPTY[channel]
        return f"At least {thresholds_for(channel).min_length} characters needed"
    return _INLINE[channel].get(verdict, _INLINE_DEFAULT[channel])


def too_long_hint(channel: ChannelLike) -> str:
    return f"Maximum {thresholds_for(channel).max_length} characters"
