"""
Composer — Gated Post Generation, Editing and Autocomplete

The three request handlers that spend model calls. Each one classifies
its free-text input first and refuses to touch the LLM unless the
verdict is safe and the text is within its length ceiling:

  generate_post       — audience, then topic (same order as form submit)
  edit_post           — the instruction, on the edit_instruction channel,
                        for custom_selection; presets carry no free text
  suggest_completion  — autocomplete gate (length + safe topic), silent ""
                        on any failure

Refusal raises InputRejected carrying the field, verdict and descriptor.
LLM failures in generate/edit are logged and returned as an "error"
field so the API can map them to 502.
"""

from __future__ import annotations

from typing import Optional

from kaizen.cache import SuggestionCache, suggestion_cache
from kaizen.catalog import ErrorDescriptor, describe_blocker
from kaizen.classifier import Channel, Verdict, classifier
from kaizen.config import settings
from kaizen.llm import LLMProvider
from kaizen.logging import get_logger
from kaizen.session import should_autocomplete

logger = get_logger("composer")


# ============================================================
# OPTIONS
# ============================================================

TONES = ("Professional", "Storyteller", "Contrarian", "Direct", "Super Chill")

# Selectable generation models. None means settings.GEMINI_MODEL.
GENERATION_MODELS = {
    "gemini-2.5-pro": "Most capable",
    "gemini-2.5-flash": "Balanced",
    "gemini-2.5-flash-lite": "Ultra fast",
}

POST_LENGTHS = {
    "short": "3-5 lines, punchy",
    "medium": "8-12 lines, balanced",
    "long": "15-20 lines, detailed",
}

HOOK_STYLES = {
    "bold_statement": "Open with a bold, confident statement.",
    "question": "Open with a question the reader can't ignore.",
    "statistic": "Open with a specific number or statistic.",
    "story": "Open with a two-line mini story.",
    "contrarian": "Open by challenging a popular belief.",
    "auto": "Pick whichever hook fits the topic best.",
}

EDIT_INSTRUCTIONS = {
    "shorten": "Make this LinkedIn post 50% shorter. Keep the hook. Remove fluff.",
    "refine": (
        "Improve the clarity and punchiness of this post. Fix grammar. "
        "Make it sound more professional."
    ),
    "retry": "Rewrite this post completely with a fresh perspective.",
    "add_hashtags": "Add 3-5 relevant hashtags at the end. Change nothing else.",
    "add_emoji": "Add a few fitting emojis where they add energy. Don't overdo it.",
    "add_cta": "End the post with a short call to action that invites comments.",
}

CUSTOM_SELECTION = "custom_selection"
EDIT_ACTIONS = tuple(EDIT_INSTRUCTIONS) + (CUSTOM_SELECTION,)


# ============================================================
# PROMPTS
# ============================================================

GENERATION_SYSTEM_PROMPT = """You are KAIZEN_AI, a world-class LinkedIn ghostwriter.
Tone: {tone}. Target Audience: {audience}.
Rules: Use high-impact hooks, line breaks for readability, and relevant emojis.
Avoid corporate jargon unless requested.
Hook: {hook}"""

GENERATION_PROMPT = "Write a {length} post ({length_hint}) about: {topic}"

EDIT_SYSTEM_PROMPT = "You are an expert editor. Output ONLY the updated post text."

EDIT_PROMPT = """Original Topic: {topic}

Current Text:
{text}

Task: {instruction}"""

SELECTION_PROMPT = """Original Topic: {topic}

Full Post (for context only):
{text}

Selected Passage:
{selected}

Task: Rewrite ONLY the selected passage. {instruction}
Output ONLY the replacement passage."""

SUGGEST_SYSTEM_PROMPT = "Complete the sentence with 2-4 words. Output ONLY text."


# ============================================================
# GATE
# ============================================================

class InputRejected(Exception):
    """A collaborator refused to forward input to the LLM."""

    def __init__(
        self,
        field: Channel,
        verdict: Optional[Verdict],
        error: ErrorDescriptor,
        too_long: bool = False,
    ):
        self.field = field
        self.verdict = verdict
        self.error = error
        self.too_long = too_long
        reason = "too_long" if too_long else verdict.value if verdict else "invalid"
        super().__init__(f"{field.value} rejected: {reason}")

    def to_dict(self) -> dict:
        return {
            "detail": str(self),
            "field": self.field.value,
            "verdict": self.verdict.value if self.verdict else None,
            "too_long": self.too_long,
            "error": self.error.to_dict(),
        }


def require_safe(channel: Channel, text: str) -> None:
    """Raise InputRejected unless text is within bounds and classifies safe."""
    verdict = classifier.classify(channel, text)
    too_long = classifier.exceeds_max_length(channel, text)
    error = describe_blocker(verdict, channel, too_long)
    if error is None:
        return

    extra = {"field": channel.value, "verdict": "too_long" if too_long else verdict.value}
    if verdict is Verdict.IRRELEVANT:
        # Trigger phrases only; the raw text is never logged.
        extra["injection_triggers"] = classifier.explain(channel, text)["injection_triggers"]
        logger.warning("Prompt-injection signal blocked", extra=extra)
    else:
        logger.info("Input rejected", extra=extra)
    raise InputRejected(channel, verdict, error, too_long=too_long)


# ============================================================
# COLLABORATORS
# ============================================================

async def generate_post(
    topic: str,
    audience: str,
    llm: LLMProvider,
    tone: str = "Professional",
    length: str = "medium",
    hook_style: str = "auto",
    model: Optional[str] = None,
) -> dict:
    """
    Generate a post. Audience and topic must both be safe.

    model must be one of GENERATION_MODELS; None uses the provider default.
    """
    if model is not None and model not in GENERATION_MODELS:
        raise ValueError(f"Unknown model: {model}")
    require_safe(Channel.AUDIENCE, audience)
    require_safe(Channel.TOPIC, topic)

    system = GENERATION_SYSTEM_PROMPT.format(
        tone=tone,
        audience=audience.strip(),
        hook=HOOK_STYLES.get(hook_style, HOOK_STYLES["auto"]),
    )
    prompt = GENERATION_PROMPT.format(
        length=length,
        length_hint=POST_LENGTHS.get(length, POST_LENGTHS["medium"]),
        topic=topic.strip(),
    )

    try:
        content = await llm.generate_text(
            prompt, system_instruction=system, temperature=0.7, model=model,
        )
    except Exception as e:
        logger.error(
            "Generation failed",
            extra={"error": str(e), "error_type": type(e).__name__},
            exc_info=True,
        )
        return {"content": "", "error": str(e)}

    logger.info("Post generated", extra={"tone": tone, "length": length, "model": model})
    return {"content": content}


async def edit_post(
    current_text: str,
    action: str,
    topic: str,
    llm: LLMProvider,
    selected_text: Optional[str] = None,
    instruction: Optional[str] = None,
) -> dict:
    """
    Apply an edit action to a generated post.

    custom_selection rewrites only the selected passage: the instruction is
    screened on the edit_instruction channel, and the model's replacement
    is substituted for the first occurrence of the selection.
    """
    if action not in EDIT_ACTIONS:
        raise ValueError(f"Unknown edit action: {action}")

    if action == CUSTOM_SELECTION:
        if not selected_text or selected_text not in current_text:
            raise ValueError("selected_text must be a passage of current_text")
        require_safe(Channel.EDIT_INSTRUCTION, instruction or "")
        prompt = SELECTION_PROMPT.format(
            topic=topic,
            text=current_text,
            selected=selected_text,
            instruction=(instruction or "").strip(),
        )
    else:
        prompt = EDIT_PROMPT.format(
            topic=topic,
            text=current_text,
            instruction=EDIT_INSTRUCTIONS[action],
        )

    try:
        content = await llm.generate_text(
            prompt, system_instruction=EDIT_SYSTEM_PROMPT, temperature=0.7,
        )
    except Exception as e:
        logger.error(
            "Edit failed",
            extra={"action": action, "error": str(e), "error_type": type(e).__name__},
            exc_info=True,
        )
        return {"content": current_text, "error": str(e)}

    if action == CUSTOM_SELECTION:
        content = current_text.replace(selected_text, content.strip(), 1)

    logger.info("Post edited", extra={"action": action})
    return {"content": content}


async def suggest_completion(
    text: str,
    llm: LLMProvider,
    cache: Optional[SuggestionCache] = None,
    model: Optional[str] = None,
) -> str:
    """A 2-4 word continuation of the topic, or "" if gated out or failed."""
    if not should_autocomplete(text):
        return ""

    cache = cache if cache is not None else suggestion_cache
    model = model or settings.SUGGEST_MODEL

    cached = await cache.get(text, model)
    if cached is not None:
        return cached

    try:
        suggestion = await llm.generate_text(
            text,
            system_instruction=SUGGEST_SYSTEM_PROMPT,
            temperature=0.5,
            max_output_tokens=12,
            model=model,
        )
    except Exception as e:
        logger.warning(
            "Autocomplete failed",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        return ""

    await cache.put(text, model, suggestion)
    return suggestion
