"""
LLM Provider — Abstract Interface

All generation calls go through this interface. Swap providers
by changing KAIZEN_LLM_PROVIDER in env.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> str:
        """Generate a text response from the LLM."""
        ...

    async def generate_text(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> str:
        """Generate and clean a plain-text response."""
        text = await self.generate(
            prompt=prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            model=model,
        )
        cleaned = (text or "").strip()
        # Strip markdown fences if the model wraps the post in ``` blocks
        if cleaned.startswith("```"):
            cleaned = cleaned.split("\n", 1)[-1].rsplit("```", 1)[0].strip()
        return cleaned
