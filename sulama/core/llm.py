"""OpenAI client construction."""

from __future__ import annotations

from openai import AsyncOpenAI

from .config import Settings


def build_client(settings: Settings) -> AsyncOpenAI:
    """Single async client reused by every request."""
    return AsyncOpenAI(
        api_key=settings.openai_api_key or None,
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout_s,
    )
