"""Language-model wrapper: OpenAI chat completions, Anthropic for claude-* models."""

from __future__ import annotations

import asyncio

import structlog
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from research_agent.config import Settings
from research_agent.errors import ModelError

logger = structlog.get_logger()


def frame_prompt(prompt: str, context: str | None = None) -> str:
    if context:
        return f"Context: {context}\n\nAnalysis Request: {prompt}"
    return prompt


class LLMClient:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def complete(
        self,
        prompt: str,
        model: str | None = None,
        api_key: str | None = None,
        context: str | None = None,
    ) -> str:
        """Single-turn completion. Raises ModelError on any failure or empty reply."""
        model = model or self.settings.DEFAULT_MODEL
        content = frame_prompt(prompt, context)
        provider = "anthropic" if model.startswith("claude") else "openai"
        logger.info("llm_request", provider=provider, model=model, prompt_chars=len(content))

        try:
            if provider == "anthropic":
                call = self._call_anthropic(content, model, api_key)
            else:
                call = self._call_openai(content, model, api_key)
            text = await asyncio.wait_for(call, timeout=self.settings.REQUEST_TIMEOUT_SECONDS)
        except asyncio.TimeoutError as e:
            logger.warning("llm_timeout", model=model, timeout=self.settings.REQUEST_TIMEOUT_SECONDS)
            raise ModelError(f"{model} timed out after {self.settings.REQUEST_TIMEOUT_SECONDS}s") from e
        except ModelError:
            raise
        except Exception as e:
            logger.warning("llm_error", model=model, error=str(e))
            raise ModelError(str(e) or type(e).__name__) from e

        if not text:
            raise ModelError(f"{model} returned an empty completion")
        logger.info("llm_call", model=model, chars=len(text))
        return text

    async def _call_openai(self, content: str, model: str, api_key: str | None) -> str:
        client = AsyncOpenAI(api_key=api_key or self.settings.OPENAI_API_KEY or None)
        response = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": content}],
            temperature=self.settings.LLM_TEMPERATURE,
        )
        if not response.choices:
            raise ModelError(f"{model} returned no choices")
        return response.choices[0].message.content or ""

    async def _call_anthropic(self, content: str, model: str, api_key: str | None) -> str:
        client = AsyncAnthropic(api_key=api_key or self.settings.ANTHROPIC_API_KEY or None)
        response = await client.messages.create(
            model=model,
            max_tokens=self.settings.LLM_MAX_TOKENS,
            temperature=self.settings.LLM_TEMPERATURE,
            messages=[{"role": "user", "content": content}],
        )
        if not response.content:
            raise ModelError(f"{model} returned no content blocks")
        return response.content[0].text
