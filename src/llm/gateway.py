"""Thin async wrapper around LiteLLM for chat and analysis completions."""

import logging
from typing import Any

import litellm
from pydantic import BaseModel

from config.settings import settings

logger = logging.getLogger(__name__)

# Legacy UI model names mapped to current model ids
_MODEL_ALIASES: dict[str, str] = {
    "gpt-4": "gpt-4o",
}


class CompletionResult(BaseModel):
    """Result from a single LLM completion."""

    content: str | None = None
    model: str = ""
    tokens_used: int | None = None


class GenerationResult(BaseModel):
    """Outcome of a best-effort generation; never raised, always returned."""

    success: bool
    content: str | None = None
    error: str | None = None
    provider: str = ""
    model: str = ""


def resolve_model(name: str) -> str:
    """Map a UI model name onto a LiteLLM model id.

    Gemini names without a provider prefix are routed through the
    ``gemini/`` provider; "gpt-4" is upgraded to "gpt-4o".
    """
    name = _MODEL_ALIASES.get(name, name)
    if "gemini" in name.lower() and "/" not in name:
        return f"gemini/{name}"
    return name


def provider_for(model: str) -> str:
    return "gemini" if model.startswith("gemini/") else "openai"


class LLMGateway:
    """Async LLM completion via LiteLLM."""

    def __init__(
        self,
        model: str | None = None,
        analysis_model: str | None = None,
        fallback_model: str | None = None,
    ) -> None:
        self.model = model or settings.llm_chat_model
        self.analysis_model = analysis_model or settings.llm_analysis_model
        self.fallback_model = fallback_model or settings.llm_fallback_model

    def _api_key(self, model: str) -> str | None:
        key = settings.gemini_api_key if provider_for(model) == "gemini" else settings.openai_api_key
        return key or None

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        temperature: float = 0.1,
        max_tokens: int | None = None,
    ) -> CompletionResult:
        """Send messages to the LLM and return the response.

        Provider errors (auth, rate limit, bad model) propagate as LiteLLM
        exceptions.

        Args:
            messages: OpenAI-format message list (system/user/assistant).
            model: Model name; defaults to the chat model.
            temperature: Sampling temperature.
            max_tokens: Completion token cap; defaults to settings.

        Returns:
            CompletionResult with content, model and total token usage.
        """
        resolved = resolve_model(model or self.model)
        logger.info("Calling LLM model=%s messages=%d", resolved, len(messages))
        kwargs: dict[str, Any] = {
            "model": resolved,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens or settings.llm_max_tokens,
        }
        api_key = self._api_key(resolved)
        if api_key:
            kwargs["api_key"] = api_key

        response = await litellm.acompletion(**kwargs)
        message = response.choices[0].message
        usage = getattr(response, "usage", None)

        return CompletionResult(
            content=message.content,
            model=response.model or resolved,
            tokens_used=getattr(usage, "total_tokens", None),
        )

    async def generate(self, prompt: str, category: str) -> GenerationResult:
        """Generate analysis text, trying the analysis model then the fallback.

        Args:
            prompt: A single self-contained user prompt.
            category: Request category, used for logging.

        Returns:
            GenerationResult; ``success`` is False when every model failed
            or returned empty content.
        """
        candidates = [resolve_model(self.analysis_model)]
        fallback = resolve_model(self.fallback_model)
        if fallback not in candidates:
            candidates.append(fallback)

        last_error = "No model available"
        for model in candidates:
            try:
                result = await self.complete(
                    [{"role": "user", "content": prompt}],
                    model=model,
                    temperature=0.7,
                )
            except Exception as exc:
                logger.warning(
                    "Generation failed category=%s model=%s: %s", category, model, exc
                )
                last_error = str(exc)
                continue

            if result.content:
                logger.info("Generation succeeded category=%s model=%s", category, result.model)
                return GenerationResult(
                    success=True,
                    content=result.content,
                    provider=provider_for(model),
                    model=result.model,
                )
            last_error = f"Empty response from {model}"
            logger.warning("Generation returned no content category=%s model=%s", category, model)

        return GenerationResult(success=False, error=last_error)
