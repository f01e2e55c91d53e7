"""Async Google Gemini driver. Requires the ``google-genai`` package."""

from __future__ import annotations

import logging
import os
from typing import Any

from ..exceptions import BackendError, ConfigurationError
from .base import AsyncDriver

logger = logging.getLogger(__name__)


class AsyncGoogleDriver(AsyncDriver):
    """Driver for Google's Generative AI API (Gemini)."""

    def __init__(self, api_key: str | None = None, model: str = "gemini-2.5-flash"):
        """Initialize the Google driver.

        Args:
            api_key: Gemini API key. Falls back to ``GEMINI_API_KEY`` or
                ``GOOGLE_API_KEY`` from the environment.
            model: Model to use.
        """
        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ConfigurationError(
                "Google API key not found. Set GEMINI_API_KEY or pass api_key to the constructor"
            )
        self.model = model
        self._client = None

    def _get_client(self):
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate(self, prompt: str, options: dict[str, Any]) -> dict[str, Any]:
        """Generate text for *prompt*.

        Recognised options: ``temperature``, ``max_tokens``, ``top_p``,
        ``top_k`` and ``model``.
        """
        from google.genai import types

        client = self._get_client()
        model = options.get("model", self.model)

        config_kwargs: dict[str, Any] = {}
        if "temperature" in options:
            config_kwargs["temperature"] = options["temperature"]
        if "max_tokens" in options:
            config_kwargs["max_output_tokens"] = options["max_tokens"]
        if "top_p" in options:
            config_kwargs["top_p"] = options["top_p"]
        if "top_k" in options:
            config_kwargs["top_k"] = options["top_k"]

        try:
            logger.debug("Generating with %s (%d prompt chars)", model, len(prompt))
            resp = await client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(**config_kwargs) if config_kwargs else None,
            )
        except Exception as exc:
            logger.error("Google API request failed: %s", exc)
            raise BackendError(f"Google API request failed: {exc}") from exc

        text = resp.text or ""
        usage = getattr(resp, "usage_metadata", None)
        prompt_tokens = getattr(usage, "prompt_token_count", 0) or 0
        completion_tokens = getattr(usage, "candidates_token_count", 0) or 0

        meta = {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
            "model_name": model,
            "raw_response": {"prompt_feedback": str(getattr(resp, "prompt_feedback", None))},
        }
        return {"text": text, "meta": meta}
