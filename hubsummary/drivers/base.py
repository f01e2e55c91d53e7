"""Async driver base class for generative-text backends."""

from __future__ import annotations

from typing import Any


class AsyncDriver:
    """Async adapter base. Implement ``async generate(prompt, options)``
    returning ``{"text": ..., "meta": {...}}``.

    The ``meta`` dict should contain at least:

    .. code-block:: python

        {
            "prompt_tokens": int,
            "completion_tokens": int,
            "total_tokens": int,
            "model_name": str,
            "raw_response": dict,
        }

    Driver instances are shared across concurrent requests and must not
    keep per-request state.
    """

    model: str = ""

    async def generate(self, prompt: str, options: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources.  Default is a no-op."""
