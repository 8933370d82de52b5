"""Language-model boundary: ``(system_prompt, user_prompt) -> text``.

The pipeline only ever sees a :data:`ModelCall`. :class:`ChatModel` is the
production implementation, an OpenAI-compatible chat client pointed at Groq;
tests substitute any async callable returning canned text.
"""

import logging
import os
from collections.abc import Awaitable, Callable
from typing import Any

from openai import AsyncOpenAI

from munger_mcp.utils.sanitize import strip_think_blocks

logger = logging.getLogger(__name__)

ModelCall = Callable[[str, str], Awaitable[str]]

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"

# Aliases selectable from the chat client -> provider model ids
AVAILABLE_MODELS: dict[str, str] = {
    "kimi-k2": "moonshotai/kimi-k2-instruct",
    "llama-4-scout": "meta-llama/llama-4-scout-17b-16e-instruct",
    "llama-3.1-8b-instant": "llama-3.1-8b-instant",
    "deepseek-r1-distill-llama-70b": "deepseek-r1-distill-llama-70b",
    "llama-3.3-70b-versatile": "llama-3.3-70b-versatile",
}
DEFAULT_MODEL = "kimi-k2"


class LLMResponseError(Exception):
    """Raised when the model returns non-text content or unparsable output."""

    pass


def resolve_model(name: str | None = None) -> str:
    """
    Resolve a model alias to a provider model id.

    Falls back to MUNGER_MODEL, then the default alias. Unknown names are
    treated as raw provider ids.
    """
    alias = (name or os.environ.get("MUNGER_MODEL") or DEFAULT_MODEL).strip()
    return AVAILABLE_MODELS.get(alias, alias)


class ChatModel:
    """OpenAI-compatible chat completion as a ModelCall."""

    def __init__(
        self,
        model: str | None = None,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float = 0.2,
        client: Any = None,
    ):
        self.model = resolve_model(model)
        self.temperature = temperature
        self._api_key = api_key
        self._base_url = base_url
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            api_key = self._api_key or os.environ.get("GROQ_API_KEY")
            if not api_key:
                raise ValueError("GROQ_API_KEY not configured")
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self._base_url or os.environ.get("LLM_BASE_URL", DEFAULT_BASE_URL),
            )
        return self._client

    async def __call__(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run one chat completion.

        Returns:
            Model text with any <think> blocks removed

        Raises:
            LLMResponseError: If the response carries no text content
            ValueError: If no API key is configured
        """
        client = self._get_client()
        logger.debug(f"LLM call model={self.model} system={len(system_prompt)}c user={len(user_prompt)}c")
        response = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.temperature,
        )

        if not response.choices:
            raise LLMResponseError(f"{self.model} returned no choices")
        content = response.choices[0].message.content
        if not isinstance(content, str) or not content.strip():
            raise LLMResponseError(
                f"Expected text content from {self.model}, got {type(content).__name__}"
            )
        return strip_think_blocks(content)
