"""
Anthropic integration.

Uses the Messages API. There is no native JSON mode, so a JSON request is
expressed as an extra instruction appended to the prompt.
"""

from typing import Optional

import anthropic

from .base import TextGenerator, TextGenerationError


class AnthropicGenerator(TextGenerator):
    """Claude backend via the anthropic SDK."""

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    JSON_INSTRUCTION = "\n\nRespond with a single valid JSON object and nothing else."

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
        max_tokens: int = 1500,
        client: Optional[anthropic.Anthropic] = None,
    ):
        super().__init__(model=model, timeout=timeout, api_key=api_key)
        self.max_tokens = max_tokens
        self._client = client

    @property
    def name(self) -> str:
        return "Anthropic"

    @property
    def requires_api_key(self) -> bool:
        return True

    @property
    def client(self) -> anthropic.Anthropic:
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        format: Optional[str] = None,
    ) -> str:
        if format == "json":
            prompt += self.JSON_INSTRUCTION

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise TextGenerationError(f"Anthropic request failed: {e}") from e

        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise TextGenerationError("Anthropic returned an empty reply")

        return text
