"""
Ollama integration.

Talks to a local or remote Ollama server through its chat endpoint.
No API key is needed.
"""

from typing import Optional

import requests

from .base import TextGenerator, TextGenerationError


class OllamaGenerator(TextGenerator):
    """Ollama chat backend."""

    DEFAULT_BASE_URL = "http://localhost:11434"
    DEFAULT_MODEL = "llama3.2"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(model=model, timeout=timeout)
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return "Ollama"

    @property
    def requires_api_key(self) -> bool:
        return False

    def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        format: Optional[str] = None,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
            "options": {"temperature": temperature},
        }
        if format:
            payload["format"] = format

        try:
            response = self.session.post(
                f"{self.base_url}/api/chat",
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TextGenerationError(f"Ollama request failed: {e}") from e

        if response.status_code != 200:
            raise TextGenerationError(f"Ollama API error: {response.status_code}")

        try:
            content = response.json()["message"]["content"]
        except (ValueError, KeyError, TypeError) as e:
            raise TextGenerationError(f"Unexpected Ollama response: {e}") from e

        if not content or not content.strip():
            raise TextGenerationError("Ollama returned an empty reply")

        self.logger.debug(f"{self.model} replied with {len(content)} characters")
        return content

    def is_available(self) -> bool:
        """Ping the tags endpoint to see whether the server is up."""
        try:
            response = self.session.get(f"{self.base_url}/api/tags", timeout=min(self.timeout, 5))
            return response.status_code == 200
        except requests.RequestException:
            return False

    def list_models(self) -> list[str]:
        """List the models the server has pulled."""
        try:
            response = self.session.get(f"{self.base_url}/api/tags", timeout=self.timeout)
            if response.status_code != 200:
                return []
            return [m.get("name", "") for m in response.json().get("models", [])]
        except (requests.RequestException, ValueError) as e:
            self.logger.debug(f"Error listing Ollama models: {e}")
            return []
