"""
Clients for the external text-generation service.
"""

from typing import Optional
import logging

from .base import TextGenerator, TextGenerationError
from .ollama import OllamaGenerator
from .anthropic_client import AnthropicGenerator
from .structured import request_structured

logger = logging.getLogger(__name__)


def create_text_generator(config) -> Optional[TextGenerator]:
    """
    Build the configured text-generation backend.

    Args:
        config: Config instance

    Returns:
        A TextGenerator, or None when generation is disabled or the backend
        cannot be configured (callers then use the rule-based paths)
    """
    if not config.get("llm.enabled", True):
        return None

    provider = str(config.get("llm.provider", "ollama")).lower()
    timeout = float(config.get("llm.timeout", 60))

    if provider == "ollama":
        return OllamaGenerator(
            model=config.get("llm.models.ollama", OllamaGenerator.DEFAULT_MODEL),
            base_url=config.get_ollama_base_url(),
            timeout=timeout,
        )

    if provider == "anthropic":
        api_key = config.get_api_key("anthropic")
        if not api_key:
            logger.warning("No Anthropic API key configured, text generation disabled")
            return None
        return AnthropicGenerator(
            api_key=api_key,
            model=config.get("llm.models.anthropic", AnthropicGenerator.DEFAULT_MODEL),
            timeout=timeout,
        )

    logger.warning(f"Unknown text generation provider '{provider}', text generation disabled")
    return None


__all__ = [
    "TextGenerator",
    "TextGenerationError",
    "OllamaGenerator",
    "AnthropicGenerator",
    "request_structured",
    "create_text_generator",
]
