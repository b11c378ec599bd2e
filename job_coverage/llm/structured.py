"""
Structured (JSON) requests with bounded retry-with-feedback.

When a reply fails validation, the prompt is re-sent once more with the
validation problems appended, up to max_attempts in total. Transport errors
are not retried here; they surface immediately so the caller can fall back.
"""

from typing import Type, TypeVar
import logging
import re

from pydantic import BaseModel, ValidationError

from .base import TextGenerator, TextGenerationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json fence if the model added one."""
    match = _FENCE.match(text)
    return match.group(1) if match else text.strip()


def summarize_errors(error: ValidationError, limit: int = 5) -> str:
    """Render validation errors as a short '; '-joined list."""
    parts = []
    for item in error.errors()[:limit]:
        location = ".".join(str(p) for p in item.get("loc", ())) or "reply"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


def request_structured(
    generator: TextGenerator,
    prompt: str,
    schema: Type[ModelT],
    temperature: float = 0.3,
    max_attempts: int = 2,
) -> ModelT:
    """
    Ask the generator for JSON and validate it against a schema.

    Args:
        generator: Text-generation backend
        prompt: Prompt describing the JSON shape
        schema: Pydantic model the reply must satisfy
        temperature: Sampling temperature
        max_attempts: Total number of requests allowed (at least 1)

    Returns:
        Validated schema instance

    Raises:
        TextGenerationError: if the service fails or every attempt is invalid
    """
    attempts = max(1, max_attempts)
    feedback = ""
    last_problem = ""

    for attempt in range(1, attempts + 1):
        reply = generator.generate(prompt + feedback, temperature=temperature, format="json")

        try:
            return schema.model_validate_json(strip_code_fence(reply))
        except ValidationError as e:
            last_problem = summarize_errors(e)
            logger.warning(
                f"{schema.__name__} reply rejected on attempt {attempt}/{attempts}: {last_problem}"
            )
            feedback = (
                "\n\nIMPORTANT: Your previous reply was rejected because: "
                f"{last_problem}. Return ONLY valid JSON with the exact structure above."
            )

    raise TextGenerationError(
        f"No valid {schema.__name__} after {attempts} attempts: {last_problem}"
    )
