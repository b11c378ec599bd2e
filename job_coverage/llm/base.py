"""
Base class for external text-generation services.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging


class TextGenerationError(Exception):
    """The external service failed or returned something unusable."""


class TextGenerator(ABC):
    """Abstract base class for text-generation backends."""

    def __init__(
        self,
        model: str,
        timeout: float = 60.0,
        api_key: Optional[str] = None,
    ):
        self.model = model
        self.timeout = timeout
        self.api_key = api_key
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name."""
        pass

    @property
    @abstractmethod
    def requires_api_key(self) -> bool:
        """Whether this backend requires an API key."""
        pass

    @abstractmethod
    def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        format: Optional[str] = None,
    ) -> str:
        """
        Send one prompt and return the reply text.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            format: "json" to ask for a reply constrained to valid JSON

        Returns:
            Reply text

        Raises:
            TextGenerationError: on network errors, non-2xx responses or
                empty replies
        """
        pass

    def is_available(self) -> bool:
        """Check if the backend is properly configured."""
        if self.requires_api_key and not self.api_key:
            return False
        return True
