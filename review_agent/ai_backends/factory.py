"""
AI backend factory.
"""

from typing import List, Optional
from loguru import logger

from .base import AIBackend
from .gemini import GeminiBackend
from ..config.settings import Settings


class BackendFactory:
    """Factory for creating one AI backend per configured model."""

    _backends = {
        "gemini": GeminiBackend,
    }

    @classmethod
    def create_backend(
        cls,
        settings: Settings,
        model: str,
        backend_type: Optional[str] = None
    ) -> AIBackend:
        """Create a backend of the configured type for a single model."""
        backend_type = backend_type or settings.ai.backend_type
        if backend_type not in cls._backends:
            raise ValueError(f"Unknown backend type: {backend_type}")

        backend_class = cls._backends[backend_type]

        return backend_class(
            api_url=settings.ai.api_url,
            model=model,
            timeout=settings.ai.timeout,
            api_key=settings.ai.api_key
        )

    @classmethod
    def create_fallback_chain(cls, settings: Settings) -> List[AIBackend]:
        """Create backends for every configured model, in preference order."""
        backends = [cls.create_backend(settings, model) for model in settings.ai.models]
        logger.debug(f"Fallback chain: {', '.join(b.model for b in backends)}")
        return backends

    @classmethod
    def list_supported_backends(cls) -> List[str]:
        """List all supported backend types."""
        return list(cls._backends.keys())
