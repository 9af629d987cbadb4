"""
Abstract base class for AI backends with plugin architecture.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional
from loguru import logger

from ..tools.base import ToolRegistry


class AIBackend(ABC):
    """Abstract base class for AI backends."""

    def __init__(self, api_url: str, model: str, timeout: int = 120, api_key: Optional[str] = None):
        """Initialize the AI backend."""
        self.api_url = api_url.rstrip('/')
        self.model = model
        self.timeout = timeout
        self.api_key = api_key
        self.backend_type = self.__class__.__name__.lower().replace('backend', '')

    @abstractmethod
    def stream_text(
        self,
        prompt: str,
        system: str,
        tools: ToolRegistry,
        max_steps: int = 10
    ) -> AsyncIterator[str]:
        """
        Run the prompt to completion, yielding text chunks as they arrive.

        Tool calls requested by the model are served through ``tools``; at
        most ``max_steps`` model requests are issued.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the AI backend is healthy and responsive."""
        pass

    def _log_request(self, prompt: str, tools: ToolRegistry) -> None:
        """Log the API request details."""
        logger.debug(f"AI API request to {self.backend_type}")
        logger.debug(f"URL: {self.api_url}")
        logger.debug(f"Model: {self.model}")
        logger.debug(f"Prompt length: {len(prompt)} characters")
        logger.debug(f"Tools: {', '.join(tools.names) or 'none'}")
        logger.debug(f"Timeout: {self.timeout}s")
