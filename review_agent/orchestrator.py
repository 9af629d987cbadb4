"""
Model fallback orchestration.

A prompt is driven through an ordered list of backends. Each backend gets up
to ``attempts_per_model`` tries with exponential backoff and jitter; overload
failures move on to the next model at once, anything else waits
``switch_delay`` first. The first backend that streams to completion ends
the run.
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence
from loguru import logger

from .ai_backends.base import AIBackend
from .config.settings import RetrySettings
from .errors import AllModelsFailedError, ToolExecutionError
from .tools.base import ToolRegistry


Sink = Callable[[str], None]
Sleeper = Callable[[float], Awaitable[None]]


def is_overload_error(error: BaseException) -> bool:
    """Transient provider overload: HTTP 503 or an 'overloaded' message."""
    if getattr(error, "status_code", None) == 503:
        return True
    return "overloaded" in str(error).lower()


@dataclass
class RetryPolicy:
    """How hard to try each model and how long to wait between tries."""

    attempts_per_model: int = 1
    backoff_base: float = 1.0
    jitter: float = 1.0
    switch_delay: float = 2.0
    is_overload: Callable[[BaseException], bool] = field(default=is_overload_error)

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> "RetryPolicy":
        return cls(
            attempts_per_model=settings.attempts_per_model,
            backoff_base=settings.backoff_base,
            jitter=settings.jitter,
            switch_delay=settings.switch_delay
        )

    def backoff_delay(self, attempt: int, rng: Callable[[float, float], float] = random.uniform) -> float:
        """Delay after failed attempt number ``attempt`` (1-based)."""
        return self.backoff_base * 2 ** (attempt - 1) + rng(0, self.jitter)


@dataclass
class OrchestrationResult:
    model: str
    attempts: int
    failed_models: List[str] = field(default_factory=list)


class Notifier:
    """Progress callbacks; the default implementation is silent."""

    def attempt(self, model: str, attempt: int, total: int) -> None:
        pass

    def failure(self, model: str, error: BaseException) -> None:
        pass

    def waiting(self, seconds: float, reason: str) -> None:
        pass

    def success(self, model: str) -> None:
        pass


class FallbackOrchestrator:
    """Drive a prompt through backends in order until one succeeds."""

    def __init__(
        self,
        backends: Sequence[AIBackend],
        tools: ToolRegistry,
        system_prompt: str,
        policy: Optional[RetryPolicy] = None,
        sink: Optional[Sink] = None,
        notifier: Optional[Notifier] = None,
        max_steps: int = 10,
        sleep: Sleeper = asyncio.sleep,
        rng: Callable[[float, float], float] = random.uniform
    ):
        if not backends:
            raise ValueError("At least one backend is required")
        self.backends = list(backends)
        self.tools = tools
        self.system_prompt = system_prompt
        self.policy = policy or RetryPolicy()
        self.sink = sink or (lambda chunk: None)
        self.notifier = notifier or Notifier()
        self.max_steps = max_steps
        self._sleep = sleep
        self._rng = rng

    async def _stream_once(self, backend: AIBackend, prompt: str) -> None:
        async for chunk in backend.stream_text(prompt, self.system_prompt, self.tools, self.max_steps):
            self.sink(chunk)

    async def _wait(self, seconds: float, reason: str) -> None:
        logger.info(f"Waiting {seconds:.2f}s: {reason}")
        self.notifier.waiting(seconds, reason)
        await self._sleep(seconds)

    async def _try_model(self, backend: AIBackend, prompt: str) -> int:
        """Run the retry loop for one model; return the attempt that succeeded."""
        total = max(1, self.policy.attempts_per_model)
        attempt = 1

        while True:
            logger.info(f"Trying model {backend.model} (attempt {attempt}/{total})")
            self.notifier.attempt(backend.model, attempt, total)
            try:
                await self._stream_once(backend, prompt)
                return attempt
            except ToolExecutionError:
                raise
            except Exception as e:
                logger.warning(f"Attempt {attempt}/{total} with {backend.model} failed: {e}")
                if attempt >= total:
                    raise
                await self._wait(
                    self.policy.backoff_delay(attempt, self._rng),
                    f"before retrying {backend.model}"
                )
                attempt += 1

    async def run(self, prompt: str) -> OrchestrationResult:
        """Run the prompt; raise AllModelsFailedError when every model fails."""
        last_error: Optional[BaseException] = None
        failed: List[str] = []

        for index, backend in enumerate(self.backends):
            try:
                attempts = await self._try_model(backend, prompt)
            except ToolExecutionError:
                raise
            except Exception as e:
                last_error = e
                failed.append(backend.model)
                logger.error(f"Model {backend.model} failed: {e}")
                self.notifier.failure(backend.model, e)

                if index == len(self.backends) - 1:
                    break
                if self.policy.is_overload(e):
                    logger.info(f"Model {backend.model} is overloaded, trying next model")
                    continue
                await self._wait(self.policy.switch_delay, "before trying next model")
                continue

            logger.info(f"Model {backend.model} completed the review")
            self.notifier.success(backend.model)
            return OrchestrationResult(model=backend.model, attempts=attempts, failed_models=failed)

        raise AllModelsFailedError([b.model for b in self.backends], last_error)
