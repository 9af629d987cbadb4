"""
Google Gemini backend using the REST streaming endpoint with function calling.
"""

import asyncio
import json
from typing import Any, AsyncIterator, Dict, List, Optional
import aiohttp
from loguru import logger

from .base import AIBackend
from ..errors import ProviderError
from ..tools.base import ToolRegistry


_SCHEMA_KEYS = ("description", "enum", "format", "nullable")


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a pydantic JSON schema to the OpenAPI subset Gemini accepts."""
    converted: Dict[str, Any] = {}

    if "type" in schema:
        converted["type"] = str(schema["type"]).upper()
    for key in _SCHEMA_KEYS:
        if key in schema:
            converted[key] = schema[key]
    if "properties" in schema:
        converted["properties"] = {
            name: to_gemini_schema(prop) for name, prop in schema["properties"].items()
        }
    if schema.get("required"):
        converted["required"] = list(schema["required"])
    if "items" in schema:
        converted["items"] = to_gemini_schema(schema["items"])

    return converted


def extract_error_message(body: str, status: int) -> str:
    """Pull the provider's error message out of a response body."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return f"HTTP {status}: {body.strip() or 'no response body'}"

    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return f"HTTP {status}: {body.strip()}"


class GeminiBackend(AIBackend):
    """Gemini AI backend implementation."""

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key or "",
        }

    @property
    def _model_path(self) -> str:
        model = self.model if self.model.startswith("models/") else f"models/{self.model}"
        return f"{self.api_url}/v1beta/{model}"

    def build_payload(self, system: str, contents: List[Dict[str, Any]], tools: ToolRegistry) -> Dict[str, Any]:
        """Build a generateContent request body."""
        payload: Dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system}]},
            "contents": contents,
        }
        if len(tools):
            payload["tools"] = [{
                "functionDeclarations": [
                    {
                        "name": tool.name,
                        "description": tool.description,
                        "parameters": to_gemini_schema(tool.parameters_schema()),
                    }
                    for tool in tools
                ]
            }]
        return payload

    async def _stream_step(
        self,
        session: aiohttp.ClientSession,
        payload: Dict[str, Any]
    ) -> AsyncIterator[Dict[str, Any]]:
        """Issue one streaming request and yield each server-sent event."""
        async with session.post(
            f"{self._model_path}:streamGenerateContent",
            params={"alt": "sse"},
            json=payload,
            headers=self._headers()
        ) as response:
            if response.status >= 400:
                body = await response.text()
                raise ProviderError(
                    extract_error_message(body, response.status),
                    status_code=response.status,
                    model=self.model
                )

            async for raw_line in response.content:
                line = raw_line.decode("utf-8").strip()
                if not line.startswith("data:"):
                    continue
                event = json.loads(line[len("data:"):].strip())
                if "error" in event:
                    error = event["error"]
                    raise ProviderError(
                        error.get("message", "Unknown streaming error"),
                        status_code=error.get("code"),
                        model=self.model
                    )
                yield event

    @staticmethod
    def _parts(event: Dict[str, Any]) -> List[Dict[str, Any]]:
        candidates = event.get("candidates") or []
        if not candidates:
            return []
        return (candidates[0].get("content") or {}).get("parts") or []

    async def stream_text(
        self,
        prompt: str,
        system: str,
        tools: ToolRegistry,
        max_steps: int = 10
    ) -> AsyncIterator[str]:
        """Stream the model's text while serving its function calls."""
        if not self.api_key:
            raise ProviderError(
                "Missing API key. Set GOOGLE_GENERATIVE_AI_API_KEY or GEMINI_API_KEY.",
                model=self.model
            )

        self._log_request(prompt, tools)
        contents: List[Dict[str, Any]] = [{"role": "user", "parts": [{"text": prompt}]}]
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=30, sock_read=self.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                for step in range(1, max_steps + 1):
                    logger.debug(f"Gemini step {step}/{max_steps} ({self.model})")
                    model_parts: List[Dict[str, Any]] = []
                    calls: List[Dict[str, Any]] = []

                    async for event in self._stream_step(session, self.build_payload(system, contents, tools)):
                        for part in self._parts(event):
                            model_parts.append(part)
                            if "functionCall" in part:
                                calls.append(part["functionCall"])
                            elif part.get("text") and not part.get("thought"):
                                yield part["text"]

                    if not calls:
                        return

                    contents.append({"role": "model", "parts": model_parts})
                    responses = []
                    for call in calls:
                        name = call.get("name", "")
                        logger.debug(f"Model called {name} with {call.get('args')}")
                        result = await tools.invoke(name, call.get("args"))
                        responses.append({"functionResponse": {"name": name, "response": result}})
                    contents.append({"role": "user", "parts": responses})

                logger.warning(f"Stopped after reaching the step limit ({max_steps})")

        except aiohttp.ClientError as e:
            logger.error(f"Gemini API error: {e}")
            raise ProviderError(f"Gemini request failed: {e}", model=self.model) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini API timeout after {self.timeout}s")
            raise ProviderError(f"Gemini request timed out after {self.timeout}s", model=self.model) from e

    async def health_check(self) -> bool:
        """Check that the model endpoint answers for this key."""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    self._model_path,
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=10)
                ) as response:
                    return response.status == 200
        except Exception as e:
            logger.debug(f"Gemini health check failed: {e}")
            return False
