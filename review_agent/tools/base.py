"""
Tool abstraction shared by every capability exposed to the model.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Type
from loguru import logger
from pydantic import BaseModel, ValidationError
from pydantic_core import to_jsonable_python

from ..errors import ToolExecutionError


class Tool(ABC):
    """A named local capability with a validated input schema."""

    name: str
    description: str
    input_model: Type[BaseModel]

    @abstractmethod
    def execute(self, params: BaseModel) -> Any:
        """Run the tool with validated parameters."""
        pass

    def parse(self, arguments: Optional[Dict[str, Any]]) -> BaseModel:
        """Validate raw arguments against the input model."""
        return self.input_model.model_validate(arguments or {})

    def run(self, arguments: Optional[Dict[str, Any]] = None) -> Any:
        """Validate and execute in one call."""
        return self.execute(self.parse(arguments))

    def parameters_schema(self) -> Dict[str, Any]:
        """JSON schema of the tool input."""
        return self.input_model.model_json_schema()


class ToolRegistry:
    """Tools addressable by name, invoked uniformly on behalf of the model."""

    def __init__(self, tools: Optional[Iterable[Tool]] = None):
        self._tools: Dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self):
        return iter(self._tools.values())

    async def invoke(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Invoke a tool requested by the model.

        Unknown tools and invalid arguments are reported back as an ``error``
        payload so the model can correct itself. Failures inside the tool body
        raise ToolExecutionError.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning(f"Model requested unknown tool: {name}")
            return {"error": f"Unknown tool: {name}"}

        try:
            params = tool.parse(arguments)
        except ValidationError as e:
            logger.warning(f"Invalid arguments for {name}: {e}")
            return {"error": f"Invalid arguments for {name}: {e}"}

        logger.info(f"Executing tool {name}")
        try:
            result = await asyncio.to_thread(tool.execute, params)
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}")
            raise ToolExecutionError(name, e) from e

        return {"result": to_jsonable_python(result)}
