"""
Exception hierarchy shared across Review Agent components.
"""

from typing import List, Optional


class ReviewAgentError(Exception):
    """Base exception for Review Agent failures."""
    pass


class GitRepositoryError(ReviewAgentError):
    """Custom exception for Git repository operations."""
    pass


class ProviderError(ReviewAgentError):
    """Failure reported by a remote model provider."""
    
    def __init__(self, message: str, status_code: Optional[int] = None, model: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.model = model


class ToolExecutionError(ReviewAgentError):
    """A local tool raised while serving a model request."""
    
    def __init__(self, tool_name: str, cause: Exception):
        super().__init__(f"Tool '{tool_name}' failed: {cause}")
        self.tool_name = tool_name
        self.cause = cause


class AllModelsFailedError(ReviewAgentError):
    """Every configured model failed to complete the review."""
    
    def __init__(self, models: List[str], last_error: Optional[BaseException]):
        detail = str(last_error) if last_error else "Unknown error"
        super().__init__(f"All {len(models)} model(s) failed. Last error: {detail}")
        self.models = models
        self.last_error = last_error
