"""
Review Agent - AI-powered code review for Git working trees.

A CLI tool that asks a Gemini model to review your pending changes, lets it
inspect diffs and draft a commit message through local tools, and saves the
review as a markdown report.
"""

__version__ = "1.0.0"

from review_agent.core import ReviewAgent
from review_agent.config.settings import Settings

__all__ = ["ReviewAgent", "Settings"]
