"""Messages-API backed collaborators."""

from __future__ import annotations

from .analyzer import LlmLibraryAnalyzer
from .client import Completion, LlmAPIError, LlmClient
from .schema import LlmPayloadError, extract_json
from .summarizer import LlmSummarizer

__all__ = [
    "Completion",
    "LlmAPIError",
    "LlmClient",
    "LlmLibraryAnalyzer",
    "LlmPayloadError",
    "LlmSummarizer",
    "extract_json",
]
