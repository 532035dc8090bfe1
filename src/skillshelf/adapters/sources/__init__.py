"""Source URL fetching and refresh."""

from __future__ import annotations

from .fetcher import FetchedSource, SourceFetcher, html_to_text
from .refresher import LlmSourceRefresher

__all__ = [
    "FetchedSource",
    "LlmSourceRefresher",
    "SourceFetcher",
    "html_to_text",
]
