"""Fetch skill source URLs and reduce them to plain text."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from html.parser import HTMLParser
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from skillshelf.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from skillshelf.config.http_resilience import ResilienceConfig
    from skillshelf.config.sources import SourceFetchConfig

log = getLogger(__name__)

_WHITESPACE = re.compile(r"[ \t\r\f\v]+")
_BLANK_LINES = re.compile(r"\n{3,}")


@dataclass(frozen=True, slots=True)
class FetchedSource:
    url: str
    text: str


class _TextExtractor(HTMLParser):
    _SKIPPED = frozenset({"script", "style", "noscript", "svg", "head"})
    _BLOCKS = frozenset({"p", "div", "br", "li", "tr", "h1", "h2", "h3", "h4", "h5", "h6", "pre"})

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(
        self,
        tag: str,
        attrs: list[tuple[str, str | None]],  # noqa: ARG002
    ) -> None:
        if tag in self._SKIPPED:
            self._skip_depth += 1
        elif tag in self._BLOCKS:
            self._parts.append("\n")

    def handle_endtag(self, tag: str) -> None:
        if tag in self._SKIPPED and self._skip_depth:
            self._skip_depth -= 1
        elif tag in self._BLOCKS:
            self._parts.append("\n")

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self._parts.append(data)

    def text(self) -> str:
        return "".join(self._parts)


def html_to_text(markup: str) -> str:
    extractor = _TextExtractor()
    extractor.feed(markup)
    extractor.close()
    return normalize_text(extractor.text())


def normalize_text(text: str) -> str:
    lines = (_WHITESPACE.sub(" ", line).strip() for line in text.splitlines())
    return _BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()


class SourceFetcher:
    """GETs source URLs one at a time; failures on single URLs are logged and skipped."""

    def __init__(
        self,
        *,
        config: SourceFetchConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    def fetch_many(self, urls: Sequence[str]) -> list[FetchedSource]:
        return asyncio.run(self._fetch_many_async(urls))

    async def _fetch_many_async(self, urls: Sequence[str]) -> list[FetchedSource]:
        fetched: list[FetchedSource] = []
        async with self._client_factory(self._config.resilience) as client:
            for url in urls:
                try:
                    response = await client.get(url)
                    response.raise_for_status()
                except httpx.HTTPError as exc:
                    log.warning("Failed to fetch source %s: %s", url, exc)
                    continue
                text = self._extract(response)
                if not text:
                    log.info("Source %s returned no text", url)
                    continue
                fetched.append(FetchedSource(url=url, text=text[: self._config.max_chars]))
        return fetched

    @staticmethod
    def _extract(response: httpx.Response) -> str:
        content_type = response.headers.get("content-type", "")
        if "html" in content_type:
            return html_to_text(response.text)
        return normalize_text(response.text)
