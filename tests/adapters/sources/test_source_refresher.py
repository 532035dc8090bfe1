from __future__ import annotations

import json

import httpx

from skillshelf.adapters.sources import LlmSourceRefresher, SourceFetcher, html_to_text
from skillshelf.config import SourceFetchConfig
from skillshelf.domain.results import Failed, Ok
from tests.helpers.http import (
    json_message,
    make_client_factory,
    make_llm_client,
    message_response,
    resilience_config,
)
from tests.helpers.skills import make_skill

PAGES = {
    "https://docs.test/deploy": (
        "text/html; charset=utf-8",
        "<html><head><title>x</title><style>p{}</style></head>"
        "<body><h1>Deploy</h1><script>track()</script><p>Run   the pipeline.</p></body></html>",
    ),
    "https://docs.test/notes.txt": ("text/plain", "plain   notes\n\n\n\nsecond line"),
}


def _docs_handler(request: httpx.Request) -> httpx.Response:
    page = PAGES.get(str(request.url))
    if page is None:
        return httpx.Response(404, text="missing")
    content_type, body = page
    return httpx.Response(200, text=body, headers={"content-type": content_type})


def _fetcher(max_chars: int = 50_000) -> SourceFetcher:
    return SourceFetcher(
        config=SourceFetchConfig(resilience=resilience_config("sources"), max_chars=max_chars),
        client_factory=make_client_factory(_docs_handler),
    )


def test_html_to_text_drops_scripts_and_styles() -> None:
    text = html_to_text(
        "<div>One</div><script>var x = 1;</script><style>.a{}</style><p>Two &amp; three</p>"
    )

    assert text == "One\n\nTwo & three"


def test_fetcher_extracts_text_and_skips_failures() -> None:
    fetched = _fetcher().fetch_many(
        [
            "https://docs.test/deploy",
            "https://docs.test/gone",
            "https://docs.test/notes.txt",
        ]
    )

    assert [source.url for source in fetched] == [
        "https://docs.test/deploy",
        "https://docs.test/notes.txt",
    ]
    assert fetched[0].text == "Deploy\n\nRun the pipeline."
    assert fetched[1].text == "plain notes\n\nsecond line"


def test_fetcher_truncates_long_sources() -> None:
    fetched = _fetcher(max_chars=5).fetch_many(["https://docs.test/notes.txt"])

    assert fetched[0].text == "plain"


def test_refresher_requires_source_urls() -> None:
    refresher = LlmSourceRefresher(
        fetcher=_fetcher(),
        client=make_llm_client(lambda _: message_response("unused")),
    )

    outcome = refresher(make_skill("No sources"))

    assert outcome == Failed("Skill has no source URLs")


def test_refresher_fails_when_nothing_could_be_fetched() -> None:
    refresher = LlmSourceRefresher(
        fetcher=_fetcher(),
        client=make_llm_client(lambda _: message_response("unused")),
    )

    outcome = refresher(make_skill("Broken", urls=("https://docs.test/gone",)))

    assert outcome == Failed("Could not fetch any source URLs")


def test_refresher_returns_proposed_update() -> None:
    prompts: list[str] = []

    def llm_handler(request: httpx.Request) -> httpx.Response:
        prompts.append(json.loads(request.content)["messages"][0]["content"])
        return json_message(
            {
                "hasChanges": True,
                "summary": "New flag",
                "title": "Deploy",
                "content": "Run the pipeline with --fast.",
                "tags": ["ops"],
                "changeHighlights": ["added --fast"],
            },
            fenced=True,
        )

    refresher = LlmSourceRefresher(fetcher=_fetcher(), client=make_llm_client(llm_handler))
    skill = make_skill("Deploy", urls=("https://docs.test/deploy", "https://docs.test/gone"))

    outcome = refresher(skill)

    assert isinstance(outcome, Ok)
    assert outcome.value.has_changes
    assert outcome.value.content == "Run the pipeline with --fast."
    assert outcome.value.tags == ("ops",)
    assert outcome.value.change_highlights == ("added --fast",)
    assert "### Source: https://docs.test/deploy" in prompts[0]
    assert "https://docs.test/gone" not in prompts[0]


def test_refresher_rejects_changes_without_content() -> None:
    def llm_handler(_: httpx.Request) -> httpx.Response:
        return json_message({"hasChanges": True, "content": "  "})

    refresher = LlmSourceRefresher(fetcher=_fetcher(), client=make_llm_client(llm_handler))

    outcome = refresher(make_skill("Deploy", urls=("https://docs.test/deploy",)))

    assert outcome == Failed("Refresh reported changes but returned no content")
