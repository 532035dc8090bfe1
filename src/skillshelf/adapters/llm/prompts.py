"""Prompt texts for merging, analyzing and refreshing skills."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from skillshelf.domain.model import Skill
    from skillshelf.domain.ports.collaborators import SkillSummary, SkillText

MERGE_SYSTEM_PROMPT = """\
You consolidate overlapping knowledge-base skills into a single skill.
Keep every distinct fact, procedure and caveat from all inputs, remove repetition,
and keep the markdown structure readable.
Respond with a JSON object only: {"title": string, "content": string}."""

ANALYSIS_SYSTEM_PROMPT = """\
You review a knowledge library for redundancy and organisation problems.
Recommendation types: merge (overlapping skills), split (one skill covers too much),
rename (unclear title), retag (missing or inconsistent tags), gap (missing coverage).
Respond with a JSON object only:
{"recommendations": [{"type": string, "priority": "high"|"medium"|"low",
"title": string, "description": string, "affectedSkillIds": [string],
"affectedSkillTitles": [string], "suggestedAction": string}],
"summary": string, "healthScore": integer 0-100}.
Return at most 10 recommendations, most important first."""

REFRESH_SYSTEM_PROMPT = """\
You keep a knowledge-base skill in sync with its source documents.
Compare the current skill with the freshly fetched sources and decide whether the
skill needs to change.
Respond with a JSON object only:
{"hasChanges": boolean, "summary": string, "title": string, "content": string,
"tags": [string], "changeHighlights": [string]}.
When nothing relevant changed, set hasChanges to false and repeat the current content."""


def merge_prompt(target: SkillText, losers: Sequence[SkillText]) -> str:
    payload = {
        "targetSkill": {"title": target.title, "content": target.content},
        "skillsToMerge": [{"title": loser.title, "content": loser.content} for loser in losers],
    }
    return "Merge these skills into the target skill:\n\n" + json.dumps(payload, indent=2)


def analysis_prompt(summaries: Sequence[SkillSummary]) -> str:
    items = [
        {
            "id": str(summary.id),
            "title": summary.title,
            "tags": list(summary.tags),
            "contentPreview": summary.content_preview,
        }
        for summary in summaries
    ]
    return (
        f"Analyze this library of {len(items)} skills:\n\n" + json.dumps(items, indent=2)
    )


def refresh_prompt(skill: Skill, sources: Sequence[tuple[str, str]]) -> str:
    current = {"title": skill.title, "tags": list(skill.tags), "content": skill.content}
    sections = [f"### Source: {url}\n\n{text}" for url, text in sources]
    return (
        "Current skill:\n\n"
        + json.dumps(current, indent=2)
        + "\n\nFetched sources:\n\n"
        + "\n\n".join(sections)
    )
