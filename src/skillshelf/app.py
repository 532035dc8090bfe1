"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from skillshelf.adapters.llm import LlmClient, LlmLibraryAnalyzer, LlmSummarizer
from skillshelf.adapters.sources import LlmSourceRefresher, SourceFetcher
from skillshelf.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from skillshelf.config import get_llm_config, get_source_fetch_config
from skillshelf.domain.analysis import analyze_library
from skillshelf.domain.bulk import AssignOwner, RefreshFromSource, run_bulk
from skillshelf.domain.categories import rename_category as rename_category_everywhere
from skillshelf.domain.consolidation import (
    apply_merge_draft,
    build_merge_draft,
    select_merge_target,
)
from skillshelf.domain.consolidation.merge import MIN_MERGE_SIZE
from skillshelf.domain.model import SourceUrl, Tier, new_skill
from skillshelf.domain.store import (
    UnitOfWorkCategoryStore,
    UnitOfWorkFactory,
    UnitOfWorkSkillStore,
)
from skillshelf.domain.tiering import TierResolver, TieredSkills, sort_by_usage

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from skillshelf.domain.bulk import BulkResult
    from skillshelf.domain.categories import CategoryRenameResult
    from skillshelf.domain.consolidation import ConsolidationResult, MergeDraft
    from skillshelf.domain.model import Actor, Category, CategoryName, Skill, SkillOwner
    from skillshelf.domain.ports.collaborators import (
        LibraryAnalysis,
        LibraryAnalyzer,
        SkillSummary,
        SourceRefresher,
        Summarizer,
    )
    from skillshelf.domain.ports.persistence import CategoryStore, SkillStore
    from skillshelf.domain.results import Outcome

log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_skill_store(unit_of_work_factory: UnitOfWorkFactory | None = None) -> SkillStore:
    return UnitOfWorkSkillStore(unit_of_work_factory or _default_unit_of_work_factory())


def build_category_store(
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> CategoryStore:
    return UnitOfWorkCategoryStore(unit_of_work_factory or _default_unit_of_work_factory())


def build_llm_client() -> LlmClient:
    return LlmClient(config=get_llm_config())


def build_summarizer() -> Summarizer:
    client = build_llm_client()
    return LlmSummarizer(client, max_tokens=get_llm_config().merge_max_tokens)


def build_analyzer() -> LibraryAnalyzer:
    config = get_llm_config()
    return LlmLibraryAnalyzer(
        LlmClient(config=config),
        max_tokens=config.analysis_max_tokens,
        temperature=config.analysis_temperature,
    )


def build_refresher() -> SourceRefresher:
    config = get_llm_config()
    return LlmSourceRefresher(
        fetcher=SourceFetcher(config=get_source_fetch_config()),
        client=LlmClient(config=config),
        max_tokens=config.refresh_max_tokens,
    )


# skills ------------------------------------------------------------------------


def list_skills(*, store: SkillStore | None = None) -> list[Skill]:
    return (store or build_skill_store()).list_skills()


def create_skill(  # noqa: PLR0913
    *,
    title: str,
    content: str,
    tags: Sequence[str] = (),
    categories: Sequence[CategoryName] = (),
    tier: Tier = Tier.CORE,
    tier_overrides: Mapping[CategoryName, Tier] | None = None,
    source_urls: Sequence[str] = (),
    actor: Actor | None = None,
    store: SkillStore | None = None,
) -> Skill:
    """Create a skill; an identified actor becomes its first owner."""

    owners = (actor.as_owner(),) if actor is not None and actor.has_identity else ()
    skill = new_skill(
        title=title,
        content=content,
        user=actor.label if actor else None,
        tags=tuple(tags),
        categories=tuple(categories),
        tier=tier,
        tier_overrides=dict(tier_overrides or {}),
        source_urls=tuple(SourceUrl(url=url) for url in source_urls),
        owners=owners,
    )
    created = (store or build_skill_store()).create(skill)
    log.info("Created skill %s (%r)", created.id, created.title)
    return created


def _load_skills(store: SkillStore, skill_ids: Iterable[UUID]) -> list[Skill]:
    return [store.get(skill_id) for skill_id in dict.fromkeys(skill_ids)]


# tiering -----------------------------------------------------------------------


def resolve_context(
    active_categories: Iterable[CategoryName],
    *,
    store: SkillStore | None = None,
    categories: CategoryStore | None = None,
    by_usage: bool = False,
) -> TieredSkills:
    """Bucket the library into Core, Extended and Library for the active categories."""

    skills = (store or build_skill_store()).list_skills()
    if by_usage:
        skills = sort_by_usage(skills)
    registry = (categories or build_category_store()).load_registry()
    tiered = TierResolver(registry).resolve(skills, active_categories)
    log.info(
        "Resolved context: core=%s, extended=%s, library=%s",
        len(tiered.core),
        len(tiered.extended),
        len(tiered.library),
    )
    return tiered


# analysis and consolidation ------------------------------------------------------


def analyze(
    *,
    store: SkillStore | None = None,
    analyzer: LibraryAnalyzer | None = None,
) -> Outcome[LibraryAnalysis]:
    skills = (store or build_skill_store()).list_skills()
    if analyzer is None and len(skills) < MIN_MERGE_SIZE:
        # nothing to send out, so no LLM credentials are needed
        return analyze_library(skills, _never_called)
    return analyze_library(skills, analyzer or build_analyzer())


def _never_called(_summaries: Sequence[SkillSummary]) -> Outcome[LibraryAnalysis]:
    raise RuntimeError("analyzer invoked for a library below the analysis threshold")


def draft_merge(
    skill_ids: Sequence[UUID],
    *,
    store: SkillStore | None = None,
    summarizer: Summarizer | None = None,
    recommendation_id: str | None = None,
) -> tuple[MergeDraft, Skill, list[Skill]]:
    """Load the skills, pick the target and build the merge draft."""

    effective_store = store or build_skill_store()
    target, losers = select_merge_target([effective_store.get(skill_id) for skill_id in skill_ids])
    draft = build_merge_draft(
        target,
        losers,
        summarizer or build_summarizer(),
        recommendation_id=recommendation_id,
    )
    return draft, target, losers


def consolidate(
    skill_ids: Sequence[UUID],
    *,
    store: SkillStore | None = None,
    summarizer: Summarizer | None = None,
    actor: Actor | None = None,
    title: str | None = None,
) -> ConsolidationResult:
    """Draft a merge of ``skill_ids`` and apply it right away."""

    effective_store = store or build_skill_store()
    draft, target, losers = draft_merge(skill_ids, store=effective_store, summarizer=summarizer)
    if draft.is_degraded:
        log.warning("%s", draft.warning)
    if title is not None:
        draft.edit(title=title)
    return apply_merge_draft(draft, target, losers, store=effective_store, actor=actor)


# bulk --------------------------------------------------------------------------


def bulk_assign_owner(
    skill_ids: Sequence[UUID],
    owner: SkillOwner,
    *,
    actor: Actor | None,
    store: SkillStore | None = None,
) -> BulkResult:
    effective_store = store or build_skill_store()
    skills = _load_skills(effective_store, skill_ids)
    return run_bulk(skills, AssignOwner(owner=owner), actor, store=effective_store)


def bulk_refresh(
    skill_ids: Sequence[UUID],
    *,
    actor: Actor | None,
    store: SkillStore | None = None,
    refresher: SourceRefresher | None = None,
) -> BulkResult:
    effective_store = store or build_skill_store()
    skills = _load_skills(effective_store, skill_ids)
    operation = RefreshFromSource(refresher=refresher or build_refresher())
    return run_bulk(skills, operation, actor, store=effective_store)


# categories --------------------------------------------------------------------


def list_categories(*, categories: CategoryStore | None = None) -> list[Category]:
    return list((categories or build_category_store()).load_registry())


def add_category(name: CategoryName, *, categories: CategoryStore | None = None) -> Category:
    category = (categories or build_category_store()).add(name)
    log.info("Added category %r at position %s", category.name, category.position)
    return category


def remove_category(name: CategoryName, *, categories: CategoryStore | None = None) -> None:
    (categories or build_category_store()).remove(name)
    log.info("Removed category %r", name)


def rename_category(
    old: CategoryName,
    new: CategoryName,
    *,
    actor: Actor | None = None,
    categories: CategoryStore | None = None,
    store: SkillStore | None = None,
) -> CategoryRenameResult:
    return rename_category_everywhere(
        old,
        new,
        categories=categories or build_category_store(),
        skills=store or build_skill_store(),
        actor=actor,
    )
