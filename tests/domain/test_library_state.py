from __future__ import annotations

from uuid import uuid4

from skillshelf.domain.bulk import BulkResult
from skillshelf.domain.consolidation import ConsolidationResult, DeletionFailure
from skillshelf.domain.consolidation.merge import pending_merge_draft
from skillshelf.domain.library_state import LibraryState
from skillshelf.domain.ports.collaborators import LibraryAnalysis, LibraryRecommendation
from tests.helpers.skills import make_skill


def test_selection_transitions_return_new_state() -> None:
    first, second = make_skill("a"), make_skill("b")
    state = LibraryState.of([first, second])

    selected = state.toggle_selection(first.id)

    assert state.selected_ids == frozenset()
    assert selected.selected_skills == [first]
    assert selected.toggle_selection(first.id).selected_ids == frozenset()
    assert selected.toggle_selection(uuid4()) is selected
    assert state.select_all().selected_skills == [first, second]
    assert state.select_all().clear_selection().selected_ids == frozenset()


def test_dismissed_recommendations_are_hidden() -> None:
    analysis = LibraryAnalysis(
        recommendations=(
            LibraryRecommendation(id="rec-1", title="Merge deploy docs"),
            LibraryRecommendation(id="rec-2", title="Split the big one"),
        ),
        summary="Two issues",
        health_score=60,
    )
    state = LibraryState().with_analysis(analysis)

    dismissed = state.dismiss_recommendation("rec-1")

    assert [rec.id for rec in dismissed.visible_recommendations] == ["rec-2"]
    assert dismissed.analysis.health_score == 60
    assert len(state.visible_recommendations) == 2


def test_analysis_error_keeps_previous_results() -> None:
    analysis = LibraryAnalysis(recommendations=(LibraryRecommendation(id="rec-1"),))
    state = LibraryState().with_analysis(analysis).with_analysis_error("timeout")

    assert state.analysis.error == "timeout"
    assert len(state.visible_recommendations) == 1


def test_apply_consolidation_updates_skills_and_resolves_recommendation() -> None:
    target, loser, stuck, other = (make_skill(name) for name in ("t", "l", "s", "o"))
    state = (
        LibraryState.of([target, loser, stuck, other])
        .with_analysis(LibraryAnalysis(recommendations=(LibraryRecommendation(id="rec-1"),)))
        .select_all()
        .with_pending_merge(pending_merge_draft(target, [loser, stuck]))
    )
    merged = make_skill("merged")
    merged.id = target.id
    result = ConsolidationResult(
        target=merged,
        deleted_ids=(loser.id,),
        failed_deletions=(DeletionFailure(skill_id=stuck.id, title="s", error="boom"),),
        recommendation_id="rec-1",
    )

    updated = state.apply_consolidation(result)

    assert [skill.title for skill in updated.skills] == ["merged", "s", "o"]
    assert loser.id not in updated.selected_ids
    assert updated.pending_merge is None
    assert updated.visible_recommendations == ()
    assert updated.message == "Merged 1 skill(s) into 'merged'; could not delete: s"


def test_apply_bulk_result_replaces_updated_skills() -> None:
    first, second = make_skill("a"), make_skill("b")
    refreshed = make_skill("a (refreshed)")
    refreshed.id = first.id
    result = BulkResult(operation="refresh_from_source", selected=2)
    result.succeeded.append(first.id)
    result.updated.append(refreshed)

    state = LibraryState.of([first, second]).apply_bulk_result(result)

    assert [skill.title for skill in state.skills] == ["a (refreshed)", "b"]
    assert state.message == "1 succeeded"


def test_discard_pending_merge() -> None:
    target, loser = make_skill("t"), make_skill("l")
    state = LibraryState.of([target, loser]).with_pending_merge(
        pending_merge_draft(target, [loser])
    )

    assert state.pending_merge is not None
    assert state.discard_pending_merge().pending_merge is None
