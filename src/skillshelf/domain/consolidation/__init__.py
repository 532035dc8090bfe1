"""Merging redundant skills while keeping their provenance."""

from __future__ import annotations

from .apply import ConsolidationResult, DeletionFailure, apply_merge_draft, merge_patch
from .draft import ConsolidationError, MergeDraft, MergedProvenance, MergeValidationError
from .merge import (
    build_merge_draft,
    fallback_content,
    merge_provenance,
    pending_merge_draft,
    select_merge_target,
)

__all__ = [
    "ConsolidationError",
    "ConsolidationResult",
    "DeletionFailure",
    "MergeDraft",
    "MergeValidationError",
    "MergedProvenance",
    "apply_merge_draft",
    "build_merge_draft",
    "fallback_content",
    "merge_patch",
    "merge_provenance",
    "pending_merge_draft",
    "select_merge_target",
]
