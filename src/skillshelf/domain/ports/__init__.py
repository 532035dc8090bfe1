"""Domain ports."""

from __future__ import annotations

from .collaborators import (
    AnalysisTransparency,
    LibraryAnalysis,
    LibraryAnalyzer,
    LibraryRecommendation,
    MergeSummary,
    SkillSummary,
    SkillText,
    SourceRefresh,
    SourceRefresher,
    Summarizer,
)
from .persistence import (
    CategoryRepository,
    CategoryStore,
    Repository,
    SkillNotFoundError,
    SkillRepository,
    SkillStore,
)
from .unit_of_work import (
    LibraryRepositories,
    LibraryUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AnalysisTransparency",
    "CategoryRepository",
    "CategoryStore",
    "LibraryAnalysis",
    "LibraryAnalyzer",
    "LibraryRecommendation",
    "LibraryRepositories",
    "LibraryUnitOfWork",
    "MergeSummary",
    "Repository",
    "RepositoryCollection",
    "SkillNotFoundError",
    "SkillRepository",
    "SkillStore",
    "SkillSummary",
    "SkillText",
    "SourceRefresh",
    "SourceRefresher",
    "Summarizer",
    "UnitOfWork",
]
