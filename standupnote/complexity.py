"""Complexity metrics for a set of commits.

The weights and thresholds below are product-defined and can be tuned;
they are not derived from a model.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from standupnote.models import Commit

COMMIT_WEIGHT = 2
ADDITIONS_PER_POINT = 50
DELETIONS_PER_POINT = 100
FILES_CHANGED_WEIGHT = 1

MODERATE_THRESHOLD = 5
COMPLEX_THRESHOLD = 15
MAJOR_THRESHOLD = 30


class ComplexityLevel(Enum):
    """Discretized complexity of a day's work."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    MAJOR = "major"


@dataclass(frozen=True)
class ComplexityMetrics:
    """Totals and complexity level of a commit list."""

    total_commits: int
    total_additions: int
    total_deletions: int
    total_files_changed: int
    level: ComplexityLevel
    raw_score: float

    @property
    def score(self) -> int:
        """Score rounded half up for display."""
        return math.floor(self.raw_score + 0.5)

    def to_dict(self) -> dict:
        return {
            "totalCommits": self.total_commits,
            "totalAdditions": self.total_additions,
            "totalDeletions": self.total_deletions,
            "totalFilesChanged": self.total_files_changed,
            "level": self.level.value,
            "score": self.score,
        }


def complexity_level(score: float) -> ComplexityLevel:
    """Map an unrounded score to a level."""
    if score < MODERATE_THRESHOLD:
        return ComplexityLevel.SIMPLE
    if score < COMPLEX_THRESHOLD:
        return ComplexityLevel.MODERATE
    if score < MAJOR_THRESHOLD:
        return ComplexityLevel.COMPLEX
    return ComplexityLevel.MAJOR


def calculate_complexity(commits: Iterable[Commit]) -> ComplexityMetrics:
    """Calculate complexity metrics for commits.

    score = commits*2 + additions/50 + deletions/100 + files_changed
    """
    commits = list(commits)
    total_commits = len(commits)
    total_additions = sum(c.additions for c in commits)
    total_deletions = sum(c.deletions for c in commits)
    total_files_changed = sum(c.files_changed for c in commits)

    score = (
        total_commits * COMMIT_WEIGHT
        + total_additions / ADDITIONS_PER_POINT
        + total_deletions / DELETIONS_PER_POINT
        + total_files_changed * FILES_CHANGED_WEIGHT
    )

    return ComplexityMetrics(
        total_commits=total_commits,
        total_additions=total_additions,
        total_deletions=total_deletions,
        total_files_changed=total_files_changed,
        level=complexity_level(score),
        raw_score=score,
    )
