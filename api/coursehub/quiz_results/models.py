"""Quiz result models and Cassandra schema.

Results are stored per course so a teacher's listing reads one partition
per owned course. The quiz title is copied onto each row at submission.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from coursehub.courses.models import ensure_utc_aware


if TYPE_CHECKING:
    from cassandra.cluster import Row


QUIZ_RESULTS_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.quiz_results_by_course (
    course_id UUID,
    submitted_at TIMESTAMP,
    result_id UUID,
    quiz_id UUID,
    quiz_title TEXT,
    user_id UUID,
    score INT,
    total_points INT,
    percentage DOUBLE,
    PRIMARY KEY ((course_id), submitted_at, result_id)
) WITH CLUSTERING ORDER BY (submitted_at DESC, result_id ASC)
"""

QUIZ_RESULTS_TABLES_CQL = [
    QUIZ_RESULTS_BY_COURSE_TABLE_CQL,
]


def score_percentage(score: int, total_points: int) -> float:
    """Score as a percentage rounded to two places; 0 for an empty quiz."""
    if total_points <= 0:
        return 0.0
    return round(score * 100 / total_points, 2)


@dataclass
class QuizResult:
    """One learner's submission of one quiz."""

    course_id: UUID
    quiz_id: UUID
    user_id: UUID
    score: int
    total_points: int
    quiz_title: str = ""
    id: UUID = field(default_factory=uuid4)
    submitted_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def percentage(self) -> float:
        return score_percentage(self.score, self.total_points)

    @classmethod
    def from_row(cls, row: "Row") -> "QuizResult":
        """Create instance from Cassandra row."""
        return cls(
            id=row.result_id,
            course_id=row.course_id,
            quiz_id=row.quiz_id,
            quiz_title=row.quiz_title or "",
            user_id=row.user_id,
            score=row.score,
            total_points=row.total_points,
            submitted_at=ensure_utc_aware(row.submitted_at) or datetime.now(UTC),
        )
