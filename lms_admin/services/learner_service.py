"""
GrowthMindz Admin - Learner Service
Read-only learner listing across every known users/enrollment layout
"""
from typing import Dict, List

from .base import DatabaseService
from ..database import UNDEFINED_COLUMN, QueryVariant
from ..utils.normalizers import normalize_learner


COLUMN_ONLY = frozenset({UNDEFINED_COLUMN})

_PROGRESS_AVERAGE = """
    (SELECT AVG(up.progress) FROM user_progress up
     WHERE up.user_id = u.id AND (up.course_id = c.id OR c.id IS NULL)) AS progress_avg
"""


def _joined_variant(name: str, course_column: str, with_average: bool, retry_on=None) -> QueryVariant:
    average = f", {_PROGRESS_AVERAGE}" if with_average else ''
    sql = f"""
        SELECT u.id, u.first_name, u.last_name, u.email,
               u.{course_column} AS course_opted, c.course_title, u.progress{average}
        FROM users u
        LEFT JOIN user_enrollments ue ON u.id = ue.user_id
        LEFT JOIN courses c ON ue.course_id = c.id
        ORDER BY u.id
    """
    if retry_on is None:
        return QueryVariant(name, sql)
    return QueryVariant(name, sql, retry_on)


def _users_only_variant(name: str, course_column: str, retry_on=None) -> QueryVariant:
    sql = f"""
        SELECT id, first_name, last_name, email, {course_column} AS course_opted, progress
        FROM users ORDER BY id
    """
    if retry_on is None:
        return QueryVariant(name, sql)
    return QueryVariant(name, sql, retry_on)


# Richest layout first
LEARNER_VARIANTS = (
    QueryVariant('enrollments', """
        SELECT u.id, u.first_name, u.last_name, u.email,
               e.courses_opted AS course_opted, e.progress
        FROM users u
        LEFT JOIN enrollments e ON e.uid = u.id
        ORDER BY u.id
    """),
    _joined_variant('user_enrollments+progress', 'course_opted', True),
    _joined_variant('user_enrollments+progress (courses_opted)', 'courses_opted', True, COLUMN_ONLY),
    _joined_variant('user_enrollments', 'course_opted', False),
    _joined_variant('user_enrollments (courses_opted)', 'courses_opted', False, COLUMN_ONLY),
    _users_only_variant('users', 'course_opted'),
    _users_only_variant('users (courses_opted)', 'courses_opted', COLUMN_ONLY),
    QueryVariant('users (bare)', "SELECT id, first_name, last_name, email FROM users ORDER BY id"),
)

USER_COUNT_VARIANTS = (
    QueryVariant('users', "SELECT COUNT(*) AS total FROM users"),
)


class LearnerService(DatabaseService):
    """Service for learner accounts owned by the learner-facing app"""

    def list_learners(self) -> List[Dict]:
        """
        Every learner with a single course label and an integer progress.

        Falls back through the layouts in LEARNER_VARIANTS; when the users
        table itself is missing the listing is empty.
        """
        result = self.cascade.fetch_all('list learners', LEARNER_VARIANTS, default=[])
        return [normalize_learner(row) for row in result.rows]

    def count_learners(self) -> int:
        row = self.cascade.fetch_one('count learners', USER_COUNT_VARIANTS, default={'total': 0})
        return int(row['total'] or 0) if row else 0
