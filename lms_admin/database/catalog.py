"""
GrowthMindz Admin - Schema Catalog
Resolves which schema variant is live from the database's column catalog and
keeps the result as an explicit capability table.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from sqlalchemy import inspect


# Tables whose shape drives query selection. Learner tables are read only.
PROBED_TABLES = (
    'admins',
    'courses',
    'videos',
    'quizzes',
    'courses_vedio',
    'quizes',
    'quiz_content',
    'users',
    'enrollments',
    'user_enrollments',
    'user_progress',
)


@dataclass(frozen=True)
class SchemaShape:
    """Columns present per probed table; absent tables are simply missing keys."""
    tables: Dict[str, FrozenSet[str]] = field(default_factory=dict)

    def has_table(self, table: str) -> bool:
        return table in self.tables

    def has_column(self, table: str, column: str) -> bool:
        return column in self.tables.get(table, frozenset())

    def columns(self, table: str) -> FrozenSet[str]:
        return self.tables.get(table, frozenset())

    # -- courses ------------------------------------------------------------

    @property
    def course_title_column(self) -> Optional[str]:
        """Column holding the course display name (current or legacy spelling)."""
        for candidate in ('course_title', 'name'):
            if self.has_column('courses', candidate):
                return candidate
        return None

    @property
    def course_title_columns(self) -> Tuple[str, ...]:
        """Every present title spelling; writes fill all of them."""
        present = tuple(c for c in ('course_title', 'name') if self.has_column('courses', c))
        return present or ('course_title',)

    @property
    def course_title_expression(self) -> str:
        """SQL expression for matching a course by title; blank course_title falls back to name."""
        present = self.course_title_columns
        if len(present) == 1:
            return present[0]
        return "COALESCE(NULLIF(course_title, ''), name)"

    @property
    def courses_has_description(self) -> bool:
        return self.has_column('courses', 'description')

    # -- courses_vedio ------------------------------------------------------

    @property
    def has_legacy_videos(self) -> bool:
        return self.has_table('courses_vedio')

    @property
    def legacy_videos_has_cid(self) -> bool:
        return self.has_column('courses_vedio', 'cid')

    @property
    def legacy_videos_has_course_title(self) -> bool:
        return self.has_column('courses_vedio', 'course_title')

    @property
    def legacy_videos_has_created_at(self) -> bool:
        return self.has_column('courses_vedio', 'created_at')

    def summary(self) -> Dict:
        return {
            'tables': sorted(self.tables),
            'course_title_column': self.course_title_column,
            'courses_has_description': self.courses_has_description,
            'legacy_videos': {
                'present': self.has_legacy_videos,
                'has_cid': self.legacy_videos_has_cid,
                'has_course_title': self.legacy_videos_has_course_title,
                'has_created_at': self.legacy_videos_has_created_at,
            },
        }


def probe_schema(connectable) -> SchemaShape:
    """Read the column catalog for every probed table."""
    inspector = inspect(connectable)
    existing = set(inspector.get_table_names())

    tables = {}
    for table in PROBED_TABLES:
        if table not in existing:
            continue
        tables[table] = frozenset(col['name'] for col in inspector.get_columns(table))
    return SchemaShape(tables=tables)


class SchemaCatalog:
    """Per-process cache of the live SchemaShape"""

    def __init__(self, engine, logger=None):
        self.engine = engine
        self.logger = logger or logging.getLogger(__name__)
        self._shape = None
        self._lock = threading.Lock()

    def shape(self, refresh: bool = False) -> SchemaShape:
        with self._lock:
            if refresh or self._shape is None:
                with self.engine.connect() as conn:
                    self._shape = probe_schema(conn)
                self.logger.debug(f"Schema shape resolved: {self._shape.summary()}")
            return self._shape

    def invalidate(self):
        with self._lock:
            self._shape = None
