"""
GrowthMindz Admin - Schema Reconciler
Brings any historical revision of the admin schema up to the shape the API
needs, using existence-qualified DDL only. Never drops or rewrites data.
"""
import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

from sqlalchemy import (
    Column, DateTime, ForeignKey, Integer, MetaData, String, Table, Text,
    func, inspect, text,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable

from ..utils.exceptions import SchemaReconcileError


metadata = MetaData()

# ============================================================================
# MANAGED TABLES (created in this order)
# ============================================================================

admins = Table(
    'admins', metadata,
    Column('id', Integer, primary_key=True),
    Column('name', String(255), nullable=False),
    Column('email', String(255), nullable=False, unique=True),
    Column('password', String(255), nullable=False),
    Column('role', String(20), nullable=False, server_default='Admin'),
    Column('phone', String(20)),
    Column('created_at', DateTime, server_default=func.current_timestamp()),
)

courses = Table(
    'courses', metadata,
    Column('id', Integer, primary_key=True),
    Column('course_title', String(255)),
    Column('description', Text),
    Column('created_at', DateTime, server_default=func.current_timestamp()),
)

videos = Table(
    'videos', metadata,
    Column('id', Integer, primary_key=True),
    Column('course_id', Integer, ForeignKey('courses.id', ondelete='CASCADE')),
    Column('title', String(255)),
    Column('description', Text),
    Column('video_url', Text),
    Column('created_at', DateTime, server_default=func.current_timestamp()),
)

# Legacy single-question quizzes
quizzes = Table(
    'quizzes', metadata,
    Column('id', Integer, primary_key=True),
    Column('course_id', Integer, ForeignKey('courses.id', ondelete='CASCADE')),
    Column('title', String(255)),
    Column('question', Text),
    Column('option_a', Text),
    Column('option_b', Text),
    Column('option_c', Text),
    Column('option_d', Text),
    Column('correct_answer', Text),
    Column('created_at', DateTime, server_default=func.current_timestamp()),
)

# Legacy videos keyed by course title
courses_vedio = Table(
    'courses_vedio', metadata,
    Column('id', Integer, primary_key=True),
    Column('course_vedio_title', String(255), nullable=False),
    Column('vedio_url', Text, nullable=False),
    Column('description', Text),
    Column('course_title', String(255), nullable=False),
    Column('cid', Integer, ForeignKey('courses.id')),
    Column('created_at', DateTime, server_default=func.current_timestamp()),
)

quizes = Table(
    'quizes', metadata,
    Column('qid', Integer, primary_key=True),
    Column('cid', Integer, ForeignKey('courses.id', ondelete='CASCADE')),
    Column('quiz_title', String(255), nullable=False),
    Column('created_at', DateTime, server_default=func.current_timestamp()),
)

quiz_content = Table(
    'quiz_content', metadata,
    Column('question_id', Integer, primary_key=True),
    Column('qid', Integer, ForeignKey('quizes.qid', ondelete='CASCADE')),
    Column('question', Text, nullable=False),
    Column('option_a', Text, nullable=False),
    Column('option_b', Text, nullable=False),
    Column('option_c', Text, nullable=False),
    Column('option_d', Text, nullable=False),
    Column('correct_answer', Text, nullable=False),
)

MANAGED_TABLES = (admins, courses, videos, quizzes, courses_vedio, quizes, quiz_content)

# The API cannot serve anything without these
REQUIRED_TABLES = frozenset({'admins', 'courses'})


class ColumnAddition(NamedTuple):
    table: str
    column: str
    ddl: str
    # SQLite refuses non-constant defaults on ADD COLUMN
    sqlite_ddl: Optional[str] = None


# Columns that older databases are known to lack
COLUMN_ADDITIONS = {
    'admins': (
        ColumnAddition('admins', 'name', 'VARCHAR(255)'),
        ColumnAddition('admins', 'role', "VARCHAR(20) DEFAULT 'Admin'"),
        ColumnAddition('admins', 'phone', 'VARCHAR(20)'),
    ),
    'courses': (
        ColumnAddition('courses', 'course_title', 'VARCHAR(255)'),
        ColumnAddition('courses', 'description', 'TEXT'),
    ),
    'courses_vedio': (
        ColumnAddition('courses_vedio', 'cid', 'INTEGER REFERENCES courses(id)'),
        ColumnAddition('courses_vedio', 'created_at',
                       'TIMESTAMP DEFAULT CURRENT_TIMESTAMP', sqlite_ddl='TIMESTAMP'),
    ),
    'quizes': (
        ColumnAddition('quizes', 'created_at',
                       'TIMESTAMP DEFAULT CURRENT_TIMESTAMP', sqlite_ddl='TIMESTAMP'),
    ),
}

# (table, column, default) - only on dialects with ALTER COLUMN
COLUMN_DEFAULTS = (
    ('courses_vedio', 'created_at', 'CURRENT_TIMESTAMP'),
    ('quizes', 'created_at', 'CURRENT_TIMESTAMP'),
)

# Widen phone numbers stored as integers on early revisions
TYPE_COERCIONS = (
    ('admins', 'phone', 'VARCHAR(20)', 'phone::varchar(20)'),
)

BACKFILLS = (
    ('backfill courses_vedio.created_at',
     "UPDATE courses_vedio SET created_at = CURRENT_TIMESTAMP WHERE created_at IS NULL"),
)


@dataclass
class ReconcileReport:
    applied: List[str] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)

    def as_dict(self):
        return {
            'applied': list(self.applied),
            'skipped': [{'step': step, 'reason': reason} for step, reason in self.skipped],
        }


class SchemaReconciler:
    """Best-effort, idempotent schema convergence run before serving requests"""

    def __init__(self, engine, logger=None):
        self.engine = engine
        self.logger = logger or logging.getLogger(__name__)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @property
    def supports_alter_column(self) -> bool:
        return self.dialect == 'postgresql'

    def reconcile(self) -> ReconcileReport:
        """
        Ensure every managed table and column exists.

        Each statement runs in its own transaction and a failure only skips
        that step. Raises SchemaReconcileError if a required table is still
        missing afterwards.
        """
        report = ReconcileReport()

        for table in MANAGED_TABLES:
            self._run(report, f'create table {table.name}', CreateTable(table, if_not_exists=True))
            for addition in COLUMN_ADDITIONS.get(table.name, ()):
                self._add_column(report, addition)

        if self.supports_alter_column:
            for table, column, default in COLUMN_DEFAULTS:
                self._run(report, f'default {table}.{column}',
                          text(f"ALTER TABLE {table} ALTER COLUMN {column} SET DEFAULT {default}"))
            for table, column, new_type, using in TYPE_COERCIONS:
                self._run(report, f'coerce {table}.{column}',
                          text(f"ALTER TABLE {table} ALTER COLUMN {column} TYPE {new_type} USING {using}"))

        for description, sql in BACKFILLS:
            self._run(report, description, text(sql))

        with self.engine.connect() as conn:
            existing = set(inspect(conn).get_table_names())
        missing = REQUIRED_TABLES - existing
        if missing:
            raise SchemaReconcileError(missing)

        self.logger.info(
            f"Schema reconciled: {len(report.applied)} applied, {len(report.skipped)} skipped"
        )
        return report

    def _add_column(self, report: ReconcileReport, addition: ColumnAddition):
        step = f'add column {addition.table}.{addition.column}'

        if self.dialect == 'postgresql':
            self._run(report, step, text(
                f"ALTER TABLE {addition.table} ADD COLUMN IF NOT EXISTS {addition.column} {addition.ddl}"
            ))
            return

        with self.engine.connect() as conn:
            inspector = inspect(conn)
            if addition.table not in inspector.get_table_names():
                report.skipped.append((step, 'table missing'))
                return
            present = {col['name'] for col in inspector.get_columns(addition.table)}
        if addition.column in present:
            return

        ddl = addition.sqlite_ddl if self.dialect == 'sqlite' and addition.sqlite_ddl else addition.ddl
        # A concurrent reconciler may win the race; the duplicate add then fails harmlessly
        self._run(report, step, text(f"ALTER TABLE {addition.table} ADD COLUMN {addition.column} {ddl}"))

    def _run(self, report: ReconcileReport, step: str, statement):
        try:
            with self.engine.begin() as conn:
                conn.execute(statement)
        except SQLAlchemyError as e:
            self.logger.warning(f"Schema step skipped ({step}): {e}")
            report.skipped.append((step, str(getattr(e, 'orig', e))))
            return
        report.applied.append(step)
