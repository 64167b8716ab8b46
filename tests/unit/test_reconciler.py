"""
GrowthMindz Admin - Schema Reconciler Tests
"""
from unittest import mock

import pytest
from sqlalchemy import create_engine, inspect, text

from lms_admin.database import SchemaReconciler, probe_schema
from lms_admin.database.reconciler import MANAGED_TABLES
from lms_admin.utils.exceptions import SchemaReconcileError


LEGACY_SCHEMA = (
    "CREATE TABLE admins (id INTEGER PRIMARY KEY, email TEXT UNIQUE, password TEXT)",
    "CREATE TABLE courses (id INTEGER PRIMARY KEY, name TEXT)",
    """CREATE TABLE courses_vedio (
        id INTEGER PRIMARY KEY,
        course_vedio_title TEXT NOT NULL,
        vedio_url TEXT NOT NULL,
        description TEXT,
        course_title TEXT NOT NULL
    )""",
    "INSERT INTO admins (id, email, password) VALUES (1, 'old@x.com', 'plain')",
    "INSERT INTO courses (id, name) VALUES (1, 'Legacy Course')",
    """INSERT INTO courses_vedio (id, course_vedio_title, vedio_url, course_title)
       VALUES (1, 'Intro', 'http://v/1', 'Legacy Course')""",
)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'reconcile.db'}")
    yield engine
    engine.dispose()


def _columns(engine, table):
    return {col['name'] for col in inspect(engine).get_columns(table)}


class TestReconcile:

    def test_creates_every_managed_table(self, engine):
        SchemaReconciler(engine).reconcile()

        tables = set(inspect(engine).get_table_names())
        assert {table.name for table in MANAGED_TABLES} <= tables

    def test_second_run_is_a_no_op(self, engine):
        reconciler = SchemaReconciler(engine)
        reconciler.reconcile()
        first = probe_schema(engine)

        report = reconciler.reconcile()

        assert probe_schema(engine) == first
        assert not [step for step, _ in report.skipped if step.startswith('add column')]

    def test_upgrades_legacy_schema_without_losing_rows(self, engine):
        with engine.begin() as conn:
            for statement in LEGACY_SCHEMA:
                conn.execute(text(statement))

        SchemaReconciler(engine).reconcile()

        assert {'name', 'role', 'phone'} <= _columns(engine, 'admins')
        assert {'course_title', 'description'} <= _columns(engine, 'courses')
        assert {'cid', 'created_at'} <= _columns(engine, 'courses_vedio')

        with engine.connect() as conn:
            admin = conn.execute(text("SELECT email, password, role FROM admins")).fetchone()
            course = conn.execute(text("SELECT name FROM courses WHERE id = 1")).scalar()
            video = conn.execute(text("SELECT cid, created_at FROM courses_vedio WHERE id = 1")).fetchone()

        assert admin.email == 'old@x.com'
        assert admin.password == 'plain'
        assert admin.role == 'Admin'
        assert course == 'Legacy Course'
        assert video.cid is None
        assert video.created_at is not None

    def test_postgres_only_steps_skipped_on_sqlite(self, engine):
        report = SchemaReconciler(engine).reconcile()

        assert not [step for step in report.applied if step.startswith(('default', 'coerce'))]

    def test_missing_required_tables_are_fatal(self, engine):
        reconciler = SchemaReconciler(engine)

        def refuse(report, step, statement):
            report.skipped.append((step, 'permission denied'))

        with mock.patch.object(reconciler, '_run', side_effect=refuse):
            with pytest.raises(SchemaReconcileError) as excinfo:
                reconciler.reconcile()

        assert excinfo.value.missing_tables == ['admins', 'courses']

    def test_failed_step_is_logged_and_skipped(self, engine):
        logger = mock.Mock()
        reconciler = SchemaReconciler(engine, logger)
        report = reconciler.reconcile()

        with engine.begin() as conn:
            conn.execute(text("DROP TABLE quiz_content"))
        reconciler._run(report, 'broken step', text("ALTER TABLE quiz_content ADD COLUMN x TEXT"))

        assert report.skipped[-1][0] == 'broken step'
        logger.warning.assert_called_once()
