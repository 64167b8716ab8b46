"""
GrowthMindz Admin - Test Configuration
Shared fixtures for all tests
"""
import os
import sqlite3
import sys
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlalchemy import text

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

TEST_SECRET = 'test-secret-key-for-testing'

ADMIN_EMAIL = 'admin@growthmindz.com'
ADMIN_PASSWORD = 'admin123'
STAFF_EMAIL = 'staff@growthmindz.com'
STAFF_PASSWORD = 'staff123'

# Learner tables belong to the learner app; the admin API only reads them
LEARNER_SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    first_name TEXT,
    last_name TEXT,
    email TEXT,
    course_opted TEXT,
    progress TEXT
);
CREATE TABLE user_enrollments (
    id INTEGER PRIMARY KEY,
    user_id INTEGER,
    course_id INTEGER
);
CREATE TABLE user_progress (
    id INTEGER PRIMARY KEY,
    user_id INTEGER,
    course_id INTEGER,
    progress INTEGER
);
"""


def run_sql(db_path, script):
    """Execute raw SQL against the test database outside the app"""
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(script)
        conn.commit()
    finally:
        conn.close()


def build_app(db_path, setup_sql=None, **overrides):
    """Create a testing app on db_path, optionally pre-creating tables first"""
    from lms_admin import create_app

    if setup_sql:
        run_sql(db_path, setup_sql)

    config = {'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}'}
    config.update(overrides)
    return create_app('testing', config)


def dispose(app):
    from lms_admin import db as sqlalchemy_db
    with app.app_context():
        sqlalchemy_db.engine.dispose()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / 'growthmindz_test.db')


@pytest.fixture
def app(db_path):
    """Create application for testing on a fresh SQLite file"""
    test_app = build_app(db_path, LEARNER_SCHEMA)
    yield test_app
    dispose(test_app)


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def engine(app):
    from lms_admin import db as sqlalchemy_db
    with app.app_context():
        return sqlalchemy_db.engine


@pytest.fixture
def seeded(app, engine):
    """
    One hashed Admin account and one Staff account whose password is still
    stored in clear text, as older deployments left it.
    """
    from lms_admin.utils.passwords import hash_password

    with app.app_context():
        admin_hash = hash_password(ADMIN_PASSWORD)

    with engine.connect() as conn:
        conn.execute(text("""
            INSERT INTO admins (id, name, email, password, role, phone)
            VALUES (1, 'Asha Admin', :email, :password, 'Admin', '5550001')
        """), {"email": ADMIN_EMAIL, "password": admin_hash})
        conn.execute(text("""
            INSERT INTO admins (id, name, email, password, role)
            VALUES (2, 'Sam Staff', :email, :password, 'Staff')
        """), {"email": STAFF_EMAIL, "password": STAFF_PASSWORD})
        conn.commit()

    return {
        'admin': {'id': 1, 'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD},
        'staff': {'id': 2, 'email': STAFF_EMAIL, 'password': STAFF_PASSWORD},
    }


@pytest.fixture
def course(engine):
    """A single course titled 'Python Basics'"""
    with engine.connect() as conn:
        course_id = conn.execute(text("""
            INSERT INTO courses (course_title, description)
            VALUES ('Python Basics', 'Intro course') RETURNING id
        """)).scalar()
        conn.commit()
    return course_id


# JWT Token Generation Helpers
def generate_test_token(user_id, email, role, name='Test User',
                        secret=TEST_SECRET, expired=False):
    """Generate a test JWT token"""
    now = datetime.now(timezone.utc)
    exp_time = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        'sub': str(user_id),
        'id': user_id,
        'email': email,
        'role': role,
        'name': name,
        'iat': now - timedelta(hours=2) if expired else now,
        'exp': exp_time
    }

    return jwt.encode(payload, secret, algorithm='HS256')


@pytest.fixture
def admin_token():
    return generate_test_token(1, ADMIN_EMAIL, 'Admin', name='Asha Admin')


@pytest.fixture
def staff_token():
    return generate_test_token(2, STAFF_EMAIL, 'Staff', name='Sam Staff')


@pytest.fixture
def expired_token():
    """Generate an expired JWT token"""
    return generate_test_token(1, ADMIN_EMAIL, 'Admin', expired=True)


@pytest.fixture
def invalid_token():
    """Generate an invalid JWT token (wrong signature)"""
    return generate_test_token(1, ADMIN_EMAIL, 'Admin', secret='wrong-secret-key')


# Auth Headers Helpers
@pytest.fixture
def admin_headers(admin_token):
    """Headers for Admin requests"""
    return {'Authorization': f'Bearer {admin_token}'}


@pytest.fixture
def staff_headers(staff_token):
    """Headers for Staff requests"""
    return {'Authorization': f'Bearer {staff_token}'}


@pytest.fixture
def make_token():
    """Token factory for tests that need custom claims"""
    return generate_test_token


@pytest.fixture
def app_factory(db_path):
    """Build apps on the same database, e.g. after planting a legacy schema"""
    created = []

    def factory(setup_sql=None, **overrides):
        new_app = build_app(db_path, setup_sql, **overrides)
        created.append(new_app)
        return new_app

    yield factory

    for created_app in created:
        dispose(created_app)


@pytest.fixture
def raw_sql(db_path):
    return lambda script: run_sql(db_path, script)
