"""
GrowthMindz Admin - Standalone schema reconciliation

Usage:
    python migrate.py

Set ADMIN_EMAIL and ADMIN_PASSWORD (optionally ADMIN_NAME) to also create a
bootstrap Admin account when none exists with that email.
"""
import os
import sys
from dotenv import load_dotenv
from sqlalchemy import text

load_dotenv()

from lms_admin import create_app, db
from lms_admin.database import SchemaReconciler
from lms_admin.utils.exceptions import SchemaReconcileError
from lms_admin.utils.passwords import hash_password


def seed_admin(engine):
    email = (os.environ.get('ADMIN_EMAIL') or '').strip().lower()
    password = os.environ.get('ADMIN_PASSWORD')
    name = os.environ.get('ADMIN_NAME', 'Administrator')

    if not email or not password:
        print("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin seed")
        return

    with engine.connect() as conn:
        existing = conn.execute(
            text("SELECT id FROM admins WHERE LOWER(email) = LOWER(:email)"), {"email": email}
        ).fetchone()
        if existing:
            print(f"Admin {email} already exists (id {existing[0]})")
            return

        conn.execute(text("""
            INSERT INTO admins (name, email, password, role)
            VALUES (:name, :email, :password, 'Admin')
        """), {"name": name, "email": email, "password": hash_password(password)})
        conn.commit()
    print(f"Created admin {email}")


def migrate():
    app = create_app(
        os.environ.get('FLASK_ENV', 'development'),
        {'SCHEMA_RECONCILE_ON_STARTUP': False}
    )

    with app.app_context():
        engine = db.engine
        print(f"Reconciling schema on {engine.url.render_as_string(hide_password=True)}...")
        try:
            report = SchemaReconciler(engine, app.logger).reconcile()
        except SchemaReconcileError as e:
            print(f"Migration failed: {e}")
            return 1

        for step in report.applied:
            print(f"  applied  {step}")
        for step, reason in report.skipped:
            print(f"  skipped  {step}: {reason}")

        seed_admin(engine)

    print("Migration successful!")
    return 0


if __name__ == "__main__":
    sys.exit(migrate())
