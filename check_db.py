"""
GrowthMindz Admin - Database connection check
Prints the configured URL, a SELECT 1 round trip and the probed schema shape.
"""
import json
import os
from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

load_dotenv()

from lms_admin.config import config
from lms_admin.database import probe_schema


def check_connection():
    env_name = os.environ.get('FLASK_ENV', 'development')
    print(f"Checking database connection for environment: {env_name}")

    uri = config[env_name].SQLALCHEMY_DATABASE_URI
    try:
        engine = create_engine(uri)
        print(f"Attempting to connect to: {engine.url.render_as_string(hide_password=True)}")
        with engine.connect() as connection:
            result = connection.execute(text("SELECT 1"))
            print("CONNECTION SUCCESSFUL")
            print(f"DB Response: {result.fetchone()}")

            shape = probe_schema(connection)
    except (SQLAlchemyError, ImportError) as e:
        print("CONNECTION FAILED")
        print(f"Error: {e}")
        if "psycopg2" in str(e):
            print("\nMISSING DRIVER: connecting to Postgres needs 'psycopg2-binary' installed.")
        return 1

    print("Schema shape:")
    print(json.dumps(shape.summary(), indent=2))
    for table in sorted(shape.tables):
        print(f"  {table}: {', '.join(sorted(shape.columns(table)))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(check_connection())
