"""
Create the tables used by the workshop portal.

Run once against a fresh database (safe to re-run):

    python -m workshop_portal.database.init_db
    python -m workshop_portal.database.init_db --make-admin alice
"""

import argparse
import os
import sys

from dotenv import load_dotenv

from workshop_portal.database.db_connection import get_db

load_dotenv()

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    user_id              SERIAL PRIMARY KEY,
    username             TEXT NOT NULL UNIQUE,
    password_hash        TEXT NOT NULL,
    full_name            TEXT,
    email                TEXT,
    department           TEXT,
    designation          TEXT,
    bio                  TEXT,
    is_admin             BOOLEAN NOT NULL DEFAULT FALSE,
    is_blocked           BOOLEAN NOT NULL DEFAULT FALSE,
    has_create_access    BOOLEAN NOT NULL DEFAULT FALSE,
    create_access_expiry DATE,
    workshops_created    INTEGER NOT NULL DEFAULT 0,
    created_at           TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS workshops (
    workshop_id  SERIAL PRIMARY KEY,
    event_title  TEXT NOT NULL UNIQUE,
    created_by   TEXT NOT NULL,
    details      JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at   TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at   TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS workshops_created_by_idx ON workshops (created_by);
CREATE INDEX IF NOT EXISTS workshops_category_idx ON workshops USING GIN ((details->'category'));
CREATE INDEX IF NOT EXISTS workshops_start_date_idx ON workshops ((details->>'eventStDate'));
"""


def init_db(database_url: str) -> None:
    """Create tables and indexes if they do not exist yet."""
    with get_db(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA)


def make_admin(database_url: str, username: str) -> bool:
    """Promote an existing user to admin. Returns False if the user is unknown."""
    with get_db(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute("UPDATE users SET is_admin = TRUE WHERE username = %s;", (username,))
            return cur.rowcount > 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Initialise the workshop portal database.")
    parser.add_argument("--make-admin", metavar="USERNAME", help="promote an existing user to admin")
    args = parser.parse_args(argv)

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("DATABASE_URL is not set. Please set the environment variable.")
        return 1

    init_db(database_url)
    print("Database initialized successfully!")

    if args.make_admin:
        if not make_admin(database_url, args.make_admin):
            print(f"No user named '{args.make_admin}'.")
            return 1
        print(f"'{args.make_admin}' is now an admin.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
