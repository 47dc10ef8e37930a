'''
Create or upgrade the bookings schema on the Supabase Postgres database.

Each schema step is a SQL file under migrations/ paired with a catalog query
that tells whether the step is already in place, so the script can be re-run
safely against a live project.
'''
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, NamedTuple, Sequence
from urllib.parse import quote_plus

from dotenv import load_dotenv
import psycopg
from psycopg import Connection


LOGGER = logging.getLogger(__name__)
MIGRATIONS_DIR = Path(__file__).with_name("migrations")
PARTS = ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")


class SchemaStep(NamedTuple):
    filename: str
    present_query: str


SCHEMA_STEPS: Sequence[SchemaStep] = (
    SchemaStep(
        "0001_create_bookings.sql",
        "SELECT to_regclass('public.bookings') IS NOT NULL;",
    ),
    SchemaStep(
        "0002_approved_ranges_exclusive.sql",
        "SELECT EXISTS (SELECT 1 FROM pg_constraint WHERE conname = 'bookings_approved_no_overlap');",
    ),
    SchemaStep(
        "0003_enable_realtime.sql",
        "SELECT EXISTS (SELECT 1 FROM pg_publication_tables "
        "WHERE pubname = 'supabase_realtime' AND schemaname = 'public' AND tablename = 'bookings');",
    ),
)


def load_database_url() -> str:
    """Read the Postgres DSN for the Supabase project.

    SUPABASE_DB_URL wins when set; otherwise the DSN is assembled from
    DB_USER, DB_PASSWORD, DB_HOST, DB_PORT and DB_NAME.

    Raises:
        RuntimeError: If neither form is fully configured.
    """

    load_dotenv()
    url = os.getenv("SUPABASE_DB_URL")
    if url:
        return url.replace("postgres://", "postgresql://", 1) if url.startswith("postgres://") else url

    values = {name: os.getenv(name) for name in PARTS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise RuntimeError(f"Set SUPABASE_DB_URL or all of: {', '.join(missing)}")

    return (
        f"postgresql://{quote_plus(values['DB_USER'])}:{quote_plus(values['DB_PASSWORD'])}"  # type: ignore[arg-type]
        f"@{values['DB_HOST']}:{values['DB_PORT']}/{values['DB_NAME']}"
    )


def step_is_present(connection: Connection[Any], step: SchemaStep) -> bool:
    row = connection.execute(step.present_query).fetchone()  # type: ignore[arg-type]
    return bool(row and row[0])


def upgrade(connection: Connection[Any], directory: Path = MIGRATIONS_DIR) -> list[str]:
    """
    Apply the bookings schema steps that are missing, each in its own transaction.

    Returns:
        Filenames of the steps applied by this run.

    Raises:
        RuntimeError: A step failed; later steps are not attempted.
    """

    applied: list[str] = []
    for step in SCHEMA_STEPS:
        if step_is_present(connection, step):
            LOGGER.info("%s already in place; skipping.", step.filename)
            continue

        LOGGER.info("Applying %s", step.filename)
        sql = (directory / step.filename).read_text(encoding="utf-8")
        try:
            with connection.transaction():
                connection.execute(sql)  # type: ignore[arg-type]
        except psycopg.Error as exc:
            LOGGER.error("Failed to apply %s", step.filename)
            raise RuntimeError(f"Schema step {step.filename} failed") from exc
        applied.append(step.filename)
    return applied


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    LOGGER.info("Connecting to Supabase database.")
    with psycopg.connect(load_database_url()) as connection:
        applied = upgrade(connection)
        if applied:
            LOGGER.info("Applied: %s", ", ".join(applied))
        else:
            LOGGER.info("Bookings schema already up to date.")


if __name__ == "__main__":
    main()
