import re
from typing import Literal

from enterprise_errors.exceptions import ConfigurationError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def validate_table_name(table_name: str) -> str:
    """Table names are interpolated into SQL, so only plain identifiers pass."""
    if not table_name or not _IDENTIFIER.match(table_name):
        raise ConfigurationError(f"Invalid error log table name: {table_name!r}")
    return table_name


def _index_prefix(table_name: str) -> str:
    return table_name.replace(".", "_")


def get_migration_sql(
    database_type: Literal["postgres", "sqlite"],
    table_name: str,
) -> str:
    table = validate_table_name(table_name)
    prefix = _index_prefix(table)

    if database_type == "postgres":
        return f"""
            CREATE TABLE IF NOT EXISTS {table} (
                id BIGSERIAL PRIMARY KEY,
                "date" TEXT NOT NULL,
                "time" TEXT NOT NULL,
                message TEXT,
                status INTEGER NOT NULL,
                code TEXT NOT NULL,
                target TEXT,
                details TEXT,
                module TEXT,
                internal TEXT,
                stack TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_{prefix}_code
                ON {table}(code);
            CREATE INDEX IF NOT EXISTS idx_{prefix}_date
                ON {table}("date");
        """

    return f"""
        CREATE TABLE IF NOT EXISTS {table} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            "date" TEXT NOT NULL,
            "time" TEXT NOT NULL,
            message TEXT,
            status INTEGER NOT NULL,
            code TEXT NOT NULL,
            target TEXT,
            details TEXT,
            module TEXT,
            internal TEXT,
            stack TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_{prefix}_code
            ON {table}(code);
        CREATE INDEX IF NOT EXISTS idx_{prefix}_date
            ON {table}("date");
    """
