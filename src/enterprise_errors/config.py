import os
from dataclasses import dataclass, field
from typing import Literal

from enterprise_errors.exceptions import ConfigurationError
from enterprise_errors.migrations.schemas import validate_table_name
from enterprise_errors.settings import DEFAULT_TABLE_NAME


def _parse_ssl(value: str) -> bool | str:
    """Parse SSL config: accepts bool strings ('true'/'false') or PostgreSQL SSL modes."""
    lower = value.lower().strip()
    if lower in ("false", "0", "no", "off", ""):
        return False
    if lower in ("true", "1", "yes", "on"):
        return True
    if lower in ("disable", "allow", "prefer", "require", "verify-ca", "verify-full"):
        return lower
    return False


def _parse_bool(value: str) -> bool:
    return value.lower().strip() in ("true", "1", "yes", "on")


def _parse_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_list(name: str) -> list[str]:
    return _parse_list(os.environ.get(name, ""))


def _env_database_type() -> str | None:
    return os.environ.get("ERRORS_DATABASE_TYPE") or None


@dataclass
class ErrorServiceConfig:
    # None disables persistence entirely
    database_type: Literal["postgres", "sqlite"] | None = field(default_factory=_env_database_type)

    # Database connection fields (defaults from ERRORS_DATABASE_* env vars)
    database_host: str = field(default_factory=lambda: os.environ.get("ERRORS_DATABASE_HOST", "localhost"))
    database_port: int = field(default_factory=lambda: int(os.environ.get("ERRORS_DATABASE_PORT", "5432")))
    database_user: str = field(default_factory=lambda: os.environ.get("ERRORS_DATABASE_USER", "postgres"))
    database_name: str = field(default_factory=lambda: os.environ.get("ERRORS_DATABASE_NAME", ""))
    database_password: str = field(default_factory=lambda: os.environ.get("ERRORS_DATABASE_PASSWORD", ""))
    database_ssl: bool | str = field(default_factory=lambda: _parse_ssl(os.environ.get("ERRORS_DATABASE_SSL", "false")))

    table_name: str = field(default_factory=lambda: os.environ.get("ERRORS_TABLE_NAME", DEFAULT_TABLE_NAME))
    auto_migrate: bool = field(default_factory=lambda: _parse_bool(os.environ.get("ERRORS_AUTO_MIGRATE", "true")))

    module: str | None = field(default_factory=lambda: os.environ.get("ERRORS_MODULE") or None)
    environment: str = field(default_factory=lambda: os.environ.get("ERRORS_ENVIRONMENT", ""))

    # Alert recipients (comma-separated in env)
    mail_to: list[str] = field(default_factory=lambda: _env_list("ERRORS_MAIL_TO"))
    mail_cc: list[str] = field(default_factory=lambda: _env_list("ERRORS_MAIL_CC"))

    # Substrings of file/function names dropped from stack traces
    frame_markers: list[str] = field(default_factory=lambda: _env_list("ERRORS_FRAME_MARKERS"))

    def __post_init__(self) -> None:
        if self.database_type not in (None, "postgres", "sqlite"):
            raise ConfigurationError(f"Unsupported database type: {self.database_type!r}")
        validate_table_name(self.table_name)
