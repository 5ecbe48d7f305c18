"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "arabica.toml"

DEFAULT_ARCHIVE_SUFFIXES = (".jar",)
DEFAULT_CLASS_SUFFIX = ".class"
DEFAULT_DATABASE_FILENAME = "arabica.db"
DEFAULT_GIT_COMMAND = ("git",)


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """Archive and class-file matching settings."""

    archive_suffixes: tuple[str, ...]
    class_suffix: str


@dataclass(slots=True, frozen=True)
class DatabaseConfig:
    """Persisted index file settings."""

    filename: str
    create_missing_dir: bool


@dataclass(slots=True, frozen=True)
class ProjectConfig:
    """Project root lookup settings."""

    git_command: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class AuditConfig:
    """Audit log toggle."""

    enabled: bool


@dataclass(slots=True, frozen=True)
class ArabicaConfig:
    """Fully merged process configuration."""

    work_dir: Path
    database_path: Path | None
    index: IndexConfig
    database: DatabaseConfig
    project: ProjectConfig
    audit: AuditConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "work_dir": str(self.work_dir),
            "database_path": str(self.database_path) if self.database_path else None,
            "index": {
                "archive_suffixes": list(self.index.archive_suffixes),
                "class_suffix": self.index.class_suffix,
            },
            "database": {
                "filename": self.database.filename,
                "create_missing_dir": self.database.create_missing_dir,
            },
            "project": {"git_command": list(self.project.git_command)},
            "audit": {"enabled": self.audit.enabled},
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    database_path: Path | None = None
    config_path: Path | None = None
    audit_enabled: bool | None = None


def default_config(work_dir: Path) -> ArabicaConfig:
    """Build default config for a working directory."""
    return ArabicaConfig(
        work_dir=work_dir.resolve(),
        database_path=None,
        index=IndexConfig(
            archive_suffixes=DEFAULT_ARCHIVE_SUFFIXES,
            class_suffix=DEFAULT_CLASS_SUFFIX,
        ),
        database=DatabaseConfig(filename=DEFAULT_DATABASE_FILENAME, create_missing_dir=True),
        project=ProjectConfig(git_command=DEFAULT_GIT_COMMAND),
        audit=AuditConfig(enabled=True),
    )


def load_config_file(path: Path, required: bool = False) -> dict[str, object]:
    """Load an optional TOML config file."""
    if not path.exists():
        if required:
            raise ValueError(f"Config file not found: {path}")
        return {}
    with path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{path.name} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    if not output:
        raise ValueError(f"Config field '{section}.{field}' must not be empty.")
    return tuple(output)


def _non_empty_string(value: object, section: str, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"Config field '{section}.{field}' must be a non-empty string.")
    return value


def _boolean(value: object, section: str, field: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{section}.{field}' must be a boolean.")
    return value


def merge_config(
    base: ArabicaConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> ArabicaConfig:
    """Merge defaults, config file, then CLI overrides."""
    index_payload = _get_table(file_payload, "index")
    database_payload = _get_table(file_payload, "database")
    project_payload = _get_table(file_payload, "project")
    audit_payload = _get_table(file_payload, "audit")

    archive_suffixes = base.index.archive_suffixes
    if "archive_suffixes" in index_payload:
        archive_suffixes = _tuple_of_strings(
            index_payload["archive_suffixes"], "index", "archive_suffixes"
        )
    class_suffix = base.index.class_suffix
    if "class_suffix" in index_payload:
        class_suffix = _non_empty_string(index_payload["class_suffix"], "index", "class_suffix")

    filename = base.database.filename
    if "filename" in database_payload:
        filename = _non_empty_string(database_payload["filename"], "database", "filename")
        if "/" in filename or "\\" in filename:
            raise ValueError("Config field 'database.filename' must be a bare file name.")
    create_missing_dir = base.database.create_missing_dir
    if "create_missing_dir" in database_payload:
        create_missing_dir = _boolean(
            database_payload["create_missing_dir"], "database", "create_missing_dir"
        )

    git_command = base.project.git_command
    if "git_command" in project_payload:
        git_command = _tuple_of_strings(project_payload["git_command"], "project", "git_command")

    audit_enabled = base.audit.enabled
    if "enabled" in audit_payload:
        audit_enabled = _boolean(audit_payload["enabled"], "audit", "enabled")

    merged = ArabicaConfig(
        work_dir=base.work_dir,
        database_path=base.database_path,
        index=IndexConfig(archive_suffixes=archive_suffixes, class_suffix=class_suffix),
        database=DatabaseConfig(filename=filename, create_missing_dir=create_missing_dir),
        project=ProjectConfig(git_command=git_command),
        audit=AuditConfig(enabled=audit_enabled),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ArabicaConfig, overrides: CliOverrides) -> ArabicaConfig:
    """Apply startup overrides at highest precedence."""
    database_path = config.database_path
    if overrides.database_path is not None:
        database_path = overrides.database_path.resolve()
    audit = config.audit
    if overrides.audit_enabled is not None:
        audit = AuditConfig(enabled=overrides.audit_enabled)
    return ArabicaConfig(
        work_dir=config.work_dir,
        database_path=database_path,
        index=config.index,
        database=config.database,
        project=config.project,
        audit=audit,
    )


def load_effective_config(work_dir: Path, overrides: CliOverrides | None = None) -> ArabicaConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved = work_dir.resolve()
    effective_overrides = overrides or CliOverrides()
    base = default_config(resolved)
    if effective_overrides.config_path is not None:
        payload = load_config_file(effective_overrides.config_path, required=True)
    else:
        payload = load_config_file(resolved / CONFIG_FILENAME)
    return merge_config(base, payload, effective_overrides)
