from __future__ import annotations

"""Configuration models.

CONTRACT
- Inputs: YAML file path (<config_dir>/topgrade.yaml) or dictionary data
- Outputs (required):
  - Validated Config object
- Invariants:
  - A missing file is an empty configuration, not an error
  - Command mappings keep the order they were written in
  - git_repos entries have `~` and $VARS expanded
- Failure:
  - Raises ConfigError on unreadable YAML or schema violations
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .util.paths import BaseDirs, expand_path

CONFIG_FILE_NAME = "topgrade.yaml"


class ConfigError(ValueError):
    pass


CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "pre_commands": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
        "commands": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
        "git_repos": {
            "type": "array",
            "items": {"type": "string"},
        },
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class Config:
    raw_pre_commands: dict[str, str] | None = None
    raw_commands: dict[str, str] | None = None
    raw_git_repos: list[str] | None = None
    source: Path | None = field(default=None, compare=False)

    def pre_commands(self) -> dict[str, str] | None:
        return self.raw_pre_commands

    def commands(self) -> dict[str, str] | None:
        return self.raw_commands

    def git_repos(self) -> list[Path] | None:
        if self.raw_git_repos is None:
            return None
        return [expand_path(p) for p in self.raw_git_repos]

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> Config:
        import jsonschema  # lazy import

        try:
            jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            where = f" in {source}" if source else ""
            raise ConfigError(f"Invalid configuration{where}: {e.message}") from e

        pre = data.get("pre_commands")
        cmds = data.get("commands")
        repos = data.get("git_repos")
        return cls(
            raw_pre_commands=dict(pre) if pre is not None else None,
            raw_commands=dict(cmds) if cmds is not None else None,
            raw_git_repos=list(repos) if repos is not None else None,
            source=source,
        )


def config_path(base_dirs: BaseDirs) -> Path:
    return base_dirs.config_dir / CONFIG_FILE_NAME


def load_config_file(path: Path) -> Config:
    if not path.exists():
        return Config()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration in {path}: top level must be a mapping")
    return Config.from_dict(data, source=path)


def read_config(base_dirs: BaseDirs) -> Config:
    return load_config_file(config_path(base_dirs))
