"""Configuration loading for dir2src (.dir2src.yml) and run settings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .emit.bytes import BYTE_STYLES

CONFIG_FILENAME = ".dir2src.yml"

DEFAULT_ROOT_NAMESPACE = "Bin"
DEFAULT_HEADER_NAME = "bin.h"
DEFAULT_SOURCE_EXTENSION = ".cpp"
DEFAULT_BYTE_STYLE = "decimal"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or holds invalid values."""


@dataclass
class FileConfig:
    """Settings read from .dir2src.yml; ``None`` means not set in the file."""

    path: Optional[Path] = None
    root_namespace: Optional[str] = None
    header_name: Optional[str] = None
    source_extension: Optional[str] = None
    byte_style: Optional[str] = None
    jobs: Optional[int] = None
    exclude_paths: List[str] = field(default_factory=list)
    templates_dir: Optional[Path] = None


@dataclass(frozen=True)
class GeneratorConfig:
    """Effective, validated settings for one generation run."""

    input_path: str
    output_path: str
    root_namespace: str = DEFAULT_ROOT_NAMESPACE
    header_name: str = DEFAULT_HEADER_NAME
    source_extension: str = DEFAULT_SOURCE_EXTENSION
    byte_style: str = DEFAULT_BYTE_STYLE
    jobs: int = 1
    exclude_paths: Tuple[str, ...] = ()
    templates_dir: Optional[Path] = None
    print_output_files: bool = False
    dry_run: bool = False

    def __post_init__(self) -> None:
        if not self.input_path:
            raise ConfigError("Input path must not be empty")
        if not self.output_path:
            raise ConfigError("Output path must not be empty")
        if not _IDENTIFIER.match(self.root_namespace):
            raise ConfigError(f"Root namespace {self.root_namespace!r} is not a valid identifier")
        if not self.header_name or "/" in self.header_name or "\\" in self.header_name:
            raise ConfigError(f"Header name {self.header_name!r} must be a plain file name")
        if self.byte_style not in BYTE_STYLES:
            raise ConfigError(
                f"Unknown byte style {self.byte_style!r}; expected one of {', '.join(BYTE_STYLES)}"
            )
        if self.jobs < 1:
            raise ConfigError(f"jobs must be at least 1, got {self.jobs}")


def load_config(config_path: Path, *, required: bool = False) -> FileConfig:
    """Load configuration from disk; a missing optional file yields empty settings."""
    config_file = _resolve_config_path(config_path)

    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        return FileConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    templates_dir_str = _as_str(data.get("templates_dir"))
    templates_dir = config_file.parent / templates_dir_str if templates_dir_str else None

    jobs_value = data.get("jobs")
    jobs = _as_int(jobs_value)
    if jobs_value is not None and jobs is None:
        raise ConfigError(f"jobs must be an integer, got {jobs_value!r}")

    return FileConfig(
        path=config_file,
        root_namespace=_as_str(data.get("root_namespace")),
        header_name=_as_str(data.get("header_name")),
        source_extension=_as_str(data.get("source_extension")),
        byte_style=_as_str(data.get("byte_style")),
        jobs=jobs,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        templates_dir=templates_dir,
    )


def resolve_config(
    input_path: str,
    output_path: str,
    file_config: FileConfig | None = None,
    *,
    root_namespace: str | None = None,
    header_name: str | None = None,
    jobs: int | None = None,
    print_output_files: bool = False,
    dry_run: bool = False,
) -> GeneratorConfig:
    """Merge command-line values over file settings over built-in defaults."""
    file_config = file_config or FileConfig()
    return GeneratorConfig(
        input_path=input_path,
        output_path=output_path,
        root_namespace=_first(root_namespace, file_config.root_namespace, DEFAULT_ROOT_NAMESPACE),
        header_name=_first(header_name, file_config.header_name, DEFAULT_HEADER_NAME),
        source_extension=_first(file_config.source_extension, DEFAULT_SOURCE_EXTENSION),
        byte_style=_first(file_config.byte_style, DEFAULT_BYTE_STYLE),
        jobs=_first(jobs, file_config.jobs, 1),
        exclude_paths=tuple(file_config.exclude_paths),
        templates_dir=file_config.templates_dir,
        print_output_files=print_output_files,
        dry_run=dry_run,
    )


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "FileConfig",
    "GeneratorConfig",
    "load_config",
    "resolve_config",
]
