"""Configuration loading for hubgen (.hubgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from hubgen.errors import ConfigError
from hubgen.utils.naming import MethodStyle, NamingStyle

DEFAULT_CONFIG_NAME = ".hubgen.yml"


@dataclass
class TranspileOptions:
    """Settings consumed by the transpiler, the link resolver and the writer."""

    method_style: MethodStyle = MethodStyle.CAMEL_CASE
    link_naming_style: NamingStyle = NamingStyle.NONE  # Naming used by the upstream DTO generator
    output_root: Path = Path("generated")
    library_subpath: str = "hubgen"
    link_sources: list[Path] = field(default_factory=list)
    referenced_modules: bool = False
    attribute_filtering: bool = True
    marker_attributes: list[str] = field(default_factory=lambda: ["Hub", "Receiver"])
    primitives: dict[str, str] = field(default_factory=dict)
    max_concurrent_reads: int = 8

    @property
    def library_root(self) -> Path:
        return self.output_root / self.library_subpath

    def module_path(self, module: str) -> Path:
        return self.library_root / f"{module}.ts"


def load_config(config_path: str | Path) -> TranspileOptions:
    """Load options from disk; a missing file yields the defaults."""
    config_file = Path(config_path)
    if config_file.is_dir():
        config_file = config_file / DEFAULT_CONFIG_NAME
    if not config_file.exists():
        return TranspileOptions()

    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    return options_from_dict(data or {}, base_dir=config_file.parent.resolve())


def options_from_dict(data: dict, base_dir: Path | None = None) -> TranspileOptions:
    """Build options from a parsed mapping. Relative paths resolve against ``base_dir``."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    known = {f.name for f in fields(TranspileOptions)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    base_dir = base_dir or Path.cwd()
    options = TranspileOptions()

    if "method_style" in data:
        options.method_style = _enum(MethodStyle, data["method_style"], "method_style")
    if "link_naming_style" in data:
        options.link_naming_style = _enum(
            NamingStyle, data["link_naming_style"], "link_naming_style"
        )
    if "output_root" in data:
        options.output_root = _resolve(base_dir, data["output_root"])
    if "library_subpath" in data:
        options.library_subpath = str(data["library_subpath"])
    if "link_sources" in data:
        options.link_sources = [_resolve(base_dir, p) for p in data["link_sources"] or []]
    for flag in ("referenced_modules", "attribute_filtering"):
        if flag in data:
            setattr(options, flag, bool(data[flag]))
    if "marker_attributes" in data:
        options.marker_attributes = [str(a) for a in data["marker_attributes"] or []]
    if "primitives" in data:
        options.primitives = {str(k): str(v) for k, v in (data["primitives"] or {}).items()}
    if "max_concurrent_reads" in data:
        value = data["max_concurrent_reads"]
        if not isinstance(value, int) or value < 1:
            raise ConfigError("max_concurrent_reads must be a positive integer")
        options.max_concurrent_reads = value

    return options


def _enum(enum_cls, value, key: str):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ConfigError(f"Invalid {key} '{value}' (expected one of: {choices})") from None


def _resolve(base_dir: Path, value) -> Path:
    path = Path(str(value))
    return path if path.is_absolute() else base_dir / path
