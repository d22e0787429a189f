"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest

from hubgen.config import TranspileOptions, load_config, options_from_dict
from hubgen.errors import ConfigError
from hubgen.utils.naming import MethodStyle, NamingStyle


def test_missing_config_gives_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        options = load_config(Path(tmpdir))
    assert options == TranspileOptions()
    assert options.method_style == MethodStyle.CAMEL_CASE
    assert options.attribute_filtering is True
    assert options.referenced_modules is False


def test_load_config_resolves_paths():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / ".hubgen.yml").write_text(
            "method_style: PascalCase\n"
            "link_naming_style: camelCase\n"
            "output_root: out\n"
            "link_sources: [dtos, /abs/models]\n"
            "primitives: {long: bigint}\n"
            "max_concurrent_reads: 2\n"
        )
        options = load_config(root)

        assert options.method_style == MethodStyle.PASCAL_CASE
        assert options.link_naming_style == NamingStyle.CAMEL_CASE
        assert options.output_root == root.resolve() / "out"
        assert options.link_sources == [root.resolve() / "dtos", Path("/abs/models")]
        assert options.primitives == {"long": "bigint"}
        assert options.max_concurrent_reads == 2


def test_module_path():
    options = TranspileOptions(output_root=Path("/out"), library_subpath="hubs")
    assert options.module_path("App.Hubs") == Path("/out/hubs/App.Hubs.ts")


def test_invalid_values_raise_config_error():
    with pytest.raises(ConfigError, match="method_style"):
        options_from_dict({"method_style": "SCREAMING"})
    with pytest.raises(ConfigError, match="Unknown"):
        options_from_dict({"colour": "blue"})
    with pytest.raises(ConfigError):
        options_from_dict({"max_concurrent_reads": 0})


def test_invalid_yaml_raises_config_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "bad.yml"
        path.write_text("method_style: [oops")
        with pytest.raises(ConfigError):
            load_config(path)
