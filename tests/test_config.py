"""Tests for generator configuration loading."""

import pytest

from restbind.config import (
    GeneratorConfig,
    build_config,
    config_from_parameter,
    load_config_file,
    parse_parameter,
)
from restbind.errors import ConfigError


def test_defaults():
    config = GeneratorConfig()
    assert config.use_generic_streams is True
    assert config.transport_module == "restbind.runtime"
    assert config.file_suffix == "_pb2_rest.py"


def test_config_is_immutable():
    config = GeneratorConfig()
    with pytest.raises(Exception):
        config.use_generic_streams = False


class TestParameter:
    def test_parse_parameter(self):
        assert parse_parameter("") == {}
        assert parse_parameter("use_generic_streams=false, transport_module=a.b,flag") == {
            "use_generic_streams": "false",
            "transport_module": "a.b",
            "flag": "true",
        }

    def test_parameter_overrides(self):
        config = config_from_parameter("use_generic_streams=false,transport_module=acme.rest")
        assert config.use_generic_streams is False
        assert config.transport_module == "acme.rest"

    def test_unknown_option_is_rejected(self):
        with pytest.raises(ConfigError) as excinfo:
            config_from_parameter("paths=source_relative")
        assert "paths" in excinfo.value.message

    @pytest.mark.parametrize(
        "values",
        [
            {"transport_module": "not a module"},
            {"transport_module": "a..b"},
            {"file_suffix": "_rest.txt"},
            {"file_suffix": "x/_rest.py"},
            {"use_generic_streams": "perhaps"},
        ],
    )
    def test_invalid_values(self, values):
        with pytest.raises(ConfigError):
            build_config(values)


class TestConfigFile:
    def test_restbind_toml(self, tmp_path):
        path = tmp_path / "restbind.toml"
        path.write_text('use_generic_streams = false\nfile_suffix = "_rest.py"\n')
        config = config_from_parameter(f"config={path}")
        assert config.use_generic_streams is False
        assert config.file_suffix == "_rest.py"

    def test_pyproject_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[project]\nname = "demo"\n\n[tool.restbind]\ntransport_module = "demo.rest"\n'
        )
        assert load_config_file(path) == {"transport_module": "demo.rest"}

    def test_parameter_wins_over_file(self, tmp_path):
        path = tmp_path / "restbind.toml"
        path.write_text("use_generic_streams = false\n")
        config = config_from_parameter(f"config={path},use_generic_streams=true")
        assert config.use_generic_streams is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config_file(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "restbind.toml"
        path.write_text("use_generic_streams = \n")
        with pytest.raises(ConfigError) as excinfo:
            load_config_file(path)
        assert excinfo.value.code == "RB004"
