"""
Tests for loading harness settings from files
"""
import json
import pytest
import yaml
from cluster_harness.config import load_config_file, load_harness_config, harness_config_from_dict
from cluster_harness.models import HarnessConfig


def test_load_yaml_config(tmp_path):
    """Test loading YAML configuration file"""
    config_file = tmp_path / "harness.yaml"
    with open(config_file, 'w') as f:
        yaml.dump({'server_binary': '/opt/pilosa/bin/pilosa', 'startup_timeout': 10.5}, f)

    config = load_harness_config(str(config_file))

    assert config.server_binary == '/opt/pilosa/bin/pilosa'
    assert config.startup_timeout == 10.5
    assert config.host == "localhost"


def test_load_json_config(tmp_path):
    """Test loading JSON configuration file"""
    config_file = tmp_path / "harness.json"
    config_file.write_text(json.dumps({'host': '127.0.0.1', 'enable_cleanup': False}))

    config = load_harness_config(str(config_file))

    assert config.host == '127.0.0.1'
    assert config.enable_cleanup is False


def test_empty_yaml_gives_defaults(tmp_path):
    config_file = tmp_path / "harness.yml"
    config_file.write_text("")

    assert load_harness_config(str(config_file)) == HarnessConfig()


def test_missing_file():
    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        load_config_file("/nonexistent/harness.yaml")


def test_unsupported_format(tmp_path):
    config_file = tmp_path / "harness.toml"
    config_file.write_text("host = 'localhost'")

    with pytest.raises(ValueError, match="Unsupported config format: .toml"):
        load_config_file(str(config_file))


def test_non_mapping_rejected(tmp_path):
    config_file = tmp_path / "harness.yaml"
    config_file.write_text("- localhost\n- 127.0.0.1\n")

    with pytest.raises(ValueError, match="must be a mapping"):
        load_config_file(str(config_file))


def test_unknown_keys_rejected():
    with pytest.raises(ValueError, match="Unknown harness config keys: num_shards, replicas"):
        harness_config_from_dict({'num_shards': 3, 'replicas': 1, 'host': 'localhost'})
