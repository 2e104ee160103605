# tests/unit/config/test_config_loader.py
from pathlib import Path

import pytest
import yaml

from config.config_loader import ConfigLoader


def test_create_default_client_config(tmp_path):
    loader = ConfigLoader(config_dir=tmp_path)
    defaults = loader._create_default_client_config()

    assert defaults["target"]["port"] == 502
    assert defaults["target"]["unit_id"] == 1
    assert defaults["schedule"]["repeat"] == 1
    assert defaults["schedule"]["interval_ms"] == 1000


def test_missing_file_creates_defaults(tmp_path):
    loader = ConfigLoader(config_dir=tmp_path)

    config = loader.load_all()

    client_path = tmp_path / "client.yml"
    assert client_path.exists()
    with open(client_path) as f:
        saved = yaml.safe_load(f)
    assert saved == config


def test_creates_config_dir(tmp_path):
    config_dir = tmp_path / "nested" / "config"

    ConfigLoader(config_dir=config_dir)

    assert config_dir.is_dir()


def test_partial_file_merged_over_defaults(write_config_file, temp_config_dir):
    write_config_file({"target": {"host": "10.0.0.5", "port": 5020}})

    config = ConfigLoader(config_dir=temp_config_dir).load_all()

    assert config["target"]["host"] == "10.0.0.5"
    assert config["target"]["port"] == 5020
    assert config["target"]["unit_id"] == 1
    assert config["schedule"]["interval_ms"] == 1000


def test_empty_file_gives_defaults(temp_config_dir):
    (temp_config_dir / "client.yml").write_text("")

    config = ConfigLoader(config_dir=temp_config_dir).load_all()

    assert config["target"]["host"] == ""


def test_non_mapping_section_rejected(write_config_file, temp_config_dir):
    write_config_file({"schedule": [1, 2, 3]})

    with pytest.raises(ValueError, match="schedule"):
        ConfigLoader(config_dir=temp_config_dir).load_all()


def test_shipped_client_config_is_valid():
    """The repository's config/client.yml loads with every section present."""
    config_dir = Path(__file__).parents[3] / "config"

    config = ConfigLoader(config_dir=config_dir).load_all()

    assert set(config) == {"target", "schedule", "logging"}
