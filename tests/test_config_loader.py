from pathlib import Path

import pytest
import yaml

from benchlab.domain.contracts.config import DEFAULT_REMOTE_DIR_TEMPLATE
from benchlab.domain.errors import ConfigurationError
from benchlab.infrastructure.yaml_config_loader import (
    PASSWORD_ENV_VAR,
    YamlConfigLoader,
)

VALID_CONFIG = {
    "results_root": "out",
    "chrome_flags": ["--no-sandbox", "--enable-features=WebGPU"],
    "result_server": {"host": "archive.local", "username": "bench", "password": "pw"},
    "workloads": [
        {
            "name": "Speedometer2",
            "run_times": 3,
            "sleep_interval": 5,
            "url": "https://browserbench.org/Speedometer2.0/",
            "command": ["node", "speedometer2.js", "{{ url }}"],
        },
        {"name": "Unity3D", "run_times": 2},
    ],
}


def _write_config(tmp_path: Path, config) -> Path:
    config_file = tmp_path / "config.yaml"
    with open(config_file, "w") as f:
        yaml.dump(config, f, default_flow_style=False)
    return config_file


def test_load_valid_config(tmp_path):
    config = YamlConfigLoader().load(_write_config(tmp_path, VALID_CONFIG))

    assert [w.name for w in config.workloads] == ["Speedometer2", "Unity3D"]
    speedometer = config.workload("Speedometer2")
    assert speedometer.run_times == 3
    assert speedometer.sleep_interval == 5.0
    assert speedometer.options["url"] == "https://browserbench.org/Speedometer2.0/"
    assert "name" not in speedometer.options
    assert config.results_root == tmp_path.resolve() / "out"
    assert config.chrome_flags == ["--no-sandbox", "--enable-features=WebGPU"]
    assert config.result_server.host == "archive.local"
    assert config.result_server.port == 22
    assert config.result_server.remote_dir_template == DEFAULT_REMOTE_DIR_TEMPLATE
    assert config.platform_name in ("Linux", "Windows")
    assert config.sync_enabled is True


def test_defaults(tmp_path):
    config = YamlConfigLoader().load(
        _write_config(tmp_path, {"workloads": [{"name": "Aquarium"}]})
    )

    workload = config.workloads[0]
    assert workload.run_times == 1
    assert workload.sleep_interval == 0.0
    assert config.chrome_flags == []
    assert config.result_server is None
    assert config.sync_enabled is False
    assert config.results_root == tmp_path.resolve() / "results"


def test_dev_mode_disables_sync(tmp_path):
    config = YamlConfigLoader().load(
        _write_config(tmp_path, {**VALID_CONFIG, "dev_mode": True})
    )

    assert config.result_server is not None
    assert config.sync_enabled is False


def test_platform_override(tmp_path):
    config = YamlConfigLoader().load(
        _write_config(tmp_path, {**VALID_CONFIG, "platform": "Windows"})
    )

    assert config.platform_name == "Windows"


def test_password_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(PASSWORD_ENV_VAR, "from-env")
    data = {**VALID_CONFIG, "result_server": {"host": "h", "username": "u"}}

    config = YamlConfigLoader().load(_write_config(tmp_path, data))

    assert config.result_server.password == "from-env"


@pytest.mark.parametrize(
    "data,message",
    [
        ({"workloads": []}, "No workloads"),
        ({"chrome_flags": []}, "No workloads"),
        ({"workloads": {"name": "x"}}, "must be a list"),
        ({"workloads": ["Speedometer2"]}, "must be a dictionary"),
        ({"workloads": [{"run_times": 2}]}, "missing 'name'"),
        ({"workloads": [{"name": "A"}, {"name": "A"}]}, "Duplicate workload 'A'"),
        ({"workloads": [{"name": "A", "run_times": 0}]}, "at least 1"),
        ({"workloads": [{"name": "A", "sleep_interval": -1}]}, "must not be negative"),
        ({"workloads": [{"name": "A", "run_times": "many"}]}, "must be an integer"),
        ({"workloads": [{"name": "A", "run_times": 2.7}]}, "must be an integer"),
        ({"workloads": [{"name": "A", "run_times": True}]}, "must be an integer"),
        ({"workloads": [{"name": "A", "run_times": "3"}]}, "must be an integer"),
        ({"workloads": [{"name": "A", "sleep_interval": "5s"}]}, "must be a number"),
        ({"workloads": [{"name": "A", "sleep_interval": False}]}, "must be a number"),
        ({"workloads": [{"name": "A"}], "chrome_flags": "--x"}, "chrome_flags"),
        (
            {"workloads": [{"name": "A"}], "result_server": {"host": "h"}},
            "missing required keys: username",
        ),
    ],
)
def test_invalid_config_raises(tmp_path, data, message):
    with pytest.raises(ConfigurationError, match=message):
        YamlConfigLoader().load(_write_config(tmp_path, data))


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        YamlConfigLoader().load(tmp_path / "missing.yaml")


def test_non_mapping_raises(tmp_path):
    with pytest.raises(ConfigurationError, match="YAML dictionary"):
        YamlConfigLoader().load(_write_config(tmp_path, ["a", "b"]))


def test_invalid_yaml_raises(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("workloads: [unclosed")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        YamlConfigLoader().load(config_file)
