from pathlib import Path

import pytest

from ryogoku.cli.config import Configuration, create_default_config, load_config
from ryogoku.operator.config import DEFAULT_IMAGE, DEVNET_FINALIZER, OperatorConfig


def test_operator_config_defaults():
    config = OperatorConfig.from_env({})

    assert config.finalizer == "devnets.ryogoku.stark" == DEVNET_FINALIZER
    assert config.default_image == DEFAULT_IMAGE
    assert config.field_manager == "ryogoku"
    assert config.requeue_interval == 300
    assert config.retry_delay == 10
    assert config.retry_max_delay == 300
    assert config.retry_backoff is True
    assert config.posting_enabled is False


def test_operator_config_from_env():
    config = OperatorConfig.from_env(
        {
            "RYOGOKU_DEFAULT_IMAGE": "shardlabs/starknet-devnet:0.5.0",
            "RYOGOKU_REQUEUE_INTERVAL": "1m30s",
            "RYOGOKU_RETRY_DELAY": "3",
            "RYOGOKU_RETRY_BACKOFF": "false",
            "RYOGOKU_WORKER_LIMIT": "2",
            "RYOGOKU_POSTING_ENABLED": "yes",
        }
    )

    assert config.default_image == "shardlabs/starknet-devnet:0.5.0"
    assert config.requeue_interval == 90
    assert config.retry_delay == 3
    assert config.retry_backoff is False
    assert config.worker_limit == 2
    assert config.posting_enabled is True


def test_operator_config_rejects_bad_duration():
    with pytest.raises(ValueError):
        OperatorConfig.from_env({"RYOGOKU_REQUEUE_INTERVAL": "soon"})


def test_operator_config_is_immutable():
    config = OperatorConfig()
    with pytest.raises(AttributeError):
        config.default_image = "other"


def test_cli_config_roundtrip(tmp_path: Path):
    path = tmp_path / "ryogoku" / "config.yml"
    create_default_config(path)

    assert path.exists()
    assert load_config(path).namespace is None


def test_cli_config_user_values(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("namespace: devnets\n")

    assert load_config(path).namespace == "devnets"


def test_cli_config_missing_file(tmp_path: Path):
    assert load_config(tmp_path / "missing.yml").namespace is None


def test_configuration_empty_namespace():
    assert Configuration({"namespace": ""}).namespace is None


def test_operator_config_fractional_seconds():
    config = OperatorConfig.from_env({"RYOGOKU_RETRY_DELAY": "2.5", "RYOGOKU_RETRY_MAX_DELAY": " 60 "})

    assert config.retry_delay == 2.5
    assert config.retry_max_delay == 60


@pytest.mark.parametrize("value", ["-1", "nan", "inf"])
def test_operator_config_rejects_bad_seconds(value):
    with pytest.raises(ValueError):
        OperatorConfig.from_env({"RYOGOKU_RETRY_DELAY": value})
