"""Tests for config schema validation and the config loader."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tokenfactory import config as config_module
from tokenfactory.config import (
    CONFIG_ENV_VAR,
    get,
    get_validated_config,
    load_config,
    set_config_value,
)
from tokenfactory.config_schema import (
    AppConfig,
    StorageConfig,
    load_validated_config,
    validate_config_dict,
)


class TestAppConfig:
    """Tests for the schema models."""

    def test_empty_config_is_valid(self) -> None:
        config = validate_config_dict({})
        assert config.contract.denom_prefix == "factory/"
        assert config.contract.enforce_denom_prefix_on_add is True
        assert config.contract.require_managed_mint_denoms is False
        assert config.storage.backend == "memory"

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"contract": {"denom_prefx": "x/"}})

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"storage": {"backend": "redis"}})

    def test_backoff_cap_below_base_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StorageConfig(retry_base=2.0, retry_max_delay=1.0)

    def test_level_normalized(self) -> None:
        assert validate_config_dict({"logging": {"level": "debug"}}).logging.level == "DEBUG"

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"logging": {"level": "chatty"}})


class TestLoadValidatedConfig:
    """Tests for loading YAML files."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_validated_config(tmp_path / "absent.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_validated_config(path) == AppConfig()

    def test_repo_config_is_valid(self) -> None:
        load_validated_config(config_module.DEFAULT_CONFIG_PATH)


class TestConfigLoader:
    """Tests for the global config accessors."""

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("contract:\n  denom_prefix: tf/\n")
        load_config(path)
        assert get_validated_config().contract.denom_prefix == "tf/"
        assert get("contract.denom_prefix") == "tf/"

    def test_get_falls_back_to_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("contract:\n  denom_prefix: tf/\n")
        load_config(path)
        assert get("storage.backend") == "memory"
        assert get("no.such.key", "fallback") == "fallback"

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "env.yaml"
        path.write_text("storage:\n  key: from_env\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        load_config()
        assert get_validated_config().storage.key == "from_env"

    def test_defaults_when_no_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")
        load_config()
        assert get_validated_config() == AppConfig()

    def test_set_config_value_revalidates(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        load_config(path)
        set_config_value("storage.backend", "sqlite")
        assert get_validated_config().storage.backend == "sqlite"
        with pytest.raises(ValidationError):
            set_config_value("storage.backend", "redis")
