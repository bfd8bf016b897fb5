"""Tests for devrng.config module."""

from __future__ import annotations

import pytest

from devrng.config import DevRngConfig, find_config_file
from devrng.resolve import ENV_VAR


# ---------------------------------------------------------------------------
# find_config_file
# ---------------------------------------------------------------------------


class TestFindConfigFile:
    def test_finds_in_start_dir(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("")
        assert find_config_file(tmp_path) == tmp_path / "pyproject.toml"

    def test_finds_in_parent(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert find_config_file(child) == tmp_path / "pyproject.toml"

    def test_nearest_wins(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("")
        child = tmp_path / "sub"
        child.mkdir()
        (child / "pyproject.toml").write_text("")
        assert find_config_file(child) == child / "pyproject.toml"


# ---------------------------------------------------------------------------
# DevRngConfig
# ---------------------------------------------------------------------------


class TestDevRngConfig:
    def test_defaults(self):
        config = DevRngConfig()
        assert config.env_var == ENV_VAR
        assert config.announce is True
        assert config.per_test == "derive"

    def test_from_dict(self):
        config = DevRngConfig.from_dict({"env_var": "X_SEED", "per_test": "fork"})
        assert config.env_var == "X_SEED"
        assert config.per_test == "fork"

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown"):
            DevRngConfig.from_dict({"seed": "abc"})

    def test_invalid_per_test(self):
        with pytest.raises(ValueError, match="per_test"):
            DevRngConfig(per_test="shuffle")

    def test_empty_env_var(self):
        with pytest.raises(ValueError):
            DevRngConfig(env_var="")

    def test_non_string_env_var(self):
        with pytest.raises(ValueError, match="env_var"):
            DevRngConfig.from_dict({"env_var": 5})

    @pytest.mark.parametrize("value", ["no", 0, 1])
    def test_non_bool_announce(self, value):
        with pytest.raises(ValueError, match="announce"):
            DevRngConfig.from_dict({"announce": value})

    def test_load_rejects_wrong_types(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[tool.devrng]\nenv_var = 5\n")
        with pytest.raises(ValueError, match="env_var"):
            DevRngConfig.load(tmp_path)

    def test_load_reads_tool_table(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "demo"\n\n'
            '[tool.devrng]\nenv_var = "DEMO_SEED"\nannounce = false\n'
        )
        config = DevRngConfig.load(tmp_path)
        assert config == DevRngConfig(env_var="DEMO_SEED", announce=False)

    def test_load_without_table(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n')
        assert DevRngConfig.load(tmp_path) == DevRngConfig()

    def test_config_is_frozen(self):
        config = DevRngConfig()
        with pytest.raises(AttributeError):
            config.env_var = "OTHER"  # type: ignore[misc]
