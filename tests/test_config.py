"""Tests for configuration and config-file loading."""

import pytest

from code_dupe_finder.config import (
    ConfigError,
    DupeConfig,
    config_from_mapping,
    find_config_file,
    load_config,
)


class TestDupeConfigDefaults:

    def test_defaults(self):
        config = DupeConfig()
        assert config.min_lines == 5
        assert config.min_tokens == 50
        assert config.block_sizes == (5, 10, 15, 20)
        assert config.max_blocks_per_file == 50
        assert config.extensions == (".ts", ".svelte", ".js")
        assert "node_modules" in config.exclude_dirs
        assert config.src_dir == "./src"
        assert config.report_path == "duplication-report.json"

    def test_lists_become_tuples(self):
        config = DupeConfig(block_sizes=[10], extensions=[".py"])
        assert config.block_sizes == (10,)
        assert config.extensions == (".py",)

    def test_frozen(self):
        config = DupeConfig()
        with pytest.raises(AttributeError):
            config.min_tokens = 10


class TestDupeConfigValidation:

    @pytest.mark.parametrize("field", ["min_lines", "min_tokens", "max_blocks_per_file", "top_n", "workers"])
    def test_rejects_zero(self, field):
        with pytest.raises(ConfigError):
            DupeConfig(**{field: 0})

    def test_rejects_empty_block_sizes(self):
        with pytest.raises(ConfigError):
            DupeConfig(block_sizes=())

    def test_rejects_non_positive_block_size(self):
        with pytest.raises(ConfigError):
            DupeConfig(block_sizes=(5, 0))

    def test_rejects_non_integer(self):
        with pytest.raises(ConfigError):
            DupeConfig(min_tokens="50")

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


class TestReplace:

    def test_replace_ignores_none(self):
        config = DupeConfig().replace(min_tokens=None, max_blocks_per_file=7)
        assert config.min_tokens == 50
        assert config.max_blocks_per_file == 7

    def test_replace_validates(self):
        with pytest.raises(ConfigError):
            DupeConfig().replace(min_tokens=-1)


class TestConfigFile:

    def test_find_in_parent(self, tmp_path):
        (tmp_path / ".cdf.toml").write_text("[cdf]\nmin_tokens = 20\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / ".cdf.toml").resolve()

    def test_cdfrc_preferred(self, tmp_path):
        (tmp_path / ".cdfrc").write_text("[cdf]\n")
        (tmp_path / ".cdf.toml").write_text("[cdf]\n")
        assert find_config_file(tmp_path).name == ".cdfrc"

    def test_load_section(self, tmp_path):
        (tmp_path / ".cdfrc").write_text(
            '[cdf]\nmin_tokens = 20\nblock_sizes = [10]\nextensions = [".py"]\n'
        )
        values = load_config(tmp_path)
        assert values == {"min_tokens": 20, "block_sizes": [10], "extensions": [".py"]}

        config = config_from_mapping(values)
        assert config.min_tokens == 20
        assert config.block_sizes == (10,)

    def test_invalid_toml_ignored(self, tmp_path):
        (tmp_path / ".cdfrc").write_text("[cdf\nnot toml")
        assert load_config(tmp_path) == {}

    def test_missing_section(self, tmp_path):
        (tmp_path / ".cdfrc").write_text("[other]\nx = 1\n")
        assert load_config(tmp_path) == {}

    def test_unknown_keys_ignored(self):
        config = config_from_mapping({"min_tokens": 5, "threshold": 0.8})
        assert config.min_tokens == 5
