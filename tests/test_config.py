"""Tests for configuration schemas and layer merging"""

import pytest
from pydantic import ValidationError

from alors.backend import Backend
from alors.config import (
    Config,
    ConfigLayer,
    ConfigValidator,
    DEFAULT_ALLOWED_COMMAND_PREFIXES,
    DEFAULT_SYSTEM_PROMPT,
    merge,
    merge_layers,
)


class TestConfigDefaults:
    """Test Config.default()"""

    def test_defaults(self):
        config = Config.default()
        assert config.backend == Backend.OPENROUTER
        assert config.model == "openai/gpt-4.1-mini"
        assert config.system_prompt == DEFAULT_SYSTEM_PROMPT
        assert config.timeout_seconds == 120
        assert config.max_iterations == 50
        assert config.max_read_lines == 1000
        assert config.allowed_command_prefixes == ("ls", "cat", "echo", "pwd", "rg", "git diff")
        assert config.ignored_paths == (".git",)
        assert config.accessible_paths == (".",)
        assert config.terminal_bell is True
        assert config.show_system_prompt is False
        assert config.debug_tool_calls is False
        assert config.auto_execute is False
        assert config.print_messages is False

    def test_base_url_matches_default_backend(self):
        config = Config.default()
        assert config.base_url == config.backend.config().base_url

    def test_lists_cannot_be_edited(self):
        config = Config.default()
        with pytest.raises(AttributeError):
            config.allowed_command_prefixes.append("rm")
        assert Config.default().allowed_command_prefixes == DEFAULT_ALLOWED_COMMAND_PREFIXES

    def test_merged_lists_cannot_reach_base(self):
        base = Config.default()
        merged = merge(base, ConfigLayer(model="other"))
        assert isinstance(merged.accessible_paths, tuple)
        with pytest.raises(AttributeError):
            merged.accessible_paths.append("/")
        assert base.accessible_paths == (".",)

    def test_list_input_is_stored_as_tuple(self):
        config = Config(ignored_paths=["node_modules"])
        assert config.ignored_paths == ("node_modules",)

    def test_config_is_frozen(self):
        config = Config.default()
        with pytest.raises(ValidationError):
            config.model = "other"


class TestConfigLayer:
    """Test ConfigLayer parsing"""

    def test_everything_unset_by_default(self):
        layer = ConfigLayer()
        assert layer.backend is None
        assert layer.system_prompt is None
        assert layer.allowed_command_prefixes == []

    def test_null_list_is_unset(self):
        layer = ConfigLayer.model_validate({"accessible_paths": None})
        assert layer.accessible_paths == []

    def test_backend_from_string(self):
        layer = ConfigLayer.model_validate({"backend": "ollama"})
        assert layer.backend == Backend.OLLAMA

    def test_unknown_keys_ignored(self):
        layer = ConfigLayer.model_validate({"model": "m", "legacy_option": 1})
        assert layer.model == "m"

    def test_out_of_range_iterations_rejected(self):
        with pytest.raises(ValidationError):
            ConfigLayer.model_validate({"max_iterations": 1000})

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValidationError):
            ConfigLayer.model_validate({"timeout_seconds": -1})


class TestMerge:
    """Test merge()"""

    def test_empty_layer_changes_nothing(self):
        base = Config.default()
        assert merge(base, ConfigLayer()) == base

    def test_scalar_override(self):
        merged = merge(Config.default(), ConfigLayer(model="gpt-4o", timeout_seconds=30, auto_execute=True))
        assert merged.model == "gpt-4o"
        assert merged.timeout_seconds == 30
        assert merged.auto_execute is True
        assert merged.max_iterations == 50

    def test_false_flag_overrides_true(self):
        merged = merge(Config.default(), ConfigLayer(terminal_bell=False))
        assert merged.terminal_bell is False

    def test_zero_overrides(self):
        merged = merge(Config.default(), ConfigLayer(max_iterations=0))
        assert merged.max_iterations == 0

    def test_base_is_not_modified(self):
        base = Config.default()
        merge(base, ConfigLayer(model="other", accessible_paths=["/tmp"]))
        assert base.model == "openai/gpt-4.1-mini"
        assert base.accessible_paths == (".",)

    def test_list_replaced_wholesale(self):
        merged = merge(Config.default(), ConfigLayer(allowed_command_prefixes=["cargo"]))
        assert merged.allowed_command_prefixes == ("cargo",)

    def test_empty_list_does_not_clear(self):
        merged = merge(Config.default(), ConfigLayer(allowed_command_prefixes=[], ignored_paths=[]))
        assert merged.allowed_command_prefixes == DEFAULT_ALLOWED_COMMAND_PREFIXES
        assert merged.ignored_paths == (".git",)

    def test_duplicates_kept(self):
        merged = merge(Config.default(), ConfigLayer(accessible_paths=["/a", "/a"]))
        assert merged.accessible_paths == ("/a", "/a")

    def test_merged_list_not_shared_with_layer(self):
        layer = ConfigLayer(accessible_paths=["/a"])
        merged = merge(Config.default(), layer)
        layer.accessible_paths.append("/b")
        assert merged.accessible_paths == ("/a",)

    def test_backend_change_recomputes_base_url(self):
        merged = merge(Config.default(), ConfigLayer(backend=Backend.OPENAI))
        assert merged.backend == Backend.OPENAI
        assert merged.base_url == "https://api.openai.com/v1"

    def test_backend_change_replaces_custom_base_url_from_earlier_layer(self):
        base = merge(Config.default(), ConfigLayer(base_url="http://proxy.local/v1"))
        merged = merge(base, ConfigLayer(backend=Backend.OLLAMA))
        assert merged.base_url == "http://localhost:11434/v1"

    def test_backend_change_keeps_explicit_base_url(self):
        merged = merge(
            Config.default(),
            ConfigLayer(backend=Backend.OPENAI, base_url="http://proxy.local/v1"),
        )
        assert merged.backend == Backend.OPENAI
        assert merged.base_url == "http://proxy.local/v1"

    def test_base_url_alone_keeps_backend(self):
        merged = merge(Config.default(), ConfigLayer(base_url="http://proxy.local/v1"))
        assert merged.backend == Backend.OPENROUTER
        assert merged.base_url == "http://proxy.local/v1"

    def test_backend_change_does_not_touch_model(self):
        merged = merge(Config.default(), ConfigLayer(backend=Backend.OLLAMA))
        assert merged.model == "openai/gpt-4.1-mini"

    @pytest.mark.parametrize("blank", ["", "   ", "\n\t "])
    def test_blank_system_prompt_clears(self, blank):
        merged = merge(Config.default(), ConfigLayer(system_prompt=blank))
        assert merged.system_prompt is None

    def test_system_prompt_replaced_verbatim(self):
        merged = merge(Config.default(), ConfigLayer(system_prompt="  Be terse.\n"))
        assert merged.system_prompt == "  Be terse.\n"

    def test_unset_system_prompt_inherits(self):
        base = merge(Config.default(), ConfigLayer(system_prompt=""))
        merged = merge(base, ConfigLayer(model="x"))
        assert merged.system_prompt is None

    def test_later_layers_win(self):
        merged = merge_layers(
            Config.default(),
            ConfigLayer(model="file-model", timeout_seconds=10),
            ConfigLayer(model="cli-model"),
        )
        assert merged.model == "cli-model"
        assert merged.timeout_seconds == 10

    def test_merge_is_order_dependent(self):
        a = ConfigLayer(model="a")
        b = ConfigLayer(model="b")
        assert merge_layers(Config.default(), a, b).model == "b"
        assert merge_layers(Config.default(), b, a).model == "a"


class TestConfigValidator:
    """Test ConfigValidator"""

    def test_valid_config(self):
        assert ConfigValidator.validate_config({"model": "x", "backend": "openai"}) == (True, [])

    def test_invalid_config_lists_fields(self):
        ok, errors = ConfigValidator.validate_config({"backend": "nope", "max_iterations": 300})
        assert not ok
        assert any(e.startswith("backend:") for e in errors)
        assert any(e.startswith("max_iterations:") for e in errors)

    def test_defaults_are_safe(self):
        assert ConfigValidator.check_safety(Config.default()) == []

    def test_warns_on_empty_allowlist_with_auto_execute(self):
        config = Config(allowed_command_prefixes=[], auto_execute=True)
        issues = ConfigValidator.check_safety(config)
        assert len(issues) == 2
        assert "auto_execute" in issues[1]

    def test_warns_on_filesystem_root(self):
        issues = ConfigValidator.check_safety(Config(accessible_paths=["/"]))
        assert any("filesystem root" in issue for issue in issues)

    def test_file_data_without_lists_has_no_notes(self):
        assert ConfigValidator.check_file_data({"model": "m", "auto_execute": True}) == []

    def test_file_data_empty_list_is_reported_ignored(self):
        issues = ConfigValidator.check_file_data({"ignored_paths": []})
        assert len(issues) == 1
        assert "ignored_paths" in issues[0]
        assert "ignored" in issues[0]

    def test_file_data_cannot_clear_allowlist_for_auto_execute(self):
        data = {"allowed_command_prefixes": [], "auto_execute": True}
        issues = ConfigValidator.check_file_data(data)
        assert len(issues) == 2
        assert "auto_execute" in issues[1]
        # The resolved config keeps the default allow-list, so no safety warning
        layer = ConfigLayer.model_validate(data)
        assert ConfigValidator.check_safety(merge(Config.default(), layer)) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
